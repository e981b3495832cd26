from typing import List

from textual import events, on
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Label, MarkdownViewer, TextArea

from services.models import CartLine
from services.whatsapp import OrderExport
from utils.logger import get_logger
from utils.pure import format_price, generate_markdown_table

_logger = get_logger(__name__)


class ExportPreviewModal(ModalScreen[bool]):
    """
    Order summary plus the exact WhatsApp text, before handing the link off.
    Returns True once the link was opened.
    """

    def __init__(self, export: OrderExport, lines: List[CartLine], total: float):
        super().__init__()
        self._export = export
        self._lines = lines
        self._total = total

    def compose(self) -> ComposeResult:
        with Vertical(id="div-export"):
            yield MarkdownViewer("", show_table_of_contents=False)
            yield Label("Message")
            yield TextArea(self._export.message, read_only=True, id="textarea-message")
            with Horizontal():
                yield Button("Go Back", id="btn-quit")
                yield Button("Copy Message", id="btn-copy")
                yield Button("Open in WhatsApp", id="btn-submit", variant="success")

    async def on_mount(self):
        headers = ["Code", "Product Name", "Unit Price", "Quantity", "Total Price"]
        rows = [
            [
                line.code,
                line.name,
                format_price(line.price),
                line.quantity,
                format_price(line.subtotal),
            ]
            for line in self._lines
        ]
        aligns = ["l", "l", "r", "c", "r"]
        header_md = "### Order Summary\n\n"
        md = generate_markdown_table(headers, rows, aligns)
        md += f"\n\n**Total Price:** {format_price(self._total)}"
        await self.query_one(MarkdownViewer).document.update(header_md + md)
        self.query_one("#btn-submit").focus()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(False)

    @on(Button.Pressed, "#btn-copy")
    def handle_copy(self):
        self.app.copy_to_clipboard(self._export.message)
        self.notify("Order message copied to clipboard.")

    @on(Button.Pressed, "#btn-submit")
    def handle_submit(self):
        _logger.info(f"Opening {self._export.url}")
        self.app.open_url(self._export.url)
        self.notify(
            "Order details have been handed to WhatsApp.",
            title="WhatsApp message ready!",
        )
        self.dismiss(True)

    @on(Button.Pressed, "#btn-quit")
    def handle_quit(self):
        self.dismiss(False)
