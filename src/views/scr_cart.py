from textual import on, work
from textual.app import ComposeResult
from textual.containers import Container, Horizontal, HorizontalGroup, Vertical, VerticalScroll
from textual.events import ScreenResume
from textual.message import Message
from textual.widgets import Button, Input, Label, Rule, Select, TextArea

from services.errors import ExportValidationError
from services.models import CartLine
from services.whatsapp import prepare_order_export
from utils import config
from utils.messages import CartChangedMessage, ModeSwitchedMessage
from utils.pure import format_price
from views.base_screen import BaseScreen
from views.modal_dialog import DialogModal
from views.modal_export import ExportPreviewModal


class CartLineAdjustMessage(Message):
    bubble = True

    def __init__(self, code: str, delta: int) -> None:
        super().__init__()
        self.code = code
        self.delta = delta


class CartLineRemoveMessage(Message):
    bubble = True

    def __init__(self, code: str) -> None:
        super().__init__()
        self.code = code


class CartLineWidget(HorizontalGroup):
    def __init__(self, line: CartLine):
        super().__init__()
        self.line = line

    def compose(self):
        with Container(id="div-cart-item-group"):
            with Container(id="div-item"):
                yield Label(f"{self.line.code}  {self.line.name}", id="label-item-name")
                yield Label(f"x{self.line.quantity}", id="label-item-qty")
                yield Label(format_price(self.line.subtotal), id="label-item-price")
            with Container(id="div-actions"):
                yield Button("-", id="btn-line-dec")
                yield Button("+", id="btn-line-inc")
                yield Input(
                    value=self.line.notes, placeholder="line notes", id="input-line-notes"
                )
                yield Button("Remove", id="btn-line-remove", variant="error")

    @on(Button.Pressed, "#btn-line-dec")
    def handle_dec(self):
        self.post_message(CartLineAdjustMessage(self.line.code, -1))

    @on(Button.Pressed, "#btn-line-inc")
    def handle_inc(self):
        self.post_message(CartLineAdjustMessage(self.line.code, 1))

    @on(Button.Pressed, "#btn-line-remove")
    def handle_remove(self):
        self.post_message(CartLineRemoveMessage(self.line.code))

    @on(Input.Changed, "#input-line-notes")
    def handle_notes_changed(self, event: Input.Changed):
        # notes are not part of the line identity, no redraw needed
        self.app.state.cart.set_notes(self.line.code, event.value)
        event.stop()


class CartScreen(BaseScreen):
    """
    cart lines, total, and the order form exported to WhatsApp
    """

    def __init__(self) -> None:
        super().__init__()

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield VerticalScroll(id="vertscroll-content")
        yield Label("Total: $0.00", id="label-cart-total")
        yield Rule(line_style="dashed")
        with Vertical(id="div-order-form"):
            with Horizontal(id="hort-order-names"):
                yield Input(placeholder="Seller Name", id="input-seller")
                yield Select(
                    [(b, b) for b in config.BUYERS],
                    prompt="Select Buyer",
                    id="select-buyer",
                )
            yield TextArea(id="textarea-order-notes")
        with Horizontal(id="hort-buttons"):
            yield Button("Clear Cart", id="btn-clear-cart")
            yield Button("Export to WhatsApp", id="btn-export", variant="primary")

    def on_mount(self):
        self.query_one("#textarea-order-notes", TextArea).border_title = "Order Notes"
        self.handle_cart_change()

    @on(CartChangedMessage)
    @on(ModeSwitchedMessage)
    @on(ScreenResume)
    @work(exclusive=True, group="cart-lines")  # must exclusive, else might race cond and gen duplicate
    async def handle_cart_change(self):
        """
        Redraw the lines when the cart differs from what is shown.
        """
        cart = self.app.state.cart
        lines = cart.lines

        content = self.query_one("#vertscroll-content")
        shown = [
            (c.line.code, c.line.quantity, c.line.price, c.line.name)
            for c in content.children
        ]
        current = [(line.code, line.quantity, line.price, line.name) for line in lines]

        if shown != current:
            await content.remove_children()
            await content.mount_all([CartLineWidget(line) for line in lines])

        if not lines:
            content.add_class("no-items")
        else:
            content.remove_class("no-items")

        self.query_one("#label-cart-total", Label).update(
            f"Total: {format_price(cart.total())}"
        )

    @on(CartLineAdjustMessage)
    def handle_adjust(self, message: CartLineAdjustMessage):
        self.app.state.cart.adjust_quantity(message.code, message.delta)
        if message.code not in self.app.state.cart:
            self.notify("Item removed from cart.")
        self.post_message(CartChangedMessage())

    @on(CartLineRemoveMessage)
    def handle_remove(self, message: CartLineRemoveMessage):
        self.app.state.cart.remove(message.code)
        self.notify("Item removed from cart.")
        self.post_message(CartChangedMessage())

    @on(Button.Pressed, "#btn-clear-cart")
    @work()
    async def handle_clear_cart(self) -> None:
        if self.app.state.cart.is_empty:
            self.app.notify("Cart is empty.", severity="warning")
            return

        remove_confirmed = await self.app.push_screen_wait(
            DialogModal(
                "Do you really want to remove all items from cart?",
                primary_text="Yes",
                secondary_text="No",
                tone="error",
            )
        )
        if remove_confirmed:
            self.app.state.cart.clear()
            self.post_message(CartChangedMessage())

    @on(Button.Pressed, "#btn-export")
    @work(exclusive=True, group="export")
    async def handle_export(self) -> None:
        """
        Validate the order form, then open the preview with the WhatsApp link.
        """
        seller_input = self.query_one("#input-seller", Input)
        buyer_select = self.query_one("#select-buyer", Select)
        buyer = buyer_select.value if isinstance(buyer_select.value, str) else ""
        notes = self.query_one("#textarea-order-notes", TextArea).text
        cart = self.app.state.cart

        try:
            export = prepare_order_export(
                seller_input.value, buyer, cart, notes, config.WHATSAPP_PHONE
            )
        except ExportValidationError as e:
            if e.field == "seller":
                seller_input.add_class("-invalid")
                seller_input.focus()
            elif e.field == "buyer":
                buyer_select.focus()
            self.notify(str(e), title="Missing Information", severity="error")
            return

        seller_input.remove_class("-invalid")
        await self.app.push_screen_wait(
            ExportPreviewModal(export, cart.lines, cart.total())
        )
