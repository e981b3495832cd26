from __future__ import annotations

import asyncio
from typing import List, Optional

from textual import events, on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.events import ScreenResume
from textual.widgets import Button, DataTable, Input, Label

from services.errors import SheetImportError
from services.models import Product
from services.products import filter_products
from utils import config
from utils.logger import get_logger
from utils.messages import CartChangedMessage, ModeSwitchedMessage, ProductsChangedMessage
from utils.pure import format_price
from views.base_screen import BaseScreen
from views.modal_file_picker import FilePickerModal
from views.modal_product_form import ProductFormModal

_logger = get_logger(__name__)


class ProductsScreen(BaseScreen):
    """
    Product list: import from Excel, filter, add/edit, and add to cart.
    """

    BINDINGS = [
        # display only, enter is handled in on_key
        Binding("fn+shift+1", "noop", "Add to Cart", show=True, key_display="⏎"),
        Binding("e", "edit_product", "Edit", show=True),
        Binding("n", "new_product", "New Product", show=True),
        Binding("i", "import_products", "Import", show=True),
    ]

    def __init__(self) -> None:
        super().__init__()
        # products currently shown, in table row order
        self._shown: List[Product] = []

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            yield Input(id="input-search", placeholder="Filter by code or name...")
            yield DataTable(id="table-products")
            yield Label("No products yet. Import an Excel file to begin.", id="label-status")
            with Horizontal(id="hort-product-buttons"):
                yield Button("Import Excel", id="btn-import", variant="primary")
                yield Button("New Product", id="btn-new")
                yield Button("Edit", id="btn-edit")
                yield Button("Add to Cart", id="btn-addcart", variant="success")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Code", "Name", "Price")

        self.render_products()
        self.query_one("#table-products").focus()

    def action_noop(self) -> None:
        pass

    @on(ProductsChangedMessage)
    @on(ModeSwitchedMessage)
    @on(ScreenResume)
    @on(Input.Changed, "#input-search")
    def render_products(self) -> None:
        query = self.query_one("#input-search", Input).value
        self._shown = filter_products(self.app.state.products, query)

        table = self.query_one(DataTable)
        table.clear()
        table.add_rows([(p.code, p.name, format_price(p.price)) for p in self._shown])

        total = len(self.app.state.products)
        status = self.query_one("#label-status", Label)
        if not total:
            status.update("No products yet. Import an Excel file to begin.")
        else:
            status.update(f"Showing {len(self._shown)} of {total} products.")

    def _selected_product(self) -> Optional[Product]:
        table = self.query_one(DataTable)
        if table.row_count == 0:
            return None
        row = table.cursor_row
        if row is None or not (0 <= row < len(self._shown)):
            return None
        return self._shown[row]

    def on_key(self, event: events.Key) -> None:
        if event.key == "enter" and self.focused == self.query_one(DataTable):
            self.handle_add_to_cart()

    @on(Button.Pressed, "#btn-addcart")
    def handle_add_to_cart(self) -> None:
        product = self._selected_product()
        if not product:
            self.notify("Select a product first.", severity="warning")
            return

        line = self.app.state.cart.add(product)
        self.app.post_message(CartChangedMessage())
        self.notify(f"{line.name} in cart (x{line.quantity}).")

    @on(Button.Pressed, "#btn-import")
    def handle_import_pressed(self) -> None:
        self.action_import_products()

    @work()
    async def action_import_products(self) -> None:
        path = await self.app.push_screen_wait(FilePickerModal(config.IMPORT_DIR))
        if path is None:
            return

        try:
            file_bytes = await asyncio.to_thread(path.read_bytes)
            products = await self.app.state.import_products(file_bytes)
        except SheetImportError as e:
            _logger.error(f"Import of {path} failed: {e}")
            self.notify(str(e), title="Failed to import products", severity="error")
            return
        except Exception as e:
            _logger.exception(f"Import of {path} failed unexpectedly: {e}")
            self.notify(
                "Please check the file format and try again.",
                title="Failed to import products",
                severity="error",
            )
            return

        self.notify(
            f"{len(products)} products have been imported.",
            title="Products imported successfully!",
        )
        self.post_message(ProductsChangedMessage())

    @on(Button.Pressed, "#btn-new")
    def handle_new_pressed(self) -> None:
        self.action_new_product()

    @work()
    async def action_new_product(self) -> None:
        product = await self.app.push_screen_wait(ProductFormModal())
        if product is None:
            return
        replacing = any(p.code == product.code for p in self.app.state.products)
        self.app.state.save_product(product)
        if replacing:
            self.notify(f"Product {product.code} replaced.", severity="warning")
        else:
            self.notify(f"Product {product.code} added.")
        self.post_message(ProductsChangedMessage())

    @on(Button.Pressed, "#btn-edit")
    def handle_edit_pressed(self) -> None:
        self.action_edit_product()

    @work()
    async def action_edit_product(self) -> None:
        selected = self._selected_product()
        if not selected:
            self.notify("Select a product first.", severity="warning")
            return

        product = await self.app.push_screen_wait(ProductFormModal(selected))
        if product is None or product == selected:
            return
        self.app.state.save_product(product, original_code=selected.code)
        self.notify(f"Product {product.code} updated.")
        self.post_message(ProductsChangedMessage())
        self.app.post_message(CartChangedMessage())
