from typing import Optional

from textual import events, on
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.validation import Number
from textual.widgets import Button, Input, Label

from services.errors import ProductValidationError
from services.models import Product
from services.products import validate_product_fields


class ProductFormModal(ModalScreen[Optional[Product]]):
    """
    Add or edit a product.
    Returns the validated Product, or None when cancelled.
    """

    def __init__(self, product: Optional[Product] = None) -> None:
        super().__init__()
        self._product = product

    def compose(self) -> ComposeResult:
        title = "Edit Product" if self._product else "Add Product"
        with Vertical(id="div-product-form"):
            yield Label(title, id="label-form-title")
            yield Label("Code")
            yield Input(placeholder="A1", id="input-code")
            yield Label("Name")
            yield Input(placeholder="Widget", id="input-name")
            yield Label("Price ($)")
            yield Input(
                placeholder="0.00",
                id="input-price",
                type="number",
                validators=[Number(minimum=0.0)],
            )
            yield Label("", id="label-form-error")
            with Horizontal():
                yield Button("Cancel", id="btn-cancel")
                yield Button("Save", id="btn-save", variant="primary")

    def on_mount(self) -> None:
        if self._product:
            self.query_one("#input-code", Input).value = self._product.code
            self.query_one("#input-name", Input).value = self._product.name
            self.query_one("#input-price", Input).value = f"{self._product.price:.2f}"
        self.query_one("#input-code").focus()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(None)

    @on(Button.Pressed, "#btn-save")
    @on(Input.Submitted)
    def handle_save(self) -> None:
        for field in ("code", "name", "price"):
            self.query_one(f"#input-{field}", Input).remove_class("-invalid")

        try:
            product = validate_product_fields(
                self.query_one("#input-code", Input).value,
                self.query_one("#input-name", Input).value,
                self.query_one("#input-price", Input).value,
            )
        except ProductValidationError as e:
            field_input = self.query_one(f"#input-{e.field}", Input)
            field_input.add_class("-invalid")
            field_input.focus()
            self.query_one("#label-form-error", Label).update(str(e))
            return

        self.dismiss(product)

    @on(Button.Pressed, "#btn-cancel")
    def handle_cancel(self) -> None:
        self.dismiss(None)
