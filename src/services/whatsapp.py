# order summary text and the wa.me deep link it is handed to
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Sequence
from urllib.parse import quote

from services.cart import Cart
from services.errors import ExportValidationError
from services.models import CartLine
from utils.logger import get_logger

_logger = get_logger(__name__)

WHATSAPP_BASE_URL = "https://wa.me/"

# characters encodeURIComponent leaves alone besides the ones quote() always keeps
_URI_COMPONENT_SAFE = "!*'()"


@dataclass(frozen=True)
class OrderExport:
    message: str
    url: str


def format_order_line(line: CartLine) -> str:
    text = f"- {line.code} {line.name} (x{line.quantity})"
    if line.notes.strip():
        text += f", note: {line.notes.strip()}"
    return text


def format_order_message(
    seller_name: str,
    buyer_name: str,
    lines: Sequence[CartLine],
    total_price: float,
    order_notes: str,
) -> str:
    """
    Render the order into the fixed text block sent over WhatsApp.
    Callers are responsible for checking seller, buyer and cart first.
    """
    items = "\n".join(format_order_line(line) for line in lines)
    return (
        f"*Seller:* {seller_name}\n"
        f"*Buyer:* {buyer_name}\n"
        f"*Items:*\n"
        f"{items}\n"
        f"*Total Price:* ${total_price:.2f}\n"
        f"*Order Notes:* {order_notes}"
    )


def build_whatsapp_url(phone_number: str, message: str) -> str:
    digits = re.sub(r"\D", "", phone_number)
    return f"{WHATSAPP_BASE_URL}{digits}?text={quote(message, safe=_URI_COMPONENT_SAFE)}"


def prepare_order_export(
    seller_name: str,
    buyer_name: str,
    cart: Cart,
    order_notes: str,
    phone_number: str,
) -> OrderExport:
    """
    Check the export preconditions, then build the message and link.
    Raises ExportValidationError without touching the cart.
    """
    seller_name = (seller_name or "").strip()
    buyer_name = (buyer_name or "").strip()

    if not seller_name:
        raise ExportValidationError("seller", "Please enter the seller name.")
    if not buyer_name:
        raise ExportValidationError("buyer", "Please select a buyer.")
    if cart.is_empty:
        raise ExportValidationError(
            "cart", "Cart is empty. Add products to the cart before exporting."
        )

    message = format_order_message(
        seller_name, buyer_name, cart.lines, cart.total(), (order_notes or "").strip()
    )
    url = build_whatsapp_url(phone_number, message)
    _logger.info(
        f"Prepared order export for buyer '{buyer_name}' with {len(cart)} lines."
    )
    return OrderExport(message=message, url=url)
