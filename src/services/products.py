# product form validation and list edits
from __future__ import annotations

import math
from typing import List, Optional

from services.errors import ProductValidationError
from services.models import Product


def validate_product_fields(code: str, name: str, price_text: str) -> Product:
    """
    Build a Product from raw form input.
    Raises ProductValidationError naming the first offending field.
    """
    code = (code or "").strip()
    name = (name or "").strip()
    price_text = (price_text or "").strip()

    if not code:
        raise ProductValidationError("code", "Product code is required.")
    if not name:
        raise ProductValidationError("name", "Product name is required.")
    if not price_text:
        raise ProductValidationError("price", "Price is required.")
    try:
        price = float(price_text)
    except ValueError:
        raise ProductValidationError("price", "Price must be a number.")
    if not math.isfinite(price):
        raise ProductValidationError("price", "Price must be a number.")
    if price < 0:
        raise ProductValidationError("price", "Price cannot be negative.")

    return Product(code=code, name=name, price=price)


def save_product(
    products: List[Product], product: Product, original_code: Optional[str] = None
) -> List[Product]:
    """
    Return a new product list with `product` added or, when `original_code`
    is given, put in place of the product it edits.
    Any other entry already holding the same code is dropped (last write wins).
    """
    target = original_code if original_code is not None else product.code
    result: List[Product] = []
    replaced = False
    for p in products:
        if p.code == target and not replaced:
            result.append(product)
            replaced = True
        elif p.code == product.code:
            continue
        else:
            result.append(p)
    if not replaced:
        result.append(product)
    return result


def filter_products(products: List[Product], query: str) -> List[Product]:
    """Case-insensitive substring match on code or name; empty query keeps all."""
    phrase = (query or "").strip().lower()
    if not phrase:
        return list(products)
    return [p for p in products if phrase in p.code.lower() or phrase in p.name.lower()]
