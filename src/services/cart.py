# in-memory shopping cart, one line per product code
from __future__ import annotations

import dataclasses
from typing import Dict, List

from services.models import CartLine, Product


class Cart:
    """
    Ordered collection of cart lines keyed by product code.
    A line never holds a quantity below 1: anything that would bring it to 0
    removes the line.
    """

    def __init__(self) -> None:
        self._lines: Dict[str, CartLine] = {}

    @property
    def lines(self) -> List[CartLine]:
        return list(self._lines.values())

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def __contains__(self, code: object) -> bool:
        return code in self._lines

    def get(self, code: str) -> CartLine | None:
        return self._lines.get(code)

    def add(self, product: Product) -> CartLine:
        existing = self._lines.get(product.code)
        if existing:
            line = dataclasses.replace(existing, quantity=existing.quantity + 1)
        else:
            line = CartLine(code=product.code, name=product.name, price=product.price)
        self._lines[product.code] = line
        return line

    def adjust_quantity(self, code: str, delta: int) -> None:
        if code in self._lines:
            line = self._lines[code]
            self._lines[code] = dataclasses.replace(
                line, quantity=max(0, line.quantity + delta)
            )
        self._lines = {k: v for k, v in self._lines.items() if v.quantity > 0}

    def remove(self, code: str) -> None:
        line = self._lines.get(code)
        if line:
            self.adjust_quantity(code, -line.quantity)

    def set_notes(self, code: str, notes: str) -> None:
        line = self._lines.get(code)
        if line:
            self._lines[code] = dataclasses.replace(line, notes=notes)

    def refresh_product(self, product: Product, original_code: str | None = None) -> None:
        """Carry an edited product's name/price (and code) over to its line."""
        old_code = original_code or product.code
        line = self._lines.get(old_code)
        if not line:
            return
        updated = dataclasses.replace(
            line, code=product.code, name=product.name, price=product.price
        )
        # rebuild to keep line order when the code changed
        self._lines = {
            (updated.code if k == old_code else k): (updated if k == old_code else v)
            for k, v in self._lines.items()
            if not (k == product.code and k != old_code)
        }

    def clear(self) -> None:
        self._lines = {}

    def total(self) -> float:
        return sum((line.subtotal for line in self._lines.values()), 0.0)
