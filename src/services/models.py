# provide dataclass models

from dataclasses import dataclass


@dataclass(frozen=True)
class User:
    username: str
    password: str


@dataclass(frozen=True)
class Product:
    code: str
    name: str
    price: float


@dataclass(frozen=True)
class CartLine(Product):
    quantity: int = 1
    notes: str = ""

    @property
    def subtotal(self) -> float:
        return self.price * self.quantity
