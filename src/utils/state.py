from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from services import excel, products as product_service
from services.cart import Cart
from services.models import Product, User
from services.users import authenticate
from utils.logger import get_logger

_logger = get_logger(__name__)


@dataclass
class GlobalState:
    """
    Centralized application state shared by screens.

    Fields:
      - users: credential list loaded at startup, never mutated
      - user: the logged-in user, None before login
      - products: the current product list (last successful import plus edits)
      - cart: the shopping cart
    """

    users: List[User] = field(default_factory=list)
    user: Optional[User] = None

    products: List[Product] = field(default_factory=list)
    cart: Cart = field(default_factory=Cart)

    @property
    def logged_in(self) -> bool:
        return self.user is not None

    def login(self, username: str, password: str) -> Optional[User]:
        """Log in if the credentials are in the loaded list; returns the user.

        The username is trimmed, the password is compared as typed.
        """
        username = username.strip()
        user = authenticate(self.users, username, password)
        if user:
            self.user = user
            _logger.info(f"User '{username}' logged in.")
        else:
            _logger.info(f"Failed login attempt for '{username}'.")
        return user

    def logout(self) -> None:
        if self.user:
            _logger.info(f"User '{self.user.username}' logged out.")
        self.user = None
        self.cart.clear()

    async def import_products(self, file_bytes: bytes) -> List[Product]:
        """
        Replace the product list with the workbook's content.
        On failure the exception propagates and the previous list is kept.
        """
        imported = await excel.import_products(file_bytes)
        self.products = imported
        return imported

    def save_product(self, product: Product, original_code: Optional[str] = None) -> None:
        self.products = product_service.save_product(
            self.products, product, original_code
        )
        self.cart.refresh_product(product, original_code)
