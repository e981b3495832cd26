from textual.message import Message


class QuitRequestedMessage(Message):
    """
    broadcasted when the app is about to quit
    """

    bubble = True


class UserLogoutMessage(Message):
    """
    broadcasted when the user logs out
    """

    bubble = True


class UserLoginMessage(Message):
    """
    Fired when user logged, so the screen can refresh
    """

    bubble = True


class CartChangedMessage(Message):
    """
    Fired whenever a line is added, adjusted or removed, or the cart is cleared.
    Triggers a redraw of the cart screen.

    If posted from outside CartScreen, make sure to post at App level
    """

    bubble = True


class ProductsChangedMessage(Message):
    """
    Fired after a successful import or a product add/edit.
    Listened to by the products screen.
    """

    bubble = True


class ModeSwitchedMessage(Message):
    """
    fired whenever switch_mode is called
    must be fired from app level
    """

    bubble = True

    def __init__(self, old_mode: str, new_mode: str) -> None:
        super().__init__()
        self.old_mode = old_mode
        self.new_mode = new_mode
