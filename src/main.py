from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import LoadingIndicator

from services.errors import CredentialsError
from services.users import load_users
from utils import config
from utils.logger import get_logger
from utils.messages import ModeSwitchedMessage, QuitRequestedMessage, UserLogoutMessage
from utils.state import GlobalState
from views.scr_cart import CartScreen
from views.scr_login import LoginScreen
from views.scr_products import ProductsScreen

_logger = get_logger(__name__)


class PosApp(App):
    BINDINGS = [
        Binding("ctrl+t", "switch_light", "Toggle Theme", show=True),
    ]

    MODES = {
        "products": ProductsScreen,
        "cart": CartScreen,
    }

    MENU_MODES = {"products": "Products", "cart": "Cart & Export"}

    CSS_PATH = [
        "styles/index.tcss",
        "styles/login.tcss",
        "styles/products.tcss",
        "styles/cart.tcss",
    ]

    state: GlobalState

    def __init__(self):
        super().__init__()
        self.state = GlobalState()

    def compose(self) -> ComposeResult:
        yield LoadingIndicator()

    async def on_mount(self) -> None:
        try:
            self.state.users = await load_users(config.USERS_PATH)
        except CredentialsError as e:
            _logger.error(str(e))
            self.notify(f"{e} Nobody will be able to log in.", severity="error", timeout=10)
        self.main_flow()

    def action_switch_light(self):
        if self.theme == "textual-dark":
            self.theme = "solarized-light"
        else:
            self.theme = "textual-dark"
        self.notify(f"Theme changed to {self.theme}")

    @on(UserLogoutMessage)
    async def handle_user_logout(self):
        self.state.logout()
        self.notify("Logout successful.")
        self.main_flow()

    @on(QuitRequestedMessage)
    def handle_quit(self):
        self.state.logout()
        self.exit()

    @work
    async def main_flow(self):
        await self.push_screen_wait(LoginScreen())
        self.app.post_message(ModeSwitchedMessage(self.app.current_mode, "products"))
        await self.switch_mode("products")


def run():
    app = PosApp()
    app.run()


if __name__ == "__main__":
    run()
