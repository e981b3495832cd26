import io
import json
import os
import sys
import tempfile
import unittest

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from openpyxl import Workbook  # noqa: E402

from services.errors import ColumnsNotFoundError, CredentialsError  # noqa: E402
from services.models import Product, User  # noqa: E402
from services.users import authenticate, load_users  # noqa: E402
from utils.state import GlobalState  # noqa: E402


def make_workbook(rows) -> bytes:
    wb = Workbook()
    for row in rows:
        wb.active.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


class UsersTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.temp_dir.name, "users.json")

    def tearDown(self):
        self.temp_dir.cleanup()

    def _write(self, content: str):
        with open(self.path, "w", encoding="utf-8") as f:
            f.write(content)

    async def test_load_and_authenticate(self):
        self._write(json.dumps([{"username": "ann", "password": "pw"}, {"username": "bob", "password": "x"}]))
        users = await load_users(self.path)
        self.assertEqual(users, [User("ann", "pw"), User("bob", "x")])

        self.assertEqual(authenticate(users, "ann", "pw"), User("ann", "pw"))
        self.assertIsNone(authenticate(users, "ann", "x"))
        self.assertIsNone(authenticate(users, "nobody", "pw"))
        # exact match only
        self.assertIsNone(authenticate(users, "an", "pw"))

    async def test_bad_credential_files(self):
        with self.assertRaises(CredentialsError):
            await load_users(os.path.join(self.temp_dir.name, "missing.json"))

        # a directory exists but cannot be read as a file
        with self.assertRaises(CredentialsError):
            await load_users(self.temp_dir.name)

        with open(self.path, "wb") as f:
            f.write(b"\xff\xfe[]")
        with self.assertRaises(CredentialsError):
            await load_users(self.path)

        self._write("{not json")
        with self.assertRaises(CredentialsError):
            await load_users(self.path)

        self._write(json.dumps({"username": "ann", "password": "pw"}))
        with self.assertRaises(CredentialsError):
            await load_users(self.path)

        self._write(json.dumps([{"username": "ann"}]))
        with self.assertRaises(CredentialsError):
            await load_users(self.path)


class GlobalStateTestCase(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.state = GlobalState(users=[User("ann", "pw")])

    def test_login_logout(self):
        self.assertIsNone(self.state.login("ann", "wrong"))
        self.assertFalse(self.state.logged_in)

        self.assertEqual(self.state.login("ann", "pw"), User("ann", "pw"))
        self.assertTrue(self.state.logged_in)

        self.state.cart.add(Product("A1", "Widget", 1.0))
        self.state.logout()
        self.assertIsNone(self.state.user)
        self.assertTrue(self.state.cart.is_empty)

    def test_login_keeps_password_whitespace(self):
        self.state.users = [User("bob", " pw ")]
        self.assertIsNone(self.state.login("bob", "pw"))
        self.assertEqual(self.state.login(" bob ", " pw "), User("bob", " pw "))

    async def test_failed_import_keeps_previous_products(self):
        good = make_workbook([["Code", "Name", "Price"], ["A1", "Widget", "9.99"]])
        products = await self.state.import_products(good)
        self.assertEqual(products, [Product("A1", "Widget", 9.99)])
        self.assertEqual(self.state.products, products)

        bad = make_workbook([["Code", "Title", "Price"], ["B2", "Gadget", 1]])
        with self.assertRaises(ColumnsNotFoundError):
            await self.state.import_products(bad)
        self.assertEqual(self.state.products, products)

    def test_save_product_updates_cart_line(self):
        self.state.products = [Product("A1", "Widget", 1.0), Product("B2", "Gadget", 2.0)]
        self.state.cart.add(self.state.products[0])

        self.state.save_product(Product("A1", "Widget", 3.0), original_code="A1")
        self.assertEqual(self.state.products[0].price, 3.0)
        self.assertEqual(self.state.cart.total(), 3.0)

        self.state.save_product(Product("C3", "Gizmo", 0.5))
        self.assertEqual([p.code for p in self.state.products], ["A1", "B2", "C3"])
        self.assertEqual(len(self.state.cart), 1)


if __name__ == "__main__":
    unittest.main()
