import os
import sys
import unittest
from unittest import mock
from urllib.parse import parse_qs, urlparse

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from services import whatsapp  # noqa: E402
from services.cart import Cart  # noqa: E402
from services.errors import ExportValidationError  # noqa: E402
from services.models import CartLine, Product  # noqa: E402

PHONE = "+58 412-999-7266"


class FormatterTestCase(unittest.TestCase):
    def test_message_template(self):
        lines = [
            CartLine(code="A1", name="Widget", price=2.5, quantity=3),
            CartLine(code="B2", name="Gadget", price=1.0, quantity=1, notes=" blue "),
        ]
        message = whatsapp.format_order_message("Ann", "John Doe", lines, 8.5, "deliver at 5")
        self.assertEqual(
            message,
            "*Seller:* Ann\n"
            "*Buyer:* John Doe\n"
            "*Items:*\n"
            "- A1 Widget (x3)\n"
            "- B2 Gadget (x1), note: blue\n"
            "*Total Price:* $8.50\n"
            "*Order Notes:* deliver at 5",
        )

    def test_url_encoding(self):
        url = whatsapp.build_whatsapp_url(PHONE, "*Total Price:* $8.50\nA & B")
        parsed = urlparse(url)
        self.assertEqual(parsed.netloc, "wa.me")
        self.assertEqual(parsed.path, "/584129997266")
        self.assertEqual(parse_qs(parsed.query)["text"], ["*Total Price:* $8.50\nA & B"])
        self.assertNotIn(" ", url)
        self.assertNotIn("\n", url)
        self.assertIn("%24", url)


class PrepareExportTestCase(unittest.TestCase):
    def setUp(self):
        self.cart = Cart()
        self.cart.add(Product(code="A1", name="Widget", price=9.99))

    def test_builds_message_and_url(self):
        export = whatsapp.prepare_order_export(" Ann ", "John Doe", self.cart, " rush ", PHONE)
        self.assertIn("*Seller:* Ann\n", export.message)
        self.assertTrue(export.message.endswith("*Order Notes:* rush"))
        self.assertTrue(export.url.startswith("https://wa.me/584129997266?text="))

    def test_empty_seller_blocked_before_formatting(self):
        before = self.cart.lines
        with mock.patch.object(whatsapp, "format_order_message") as formatter:
            with self.assertRaises(ExportValidationError) as ctx:
                whatsapp.prepare_order_export("   ", "John Doe", self.cart, "notes", PHONE)
            formatter.assert_not_called()
        self.assertEqual(ctx.exception.field, "seller")
        self.assertEqual(self.cart.lines, before)

    def test_missing_buyer_and_empty_cart(self):
        with self.assertRaises(ExportValidationError) as ctx:
            whatsapp.prepare_order_export("Ann", "", self.cart, "", PHONE)
        self.assertEqual(ctx.exception.field, "buyer")

        with self.assertRaises(ExportValidationError) as ctx:
            whatsapp.prepare_order_export("Ann", "John Doe", Cart(), "", PHONE)
        self.assertEqual(ctx.exception.field, "cart")


if __name__ == "__main__":
    unittest.main()
