import os
import sys
import unittest

# Ensure project src/ is on sys.path for imports
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
src_path = os.path.join(ROOT, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from services.cart import Cart  # noqa: E402
from services.models import CartLine, Product  # noqa: E402

WIDGET = Product(code="A1", name="Widget", price=2.5)
GADGET = Product(code="B2", name="Gadget", price=1.0)


class CartTestCase(unittest.TestCase):
    def setUp(self):
        self.cart = Cart()

    # ---------- add / adjust / remove ----------

    def test_add_new_line(self):
        line = self.cart.add(WIDGET)
        self.assertEqual(line, CartLine(code="A1", name="Widget", price=2.5, quantity=1, notes=""))
        self.assertEqual(len(self.cart), 1)
        self.assertFalse(self.cart.is_empty)

    def test_repeated_add_increments(self):
        self.cart.add(WIDGET)
        self.cart.add(WIDGET)
        self.assertEqual(len(self.cart), 1)
        self.assertEqual(self.cart.get("A1").quantity, 2)

    def test_adjust_down_to_zero_removes_line(self):
        self.cart.add(WIDGET)
        self.cart.add(WIDGET)
        self.cart.adjust_quantity("A1", -1)
        self.assertEqual([(line.code, line.quantity) for line in self.cart.lines], [("A1", 1)])

        self.cart.adjust_quantity("A1", -1)
        self.assertNotIn("A1", self.cart)
        self.assertTrue(self.cart.is_empty)

    def test_adjust_is_floored_at_zero(self):
        self.cart.add(WIDGET)
        self.cart.add(GADGET)
        self.cart.adjust_quantity("A1", -10)
        self.assertEqual([line.code for line in self.cart.lines], ["B2"])

    def test_adjust_up_and_unknown_code(self):
        self.cart.add(WIDGET)
        self.cart.adjust_quantity("A1", 3)
        self.assertEqual(self.cart.get("A1").quantity, 4)
        self.cart.adjust_quantity("nope", 1)
        self.assertEqual(len(self.cart), 1)

    def test_remove_and_clear(self):
        self.cart.add(WIDGET)
        self.cart.add(WIDGET)
        self.cart.add(GADGET)
        self.cart.remove("A1")
        self.assertEqual([line.code for line in self.cart.lines], ["B2"])
        self.cart.remove("missing")
        self.cart.clear()
        self.assertEqual(self.cart.lines, [])

    def test_line_order_is_insertion_order(self):
        self.cart.add(GADGET)
        self.cart.add(WIDGET)
        self.cart.add(GADGET)
        self.assertEqual([line.code for line in self.cart.lines], ["B2", "A1"])

    # ---------- notes / refresh ----------

    def test_set_notes(self):
        self.cart.add(WIDGET)
        self.cart.set_notes("A1", "gift wrap")
        self.assertEqual(self.cart.get("A1").notes, "gift wrap")
        # notes survive quantity changes
        self.cart.add(WIDGET)
        self.assertEqual(self.cart.get("A1").notes, "gift wrap")

    def test_refresh_product_reprices_line(self):
        self.cart.add(WIDGET)
        self.cart.add(WIDGET)
        self.cart.refresh_product(Product(code="A1", name="Widget XL", price=4.0))
        line = self.cart.get("A1")
        self.assertEqual((line.name, line.price, line.quantity), ("Widget XL", 4.0, 2))

    def test_refresh_product_with_new_code(self):
        self.cart.add(WIDGET)
        self.cart.add(GADGET)
        self.cart.refresh_product(Product(code="A9", name="Widget", price=2.5), "A1")
        self.assertEqual([line.code for line in self.cart.lines], ["A9", "B2"])

        # renaming onto an existing code keeps only the edited line
        self.cart.refresh_product(Product(code="B2", name="Widget", price=2.5), "A9")
        self.assertEqual([(line.code, line.name) for line in self.cart.lines], [("B2", "Widget")])

    # ---------- total ----------

    def test_total(self):
        self.assertEqual(self.cart.total(), 0.0)
        for _ in range(3):
            self.cart.add(WIDGET)
        self.cart.add(GADGET)
        self.assertEqual(self.cart.total(), 8.5)

    def test_total_is_not_rounded(self):
        self.cart.add(Product(code="C3", name="Screw", price=0.333))
        self.cart.adjust_quantity("C3", 2)
        self.assertAlmostEqual(self.cart.total(), 0.999)


if __name__ == "__main__":
    unittest.main()
