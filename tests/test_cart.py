"""
Tests for cart models and reconciliation
"""

import pytest
from decimal import Decimal
from electromart.cart import CapturedCeiling, Cart, CartLine, clamp_notice, reconcile


def _line(line_id="sku1", price="10.00", quantity=1, max_quantity=5):
    return CartLine(
        id=line_id,
        title=f"Product {line_id}",
        price=price,
        image=f"{line_id}.png",
        quantity=quantity,
        max_quantity=max_quantity,
    )


class TestCartLine:
    """Tests for CartLine dataclass."""

    def test_price_normalized_to_decimal(self):
        line = _line(price=19.99)
        assert line.price == Decimal("19.99")

    def test_line_total(self):
        line = _line(price="12.50", quantity=3)
        assert line.line_total == Decimal("37.50")

    def test_to_dict_keeps_price_as_string(self):
        data = _line(price="10.10").to_dict()
        assert data["price"] == "10.10"
        assert data["max_quantity"] == 5

    def test_from_dict(self):
        line = CartLine.from_dict({
            "id": "sku9",
            "title": "Mouse",
            "price": "25.00",
            "image": "mouse.png",
            "quantity": 2,
            "max_quantity": 4,
        })
        assert line.id == "sku9"
        assert line.quantity == 2
        assert line.max_quantity == 4

    def test_from_dict_rejects_zero_quantity(self):
        with pytest.raises(ValueError):
            CartLine.from_dict({"id": "a", "price": "1", "quantity": 0, "max_quantity": 1})

    def test_from_dict_missing_field(self):
        with pytest.raises(KeyError):
            CartLine.from_dict({"id": "a", "price": "1", "quantity": 1})

    def test_from_dict_rejects_non_finite_price(self):
        with pytest.raises(ValueError):
            CartLine.from_dict({"id": "a", "price": "NaN", "quantity": 1, "max_quantity": 1})

    def test_from_dict_rejects_negative_price(self):
        with pytest.raises(ValueError):
            CartLine.from_dict({"id": "a", "price": "-1", "quantity": 1, "max_quantity": 1})


class TestCart:
    """Tests for Cart dataclass."""

    def test_empty_cart(self):
        cart = Cart()
        assert cart.is_empty
        assert cart.item_count == 0
        assert cart.total == Decimal("0")

    def test_two_line_scenario(self):
        cart = Cart(lines=[
            _line("sku1", price="10.00", quantity=2, max_quantity=5),
            _line("sku2", price="25.00", quantity=1, max_quantity=1),
        ])
        assert cart.total == Decimal("45.00")
        assert cart.item_count == 3

    def test_find(self):
        cart = Cart(lines=[_line("sku1"), _line("sku2")])
        assert cart.find("sku2").id == "sku2"
        assert cart.find("missing") is None

    def test_from_list_drops_duplicate_ids(self):
        cart = Cart.from_list([_line("a", quantity=1).to_dict(), _line("a", quantity=3).to_dict()])
        assert len(cart.lines) == 1
        assert cart.lines[0].quantity == 1

    def test_from_list_rejects_non_list(self):
        with pytest.raises(TypeError):
            Cart.from_list({"id": "a"})

    def test_serialization_preserves_order(self):
        cart = Cart(lines=[_line("c"), _line("a"), _line("b")])
        restored = Cart.from_list(cart.to_list())
        assert [line.id for line in restored.lines] == ["c", "a", "b"]


class TestReconcile:
    """Tests for the stock reconciliation policy."""

    def test_above_ceiling_is_clamped(self):
        result = reconcile(9, CapturedCeiling(5))
        assert result.effective == 5
        assert result.was_clamped is True

    def test_at_ceiling_is_kept(self):
        assert reconcile(5, CapturedCeiling(5)) == (5, False)

    def test_below_ceiling_is_kept(self):
        assert reconcile(2, CapturedCeiling(5)) == (2, False)

    def test_clamp_notice_names_ceiling(self):
        assert clamp_notice(CapturedCeiling(3)) == "Sorry, only 3 units available in stock."
