"""Tests for the ShoppingCart aggregate."""

import pytest
from protean.exceptions import ValidationError

from storefront.cart.cart import ShoppingCart
from storefront.cart.events import CartCleared, CartLineAdded, CartLineRemoved
from storefront.shared.money import Money

UNIT = Money(bdt=1750.0, usd=14.29, cny=100.0)
TIER = Money(bdt=1575.0, usd=12.86, cny=90.0)


def _cart():
    cart = ShoppingCart.start("sess-001")
    return cart


class TestStart:
    def test_keyed_by_session(self):
        assert ShoppingCart.start("sess-xyz").id == "sess-xyz"

    def test_uses_default_rates(self):
        assert _cart().currency_rates.usd_to_bdt == 121.5


class TestAddLine:
    def test_new_line(self):
        cart = _cart()
        line = cart.add_line("prod-001", "Tote", 2, UNIT, color="Black", size="M")
        assert line.total_price == UNIT.times(2)
        assert cart.quantity_of("prod-001") == 2
        assert isinstance(cart._events[-1], CartLineAdded)

    def test_same_variant_merges(self):
        cart = _cart()
        cart.add_line("prod-001", "Tote", 2, UNIT, color="Black")
        cart.add_line("prod-001", "Tote", 3, UNIT, color="Black")
        assert len(cart.lines) == 1
        assert cart.lines[0].quantity == 5

    def test_other_variant_gets_own_line(self):
        cart = _cart()
        cart.add_line("prod-001", "Tote", 2, UNIT, color="Black")
        cart.add_line("prod-001", "Tote", 2, UNIT, color="Red")
        assert len(cart.lines) == 2
        assert cart.quantity_of("prod-001") == 4

    def test_tier_price_reprices_all_lines_of_product(self):
        cart = _cart()
        cart.add_line("prod-001", "Tote", 5, UNIT, color="Black")
        cart.add_line("prod-001", "Tote", 5, TIER, color="Red")
        assert all(line.unit_price == TIER for line in cart.lines)
        assert cart.sub_total().bdt == pytest.approx(1575.0 * 10)

    def test_minimum_order_quantity_enforced(self):
        cart = _cart()
        with pytest.raises(ValidationError) as exc:
            cart.add_line("prod-001", "Tote", 2, UNIT, minimum_order_quantity=5)
        assert "quantity" in exc.value.messages
        assert not cart.lines

    def test_minimum_order_quantity_counts_existing_lines(self):
        cart = _cart()
        cart.add_line("prod-001", "Tote", 3, UNIT, color="Black", minimum_order_quantity=3)
        cart.add_line("prod-001", "Tote", 2, UNIT, color="Red", minimum_order_quantity=5)
        assert cart.quantity_of("prod-001") == 5

    def test_customer_attached(self):
        cart = _cart()
        cart.add_line("prod-001", "Tote", 1, UNIT, customer_id="cust-001")
        assert cart.customer_id == "cust-001"


class TestRemoveAndClear:
    def test_remove_line(self):
        cart = _cart()
        line = cart.add_line("prod-001", "Tote", 2, UNIT)
        assert cart.remove_line(line.id) == "prod-001"
        assert not cart.lines
        assert isinstance(cart._events[-1], CartLineRemoved)

    def test_remove_unknown_line(self):
        with pytest.raises(ValidationError):
            _cart().remove_line("missing")

    def test_clear(self):
        cart = _cart()
        cart.add_line("prod-001", "Tote", 2, UNIT)
        cart.add_line("prod-002", "Bottle", 1, UNIT)
        cart.clear(order_id="ord-001")
        assert not cart.lines
        event = cart._events[-1]
        assert isinstance(event, CartCleared)
        assert event.line_count == 2
        assert event.order_id == "ord-001"

    def test_checkout_lines(self):
        cart = _cart()
        cart.add_line("prod-001", "Tote", 2, UNIT, color="Black", size="M")
        lines = cart.checkout_lines()
        assert lines[0]["product_id"] == "prod-001"
        assert lines[0]["quantity"] == 2
        assert lines[0]["total_price"] == UNIT.times(2)
