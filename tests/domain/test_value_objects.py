"""Unit tests for domain value objects."""

from datetime import date
from decimal import Decimal

import pytest

from vendordash.domain.exceptions import ValidationError
from vendordash.domain.model.value_objects import DateWindow, Money, Quantity


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_creation(self):
        m = Money(Decimal("10.50"))
        assert m.amount == Decimal("10.50")
        assert m.currency == "USD"

    def test_of_factory_from_float(self):
        assert Money.of(2.5) == Money.of("2.5")

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Money(Decimal("-1"))

    def test_invalid_amount_rejected(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of("abc")

    def test_addition(self):
        assert Money.of("10") + Money.of("5.50") == Money.of("15.50")

    def test_multiplication_by_fractional_quantity(self):
        assert Money.of("10.00") * Quantity(Decimal("1.5")) == Money.of("15.00")

    def test_multiplication_by_float_rejected(self):
        with pytest.raises(TypeError):
            Money.of("10") * 1.5

    def test_currency_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="Cannot combine"):
            Money.of("1", "USD") + Money.of("1", "EUR")

    def test_str_rounds_to_cents(self):
        assert str(Money.of("3.333")) == "$3.33"
        assert str(Money.of("0.005")) == "$0.01"


# ── Quantity ─────────────────────────────────────────────────────────────────


class TestQuantity:

    def test_zero_allowed(self):
        assert Quantity.zero().value == Decimal("0")

    def test_negative_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Quantity(Decimal("-0.1"))

    def test_infinite_rejected(self):
        with pytest.raises(ValidationError, match="finite"):
            Quantity(Decimal("Infinity"))

    @pytest.mark.parametrize("raw", ["abc", "", True, None])
    def test_of_rejects_non_numeric(self, raw):
        with pytest.raises(ValidationError, match="Invalid quantity"):
            Quantity.of(raw)

    def test_of_parses_strings_with_whitespace(self):
        assert Quantity.of(" 2.5 ") == Quantity(Decimal("2.5"))

    def test_stepped_rounds_to_two_decimals(self):
        q = Quantity(Decimal("1.3"))
        for _ in range(3):
            q = q.stepped(Decimal("0.1"))
        assert q.value == Decimal("1.60")

    def test_stepped_clamps_at_zero(self):
        assert Quantity(Decimal("0.05")).stepped(Decimal("-0.1")).value == Decimal("0")

    def test_differs_from_uses_tolerance(self):
        a = Quantity(Decimal("2"))
        assert not a.differs_from(Quantity(Decimal("2.01")))
        assert a.differs_from(Quantity(Decimal("2.02")))

    def test_str_drops_trailing_zeros(self):
        assert str(Quantity(Decimal("1.50"))) == "1.5"
        assert str(Quantity(Decimal("10"))) == "10"


# ── DateWindow ───────────────────────────────────────────────────────────────


class TestDateWindow:

    def test_starting_spans_length_days(self):
        w = DateWindow.starting(date(2024, 3, 1), 5)
        assert w.end == date(2024, 3, 5)
        assert len(w.days()) == 5

    def test_contains_is_inclusive(self):
        w = DateWindow(date(2024, 3, 1), date(2024, 3, 5))
        assert w.contains(date(2024, 3, 1))
        assert w.contains(date(2024, 3, 5))
        assert not w.contains(date(2024, 3, 6))

    def test_reversed_window_rejected(self):
        with pytest.raises(ValidationError, match="before it starts"):
            DateWindow(date(2024, 3, 5), date(2024, 3, 1))

    def test_shifted(self):
        w = DateWindow.starting(date(2024, 3, 1), 5).shifted(5)
        assert w.start == date(2024, 3, 6)
        assert w.end == date(2024, 3, 10)
