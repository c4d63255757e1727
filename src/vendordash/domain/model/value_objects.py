"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from vendordash.domain.exceptions import ValidationError

_CENT = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    """Monetary amount with currency.

    Uses Decimal to avoid floating-point rounding errors that would be
    unacceptable in financial calculations.
    """

    amount: Decimal
    currency: str = "USD"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor: int | Decimal | Quantity) -> Money:
        if isinstance(factor, Quantity):
            factor = factor.value
        if isinstance(factor, bool) or not isinstance(factor, (int, Decimal)):
            raise TypeError(
                f"Can only multiply Money by int, Decimal or Quantity, "
                f"got {type(factor).__name__}"
            )
        return Money(self.amount * factor, self.currency)

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"${self.amount.quantize(_CENT, rounding=ROUND_HALF_UP)}"

    # --- Internal helpers -----------------------------------------------------

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    # --- Factory --------------------------------------------------------------

    @staticmethod
    def zero(currency: str = "USD") -> Money:
        return Money(Decimal("0.00"), currency)

    @staticmethod
    def of(amount: str | float | int | Decimal, currency: str = "USD") -> Money:
        """Convenient factory that coerces to Decimal safely."""
        try:
            return Money(Decimal(str(amount)), currency)
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc


@dataclass(frozen=True)
class Quantity:
    """A non-negative, possibly fractional quantity (e.g. 1.5 kg).

    Zero is allowed: an item can be fulfilled with nothing.
    """

    value: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.value, Decimal):
            raise ValidationError(
                f"Quantity must be a Decimal, got {type(self.value).__name__}"
            )
        if not self.value.is_finite():
            raise ValidationError(f"Quantity must be finite, got {self.value}")
        if self.value < Decimal("0"):
            raise ValidationError(f"Quantity cannot be negative, got {self.value}")

    def stepped(self, delta: Decimal) -> Quantity:
        """Add *delta*, round to 2 decimal places and clamp at zero."""
        result = (self.value + delta).quantize(_CENT, rounding=ROUND_HALF_UP)
        return Quantity(max(result, Decimal("0.00")))

    def differs_from(self, other: Quantity, tolerance: Decimal = _CENT) -> bool:
        return abs(self.value - other.value) > tolerance

    def __add__(self, other: Quantity) -> Quantity:
        return Quantity(self.value + other.value)

    def __str__(self) -> str:
        return f"{self.value.normalize():f}"

    @staticmethod
    def zero() -> Quantity:
        return Quantity(Decimal("0"))

    @staticmethod
    def of(raw: str | float | int | Decimal) -> Quantity:
        """Parse user or wire input; non-numeric and negative values are rejected."""
        if isinstance(raw, bool):
            raise ValidationError(f"Invalid quantity: {raw!r}")
        try:
            return Quantity(Decimal(str(raw).strip()))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid quantity: {raw!r}") from exc


@dataclass(frozen=True)
class DateWindow:
    """An inclusive range of calendar days, e.g. the five visible columns."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValidationError(
                f"Date window ends ({self.end}) before it starts ({self.start})"
            )

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end

    def days(self) -> list[date]:
        span = (self.end - self.start).days
        return [self.start + timedelta(days=i) for i in range(span + 1)]

    def shifted(self, days: int) -> DateWindow:
        delta = timedelta(days=days)
        return DateWindow(self.start + delta, self.end + delta)

    @staticmethod
    def starting(day: date, length: int) -> DateWindow:
        if length <= 0:
            raise ValidationError("Date window must span at least one day")
        return DateWindow(day, day + timedelta(days=length - 1))
