"""Immutable value objects: money, dimensions and area.

All quantities are held as ``Decimal`` so that prices and areas never pick up
binary floating-point drift. Floats passed in are converted through ``str``.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Self, TypeAlias

from glass_pricing.domain.exceptions import CurrencyMismatchError, ValidationError


MONEY_SCALE = Decimal("0.01")
AREA_SCALE = Decimal("0.0001")

DEFAULT_CURRENCY = "EGP"

Numeric: TypeAlias = Decimal | int | float | str


def to_decimal(value: Numeric) -> Decimal:
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ValidationError(f"Not a number: {value!r}") from exc


@dataclass(frozen=True)
class Money:
    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self) -> None:
        amount = to_decimal(self.amount)
        if amount < 0:
            raise ValidationError(f"Money amount cannot be negative: {amount}")
        if len(self.currency) != 3:
            raise ValidationError("Currency must be ISO 4217 code (3 characters)")
        object.__setattr__(self, "amount", amount.quantize(MONEY_SCALE, rounding=ROUND_HALF_UP))

    @classmethod
    def of(cls, amount: Numeric, currency: str = DEFAULT_CURRENCY) -> Self:
        return cls(to_decimal(amount), currency)

    @classmethod
    def zero(cls, currency: str = DEFAULT_CURRENCY) -> Self:
        return cls(Decimal(0), currency)

    def add(self, other: "Money") -> "Money":
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def subtract(self, other: "Money") -> "Money":
        self._assert_same_currency(other)
        result = self.amount - other.amount
        if result < 0:
            raise ValidationError(f"Result would be negative: {result}")
        return Money(result, self.currency)

    def multiply(self, factor: Numeric) -> "Money":
        return Money(self.amount * to_decimal(factor), self.currency)

    def is_zero(self) -> bool:
        return self.amount == 0

    def is_positive(self) -> bool:
        return self.amount > 0

    def __lt__(self, other: "Money") -> bool:
        self._assert_same_currency(other)
        return self.amount < other.amount

    def __le__(self, other: "Money") -> bool:
        self._assert_same_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: "Money") -> bool:
        self._assert_same_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: "Money") -> bool:
        self._assert_same_currency(other)
        return self.amount >= other.amount

    def __str__(self) -> str:
        return f"{self.amount} {self.currency}"

    def _assert_same_currency(self, other: "Money") -> None:
        if self.currency != other.currency:
            raise CurrencyMismatchError(self.currency, other.currency)


class DimensionUnit(Enum):
    MM = "MM"
    CM = "CM"
    M = "M"

    @property
    def meters_factor(self) -> Decimal:
        return _METERS_FACTORS[self]

    def to_meters(self, value: Numeric) -> Decimal:
        return to_decimal(value) * self.meters_factor


_METERS_FACTORS = {
    DimensionUnit.MM: Decimal("0.001"),
    DimensionUnit.CM: Decimal("0.01"),
    DimensionUnit.M: Decimal(1),
}


@dataclass(frozen=True)
class Dimensions:
    width: Decimal
    height: Decimal
    unit: DimensionUnit = DimensionUnit.MM

    def __post_init__(self) -> None:
        width = to_decimal(self.width)
        height = to_decimal(self.height)
        if width <= 0:
            raise ValidationError(f"Width must be positive: {width}")
        if height <= 0:
            raise ValidationError(f"Height must be positive: {height}")
        object.__setattr__(self, "width", width)
        object.__setattr__(self, "height", height)

    @classmethod
    def of_millimeters(cls, width: Numeric, height: Numeric) -> Self:
        return cls(to_decimal(width), to_decimal(height), DimensionUnit.MM)

    @classmethod
    def of_meters(cls, width: Numeric, height: Numeric) -> Self:
        return cls(to_decimal(width), to_decimal(height), DimensionUnit.M)

    def convert_to_meters(self) -> "Dimensions":
        if self.unit is DimensionUnit.M:
            return self
        return Dimensions(
            self.unit.to_meters(self.width),
            self.unit.to_meters(self.height),
            DimensionUnit.M,
        )

    def calculate_area(self) -> "Area":
        return Area.from_dimensions(self.convert_to_meters())

    def perimeter_in_meters(self) -> Decimal:
        meters = self.convert_to_meters()
        return 2 * (meters.width + meters.height)

    def __str__(self) -> str:
        return f"{self.width} x {self.height} {self.unit.value}"


@dataclass(frozen=True, order=True)
class Area:
    """Square meters, always non-negative, quantized to four places."""

    square_meters: Decimal

    def __post_init__(self) -> None:
        value = to_decimal(self.square_meters)
        if value < 0:
            raise ValidationError(f"Area cannot be negative: {value}")
        object.__setattr__(self, "square_meters", value.quantize(AREA_SCALE, rounding=ROUND_HALF_UP))

    @classmethod
    def from_dimensions(cls, dimensions: Dimensions) -> Self:
        # Millimeter or centimeter figures must never be multiplied into an area directly.
        if dimensions.unit is not DimensionUnit.M:
            raise ValidationError(f"Area requires meter dimensions, got {dimensions.unit.value}")
        return cls(dimensions.width * dimensions.height)

    @classmethod
    def of_square_meters(cls, square_meters: Numeric) -> Self:
        return cls(to_decimal(square_meters))

    @classmethod
    def zero(cls) -> Self:
        return cls(Decimal(0))

    def add(self, other: "Area") -> "Area":
        return Area(self.square_meters + other.square_meters)

    def is_zero(self) -> bool:
        return self.square_meters == 0

    def __str__(self) -> str:
        return f"{self.square_meters} m2"
