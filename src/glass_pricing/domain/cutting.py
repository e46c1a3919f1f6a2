"""Cutting style (shataf) and cut-geometry formula (farma) classifications."""

from collections.abc import Callable
from decimal import Decimal
from enum import Enum
from typing import TypeAlias

from glass_pricing.domain.exceptions import ValidationError


class PricingMode(Enum):
    MANUAL_INPUT = "MANUAL_INPUT"
    AREA_BASED = "AREA_BASED"
    FORMULA_BASED = "FORMULA_BASED"


class ShatafType(Enum):
    """Cutting style. Every member declares exactly one pricing mode."""

    KHARAZAN = ("KHARAZAN", PricingMode.FORMULA_BASED, "خرازان")
    SHAMBORLEH = ("SHAMBORLEH", PricingMode.FORMULA_BASED, "شمبورليه")
    ONE_CM = ("ONE_CM", PricingMode.FORMULA_BASED, "1 سم")
    TWO_CM = ("TWO_CM", PricingMode.FORMULA_BASED, "2 سم")
    THREE_CM = ("THREE_CM", PricingMode.FORMULA_BASED, "3 سم")
    JULIA = ("JULIA", PricingMode.FORMULA_BASED, "جوليا")
    LASER = ("LASER", PricingMode.MANUAL_INPUT, "ليزر")
    ROTATION = ("ROTATION", PricingMode.MANUAL_INPUT, "الدوران")
    TABLEAUX = ("TABLEAUX", PricingMode.MANUAL_INPUT, "التابلوهات")
    SANDING = ("SANDING", PricingMode.AREA_BASED, "صنفرة")

    def __new__(cls, value: str, pricing_mode: PricingMode, arabic_name: str) -> "ShatafType":
        obj = object.__new__(cls)
        obj._value_ = value
        obj.pricing_mode = pricing_mode
        obj.arabic_name = arabic_name
        return obj

    @property
    def requires_manual_price(self) -> bool:
        return self.pricing_mode is PricingMode.MANUAL_INPUT

    @property
    def uses_rate_table(self) -> bool:
        return self.pricing_mode in (PricingMode.AREA_BASED, PricingMode.FORMULA_BASED)


Formula: TypeAlias = Callable[[Decimal, Decimal, Decimal | None], Decimal]


def _perimeter(width: Decimal, height: Decimal, diameter: Decimal | None) -> Decimal:
    return 2 * (width + height)


def _three_edges(width: Decimal, height: Decimal, diameter: Decimal | None) -> Decimal:
    return 3 * (width + height)


def _four_edges(width: Decimal, height: Decimal, diameter: Decimal | None) -> Decimal:
    return 4 * (width + height)


def _fixed_plus_area(fixed: int) -> Formula:
    def formula(width: Decimal, height: Decimal, diameter: Decimal | None) -> Decimal:
        return fixed + width * height

    return formula


def _wheel(width: Decimal, height: Decimal, diameter: Decimal | None) -> Decimal:
    if diameter is None or diameter <= 0:
        raise ValidationError("Wheel cut requires a positive diameter")
    return 6 * diameter


class FarmaType(Enum):
    """Cut-geometry formula family.

    Rectangle families read width and height; WHEEL_CUT reads only the
    diameter. Manual families carry no formula and yield zero shataf meters.
    """

    NORMAL_SHATAF = ("NORMAL_SHATAF", _perimeter, "عدل (2 × (طول + عرض))")
    ONE_HEAD_FARMA = ("ONE_HEAD_FARMA", _fixed_plus_area(6), "فرما رأس 1")
    TWO_HEAD_FARMA = ("TWO_HEAD_FARMA", _fixed_plus_area(8), "فرما رأسين")
    ONE_SIDE_FARMA = ("ONE_SIDE_FARMA", _fixed_plus_area(6), "فرما جنب 1")
    TWO_SIDE_FARMA = ("TWO_SIDE_FARMA", _fixed_plus_area(8), "فرما جنبين")
    HEAD_SIDE_FARMA = ("HEAD_SIDE_FARMA", _three_edges, "فرما رأس وجنب")
    TWO_HEAD_ONE_SIDE_FARMA = ("TWO_HEAD_ONE_SIDE_FARMA", _fixed_plus_area(12), "فرما رأسين وجنب")
    TWO_SIDE_ONE_HEAD_FARMA = ("TWO_SIDE_ONE_HEAD_FARMA", _fixed_plus_area(12), "فرما جنبين ورأس")
    FULL_FARMA = ("FULL_FARMA", _four_edges, "فرما كامل")
    WHEEL_CUT = ("WHEEL_CUT", _wheel, "العجلة (6 × القطر)")
    ROTATION = ("ROTATION", None, "الدوران (يدوي)")
    TABLEAUX = ("TABLEAUX", None, "التابلوهات (يدوي)")
    HAND_SHATAF = ("HAND_SHATAF", _perimeter, "ليزر يدوي")

    def __new__(cls, value: str, formula: Formula | None, arabic_name: str) -> "FarmaType":
        obj = object.__new__(cls)
        obj._value_ = value
        obj.formula = formula
        obj.arabic_name = arabic_name
        return obj

    @property
    def is_manual(self) -> bool:
        return self.formula is None

    @property
    def requires_diameter(self) -> bool:
        return self is FarmaType.WHEEL_CUT

    def calculate_shataf_meters(
        self,
        width_m: Decimal,
        height_m: Decimal,
        diameter_m: Decimal | None = None,
    ) -> Decimal:
        if self.formula is None:
            return Decimal(0)
        return self.formula(width_m, height_m, diameter_m)
