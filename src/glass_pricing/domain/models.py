from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from ulid import ULID

from glass_pricing.domain.cutting import FarmaType, ShatafType
from glass_pricing.domain.exceptions import InvalidAmountError, OverpaymentError, ValidationError
from glass_pricing.domain.values import Area, Dimensions, Money, Numeric, to_decimal


class InvoiceStatus(Enum):
    UNPAID = "UNPAID"
    PARTIALLY_PAID = "PARTIALLY_PAID"
    PAID = "PAID"


class PaymentMethod(Enum):
    CASH = "CASH"
    CARD = "CARD"
    BANK_TRANSFER = "BANK_TRANSFER"
    CHECK = "CHECK"
    OTHER = "OTHER"


class CustomerType(Enum):
    CASH = "CASH"
    REGULAR = "REGULAR"
    COMPANY = "COMPANY"


def _require_name(name: str, what: str) -> str:
    if not name or not name.strip():
        raise ValidationError(f"{what} name is required")
    return name.strip()


def _require_glass_price(price: Money) -> Money:
    if not price.is_positive():
        raise ValidationError(f"Price per square meter must be positive: {price.amount}")
    return price


@dataclass
class GlassType:
    id: str
    name: str
    thickness: Decimal
    price_per_square_meter: Money
    color: str | None = None
    active: bool = True

    def __post_init__(self) -> None:
        self.name = _require_name(self.name, "Glass type")
        self.thickness = to_decimal(self.thickness)
        if self.thickness <= 0:
            raise ValidationError(f"Glass thickness must be positive: {self.thickness}")
        _require_glass_price(self.price_per_square_meter)

    @classmethod
    def create(
        cls,
        name: str,
        thickness: Numeric,
        price_per_square_meter: Money,
        color: str | None = None,
    ) -> "GlassType":
        return cls(
            id=str(ULID()),
            name=name,
            thickness=to_decimal(thickness),
            price_per_square_meter=price_per_square_meter,
            color=color,
        )

    def calculate_price(self, area: Area) -> Money:
        return self.price_per_square_meter.multiply(area.square_meters)

    def update_name(self, name: str) -> None:
        self.name = _require_name(name, "Glass type")

    def update_price(self, price_per_square_meter: Money) -> None:
        self.price_per_square_meter = _require_glass_price(price_per_square_meter)

    def activate(self) -> None:
        self.active = True

    def deactivate(self) -> None:
        self.active = False


@dataclass
class ShatafRate:
    """One row of the cutting-rate table: a style priced per meter over a thickness band."""

    id: str
    shataf_type: ShatafType
    min_thickness: Decimal
    max_thickness: Decimal
    rate_per_meter: Money
    active: bool = True

    def __post_init__(self) -> None:
        self.min_thickness = to_decimal(self.min_thickness)
        self.max_thickness = to_decimal(self.max_thickness)
        if self.min_thickness < 0:
            raise ValidationError(f"Minimum thickness cannot be negative: {self.min_thickness}")
        if self.max_thickness <= self.min_thickness:
            raise ValidationError(
                f"Maximum thickness {self.max_thickness} must exceed minimum thickness {self.min_thickness}"
            )

    @classmethod
    def create(
        cls,
        shataf_type: ShatafType,
        min_thickness: Numeric,
        max_thickness: Numeric,
        rate_per_meter: Money,
    ) -> "ShatafRate":
        return cls(
            id=str(ULID()),
            shataf_type=shataf_type,
            min_thickness=to_decimal(min_thickness),
            max_thickness=to_decimal(max_thickness),
            rate_per_meter=rate_per_meter,
        )

    @property
    def band(self) -> tuple[Decimal, Decimal]:
        return (self.min_thickness, self.max_thickness)

    def applies_to_thickness(self, thickness: Numeric) -> bool:
        return self.min_thickness <= to_decimal(thickness) <= self.max_thickness

    def overlaps(self, other: "ShatafRate") -> bool:
        return (
            self.shataf_type is other.shataf_type
            and self.min_thickness <= other.max_thickness
            and other.min_thickness <= self.max_thickness
        )

    def update_rate(self, rate_per_meter: Money) -> None:
        self.rate_per_meter = rate_per_meter

    def activate(self) -> None:
        self.active = True

    def deactivate(self) -> None:
        self.active = False


@dataclass(frozen=True)
class LineCalculation:
    area: Area
    shataf_meters: Decimal
    glass_price: Money
    cutting_price: Money

    @property
    def total_price(self) -> Money:
        return self.glass_price.add(self.cutting_price)


@dataclass(frozen=True)
class InvoiceLine:
    id: str
    glass_type_id: str
    dimensions: Dimensions
    shataf_type: ShatafType
    farma_type: FarmaType
    calculation: LineCalculation
    diameter: Decimal | None = None
    manual_cutting_price: Money | None = None
    quantity: int = 1

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValidationError(f"Quantity must be at least 1: {self.quantity}")
        if self.farma_type.requires_diameter and (self.diameter is None or self.diameter <= 0):
            raise ValidationError("Wheel cut requires a positive diameter")

    @property
    def unit_price(self) -> Money:
        return self.calculation.total_price

    @property
    def total_price(self) -> Money:
        return self.calculation.total_price.multiply(self.quantity)


@dataclass
class Invoice:
    """Aggregate root owning priced lines and the payment state.

    ``total_price``, ``remaining_balance`` and ``status`` are derived from the
    lines and ``amount_paid`` on every read; nothing else stores them.
    """

    id: str
    customer_id: str
    lines: list[InvoiceLine] = field(default_factory=list)
    amount_paid: Money = field(default_factory=Money.zero)
    notes: str | None = None
    issue_date: datetime = field(default_factory=lambda: datetime.now(UTC))
    payment_date: datetime | None = None

    def __post_init__(self) -> None:
        if self.amount_paid > self.total_price:
            raise ValidationError(
                f"Amount paid {self.amount_paid.amount} exceeds invoice total {self.total_price.amount}"
            )

    @classmethod
    def create(cls, customer_id: str, notes: str | None = None) -> "Invoice":
        return cls(id=str(ULID()), customer_id=customer_id, notes=notes)

    @property
    def total_price(self) -> Money:
        total = Money.zero()
        for line in self.lines:
            total = total.add(line.total_price)
        return total

    @property
    def remaining_balance(self) -> Money:
        return self.total_price.subtract(self.amount_paid)

    @property
    def status(self) -> InvoiceStatus:
        if self.amount_paid.is_zero():
            return InvoiceStatus.UNPAID
        if self.amount_paid >= self.total_price:
            return InvoiceStatus.PAID
        return InvoiceStatus.PARTIALLY_PAID

    def is_fully_paid(self) -> bool:
        return self.status is InvoiceStatus.PAID

    def has_payment(self) -> bool:
        return self.amount_paid.is_positive()

    def add_line(
        self,
        calculation: LineCalculation,
        glass_type_id: str,
        dimensions: Dimensions,
        shataf_type: ShatafType,
        farma_type: FarmaType,
        diameter: Decimal | None = None,
        manual_cutting_price: Money | None = None,
        quantity: int = 1,
    ) -> InvoiceLine:
        line = InvoiceLine(
            id=str(ULID()),
            glass_type_id=glass_type_id,
            dimensions=dimensions,
            shataf_type=shataf_type,
            farma_type=farma_type,
            calculation=calculation,
            diameter=diameter,
            manual_cutting_price=manual_cutting_price,
            quantity=quantity,
        )
        self.lines.append(line)
        return line

    def apply_payment(self, amount: Money, at: datetime | None = None) -> None:
        if not amount.is_positive():
            raise InvalidAmountError(amount.amount, "Amount must be positive")
        remaining = self.remaining_balance
        if amount > remaining:
            raise OverpaymentError(amount.amount, remaining.amount)

        self.amount_paid = self.amount_paid.add(amount)
        if self.payment_date is None:
            self.payment_date = at or datetime.now(UTC)


@dataclass(frozen=True)
class Payment:
    id: str
    customer_id: str
    amount: Money
    method: PaymentMethod
    invoice_id: str | None = None
    paid_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    notes: str | None = None
    created_by: str | None = None

    def __post_init__(self) -> None:
        if not self.amount.is_positive():
            raise InvalidAmountError(self.amount.amount, "Payment amount must be positive")

    @classmethod
    def create(
        cls,
        customer_id: str,
        amount: Money,
        method: PaymentMethod = PaymentMethod.CASH,
        invoice_id: str | None = None,
        notes: str | None = None,
        created_by: str | None = None,
        paid_at: datetime | None = None,
    ) -> "Payment":
        return cls(
            id=str(ULID()),
            customer_id=customer_id,
            amount=amount,
            method=method,
            invoice_id=invoice_id,
            paid_at=paid_at or datetime.now(UTC),
            notes=notes,
            created_by=created_by,
        )

    @property
    def is_invoice_payment(self) -> bool:
        return self.invoice_id is not None


@dataclass
class Customer:
    id: str
    name: str
    customer_type: CustomerType
    phone: str | None = None
    address: str | None = None
    balance: Money = field(default_factory=Money.zero)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        self.name = _require_name(self.name, "Customer")

    @classmethod
    def create(
        cls,
        name: str,
        customer_type: CustomerType,
        phone: str | None = None,
        address: str | None = None,
    ) -> "Customer":
        return cls(id=str(ULID()), name=name, customer_type=customer_type, phone=phone, address=address)

    @property
    def can_have_balance(self) -> bool:
        return self.customer_type is not CustomerType.CASH

    def has_outstanding_balance(self) -> bool:
        return self.balance.is_positive()

    def refresh_balance(self, reconciled: Money) -> None:
        self.balance = reconciled
        self.updated_at = datetime.now(UTC)
