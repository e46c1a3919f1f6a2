from decimal import Decimal


class DomainError(Exception):
    """Base exception for domain errors."""


class ValidationError(DomainError, ValueError):
    """Raised when a value object or entity is constructed with invalid data."""


class InvalidAmountError(ValidationError):
    """Raised when a payment amount is invalid."""

    def __init__(self, amount: Decimal, reason: str) -> None:
        self.amount = amount
        self.reason = reason
        super().__init__(f"Invalid amount {amount}: {reason}")


class CurrencyMismatchError(DomainError):
    """Raised when currencies don't match."""

    def __init__(self, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"Currency mismatch: expected {expected}, got {actual}")


class RateNotFoundError(DomainError):
    """Raised when no active rate covers a cutting style at a thickness."""

    def __init__(self, shataf_type: str, thickness: Decimal) -> None:
        self.shataf_type = shataf_type
        self.thickness = thickness
        super().__init__(f"No rate configured for cutting style {shataf_type} at thickness {thickness} mm")


class RateBandOverlapError(DomainError):
    """Raised when an active thickness band would overlap another active band of the same style."""

    def __init__(self, shataf_type: str, band: tuple[Decimal, Decimal], existing: tuple[Decimal, Decimal]) -> None:
        self.shataf_type = shataf_type
        self.band = band
        self.existing = existing
        super().__init__(
            f"Thickness band {band[0]}-{band[1]} mm for {shataf_type} "
            f"overlaps existing band {existing[0]}-{existing[1]} mm"
        )


class ManualPriceRequiredError(DomainError):
    """Raised when a manual-input style is priced without a positive manual price."""

    def __init__(self, shataf_type: str) -> None:
        self.shataf_type = shataf_type
        super().__init__(f"Manual cutting price required for style {shataf_type}")


class UnrecognizedStyleError(DomainError):
    """Raised when a cutting style has no known pricing mode."""

    def __init__(self, shataf_type: str) -> None:
        self.shataf_type = shataf_type
        super().__init__(f"Unrecognized cutting style: {shataf_type}")


class OverpaymentError(DomainError):
    """Raised when a payment exceeds the outstanding balance."""

    def __init__(self, amount: Decimal, remaining: Decimal) -> None:
        self.amount = amount
        self.remaining = remaining
        super().__init__(f"Payment of {amount} exceeds balance: remaining {remaining}")


class CashPaymentShortfallError(DomainError):
    """Raised when a cash customer's invoice is not paid in full at creation."""

    def __init__(self, customer_id: str, total: Decimal, paid: Decimal) -> None:
        self.customer_id = customer_id
        self.total = total
        self.paid = paid
        super().__init__(f"Cash customer {customer_id} must pay the full invoice total {total}, got {paid}")


class CustomerNotFoundError(DomainError):
    """Raised when a customer cannot be found."""

    def __init__(self, customer_id: str) -> None:
        self.customer_id = customer_id
        super().__init__(f"Customer {customer_id} not found")


class InvoiceNotFoundError(DomainError):
    """Raised when an invoice cannot be found."""

    def __init__(self, invoice_id: str) -> None:
        self.invoice_id = invoice_id
        super().__init__(f"Invoice {invoice_id} not found")


class GlassTypeNotFoundError(DomainError):
    """Raised when a glass type cannot be found."""

    def __init__(self, glass_type_id: str) -> None:
        self.glass_type_id = glass_type_id
        super().__init__(f"Glass type {glass_type_id} not found")


class RateNotFoundByIdError(DomainError):
    """Raised when a rate row cannot be found by id."""

    def __init__(self, rate_id: str) -> None:
        self.rate_id = rate_id
        super().__init__(f"Shataf rate {rate_id} not found")


class BalanceInconsistencyWarning(UserWarning):
    """Reported when a cached customer balance drifts from its invoices."""

    def __init__(self, customer_id: str, cached: Decimal, calculated: Decimal) -> None:
        self.customer_id = customer_id
        self.cached = cached
        self.calculated = calculated
        super().__init__(
            f"Balance inconsistency for customer {customer_id}: cached {cached}, calculated from invoices {calculated}"
        )
