"""Domain layer - value objects, entities and pricing rules."""

from glass_pricing.domain.cutting import FarmaType, PricingMode, ShatafType
from glass_pricing.domain.exceptions import (
    BalanceInconsistencyWarning,
    CashPaymentShortfallError,
    CurrencyMismatchError,
    CustomerNotFoundError,
    DomainError,
    GlassTypeNotFoundError,
    InvalidAmountError,
    InvoiceNotFoundError,
    ManualPriceRequiredError,
    OverpaymentError,
    RateBandOverlapError,
    RateNotFoundByIdError,
    RateNotFoundError,
    UnrecognizedStyleError,
    ValidationError,
)
from glass_pricing.domain.models import (
    Customer,
    CustomerType,
    GlassType,
    Invoice,
    InvoiceLine,
    InvoiceStatus,
    LineCalculation,
    Payment,
    PaymentMethod,
    ShatafRate,
)
from glass_pricing.domain.rate_catalog import RateCatalog
from glass_pricing.domain.values import Area, DimensionUnit, Dimensions, Money


__all__ = [
    "Area",
    "BalanceInconsistencyWarning",
    "CashPaymentShortfallError",
    "CurrencyMismatchError",
    "Customer",
    "CustomerNotFoundError",
    "CustomerType",
    "DimensionUnit",
    "Dimensions",
    "DomainError",
    "FarmaType",
    "GlassType",
    "GlassTypeNotFoundError",
    "InvalidAmountError",
    "Invoice",
    "InvoiceLine",
    "InvoiceNotFoundError",
    "InvoiceStatus",
    "LineCalculation",
    "ManualPriceRequiredError",
    "Money",
    "OverpaymentError",
    "Payment",
    "PaymentMethod",
    "PricingMode",
    "RateBandOverlapError",
    "RateCatalog",
    "RateNotFoundByIdError",
    "RateNotFoundError",
    "ShatafRate",
    "ShatafType",
    "UnrecognizedStyleError",
    "ValidationError",
]
