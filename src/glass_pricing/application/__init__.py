"""Application layer - pricing, payments, glass catalog and rate management use cases."""

from glass_pricing.application.glass_types import CreateGlassTypeCommand, GlassTypeService
from glass_pricing.application.pricing import InvoicePricingService
from glass_pricing.application.rates import CreateRateCommand, RateCatalogCache, ShatafRateService
from glass_pricing.application.reconciliation import BalanceReconciliationService, ReconciliationReport
from glass_pricing.application.services import (
    CreateInvoiceCommand,
    InvoiceLineRequest,
    InvoiceService,
    RecordPaymentCommand,
    allocate_payment,
)
from glass_pricing.application.unit_of_work import UnitOfWork


__all__ = [
    "BalanceReconciliationService",
    "CreateGlassTypeCommand",
    "CreateInvoiceCommand",
    "CreateRateCommand",
    "GlassTypeService",
    "InvoiceLineRequest",
    "InvoicePricingService",
    "InvoiceService",
    "RateCatalogCache",
    "ReconciliationReport",
    "RecordPaymentCommand",
    "ShatafRateService",
    "UnitOfWork",
    "allocate_payment",
]
