"""Repository implementations."""

from glass_pricing.infrastructure.repositories.customer import CustomerRepository
from glass_pricing.infrastructure.repositories.glass_type import GlassTypeRepository
from glass_pricing.infrastructure.repositories.invoice import InvoiceRepository
from glass_pricing.infrastructure.repositories.payment import PaymentRepository
from glass_pricing.infrastructure.repositories.shataf_rate import ShatafRateRepository


__all__ = [
    "CustomerRepository",
    "GlassTypeRepository",
    "InvoiceRepository",
    "PaymentRepository",
    "ShatafRateRepository",
]
