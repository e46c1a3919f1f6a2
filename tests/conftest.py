"""Shared pytest fixtures for glass pricing tests."""

from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from glass_pricing.application.unit_of_work import UnitOfWork
from glass_pricing.domain.cutting import FarmaType, ShatafType
from glass_pricing.domain.models import (
    Customer,
    CustomerType,
    GlassType,
    Invoice,
    LineCalculation,
    ShatafRate,
)
from glass_pricing.domain.rate_catalog import RateCatalog
from glass_pricing.domain.values import Area, Dimensions, Money


@pytest.fixture
def mock_customer_repository() -> AsyncMock:
    """Create mock CustomerRepository."""
    repo = AsyncMock()
    repo.get = AsyncMock(return_value=None)
    repo.get_for_update = AsyncMock(return_value=None)
    repo.get_by_phone = AsyncMock(return_value=None)
    repo.add = AsyncMock(return_value=None)
    repo.update_balance = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def mock_glass_type_repository() -> AsyncMock:
    """Create mock GlassTypeRepository."""
    repo = AsyncMock()
    repo.get = AsyncMock(return_value=None)
    repo.get_active = AsyncMock(return_value=[])
    repo.add = AsyncMock(return_value=None)
    repo.update = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def mock_shataf_rate_repository() -> AsyncMock:
    """Create mock ShatafRateRepository."""
    repo = AsyncMock()
    repo.get = AsyncMock(return_value=None)
    repo.get_by_style_and_thickness = AsyncMock(return_value=None)
    repo.lock_style = AsyncMock(return_value=None)
    repo.get_by_style = AsyncMock(return_value=[])
    repo.get_all = AsyncMock(return_value=[])
    repo.add = AsyncMock(return_value=None)
    repo.update = AsyncMock(return_value=None)
    repo.delete = AsyncMock(return_value=True)
    return repo


@pytest.fixture
def mock_invoice_repository() -> AsyncMock:
    """Create mock InvoiceRepository."""
    repo = AsyncMock()
    repo.get = AsyncMock(return_value=None)
    repo.get_by_customer_id = AsyncMock(return_value=[])
    repo.get_by_date_range = AsyncMock(return_value=[])
    repo.exists = AsyncMock(return_value=False)
    repo.add = AsyncMock(return_value=None)
    repo.update_payment_state = AsyncMock(return_value=None)
    repo.delete = AsyncMock(return_value=True)
    return repo


@pytest.fixture
def mock_payment_repository() -> AsyncMock:
    """Create mock PaymentRepository."""
    repo = AsyncMock()
    repo.add = AsyncMock(return_value=None)
    repo.get_by_customer_id = AsyncMock(return_value=[])
    repo.get_by_invoice_id = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def mock_uow(
    mock_customer_repository: AsyncMock,
    mock_glass_type_repository: AsyncMock,
    mock_shataf_rate_repository: AsyncMock,
    mock_invoice_repository: AsyncMock,
    mock_payment_repository: AsyncMock,
) -> AsyncMock:
    """Create mock Unit of Work with all repositories."""
    uow = AsyncMock(spec=UnitOfWork)
    uow.customers = mock_customer_repository
    uow.glass_types = mock_glass_type_repository
    uow.shataf_rates = mock_shataf_rate_repository
    uow.invoices = mock_invoice_repository
    uow.payments = mock_payment_repository
    uow.commit = AsyncMock(return_value=None)
    uow.rollback = AsyncMock(return_value=None)

    uow.__aenter__ = AsyncMock(return_value=uow)
    uow.__aexit__ = AsyncMock(return_value=None)

    return uow


@pytest.fixture
def clear_glass() -> GlassType:
    """8 mm clear glass at 150 per square meter."""
    return GlassType(
        id="glass-clear-8",
        name="Clear 8mm",
        thickness=Decimal("8"),
        price_per_square_meter=Money.of("150"),
        color="clear",
    )


@pytest.fixture
def kharazan_rate() -> ShatafRate:
    return ShatafRate(
        id="rate-kharazan-8",
        shataf_type=ShatafType.KHARAZAN,
        min_thickness=Decimal("6.1"),
        max_thickness=Decimal("8"),
        rate_per_meter=Money.of("12.50"),
    )


@pytest.fixture
def sanding_rate() -> ShatafRate:
    return ShatafRate(
        id="rate-sanding-8",
        shataf_type=ShatafType.SANDING,
        min_thickness=Decimal("6.1"),
        max_thickness=Decimal("8"),
        rate_per_meter=Money.of("20"),
    )


@pytest.fixture
def rate_catalog(kharazan_rate: ShatafRate, sanding_rate: ShatafRate) -> RateCatalog:
    return RateCatalog.from_rates([kharazan_rate, sanding_rate])


@pytest.fixture
def regular_customer() -> Customer:
    """Create sample customer that may carry a balance."""
    return Customer(
        id="customer-regular-001",
        name="Nile Aluminium Works",
        customer_type=CustomerType.REGULAR,
        phone="01000000001",
        created_at=datetime.now(UTC),
    )


@pytest.fixture
def cash_customer() -> Customer:
    """Create sample walk-in customer that must pay in full."""
    return Customer(
        id="customer-cash-001",
        name="Walk-in",
        customer_type=CustomerType.CASH,
        created_at=datetime.now(UTC),
    )


def create_invoice(
    customer_id: str,
    total: str,
    paid: str = "0",
    issue_date: datetime | None = None,
    invoice_id: str | None = None,
) -> Invoice:
    """Helper to create an Invoice with one line priced at ``total``."""
    invoice = Invoice(
        id=invoice_id or f"invoice-{customer_id}-{total}",
        customer_id=customer_id,
        issue_date=issue_date or datetime.now(UTC),
    )
    invoice.add_line(
        LineCalculation(
            area=Area.of_square_meters("1"),
            shataf_meters=Decimal("4"),
            glass_price=Money.of(total),
            cutting_price=Money.zero(),
        ),
        glass_type_id="glass-clear-8",
        dimensions=Dimensions.of_millimeters(1000, 1000),
        shataf_type=ShatafType.KHARAZAN,
        farma_type=FarmaType.NORMAL_SHATAF,
    )
    if Decimal(paid) > 0:
        invoice.apply_payment(Money.of(paid))
    return invoice
