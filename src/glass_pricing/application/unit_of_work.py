from types import TracebackType
from typing import Self

from sqlalchemy.ext.asyncio import AsyncSession

from glass_pricing.infrastructure.repositories import (
    CustomerRepository,
    GlassTypeRepository,
    InvoiceRepository,
    PaymentRepository,
    ShatafRateRepository,
)


class UnitOfWork:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self.customers = CustomerRepository(session)
        self.glass_types = GlassTypeRepository(session)
        self.shataf_rates = ShatafRateRepository(session)
        self.invoices = InvoiceRepository(session)
        self.payments = PaymentRepository(session)

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if exc_type is not None:
            await self.rollback()

    async def commit(self) -> None:
        await self._session.commit()

    async def rollback(self) -> None:
        await self._session.rollback()
