from dataclasses import dataclass
from decimal import Decimal

import structlog

from glass_pricing.application.unit_of_work import UnitOfWork
from glass_pricing.domain.exceptions import BalanceInconsistencyWarning
from glass_pricing.domain.models import Customer
from glass_pricing.domain.values import Money
from glass_pricing.infrastructure.metrics import BALANCE_INCONSISTENCIES_TOTAL


logger = structlog.get_logger()


@dataclass(frozen=True)
class ReconciliationReport:
    customer_id: str
    cached_balance: Money
    calculated_balance: Money
    warning: BalanceInconsistencyWarning | None = None

    @property
    def is_consistent(self) -> bool:
        return self.warning is None

    @property
    def discrepancy(self) -> Decimal:
        return self.cached_balance.amount - self.calculated_balance.amount


class BalanceReconciliationService:
    """Derives customer balances from invoices, the only source of truth.

    A customer's stored ``balance`` is a cached projection. This service
    audits it and reports drift; it never corrects the cache itself.
    """

    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    async def calculate_customer_balance(self, customer_id: str) -> Money:
        invoices = await self.uow.invoices.get_by_customer_id(customer_id)
        balance = Money.zero()
        for invoice in invoices:
            balance = balance.add(invoice.remaining_balance)

        logger.debug(
            "customer_balance_calculated",
            customer_id=customer_id,
            balance=balance,
            invoice_count=len(invoices),
        )
        return balance

    async def is_balance_consistent(self, customer_id: str, cached_balance: Money) -> bool:
        report = await self._compare(customer_id, cached_balance)
        return report.is_consistent

    async def get_reconciled_balance(self, customer_id: str) -> Money:
        return await self.calculate_customer_balance(customer_id)

    async def reconcile(self, customer: Customer) -> ReconciliationReport:
        return await self._compare(customer.id, customer.balance)

    async def _compare(self, customer_id: str, cached_balance: Money) -> ReconciliationReport:
        calculated = await self.calculate_customer_balance(customer_id)
        if calculated == cached_balance:
            return ReconciliationReport(customer_id, cached_balance, calculated)

        warning = BalanceInconsistencyWarning(customer_id, cached_balance.amount, calculated.amount)
        BALANCE_INCONSISTENCIES_TOTAL.inc()
        logger.warning(
            "balance_inconsistency_detected",
            customer_id=customer_id,
            cached_balance=cached_balance,
            calculated_balance=calculated,
        )
        return ReconciliationReport(customer_id, cached_balance, calculated, warning)
