from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from glass_pricing.domain.models import Payment, PaymentMethod
from glass_pricing.domain.values import Money


_COLUMNS = "id, customer_id, invoice_id, amount, method, paid_at, notes, created_by"


def _to_payment(row: Any) -> Payment:
    return Payment(
        id=row.id,
        customer_id=row.customer_id,
        invoice_id=row.invoice_id,
        amount=Money.of(row.amount),
        method=PaymentMethod(row.method),
        paid_at=row.paid_at,
        notes=row.notes,
        created_by=row.created_by,
    )


class PaymentRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, payment: Payment) -> None:
        await self._session.execute(
            text("""
                INSERT INTO payments
                    (id, customer_id, invoice_id, amount, method, paid_at, notes, created_by)
                VALUES
                    (:id, :customer_id, :invoice_id, :amount, :method, :paid_at, :notes, :created_by)
            """),
            {
                "id": payment.id,
                "customer_id": payment.customer_id,
                "invoice_id": payment.invoice_id,
                "amount": payment.amount.amount,
                "method": payment.method.value,
                "paid_at": payment.paid_at,
                "notes": payment.notes,
                "created_by": payment.created_by,
            },
        )

    async def get_by_customer_id(self, customer_id: str) -> list[Payment]:
        result = await self._session.execute(
            text(f"""
                SELECT {_COLUMNS}
                FROM payments
                WHERE customer_id = :customer_id
                ORDER BY paid_at DESC
            """),
            {"customer_id": customer_id},
        )
        return [_to_payment(row) for row in result.fetchall()]

    async def get_by_invoice_id(self, invoice_id: str) -> list[Payment]:
        result = await self._session.execute(
            text(f"""
                SELECT {_COLUMNS}
                FROM payments
                WHERE invoice_id = :invoice_id
                ORDER BY paid_at
            """),
            {"invoice_id": invoice_id},
        )
        return [_to_payment(row) for row in result.fetchall()]
