from datetime import UTC, datetime
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from glass_pricing.domain.models import Customer, CustomerType
from glass_pricing.domain.values import Money


_COLUMNS = "id, name, phone, address, customer_type, balance, created_at, updated_at"


def _to_customer(row: Any) -> Customer:
    return Customer(
        id=row.id,
        name=row.name,
        phone=row.phone,
        address=row.address,
        customer_type=CustomerType(row.customer_type),
        balance=Money.of(row.balance),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class CustomerRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, customer_id: str) -> Customer | None:
        result = await self._session.execute(
            text(f"SELECT {_COLUMNS} FROM customers WHERE id = :id"),
            {"id": customer_id},
        )
        row = result.fetchone()
        return _to_customer(row) if row else None

    async def get_for_update(self, customer_id: str) -> Customer | None:
        result = await self._session.execute(
            text(f"SELECT {_COLUMNS} FROM customers WHERE id = :id FOR UPDATE"),
            {"id": customer_id},
        )
        row = result.fetchone()
        return _to_customer(row) if row else None

    async def get_by_phone(self, phone: str) -> Customer | None:
        result = await self._session.execute(
            text(f"SELECT {_COLUMNS} FROM customers WHERE phone = :phone"),
            {"phone": phone},
        )
        row = result.fetchone()
        return _to_customer(row) if row else None

    async def add(self, customer: Customer) -> None:
        await self._session.execute(
            text("""
                INSERT INTO customers
                    (id, name, phone, address, customer_type, balance, created_at, updated_at)
                VALUES
                    (:id, :name, :phone, :address, :customer_type, :balance, :created_at, :updated_at)
            """),
            {
                "id": customer.id,
                "name": customer.name,
                "phone": customer.phone,
                "address": customer.address,
                "customer_type": customer.customer_type.value,
                "balance": customer.balance.amount,
                "created_at": customer.created_at,
                "updated_at": customer.updated_at,
            },
        )

    async def update_balance(self, customer_id: str, balance: Money) -> None:
        await self._session.execute(
            text("""
                UPDATE customers
                SET balance = :balance, updated_at = :updated_at
                WHERE id = :id
            """),
            {
                "id": customer_id,
                "balance": balance.amount,
                "updated_at": datetime.now(UTC),
            },
        )
