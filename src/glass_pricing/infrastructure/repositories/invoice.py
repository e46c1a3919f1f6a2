from collections import defaultdict
from datetime import UTC, date, datetime, time, timedelta
from typing import Any, cast

from sqlalchemy import CursorResult, bindparam, text
from sqlalchemy.ext.asyncio import AsyncSession

from glass_pricing.domain.cutting import FarmaType, ShatafType
from glass_pricing.domain.models import Invoice, InvoiceLine, LineCalculation
from glass_pricing.domain.values import Area, DimensionUnit, Dimensions, Money


_INVOICE_COLUMNS = "id, customer_id, amount_paid, notes, issue_date, payment_date"

_LINE_COLUMNS = """
    id, invoice_id, position, glass_type_id, width, height, unit,
    shataf_type, farma_type, diameter, manual_cutting_price, quantity,
    area, shataf_meters, glass_price, cutting_price
"""


def _to_line(row: Any) -> InvoiceLine:
    return InvoiceLine(
        id=row.id,
        glass_type_id=row.glass_type_id,
        dimensions=Dimensions(row.width, row.height, DimensionUnit(row.unit)),
        shataf_type=ShatafType(row.shataf_type),
        farma_type=FarmaType(row.farma_type),
        calculation=LineCalculation(
            area=Area.of_square_meters(row.area),
            shataf_meters=row.shataf_meters,
            glass_price=Money.of(row.glass_price),
            cutting_price=Money.of(row.cutting_price),
        ),
        diameter=row.diameter,
        manual_cutting_price=Money.of(row.manual_cutting_price) if row.manual_cutting_price is not None else None,
        quantity=row.quantity,
    )


def _to_invoice(row: Any, lines: list[InvoiceLine]) -> Invoice:
    return Invoice(
        id=row.id,
        customer_id=row.customer_id,
        lines=lines,
        amount_paid=Money.of(row.amount_paid),
        notes=row.notes,
        issue_date=row.issue_date,
        payment_date=row.payment_date,
    )


class InvoiceRepository:
    """Stores invoices with their lines.

    Totals, remaining balance and status are written alongside the header so
    they can be queried, but are always recomputed from the lines on load.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, invoice_id: str) -> Invoice | None:
        result = await self._session.execute(
            text(f"SELECT {_INVOICE_COLUMNS} FROM invoices WHERE id = :id"),
            {"id": invoice_id},
        )
        row = result.fetchone()
        if not row:
            return None
        lines = await self._load_lines([row.id])
        return _to_invoice(row, lines[row.id])

    async def get_by_customer_id(self, customer_id: str) -> list[Invoice]:
        result = await self._session.execute(
            text(f"""
                SELECT {_INVOICE_COLUMNS}
                FROM invoices
                WHERE customer_id = :customer_id
                ORDER BY issue_date, id
            """),
            {"customer_id": customer_id},
        )
        return await self._hydrate(result.fetchall())

    async def get_by_date_range(self, start: date, end: date) -> list[Invoice]:
        result = await self._session.execute(
            text(f"""
                SELECT {_INVOICE_COLUMNS}
                FROM invoices
                WHERE issue_date >= :start AND issue_date < :end
                ORDER BY issue_date, id
            """),
            {
                "start": datetime.combine(start, time.min, tzinfo=UTC),
                "end": datetime.combine(end + timedelta(days=1), time.min, tzinfo=UTC),
            },
        )
        return await self._hydrate(result.fetchall())

    async def exists(self, invoice_id: str) -> bool:
        result = await self._session.execute(
            text("SELECT 1 FROM invoices WHERE id = :id"),
            {"id": invoice_id},
        )
        return result.fetchone() is not None

    async def add(self, invoice: Invoice) -> None:
        await self._session.execute(
            text("""
                INSERT INTO invoices
                    (id, customer_id, total_price, amount_paid, remaining_balance,
                     status, notes, issue_date, payment_date)
                VALUES
                    (:id, :customer_id, :total_price, :amount_paid, :remaining_balance,
                     :status, :notes, :issue_date, :payment_date)
            """),
            {
                **self._payment_params(invoice),
                "customer_id": invoice.customer_id,
                "notes": invoice.notes,
                "issue_date": invoice.issue_date,
            },
        )
        for position, line in enumerate(invoice.lines):
            await self._add_line(invoice.id, position, line)

    async def update_payment_state(self, invoice: Invoice) -> None:
        await self._session.execute(
            text("""
                UPDATE invoices
                SET total_price = :total_price,
                    amount_paid = :amount_paid,
                    remaining_balance = :remaining_balance,
                    status = :status,
                    payment_date = :payment_date
                WHERE id = :id
            """),
            self._payment_params(invoice),
        )

    async def delete(self, invoice_id: str) -> bool:
        await self._session.execute(
            text("DELETE FROM invoice_lines WHERE invoice_id = :id"),
            {"id": invoice_id},
        )
        result = cast(
            "CursorResult[Any]",
            await self._session.execute(
                text("DELETE FROM invoices WHERE id = :id"),
                {"id": invoice_id},
            ),
        )
        return (result.rowcount or 0) > 0

    async def _add_line(self, invoice_id: str, position: int, line: InvoiceLine) -> None:
        calculation = line.calculation
        await self._session.execute(
            text("""
                INSERT INTO invoice_lines
                    (id, invoice_id, position, glass_type_id, width, height, unit,
                     shataf_type, farma_type, diameter, manual_cutting_price, quantity,
                     area, shataf_meters, glass_price, cutting_price)
                VALUES
                    (:id, :invoice_id, :position, :glass_type_id, :width, :height, :unit,
                     :shataf_type, :farma_type, :diameter, :manual_cutting_price, :quantity,
                     :area, :shataf_meters, :glass_price, :cutting_price)
            """),
            {
                "id": line.id,
                "invoice_id": invoice_id,
                "position": position,
                "glass_type_id": line.glass_type_id,
                "width": line.dimensions.width,
                "height": line.dimensions.height,
                "unit": line.dimensions.unit.value,
                "shataf_type": line.shataf_type.value,
                "farma_type": line.farma_type.value,
                "diameter": line.diameter,
                "manual_cutting_price": line.manual_cutting_price.amount if line.manual_cutting_price else None,
                "quantity": line.quantity,
                "area": calculation.area.square_meters,
                "shataf_meters": calculation.shataf_meters,
                "glass_price": calculation.glass_price.amount,
                "cutting_price": calculation.cutting_price.amount,
            },
        )

    async def _hydrate(self, rows: list[Any]) -> list[Invoice]:
        if not rows:
            return []
        lines = await self._load_lines([row.id for row in rows])
        return [_to_invoice(row, lines[row.id]) for row in rows]

    async def _load_lines(self, invoice_ids: list[str]) -> dict[str, list[InvoiceLine]]:
        result = await self._session.execute(
            text(f"""
                SELECT {_LINE_COLUMNS}
                FROM invoice_lines
                WHERE invoice_id IN :invoice_ids
                ORDER BY invoice_id, position
            """).bindparams(bindparam("invoice_ids", expanding=True)),
            {"invoice_ids": invoice_ids},
        )
        lines: dict[str, list[InvoiceLine]] = defaultdict(list)
        for row in result.fetchall():
            lines[row.invoice_id].append(_to_line(row))
        return lines

    @staticmethod
    def _payment_params(invoice: Invoice) -> dict[str, Any]:
        return {
            "id": invoice.id,
            "total_price": invoice.total_price.amount,
            "amount_paid": invoice.amount_paid.amount,
            "remaining_balance": invoice.remaining_balance.amount,
            "status": invoice.status.value,
            "payment_date": invoice.payment_date,
        }
