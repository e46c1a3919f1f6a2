from decimal import Decimal
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from glass_pricing.domain.cutting import ShatafType
from glass_pricing.domain.models import ShatafRate
from glass_pricing.domain.values import Money


_COLUMNS = "id, shataf_type, min_thickness, max_thickness, rate_per_meter, active"


def _to_rate(row: Any) -> ShatafRate:
    return ShatafRate(
        id=row.id,
        shataf_type=ShatafType(row.shataf_type),
        min_thickness=row.min_thickness,
        max_thickness=row.max_thickness,
        rate_per_meter=Money.of(row.rate_per_meter),
        active=row.active,
    )


class ShatafRateRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, rate_id: str) -> ShatafRate | None:
        result = await self._session.execute(
            text(f"SELECT {_COLUMNS} FROM shataf_rates WHERE id = :id"),
            {"id": rate_id},
        )
        row = result.fetchone()
        return _to_rate(row) if row else None

    async def get_by_style_and_thickness(self, shataf_type: ShatafType, thickness: Decimal) -> ShatafRate | None:
        result = await self._session.execute(
            text(f"""
                SELECT {_COLUMNS}
                FROM shataf_rates
                WHERE shataf_type = :shataf_type
                  AND active
                  AND :thickness BETWEEN min_thickness AND max_thickness
            """),
            {"shataf_type": shataf_type.value, "thickness": thickness},
        )
        row = result.fetchone()
        return _to_rate(row) if row else None

    async def get_by_style(self, shataf_type: ShatafType) -> list[ShatafRate]:
        result = await self._session.execute(
            text(f"""
                SELECT {_COLUMNS}
                FROM shataf_rates
                WHERE shataf_type = :shataf_type
                ORDER BY min_thickness
            """),
            {"shataf_type": shataf_type.value},
        )
        return [_to_rate(row) for row in result.fetchall()]

    async def lock_style(self, shataf_type: ShatafType) -> None:
        """Serialize band writes for one style until the transaction ends.

        An advisory lock also covers a style that has no rows yet, which
        ``FOR UPDATE`` cannot.
        """
        await self._session.execute(
            text("SELECT pg_advisory_xact_lock(hashtext(:lock_key))"),
            {"lock_key": f"shataf_rates:{shataf_type.value}"},
        )

    async def get_all(self) -> list[ShatafRate]:
        result = await self._session.execute(
            text(f"SELECT {_COLUMNS} FROM shataf_rates ORDER BY shataf_type, min_thickness"),
        )
        return [_to_rate(row) for row in result.fetchall()]

    async def add(self, rate: ShatafRate) -> None:
        await self._session.execute(
            text("""
                INSERT INTO shataf_rates
                    (id, shataf_type, min_thickness, max_thickness, rate_per_meter, active)
                VALUES
                    (:id, :shataf_type, :min_thickness, :max_thickness, :rate_per_meter, :active)
            """),
            self._params(rate),
        )

    async def update(self, rate: ShatafRate) -> None:
        await self._session.execute(
            text("""
                UPDATE shataf_rates
                SET rate_per_meter = :rate_per_meter,
                    active = :active
                WHERE id = :id
            """),
            self._params(rate),
        )

    async def delete(self, rate_id: str) -> None:
        await self._session.execute(
            text("DELETE FROM shataf_rates WHERE id = :id"),
            {"id": rate_id},
        )

    @staticmethod
    def _params(rate: ShatafRate) -> dict[str, Any]:
        return {
            "id": rate.id,
            "shataf_type": rate.shataf_type.value,
            "min_thickness": rate.min_thickness,
            "max_thickness": rate.max_thickness,
            "rate_per_meter": rate.rate_per_meter.amount,
            "active": rate.active,
        }
