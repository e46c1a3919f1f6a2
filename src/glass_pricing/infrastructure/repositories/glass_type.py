from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from glass_pricing.domain.models import GlassType
from glass_pricing.domain.values import Money


_COLUMNS = "id, name, color, thickness, price_per_square_meter, active"


def _to_glass_type(row: Any) -> GlassType:
    return GlassType(
        id=row.id,
        name=row.name,
        color=row.color,
        thickness=row.thickness,
        price_per_square_meter=Money.of(row.price_per_square_meter),
        active=row.active,
    )


class GlassTypeRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, glass_type_id: str) -> GlassType | None:
        result = await self._session.execute(
            text(f"SELECT {_COLUMNS} FROM glass_types WHERE id = :id"),
            {"id": glass_type_id},
        )
        row = result.fetchone()
        return _to_glass_type(row) if row else None

    async def get_active(self) -> list[GlassType]:
        result = await self._session.execute(
            text(f"SELECT {_COLUMNS} FROM glass_types WHERE active ORDER BY name"),
        )
        return [_to_glass_type(row) for row in result.fetchall()]

    async def add(self, glass_type: GlassType) -> None:
        await self._session.execute(
            text("""
                INSERT INTO glass_types (id, name, color, thickness, price_per_square_meter, active)
                VALUES (:id, :name, :color, :thickness, :price_per_square_meter, :active)
            """),
            self._params(glass_type),
        )

    async def update(self, glass_type: GlassType) -> None:
        await self._session.execute(
            text("""
                UPDATE glass_types
                SET name = :name,
                    color = :color,
                    price_per_square_meter = :price_per_square_meter,
                    active = :active
                WHERE id = :id
            """),
            self._params(glass_type),
        )

    @staticmethod
    def _params(glass_type: GlassType) -> dict[str, Any]:
        return {
            "id": glass_type.id,
            "name": glass_type.name,
            "color": glass_type.color,
            "thickness": glass_type.thickness,
            "price_per_square_meter": glass_type.price_per_square_meter.amount,
            "active": glass_type.active,
        }
