from dataclasses import dataclass
from decimal import Decimal

import structlog

from glass_pricing.application.unit_of_work import UnitOfWork
from glass_pricing.domain.exceptions import GlassTypeNotFoundError
from glass_pricing.domain.models import GlassType
from glass_pricing.domain.values import Money


logger = structlog.get_logger()


@dataclass
class CreateGlassTypeCommand:
    name: str
    thickness: Decimal
    price_per_square_meter: Decimal
    color: str | None = None


class GlassTypeService:
    """Manages the glass catalog.

    Glass types are never deleted because issued invoice lines reference
    them; retiring one means deactivating it.
    """

    def __init__(self, uow: UnitOfWork) -> None:
        self.uow = uow

    async def create_glass_type(self, cmd: CreateGlassTypeCommand) -> GlassType:
        glass_type = GlassType.create(
            name=cmd.name,
            thickness=cmd.thickness,
            price_per_square_meter=Money.of(cmd.price_per_square_meter),
            color=cmd.color,
        )
        async with self.uow:
            await self.uow.glass_types.add(glass_type)
            await self.uow.commit()

        logger.info(
            "glass_type_created",
            glass_type_id=glass_type.id,
            name=glass_type.name,
            thickness=glass_type.thickness,
            price_per_square_meter=glass_type.price_per_square_meter,
        )
        return glass_type

    async def rename(self, glass_type_id: str, name: str) -> GlassType:
        async with self.uow:
            glass_type = await self._get(glass_type_id)
            glass_type.update_name(name)
            await self.uow.glass_types.update(glass_type)
            await self.uow.commit()

        logger.info("glass_type_renamed", glass_type_id=glass_type_id, name=glass_type.name)
        return glass_type

    async def reprice(self, glass_type_id: str, price_per_square_meter: Decimal) -> GlassType:
        """Change the price for future lines; issued invoices keep their stored prices."""
        async with self.uow:
            glass_type = await self._get(glass_type_id)
            glass_type.update_price(Money.of(price_per_square_meter))
            await self.uow.glass_types.update(glass_type)
            await self.uow.commit()

        logger.info(
            "glass_type_repriced",
            glass_type_id=glass_type_id,
            price_per_square_meter=glass_type.price_per_square_meter,
        )
        return glass_type

    async def activate(self, glass_type_id: str) -> GlassType:
        async with self.uow:
            glass_type = await self._get(glass_type_id)
            glass_type.activate()
            await self.uow.glass_types.update(glass_type)
            await self.uow.commit()

        logger.info("glass_type_activated", glass_type_id=glass_type_id)
        return glass_type

    async def deactivate(self, glass_type_id: str) -> GlassType:
        async with self.uow:
            glass_type = await self._get(glass_type_id)
            glass_type.deactivate()
            await self.uow.glass_types.update(glass_type)
            await self.uow.commit()

        logger.info("glass_type_deactivated", glass_type_id=glass_type_id)
        return glass_type

    async def get_glass_type(self, glass_type_id: str) -> GlassType:
        return await self._get(glass_type_id)

    async def active_glass_types(self) -> list[GlassType]:
        return await self.uow.glass_types.get_active()

    async def _get(self, glass_type_id: str) -> GlassType:
        glass_type = await self.uow.glass_types.get(glass_type_id)
        if glass_type is None:
            raise GlassTypeNotFoundError(glass_type_id)
        return glass_type
