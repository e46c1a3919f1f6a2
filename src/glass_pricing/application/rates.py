from dataclasses import dataclass
from decimal import Decimal

import structlog

from glass_pricing.application.unit_of_work import UnitOfWork
from glass_pricing.domain.cutting import ShatafType
from glass_pricing.domain.exceptions import RateNotFoundByIdError
from glass_pricing.domain.models import ShatafRate
from glass_pricing.domain.rate_catalog import RateCatalog
from glass_pricing.domain.values import Money


logger = structlog.get_logger()


DEFAULT_BANDS: list[tuple[Decimal, Decimal, Decimal]] = [
    # (min mm, max mm, multiplier over the base rate)
    (Decimal("0"), Decimal("3"), Decimal("1.0")),
    (Decimal("3.1"), Decimal("4"), Decimal("1.2")),
    (Decimal("4.1"), Decimal("5"), Decimal("1.4")),
    (Decimal("5.1"), Decimal("6"), Decimal("1.6")),
    (Decimal("6.1"), Decimal("8"), Decimal("1.8")),
    (Decimal("8.1"), Decimal("10"), Decimal("2.0")),
    (Decimal("10.1"), Decimal("12"), Decimal("2.2")),
    (Decimal("12.1"), Decimal("50"), Decimal("2.5")),
]

DEFAULT_BASE_RATES: dict[ShatafType, Decimal] = {
    ShatafType.KHARAZAN: Decimal("12"),
    ShatafType.SHAMBORLEH: Decimal("15"),
    ShatafType.ONE_CM: Decimal("8"),
    ShatafType.TWO_CM: Decimal("10"),
    ShatafType.THREE_CM: Decimal("12"),
    ShatafType.JULIA: Decimal("18"),
    ShatafType.SANDING: Decimal("20"),
}


class RateCatalogCache:
    """Holds one loaded catalog until a rate changes."""

    def __init__(self) -> None:
        self._catalog: RateCatalog | None = None

    @property
    def is_loaded(self) -> bool:
        return self._catalog is not None

    async def get(self, uow: UnitOfWork) -> RateCatalog:
        if self._catalog is None:
            rates = await uow.shataf_rates.get_all()
            self._catalog = RateCatalog.from_rates(rates)
            logger.info("rate_catalog_loaded", rates=len(rates))
        return self._catalog

    def invalidate(self) -> None:
        self._catalog = None


@dataclass
class CreateRateCommand:
    shataf_type: ShatafType
    min_thickness: Decimal
    max_thickness: Decimal
    rate_per_meter: Decimal


class ShatafRateService:
    def __init__(self, uow: UnitOfWork, cache: RateCatalogCache) -> None:
        self.uow = uow
        self.cache = cache

    async def create_rate(self, cmd: CreateRateCommand) -> ShatafRate:
        rate = ShatafRate.create(
            shataf_type=cmd.shataf_type,
            min_thickness=cmd.min_thickness,
            max_thickness=cmd.max_thickness,
            rate_per_meter=Money.of(cmd.rate_per_meter),
        )
        async with self.uow:
            await self._check_can_activate(rate)
            await self.uow.shataf_rates.add(rate)
            await self.uow.commit()

        self.cache.invalidate()
        logger.info(
            "rate_created",
            rate_id=rate.id,
            shataf_type=rate.shataf_type,
            min_thickness=rate.min_thickness,
            max_thickness=rate.max_thickness,
            rate_per_meter=rate.rate_per_meter,
        )
        return rate

    async def update_rate(self, rate_id: str, rate_per_meter: Decimal) -> ShatafRate:
        async with self.uow:
            rate = await self._get(rate_id)
            rate.update_rate(Money.of(rate_per_meter))
            await self.uow.shataf_rates.update(rate)
            await self.uow.commit()

        self.cache.invalidate()
        logger.info("rate_updated", rate_id=rate_id, rate_per_meter=rate.rate_per_meter)
        return rate

    async def activate_rate(self, rate_id: str) -> ShatafRate:
        async with self.uow:
            rate = await self._get(rate_id)
            if not rate.active:
                await self._check_can_activate(rate)
                rate.activate()
                await self.uow.shataf_rates.update(rate)
                await self.uow.commit()

        self.cache.invalidate()
        logger.info("rate_activated", rate_id=rate_id)
        return rate

    async def deactivate_rate(self, rate_id: str) -> ShatafRate:
        async with self.uow:
            rate = await self._get(rate_id)
            rate.deactivate()
            await self.uow.shataf_rates.update(rate)
            await self.uow.commit()

        self.cache.invalidate()
        logger.info("rate_deactivated", rate_id=rate_id)
        return rate

    async def delete_rate(self, rate_id: str) -> None:
        async with self.uow:
            rate = await self._get(rate_id)
            await self.uow.shataf_rates.delete(rate.id)
            await self.uow.commit()

        self.cache.invalidate()
        logger.info("rate_deleted", rate_id=rate_id, shataf_type=rate.shataf_type)

    async def rates_for_style(self, shataf_type: ShatafType) -> list[ShatafRate]:
        return await self.uow.shataf_rates.get_by_style(shataf_type)

    async def initialize_default_rates(self) -> list[ShatafRate]:
        """Seed the standard thickness bands for every style that has no rates yet."""
        created: list[ShatafRate] = []
        async with self.uow:
            for shataf_type, base_rate in DEFAULT_BASE_RATES.items():
                await self.uow.shataf_rates.lock_style(shataf_type)
                if await self.uow.shataf_rates.get_by_style(shataf_type):
                    logger.info("default_rates_skipped", shataf_type=shataf_type)
                    continue
                for min_thickness, max_thickness, multiplier in DEFAULT_BANDS:
                    rate = ShatafRate.create(
                        shataf_type=shataf_type,
                        min_thickness=min_thickness,
                        max_thickness=max_thickness,
                        rate_per_meter=Money.of(base_rate * multiplier),
                    )
                    await self.uow.shataf_rates.add(rate)
                    created.append(rate)
            await self.uow.commit()

        self.cache.invalidate()
        logger.info("default_rates_initialized", rates=len(created))
        return created

    async def _get(self, rate_id: str) -> ShatafRate:
        rate = await self.uow.shataf_rates.get(rate_id)
        if rate is None:
            raise RateNotFoundByIdError(rate_id)
        return rate

    async def _check_can_activate(self, rate: ShatafRate) -> None:
        # Held until commit so concurrent writers see each other's bands
        await self.uow.shataf_rates.lock_style(rate.shataf_type)
        siblings = await self.uow.shataf_rates.get_by_style(rate.shataf_type)
        RateCatalog.from_rates(siblings).check_can_activate(rate)
