#!/usr/bin/env python3
"""Seed the default cutting-rate table.

Creates the standard thickness bands for every rate-table style that has no
rates yet. Styles that already carry rates are left untouched, so the script
can be rerun safely after a deploy.
"""
import asyncio

import structlog

from glass_pricing.application.rates import RateCatalogCache, ShatafRateService
from glass_pricing.application.unit_of_work import UnitOfWork
from glass_pricing.config import settings
from glass_pricing.infrastructure.database import Database
from glass_pricing.logging import configure_logging


logger = structlog.get_logger()


async def main() -> None:
    configure_logging(settings.log_level, settings.log_format)
    logger.info("rate_seeding_starting", database_url=settings.database_url.split("@")[-1])

    database = Database.from_settings(settings)
    try:
        async with database.session() as session:
            service = ShatafRateService(UnitOfWork(session), RateCatalogCache())
            created = await service.initialize_default_rates()
    finally:
        await database.close()

    logger.info("rate_seeding_complete", rates_created=len(created))


if __name__ == "__main__":
    asyncio.run(main())
