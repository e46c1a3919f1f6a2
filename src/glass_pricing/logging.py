import logging
import sys
from decimal import Decimal
from enum import Enum
from typing import Literal

import structlog
from structlog.typing import EventDict, WrappedLogger

from glass_pricing.domain.values import Area, Money


def render_domain_values(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    """Flatten amounts, areas and enum members so both renderers print them plainly."""
    for key, value in event_dict.items():
        if isinstance(value, Money | Area):
            event_dict[key] = str(value)
        elif isinstance(value, Decimal):
            event_dict[key] = format(value, "f")
        elif isinstance(value, Enum):
            event_dict[key] = value.value
    return event_dict


def configure_logging(
    level: str = "INFO",
    log_format: Literal["json", "console"] = "json",
) -> None:
    shared_processors: list[structlog.typing.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.contextvars.merge_contextvars,
        render_domain_values,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    renderer: structlog.typing.Processor
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, level.upper()))

    # asyncpg and the engine log every statement at INFO
    for logger_name in ["sqlalchemy.engine", "asyncpg", "asyncio"]:
        logging.getLogger(logger_name).setLevel(logging.WARNING)
