import time
from collections.abc import Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from prometheus_client import Counter, Histogram


LINES_PRICED_TOTAL = Counter(
    "invoice_lines_priced_total",
    "Total number of invoice lines priced",
    ["pricing_mode"],
)

PRICING_FAILURES_TOTAL = Counter(
    "invoice_line_pricing_failures_total",
    "Total number of invoice lines that failed to price",
    ["error"],
)

PAYMENTS_APPLIED_TOTAL = Counter(
    "payments_applied_total",
    "Total number of payments applied to invoices",
    ["kind"],
)

BALANCE_INCONSISTENCIES_TOTAL = Counter(
    "balance_inconsistencies_total",
    "Total number of cached customer balances found out of sync with invoices",
)

LINE_PRICING_DURATION_SECONDS = Histogram(
    "invoice_line_pricing_duration_seconds",
    "Invoice line pricing duration",
    buckets=[0.0005, 0.001, 0.0025, 0.005, 0.01, 0.025, 0.05, 0.1],
)


P = ParamSpec("P")
R = TypeVar("R")


def track_pricing_duration(func: Callable[P, R]) -> Callable[P, R]:
    @wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            LINE_PRICING_DURATION_SECONDS.observe(time.perf_counter() - start)

    return wrapper
