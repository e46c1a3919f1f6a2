"""In-memory index over the cutting-rate table.

Active rates are kept per style, sorted by ``min_thickness``. Because active
bands of one style never overlap, a binary search on the lower bounds finds
the only candidate band for a thickness.
"""

from bisect import bisect_right, insort
from collections import defaultdict
from collections.abc import Iterable
from decimal import Decimal

from glass_pricing.domain.cutting import ShatafType
from glass_pricing.domain.exceptions import RateBandOverlapError, RateNotFoundError, ValidationError
from glass_pricing.domain.models import ShatafRate
from glass_pricing.domain.values import Numeric, to_decimal


def _lower_bound(rate: ShatafRate) -> Decimal:
    return rate.min_thickness


class RateCatalog:
    def __init__(self) -> None:
        self._active: dict[ShatafType, list[ShatafRate]] = defaultdict(list)

    @classmethod
    def from_rates(cls, rates: Iterable[ShatafRate]) -> "RateCatalog":
        catalog = cls()
        for rate in rates:
            catalog.add(rate)
        return catalog

    def check_can_activate(self, rate: ShatafRate) -> None:
        """Raise if ``rate`` cannot be active next to the rates already indexed."""
        if not rate.shataf_type.uses_rate_table:
            raise ValidationError(f"Cutting style {rate.shataf_type.value} is priced manually and takes no rates")
        for existing in self._active[rate.shataf_type]:
            if existing.id != rate.id and existing.overlaps(rate):
                raise RateBandOverlapError(rate.shataf_type.value, rate.band, existing.band)

    def add(self, rate: ShatafRate) -> None:
        """Index ``rate`` if it is active; inactive rates are ignored."""
        if not rate.active:
            return
        self.check_can_activate(rate)
        insort(self._active[rate.shataf_type], rate, key=_lower_bound)

    def find_rate(self, shataf_type: ShatafType, thickness: Numeric) -> ShatafRate:
        thickness = to_decimal(thickness)
        bands = self._active.get(shataf_type, [])
        index = bisect_right(bands, thickness, key=_lower_bound)
        if index:
            candidate = bands[index - 1]
            if candidate.applies_to_thickness(thickness):
                return candidate
        raise RateNotFoundError(shataf_type.value, thickness)
