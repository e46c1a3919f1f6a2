"""Unit tests for RateCatalog lookups and band validation."""

from decimal import Decimal

import pytest

from glass_pricing.domain.cutting import ShatafType
from glass_pricing.domain.exceptions import RateBandOverlapError, RateNotFoundError, ValidationError
from glass_pricing.domain.models import ShatafRate
from glass_pricing.domain.rate_catalog import RateCatalog
from glass_pricing.domain.values import Money


def _rate(rate_id: str, low: str, high: str, price: str, active: bool = True) -> ShatafRate:
    return ShatafRate(
        id=rate_id,
        shataf_type=ShatafType.KHARAZAN,
        min_thickness=Decimal(low),
        max_thickness=Decimal(high),
        rate_per_meter=Money.of(price),
        active=active,
    )


@pytest.fixture
def catalog() -> RateCatalog:
    return RateCatalog.from_rates(
        [
            _rate("r-6", "5.1", "6", "19.20"),
            _rate("r-3", "0", "3", "12"),
            _rate("r-4", "3.1", "4", "14.40"),
        ]
    )


class TestFindRate:
    """Tests for RateCatalog.find_rate."""

    @pytest.mark.parametrize(
        ("thickness", "rate_id"),
        [("0", "r-3"), ("3", "r-3"), ("3.1", "r-4"), ("4", "r-4"), ("5.1", "r-6"), ("6", "r-6")],
    )
    def test_band_bounds_are_inclusive(self, catalog: RateCatalog, thickness: str, rate_id: str) -> None:
        assert catalog.find_rate(ShatafType.KHARAZAN, thickness).id == rate_id

    @pytest.mark.parametrize("thickness", ["3.05", "4.5", "6.5"])
    def test_gaps_have_no_rate(self, catalog: RateCatalog, thickness: str) -> None:
        with pytest.raises(RateNotFoundError) as exc_info:
            catalog.find_rate(ShatafType.KHARAZAN, thickness)
        assert exc_info.value.shataf_type == "KHARAZAN"
        assert exc_info.value.thickness == Decimal(thickness)

    def test_style_without_rates(self, catalog: RateCatalog) -> None:
        with pytest.raises(RateNotFoundError, match="No rate configured for cutting style JULIA at thickness 8 mm"):
            catalog.find_rate(ShatafType.JULIA, 8)

    def test_inactive_rates_are_skipped(self) -> None:
        catalog = RateCatalog.from_rates([_rate("r-old", "0", "3", "10", active=False)])
        with pytest.raises(RateNotFoundError):
            catalog.find_rate(ShatafType.KHARAZAN, 2)


class TestBandValidation:
    """Tests for write-time overlap checks."""

    def test_overlapping_band_is_rejected(self, catalog: RateCatalog) -> None:
        with pytest.raises(RateBandOverlapError) as exc_info:
            catalog.add(_rate("r-new", "2", "3.5", "13"))
        assert exc_info.value.existing == (Decimal("0"), Decimal("3"))

    def test_shared_boundary_overlaps(self, catalog: RateCatalog) -> None:
        """Closed bands that touch at one thickness still overlap."""
        with pytest.raises(RateBandOverlapError):
            catalog.check_can_activate(_rate("r-new", "6", "8", "21"))

    def test_inactive_band_may_overlap(self, catalog: RateCatalog) -> None:
        catalog.add(_rate("r-draft", "2", "3.5", "13", active=False))
        assert catalog.find_rate(ShatafType.KHARAZAN, "2").id == "r-3"

    def test_reactivating_same_rate_is_not_an_overlap(self, catalog: RateCatalog) -> None:
        catalog.check_can_activate(_rate("r-3", "0", "3", "12"))

    def test_manual_style_takes_no_rates(self) -> None:
        laser = ShatafRate.create(ShatafType.LASER, 0, 10, Money.of("5"))
        with pytest.raises(ValidationError, match="priced manually"):
            RateCatalog().add(laser)
