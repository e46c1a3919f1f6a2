"""Unit tests for InvoicePricingService."""

from decimal import Decimal
from types import SimpleNamespace

import pytest

from glass_pricing.application.pricing import InvoicePricingService
from glass_pricing.domain.cutting import FarmaType, PricingMode, ShatafType
from glass_pricing.domain.exceptions import (
    ManualPriceRequiredError,
    RateNotFoundError,
    UnrecognizedStyleError,
    ValidationError,
)
from glass_pricing.domain.models import GlassType
from glass_pricing.domain.rate_catalog import RateCatalog
from glass_pricing.domain.values import Area, DimensionUnit, Dimensions, Money
from glass_pricing.infrastructure.metrics import LINES_PRICED_TOTAL, PRICING_FAILURES_TOTAL


@pytest.fixture
def service(rate_catalog: RateCatalog) -> InvoicePricingService:
    return InvoicePricingService(rate_catalog)


class TestRatedStyles:
    """Styles priced from the rate table."""

    def test_sanding_is_priced_by_area(self, service: InvoicePricingService, clear_glass: GlassType) -> None:
        """1000 x 500 mm at 150/m2 with sanding at 20/m2: 75 + 10 = 85."""
        result = service.calculate_line_price(
            Dimensions.of_millimeters(1000, 500),
            clear_glass,
            ShatafType.SANDING,
            FarmaType.NORMAL_SHATAF,
        )

        assert result.area == Area.of_square_meters("0.5")
        assert result.glass_price == Money.of("75")
        assert result.cutting_price == Money.of("10")
        assert result.total_price == Money.of("85")

    def test_kharazan_is_priced_by_shataf_meters(
        self, service: InvoicePricingService, clear_glass: GlassType
    ) -> None:
        """Normal shataf on 1000 x 500 mm is 3.0 m at 12.50 per meter."""
        result = service.calculate_line_price(
            Dimensions.of_millimeters(1000, 500),
            clear_glass,
            ShatafType.KHARAZAN,
            FarmaType.NORMAL_SHATAF,
        )

        assert result.shataf_meters == Decimal("3.0")
        assert result.cutting_price == Money.of("37.50")
        assert result.total_price == Money.of("112.50")

    def test_centimeter_input_prices_the_same(self, service: InvoicePricingService, clear_glass: GlassType) -> None:
        result = service.calculate_line_price(
            Dimensions(Decimal(100), Decimal(50), DimensionUnit.CM),
            clear_glass,
            ShatafType.KHARAZAN,
            FarmaType.NORMAL_SHATAF,
        )
        assert result.cutting_price == Money.of("37.50")

    def test_wheel_cut_diameter_is_in_line_unit(self, service: InvoicePricingService, clear_glass: GlassType) -> None:
        """A 50 mm wheel is 0.3 shataf meters."""
        result = service.calculate_line_price(
            Dimensions.of_millimeters(1000, 500),
            clear_glass,
            ShatafType.KHARAZAN,
            FarmaType.WHEEL_CUT,
            diameter=Decimal(50),
        )
        assert result.shataf_meters == Decimal("0.300")
        assert result.cutting_price == Money.of("3.75")

    def test_wheel_cut_without_diameter_fails(self, service: InvoicePricingService, clear_glass: GlassType) -> None:
        with pytest.raises(ValidationError, match="diameter"):
            service.calculate_line_price(
                Dimensions.of_millimeters(1000, 500),
                clear_glass,
                ShatafType.KHARAZAN,
                FarmaType.WHEEL_CUT,
            )

    def test_thickness_outside_every_band(self, service: InvoicePricingService) -> None:
        """Thickness comes from the glass type; 10 mm has no configured band here."""
        thick = GlassType.create("Clear 10mm", 10, Money.of("200"))
        with pytest.raises(RateNotFoundError) as exc_info:
            service.calculate_line_price(
                Dimensions.of_millimeters(1000, 500),
                thick,
                ShatafType.KHARAZAN,
                FarmaType.NORMAL_SHATAF,
            )
        assert exc_info.value.thickness == Decimal("10")


class TestManualStyles:
    """Styles priced by the operator."""

    def test_laser_without_price_fails(self, service: InvoicePricingService, clear_glass: GlassType) -> None:
        with pytest.raises(ManualPriceRequiredError, match="LASER"):
            service.calculate_line_price(
                Dimensions.of_millimeters(1000, 500),
                clear_glass,
                ShatafType.LASER,
                FarmaType.HAND_SHATAF,
            )

    def test_zero_manual_price_fails(self, service: InvoicePricingService, clear_glass: GlassType) -> None:
        with pytest.raises(ManualPriceRequiredError):
            service.calculate_line_price(
                Dimensions.of_millimeters(1000, 500),
                clear_glass,
                ShatafType.ROTATION,
                FarmaType.ROTATION,
                manual_cutting_price=Money.zero(),
            )

    def test_manual_price_is_used_as_is(self, clear_glass: GlassType) -> None:
        """Manual styles never consult the rate table."""
        service = InvoicePricingService(RateCatalog())
        result = service.calculate_line_price(
            Dimensions.of_millimeters(1000, 500),
            clear_glass,
            ShatafType.TABLEAUX,
            FarmaType.TABLEAUX,
            manual_cutting_price=Money.of("40"),
        )
        assert result.shataf_meters == Decimal(0)
        assert result.cutting_price == Money.of("40")
        assert result.total_price == Money.of("115")


class TestUnknownStyles:
    """Dispatch is exhaustive over pricing modes."""

    def test_style_without_known_mode_fails(self, service: InvoicePricingService, clear_glass: GlassType) -> None:
        mystery = SimpleNamespace(value="MYSTERY", pricing_mode=None)
        with pytest.raises(UnrecognizedStyleError, match="MYSTERY"):
            service.calculate_line_price(
                Dimensions.of_millimeters(1000, 500),
                clear_glass,
                mystery,  # type: ignore[arg-type]
                FarmaType.NORMAL_SHATAF,
            )


class TestPricingMetrics:
    """Tests for pricing counters."""

    def test_success_increments_lines_priced(self, service: InvoicePricingService, clear_glass: GlassType) -> None:
        counter = LINES_PRICED_TOTAL.labels(pricing_mode=PricingMode.AREA_BASED.value)
        before = counter._value.get()

        service.calculate_line_price(
            Dimensions.of_millimeters(1000, 500),
            clear_glass,
            ShatafType.SANDING,
            FarmaType.NORMAL_SHATAF,
        )

        assert counter._value.get() == before + 1

    def test_failure_increments_failures(self, service: InvoicePricingService, clear_glass: GlassType) -> None:
        counter = PRICING_FAILURES_TOTAL.labels(error="ManualPriceRequiredError")
        before = counter._value.get()

        with pytest.raises(ManualPriceRequiredError):
            service.calculate_line_price(
                Dimensions.of_millimeters(1000, 500),
                clear_glass,
                ShatafType.LASER,
                FarmaType.HAND_SHATAF,
            )

        assert counter._value.get() == before + 1
