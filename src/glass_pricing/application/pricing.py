from decimal import Decimal

import structlog

from glass_pricing.domain.cutting import FarmaType, PricingMode, ShatafType
from glass_pricing.domain.exceptions import DomainError, ManualPriceRequiredError, UnrecognizedStyleError
from glass_pricing.domain.models import GlassType, LineCalculation
from glass_pricing.domain.rate_catalog import RateCatalog
from glass_pricing.domain.values import Area, Dimensions, Money, Numeric
from glass_pricing.infrastructure.metrics import (
    LINES_PRICED_TOTAL,
    PRICING_FAILURES_TOTAL,
    track_pricing_duration,
)


logger = structlog.get_logger()


class InvoicePricingService:
    """Prices one invoice line: the glass sheet plus its cutting (shataf).

    Thickness always comes from the glass type, never from the caller.
    """

    def __init__(self, rate_catalog: RateCatalog) -> None:
        self.rate_catalog = rate_catalog

    @track_pricing_duration
    def calculate_line_price(
        self,
        dimensions: Dimensions,
        glass_type: GlassType,
        shataf_type: ShatafType,
        farma_type: FarmaType,
        diameter: Numeric | None = None,
        manual_cutting_price: Money | None = None,
    ) -> LineCalculation:
        log = logger.bind(
            glass_type=glass_type.name,
            shataf_type=shataf_type,
            farma_type=farma_type,
        )
        try:
            meters = dimensions.convert_to_meters()
            area = Area.from_dimensions(meters)
            glass_price = glass_type.calculate_price(area)

            diameter_m = dimensions.unit.to_meters(diameter) if diameter is not None else None
            shataf_meters = farma_type.calculate_shataf_meters(meters.width, meters.height, diameter_m)

            cutting_price = self._cutting_price(
                shataf_type,
                area,
                shataf_meters,
                glass_type.thickness,
                manual_cutting_price,
            )
        except DomainError as exc:
            PRICING_FAILURES_TOTAL.labels(error=type(exc).__name__).inc()
            log.info("line_pricing_failed", error=str(exc))
            raise

        calculation = LineCalculation(
            area=area,
            shataf_meters=shataf_meters,
            glass_price=glass_price,
            cutting_price=cutting_price,
        )
        LINES_PRICED_TOTAL.labels(pricing_mode=shataf_type.pricing_mode.value).inc()
        log.debug(
            "line_priced",
            dimensions=str(dimensions),
            area=area,
            shataf_meters=shataf_meters,
            glass_price=glass_price,
            cutting_price=cutting_price,
        )
        return calculation

    def _cutting_price(
        self,
        shataf_type: ShatafType,
        area: Area,
        shataf_meters: Decimal,
        thickness: Decimal,
        manual_cutting_price: Money | None,
    ) -> Money:
        match shataf_type.pricing_mode:
            case PricingMode.MANUAL_INPUT:
                if manual_cutting_price is None or not manual_cutting_price.is_positive():
                    raise ManualPriceRequiredError(shataf_type.value)
                return manual_cutting_price
            case PricingMode.AREA_BASED:
                rate = self.rate_catalog.find_rate(shataf_type, thickness)
                return rate.rate_per_meter.multiply(area.square_meters)
            case PricingMode.FORMULA_BASED:
                rate = self.rate_catalog.find_rate(shataf_type, thickness)
                return rate.rate_per_meter.multiply(shataf_meters)
            case _:
                raise UnrecognizedStyleError(shataf_type.value)
