"""Pricing catalog — read-only base price ranges per service category and event type."""

import logging
from datetime import date
from decimal import Decimal
from types import MappingProxyType
from typing import Iterable

from app.data.pricing import BASE_PRICING
from app.services.budget.errors import NotFoundError
from app.services.budget.types import (
    EventType,
    Location,
    PriceRange,
    PricingSource,
    ServiceCategory,
    parse_enum,
)

logger = logging.getLogger(__name__)

PriceKey = tuple[EventType, ServiceCategory, str | None]


def _city_key(city: str | None) -> str | None:
    return city.strip().lower() if city else None


class PricingTable:
    """Immutable snapshot of price rows. City-specific rows override the generic (city=None) row."""

    def __init__(self, rows: dict[PriceKey, PriceRange]):
        self._rows = MappingProxyType(dict(rows))

    @classmethod
    def builtin(cls) -> "PricingTable":
        rows: dict[PriceKey, PriceRange] = {}
        for event_type, by_category in BASE_PRICING.items():
            for category, (pmin, avg, pmax, source, observed) in by_category.items():
                rows[(EventType(event_type), ServiceCategory(category), None)] = PriceRange(
                    min=Decimal(pmin),
                    max=Decimal(pmax),
                    average=Decimal(avg),
                    source=PricingSource(source),
                    observed_at=date.fromisoformat(observed),
                )
        return cls(rows)

    @classmethod
    def from_records(cls, records: Iterable[tuple[str, str, str | None, PriceRange]]) -> "PricingTable":
        """Build from (event_type, category, city, price) records, e.g. database rows."""
        rows: dict[PriceKey, PriceRange] = {}
        for event_type, category, city, price in records:
            key = (EventType(event_type), ServiceCategory(category), _city_key(city))
            rows[key] = price
        return cls(rows)

    def lookup(
        self, category: ServiceCategory, event_type: EventType, city: str | None = None
    ) -> PriceRange | None:
        city = _city_key(city)
        if city:
            hit = self._rows.get((event_type, category, city))
            if hit is not None:
                return hit
        return self._rows.get((event_type, category, None))

    def items(self):
        return self._rows.items()

    def __len__(self) -> int:
        return len(self._rows)


class PricingCatalog:
    """Resolves base prices. Pure read over an injected PricingTable."""

    def __init__(self, table: PricingTable | None = None):
        self.table = table if table is not None else PricingTable.builtin()

    def get_base_price(
        self,
        category: ServiceCategory | str,
        event_type: EventType | str,
        location: Location | None = None,
    ) -> PriceRange:
        category = parse_enum(ServiceCategory, category, "service category")
        event_type = parse_enum(EventType, event_type, "event type")
        city = location.city if location else None

        price = self.table.lookup(category, event_type, city)
        if price is None:
            raise NotFoundError(
                f"No pricing for {category.value} at {event_type.value} events"
            )
        logger.debug(
            f"Base price {category.value}/{event_type.value}: avg={price.average} "
            f"source={price.source.value} observed={price.observed_at}"
        )
        return price


pricing_catalog = PricingCatalog()
