"""Budget engine configuration — single source for all rule tables and thresholds.

Components take a BudgetConfig at construction; pass a modified copy
(dataclasses.replace) to version or test a table independently of the logic.
"""

from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Mapping

from app.data import locations, pricing, seasons
from app.services.budget.types import (
    CostCategory,
    EventType,
    PricingSource,
    SeasonType,
    ServiceCategory,
)


@dataclass(frozen=True)
class SeasonWindow:
    """Inclusive month/day range. start > end means the window wraps the year end."""
    start: tuple[int, int]
    end: tuple[int, int]
    season_type: SeasonType

    def contains(self, d: date) -> bool:
        md = (d.month, d.day)
        if self.start <= self.end:
            return self.start <= md <= self.end
        return md >= self.start or md <= self.end


def _windows(raw: list[tuple[int, int, int, int, str]]) -> tuple[SeasonWindow, ...]:
    return tuple(
        SeasonWindow(start=(sm, sd), end=(em, ed), season_type=SeasonType(season))
        for sm, sd, em, ed, season in raw
    )


@dataclass(frozen=True)
class SeasonCalendar:
    northern: tuple[SeasonWindow, ...] = field(
        default_factory=lambda: _windows(seasons.NORTHERN_SEASON_WINDOWS)
    )
    southern: tuple[SeasonWindow, ...] = field(
        default_factory=lambda: _windows(seasons.SOUTHERN_SEASON_WINDOWS)
    )
    southern_countries: frozenset[str] = locations.SOUTHERN_HEMISPHERE_COUNTRIES

    def season_for(self, d: date, southern: bool = False) -> SeasonType:
        windows = self.southern if southern else self.northern
        for window in windows:
            if window.contains(d):
                return window.season_type
        return SeasonType.STANDARD


@dataclass(frozen=True)
class SeasonMultipliers:
    """Demand multiplier per season tier."""
    peak: float = seasons.SEASON_MULTIPLIERS["peak"]
    shoulder: float = seasons.SEASON_MULTIPLIERS["shoulder"]
    off_peak: float = seasons.SEASON_MULTIPLIERS["off_peak"]
    standard: float = seasons.SEASON_MULTIPLIERS["standard"]

    def get(self, season: SeasonType) -> float:
        return getattr(self, season.value)


@dataclass(frozen=True)
class SpecialDate:
    multiplier: float
    reason: str
    countries: frozenset[str] | None = None  # None = everywhere

    def applies_to(self, country: str | None) -> bool:
        if self.countries is None:
            return True
        return country is not None and country.upper() in self.countries


@dataclass(frozen=True)
class SpecialDates:
    entries: Mapping[tuple[int, int], SpecialDate] = field(
        default_factory=lambda: MappingProxyType({
            md: SpecialDate(multiplier=m, reason=reason, countries=countries)
            for md, (m, reason, countries) in seasons.SPECIAL_DATES.items()
        })
    )
    public_holiday_multiplier: float = seasons.PUBLIC_HOLIDAY_MULTIPLIER
    use_public_holidays: bool = True
    standard_reason: str = "Standard pricing"


@dataclass(frozen=True)
class CostCategoryMultipliers:
    """Base location multiplier per cost category."""
    high_cost: float = 1.3
    moderate_high_cost: float = 1.15
    moderate_cost: float = 1.0
    low_cost: float = 0.8

    def get(self, category: CostCategory) -> float:
        return getattr(self, category.value)


@dataclass(frozen=True)
class LocationTables:
    cities: Mapping[str, CostCategory] = field(
        default_factory=lambda: MappingProxyType({
            k: CostCategory(v) for k, v in locations.CITY_COST_CATEGORIES.items()
        })
    )
    regions: Mapping[str, CostCategory] = field(
        default_factory=lambda: MappingProxyType({
            k: CostCategory(v) for k, v in locations.REGION_COST_CATEGORIES.items()
        })
    )
    metro_coordinates: Mapping[str, tuple[float, float]] = field(
        default_factory=lambda: MappingProxyType(dict(locations.METRO_COORDINATES))
    )
    service_adjustments: Mapping[ServiceCategory, Mapping[CostCategory, float]] = field(
        default_factory=lambda: MappingProxyType({
            ServiceCategory(service): MappingProxyType({
                CostCategory(cat): factor for cat, factor in by_cat.items()
            })
            for service, by_cat in locations.SERVICE_LOCATION_ADJUSTMENTS.items()
        })
    )
    proximity_radius_km: float = 50.0
    default_category: CostCategory = CostCategory.MODERATE_COST


@dataclass(frozen=True)
class LocationConfidence:
    """Trust in the location classification by how it was matched."""
    city: float = 1.0
    region: float = 0.9
    proximity: float = 0.8
    default: float = 0.6

    def get(self, matched_by: str) -> float:
        return getattr(self, matched_by)


@dataclass(frozen=True)
class ScalingParams:
    """Attendee / duration scaling relative to the catalog's reference event."""
    reference_attendees: int = 100
    attendee_exponent: float = 0.85
    min_attendee_factor: float = 0.5
    reference_hours: float = 8.0
    hourly_services: frozenset[ServiceCategory] = frozenset(
        ServiceCategory(s) for s in pricing.HOURLY_SERVICES
    )
    fixed_size_services: frozenset[ServiceCategory] = frozenset(
        ServiceCategory(s) for s in pricing.FIXED_SIZE_SERVICES
    )


@dataclass(frozen=True)
class ConfidenceParams:
    """confidence = (w_r * reliability + w_f * 0.5 ** (age / half_life)) * location confidence."""
    source_reliability: Mapping[PricingSource, float] = field(
        default_factory=lambda: MappingProxyType({
            PricingSource(k): v for k, v in pricing.SOURCE_RELIABILITY.items()
        })
    )
    reliability_weight: float = 0.6
    freshness_weight: float = 0.4
    freshness_half_life_days: float = 180.0


@dataclass(frozen=True)
class SuggestionThresholds:
    """When each cost-saving rule fires and the share of budget it estimates."""
    package_deals_min_budget: float = 10000
    package_deals_savings_pct: float = 0.15
    vendor_negotiation_min_item: float = 2000
    vendor_negotiation_savings_pct: float = 0.08
    off_season_min_budget: float = 5000
    off_season_savings_pct: float = 0.20
    consolidation_min_services: int = 3     # fires above this count
    consolidation_savings_pct: float = 0.10
    guest_reduction_min_budget: float = 3000
    guest_reduction_savings_pct: float = 0.12
    diy_decorations_savings_pct: float = 0.05


@dataclass(frozen=True)
class ValidationThresholds:
    low_budget: float = 1000
    high_budget: float = 50000
    breakdown_tolerance_pct: float = 0.10
    package_savings_pct: float = 0.30
    over_budget_share: float = 0.5
    min_categories: int = 3
    packages_expected_above: float = 5000

    # Health score penalties
    error_penalty: int = 20
    warning_penalty: int = 10
    info_penalty: int = 5
    missing_breakdown_penalty: int = 30
    missing_tracking_penalty: int = 20
    missing_packages_penalty: int = 10

    # Status bands / compliance
    excellent_min: int = 90
    good_min: int = 70
    fair_min: int = 50
    industry_standards_min: int = 70
    best_practices_min: int = 80


@dataclass(frozen=True)
class TrackingThresholds:
    variance_alert_pct: float = 10.0
    low_accuracy: float = 0.7
    top_n: int = 3


@dataclass(frozen=True)
class BudgetConfig:
    """Top-level config aggregating all sub-configs."""
    event_categories: Mapping[EventType, tuple[ServiceCategory, ...]] = field(
        default_factory=lambda: MappingProxyType({
            EventType(evt): tuple(ServiceCategory(c) for c in cats)
            for evt, cats in pricing.EVENT_SERVICE_CATEGORIES.items()
        })
    )
    season_calendar: SeasonCalendar = field(default_factory=SeasonCalendar)
    season_multipliers: SeasonMultipliers = field(default_factory=SeasonMultipliers)
    special_dates: SpecialDates = field(default_factory=SpecialDates)
    cost_multipliers: CostCategoryMultipliers = field(default_factory=CostCategoryMultipliers)
    locations: LocationTables = field(default_factory=LocationTables)
    location_confidence: LocationConfidence = field(default_factory=LocationConfidence)
    scaling: ScalingParams = field(default_factory=ScalingParams)
    confidence: ConfidenceParams = field(default_factory=ConfidenceParams)
    suggestions: SuggestionThresholds = field(default_factory=SuggestionThresholds)
    validation: ValidationThresholds = field(default_factory=ValidationThresholds)
    tracking: TrackingThresholds = field(default_factory=TrackingThresholds)


# Singleton — default for every component
budget_config = BudgetConfig()
