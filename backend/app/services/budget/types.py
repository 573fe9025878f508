"""Budget engine domain types — closed enums, value objects and the BudgetPlan aggregate."""

from dataclasses import dataclass, field, replace
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

from app.services.budget.errors import InvalidInputError, NotFoundError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value) -> Decimal:
    """Quantize to cents. Floats go through str() so 0.1 stays 0.10."""
    if isinstance(value, float):
        value = str(value)
    amount = Decimal(value)
    if not amount.is_finite():
        raise InvalidInputError(f"Amount must be a finite number, got {value}")
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def multiply(amount: Decimal, *multipliers: float) -> Decimal:
    """Apply float multipliers to a money amount, rounding once at the end."""
    result = Decimal(amount)
    factors = [Decimal(str(m)) for m in multipliers]
    if not all(d.is_finite() for d in (result, *factors)):
        raise InvalidInputError(f"Non-finite value in {amount} x {multipliers}")
    for factor in factors:
        result *= factor
    return result.quantize(CENT, rounding=ROUND_HALF_UP)


def money_float(amount: Decimal) -> float:
    return float(amount.quantize(CENT, rounding=ROUND_HALF_UP))


class EventType(str, Enum):
    WEDDING = "wedding"
    CORPORATE = "corporate"
    CONFERENCE = "conference"
    BIRTHDAY = "birthday"
    PARTY = "party"
    ANNIVERSARY = "anniversary"
    GRADUATION = "graduation"


class ServiceCategory(str, Enum):
    VENUE = "venue"
    CATERING = "catering"
    PHOTOGRAPHY = "photography"
    VIDEOGRAPHY = "videography"
    MUSIC = "music"
    ENTERTAINMENT = "entertainment"
    FLOWERS = "flowers"
    DECORATIONS = "decorations"
    TRANSPORTATION = "transportation"
    AV_EQUIPMENT = "av_equipment"
    STAFFING = "staffing"
    SECURITY = "security"
    RENTALS = "rentals"
    INVITATIONS = "invitations"


class SeasonType(str, Enum):
    PEAK = "peak"
    OFF_PEAK = "off_peak"
    SHOULDER = "shoulder"
    STANDARD = "standard"


class CostCategory(str, Enum):
    HIGH_COST = "high_cost"
    MODERATE_HIGH_COST = "moderate_high_cost"
    MODERATE_COST = "moderate_cost"
    LOW_COST = "low_cost"


class PricingSource(str, Enum):
    MARKET_SURVEY = "market_survey"
    VENDOR_QUOTES = "vendor_quotes"
    HISTORICAL_BOOKINGS = "historical_bookings"
    INDUSTRY_REPORT = "industry_report"
    PLATFORM_ESTIMATE = "platform_estimate"
    MANUAL = "manual"


class AdjustmentType(str, Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


class WarningType(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class Impact(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class HealthStatus(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"


def parse_enum(enum_cls: type[Enum], value, label: str):
    """Coerce a raw string into a closed enum, raising NotFoundError for unknown values."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        raise NotFoundError(f"Unknown {label}: {value}") from None


@dataclass(frozen=True)
class Location:
    latitude: float | None = None
    longitude: float | None = None
    city: str | None = None
    region: str | None = None
    country: str | None = None  # ISO 3166-1 alpha-2

    @property
    def has_coordinates(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    def to_dict(self) -> dict:
        return {
            "lat": self.latitude,
            "lng": self.longitude,
            "city": self.city,
            "region": self.region,
            "country": self.country,
        }


@dataclass(frozen=True)
class PriceRange:
    min: Decimal
    max: Decimal
    average: Decimal
    source: PricingSource
    observed_at: date

    def __post_init__(self):
        if self.min < 0 or not (self.min <= self.average <= self.max):
            raise InvalidInputError(
                f"Invalid price range: min={self.min} average={self.average} max={self.max}"
            )

    def scaled(self, multiplier: float) -> "PriceRange":
        return replace(
            self,
            min=multiply(self.min, multiplier),
            max=multiply(self.max, multiplier),
            average=multiply(self.average, multiplier),
        )

    def to_dict(self) -> dict:
        return {
            "price_min": money_float(self.min),
            "price_max": money_float(self.max),
            "price_average": money_float(self.average),
            "source": self.source.value,
            "observed_at": self.observed_at.isoformat(),
        }


@dataclass(frozen=True)
class SeasonalAdjustment:
    season_type: SeasonType
    seasonal_multiplier: float
    special_date_multiplier: float
    special_date_reason: str

    @property
    def final_multiplier(self) -> float:
        return self.seasonal_multiplier * self.special_date_multiplier

    def to_dict(self) -> dict:
        return {
            "season_type": self.season_type.value,
            "seasonal_multiplier": self.seasonal_multiplier,
            "special_date_multiplier": self.special_date_multiplier,
            "special_date_reason": self.special_date_reason,
            "final_multiplier": round(self.final_multiplier, 4),
        }


@dataclass(frozen=True)
class LocationAdjustment:
    service_type: ServiceCategory
    cost_category: CostCategory
    base_multiplier: float
    service_adjustment: float
    confidence: float
    matched_by: str  # "city" | "region" | "proximity" | "default"

    @property
    def combined_multiplier(self) -> float:
        return self.base_multiplier * self.service_adjustment

    @property
    def is_default(self) -> bool:
        return self.matched_by == "default"

    def to_dict(self) -> dict:
        return {
            "service_type": self.service_type.value,
            "cost_category": self.cost_category.value,
            "base_multiplier": self.base_multiplier,
            "service_adjustment": self.service_adjustment,
            "multiplier": round(self.combined_multiplier, 4),
            "confidence": self.confidence,
            "matched_by": self.matched_by,
            "is_default": self.is_default,
        }


@dataclass(frozen=True)
class BudgetRecommendation:
    service_category: ServiceCategory
    recommended_amount: Decimal
    confidence_score: float
    pricing_source: PricingSource

    def to_dict(self) -> dict:
        return {
            "service_category": self.service_category.value,
            "recommended_amount": money_float(self.recommended_amount),
            "confidence_score": self.confidence_score,
            "pricing_source": self.pricing_source.value,
        }


@dataclass(frozen=True)
class PackageDeal:
    id: str
    name: str
    service_categories: frozenset[ServiceCategory]
    base_price: Decimal
    discount_percentage: Decimal
    event_types: frozenset[EventType]
    description: str = ""
    cities: frozenset[str] | None = None
    is_active: bool = True

    def __post_init__(self):
        if not (0 <= self.discount_percentage <= 100):
            raise InvalidInputError(
                f"Package {self.id}: discount_percentage must be within 0-100"
            )
        if self.base_price < 0:
            raise InvalidInputError(f"Package {self.id}: base_price must be non-negative")

    @property
    def final_price(self) -> Decimal:
        factor = (Decimal(100) - Decimal(self.discount_percentage)) / Decimal(100)
        return (self.base_price * factor).quantize(CENT, rounding=ROUND_HALF_UP)

    @property
    def savings(self) -> Decimal:
        return self.base_price - self.final_price

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "service_categories": sorted(c.value for c in self.service_categories),
            "base_price": money_float(self.base_price),
            "discount_percentage": float(self.discount_percentage),
            "final_price": money_float(self.final_price),
            "savings": money_float(self.savings),
            "event_types": sorted(e.value for e in self.event_types),
            "cities": sorted(self.cities) if self.cities else None,
            "is_active": self.is_active,
        }


@dataclass(frozen=True)
class AppliedPackage:
    """A package folded into a plan. savings is the tracked delta and may be negative."""
    package: PackageDeal
    replaced_amount: Decimal
    savings: Decimal

    def to_dict(self) -> dict:
        return {
            "package": self.package.to_dict(),
            "replaced_amount": money_float(self.replaced_amount),
            "savings": money_float(self.savings),
        }


@dataclass(frozen=True)
class TrackingEntry:
    service_category: ServiceCategory
    estimated_cost: Decimal
    actual_cost: Decimal
    tracking_date: date

    @property
    def variance(self) -> Decimal:
        """Positive = over budget."""
        return self.actual_cost - self.estimated_cost

    def to_dict(self) -> dict:
        return {
            "service_category": self.service_category.value,
            "estimated_cost": money_float(self.estimated_cost),
            "actual_cost": money_float(self.actual_cost),
            "variance": money_float(self.variance),
            "tracking_date": self.tracking_date.isoformat(),
        }


@dataclass(frozen=True)
class BudgetAdjustment:
    service_category: ServiceCategory
    adjustment_type: AdjustmentType
    adjustment_value: Decimal
    reason: str = ""

    def to_dict(self) -> dict:
        return {
            "service_category": self.service_category.value,
            "adjustment_type": self.adjustment_type.value,
            "adjustment_value": float(self.adjustment_value),
            "reason": self.reason,
        }


@dataclass
class BudgetPlan:
    """Aggregate root. Transient per query unless persisted through the store."""
    total_budget: Decimal = ZERO
    recommendations: list[BudgetRecommendation] = field(default_factory=list)
    tracking: list[TrackingEntry] = field(default_factory=list)
    packages: list[AppliedPackage] = field(default_factory=list)
    adjustments: list[BudgetAdjustment] = field(default_factory=list)
    applied_package_ids: list[str] = field(default_factory=list)
    event_id: str | None = None
    event_type: EventType | None = None

    def breakdown_total(self) -> Decimal:
        return sum((r.recommended_amount for r in self.recommendations), ZERO)

    def recommendation_for(self, category: ServiceCategory) -> BudgetRecommendation | None:
        return next((r for r in self.recommendations if r.service_category == category), None)

    def with_recommendations(self, recommendations: list[BudgetRecommendation]) -> "BudgetPlan":
        """Copy with new recommendations and a recomputed total."""
        total = sum((r.recommended_amount for r in recommendations), ZERO)
        return replace(
            self,
            recommendations=list(recommendations),
            total_budget=to_money(total),
            tracking=list(self.tracking),
            packages=list(self.packages),
            adjustments=list(self.adjustments),
            applied_package_ids=list(self.applied_package_ids),
        )

    def to_dict(self) -> dict:
        return {
            "event_id": self.event_id,
            "event_type": self.event_type.value if self.event_type else None,
            "total_budget": money_float(self.total_budget),
            "recommendations": [r.to_dict() for r in self.recommendations],
            "tracking": [t.to_dict() for t in self.tracking],
            "packages": [p.to_dict() for p in self.packages],
            "adjustments": [a.to_dict() for a in self.adjustments],
            "applied_package_ids": list(self.applied_package_ids),
        }
