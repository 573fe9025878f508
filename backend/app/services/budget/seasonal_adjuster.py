"""Seasonal adjuster — date-based demand multiplier.

Layers:
1. Season window — the event date's tier (peak/shoulder/standard/off-peak)
   on the northern or southern calendar
2. Special date — fixed table of high-demand dates, then the country's
   public holidays when the country is known

Pure function of the injected tables: identical inputs give identical output.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

import holidays

from app.services.budget.config import BudgetConfig, budget_config
from app.services.budget.types import (
    Location,
    PriceRange,
    SeasonalAdjustment,
    SeasonType,
    money_float,
    multiply,
)

logger = logging.getLogger(__name__)


@dataclass
class SeasonalPricing:
    """Base vs seasonally adjusted prices for one service, with the off-peak saving."""
    base_pricing: PriceRange
    adjustment: SeasonalAdjustment
    adjusted_pricing: PriceRange
    potential_savings: Decimal
    recommendation: str

    def to_dict(self) -> dict:
        return {
            "base_pricing": self.base_pricing.to_dict(),
            "seasonal_adjustment": self.adjustment.to_dict(),
            "adjusted_prices": self.adjusted_pricing.to_dict(),
            "savings_opportunity": {
                "is_peak_season": self.adjustment.season_type == SeasonType.PEAK,
                "is_off_peak_season": self.adjustment.season_type == SeasonType.OFF_PEAK,
                "potential_savings": money_float(self.potential_savings),
                "recommendation": self.recommendation,
            },
        }


class SeasonalAdjuster:
    def __init__(self, config: BudgetConfig = budget_config):
        self.calendar = config.season_calendar
        self.multipliers = config.season_multipliers
        self.special_dates = config.special_dates

    def adjust(self, event_date: date, location: Location | None = None) -> SeasonalAdjustment:
        season = self.calendar.season_for(event_date, southern=self._is_southern(location))
        special_multiplier, reason = self._special_date(event_date, location)

        adjustment = SeasonalAdjustment(
            season_type=season,
            seasonal_multiplier=self.multipliers.get(season),
            special_date_multiplier=special_multiplier,
            special_date_reason=reason,
        )
        logger.debug(
            f"Seasonal adjustment {event_date}: {season.value} x{adjustment.seasonal_multiplier}, "
            f"{reason} x{special_multiplier}"
        )
        return adjustment

    def seasonal_pricing(
        self, price: PriceRange, event_date: date, location: Location | None = None
    ) -> SeasonalPricing:
        adjustment = self.adjust(event_date, location)
        adjusted = price.scaled(adjustment.final_multiplier)

        potential_savings = Decimal("0.00")
        if adjustment.season_type == SeasonType.PEAK:
            off_peak_avg = multiply(price.average, self.multipliers.off_peak)
            potential_savings = max(Decimal("0.00"), adjusted.average - off_peak_avg)

        return SeasonalPricing(
            base_pricing=price,
            adjustment=adjustment,
            adjusted_pricing=adjusted,
            potential_savings=potential_savings,
            recommendation=self._recommendation(adjustment, potential_savings),
        )

    def _is_southern(self, location: Location | None) -> bool:
        if location is None:
            return False
        if location.country:
            return location.country.upper() in self.calendar.southern_countries
        return location.latitude is not None and location.latitude < 0

    def _special_date(self, event_date: date, location: Location | None) -> tuple[float, str]:
        country = location.country.upper() if location and location.country else None

        entry = self.special_dates.entries.get((event_date.month, event_date.day))
        if entry is not None and entry.applies_to(country):
            return entry.multiplier, entry.reason

        if country and self.special_dates.use_public_holidays:
            name = self._public_holiday(event_date, country)
            if name:
                return self.special_dates.public_holiday_multiplier, f"{name} (public holiday)"

        return 1.0, self.special_dates.standard_reason

    @staticmethod
    def _public_holiday(event_date: date, country: str) -> str | None:
        try:
            calendar = holidays.country_holidays(country, years=event_date.year)
        except NotImplementedError:
            logger.debug(f"No public holiday calendar for country {country}")
            return None
        return calendar.get(event_date)

    @staticmethod
    def _recommendation(adjustment: SeasonalAdjustment, potential_savings: Decimal) -> str:
        if adjustment.season_type == SeasonType.PEAK:
            return (
                f"Peak season pricing applies. Moving the event to an off-peak month "
                f"could save about ${round(potential_savings):,}."
            )
        if adjustment.season_type == SeasonType.OFF_PEAK:
            return "Off-peak season — vendors are more flexible, a good time to negotiate."
        if adjustment.special_date_multiplier > 1.0:
            return (
                f"{adjustment.special_date_reason} raises demand. "
                f"A nearby date avoids the premium."
            )
        return "Standard seasonal pricing applies."


seasonal_adjuster = SeasonalAdjuster()
