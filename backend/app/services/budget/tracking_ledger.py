"""Tracking ledger — actual vs estimated cost per category.

The only stateful operation in the engine. Writes are upserts keyed by
(event_id, category) and serialized per key. With the "strict" policy a
concurrent write to the same key is rejected instead of queued.
"""

import logging
import threading
import weakref
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal

from app.config import settings
from app.services.budget.config import BudgetConfig, budget_config
from app.services.budget.errors import ConflictError, InvalidInputError
from app.services.budget.types import (
    ZERO,
    BudgetPlan,
    ServiceCategory,
    TrackingEntry,
    money_float,
    parse_enum,
    to_money,
)

logger = logging.getLogger(__name__)

LAST_WRITE_WINS = "last_write_wins"
STRICT = "strict"


@dataclass
class VarianceItem:
    service_category: ServiceCategory
    variance: Decimal
    variance_percentage: float

    def to_dict(self) -> dict:
        return {
            "service_category": self.service_category.value,
            "variance": money_float(self.variance),
            "variance_percentage": round(self.variance_percentage, 2),
        }


@dataclass
class TrackingInsights:
    total_estimated: Decimal
    total_actual: Decimal
    total_variance: Decimal
    variance_percentage: float
    accuracy_score: float
    categories_tracked: int
    top_overruns: list[VarianceItem] = field(default_factory=list)
    top_savings: list[VarianceItem] = field(default_factory=list)
    over_budget_categories: list[ServiceCategory] = field(default_factory=list)
    alerts: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "total_estimated": money_float(self.total_estimated),
            "total_actual": money_float(self.total_actual),
            "total_variance": money_float(self.total_variance),
            "variance_percentage": round(self.variance_percentage, 2),
            "accuracy_score": round(self.accuracy_score, 3),
            "categories_tracked": self.categories_tracked,
            "top_overruns": [i.to_dict() for i in self.top_overruns],
            "top_savings": [i.to_dict() for i in self.top_savings],
            "over_budget_categories": [c.value for c in self.over_budget_categories],
            "alerts": self.alerts,
        }


def _variance_pct(entry: TrackingEntry) -> float:
    if entry.estimated_cost <= 0:
        return 0.0
    return float(entry.variance / entry.estimated_cost * 100)


class TrackingLedger:
    def __init__(self, conflict_policy: str = LAST_WRITE_WINS, config: BudgetConfig = budget_config):
        if conflict_policy not in (LAST_WRITE_WINS, STRICT):
            raise ValueError(f"Unknown tracking conflict policy: {conflict_policy}")
        self.conflict_policy = conflict_policy
        self.thresholds = config.tracking
        # entries vanish once no writer holds the lock
        self._locks: weakref.WeakValueDictionary = weakref.WeakValueDictionary()
        self._registry_lock = threading.Lock()

    def _lock_for(self, key: tuple[str | None, ServiceCategory]) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            return lock

    def record_actual(
        self,
        plan: BudgetPlan,
        category: ServiceCategory | str,
        actual_cost: Decimal | float | int,
        tracking_date: date | None = None,
    ) -> TrackingEntry:
        """Upsert the actual cost for a category into plan.tracking.

        estimated_cost is the category's current recommended amount, 0 when
        the plan has no recommendation for it.
        """
        category = parse_enum(ServiceCategory, category, "service category")
        actual = to_money(actual_cost)
        if actual < 0:
            raise InvalidInputError(f"actual_cost must be non-negative, got {actual}")

        key = (plan.event_id, category)
        lock = self._lock_for(key)
        if self.conflict_policy == STRICT:
            if not lock.acquire(blocking=False):
                raise ConflictError(
                    f"Concurrent tracking write for event {plan.event_id} / {category.value}"
                )
        else:
            lock.acquire()

        try:
            recommendation = plan.recommendation_for(category)
            entry = TrackingEntry(
                service_category=category,
                estimated_cost=recommendation.recommended_amount if recommendation else ZERO,
                actual_cost=actual,
                tracking_date=tracking_date or date.today(),
            )
            for i, existing in enumerate(plan.tracking):
                if existing.service_category == category:
                    plan.tracking[i] = entry
                    break
            else:
                plan.tracking.append(entry)
        finally:
            lock.release()

        logger.info(
            f"Tracked {category.value} for event {plan.event_id}: "
            f"actual={entry.actual_cost} estimated={entry.estimated_cost} variance={entry.variance}"
        )
        return entry

    @staticmethod
    def accuracy(plan: BudgetPlan) -> float:
        """Mean per-entry accuracy, max(0, 1 - |variance| / estimated). Always within [0, 1]."""
        if not plan.tracking:
            return 0.0
        scores = []
        for entry in plan.tracking:
            if entry.estimated_cost <= 0:
                scores.append(0.0)
                continue
            ratio = float(abs(entry.variance) / entry.estimated_cost)
            scores.append(max(0.0, 1.0 - ratio))
        return sum(scores) / len(scores)

    def insights(self, plan: BudgetPlan) -> TrackingInsights:
        t = self.thresholds
        total_estimated = sum((e.estimated_cost for e in plan.tracking), ZERO)
        total_actual = sum((e.actual_cost for e in plan.tracking), ZERO)
        total_variance = total_actual - total_estimated
        variance_pct = float(total_variance / total_estimated * 100) if total_estimated > 0 else 0.0
        accuracy = self.accuracy(plan)

        overruns = sorted((e for e in plan.tracking if e.variance > 0), key=lambda e: -e.variance)
        savings = sorted((e for e in plan.tracking if e.variance < 0), key=lambda e: e.variance)
        over_budget = [e.service_category for e in overruns]

        alerts = []
        if variance_pct > t.variance_alert_pct:
            alerts.append({
                "type": "warning",
                "message": f"Budget is {variance_pct:.1f}% over estimated costs",
                "action": "Review and adjust future estimates",
            })
        elif variance_pct < -t.variance_alert_pct:
            alerts.append({
                "type": "success",
                "message": f"Budget is {abs(variance_pct):.1f}% under estimated costs",
                "action": "Consider increasing budget for better quality services",
            })
        if plan.tracking and accuracy < t.low_accuracy:
            alerts.append({
                "type": "improvement",
                "message": "Budget estimates could be more accurate",
                "action": "Use historical data and contractor quotes for better estimates",
            })
        if over_budget:
            alerts.append({
                "type": "alert",
                "message": f"{len(over_budget)} categories are over budget",
                "action": "Review over-budget categories and adjust future estimates",
            })

        return TrackingInsights(
            total_estimated=total_estimated,
            total_actual=total_actual,
            total_variance=total_variance,
            variance_percentage=variance_pct,
            accuracy_score=accuracy,
            categories_tracked=len(plan.tracking),
            top_overruns=[
                VarianceItem(e.service_category, e.variance, _variance_pct(e))
                for e in overruns[: t.top_n]
            ],
            top_savings=[
                VarianceItem(e.service_category, e.variance, _variance_pct(e))
                for e in savings[: t.top_n]
            ],
            over_budget_categories=over_budget,
            alerts=alerts,
        )


tracking_ledger = TrackingLedger(settings.tracking_conflict_policy)
