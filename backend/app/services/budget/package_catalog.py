"""Package catalog — bundle deals and their application to a budget plan."""

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from app.data.packages import PACKAGE_DEALS
from app.services.budget.config import BudgetConfig, budget_config
from app.services.budget.errors import InvalidInputError, NotFoundError
from app.services.budget.types import (
    CENT,
    ZERO,
    AppliedPackage,
    BudgetPlan,
    BudgetRecommendation,
    EventType,
    Location,
    PackageDeal,
    ServiceCategory,
    parse_enum,
)

logger = logging.getLogger(__name__)


def builtin_packages() -> list[PackageDeal]:
    deals = []
    for deal_id, raw in PACKAGE_DEALS.items():
        deals.append(PackageDeal(
            id=deal_id,
            name=raw["name"],
            description=raw["description"],
            service_categories=frozenset(ServiceCategory(c) for c in raw["service_categories"]),
            base_price=Decimal(raw["base_price"]),
            discount_percentage=Decimal(raw["discount_percentage"]),
            event_types=frozenset(EventType(e) for e in raw["event_types"]),
            cities=frozenset(raw["cities"]) if raw["cities"] else None,
        ))
    return deals


class PackageCatalog:
    def __init__(self, deals: Iterable[PackageDeal] | None = None, config: BudgetConfig = budget_config):
        deals = builtin_packages() if deals is None else list(deals)
        self._deals = {d.id: d for d in deals}
        self.event_categories = config.event_categories

    def get(self, package_id: str) -> PackageDeal:
        deal = self._deals.get(package_id)
        if deal is None:
            raise NotFoundError(f"Package not found: {package_id}")
        return deal

    def list_packages(
        self, event_type: EventType | str, location: Location | None = None
    ) -> list[PackageDeal]:
        """Active deals for the event type, restricted to the location's city where the deal says so.

        A deal is only offered when every category it bundles belongs to the
        event type, so a listed deal can be applied to that event's plan.
        """
        event_type = parse_enum(EventType, event_type, "event type")
        city = location.city.strip().lower() if location and location.city else None
        categories = frozenset(self.event_categories.get(event_type, ()))

        deals = [
            d for d in self._deals.values()
            if d.is_active
            and event_type in d.event_types
            and d.service_categories <= categories
            and (d.cities is None or (city is not None and city in d.cities))
        ]
        deals.sort(key=lambda d: (-d.savings, d.id))
        return deals

    def apply_package(self, plan: BudgetPlan, package_id: str) -> BudgetPlan:
        """Replace the member categories' summed amounts with the package final price.

        Returns a new plan. Applying an already-applied package returns an equal plan.
        """
        if package_id in plan.applied_package_ids:
            logger.debug(f"Package {package_id} already applied — no-op")
            return plan.with_recommendations(plan.recommendations)

        deal = self.get(package_id)

        present = {r.service_category for r in plan.recommendations}
        missing = deal.service_categories - present
        if missing:
            raise InvalidInputError(
                f"Package {deal.id} covers categories not in the plan: "
                f"{', '.join(sorted(c.value for c in missing))}"
            )

        covered = {c for applied in plan.packages for c in applied.package.service_categories}
        overlap = deal.service_categories & covered
        if overlap:
            raise InvalidInputError(
                f"Package {deal.id} overlaps an applied package on: "
                f"{', '.join(sorted(c.value for c in overlap))}"
            )

        members = [r for r in plan.recommendations if r.service_category in deal.service_categories]
        replaced = sum((r.recommended_amount for r in members), ZERO)
        allocations = _allocate(deal.final_price, [r.recommended_amount for r in members])
        new_amounts = {r.service_category: a for r, a in zip(members, allocations)}

        recommendations = [
            BudgetRecommendation(
                service_category=r.service_category,
                recommended_amount=new_amounts[r.service_category],
                confidence_score=r.confidence_score,
                pricing_source=r.pricing_source,
            )
            if r.service_category in new_amounts else r
            for r in plan.recommendations
        ]

        new_plan = plan.with_recommendations(recommendations)
        new_plan.packages.append(AppliedPackage(
            package=deal,
            replaced_amount=replaced,
            savings=replaced - deal.final_price,
        ))
        new_plan.applied_package_ids.append(deal.id)

        logger.info(
            f"Applied package {deal.id}: replaced {replaced} with {deal.final_price} "
            f"(savings {replaced - deal.final_price})"
        )
        return new_plan


def _allocate(total: Decimal, weights: list[Decimal]) -> list[Decimal]:
    """Split total over weights proportionally in cents; the rounding remainder lands on the largest share."""
    if not weights:
        return []
    weight_sum = sum(weights, ZERO)
    if weight_sum == 0:
        weights = [Decimal(1)] * len(weights)
        weight_sum = Decimal(len(weights))

    shares = [(total * w / weight_sum).quantize(CENT, rounding=ROUND_HALF_UP) for w in weights]
    largest = max(range(len(weights)), key=lambda i: weights[i])
    shares[largest] += total - sum(shares, ZERO)
    return shares


package_catalog = PackageCatalog()
