"""Budget store — async SQLAlchemy persistence for catalogs, breakdowns and tracking.

The engine itself is pure and synchronous; routers fetch snapshots from the
store, run the engine, and persist the results back. Database failures roll
the session back and surface as UpstreamUnavailableError, never retried here.
"""

import logging
import uuid
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import Iterable

from sqlalchemy import delete, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import async_session_factory
from app.models.budget import (
    BudgetAdjustmentRow,
    BudgetTrackingRow,
    PackageDealRow,
    RecommendationFeedback,
    ServiceBudgetBreakdown,
    ServicePricing,
)
from app.services.budget.errors import BudgetError, ConflictError, NotFoundError, UpstreamUnavailableError
from app.services.budget.feedback import FeedbackEvent
from app.services.budget.package_catalog import PackageCatalog, package_catalog
from app.services.budget.pricing_catalog import PricingTable
from app.services.budget.tracking_ledger import LAST_WRITE_WINS, STRICT
from app.services.budget.types import (
    AdjustmentType,
    AppliedPackage,
    BudgetAdjustment,
    BudgetPlan,
    BudgetRecommendation,
    EventType,
    Location,
    PackageDeal,
    PriceRange,
    PricingSource,
    ServiceCategory,
    TrackingEntry,
    to_money,
)

logger = logging.getLogger(__name__)

# Dialects with INSERT .. ON CONFLICT DO UPDATE
_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

LOCK_NOT_AVAILABLE = "55P03"


def is_write_conflict(e: DBAPIError) -> bool:
    """Another transaction holds or has just written the same tracking row."""
    if isinstance(e, IntegrityError):
        return True
    orig = e.orig
    if getattr(orig, "sqlstate", None) == LOCK_NOT_AVAILABLE or getattr(orig, "pgcode", None) == LOCK_NOT_AVAILABLE:
        return True
    return "database is locked" in str(orig)


def package_from_row(row: PackageDealRow) -> PackageDeal:
    return PackageDeal(
        id=row.id,
        name=row.name,
        description=row.description or "",
        service_categories=frozenset(ServiceCategory(c) for c in row.service_categories),
        base_price=to_money(row.base_price),
        discount_percentage=Decimal(row.discount_percentage),
        event_types=frozenset(EventType(e) for e in row.event_types),
        cities=frozenset(c.lower() for c in row.cities) if row.cities else None,
        is_active=row.is_active,
    )


def resolve_applied_packages(
    event_id: str,
    applied: dict[str, dict],
    stored: dict[str, PackageDeal],
    fallback: PackageCatalog = package_catalog,
) -> list[AppliedPackage]:
    """Rebuild applied packages from breakdown rows.

    Deals come from the stored catalog first, then the built-in one (the
    catalog used when the store has no deals). Unknown ids are skipped.
    """
    packages = []
    for package_id, info in applied.items():
        deal = stored.get(package_id)
        if deal is None:
            try:
                deal = fallback.get(package_id)
            except NotFoundError:
                logger.warning(f"Event {event_id} references missing package {package_id}")
                continue
        packages.append(AppliedPackage(
            package=deal,
            replaced_amount=to_money(info["replaced_amount"]),
            savings=to_money(info["savings"]),
        ))
    return packages


class BudgetStore:
    def __init__(self, db: AsyncSession, conflict_policy: str | None = None):
        self.db = db
        self.conflict_policy = conflict_policy or settings.tracking_conflict_policy
        if self.conflict_policy not in (LAST_WRITE_WINS, STRICT):
            raise ValueError(f"Unknown tracking conflict policy: {self.conflict_policy}")

    @asynccontextmanager
    async def _upstream(self, operation: str):
        try:
            yield
        except BudgetError:
            await self.db.rollback()
            raise
        except SQLAlchemyError as e:
            logger.error(f"Budget store {operation} failed: {e}")
            await self.db.rollback()
            raise UpstreamUnavailableError(f"Budget data unavailable ({operation})") from e

    async def fetch_base_pricing(self, event_type: EventType) -> PricingTable:
        """Price rows for one event type. An empty table means the catalog has not been seeded."""
        async with self._upstream("fetch_base_pricing"):
            result = await self.db.execute(
                select(ServicePricing).where(ServicePricing.event_type == event_type.value)
            )
            rows = result.scalars().all()

        return PricingTable.from_records(
            (
                r.event_type,
                r.service_category,
                r.city,
                PriceRange(
                    min=to_money(r.price_min),
                    max=to_money(r.price_max),
                    average=to_money(r.price_average),
                    source=PricingSource(r.data_source),
                    observed_at=r.observed_at,
                ),
            )
            for r in rows
        )

    async def fetch_packages(
        self, event_type: EventType | None = None, location: Location | None = None
    ) -> list[PackageDeal]:
        """All deals, or the ones offered for event_type at location when given."""
        async with self._upstream("fetch_packages"):
            result = await self.db.execute(select(PackageDealRow))
            deals = [package_from_row(r) for r in result.scalars().all()]

        if event_type is None:
            return deals
        return PackageCatalog(deals).list_packages(event_type, location)

    async def fetch_tracking(self, event_id: str) -> list[TrackingEntry]:
        async with self._upstream("fetch_tracking"):
            result = await self.db.execute(
                select(BudgetTrackingRow)
                .where(BudgetTrackingRow.event_id == event_id)
                .order_by(BudgetTrackingRow.updated_at)
            )
            rows = result.scalars().all()
        return [
            TrackingEntry(
                service_category=ServiceCategory(r.service_category),
                estimated_cost=to_money(r.estimated_cost),
                actual_cost=to_money(r.actual_cost),
                tracking_date=r.tracking_date,
            )
            for r in rows
        ]

    async def persist_tracking(self, event_id: str, entry: TrackingEntry) -> None:
        await self.persist_tracking_entries(event_id, [entry])

    async def persist_tracking_entries(self, event_id: str, entries: Iterable[TrackingEntry]) -> None:
        """Upsert tracked actuals in one transaction: all entries are written or none are.

        last_write_wins uses INSERT .. ON CONFLICT DO UPDATE so concurrent writers
        to the same (event, category) never collide. strict locks the existing row
        with NOWAIT and reports a concurrent writer as ConflictError.
        """
        latest = {e.service_category: e for e in entries}
        if not latest:
            return

        async with self._upstream("persist_tracking"):
            if self.conflict_policy == STRICT:
                await self._write_tracking_strict(event_id, list(latest.values()))
            else:
                await self._upsert_tracking(event_id, list(latest.values()))
            await self.db.commit()
        logger.debug(f"Persisted {len(latest)} tracking entries for event {event_id}")

    async def _upsert_tracking(self, event_id: str, entries: list[TrackingEntry]) -> None:
        insert = _UPSERT_INSERTS[self.db.get_bind().dialect.name]
        stmt = insert(BudgetTrackingRow).values([
            {
                "id": uuid.uuid4(),
                "event_id": event_id,
                "service_category": e.service_category.value,
                "estimated_cost": e.estimated_cost,
                "actual_cost": e.actual_cost,
                "variance": e.variance,
                "tracking_date": e.tracking_date,
            }
            for e in entries
        ])
        stmt = stmt.on_conflict_do_update(
            index_elements=["event_id", "service_category"],
            set_=dict(
                estimated_cost=stmt.excluded.estimated_cost,
                actual_cost=stmt.excluded.actual_cost,
                variance=stmt.excluded.variance,
                tracking_date=stmt.excluded.tracking_date,
                updated_at=func.now(),
            ),
        )
        await self.db.execute(stmt)

    async def _write_tracking_strict(self, event_id: str, entries: list[TrackingEntry]) -> None:
        try:
            for entry in entries:
                result = await self.db.execute(
                    select(BudgetTrackingRow)
                    .where(
                        BudgetTrackingRow.event_id == event_id,
                        BudgetTrackingRow.service_category == entry.service_category.value,
                    )
                    .with_for_update(nowait=True)
                )
                row = result.scalar_one_or_none()
                if row is None:
                    row = BudgetTrackingRow(event_id=event_id, service_category=entry.service_category.value)
                    self.db.add(row)
                row.estimated_cost = entry.estimated_cost
                row.actual_cost = entry.actual_cost
                row.variance = entry.variance
                row.tracking_date = entry.tracking_date
            await self.db.flush()
        except DBAPIError as e:
            if not is_write_conflict(e):
                raise
            logger.warning(f"Concurrent tracking write for event {event_id}: {e.orig}")
            raise ConflictError(f"Tracking for event {event_id} is being updated concurrently") from e

    async def fetch_service_breakdown(self, event_id: str) -> BudgetPlan | None:
        """Rebuild the persisted plan for an event, or None when nothing is stored."""
        async with self._upstream("fetch_service_breakdown"):
            result = await self.db.execute(
                select(ServiceBudgetBreakdown)
                .where(ServiceBudgetBreakdown.event_id == event_id)
                .order_by(ServiceBudgetBreakdown.service_category)
            )
            rows = result.scalars().all()
            if not rows:
                return None

            adj_result = await self.db.execute(
                select(BudgetAdjustmentRow)
                .where(BudgetAdjustmentRow.event_id == event_id)
                .order_by(BudgetAdjustmentRow.created_at)
            )
            adjustment_rows = adj_result.scalars().all()

            applied = {}
            for r in rows:
                if r.applied_package and r.applied_package["id"] not in applied:
                    applied[r.applied_package["id"]] = r.applied_package
            deals = {}
            if applied:
                pkg_result = await self.db.execute(
                    select(PackageDealRow).where(PackageDealRow.id.in_(list(applied)))
                )
                deals = {p.id: package_from_row(p) for p in pkg_result.scalars().all()}

        plan = BudgetPlan(
            event_id=event_id,
            event_type=EventType(rows[0].event_type) if rows[0].event_type else None,
            recommendations=[
                BudgetRecommendation(
                    service_category=ServiceCategory(r.service_category),
                    recommended_amount=to_money(r.estimated_cost),
                    confidence_score=float(r.confidence_score or 0),
                    pricing_source=PricingSource(r.pricing_source),
                )
                for r in rows
            ],
            adjustments=[
                BudgetAdjustment(
                    service_category=ServiceCategory(a.service_category),
                    adjustment_type=AdjustmentType(a.adjustment_type),
                    adjustment_value=Decimal(a.adjustment_value),
                    reason=a.reason or "",
                )
                for a in adjustment_rows
            ],
        )
        for applied_package in resolve_applied_packages(event_id, applied, deals):
            plan.packages.append(applied_package)
            plan.applied_package_ids.append(applied_package.package.id)

        plan.total_budget = to_money(plan.breakdown_total())
        plan.tracking = await self.fetch_tracking(event_id)
        return plan

    async def persist_breakdown(self, event_id: str, plan: BudgetPlan) -> None:
        """Replace the stored breakdown for an event with the plan's recommendations."""
        covering = {}
        for applied in plan.packages:
            info = {
                "id": applied.package.id,
                "replaced_amount": str(applied.replaced_amount),
                "savings": str(applied.savings),
            }
            for category in applied.package.service_categories:
                covering[category] = info

        last_reason = {a.service_category: a.reason for a in plan.adjustments}

        async with self._upstream("persist_breakdown"):
            await self.db.execute(
                delete(ServiceBudgetBreakdown).where(ServiceBudgetBreakdown.event_id == event_id)
            )
            for r in plan.recommendations:
                self.db.add(ServiceBudgetBreakdown(
                    event_id=event_id,
                    event_type=plan.event_type.value if plan.event_type else None,
                    service_category=r.service_category.value,
                    estimated_cost=r.recommended_amount,
                    confidence_score=Decimal(str(r.confidence_score)),
                    pricing_source=r.pricing_source.value,
                    adjustment_reason=last_reason.get(r.service_category),
                    applied_package=covering.get(r.service_category),
                ))
            await self.db.commit()
        logger.info(
            f"Persisted breakdown for event {event_id}: {len(plan.recommendations)} categories, "
            f"total={plan.total_budget}"
        )

    async def persist_adjustments(self, event_id: str, adjustments: list[BudgetAdjustment]) -> None:
        async with self._upstream("persist_adjustments"):
            for a in adjustments:
                self.db.add(BudgetAdjustmentRow(
                    event_id=event_id,
                    service_category=a.service_category.value,
                    adjustment_type=a.adjustment_type.value,
                    adjustment_value=a.adjustment_value,
                    reason=a.reason or None,
                ))
            await self.db.commit()

    async def record_feedback(self, event: FeedbackEvent) -> None:
        async with self._upstream("record_feedback"):
            self.db.add(RecommendationFeedback(
                event_id=event.event_id,
                event_type=event.event_type.value,
                service_category=event.service_category.value,
                rating=event.rating.value,
                comment=event.comment,
            ))
            await self.db.commit()


class DatabaseFeedbackSink:
    """Feedback sink with its own session; runs after the request session has closed."""

    async def deliver(self, event: FeedbackEvent) -> None:
        async with async_session_factory() as db:
            await BudgetStore(db).record_feedback(event)
