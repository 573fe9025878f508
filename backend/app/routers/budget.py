"""Budget router — recommendations, pricing lookups, packages, validation and tracking."""

import logging
from datetime import date

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.schemas.budget import (
    ApplyPackageRequest,
    BreakdownUpdateRequest,
    BudgetPlanIn,
    FeedbackRequest,
    SuggestionsRequest,
    TrackingRequest,
)
from app.services.budget.adjustments import budget_adjuster
from app.services.budget.errors import BudgetError, NotFoundError
from app.services.budget.feedback import FeedbackSink, deliver_feedback
from app.services.budget.location_adjuster import location_adjuster
from app.services.budget.package_catalog import PackageCatalog, package_catalog
from app.services.budget.pricing_catalog import PricingCatalog, pricing_catalog
from app.services.budget.recommendation_engine import RecommendationEngine
from app.services.budget.seasonal_adjuster import seasonal_adjuster
from app.services.budget.store import BudgetStore, DatabaseFeedbackSink
from app.services.budget.suggestion_generator import suggestion_generator
from app.services.budget.tracking_ledger import tracking_ledger
from app.services.budget.types import BudgetPlan, EventType, Location, parse_enum
from app.services.budget.validation_scorer import validation_scorer
from app.services.cache_service import cache_service

logger = logging.getLogger(__name__)

router = APIRouter()


def get_store(db: AsyncSession = Depends(get_db)) -> BudgetStore:
    return BudgetStore(db)


def get_feedback_sink() -> FeedbackSink:
    return DatabaseFeedbackSink()


def _http_error(e: BudgetError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.message)


def _location(
    lat: float | None, lng: float | None, city: str | None, region: str | None, country: str | None
) -> Location:
    return Location(latitude=lat, longitude=lng, city=city, region=region, country=country)


async def _pricing_catalog(store: BudgetStore, event_type: EventType) -> PricingCatalog:
    table = await store.fetch_base_pricing(event_type)
    if not len(table):
        logger.warning(f"No stored pricing for {event_type.value}, using built-in table")
        return pricing_catalog
    return PricingCatalog(table)


async def _package_catalog(store: BudgetStore) -> PackageCatalog:
    deals = await store.fetch_packages()
    if not deals:
        return package_catalog
    return PackageCatalog(deals)


@router.get("/recommendations")
async def get_recommendations(
    event_type: str = Query(..., description="wedding, corporate, conference, ..."),
    attendee_count: int = Query(100, description="Expected attendees"),
    duration_hours: float = Query(8.0, allow_inf_nan=False, description="Event length in hours"),
    event_date: date = Query(..., description="Event date (YYYY-MM-DD)"),
    lat: float | None = Query(None, allow_inf_nan=False),
    lng: float | None = Query(None, allow_inf_nan=False),
    city: str | None = None,
    region: str | None = None,
    country: str | None = None,
    store: BudgetStore = Depends(get_store),
):
    """Recommended per-category budget adjusted for season and location."""
    params = {
        "event_type": event_type.lower(),
        "attendee_count": attendee_count,
        "duration_hours": duration_hours,
        "event_date": event_date.isoformat(),
        "location": [lat, lng, city, region, country],
    }
    cached = await cache_service.get_recommendations(params)
    if cached:
        return cached

    try:
        evt = parse_enum(EventType, event_type, "event type")
        engine = RecommendationEngine(
            catalog=await _pricing_catalog(store, evt),
            seasonal_adjuster=seasonal_adjuster,
            location_adjuster=location_adjuster,
        )
        result = engine.recommend(
            evt, attendee_count, duration_hours, event_date,
            _location(lat, lng, city, region, country),
        )
    except BudgetError as e:
        raise _http_error(e)

    data = result.to_dict()
    await cache_service.set_recommendations(params, data)
    return data


@router.get("/pricing")
async def get_pricing(
    service_type: str = Query(..., description="Service category"),
    event_type: str = Query("wedding"),
    city: str | None = None,
    store: BudgetStore = Depends(get_store),
):
    """Base price range for a service category."""
    try:
        evt = parse_enum(EventType, event_type, "event type")
        catalog = await _pricing_catalog(store, evt)
        price = catalog.get_base_price(service_type, evt, Location(city=city))
    except BudgetError as e:
        raise _http_error(e)

    return {
        "pricing": {
            "service_type": service_type.lower(),
            "event_type": evt.value,
            "base_pricing": price.to_dict(),
        },
    }


@router.get("/seasonal")
async def get_seasonal_pricing(
    service_type: str = Query(...),
    event_date: date = Query(...),
    event_type: str = Query("wedding"),
    lat: float | None = Query(None, allow_inf_nan=False),
    lng: float | None = Query(None, allow_inf_nan=False),
    city: str | None = None,
    region: str | None = None,
    country: str | None = None,
    store: BudgetStore = Depends(get_store),
):
    """Seasonal adjustment and off-peak savings for a service on a date."""
    location = _location(lat, lng, city, region, country)
    try:
        evt = parse_enum(EventType, event_type, "event type")
        catalog = await _pricing_catalog(store, evt)
        price = catalog.get_base_price(service_type, evt, location)
        pricing = seasonal_adjuster.seasonal_pricing(price, event_date, location)
    except BudgetError as e:
        raise _http_error(e)

    return {"service_type": service_type.lower(), "event_date": event_date.isoformat(), **pricing.to_dict()}


@router.get("/location")
async def get_location_pricing(
    service_type: str = Query(...),
    event_type: str = Query("wedding"),
    lat: float | None = Query(None, allow_inf_nan=False),
    lng: float | None = Query(None, allow_inf_nan=False),
    city: str | None = None,
    region: str | None = None,
    country: str | None = None,
    store: BudgetStore = Depends(get_store),
):
    """Location multiplier and cost-of-living analysis for a service."""
    location = _location(lat, lng, city, region, country)
    try:
        evt = parse_enum(EventType, event_type, "event type")
        catalog = await _pricing_catalog(store, evt)
        price = catalog.get_base_price(service_type, evt, location)
        pricing = location_adjuster.location_pricing(price, service_type, location)
    except BudgetError as e:
        raise _http_error(e)

    return pricing.to_dict()


@router.get("/packages")
async def list_packages(
    event_type: str = Query(...),
    city: str | None = None,
    store: BudgetStore = Depends(get_store),
):
    """Active package deals for an event type, best savings first."""
    cached = await cache_service.get_packages(event_type, city)
    if cached is not None:
        return {"packages": cached}

    try:
        evt = parse_enum(EventType, event_type, "event type")
        deals = await store.fetch_packages(evt, Location(city=city))
        if not deals:
            deals = package_catalog.list_packages(evt, Location(city=city))
    except BudgetError as e:
        raise _http_error(e)

    data = [d.to_dict() for d in deals]
    await cache_service.set_packages(event_type, city, data)
    return {"packages": data}


@router.post("/packages/apply")
async def apply_package(req: ApplyPackageRequest, store: BudgetStore = Depends(get_store)):
    """Fold a package deal into a plan and return the new plan."""
    try:
        plan = req.plan.to_domain()
        catalog = await _package_catalog(store)
        new_plan = catalog.apply_package(plan, req.package_id)
    except BudgetError as e:
        raise _http_error(e)

    return new_plan.to_dict()


@router.post("/validate")
async def validate_plan(plan: BudgetPlanIn):
    try:
        result = validation_scorer.validate(plan.to_domain())
    except BudgetError as e:
        raise _http_error(e)
    return result.to_dict()


@router.post("/suggestions")
async def get_suggestions(req: SuggestionsRequest):
    try:
        suggestions = suggestion_generator.generate(req.plan.to_domain())
        if req.rank_by:
            suggestions = suggestion_generator.rank(suggestions, by=req.rank_by)
    except BudgetError as e:
        raise _http_error(e)
    return {"suggestions": [s.to_dict() for s in suggestions]}


@router.get("/events/{event_id}/breakdown")
async def get_breakdown(event_id: str, store: BudgetStore = Depends(get_store)):
    try:
        plan = await store.fetch_service_breakdown(event_id)
        if plan is None:
            raise NotFoundError(f"No budget breakdown for event {event_id}")
    except BudgetError as e:
        raise _http_error(e)
    return plan.to_dict()


@router.put("/events/{event_id}/breakdown")
async def update_breakdown(
    event_id: str,
    req: BreakdownUpdateRequest,
    store: BudgetStore = Depends(get_store),
):
    """Store a plan for the event and/or apply manual adjustments to it."""
    try:
        if req.plan is not None:
            plan = req.plan.to_domain()
            plan.event_id = event_id
            plan.tracking = await store.fetch_tracking(event_id)
        else:
            plan = await store.fetch_service_breakdown(event_id) or BudgetPlan(event_id=event_id)

        adjustments = [a.to_domain() for a in req.adjustments]
        if adjustments:
            plan = budget_adjuster.apply_adjustments(plan, adjustments)
        else:
            plan = plan.with_recommendations(plan.recommendations)

        await store.persist_breakdown(event_id, plan)
        if adjustments:
            await store.persist_adjustments(event_id, adjustments)
    except BudgetError as e:
        raise _http_error(e)

    return plan.to_dict()


@router.get("/events/{event_id}/tracking")
async def get_tracking(event_id: str, store: BudgetStore = Depends(get_store)):
    """Tracked actuals for an event with variance insights."""
    try:
        plan = await store.fetch_service_breakdown(event_id)
        if plan is None:
            plan = BudgetPlan(event_id=event_id, tracking=await store.fetch_tracking(event_id))
    except BudgetError as e:
        raise _http_error(e)

    return {
        "event_id": event_id,
        "tracking": [t.to_dict() for t in plan.tracking],
        "insights": tracking_ledger.insights(plan).to_dict(),
    }


@router.post("/events/{event_id}/tracking")
async def record_tracking(
    event_id: str,
    req: TrackingRequest,
    store: BudgetStore = Depends(get_store),
):
    """Record actual costs for one or more categories."""
    try:
        plan = await store.fetch_service_breakdown(event_id)
        if plan is None:
            plan = BudgetPlan(event_id=event_id, tracking=await store.fetch_tracking(event_id))

        entries = [
            tracking_ledger.record_actual(plan, category, actual_cost, req.tracking_date)
            for category, actual_cost in req.items()
        ]
        await store.persist_tracking_entries(event_id, entries)
    except BudgetError as e:
        raise _http_error(e)

    return {
        "success": True,
        "tracking": [e.to_dict() for e in entries],
        "insights": tracking_ledger.insights(plan).to_dict(),
    }


@router.post("/recommendations/feedback", status_code=202)
async def submit_feedback(
    req: FeedbackRequest,
    background_tasks: BackgroundTasks,
    sink: FeedbackSink = Depends(get_feedback_sink),
):
    """Thumbs up / down on a recommendation. Delivered after the response."""
    try:
        event = req.to_domain()
    except BudgetError as e:
        raise _http_error(e)

    background_tasks.add_task(deliver_feedback, sink, event)
    return {"success": True}
