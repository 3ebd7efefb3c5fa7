"""Category catalogue, market rates and the admin multiplier update"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query, Request

from timebank_engine.api.v1.schemas import CategoriesResponse, CategorySchema, EarningsResponse, MarketRateUpdate
from timebank_engine.api.dependencies import get_engine, get_rate_registry, get_request_id
from timebank_engine.domain.categories import CategoryRateRegistry, CategoryRateTable
from timebank_engine.domain.engine import MatchingEngine
from timebank_engine.domain.exceptions import InvalidMultiplierError, UnknownCategoryError
from timebank_engine.domain.exchange import ExchangeRateCalculator
from timebank_engine.domain.models import ServiceCategory
from timebank_engine.infrastructure.observability.metrics import market_rate_update_counter

router = APIRouter()

HOURS_PER_WEEK = 168


def _category_schema(category: ServiceCategory, calculator: ExchangeRateCalculator) -> CategorySchema:
    return CategorySchema(
        id=category.id,
        name=category.name,
        base_rate=category.base_rate,
        demand=category.demand,
        supply=category.supply,
        popular=category.popular,
        common_needs=list(category.common_needs),
        business_class=category.business_class,
        credits_per_hour=calculator.credits_for(1, category.id),
    )


@router.get("/categories", response_model=CategoriesResponse)
def list_categories(
    popular: bool = Query(False, description="Only popular categories"),
    engine: MatchingEngine = Depends(get_engine),
):
    """List service categories with their current one-hour credit value"""
    categories = engine.table.popular() if popular else list(engine.table)
    return CategoriesResponse(categories=[_category_schema(c, engine.calculator) for c in categories])


@router.put("/categories/{category_id}/market-rates", response_model=CategorySchema)
def update_market_rates(
    category_id: str,
    request_body: MarketRateUpdate,
    request: Request,
    registry: CategoryRateRegistry = Depends(get_rate_registry),
):
    """
    Replace a category's demand/supply multipliers.

    Non-positive multipliers are rejected; accepted values are clamped to
    0.5 - 2.0. Calculations already in flight keep the table they started with.
    """
    request_id = get_request_id(request)

    try:
        category = registry.update_market_rates(category_id, request_body.demand, request_body.supply)
    except InvalidMultiplierError as e:
        logging.warning(f"Rejected market rate update: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=400, detail=str(e))
    except UnknownCategoryError as e:
        logging.warning(f"Market rate update for unknown category: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail=str(e))

    market_rate_update_counter.labels(category=category.id).inc()
    logging.info(
        "Market rates updated",
        extra={
            "request_id": request_id,
            "category": category.id,
            "demand": category.demand,
            "supply": category.supply,
        },
    )
    # Credits follow the multipliers returned above
    return _category_schema(category, ExchangeRateCalculator(CategoryRateTable([category])))


@router.get("/categories/{category_id}/earnings", response_model=EarningsResponse)
def get_potential_earnings(
    category_id: str,
    hours_per_week: float = Query(
        10, gt=0, le=HOURS_PER_WEEK, allow_inf_nan=False, description="Hours offered per week"
    ),
    engine: MatchingEngine = Depends(get_engine),
):
    """Projected weekly and monthly credits for a service posting"""
    earnings = engine.calculator.potential_earnings(category_id, hours_per_week)
    return EarningsResponse(category=category_id, hours_per_week=hours_per_week, **earnings)
