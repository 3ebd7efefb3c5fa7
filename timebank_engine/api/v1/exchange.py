"""POST /v1/exchange - fair hour conversions between categories"""

import time
from fastapi import APIRouter, Depends, Request

from timebank_engine.api.v1.schemas import (
    ExchangeRequest,
    ExchangeResponse,
    TradeExchangeRequest,
    TradeExchangeResponse,
)
from timebank_engine.api.dependencies import get_engine, get_request_id
from timebank_engine.domain.engine import MatchingEngine
from timebank_engine.infrastructure.observability.logging import log_exchange

router = APIRouter()


@router.post("/exchange", response_model=ExchangeResponse)
def compute_exchange(request_body: ExchangeRequest, request: Request, engine: MatchingEngine = Depends(get_engine)):
    """
    Convert hours in one category to the equivalent hours in another.

    Returns:
        hours: equivalent hours of to_category
        credits: credit value of the submitted hours
        rate: hours of to_category per hour of from_category
    """
    start_time = time.time()
    request_id = get_request_id(request)

    quote = engine.compute_exchange(request_body.hours, request_body.from_category, request_body.to_category)

    duration_ms = (time.time() - start_time) * 1000
    log_exchange(
        request_id,
        request_body.from_category,
        request_body.to_category,
        request_body.hours,
        quote.rate,
        duration_ms,
    )

    return ExchangeResponse(hours=quote.hours, credits=quote.credits, rate=quote.rate)


@router.post("/exchange/trade", response_model=TradeExchangeResponse)
def trade_exchange(request_body: TradeExchangeRequest, request: Request, engine: MatchingEngine = Depends(get_engine)):
    start_time = time.time()
    request_id = get_request_id(request)

    trade = engine.calculator.trade_exchange(request_body.hours_a, request_body.category_a, request_body.category_b)

    duration_ms = (time.time() - start_time) * 1000
    log_exchange(
        request_id,
        request_body.category_a,
        request_body.category_b,
        request_body.hours_a,
        trade.exchange_rate,
        duration_ms,
    )

    return TradeExchangeResponse(
        hours_b=trade.hours_b,
        exchange_rate=trade.exchange_rate,
        credits_a=trade.credits_a,
        credits_b=trade.credits_b,
    )
