"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request
from timebank_engine.config import settings
from timebank_engine.domain.categories import CategoryRateRegistry
from timebank_engine.domain.engine import MatchingEngine
from timebank_engine.infrastructure.observability.metrics import record_unknown_category


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_rate_registry(request: Request) -> CategoryRateRegistry:
    """Provide the process-wide category rate registry"""
    return request.app.state.rate_registry


def get_engine(registry: CategoryRateRegistry = Depends(get_rate_registry)) -> MatchingEngine:
    """Provide a matching engine bound to the current rate-table snapshot"""
    return MatchingEngine(
        registry.snapshot(),
        default_rate=settings.default_credit_rate,
        hours_baseline=settings.hours_baseline,
        default_trust_score=settings.default_trust_score,
        balanced_tolerance=settings.balanced_trade_tolerance,
        on_unknown_category=record_unknown_category,
    )
