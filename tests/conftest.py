"""Pytest fixtures for testing"""

import pytest
from fastapi.testclient import TestClient
from timebank_engine.api.main import create_app
from timebank_engine.domain.categories import CategoryRateRegistry, CategoryRateTable
from timebank_engine.domain.engine import MatchingEngine
from timebank_engine.domain.models import ServiceOffering, SkillLevel, UserProfile


@pytest.fixture
def table() -> CategoryRateTable:
    return CategoryRateTable()


@pytest.fixture
def engine(table: CategoryRateTable) -> MatchingEngine:
    return MatchingEngine(table)


@pytest.fixture
def client() -> TestClient:
    """Create FastAPI test client with a fresh rate registry"""
    app = create_app(CategoryRateRegistry())
    return TestClient(app)


@pytest.fixture
def lawyer() -> UserProfile:
    """Established Lagos lawyer: high trust, fast, fully verified"""
    return UserProfile(
        id="user_lawyer",
        category="legal",
        location="Lagos",
        trust_score=90,
        verification_phone=True,
        verification_email=True,
        verification_cac=True,
        response_time_hours=1.5,
        completion_rate=95,
        cancellation_rate=0,
        total_trades=24,
    )


@pytest.fixture
def developer() -> UserProfile:
    """Established Lagos developer with a matching record"""
    return UserProfile(
        id="user_developer",
        category="tech",
        location="Lagos",
        trust_score=90,
        verification_phone=True,
        verification_email=True,
        verification_cac=True,
        response_time_hours=1.0,
        completion_rate=95,
        cancellation_rate=0,
        total_trades=18,
    )


@pytest.fixture
def newcomer() -> UserProfile:
    """Unverified caterer in a small town with a shaky record"""
    return UserProfile(
        id="user_newcomer",
        category="food",
        location="Lokoja",
        trust_score=30,
        response_time_hours=36,
        completion_rate=50,
        cancellation_rate=40,
        total_trades=1,
    )


@pytest.fixture
def legal_service() -> ServiceOffering:
    return ServiceOffering(
        id="svc_legal",
        user_id="user_lawyer",
        category="legal",
        skill_level=SkillLevel.EXPERT,
        avg_delivery_days=3,
        success_rate=96,
    )


@pytest.fixture
def tech_service() -> ServiceOffering:
    return ServiceOffering(
        id="svc_tech",
        user_id="user_developer",
        category="tech",
        skill_level=SkillLevel.EXPERT,
        avg_delivery_days=4,
        success_rate=92,
    )


@pytest.fixture
def food_service() -> ServiceOffering:
    return ServiceOffering(
        id="svc_food",
        user_id="user_newcomer",
        category="food",
        skill_level=SkillLevel.BEGINNER,
        avg_delivery_days=20,
        success_rate=40,
    )
