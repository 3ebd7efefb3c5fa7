"""Unit tests for compatibility scoring logic"""

import itertools
from dataclasses import replace
from datetime import date

import pytest
from timebank_engine.domain.engine import MatchingEngine
from timebank_engine.domain.models import (
    Priority,
    Recommendation,
    RiskFactor,
    ScoreBreakdown,
    ServiceOffering,
    SkillLevel,
    UserProfile,
)
from timebank_engine.domain.scoring import (
    SCORING_WEIGHTS,
    determine_priority,
    estimate_success_rate,
    location_proximity,
    market_timing,
    response_speed,
    skill_level_match,
    time_compatibility,
    trust_compatibility,
    verification_level,
)

# November is the seasonal peak (multiplier capped at 1.0), January the slowest month
PEAK_SEASON = date(2025, 11, 15)
SLOW_SEASON = date(2025, 1, 15)


def _breakdown(value: float) -> ScoreBreakdown:
    return ScoreBreakdown(*([value] * 10))


def test_weights_sum_to_one():
    assert sum(SCORING_WEIGHTS.values()) == pytest.approx(1.0)
    assert len(SCORING_WEIGHTS) == 10


def test_same_city_high_trust_pair_scores_near_maximum(lawyer: UserProfile, developer: UserProfile):
    """Trust 90, completion 95%, no cancellations, both in Lagos"""
    assert trust_compatibility(lawyer, developer) >= 0.9
    assert location_proximity(lawyer.location, developer.location) >= 0.9


def test_trust_compatibility_components(lawyer: UserProfile, newcomer: UserProfile):
    # similarity 0.4, trust factor 0.8, completion factor 0.8625, cancellation factor 0.8
    assert trust_compatibility(lawyer, newcomer) == pytest.approx(0.2208)


def test_trust_compatibility_monotonic_in_shared_trust(lawyer: UserProfile, developer: UserProfile):
    previous = -1.0
    for trust in range(0, 101, 5):
        value = trust_compatibility(replace(lawyer, trust_score=trust), replace(developer, trust_score=trust))
        assert value >= previous
        previous = value


def test_trust_compatibility_cancellation_penalty_is_floored(lawyer: UserProfile, developer: UserProfile):
    clean = trust_compatibility(lawyer, developer)
    flaky = trust_compatibility(replace(lawyer, cancellation_rate=100), replace(developer, cancellation_rate=100))
    assert flaky == pytest.approx(clean * 0.5)


def test_location_proximity():
    assert location_proximity("Lagos", "lagos") == 1.0
    assert location_proximity("Lagos", "Abuja") == pytest.approx(0.665)  # (100 + 90) / 2 / 100 * 0.7
    assert location_proximity("Lokoja", "Lokoja") == 0.3
    assert location_proximity(None, "Lagos") == 0.3
    assert location_proximity("", "") == 0.3


@pytest.mark.parametrize(
    "days_a,days_b,expected",
    [(3, 3, 1.0), (1, 3, 1.0), (2, 7, 0.8), (0, 10, 0.6), (0, 11, 0.3)],
)
def test_time_compatibility_steps(days_a, days_b, expected):
    assert time_compatibility(days_a, days_b) == expected


def test_skill_level_match():
    assert skill_level_match(SkillLevel.EXPERT, SkillLevel.EXPERT) == 1.0
    assert skill_level_match(SkillLevel.EXPERT, SkillLevel.INTERMEDIATE) == 0.8
    assert skill_level_match(SkillLevel.EXPERT, SkillLevel.BEGINNER) == 0.5
    # Raw labels are parsed case-insensitively; unknown counts as intermediate
    assert skill_level_match("Expert", "expert") == 1.0
    assert skill_level_match("guru", "Beginner") == 0.8


@pytest.mark.parametrize(
    "hours_a,hours_b,expected",
    [(1, 2, 1.0), (5, 6, 0.8), (20, 20, 0.6), (24, 24, 0.3)],
)
def test_response_speed_steps(hours_a, hours_b, expected):
    assert response_speed(hours_a, hours_b) == expected


def test_verification_level(lawyer: UserProfile, newcomer: UserProfile):
    assert verification_level(lawyer, lawyer) == 1.0
    assert verification_level(newcomer, newcomer) == 0.0

    phone_only = replace(newcomer, verification_phone=True)
    assert verification_level(phone_only, newcomer) == pytest.approx(0.2)

    phone_and_email = replace(newcomer, verification_phone=True, verification_email=True)
    assert verification_level(phone_and_email, phone_only) == pytest.approx(0.55)


def test_market_timing_is_capped():
    assert market_timing(PEAK_SEASON) == 1.0
    assert market_timing(SLOW_SEASON) == 0.8
    assert market_timing(date(2025, 7, 1)) == 0.9


def test_category_demand(engine: MatchingEngine):
    scorer = engine.scorer
    assert scorer.category_demand("legal", "tech") == 1.0  # both popular, complementary
    assert scorer.category_demand("legal", "food") == pytest.approx(0.65)
    assert scorer.category_demand("food", "cleaning") == 0.5
    assert scorer.category_demand("legal", "xyz") == 0.5


@pytest.mark.parametrize(
    "category_a,category_b,expected",
    [
        ("legal", "tech", 1.0),
        ("legal", "photography", 0.8),
        ("photography", "event_planning", 0.95),
        ("generator_repair", "transportation", 0.95),
        ("legal", "food", 0.65),
        ("food", "cleaning", 0.5),
    ],
)
def test_category_demand_averages_popularity(engine: MatchingEngine, category_a, category_b, expected):
    assert engine.scorer.category_demand(category_a, category_b) == pytest.approx(expected)
    assert engine.scorer.category_demand(category_b, category_a) == pytest.approx(expected)


def test_business_type(engine: MatchingEngine):
    scorer = engine.scorer
    assert scorer.business_type("legal", "tech") == 1.0
    assert scorer.business_type("food", "cleaning") == 0.8
    assert scorer.business_type("legal", "food") == 0.7
    assert scorer.business_type("photography", "food") == 0.8


def test_exchange_fairness(engine: MatchingEngine, legal_service: ServiceOffering, tech_service: ServiceOffering):
    # 1.67 * 0.6 = 1.002 -> balance 0.998; same skill level -> full 0.3
    assert engine.scorer.exchange_fairness(legal_service, tech_service) == pytest.approx(0.9986)


def test_score_strong_pair(
    engine: MatchingEngine,
    lawyer: UserProfile,
    developer: UserProfile,
    legal_service: ServiceOffering,
    tech_service: ServiceOffering,
):
    score = engine.score(lawyer, developer, legal_service, tech_service, as_of=PEAK_SEASON)

    assert score.total_score == 99
    assert score.priority == Priority.URGENT
    assert score.recommendations == []
    assert score.risk_factors == []
    assert score.estimated_success_rate == 95  # 97 before the cap


def test_score_uses_as_of_for_seasonality(
    engine: MatchingEngine,
    lawyer: UserProfile,
    developer: UserProfile,
    legal_service: ServiceOffering,
    tech_service: ServiceOffering,
):
    peak = engine.score(lawyer, developer, legal_service, tech_service, as_of=PEAK_SEASON)
    slow = engine.score(lawyer, developer, legal_service, tech_service, as_of=SLOW_SEASON)

    assert slow.breakdown.market_timing == 0.8
    assert slow.total_score == peak.total_score - 1


def test_score_weak_pair(
    engine: MatchingEngine,
    lawyer: UserProfile,
    newcomer: UserProfile,
    legal_service: ServiceOffering,
    food_service: ServiceOffering,
):
    score = engine.score(newcomer, lawyer, food_service, legal_service, as_of=PEAK_SEASON)

    assert score.total_score == 50
    assert score.priority == Priority.LOW
    assert set(score.risk_factors) == {
        RiskFactor.HIGH_CANCELLATION,
        RiskFactor.LIMITED_EXPERIENCE,
        RiskFactor.LOW_TRUST,
        RiskFactor.MISMATCHED_TIMELINES,
    }
    assert Recommendation.START_SMALL in score.recommendations
    assert Recommendation.PLAN_REMOTE in score.recommendations
    assert Recommendation.NEGOTIATE_HOURS in score.recommendations
    assert Recommendation.SET_EXPECTATIONS not in score.recommendations


def test_score_is_idempotent(
    engine: MatchingEngine,
    lawyer: UserProfile,
    newcomer: UserProfile,
    legal_service: ServiceOffering,
    food_service: ServiceOffering,
):
    first = engine.score(lawyer, newcomer, legal_service, food_service, as_of=SLOW_SEASON)
    second = engine.score(lawyer, newcomer, legal_service, food_service, as_of=SLOW_SEASON)

    assert first == second


def test_score_bounds_over_extreme_profiles(engine: MatchingEngine):
    users = [
        UserProfile(id="low", category="food", trust_score=0, response_time_hours=200, completion_rate=0,
                    cancellation_rate=100, total_trades=0),
        UserProfile(id="high", category="legal", location="Lagos", trust_score=100, verification_phone=True,
                    verification_email=True, verification_cac=True, response_time_hours=0, completion_rate=100,
                    cancellation_rate=0, total_trades=500),
        UserProfile(id="mid", category="xyz", location="Kano", trust_score=50, response_time_hours=5,
                    completion_rate=60, cancellation_rate=10, total_trades=4),
    ]
    services = [
        ServiceOffering(id="s1", user_id="low", category="food", skill_level=SkillLevel.BEGINNER, avg_delivery_days=60),
        ServiceOffering(id="s2", user_id="high", category="legal", skill_level=SkillLevel.EXPERT, avg_delivery_days=0),
        ServiceOffering(id="s3", user_id="mid", category="xyz", avg_delivery_days=5),
    ]

    for (user_a, user_b), (service_a, service_b) in itertools.product(
        itertools.product(users, repeat=2), itertools.product(services, repeat=2)
    ):
        score = engine.score(user_a, user_b, service_a, service_b, as_of=PEAK_SEASON)
        assert 0 <= score.total_score <= 100
        assert 10 <= score.estimated_success_rate <= 95
        assert all(0.0 <= value <= 1.0 for value in vars(score.breakdown).values())


def test_success_rate_operands_share_percent_scale(lawyer: UserProfile):
    """Completion rate is already 0-100; sub-score mean is lifted from 0-1 before blending"""
    user = replace(lawyer, completion_rate=80)
    # 0.6 * 80 + 0.4 * (0.5 * 100) = 48 + 20
    assert estimate_success_rate(_breakdown(0.5), user, user) == 68


def test_success_rate_clamped():
    perfect = UserProfile(id="a", category="legal", completion_rate=100)
    hopeless = UserProfile(id="b", category="legal", completion_rate=0)

    assert estimate_success_rate(_breakdown(1.0), perfect, perfect) == 95
    assert estimate_success_rate(_breakdown(0.0), hopeless, hopeless) == 10


@pytest.mark.parametrize(
    "total,demand,expected",
    [
        (90, 0.9, Priority.URGENT),
        (85, 1.0, Priority.URGENT),
        (90, 0.8, Priority.HIGH),
        (75, 0.5, Priority.HIGH),
        (74, 1.0, Priority.MEDIUM),
        (60, 0.5, Priority.MEDIUM),
        (59, 1.0, Priority.LOW),
    ],
)
def test_determine_priority(total, demand, expected):
    breakdown = replace(_breakdown(0.5), category_demand=demand)
    assert determine_priority(total, breakdown) == expected


def test_codes_carry_messages():
    assert Recommendation.START_SMALL.message == "Consider starting with a smaller trade to build trust"
    assert RiskFactor.LIMITED_EXPERIENCE.message == "Limited trade experience"
    assert all(code.message for code in Recommendation)
    assert all(code.message for code in RiskFactor)
