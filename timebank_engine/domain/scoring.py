"""Compatibility scoring engine - core business logic for trade matching"""

from dataclasses import astuple
from datetime import date
from typing import Dict, List, Optional

from timebank_engine.domain.categories import CategoryRateTable, is_complementary
from timebank_engine.domain.exchange import ExchangeRateCalculator
from timebank_engine.domain.models import (
    BusinessClass,
    MatchScore,
    Priority,
    Recommendation,
    RiskFactor,
    ScoreBreakdown,
    ServiceOffering,
    SkillLevel,
    UserProfile,
)
from timebank_engine.utils.rounding import clamp, round_half_up

# Nigerian market weights, summing to 1.0
SCORING_WEIGHTS: Dict[str, float] = {
    "trust_compatibility": 0.20,
    "location_proximity": 0.15,
    "category_demand": 0.12,
    "exchange_fairness": 0.12,
    "time_compatibility": 0.10,
    "skill_level_match": 0.08,
    "response_speed": 0.08,
    "verification_level": 0.06,
    "market_timing": 0.05,
    "business_type": 0.04,
}

# Business importance of major commercial centres, 0-100
LOCATION_SCORES: Dict[str, int] = {
    "lagos": 100,
    "abuja": 90,
    "port harcourt": 85,
    "kano": 80,
    "ibadan": 75,
    "benin city": 70,
    "kaduna": 65,
    "jos": 60,
    "aba": 55,
}
DEFAULT_LOCATION_SCORE = 30
UNKNOWN_LOCATION_PROXIMITY = 0.3
DIFFERENT_CITY_PENALTY = 0.7

# Business activity by month (index 1 = January)
SEASONAL_MULTIPLIERS: Dict[int, float] = {
    1: 0.8,  # post-holiday slowdown
    2: 0.9,
    3: 1.0,
    4: 1.1,
    5: 1.1,
    6: 1.0,
    7: 0.9,
    8: 1.0,
    9: 1.1,
    10: 1.2,
    11: 1.3,  # peak season
    12: 1.1,
}

POPULAR_DEMAND = 0.8
REGULAR_DEMAND = 0.5
COMPLEMENTARY_BONUS = 0.3


def _location_key(location: Optional[str]) -> str:
    return (location or "").strip().lower()


class CompatibilityScorer:
    """
    Scores how well two members' services fit each other.

    Each of the ten factors is normalised to [0, 1], weighted by
    SCORING_WEIGHTS and summed; the total is reported on a 0-100 scale.
    The scorer keeps no state between calls.
    """

    def __init__(self, table: CategoryRateTable, calculator: ExchangeRateCalculator):
        self.table = table
        self.calculator = calculator

    def score(
        self,
        user_a: UserProfile,
        user_b: UserProfile,
        service_a: ServiceOffering,
        service_b: ServiceOffering,
        as_of: Optional[date] = None,
    ) -> MatchScore:
        as_of = as_of or date.today()

        breakdown = ScoreBreakdown(
            trust_compatibility=trust_compatibility(user_a, user_b),
            location_proximity=location_proximity(user_a.location, user_b.location),
            category_demand=self.category_demand(service_a.category, service_b.category),
            exchange_fairness=self.exchange_fairness(service_a, service_b),
            time_compatibility=time_compatibility(service_a.avg_delivery_days, service_b.avg_delivery_days),
            skill_level_match=skill_level_match(service_a.skill_level, service_b.skill_level),
            response_speed=response_speed(user_a.response_time_hours, user_b.response_time_hours),
            verification_level=verification_level(user_a, user_b),
            market_timing=market_timing(as_of),
            business_type=self.business_type(service_a.category, service_b.category),
        )

        weighted = sum(getattr(breakdown, name) * weight for name, weight in SCORING_WEIGHTS.items())
        total_score = int(round_half_up(weighted * 100))

        return MatchScore(
            total_score=total_score,
            breakdown=breakdown,
            recommendations=generate_recommendations(breakdown),
            risk_factors=identify_risk_factors(breakdown, user_a, user_b),
            estimated_success_rate=estimate_success_rate(breakdown, user_a, user_b),
            priority=determine_priority(total_score, breakdown),
        )

    def category_demand(self, category_a: str, category_b: str) -> float:
        """Average popularity of both categories plus a bonus for pairs that trade well together"""
        cat_a = self.table.get(category_a)
        cat_b = self.table.get(category_b)

        if cat_a is None or cat_b is None:
            return 0.5

        popularity = (
            (POPULAR_DEMAND if cat_a.popular else REGULAR_DEMAND) + (POPULAR_DEMAND if cat_b.popular else REGULAR_DEMAND)
        ) / 2
        bonus = COMPLEMENTARY_BONUS if is_complementary(cat_a.id, cat_b.id) else 0.0

        return min(1.0, popularity + bonus)

    def exchange_fairness(self, service_a: ServiceOffering, service_b: ServiceOffering) -> float:
        rate = self.calculator.exchange_rate(service_a.category, service_b.category)
        inverse = self.calculator.exchange_rate(service_b.category, service_a.category)
        balance = max(0.0, 1 - abs(1 - rate * inverse))

        skill_gap = abs(SkillLevel.parse(service_a.skill_level).rank - SkillLevel.parse(service_b.skill_level).rank)
        skill_similarity = max(0.0, 1 - skill_gap / 2)

        return balance * 0.7 + skill_similarity * 0.3

    def business_type(self, category_a: str, category_b: str) -> float:
        # Anything outside the B2B set is scored as consumer-facing
        is_b2b_a = self.table.business_class(category_a) == BusinessClass.B2B
        is_b2b_b = self.table.business_class(category_b) == BusinessClass.B2B

        if is_b2b_a and is_b2b_b:
            return 1.0
        if is_b2b_a != is_b2b_b:
            return 0.7
        return 0.8


def trust_compatibility(user_a: UserProfile, user_b: UserProfile) -> float:
    """
    Reward similar, high trust and good completion history; penalise cancellations.

    Components:
    - similarity: 1 - |trust gap| / 100
    - average trust: scaled into [0.5, 1.0]
    - completion: mean completion rate scaled into [0.5, 1.0]
    - cancellation: 1 - mean cancellation rate, floored at 0.5
    """
    trust_a = clamp(user_a.trust_score, 0, 100)
    trust_b = clamp(user_b.trust_score, 0, 100)

    similarity = max(0.0, 1 - abs(trust_a - trust_b) / 100)
    avg_trust = (trust_a + trust_b) / 2
    trust_factor = 0.5 + 0.5 * avg_trust / 100

    avg_completion = clamp((user_a.completion_rate + user_b.completion_rate) / 2, 0, 100)
    completion_factor = 0.5 + 0.5 * avg_completion / 100

    avg_cancellation = (user_a.cancellation_rate + user_b.cancellation_rate) / 2
    cancellation_factor = max(0.5, 1 - avg_cancellation / 100)

    return min(1.0, similarity * trust_factor * completion_factor * cancellation_factor)


def location_proximity(location_a: Optional[str], location_b: Optional[str]) -> float:
    key_a = _location_key(location_a)
    key_b = _location_key(location_b)
    if not key_a or not key_b:
        return UNKNOWN_LOCATION_PROXIMITY

    score_a = LOCATION_SCORES.get(key_a, DEFAULT_LOCATION_SCORE)
    score_b = LOCATION_SCORES.get(key_b, DEFAULT_LOCATION_SCORE)

    if key_a == key_b:
        return score_a / 100

    return (score_a + score_b) / 2 / 100 * DIFFERENT_CITY_PENALTY


def time_compatibility(delivery_days_a: float, delivery_days_b: float) -> float:
    gap = abs(delivery_days_a - delivery_days_b)

    if gap <= 2:
        return 1.0
    elif gap <= 5:
        return 0.8
    elif gap <= 10:
        return 0.6
    else:
        return 0.3


def skill_level_match(skill_a, skill_b) -> float:
    gap = abs(SkillLevel.parse(skill_a).rank - SkillLevel.parse(skill_b).rank)

    if gap == 0:
        return 1.0
    elif gap == 1:
        return 0.8
    return 0.5


def response_speed(response_hours_a: float, response_hours_b: float) -> float:
    avg_response = (response_hours_a + response_hours_b) / 2

    if avg_response < 2:
        return 1.0
    elif avg_response < 6:
        return 0.8
    elif avg_response < 24:
        return 0.6
    else:
        return 0.3


def _verification_credit(verified_a: bool, verified_b: bool, full: float) -> float:
    if verified_a and verified_b:
        return full
    if verified_a or verified_b:
        return full / 2
    return 0.0


def verification_level(user_a: UserProfile, user_b: UserProfile) -> float:
    """Phone 0.4, email 0.3, business registration 0.3; half credit when only one side is verified"""
    score = (
        _verification_credit(user_a.verification_phone, user_b.verification_phone, 0.4)
        + _verification_credit(user_a.verification_email, user_b.verification_email, 0.3)
        + _verification_credit(user_a.verification_cac, user_b.verification_cac, 0.3)
    )
    return min(1.0, score)


def market_timing(as_of: date) -> float:
    return min(1.0, SEASONAL_MULTIPLIERS.get(as_of.month, 1.0))


def generate_recommendations(breakdown: ScoreBreakdown) -> List[Recommendation]:
    recommendations = []

    if breakdown.trust_compatibility < 0.6:
        recommendations.append(Recommendation.START_SMALL)
    if breakdown.location_proximity < 0.5:
        recommendations.append(Recommendation.PLAN_REMOTE)
    if breakdown.exchange_fairness < 0.7:
        recommendations.append(Recommendation.NEGOTIATE_HOURS)
    if breakdown.response_speed < 0.6:
        recommendations.append(Recommendation.SET_EXPECTATIONS)
    if breakdown.verification_level < 0.5:
        recommendations.append(Recommendation.COMPLETE_VERIFICATION)

    return recommendations


def identify_risk_factors(breakdown: ScoreBreakdown, user_a: UserProfile, user_b: UserProfile) -> List[RiskFactor]:
    risks = []

    if user_a.cancellation_rate > 20 or user_b.cancellation_rate > 20:
        risks.append(RiskFactor.HIGH_CANCELLATION)
    if user_a.total_trades < 3 or user_b.total_trades < 3:
        risks.append(RiskFactor.LIMITED_EXPERIENCE)
    if breakdown.trust_compatibility < 0.4:
        risks.append(RiskFactor.LOW_TRUST)
    if breakdown.time_compatibility < 0.5:
        risks.append(RiskFactor.MISMATCHED_TIMELINES)

    return risks


def estimate_success_rate(breakdown: ScoreBreakdown, user_a: UserProfile, user_b: UserProfile) -> int:
    """
    Blend completion history with compatibility, both on a 0-100 scale.

    60% mean completion rate (already a percentage) and 40% the unweighted
    mean of the ten sub-scores scaled from [0, 1] to [0, 100]. Bounded to
    [10, 95] so no match is presented as certain or hopeless.
    """
    avg_completion = (user_a.completion_rate + user_b.completion_rate) / 2
    values = astuple(breakdown)
    mean_subscore = sum(values) / len(values)

    success_rate = avg_completion * 0.6 + mean_subscore * 100 * 0.4
    return int(clamp(round_half_up(success_rate), 10, 95))


def determine_priority(total_score: int, breakdown: ScoreBreakdown) -> Priority:
    """
    Map total score to a presentation priority.

    - 85+ with strong category demand: urgent
    - 75+: high
    - 60+: medium
    - otherwise: low
    """
    if total_score >= 85 and breakdown.category_demand > 0.8:
        return Priority.URGENT
    elif total_score >= 75:
        return Priority.HIGH
    elif total_score >= 60:
        return Priority.MEDIUM
    else:
        return Priority.LOW
