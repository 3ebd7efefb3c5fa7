"""Unit tests for candidate ranking"""

from dataclasses import replace
from datetime import date

from timebank_engine.domain.engine import MatchingEngine
from timebank_engine.domain.models import Candidate, ServiceOffering, UserProfile

AS_OF = date(2025, 11, 15)


def test_rank_orders_best_first(
    engine: MatchingEngine,
    lawyer: UserProfile,
    developer: UserProfile,
    newcomer: UserProfile,
    legal_service: ServiceOffering,
    tech_service: ServiceOffering,
    food_service: ServiceOffering,
):
    candidates = [Candidate(newcomer, food_service), Candidate(developer, tech_service)]

    ranked = engine.rank(lawyer, legal_service, candidates, as_of=AS_OF)

    assert [match.user.id for match in ranked] == ["user_developer", "user_newcomer"]
    assert ranked[0].score.total_score >= ranked[1].score.total_score


def test_rank_scores_match_direct_scoring(
    engine: MatchingEngine,
    lawyer: UserProfile,
    developer: UserProfile,
    legal_service: ServiceOffering,
    tech_service: ServiceOffering,
):
    ranked = engine.rank(lawyer, legal_service, [Candidate(developer, tech_service)], as_of=AS_OF)

    assert ranked[0].score == engine.score(lawyer, developer, legal_service, tech_service, as_of=AS_OF)


def test_rank_keeps_discovery_order_on_ties(
    engine: MatchingEngine,
    lawyer: UserProfile,
    developer: UserProfile,
    legal_service: ServiceOffering,
    tech_service: ServiceOffering,
):
    twins = [
        Candidate(replace(developer, id=f"dev_{n}"), replace(tech_service, id=f"svc_{n}", user_id=f"dev_{n}"))
        for n in range(4)
    ]

    ranked = engine.rank(lawyer, legal_service, twins, as_of=AS_OF)

    assert [match.service.id for match in ranked] == ["svc_0", "svc_1", "svc_2", "svc_3"]


def test_rank_empty_candidates(engine: MatchingEngine, lawyer: UserProfile, legal_service: ServiceOffering):
    assert engine.rank(lawyer, legal_service, [], as_of=AS_OF) == []
