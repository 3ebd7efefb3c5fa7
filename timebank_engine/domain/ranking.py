"""Candidate ranking for a requesting member"""

from datetime import date
from typing import Iterable, List, Optional

from timebank_engine.domain.models import Candidate, RankedMatch, ServiceOffering, UserProfile
from timebank_engine.domain.scoring import CompatibilityScorer


class RecommendationRanker:
    """Scores every candidate against the requester and orders them best first"""

    def __init__(self, scorer: CompatibilityScorer):
        self.scorer = scorer

    def rank(
        self,
        user: UserProfile,
        service: ServiceOffering,
        candidates: Iterable[Candidate],
        as_of: Optional[date] = None,
    ) -> List[RankedMatch]:
        as_of = as_of or date.today()
        scored = [
            RankedMatch(
                user=candidate.user,
                service=candidate.service,
                score=self.scorer.score(user, candidate.user, service, candidate.service, as_of=as_of),
            )
            for candidate in candidates
        ]
        # sorted() is stable: equal totals keep discovery order
        return sorted(scored, key=lambda match: match.score.total_score, reverse=True)
