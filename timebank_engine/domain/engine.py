"""Matching engine - wires the scoring components over one rate-table snapshot"""

from datetime import date
from typing import Callable, Iterable, List, Optional

from timebank_engine.domain.categories import CategoryRateTable
from timebank_engine.domain.exchange import DEFAULT_CREDIT_RATE, ExchangeRateCalculator
from timebank_engine.domain.loops import (
    BALANCED_TRADE_TOLERANCE,
    DEFAULT_TRUST_SCORE,
    HOURS_BASELINE,
    LoopBuilder,
)
from timebank_engine.domain.models import (
    Candidate,
    ExchangeQuote,
    LoopView,
    MatchGroup,
    MatchScore,
    RankedMatch,
    ServiceOffering,
    TradeIntent,
    UserProfile,
)
from timebank_engine.domain.ranking import RecommendationRanker
from timebank_engine.domain.scoring import CompatibilityScorer


class MatchingEngine:
    """
    Stateless facade over the calculator, scorer, loop builder and ranker.

    Built from a single table snapshot so every number in one request comes
    from the same market rates.
    """

    def __init__(
        self,
        table: CategoryRateTable,
        default_rate: float = DEFAULT_CREDIT_RATE,
        hours_baseline: float = HOURS_BASELINE,
        default_trust_score: float = DEFAULT_TRUST_SCORE,
        balanced_tolerance: float = BALANCED_TRADE_TOLERANCE,
        on_unknown_category: Optional[Callable[[str], None]] = None,
    ):
        self.table = table
        self.calculator = ExchangeRateCalculator(table, default_rate, on_unknown_category)
        self.scorer = CompatibilityScorer(table, self.calculator)
        self.loop_builder = LoopBuilder(self.calculator, hours_baseline, default_trust_score, balanced_tolerance)
        self.ranker = RecommendationRanker(self.scorer)

    def compute_exchange(self, hours: float, from_category: str, to_category: str) -> ExchangeQuote:
        return self.calculator.compute_exchange(hours, from_category, to_category)

    def score(
        self,
        user_a: UserProfile,
        user_b: UserProfile,
        service_a: ServiceOffering,
        service_b: ServiceOffering,
        as_of: Optional[date] = None,
    ) -> MatchScore:
        return self.scorer.score(user_a, user_b, service_a, service_b, as_of=as_of)

    def build_loops(self, intents: Iterable[TradeIntent]) -> List[MatchGroup]:
        return self.loop_builder.build_loops(intents)

    def frame_for_viewer(self, group: MatchGroup, viewer_id: str) -> Optional[LoopView]:
        return self.loop_builder.frame_for_viewer(group, viewer_id)

    def rank(
        self,
        user: UserProfile,
        service: ServiceOffering,
        candidates: Iterable[Candidate],
        as_of: Optional[date] = None,
    ) -> List[RankedMatch]:
        return self.ranker.rank(user, service, candidates, as_of=as_of)
