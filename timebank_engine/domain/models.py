"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


class SkillLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    EXPERT = "expert"

    @property
    def rank(self) -> int:
        return _SKILL_RANKS[self]

    @classmethod
    def parse(cls, value: "str | SkillLevel | None") -> "SkillLevel":
        """Case-insensitive lookup; anything unrecognised counts as intermediate"""
        if isinstance(value, SkillLevel):
            return value
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.INTERMEDIATE


_SKILL_RANKS = {SkillLevel.BEGINNER: 1, SkillLevel.INTERMEDIATE: 2, SkillLevel.EXPERT: 3}


class BusinessClass(str, Enum):
    B2B = "b2b"
    B2C = "b2c"
    UNCLASSIFIED = "unclassified"


class ParticipantStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"


class GroupStatus(str, Enum):
    PENDING = "pending"
    CONVERTED = "converted"
    DECLINED = "declined"
    EXPIRED = "expired"


class GroupType(str, Enum):
    TWO_WAY = "two_way"
    THREE_WAY = "three_way"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class PartnerRelation(str, Enum):
    MUTUAL = "mutual"
    RECEIVE_FROM = "receive_from"
    DELIVER_TO = "deliver_to"


class Recommendation(str, Enum):
    """Hints attached to a match score when a sub-score falls below its threshold"""

    START_SMALL = "start_small"
    PLAN_REMOTE = "plan_remote"
    NEGOTIATE_HOURS = "negotiate_hours"
    SET_EXPECTATIONS = "set_expectations"
    COMPLETE_VERIFICATION = "complete_verification"

    @property
    def message(self) -> str:
        return _RECOMMENDATION_MESSAGES[self]


_RECOMMENDATION_MESSAGES = {
    Recommendation.START_SMALL: "Consider starting with a smaller trade to build trust",
    Recommendation.PLAN_REMOTE: "Plan for virtual collaboration or delivery arrangements",
    Recommendation.NEGOTIATE_HOURS: "Negotiate hours to make the exchange more balanced",
    Recommendation.SET_EXPECTATIONS: "Set clear communication expectations and timelines",
    Recommendation.COMPLETE_VERIFICATION: "Both parties should complete phone and CAC verification",
}


class RiskFactor(str, Enum):
    """Warnings derived from raw profile fields and weak sub-scores"""

    HIGH_CANCELLATION = "high_cancellation"
    LIMITED_EXPERIENCE = "limited_experience"
    LOW_TRUST = "low_trust"
    MISMATCHED_TIMELINES = "mismatched_timelines"

    @property
    def message(self) -> str:
        return _RISK_MESSAGES[self]


_RISK_MESSAGES = {
    RiskFactor.HIGH_CANCELLATION: "High cancellation rate history",
    RiskFactor.LIMITED_EXPERIENCE: "Limited trade experience",
    RiskFactor.LOW_TRUST: "Low trust compatibility",
    RiskFactor.MISMATCHED_TIMELINES: "Mismatched delivery timelines",
}


@dataclass(frozen=True)
class ServiceCategory:
    """Static reference data for one tradeable service category"""

    id: str
    name: str
    base_rate: float  # Credits per hour before market adjustment
    demand: float  # Market demand multiplier (0.5 - 2.0)
    supply: float  # Market supply multiplier (0.5 - 2.0)
    popular: bool = False
    common_needs: Tuple[str, ...] = ()
    business_class: BusinessClass = BusinessClass.UNCLASSIFIED

    @property
    def market_rate(self) -> float:
        return self.base_rate * self.demand / self.supply


@dataclass
class UserProfile:
    """Scoring view of a marketplace member"""

    id: str
    category: str
    location: Optional[str] = None
    trust_score: float = 50.0  # 0-100
    verification_phone: bool = False
    verification_email: bool = False
    verification_cac: bool = False  # Business registration
    response_time_hours: float = 24.0
    completion_rate: float = 0.0  # Percent
    cancellation_rate: float = 0.0  # Percent
    total_trades: int = 0


@dataclass
class ServiceOffering:
    """Scoring view of a service a member offers"""

    id: str
    user_id: str
    category: str
    skill_level: SkillLevel = SkillLevel.INTERMEDIATE
    avg_delivery_days: float = 7.0
    success_rate: float = 0.0


@dataclass
class ScoreBreakdown:
    """The ten compatibility sub-scores, each in [0, 1]"""

    trust_compatibility: float
    location_proximity: float
    category_demand: float
    exchange_fairness: float
    time_compatibility: float
    skill_level_match: float
    response_speed: float
    verification_level: float
    market_timing: float
    business_type: float


@dataclass
class MatchScore:
    """Output of compatibility scoring"""

    total_score: int  # 0-100
    breakdown: ScoreBreakdown
    recommendations: List[Recommendation]
    risk_factors: List[RiskFactor]
    estimated_success_rate: int  # 10-95
    priority: Priority


@dataclass
class TradeExchange:
    """Both sides of a fair hour-for-hour trade"""

    hours_b: float
    exchange_rate: float
    credits_a: float
    credits_b: float


@dataclass
class ExchangeQuote:
    """Converted hours, credit value of the input hours and the rate applied"""

    hours: float
    credits: float
    rate: float


@dataclass
class TradeIntent:
    """One roster entry: a member offering one category and needing another"""

    user_id: str
    offer_category: str
    need_category: str
    profile: Optional[UserProfile] = None


@dataclass
class MatchParticipant:
    role_index: int
    user_id: str
    offer_category: str
    need_category: str
    status: ParticipantStatus = ParticipantStatus.PENDING
    profile: Optional[UserProfile] = None


@dataclass
class MatchGroup:
    """Closed trade loop of 2 or 3 participants"""

    id: str
    type: GroupType
    participants: List[MatchParticipant]
    status: GroupStatus = GroupStatus.PENDING


@dataclass
class LoopPartner:
    user_id: str
    offer_category: str
    need_category: str
    trust_score: float
    relation: PartnerRelation
    hours_they_provide: float
    hours_you_provide: float
    location: Optional[str] = None


@dataclass
class LoopView:
    """A match group framed from one participant's position in the loop"""

    group_id: str
    type: GroupType
    status: GroupStatus
    my_participant: MatchParticipant
    giver: MatchParticipant  # Predecessor: delivers to the viewer
    receiver: MatchParticipant  # Successor: receives from the viewer
    hours_from_giver: float
    hours_to_receiver: float
    exchange_rate: float  # Hours of the delivered category per hour received
    is_balanced: bool
    partners: List[LoopPartner] = field(default_factory=list)


@dataclass
class Candidate:
    user: UserProfile
    service: ServiceOffering


@dataclass
class RankedMatch:
    user: UserProfile
    service: ServiceOffering
    score: MatchScore
