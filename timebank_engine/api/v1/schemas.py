"""Pydantic schemas for API request/response validation"""

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from timebank_engine.domain.models import (
    BusinessClass,
    Candidate,
    GroupStatus,
    GroupType,
    MatchGroup,
    MatchParticipant,
    MatchScore,
    ParticipantStatus,
    PartnerRelation,
    Priority,
    ServiceOffering,
    SkillLevel,
    TradeIntent,
    UserProfile,
)


class UserProfileSchema(BaseModel):
    """Scoring view of a member, supplied by the profile service"""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., min_length=1, description="User identifier")
    category: str
    location: Optional[str] = None
    trust_score: float = Field(50.0, ge=0, le=100)
    verification_phone: bool = False
    verification_email: bool = False
    verification_cac: bool = False
    response_time_hours: float = Field(24.0, ge=0, description="Average hours to respond")
    completion_rate: float = Field(0.0, ge=0, le=100, description="Percentage of completed trades")
    cancellation_rate: float = Field(0.0, ge=0, le=100, description="Percentage of cancelled trades")
    total_trades: int = Field(0, ge=0)

    def to_domain(self) -> UserProfile:
        return UserProfile(**self.model_dump())


class ServiceOfferingSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., min_length=1)
    user_id: str = Field(..., min_length=1)
    category: str
    skill_level: str = Field(SkillLevel.INTERMEDIATE.value, description="beginner | intermediate | expert")
    avg_delivery_days: float = Field(7.0, ge=0)
    success_rate: float = Field(0.0, ge=0, le=100)

    def to_domain(self) -> ServiceOffering:
        return ServiceOffering(
            id=self.id,
            user_id=self.user_id,
            category=self.category,
            skill_level=SkillLevel.parse(self.skill_level),
            avg_delivery_days=self.avg_delivery_days,
            success_rate=self.success_rate,
        )


# Exchange

# Upper bound on hours in a single quote (about five working years)
MAX_TRADE_HOURS = 10_000


class ExchangeRequest(BaseModel):
    """Request body for POST /v1/exchange"""

    hours: float = Field(
        ..., gt=0, le=MAX_TRADE_HOURS, allow_inf_nan=False, description="Hours of work in from_category"
    )
    from_category: str = Field(..., min_length=1)
    to_category: str = Field(..., min_length=1)


class ExchangeResponse(BaseModel):
    hours: float
    credits: float
    rate: float


class TradeExchangeRequest(BaseModel):
    """Request body for POST /v1/exchange/trade"""

    hours_a: float = Field(..., gt=0, le=MAX_TRADE_HOURS, allow_inf_nan=False)
    category_a: str = Field(..., min_length=1)
    category_b: str = Field(..., min_length=1)


class TradeExchangeResponse(BaseModel):
    hours_b: float
    exchange_rate: float
    credits_a: float
    credits_b: float


# Categories


class CategorySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    base_rate: float
    demand: float
    supply: float
    popular: bool
    common_needs: List[str]
    business_class: BusinessClass
    credits_per_hour: float


class CategoriesResponse(BaseModel):
    categories: List[CategorySchema]


class MarketRateUpdate(BaseModel):
    """Request body for PUT /v1/categories/{category_id}/market-rates"""

    demand: float = Field(..., description="Demand multiplier, clamped to 0.5 - 2.0")
    supply: float = Field(..., description="Supply multiplier, clamped to 0.5 - 2.0")


class EarningsResponse(BaseModel):
    category: str
    hours_per_week: float
    weekly_credits: float
    monthly_credits: float
    category_rate: float


# Scoring


class ScoreRequest(BaseModel):
    """Request body for POST /v1/score"""

    user_a: UserProfileSchema
    user_b: UserProfileSchema
    service_a: ServiceOfferingSchema
    service_b: ServiceOfferingSchema
    as_of: Optional[date] = Field(None, description="Date used for seasonal timing, defaults to today")


class ScoreBreakdownSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

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


class CodedMessage(BaseModel):
    code: str
    message: str


class ScoreResponse(BaseModel):
    total_score: int
    breakdown: ScoreBreakdownSchema
    recommendations: List[CodedMessage]
    risk_factors: List[CodedMessage]
    estimated_success_rate: int
    priority: Priority

    @classmethod
    def from_domain(cls, score: MatchScore) -> "ScoreResponse":
        return cls(
            total_score=score.total_score,
            breakdown=ScoreBreakdownSchema.model_validate(score.breakdown),
            recommendations=[CodedMessage(code=r.value, message=r.message) for r in score.recommendations],
            risk_factors=[CodedMessage(code=r.value, message=r.message) for r in score.risk_factors],
            estimated_success_rate=score.estimated_success_rate,
            priority=score.priority,
        )


class CandidateSchema(BaseModel):
    user: UserProfileSchema
    service: ServiceOfferingSchema

    def to_domain(self) -> Candidate:
        return Candidate(user=self.user.to_domain(), service=self.service.to_domain())


class RankRequest(BaseModel):
    """Request body for POST /v1/rank"""

    user: UserProfileSchema
    service: ServiceOfferingSchema
    candidates: List[CandidateSchema]
    as_of: Optional[date] = None


class RankedMatchSchema(BaseModel):
    user_id: str
    service_id: str
    score: ScoreResponse


class RankResponse(BaseModel):
    user_id: str
    matches: List[RankedMatchSchema]


# Loops


class TradeIntentSchema(BaseModel):
    user_id: str = Field(..., min_length=1)
    offer_category: str
    need_category: str
    profile: Optional[UserProfileSchema] = None

    def to_domain(self) -> TradeIntent:
        return TradeIntent(
            user_id=self.user_id,
            offer_category=self.offer_category,
            need_category=self.need_category,
            profile=self.profile.to_domain() if self.profile else None,
        )


class ParticipantSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    role_index: int = Field(..., ge=0)
    user_id: str
    offer_category: str
    need_category: str
    status: ParticipantStatus = ParticipantStatus.PENDING
    profile: Optional[UserProfileSchema] = None

    def to_domain(self) -> MatchParticipant:
        return MatchParticipant(
            role_index=self.role_index,
            user_id=self.user_id,
            offer_category=self.offer_category,
            need_category=self.need_category,
            status=self.status,
            profile=self.profile.to_domain() if self.profile else None,
        )


class MatchGroupSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    type: GroupType
    status: GroupStatus = GroupStatus.PENDING
    participants: List[ParticipantSchema] = Field(..., min_length=2, max_length=3)

    def to_domain(self) -> MatchGroup:
        return MatchGroup(
            id=self.id,
            type=self.type,
            status=self.status,
            participants=[p.to_domain() for p in self.participants],
        )


class LoopPartnerSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    offer_category: str
    need_category: str
    trust_score: float
    relation: PartnerRelation
    hours_they_provide: float
    hours_you_provide: float
    location: Optional[str] = None


class LoopViewSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    group_id: str
    type: GroupType
    status: GroupStatus
    my_participant: ParticipantSchema
    giver: ParticipantSchema
    receiver: ParticipantSchema
    hours_from_giver: float
    hours_to_receiver: float
    exchange_rate: float
    is_balanced: bool
    partners: List[LoopPartnerSchema]


class LoopsRequest(BaseModel):
    """Request body for POST /v1/loops"""

    intents: List[TradeIntentSchema]
    viewer_id: Optional[str] = Field(None, description="Frame loops from this member's seat")


class LoopsResponse(BaseModel):
    groups: List[MatchGroupSchema]
    views: Optional[List[LoopViewSchema]] = None


class RespondRequest(BaseModel):
    """Request body for POST /v1/loops/respond"""

    group: MatchGroupSchema
    user_id: str = Field(..., min_length=1)
    accepted: bool
