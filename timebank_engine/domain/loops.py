"""Trade loop construction over the offer/need graph"""

import logging
import uuid
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Sequence

from timebank_engine.domain.categories import normalize_category_id
from timebank_engine.domain.exceptions import InvalidTransitionError, ParticipantNotFoundError
from timebank_engine.domain.exchange import ExchangeRateCalculator
from timebank_engine.domain.models import (
    GroupStatus,
    GroupType,
    LoopPartner,
    LoopView,
    MatchGroup,
    MatchParticipant,
    ParticipantStatus,
    PartnerRelation,
    TradeIntent,
)
from timebank_engine.utils.rounding import round_half_up

HOURS_BASELINE = 4.0
DEFAULT_TRUST_SCORE = 50.0
BALANCED_TRADE_TOLERANCE = 0.15

_GROUP_NAMESPACE = uuid.uuid5(uuid.NAMESPACE_URL, "timebank-engine/match-groups")


def _usable_intents(intents: Iterable[TradeIntent]) -> List[TradeIntent]:
    """Normalise categories, keep the first intent per user, drop blank or self-serving entries"""
    seen = set()
    usable = []
    for intent in intents:
        if intent.user_id in seen:
            continue
        offer = normalize_category_id(intent.offer_category or "")
        need = normalize_category_id(intent.need_category or "")
        if not intent.user_id or not offer or not need or offer == need:
            continue
        seen.add(intent.user_id)
        usable.append(replace(intent, offer_category=offer, need_category=need))
    return usable


def _canonical_rotation(cycle: Sequence[TradeIntent]) -> List[TradeIntent]:
    """Rotate so the smallest user id comes first; direction is fixed by the edges"""
    start = min(range(len(cycle)), key=lambda i: cycle[i].user_id)
    return list(cycle[start:]) + list(cycle[:start])


def _make_group(cycle: Sequence[TradeIntent]) -> MatchGroup:
    ordered = _canonical_rotation(cycle)
    group_type = GroupType.TWO_WAY if len(ordered) == 2 else GroupType.THREE_WAY
    key = f"{group_type.value}:" + ">".join(intent.user_id for intent in ordered)

    participants = [
        MatchParticipant(
            role_index=index,
            user_id=intent.user_id,
            offer_category=intent.offer_category,
            need_category=intent.need_category,
            profile=intent.profile,
        )
        for index, intent in enumerate(ordered)
    ]
    return MatchGroup(id=str(uuid.uuid5(_GROUP_NAMESPACE, key)), type=group_type, participants=participants)


def is_closed_loop(participants: Sequence[MatchParticipant]) -> bool:
    """Each participant's offer covers the next participant's need, wrapping around"""
    ordered = sorted(participants, key=lambda p: p.role_index)
    if not 2 <= len(ordered) <= 3:
        return False
    return all(
        ordered[i].offer_category == ordered[(i + 1) % len(ordered)].need_category for i in range(len(ordered))
    )


class LoopBuilder:
    """
    Finds 2-way and 3-way trade loops and frames them for a viewer.

    An edge X -> Y exists when X offers the category Y needs. A 2-way loop
    is a pair with edges both ways; a 3-way loop is X -> Y -> Z -> X over
    three distinct members. Every directed cycle is emitted once, rotated so
    that the smallest user id holds role index 0, which makes the output
    independent of roster order.
    """

    def __init__(
        self,
        calculator: ExchangeRateCalculator,
        hours_baseline: float = HOURS_BASELINE,
        default_trust_score: float = DEFAULT_TRUST_SCORE,
        balanced_tolerance: float = BALANCED_TRADE_TOLERANCE,
    ):
        self.calculator = calculator
        self.hours_baseline = hours_baseline
        self.default_trust_score = default_trust_score
        self.balanced_tolerance = balanced_tolerance

    def build_loops(self, intents: Iterable[TradeIntent]) -> List[MatchGroup]:
        roster = _usable_intents(intents)

        needers: Dict[str, List[TradeIntent]] = {}
        for intent in roster:
            needers.setdefault(intent.need_category, []).append(intent)

        def successors(intent: TradeIntent) -> List[TradeIntent]:
            return [other for other in needers.get(intent.offer_category, []) if other.user_id != intent.user_id]

        cycles: Dict[tuple, List[TradeIntent]] = {}
        for first in roster:
            for second in successors(first):
                # 2-way: second also offers what first needs
                if second.offer_category == first.need_category and first.user_id < second.user_id:
                    cycles[(first.user_id, second.user_id)] = [first, second]

                for third in successors(second):
                    if third.user_id in (first.user_id, second.user_id):
                        continue
                    if third.offer_category != first.need_category:
                        continue
                    # Only emit from the smallest id so each directed cycle appears once
                    if first.user_id < second.user_id and first.user_id < third.user_id:
                        cycles[(first.user_id, second.user_id, third.user_id)] = [first, second, third]

        groups = [_make_group(cycle) for _, cycle in sorted(cycles.items(), key=lambda item: (len(item[0]), item[0]))]
        logging.debug(
            "Trade loops built",
            extra={
                "roster_size": len(roster),
                "two_way": sum(1 for g in groups if g.type == GroupType.TWO_WAY),
                "three_way": sum(1 for g in groups if g.type == GroupType.THREE_WAY),
            },
        )
        return groups

    def hours_for(self, participant: MatchParticipant) -> float:
        """Higher-trust partners commit proportionally more hours, never less than one"""
        return round_half_up(max(1.0, self._trust(participant) / 20 + self.hours_baseline - 1), 1)

    def _trust(self, participant: MatchParticipant) -> float:
        if participant.profile is None:
            return self.default_trust_score
        return participant.profile.trust_score

    def _partner(
        self,
        participant: MatchParticipant,
        relation: PartnerRelation,
        hours_they_provide: float,
        hours_you_provide: float,
    ) -> LoopPartner:
        return LoopPartner(
            user_id=participant.user_id,
            offer_category=participant.offer_category,
            need_category=participant.need_category,
            trust_score=self._trust(participant),
            relation=relation,
            hours_they_provide=hours_they_provide,
            hours_you_provide=hours_you_provide,
            location=participant.profile.location if participant.profile else None,
        )

    def frame_for_viewer(self, group: MatchGroup, viewer_id: str) -> Optional[LoopView]:
        """
        Describe a loop from the viewer's seat.

        The viewer receives from the predecessor (giver) and delivers to the
        successor (receiver). Returns None when the viewer is not in the loop
        or fewer than two participants remain; other members consume the same
        group from their own seat, so this is not an error.
        """
        ordered = sorted(group.participants, key=lambda p: p.role_index)
        my_index = next((i for i, p in enumerate(ordered) if p.user_id == viewer_id), None)

        if my_index is None or len(ordered) < 2:
            logging.debug("Discarding loop for viewer", extra={"group_id": group.id, "viewer_id": viewer_id})
            return None

        me = ordered[my_index]
        giver = ordered[(my_index - 1) % len(ordered)]
        receiver = ordered[(my_index + 1) % len(ordered)]

        hours_from_giver = self.hours_for(giver)
        hours_to_receiver = self.hours_for(receiver)

        if len(ordered) == 2:
            partners = [self._partner(giver, PartnerRelation.MUTUAL, hours_from_giver, hours_to_receiver)]
        else:
            partners = [
                self._partner(giver, PartnerRelation.RECEIVE_FROM, hours_from_giver, hours_to_receiver),
                self._partner(receiver, PartnerRelation.DELIVER_TO, 0.0, hours_to_receiver),
            ]

        rate = self.calculator.exchange_rate(giver.offer_category, receiver.need_category)

        return LoopView(
            group_id=group.id,
            type=group.type,
            status=group.status,
            my_participant=me,
            giver=giver,
            receiver=receiver,
            hours_from_giver=hours_from_giver,
            hours_to_receiver=hours_to_receiver,
            exchange_rate=rate,
            is_balanced=abs(rate - 1) < self.balanced_tolerance,
            partners=partners,
        )

    def views_for(self, groups: Iterable[MatchGroup], viewer_id: str) -> List[LoopView]:
        views = (self.frame_for_viewer(group, viewer_id) for group in groups)
        return [view for view in views if view is not None]


def record_response(group: MatchGroup, user_id: str, accepted: bool) -> MatchGroup:
    """
    Apply one member's accept/decline to a pending group.

    Any decline declines the group; the group converts once every
    participant has accepted. Returns a new group, the input is untouched.
    """
    if group.status != GroupStatus.PENDING:
        raise InvalidTransitionError(f"Match group {group.id} is {group.status.value}, not pending")

    if not any(p.user_id == user_id for p in group.participants):
        raise ParticipantNotFoundError(f"User {user_id} is not part of match group {group.id}")

    new_status = ParticipantStatus.ACCEPTED if accepted else ParticipantStatus.DECLINED
    participants = [replace(p, status=new_status) if p.user_id == user_id else replace(p) for p in group.participants]

    if any(p.status == ParticipantStatus.DECLINED for p in participants):
        status = GroupStatus.DECLINED
    elif all(p.status == ParticipantStatus.ACCEPTED for p in participants):
        status = GroupStatus.CONVERTED
    else:
        status = GroupStatus.PENDING

    return replace(group, participants=participants, status=status)


def expire(group: MatchGroup) -> MatchGroup:
    if group.status != GroupStatus.PENDING:
        raise InvalidTransitionError(f"Match group {group.id} is {group.status.value}, not pending")
    return replace(group, status=GroupStatus.EXPIRED)
