"""POST /v1/score and /v1/rank - compatibility scoring endpoints"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from timebank_engine.api.v1.schemas import (
    RankedMatchSchema,
    RankRequest,
    RankResponse,
    ScoreRequest,
    ScoreResponse,
)
from timebank_engine.api.dependencies import get_engine, get_request_id
from timebank_engine.domain.engine import MatchingEngine
from timebank_engine.infrastructure.observability.logging import log_scoring
from timebank_engine.infrastructure.observability.metrics import record_score

router = APIRouter()


@router.post("/score", response_model=ScoreResponse)
def score_match(request_body: ScoreRequest, request: Request, engine: MatchingEngine = Depends(get_engine)):
    """
    Score how well two members' services fit each other.

    Flow:
    1. Convert profiles and services to domain records
    2. Compute the ten weighted sub-scores and the 0-100 total
    3. Attach recommendation and risk codes, success estimate and priority
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        score = engine.score(
            request_body.user_a.to_domain(),
            request_body.user_b.to_domain(),
            request_body.service_a.to_domain(),
            request_body.service_b.to_domain(),
            as_of=request_body.as_of,
        )
    except Exception as e:
        logging.error(f"Unexpected scoring error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    duration_ms = (time.time() - start_time) * 1000
    record_score(score.total_score, score.priority.value)
    log_scoring(
        request_id,
        request_body.user_a.id,
        request_body.user_b.id,
        score.total_score,
        score.priority.value,
        duration_ms,
    )

    return ScoreResponse.from_domain(score)


@router.post("/rank", response_model=RankResponse)
def rank_candidates(request_body: RankRequest, request: Request, engine: MatchingEngine = Depends(get_engine)):
    """
    Score every candidate against the requesting member, best first.

    Ties keep the order in which candidates were submitted. No limit is
    applied; paging is up to the caller.
    """
    request_id = get_request_id(request)

    try:
        ranked = engine.rank(
            request_body.user.to_domain(),
            request_body.service.to_domain(),
            [candidate.to_domain() for candidate in request_body.candidates],
            as_of=request_body.as_of,
        )
    except Exception as e:
        logging.error(f"Unexpected ranking error: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")

    for match in ranked:
        record_score(match.score.total_score, match.score.priority.value)

    return RankResponse(
        user_id=request_body.user.id,
        matches=[
            RankedMatchSchema(
                user_id=match.user.id,
                service_id=match.service.id,
                score=ScoreResponse.from_domain(match.score),
            )
            for match in ranked
        ],
    )
