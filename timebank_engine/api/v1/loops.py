"""POST /v1/loops - trade loop construction and match responses"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from timebank_engine.api.v1.schemas import LoopsRequest, LoopsResponse, LoopViewSchema, MatchGroupSchema, RespondRequest
from timebank_engine.api.dependencies import get_engine, get_request_id
from timebank_engine.domain.engine import MatchingEngine
from timebank_engine.domain.exceptions import InvalidTransitionError, ParticipantNotFoundError
from timebank_engine.domain.loops import record_response
from timebank_engine.infrastructure.observability.logging import log_loops
from timebank_engine.infrastructure.observability.metrics import record_loops

router = APIRouter()


@router.post("/loops", response_model=LoopsResponse)
def build_loops(request_body: LoopsRequest, request: Request, engine: MatchingEngine = Depends(get_engine)):
    """
    Group a roster of offer/need intents into 2-way and 3-way trade loops.

    When viewer_id is given, each loop containing the viewer is also framed
    from their seat; loops without the viewer are left out of `views`.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    groups = engine.build_loops(intent.to_domain() for intent in request_body.intents)

    views = None
    if request_body.viewer_id is not None:
        framed = engine.loop_builder.views_for(groups, request_body.viewer_id)
        views = [LoopViewSchema.model_validate(view) for view in framed]

    duration_ms = (time.time() - start_time) * 1000
    record_loops(groups)
    log_loops(request_id, len(request_body.intents), len(groups), request_body.viewer_id, duration_ms)

    return LoopsResponse(groups=[MatchGroupSchema.model_validate(group) for group in groups], views=views)


@router.post("/loops/respond", response_model=MatchGroupSchema)
def respond_to_loop(request_body: RespondRequest, request: Request):
    """
    Apply a member's accept/decline to a pending match group.

    The caller persists the returned group; this service keeps no state.
    """
    request_id = get_request_id(request)

    try:
        group = record_response(request_body.group.to_domain(), request_body.user_id, request_body.accepted)
    except InvalidTransitionError as e:
        logging.warning(f"Invalid match transition: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=409, detail=str(e))
    except ParticipantNotFoundError as e:
        logging.warning(f"Unknown match participant: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=404, detail=str(e))

    logging.info(
        "Match response recorded",
        extra={
            "request_id": request_id,
            "group_id": group.id,
            "user_id": request_body.user_id,
            "accepted": request_body.accepted,
            "group_status": group.status.value,
        },
    )
    return MatchGroupSchema.model_validate(group)
