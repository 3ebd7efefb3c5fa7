"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger

from timebank_engine.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_scoring(
    request_id: str,
    user_a_id: str,
    user_b_id: str,
    total_score: int,
    priority: str,
    duration_ms: float,
) -> None:
    """Log a compatibility score for offline analysis of match quality"""
    logging.info(
        "Match scored",
        extra={
            "request_id": request_id,
            "user_a_id": user_a_id,
            "user_b_id": user_b_id,
            "step": "score_complete",
            "total_score": total_score,
            "priority": priority,
            "duration_ms": duration_ms,
        },
    )


def log_exchange(
    request_id: str,
    from_category: str,
    to_category: str,
    hours: float,
    rate: float,
    duration_ms: float,
) -> None:
    logging.info(
        "Exchange computed",
        extra={
            "request_id": request_id,
            "step": "exchange_complete",
            "from_category": from_category,
            "to_category": to_category,
            "hours": hours,
            "rate": rate,
            "duration_ms": duration_ms,
        },
    )


def log_loops(request_id: str, roster_size: int, groups_built: int, viewer_id: str | None, duration_ms: float) -> None:
    logging.info(
        "Trade loops built",
        extra={
            "request_id": request_id,
            "step": "loops_complete",
            "roster_size": roster_size,
            "groups_built": groups_built,
            "viewer_id": viewer_id,
            "duration_ms": duration_ms,
        },
    )
