"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from pythonjsonlogger import jsonlogger

from cashflow_compass.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter stamping every record with time, level and service name"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: Optional[str] = None) -> None:
    """Route the root logger to stdout as one JSON object per line"""
    logger = logging.getLogger()
    logger.setLevel(level or settings.log_level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    logger.addHandler(handler)


def log_analysis(
    request_id: str,
    verdict: str,
    score: int,
    payment_mode: str,
    is_cashflow_ok: bool,
    duration_ms: float,
) -> None:
    """Log the outcome of a purchase analysis"""
    logging.info(
        "Purchase analysis completed",
        extra={
            "request_id": request_id,
            "step": "analysis_complete",
            "verdict": verdict,
            "score": score,
            "payment_mode": payment_mode,
            "cashflow_outcome": "ok" if is_cashflow_ok else "overdraft",
            "duration_ms": duration_ms,
        },
    )


def log_goal_simulation(
    request_id: str,
    goal_name: str,
    is_possible: bool,
    suggestion: Optional[str],
    duration_ms: float,
) -> None:
    """Log the outcome of a goal feasibility check"""
    logging.info(
        "Goal simulation completed",
        extra={
            "request_id": request_id,
            "step": "goal_simulation_complete",
            "goal": goal_name,
            "feasibility": "possible" if is_possible else "not_possible",
            "suggestion": suggestion,
            "duration_ms": duration_ms,
        },
    )


def log_profile_health(request_id: str, score: int, tags: List[str], critical_count: int, duration_ms: float) -> None:
    """Log the outcome of a profile health check"""
    logging.info(
        "Profile health check completed",
        extra={
            "request_id": request_id,
            "step": "profile_health_complete",
            "score": score,
            "tags": tags,
            "critical_count": critical_count,
            "duration_ms": duration_ms,
        },
    )
