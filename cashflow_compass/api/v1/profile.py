"""POST /v1/profile/health - Profile health check"""

import logging
import time

from fastapi import APIRouter, HTTPException, Request

from cashflow_compass.api.dependencies import get_request_id
from cashflow_compass.api.v1.schemas import (
    BudgetSnapshotSchema,
    HealthReportSchema,
    ProfileHealthRequest,
    ProfileHealthResponse,
)
from cashflow_compass.domain.budget import calculate_financials
from cashflow_compass.domain.health import analyze_profile_health
from cashflow_compass.infrastructure.observability.logging import log_profile_health
from cashflow_compass.infrastructure.observability.metrics import record_profile_health

router = APIRouter()


@router.post("/profile/health", response_model=ProfileHealthResponse)
def check_profile_health(request_body: ProfileHealthRequest, request: Request):
    """
    Grade the declared budget and list the fixes that matter most.

    Opportunities come back ordered CRITICAL, WARNING, SUCCESS, INFO.
    """
    start_time = time.perf_counter()
    request_id = get_request_id(request)

    try:
        profile = request_body.profile.to_domain()
        snapshot = calculate_financials(profile)
        report = analyze_profile_health(profile, snapshot)

        critical_count = sum(1 for o in report.opportunities if o.level == "CRITICAL")
        duration_ms = (time.perf_counter() - start_time) * 1000
        record_profile_health(report.global_score)
        log_profile_health(request_id, report.global_score, list(report.tags), critical_count, duration_ms)

        return ProfileHealthResponse(
            budget=BudgetSnapshotSchema.model_validate(snapshot),
            report=HealthReportSchema.model_validate(report),
        )

    except Exception as e:
        logging.error(f"Profile health check failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")
