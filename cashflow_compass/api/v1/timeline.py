"""POST /v1/timeline - Day-by-day balance projection"""

import logging
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Request

from cashflow_compass.api.dependencies import get_request_id, get_today
from cashflow_compass.api.v1.schemas import MonthBucketSchema, TimelineRequest, TimelineResponse
from cashflow_compass.domain.simulator import generate_simulated_events
from cashflow_compass.domain.timeline import build_timeline, resolve_anchor_date

router = APIRouter()


@router.post("/timeline", response_model=TimelineResponse)
def project_timeline(
    request_body: TimelineRequest,
    request: Request,
    today: date = Depends(get_today),
):
    """
    Project the account balance from the start of the anchor month.

    Days before the anchor carry a null balance. An optional purchase is
    injected as simulated events so the caller can preview its effect.
    """
    request_id = get_request_id(request)
    now = request_body.now or today

    try:
        profile = request_body.profile.to_domain()
        history = [entry.to_domain() for entry in request_body.history]
        simulated = (
            generate_simulated_events(request_body.purchase.to_domain(), now)
            if request_body.purchase
            else []
        )

        months = build_timeline(
            profile,
            history,
            simulated,
            horizon_days=request_body.horizon_days,
            now=now,
            warning_threshold=request_body.warning_threshold,
        )

        return TimelineResponse(
            anchor_date=resolve_anchor_date(profile, now),
            months=[MonthBucketSchema.model_validate(month) for month in months],
        )

    except Exception as e:
        logging.error(f"Timeline projection failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")
