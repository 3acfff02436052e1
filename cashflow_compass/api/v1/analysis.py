"""POST /v1/purchase/analysis - Purchase impact verdict"""

import logging
import time
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Request

from cashflow_compass.api.dependencies import get_request_id, get_today
from cashflow_compass.api.v1.schemas import (
    AnalysisSchema,
    BudgetSnapshotSchema,
    PurchaseAnalysisRequest,
    PurchaseAnalysisResponse,
)
from cashflow_compass.domain.analyzer import analyze_purchase_impact
from cashflow_compass.domain.budget import calculate_financials
from cashflow_compass.domain.models import PaymentMode
from cashflow_compass.infrastructure.observability.logging import log_analysis
from cashflow_compass.infrastructure.observability.metrics import record_analysis

router = APIRouter()


@router.post("/purchase/analysis", response_model=PurchaseAnalysisResponse)
def analyze_purchase(
    request_body: PurchaseAnalysisRequest,
    request: Request,
    today: date = Depends(get_today),
):
    """
    Score a hypothetical purchase against the user's budget and cash flow.

    Flow:
    1. Derive the monthly budget snapshot from the profile
    2. Compute the static impact (reserve, monthly remainder, costs)
    3. Unless dynamic=false, project 45 days with the purchase injected
    4. Apply the verdict matrix and persona penalties
    """
    start_time = time.perf_counter()
    request_id = get_request_id(request)
    now = request_body.now or today

    try:
        profile = request_body.profile.to_domain()
        purchase = request_body.purchase.to_domain()
        history = [entry.to_domain() for entry in request_body.history]

        snapshot = calculate_financials(profile)
        result = analyze_purchase_impact(
            snapshot,
            purchase,
            now,
            profile=profile if request_body.dynamic else None,
            history=history,
        )

        mode = PaymentMode.parse(purchase.payment_mode)
        mode_label = mode.value if mode else "UNKNOWN"
        duration_ms = (time.perf_counter() - start_time) * 1000
        record_analysis(result.verdict.value, result.score, mode_label, result.is_cashflow_ok)
        log_analysis(
            request_id,
            result.verdict.value,
            result.score,
            mode_label,
            result.is_cashflow_ok,
            duration_ms,
        )

        return PurchaseAnalysisResponse(
            analysis=AnalysisSchema.model_validate(result),
            budget=BudgetSnapshotSchema.model_validate(snapshot),
        )

    except Exception as e:
        logging.error(f"Purchase analysis failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")
