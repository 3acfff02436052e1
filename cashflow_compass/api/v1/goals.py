"""POST /v1/goal/simulation and /v1/goal/allocation - Savings goal planning"""

import logging
import time
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Request

from cashflow_compass.api.dependencies import get_request_id, get_today
from cashflow_compass.api.v1.schemas import (
    GoalAllocationRequest,
    GoalAllocationResponse,
    GoalAllocationSchema,
    GoalDiagnosisSchema,
    GoalProjectionSchema,
    GoalSimulationRequest,
    GoalSimulationResponse,
    GoalSimulationSchema,
)
from cashflow_compass.domain.budget import calculate_financials
from cashflow_compass.domain.goals import (
    analyze_goal_strategies,
    calculate_monthly_effort,
    committed_monthly_effort,
    distribute_goals,
    simulate_goal_projection,
    solve_goal_feasibility,
)
from cashflow_compass.domain.parsing import round_cents, safe_float
from cashflow_compass.infrastructure.observability.logging import log_goal_simulation
from cashflow_compass.infrastructure.observability.metrics import record_goal_simulation

router = APIRouter()


@router.post("/goal/simulation", response_model=GoalSimulationResponse)
def simulate_goal(
    request_body: GoalSimulationRequest,
    request: Request,
    today: date = Depends(get_today),
):
    """
    Check whether a new goal fits in the savings capacity left by the other goals.

    The diagnosis grades the goal against that remaining capacity and lists the
    levers (down payment, waiting) that would make it fit. The projection uses the
    goal's own monthly contribution when set, otherwise the required effort.
    """
    start_time = time.perf_counter()
    request_id = get_request_id(request)
    now = request_body.now or today

    try:
        snapshot = calculate_financials(request_body.profile.to_domain())
        goal = request_body.goal.to_domain()
        commitments = committed_monthly_effort([g.to_domain() for g in request_body.other_goals], now)

        simulation = solve_goal_feasibility(snapshot.capacity_to_save, commitments, goal, now)
        diagnosis = analyze_goal_strategies(
            goal,
            calculate_monthly_effort(goal, now),
            snapshot.capacity_to_save - commitments,
            snapshot.monthly_income,
            snapshot.reserve,
            now,
        )

        contribution = safe_float(goal.monthly_contribution) or simulation.required_monthly_effort
        projection = simulate_goal_projection(goal, contribution, now)

        suggestion_kind = simulation.suggestion.kind if simulation.suggestion else None
        duration_ms = (time.perf_counter() - start_time) * 1000
        record_goal_simulation(simulation.is_possible, suggestion_kind)
        log_goal_simulation(request_id, goal.name, simulation.is_possible, suggestion_kind, duration_ms)

        return GoalSimulationResponse(
            capacity_to_save=round_cents(snapshot.capacity_to_save),
            current_commitments=round_cents(commitments),
            simulation=GoalSimulationSchema.model_validate(simulation),
            diagnosis=GoalDiagnosisSchema.model_validate(diagnosis),
            projection=GoalProjectionSchema.model_validate(projection),
        )

    except Exception as e:
        logging.error(f"Goal simulation failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")


@router.post("/goal/allocation", response_model=GoalAllocationResponse)
def allocate_goals(
    request_body: GoalAllocationRequest,
    request: Request,
    today: date = Depends(get_today),
):
    """Split the savings capacity between goals by category priority"""
    request_id = get_request_id(request)
    now = request_body.now or today

    try:
        snapshot = calculate_financials(request_body.profile.to_domain())
        allocations = distribute_goals([g.to_domain() for g in request_body.goals], snapshot.capacity_to_save, now)

        return GoalAllocationResponse(
            capacity_to_save=round_cents(snapshot.capacity_to_save),
            total_allocated=round_cents(sum(a.allocated_effort for a in allocations)),
            allocations=[GoalAllocationSchema.model_validate(a) for a in allocations],
        )

    except Exception as e:
        logging.error(f"Goal allocation failed: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Internal server error")
