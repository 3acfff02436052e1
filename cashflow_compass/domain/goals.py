"""Savings goals - feasibility solver, projection and allocation across competing goals"""

import math
from datetime import date
from typing import Iterable, List, Optional, Sequence

from cashflow_compass.config import settings
from cashflow_compass.domain.models import (
    Goal,
    GoalAllocation,
    GoalDiagnosis,
    GoalProjection,
    GoalProjectionPoint,
    GoalSimulation,
    GoalStrategy,
    GoalSuggestion,
)
from cashflow_compass.domain.parsing import format_currency, parse_date, round_cents, round_units, safe_float
from cashflow_compass.utils.date_utils import add_months, months_between, start_of_month, try_add_months

# Lower number = funded first
CATEGORY_PRIORITIES = {
    "SAFETY": 1,
    "REAL_ESTATE": 2,
    "DEBT": 2,
    "VEHICLE": 3,
    "TRAVEL": 3,
    "WEDDING": 3,
    "OTHER": 3,
    "FINANCE": 4,
    "RETIREMENT": 4,
}
DEFAULT_PRIORITY = 3


def category_priority(category: str) -> int:
    return CATEGORY_PRIORITIES.get(str(category or "").upper(), DEFAULT_PRIORITY)


def _monthly_rate(goal: Goal) -> float:
    annual_yield = safe_float(goal.projected_yield)
    if not goal.is_invested or annual_yield <= 0:
        return 0.0
    return annual_yield / 100 / 12


def _required_effort(goal: Goal, missing: float, months: int) -> float:
    """Simple division, or the annuity payment reaching `missing` when the goal is invested"""
    if missing <= 0:
        return 0.0
    rate = _monthly_rate(goal)
    if rate <= 0:
        return missing / months
    return missing * rate / ((1 + rate) ** months - 1)


def _goal_horizon(goal: Goal, now: date) -> int:
    deadline = parse_date(goal.deadline, default=now)
    return max(1, months_between(now, deadline))


def calculate_monthly_effort(goal: Goal, now: date) -> float:
    """
    Monthly amount to set aside to reach the goal by its deadline.

    - 0 when target or deadline is missing, or the target is already reached
    - The whole missing amount when the deadline has passed
    - Otherwise missing / months, or an annuity payment for invested goals
    """
    target = safe_float(goal.target_amount)
    if target <= 0 or not goal.deadline:
        return 0.0

    missing = max(0.0, target - safe_float(goal.current_saved))
    deadline = parse_date(goal.deadline, default=now)
    if deadline <= now:
        return missing

    return _required_effort(goal, missing, _goal_horizon(goal, now))


def committed_monthly_effort(goals: Iterable[Goal], now: date) -> float:
    """Effort already promised to other goals: explicit contribution, else the computed one"""
    total = 0.0
    for goal in goals or ():
        contribution = safe_float(goal.monthly_contribution)
        total += contribution if contribution > 0 else calculate_monthly_effort(goal, now)
    return total


def solve_goal_feasibility(
    capacity_to_save: float,
    current_commitments: float,
    goal: Goal,
    now: date,
) -> GoalSimulation:
    """
    Can the remaining savings capacity fund this goal by its deadline?

    When it cannot and some capacity is left, suggest the deadline at which the
    remaining capacity is enough; re-solving with that deadline is always feasible.
    Extensions longer than settings.goal_max_extension_months (or past the end of the
    calendar) are reported as impossible. A goal with nothing left to save is possible.
    """
    amount_to_save = max(0.0, safe_float(goal.target_amount) - safe_float(goal.current_saved))
    months = _goal_horizon(goal, now)
    required = _required_effort(goal, amount_to_save, months)
    remaining = safe_float(capacity_to_save) - safe_float(current_commitments)

    is_possible = amount_to_save <= 0 or remaining + settings.goal_feasibility_tolerance >= required

    suggestion = None
    if not is_possible:
        needed_months = math.ceil(amount_to_save / remaining) if remaining > 0 else None
        new_deadline = None
        if needed_months is not None and needed_months <= settings.goal_max_extension_months:
            new_deadline = try_add_months(now, needed_months)

        if new_deadline is not None:
            suggestion = GoalSuggestion(
                kind="extend_time",
                message=(
                    f"Push the deadline to {new_deadline:%B %Y} ({needed_months} months) "
                    f"to save {format_currency(remaining)} per month."
                ),
                new_deadline=new_deadline,
                needed_months=needed_months,
                new_monthly_effort=round_cents(remaining),
            )
        elif remaining > 0:
            suggestion = GoalSuggestion(
                kind="impossible",
                message=(
                    f"At {format_currency(remaining)} per month this goal would take more than "
                    f"{settings.goal_max_extension_months // 12} years."
                ),
            )
        else:
            suggestion = GoalSuggestion(
                kind="impossible",
                message="No savings capacity left for this goal.",
            )

    return GoalSimulation(
        required_monthly_effort=round_cents(required),
        amount_to_save=round_cents(amount_to_save),
        months=months,
        is_possible=is_possible,
        remaining_capacity=round_cents(remaining),
        suggestion=suggestion,
    )


def inflation_adjusted_amount(amount: float, deadline: date, now: date) -> float:
    """What `amount` in today's money will cost at the deadline"""
    years = months_between(now, deadline) / 12
    if years <= 0:
        return amount
    return amount * (1 + settings.inflation_rate) ** years


def compound_months_needed(missing: float, monthly_deposit: float, monthly_rate: float) -> Optional[int]:
    """
    Number of monthly deposits needed to accumulate `missing`, interest included.

    Solves FV = PMT * ((1 + r)^n - 1) / r for n. None when the deposit is zero or negative.
    """
    if missing <= 0:
        return 0
    if monthly_deposit <= 0:
        return None
    if monthly_rate <= 0:
        return math.ceil(missing / monthly_deposit)
    return math.ceil(math.log(missing * monthly_rate / monthly_deposit + 1) / math.log(1 + monthly_rate))


def analyze_goal_strategies(
    goal: Goal,
    monthly_effort: float,
    capacity: float,
    monthly_income: float,
    global_savings: float,
    now: date,
) -> GoalDiagnosis:
    """
    Diagnose a goal against the capacity available for it.

    Status:
    - IMPOSSIBLE: the monthly effort exceeds the whole income
    - HARD: the effort exceeds the capacity (gap > 0)
    - POSSIBLE: otherwise

    Strategies offered:
    - inflation: the deadline is far enough for prices to add more than 5% to the target
    - down_payment (HARD): inject up to 30% of the target from savings above the survival buffer
    - wait (HARD): the date the capacity alone reaches the target, when under 30 years
    """
    target = safe_float(goal.target_amount)
    missing = max(0.0, target - safe_float(goal.current_saved))
    effort = safe_float(monthly_effort)
    capacity = safe_float(capacity)
    global_savings = safe_float(global_savings)
    gap = effort - capacity

    if effort > safe_float(monthly_income):
        status, message = "IMPOSSIBLE", "This goal needs more each month than your whole income."
    elif gap > settings.goal_feasibility_tolerance:
        status, message = "HARD", f"Missing {format_currency(gap)} per month."
    else:
        status, message = "POSSIBLE", "This goal fits your budget."

    strategies: List[GoalStrategy] = []

    deadline = parse_date(goal.deadline, default=now)
    inflation_gap = inflation_adjusted_amount(target, deadline, now) - target
    if inflation_gap > target * 0.05:
        strategies.append(
            GoalStrategy(
                kind="inflation",
                title="Inflation",
                message=f"With inflation this goal will really cost {format_currency(inflation_gap)} more.",
                value=round_cents(inflation_gap),
            )
        )

    if status == "HARD":
        if global_savings > settings.survival_buffer:
            deposit = min(global_savings, target * 0.3)
            strategies.append(
                GoalStrategy(
                    kind="down_payment",
                    title="Down payment",
                    message=f"Inject {format_currency(deposit)} from your savings.",
                    value=round_cents(deposit),
                )
            )

        months = compound_months_needed(missing, capacity, _monthly_rate(goal))
        reachable_on = None
        if months is not None and months < settings.goal_wait_horizon_months:
            reachable_on = try_add_months(now, months)
        if reachable_on is not None:
            strategies.append(
                GoalStrategy(
                    kind="wait",
                    title="Be patient",
                    message=f"Reachable in {reachable_on:%B %Y} with your current capacity.",
                    value=months,
                    new_deadline=reachable_on,
                )
            )

    return GoalDiagnosis(
        status=status,
        message=message,
        gap=round_cents(max(0.0, gap)),
        strategies=tuple(strategies),
    )


def simulate_goal_projection(goal: Goal, monthly_contribution: float, now: date) -> GoalProjection:
    """Month-by-month savings curve from now to the deadline, with compounding for invested goals"""
    deadline = parse_date(goal.deadline, default=now)
    months = max(0, months_between(now, deadline))
    rate = _monthly_rate(goal)
    contribution = safe_float(monthly_contribution)

    balance = safe_float(goal.current_saved)
    contributed = balance
    interests = 0.0
    points: List[GoalProjectionPoint] = []
    first_month = start_of_month(now)

    for i in range(months + 1):
        points.append(
            GoalProjectionPoint(
                month=i,
                date=add_months(first_month, i),
                balance=round_units(balance),
                contributed=round_units(contributed),
                interests=round_units(interests),
            )
        )
        if i < months:
            earned = balance * rate
            balance += contribution + earned
            contributed += contribution
            interests += earned

    return GoalProjection(
        points=tuple(points),
        total_contributed=round_units(contributed),
        total_interests=round_units(interests),
        final_amount=round_units(balance),
    )


def distribute_goals(goals: Sequence[Goal], capacity: float, now: date) -> List[GoalAllocation]:
    """
    Share the savings capacity between goals, most important category first.

    A buffer (10% by default) is kept aside. Goals of equal priority keep their input order.
    """
    available = max(0.0, safe_float(capacity) * (1 - settings.goal_buffer_ratio))
    allocations: List[GoalAllocation] = []

    for goal in sorted(goals, key=lambda g: category_priority(g.category)):
        requested = calculate_monthly_effort(goal, now)
        allocated = min(available, requested)
        available -= allocated

        allocations.append(
            GoalAllocation(
                name=goal.name,
                priority=category_priority(goal.category),
                requested_effort=round_cents(requested),
                allocated_effort=round_cents(allocated),
                status="FULL" if allocated >= requested else "PARTIAL",
                fill_rate=round_units(allocated / requested * 100) if requested > 0 else 100,
            )
        )

    return allocations
