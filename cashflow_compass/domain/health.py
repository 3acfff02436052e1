"""Profile health check - budget gates, safety runway, debt ratio and long-term wealth"""

from typing import List, Optional

from cashflow_compass.config import settings
from cashflow_compass.domain.budget import calculate_financials, monthly_total
from cashflow_compass.domain.models import (
    BudgetSnapshot,
    HealthOpportunity,
    HealthRatios,
    HealthReport,
    ProfileSnapshot,
)
from cashflow_compass.domain.parsing import format_currency, round_cents, round_units, safe_float

LEVEL_ORDER = {"CRITICAL": 0, "WARNING": 1, "SUCCESS": 2, "INFO": 3}

# Discretionary spending counted in the ideal reserve is capped
RESERVE_DISCRETIONARY_CAP = 500
IDLE_CASH_MULTIPLIER = 1.5
IDLE_CASH_YIELD = 0.05


def income_ratios(snapshot: BudgetSnapshot) -> HealthRatios:
    income = max(1.0, snapshot.monthly_income)
    return HealthRatios(
        needs=round_units(snapshot.mandatory_expenses / income * 100),
        wants=round_units(snapshot.discretionary_expenses / income * 100),
        savings=round_units(snapshot.capacity_to_save / income * 100),
    )


def simulate_future_wealth(start: float, monthly: float, years: int, annual_rate: float) -> int:
    """Future value of a starting stock plus monthly deposits, compounded monthly"""
    if years <= 0:
        return round_units(start)
    rate = annual_rate / 12
    periods = years * 12
    if rate <= 0:
        return round_units(start + monthly * periods)
    factor = (1 + rate) ** periods
    return round_units(start * factor + monthly * (factor - 1) / rate)


def debt_ratio(profile: ProfileSnapshot, snapshot: BudgetSnapshot) -> float:
    """Credit repayments as a percent of income"""
    if snapshot.monthly_income <= 0:
        return 0.0
    return monthly_total(profile.credits) / snapshot.monthly_income * 100


def ideal_reserve(snapshot: BudgetSnapshot) -> float:
    monthly_burn = snapshot.mandatory_expenses + min(snapshot.discretionary_expenses, RESERVE_DISCRETIONARY_CAP)
    return monthly_burn * snapshot.rules.safety_months


def analyze_profile_health(profile: ProfileSnapshot, snapshot: Optional[BudgetSnapshot] = None) -> HealthReport:
    """
    Grade a profile and list what to fix first.

    Gates, in order:
    1. Survival: a structural deficit scores 10, savings plans the budget cannot fund
       score 30. Either returns immediately.
    2. Safety: reserve under the survival buffer, or under the persona's target runway;
       credits above the debt-ratio ceiling.
    3. Optimization: idle cash on the account, savings that are never invested.

    The score starts at 100, loses 1.5 points per needs percent above 55 and 1 point per
    wants percent above 30, and gains 5 when more than 20% of income can be saved.
    """
    snapshot = snapshot or calculate_financials(profile)
    ratios = income_ratios(snapshot)

    raw_capacity = snapshot.monthly_income - snapshot.mandatory_expenses - snapshot.discretionary_expenses

    if snapshot.real_cashflow < 0:
        if raw_capacity < 0:
            return HealthReport(
                global_score=10,
                tags=("DANGER",),
                ratios=ratios,
                wealth_10y=0,
                wealth_20y=0,
                opportunities=(
                    HealthOpportunity(
                        id="critical_deficit",
                        kind="BUDGET",
                        level="CRITICAL",
                        title="Structural deficit",
                        message=f"You spend {format_currency(-raw_capacity)} more than you earn each month.",
                    ),
                ),
            )
        return HealthReport(
            global_score=30,
            tags=("OVERHEATING",),
            ratios=ratios,
            wealth_10y=0,
            wealth_20y=0,
            opportunities=(
                HealthOpportunity(
                    id="over_invest",
                    kind="INVESTMENT",
                    level="CRITICAL",
                    title="Overheating",
                    message=(
                        f"Your savings plans ({format_currency(snapshot.profitable_expenses)}) "
                        "exceed what your budget can fund."
                    ),
                ),
            ),
        )

    opportunities: List[HealthOpportunity] = []
    reserve = snapshot.reserve
    target_reserve = ideal_reserve(snapshot)

    if reserve < settings.survival_buffer:
        opportunities.append(
            HealthOpportunity(
                id="no_safety_net",
                kind="SAVINGS",
                level="CRITICAL",
                title="Red zone",
                message="You have no emergency savings.",
            )
        )
    elif reserve < target_reserve:
        opportunities.append(
            HealthOpportunity(
                id="safety_build",
                kind="SAVINGS",
                level="CRITICAL" if snapshot.persona == "freelance" else "WARNING",
                title="Fragile safety net",
                message=(
                    f"Aim for {snapshot.rules.safety_months:g} months of expenses "
                    f"({format_currency(target_reserve)})."
                ),
            )
        )

    ratio = debt_ratio(profile, snapshot)
    if ratio > settings.max_debt_ratio:
        opportunities.append(
            HealthOpportunity(
                id="debt_alert",
                kind="DEBT",
                level="WARNING",
                title="Credit overheating",
                message=f"Debt ratio at {round_units(ratio)}%. Future loan applications may be refused.",
            )
        )

    cash = safe_float(profile.current_balance)
    idle_threshold = snapshot.mandatory_expenses * IDLE_CASH_MULTIPLIER
    if reserve >= target_reserve and cash > idle_threshold:
        overflow = cash - idle_threshold
        opportunities.append(
            HealthOpportunity(
                id="cash_drag",
                kind="INVESTMENT",
                level="INFO",
                title="Idle cash",
                message=f"{format_currency(overflow)} sleeps on your account while inflation eats it.",
                potential_gain=round_cents(overflow * IDLE_CASH_YIELD),
            )
        )

    if snapshot.investments < 1000 and reserve > 3000:
        opportunities.append(
            HealthOpportunity(
                id="late_starter",
                kind="INVESTMENT",
                level="WARNING",
                title="Time to invest",
                message="Your savings are not growing. Start investing part of them.",
            )
        )

    score = 100.0
    if ratios.needs > 55:
        score -= (ratios.needs - 55) * 1.5
    if ratios.wants > 30:
        score -= ratios.wants - 30
    if ratios.savings > 20:
        score += 5

    tags: List[str] = []
    if ratios.savings > 25:
        tags.append("SAVER")
    elif ratios.wants > 40:
        tags.append("SPENDER")
    if snapshot.investments > reserve * 0.5:
        tags.append("INVESTOR")

    return HealthReport(
        global_score=max(0, min(100, round_units(score))),
        tags=tuple(tags),
        ratios=ratios,
        wealth_10y=simulate_future_wealth(snapshot.total_wealth, snapshot.capacity_to_save, 10, settings.investment_rate),
        wealth_20y=simulate_future_wealth(snapshot.total_wealth, snapshot.capacity_to_save, 20, settings.investment_rate),
        opportunities=tuple(sorted(opportunities, key=lambda o: LEVEL_ORDER[o.level])),
    )
