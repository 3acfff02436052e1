"""Static budget snapshot - monthly aggregates and persona thresholds derived from a profile"""

from typing import Dict, Iterable

from cashflow_compass.config import settings
from cashflow_compass.domain.models import (
    BudgetSnapshot,
    FinancialItem,
    Household,
    PersonaRules,
    ProfileSnapshot,
)
from cashflow_compass.domain.parsing import safe_float, safe_int

DEFAULT_PERSONA = "salaried"

# safety_months: target reserve runway, max_debt: engagement ceiling (% of income),
# min_living: minimum monthly remainder for a single adult
PERSONA_PRESETS: Dict[str, PersonaRules] = {
    "student": PersonaRules(safety_months=1, max_debt=40, min_living=100),
    "salaried": PersonaRules(safety_months=3, max_debt=35, min_living=300),
    "freelance": PersonaRules(safety_months=6, max_debt=30, min_living=500),
    "retired": PersonaRules(safety_months=6, max_debt=25, min_living=400),
    "unemployed": PersonaRules(safety_months=6, max_debt=0, min_living=200),
}

EXTRA_ADULT_LIVING_COST = 150
CHILD_LIVING_COST = 120


def monthly_total(items: Iterable[FinancialItem]) -> float:
    """Sum of absolute amounts, annual items spread over 12 months"""
    total = 0.0
    for item in items or ():
        amount = abs(safe_float(item.amount))
        if item.frequency in ("annual", "annuel", "yearly"):
            amount /= 12
        total += amount
    return total


def resolve_persona_rules(persona: str, household: Household | None = None) -> PersonaRules:
    """Persona preset with the living threshold scaled to household size"""
    base = PERSONA_PRESETS.get((persona or DEFAULT_PERSONA).lower(), PERSONA_PRESETS[DEFAULT_PERSONA])
    household = household or Household()

    adults = max(1, safe_int(household.adults) or 1)
    children = max(0, safe_int(household.children) or 0)
    min_living = base.min_living + (adults - 1) * EXTRA_ADULT_LIVING_COST + children * CHILD_LIVING_COST

    return PersonaRules(safety_months=base.safety_months, max_debt=base.max_debt, min_living=min_living)


def calculate_financials(profile: ProfileSnapshot) -> BudgetSnapshot:
    """
    Aggregate a profile into the monthly figures the purchase analyzer reasons about.

    - Mandatory: fixed costs + annual expenses (spread) + subscriptions + credits
    - Profitable: savings contributions
    - Discretionary: the variable-spending budget
    - Safety months: reserve / (mandatory + half the discretionary budget)
    """
    monthly_income = monthly_total(profile.incomes)

    mandatory_expenses = (
        monthly_total(profile.fixed_costs)
        + monthly_total(profile.annual_expenses)
        + monthly_total(profile.subscriptions)
        + monthly_total(profile.credits)
    )
    profitable_expenses = monthly_total(profile.savings_contributions)
    discretionary_expenses = abs(safe_float(profile.variable_costs))

    total_recurring = mandatory_expenses + profitable_expenses
    remaining_to_live = monthly_income - total_recurring
    capacity_to_save = max(0.0, remaining_to_live - discretionary_expenses)
    real_cashflow = monthly_income - (mandatory_expenses + discretionary_expenses + profitable_expenses)

    yield_rate = safe_float(profile.investment_yield) / 100
    projected_annual_yield = profitable_expenses * 12 * yield_rate

    reserve = abs(safe_float(profile.savings))
    investments = abs(safe_float(profile.investments))
    total_wealth = reserve + investments + safe_float(profile.current_balance)

    essential_needs = mandatory_expenses + discretionary_expenses * 0.5
    if essential_needs > 0:
        safety_months = min(reserve / essential_needs, settings.safety_months_cap)
    elif reserve > 0:
        safety_months = settings.safety_months_cap
    else:
        safety_months = 0.0

    daily_income = monthly_income / settings.avg_work_days_month if monthly_income > 0 else 0.0
    engagement_rate = mandatory_expenses / monthly_income * 100 if monthly_income > 0 else 0.0

    persona = (profile.persona or DEFAULT_PERSONA).lower()

    return BudgetSnapshot(
        monthly_income=monthly_income,
        mandatory_expenses=mandatory_expenses,
        discretionary_expenses=discretionary_expenses,
        profitable_expenses=profitable_expenses,
        total_recurring=total_recurring,
        remaining_to_live=remaining_to_live,
        capacity_to_save=capacity_to_save,
        real_cashflow=real_cashflow,
        engagement_rate=engagement_rate,
        reserve=reserve,
        investments=investments,
        total_wealth=total_wealth,
        safety_months=safety_months,
        daily_income=daily_income,
        projected_annual_yield=projected_annual_yield,
        rules=resolve_persona_rules(persona, profile.household),
        persona=persona,
    )
