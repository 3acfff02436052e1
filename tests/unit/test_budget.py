"""Unit tests for the budget snapshot and persona thresholds"""

import pytest

from cashflow_compass.domain.budget import calculate_financials, monthly_total, resolve_persona_rules
from cashflow_compass.domain.models import FinancialItem, Household, ProfileSnapshot


@pytest.fixture
def household_profile() -> ProfileSnapshot:
    return ProfileSnapshot(
        current_balance=1500,
        variable_costs=300,
        incomes=(
            FinancialItem(name="Salary", amount=2000, day_of_month=1),
            FinancialItem(name="Bonus", amount=1200, frequency="annual"),
        ),
        fixed_costs=(FinancialItem(name="Rent", amount=800),),
        subscriptions=(FinancialItem(name="Streaming", amount=20),),
        credits=(FinancialItem(name="Car loan", amount=180),),
        annual_expenses=(FinancialItem(name="Home insurance", amount=600, frequency="annual"),),
        savings_contributions=(FinancialItem(name="Emergency fund", amount=100),),
        savings=3000,
        investments=2000,
        investment_yield=5,
    )


def test_monthly_totals_spread_annual_items():
    items = [FinancialItem(name="A", amount=100), FinancialItem(name="B", amount=1200, frequency="annual")]
    assert monthly_total(items) == 200.0
    assert monthly_total([]) == 0.0


def test_calculate_financials(household_profile):
    snapshot = calculate_financials(household_profile)

    assert snapshot.monthly_income == pytest.approx(2100)
    assert snapshot.mandatory_expenses == pytest.approx(1050)
    assert snapshot.profitable_expenses == pytest.approx(100)
    assert snapshot.discretionary_expenses == pytest.approx(300)
    assert snapshot.total_recurring == pytest.approx(1150)
    assert snapshot.remaining_to_live == pytest.approx(950)
    assert snapshot.capacity_to_save == pytest.approx(650)
    assert snapshot.real_cashflow == pytest.approx(650)
    assert snapshot.engagement_rate == pytest.approx(50)
    assert snapshot.total_wealth == pytest.approx(6500)
    assert snapshot.projected_annual_yield == pytest.approx(60)


def test_safety_months_uses_half_the_variable_budget(household_profile):
    snapshot = calculate_financials(household_profile)
    # 3000 / (1050 + 300 * 0.5)
    assert snapshot.safety_months == pytest.approx(2.5)


def test_daily_income_uses_average_work_days(household_profile):
    snapshot = calculate_financials(household_profile)
    assert snapshot.daily_income == pytest.approx(2100 / 21.6)


def test_capacity_to_save_never_negative():
    profile = ProfileSnapshot(
        variable_costs=500,
        incomes=(FinancialItem(name="Salary", amount=1000),),
        fixed_costs=(FinancialItem(name="Rent", amount=900),),
    )
    snapshot = calculate_financials(profile)
    assert snapshot.remaining_to_live == pytest.approx(100)
    assert snapshot.capacity_to_save == 0.0


def test_degenerate_profiles_do_not_divide_by_zero():
    empty = calculate_financials(ProfileSnapshot())
    assert empty.safety_months == 0.0
    assert empty.engagement_rate == 0.0
    assert empty.daily_income == 0.0

    reserve_only = calculate_financials(ProfileSnapshot(savings=5000))
    assert reserve_only.safety_months == 99.0


def test_safety_months_are_capped():
    profile = ProfileSnapshot(savings=1_000_000, fixed_costs=(FinancialItem(name="Phone", amount=10),))
    assert calculate_financials(profile).safety_months == 99.0


def test_persona_rules_scale_with_household():
    rules = resolve_persona_rules("salaried", Household(adults=2, children=1))
    assert rules.min_living == 300 + 150 + 120
    assert rules.safety_months == 3
    assert rules.max_debt == 35


def test_unknown_persona_falls_back_to_salaried():
    assert resolve_persona_rules("astronaut") == resolve_persona_rules("salaried")
    assert resolve_persona_rules("FREELANCE").safety_months == 6


def test_snapshot_carries_persona_rules():
    snapshot = calculate_financials(ProfileSnapshot(persona="student", household=Household(adults="1", children="2")))
    assert snapshot.persona == "student"
    assert snapshot.rules.min_living == 100 + 2 * 120
