"""Unit tests for the profile health check"""

import pytest
from datetime import date

from cashflow_compass.domain.health import analyze_profile_health, simulate_future_wealth
from cashflow_compass.domain.models import FinancialItem, ProfileSnapshot

NOW = date(2026, 9, 10)


def make_profile(income=2000, rent=800, variable=300, savings=5000, balance=500, **kwargs) -> ProfileSnapshot:
    return ProfileSnapshot(
        current_balance=balance,
        balance_date=NOW.isoformat(),
        variable_costs=variable,
        incomes=(FinancialItem(name="Salary", amount=income, day_of_month=1),),
        fixed_costs=(FinancialItem(name="Rent", amount=rent, day_of_month=5),),
        savings=savings,
        **kwargs,
    )


def test_healthy_saver():
    """Needs 40%, wants 15%, 45% of income left to save"""
    report = analyze_profile_health(make_profile())

    assert (report.ratios.needs, report.ratios.wants, report.ratios.savings) == (40, 15, 45)
    assert report.global_score == 100
    assert report.tags == ("SAVER",)
    # Reserve covers 3 months, but none of it is invested
    assert [o.id for o in report.opportunities] == ["late_starter"]
    # 5,500 of wealth plus 900 a month
    assert report.wealth_10y > 5500 + 900 * 120
    assert report.wealth_20y > report.wealth_10y


def test_structural_deficit_stops_at_first_gate():
    report = analyze_profile_health(make_profile(income=1000, rent=900, variable=300))

    assert report.global_score == 10
    assert report.tags == ("DANGER",)
    assert (report.wealth_10y, report.wealth_20y) == (0, 0)
    (deficit,) = report.opportunities
    assert (deficit.id, deficit.level) == ("critical_deficit", "CRITICAL")
    assert "200 €" in deficit.message


def test_unfundable_savings_plans_are_overheating():
    profile = make_profile(savings_contributions=(FinancialItem(name="Brokerage", amount=1000),))

    report = analyze_profile_health(profile)

    assert report.global_score == 30
    assert report.tags == ("OVERHEATING",)
    assert report.opportunities[0].id == "over_invest"


def test_missing_reserve_and_heavy_credit_sorted_by_level():
    profile = make_profile(savings=500, credits=(FinancialItem(name="Car loan", amount=800),))

    report = analyze_profile_health(profile)

    assert [(o.id, o.level) for o in report.opportunities] == [
        ("no_safety_net", "CRITICAL"),
        ("debt_alert", "WARNING"),
    ]
    assert "40%" in report.opportunities[1].message


def test_freelance_short_reserve_is_critical():
    """Six months of 800 + 300 is 6,600"""
    report = analyze_profile_health(make_profile(savings=2000, persona="freelance"))

    (safety,) = report.opportunities
    assert (safety.id, safety.level) == ("safety_build", "CRITICAL")
    assert "6,600 €" in safety.message


def test_salaried_short_reserve_is_a_warning():
    report = analyze_profile_health(make_profile(savings=2000))

    assert [(o.id, o.level) for o in report.opportunities] == [("safety_build", "WARNING")]


def test_idle_cash_on_the_account():
    """3,000 on the account, 1.5 months of rent (1,200) is enough"""
    report = analyze_profile_health(make_profile(balance=3000))

    assert [o.id for o in report.opportunities] == ["late_starter", "cash_drag"]
    cash_drag = report.opportunities[1]
    assert cash_drag.level == "INFO"
    assert cash_drag.potential_gain == 90.0


def test_score_penalties_for_needs_and_wants():
    """Needs 65% costs 15 points, wants 33% costs 3"""
    report = analyze_profile_health(make_profile(rent=1300, variable=660, savings=0))

    assert (report.ratios.needs, report.ratios.wants, report.ratios.savings) == (65, 33, 2)
    assert report.global_score == 82
    assert report.tags == ()


def test_investor_tag():
    report = analyze_profile_health(make_profile(investments=10000))

    assert report.tags == ("SAVER", "INVESTOR")
    assert report.opportunities == ()


def test_future_wealth():
    assert simulate_future_wealth(1000, 100, 0, 0.07) == 1000
    assert simulate_future_wealth(1000, 100, 10, 0) == 13000
    # 1,000 at 0.5% a month for 12 months
    assert simulate_future_wealth(1000, 0, 1, 0.06) == pytest.approx(1062, abs=1)
