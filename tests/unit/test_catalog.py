"""Unit tests for the recurring catalog and one-off index"""

from datetime import date

from cashflow_compass.domain.catalog import (
    DEFAULT_CREDIT_DAY,
    DEFAULT_FIXED_COST_DAY,
    DEFAULT_INCOME_DAY,
    DEFAULT_SAVINGS_DAY,
    DEFAULT_SUBSCRIPTION_DAY,
    build_one_off_index,
    build_recurring_catalog,
)
from cashflow_compass.domain.models import FinancialItem, OneOffEvent, ProfileSnapshot, SimulatedEvent


def test_missing_days_use_category_defaults():
    profile = ProfileSnapshot(
        incomes=(FinancialItem(name="Salary", amount=2000),),
        fixed_costs=(FinancialItem(name="Rent", amount=800),),
        subscriptions=(FinancialItem(name="Music", amount=10),),
        credits=(FinancialItem(name="Car loan", amount=250),),
        savings_contributions=(FinancialItem(name="Emergency fund", amount=100),),
    )

    catalog = build_recurring_catalog(profile)

    assert [e.name for e in catalog[DEFAULT_INCOME_DAY]] == ["Salary"]
    assert [e.name for e in catalog[DEFAULT_FIXED_COST_DAY]] == ["Rent"]
    assert [e.name for e in catalog[DEFAULT_SUBSCRIPTION_DAY]] == ["Music"]
    assert [e.name for e in catalog[DEFAULT_CREDIT_DAY]] == ["Car loan"]
    assert [e.name for e in catalog[DEFAULT_SAVINGS_DAY]] == ["Savings: Emergency fund"]


def test_amounts_are_signed_by_kind():
    profile = ProfileSnapshot(
        incomes=(FinancialItem(name="Salary", amount="2 000", day_of_month=1),),
        fixed_costs=(FinancialItem(name="Rent", amount=800, day_of_month=1),),
    )

    events = build_recurring_catalog(profile)[1]

    assert {e.name: e.amount for e in events} == {"Salary": 2000.0, "Rent": -800.0}
    assert {e.kind for e in events} == {"income", "expense"}


def test_zero_negative_and_garbage_amounts_are_dropped():
    profile = ProfileSnapshot(
        fixed_costs=(
            FinancialItem(name="Zero", amount=0, day_of_month=3),
            FinancialItem(name="Negative", amount=-50, day_of_month=3),
            FinancialItem(name="Garbage", amount="n/a", day_of_month=3),
        ),
    )

    assert build_recurring_catalog(profile) == {}


def test_out_of_range_days_are_clamped():
    profile = ProfileSnapshot(
        fixed_costs=(
            FinancialItem(name="Late", amount=10, day_of_month=45),
            FinancialItem(name="Early", amount=10, day_of_month=-3),
            FinancialItem(name="Text", amount=10, day_of_month="12"),
        ),
    )

    catalog = build_recurring_catalog(profile)

    assert [e.name for e in catalog[31]] == ["Late"]
    assert [e.name for e in catalog[1]] == ["Early"]
    assert [e.name for e in catalog[12]] == ["Text"]


def test_one_off_index_groups_by_date_in_order():
    day = date(2026, 9, 15)
    events = [
        OneOffEvent(name="Shoes", kind="purchase", amount=-80, date=day),
        SimulatedEvent(name="TV (1/3)", kind="debt", amount=-300, date=day),
        OneOffEvent(name="Gift", kind="purchase", amount=-20, date=date(2026, 9, 16)),
    ]

    index = build_one_off_index(events)

    assert [e.name for e in index[day]] == ["Shoes", "TV (1/3)"]
    assert len(index[date(2026, 9, 16)]) == 1
    assert date(2026, 9, 17) not in index
