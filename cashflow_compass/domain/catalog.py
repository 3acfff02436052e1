"""Lookup tables feeding the daily projector: recurring events by day, one-off events by date"""

from collections import defaultdict
from datetime import date
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Tuple

from cashflow_compass.domain.models import (
    FinancialItem,
    OneOffEvent,
    ProfileSnapshot,
    RecurringEvent,
    SimulatedEvent,
)
from cashflow_compass.domain.parsing import safe_float, safe_int

# Trigger day used when an item has no explicit day of month
DEFAULT_INCOME_DAY = 1
DEFAULT_FIXED_COST_DAY = 5
DEFAULT_SUBSCRIPTION_DAY = 10
DEFAULT_CREDIT_DAY = 15
DEFAULT_SAVINGS_DAY = 20

RecurringCatalog = Mapping[int, Tuple[RecurringEvent, ...]]
OneOffIndex = Mapping[date, Tuple[OneOffEvent | SimulatedEvent, ...]]


def _trigger_day(item: FinancialItem, default_day: int) -> int:
    day = safe_int(item.day_of_month)
    if day is None or day == 0:
        return default_day
    return min(max(day, 1), 31)


def _collect(
    catalog: Dict[int, List[RecurringEvent]],
    items: Iterable[FinancialItem],
    kind: str,
    default_day: int,
    name_prefix: str = "",
) -> None:
    for item in items or ():
        amount = safe_float(item.amount)
        if amount <= 0:
            continue

        day = _trigger_day(item, default_day)
        signed = amount if kind == "income" else -amount
        catalog[day].append(
            RecurringEvent(name=f"{name_prefix}{item.name}", kind=kind, amount=signed, day=day)
        )


def build_recurring_catalog(profile: ProfileSnapshot) -> RecurringCatalog:
    """
    Index a profile's recurring items by trigger day of month (1-31).

    - Zero or negative amounts are dropped
    - Missing day falls back to the category default (income 1, fixed 5, subscription 10,
      credit 15, savings 20)
    - Savings contributions leave the current account, so they are expenses

    Annual expenses are not scheduled; they only weigh on the budget snapshot.
    """
    catalog: Dict[int, List[RecurringEvent]] = defaultdict(list)

    _collect(catalog, profile.incomes, "income", DEFAULT_INCOME_DAY)
    _collect(catalog, profile.fixed_costs, "expense", DEFAULT_FIXED_COST_DAY)
    _collect(catalog, profile.subscriptions, "expense", DEFAULT_SUBSCRIPTION_DAY)
    _collect(catalog, profile.credits, "expense", DEFAULT_CREDIT_DAY)
    _collect(catalog, profile.savings_contributions, "expense", DEFAULT_SAVINGS_DAY, "Savings: ")

    return MappingProxyType({day: tuple(events) for day, events in catalog.items()})


def build_one_off_index(events: Iterable[OneOffEvent | SimulatedEvent]) -> OneOffIndex:
    """Group dated events by calendar day, preserving input order"""
    index: Dict[date, List[OneOffEvent | SimulatedEvent]] = defaultdict(list)
    for event in events:
        index[event.date].append(event)
    return MappingProxyType({day: tuple(day_events) for day, day_events in index.items()})
