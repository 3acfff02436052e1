"""Daily balance projector - the timeline engine"""

from dataclasses import dataclass
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence

from cashflow_compass.config import settings
from cashflow_compass.domain.catalog import (
    OneOffIndex,
    RecurringCatalog,
    build_one_off_index,
    build_recurring_catalog,
)
from cashflow_compass.domain.models import (
    DailyRecord,
    HistoryEntry,
    MonthBucket,
    ProfileSnapshot,
    SimulatedEvent,
    TimelineEvent,
)
from cashflow_compass.domain.parsing import parse_date, round_units, safe_float
from cashflow_compass.domain.simulator import generate_history_events
from cashflow_compass.utils.date_utils import (
    add_days,
    days_in_month,
    is_last_day_of_month,
    month_key,
    month_label,
    start_of_month,
)

# Relative pressure of variable spending by weekday (Monday=0 .. Sunday=6).
# Weekends are heavier; the weights average to 1.0 over a week.
WEEKDAY_WEIGHTS = (0.6, 0.6, 0.6, 0.6, 1.0, 2.3, 1.3)


@dataclass
class _DayImpact:
    expenses: float = 0.0  # Negative recurring / historical amounts
    incomes: float = 0.0  # Positive recurring / historical amounts
    simulation: float = 0.0  # Simulated amounts, any sign


def resolve_anchor_date(profile: ProfileSnapshot, now: date) -> date:
    """Reference "today": explicit balance date, else last update, else now"""
    if profile.balance_date:
        return parse_date(profile.balance_date, default=now)
    if profile.updated_at:
        return parse_date(profile.updated_at, default=now)
    return now


def daily_variable_cost(monthly_budget: float, day: date) -> float:
    """Smoothed daily share of the monthly variable budget, weighted by weekday"""
    return monthly_budget / 30 * WEEKDAY_WEIGHTS[day.weekday()]


def _events_for_day(
    day: date,
    recurring: RecurringCatalog,
    one_offs: OneOffIndex,
) -> List[TimelineEvent]:
    events: List[TimelineEvent] = list(recurring.get(day.day, ()))

    # Rollover: an item due on the 31st fires on the 30th (or 28th/29th) in shorter months
    if is_last_day_of_month(day):
        for trigger_day in range(days_in_month(day) + 1, 32):
            events.extend(recurring.get(trigger_day, ()))

    events.extend(one_offs.get(day, ()))
    return events


def _classify(events: Iterable[TimelineEvent]) -> _DayImpact:
    impact = _DayImpact()
    for event in events:
        if isinstance(event, SimulatedEvent):
            impact.simulation += event.amount
        elif event.amount < 0:
            impact.expenses += event.amount
        else:
            impact.incomes += event.amount
    return impact


def _status(balance: Optional[float], warning_threshold: Optional[float]) -> str:
    if balance is None:
        return "safe"
    if balance < 0:
        return "danger"
    if warning_threshold is not None and balance < warning_threshold:
        return "warning"
    return "safe"


def build_timeline(
    profile: ProfileSnapshot,
    history: Sequence[HistoryEntry] = (),
    simulated_events: Sequence[SimulatedEvent] = (),
    horizon_days: Optional[int] = None,
    now: Optional[date] = None,
    warning_threshold: Optional[float] = None,
) -> List[MonthBucket]:
    """
    Project the account balance day by day from the start of the anchor month.

    Rules:
    - Days before the anchor date have an unknown balance (None)
    - Anchor day: balance resets to the declared balance, then scheduled expenses and
      simulated amounts are applied; scheduled incomes and variable spending are not
      (pessimistic: a salary due today may already be included in the declared balance)
    - After the anchor: all events plus the weekday-weighted variable spending

    The running balance keeps full precision; balances are rounded only when emitted.
    Identical inputs (including now) always produce the identical timeline.
    A horizon reaching past the end of the calendar is cut short at date.max.
    """
    if now is None:
        now = date.today()
    if horizon_days is None:
        horizon_days = settings.default_horizon_days

    anchor = resolve_anchor_date(profile, now)
    loop_start = start_of_month(anchor)
    total_days = abs((anchor - loop_start).days) + max(0, horizon_days)
    # The projection stops at the last representable day
    total_days = min(total_days, (date.max - loop_start).days + 1)

    anchor_balance = safe_float(profile.current_balance)
    monthly_variable = safe_float(profile.variable_costs)

    # Lookup tables are built once and only read inside the loop
    recurring = build_recurring_catalog(profile)
    one_offs = build_one_off_index([*generate_history_events(history, now), *simulated_events])

    labels: Dict[str, str] = {}
    month_days: Dict[str, List[DailyRecord]] = {}
    month_end: Dict[str, Optional[int]] = {}
    running_balance = 0.0

    for i in range(total_days):
        day = add_days(loop_start, i)
        events = _events_for_day(day, recurring, one_offs)
        impact = _classify(events)

        balance: Optional[float]
        if day < anchor:
            balance = None
        elif day == anchor:
            running_balance = anchor_balance + impact.expenses + impact.simulation
            balance = running_balance
        else:
            variable = daily_variable_cost(monthly_variable, day) if monthly_variable > 0 else 0.0
            running_balance += impact.expenses + impact.incomes + impact.simulation - variable
            balance = running_balance

        key = month_key(day)
        if key not in month_days:
            month_days[key] = []
            month_end[key] = None
            labels[key] = month_label(day)

        emitted = round_units(balance) if balance is not None else None
        month_days[key].append(
            DailyRecord(
                date=day,
                day_of_month=day.day,
                balance=emitted,
                events=tuple(events),
                status=_status(balance, warning_threshold),
            )
        )
        if emitted is not None:
            month_end[key] = emitted

    return [
        MonthBucket(key=key, label=label, days=tuple(month_days[key]), balance_end=month_end[key])
        for key, label in labels.items()
    ]


def flatten_days(months: Iterable[MonthBucket]) -> List[DailyRecord]:
    """All daily records of a timeline, in date order"""
    return [day for month in months for day in month.days]
