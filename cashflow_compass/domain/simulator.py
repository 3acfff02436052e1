"""Expansion of a purchase intent into dated cash-flow events"""

from datetime import date
from typing import Iterable, Iterator, List, Optional, Tuple, Type

from cashflow_compass.config import settings
from cashflow_compass.domain.models import (
    HistoryEntry,
    OneOffEvent,
    PaymentMode,
    PurchaseIntent,
    SimulatedEvent,
)
from cashflow_compass.domain.parsing import parse_date, safe_float, safe_int
from cashflow_compass.utils.date_utils import try_add_days, try_add_months


def installment_terms(purchase: PurchaseIntent, mode: PaymentMode) -> Tuple[int, float, float]:
    """
    Repayment terms for CREDIT / SPLIT purchases.

    Simple (non-amortized) interest: total = amount * (1 + rate/100 * months/12).
    SPLIT never carries interest. Missing duration falls back to the usual 3x.

    Returns: (months, total_repayable, monthly_installment)
    """
    amount = abs(safe_float(purchase.amount))
    duration = safe_int(purchase.duration)
    months = max(1, duration if duration else settings.default_split_months)

    rate = abs(safe_float(purchase.rate)) if mode == PaymentMode.CREDIT else 0.0
    total = amount * (1 + (rate / 100) * (months / 12))

    return months, total, total / months


def _expand(
    purchase: PurchaseIntent,
    start: date,
    event_type: Type[OneOffEvent] | Type[SimulatedEvent],
) -> List[OneOffEvent | SimulatedEvent]:
    mode = PaymentMode.parse(purchase.payment_mode)
    amount = abs(safe_float(purchase.amount))
    events: List[OneOffEvent | SimulatedEvent] = []

    if mode == PaymentMode.CASH_ACCOUNT:
        events.append(event_type(name=purchase.name, kind="purchase", amount=-amount, date=start))

        # Expense claims are assumed to be refunded a month later
        refund_date = try_add_days(start, settings.reimbursement_delay_days)
        if purchase.is_reimbursable and refund_date is not None:
            events.append(
                event_type(
                    name=f"Reimbursement: {purchase.name}",
                    kind="income",
                    amount=amount,
                    date=refund_date,
                )
            )

    elif mode == PaymentMode.SUBSCRIPTION:
        for due in _monthly_dates(start, settings.subscription_projection_months):
            events.append(event_type(name=purchase.name, kind="subscription", amount=-amount, date=due))

    elif mode in (PaymentMode.CREDIT, PaymentMode.SPLIT):
        months, _, installment = installment_terms(purchase, mode)
        for i, due in enumerate(_monthly_dates(start, months)):
            events.append(
                event_type(
                    name=f"{purchase.name} ({i + 1}/{months})",
                    kind="debt",
                    amount=-installment,
                    date=due,
                )
            )

    # CASH_SAVINGS and unknown modes: reserve deduction only, no cash-flow event
    return events


def _monthly_dates(start: date, count: int) -> Iterator[date]:
    """start, start + 1 month, ... stopping early at the end of the calendar"""
    for i in range(count):
        due = try_add_months(start, i)
        if due is None:
            return
        yield due


def generate_simulated_events(purchase: PurchaseIntent, now: date) -> List[SimulatedEvent]:
    """
    Turn a purchase intent ("TV for 1000 in 4x") into concrete dated debits/credits.

    - CASH_ACCOUNT: one debit on the purchase date, plus a credit 30 days later if reimbursable
    - SUBSCRIPTION: 24 monthly debits (two-year exposure)
    - CREDIT / SPLIT: one installment per month, labelled "name (i/n)"
    - CASH_SAVINGS: nothing (modeled as a reserve deduction)

    A missing or unparseable purchase date falls back to now.
    """
    start = parse_date(purchase.date, default=now)
    return _expand(purchase, start, SimulatedEvent)


def generate_history_events(history: Iterable[HistoryEntry], now: date) -> List[OneOffEvent]:
    """Replay past decisions as dated one-off events using the same payment rules"""
    events: List[OneOffEvent] = []
    for entry in history or ():
        purchase: Optional[PurchaseIntent] = entry.purchase
        if purchase is None:
            continue
        fallback = parse_date(entry.date, default=now)
        start = parse_date(purchase.date, default=fallback)
        events.extend(_expand(purchase, start, OneOffEvent))
    return events
