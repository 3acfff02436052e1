"""Purchase impact analyzer - verdict, score and derived metrics for a hypothetical purchase"""

from dataclasses import dataclass
from datetime import date
from typing import List, Optional, Sequence, Tuple

from cashflow_compass.config import settings
from cashflow_compass.domain.models import (
    AnalysisResult,
    BudgetSnapshot,
    CurvePoint,
    HistoryEntry,
    Issue,
    PaymentMode,
    ProfileSnapshot,
    PurchaseIntent,
    Tip,
    Verdict,
)
from cashflow_compass.domain.parsing import format_currency, parse_date, round_cents, safe_float
from cashflow_compass.domain.simulator import generate_simulated_events, installment_terms
from cashflow_compass.domain.timeline import build_timeline, flatten_days


@dataclass(frozen=True)
class StaticImpact:
    """Theoretical effect of the purchase on the monthly budget and the reserve"""

    new_reserve: float
    new_remaining_to_live: float
    monthly_cost: float
    real_cost: float
    credit_cost: float
    opportunity_cost: float
    work_time_days: float


@dataclass(frozen=True)
class CashflowImpact:
    """What the short-horizon projection says once the purchase is injected"""

    lowest_balance: Optional[float]
    first_danger_date: Optional[date]
    curve: Tuple[CurvePoint, ...]

    @property
    def is_ok(self) -> bool:
        return self.lowest_balance is None or self.lowest_balance >= 0


def future_value(principal: float, rate: float, years: float) -> float:
    return principal * (1 + rate) ** years


def opportunity_cost_of(outflow: float, years: int) -> float:
    """Growth forgone by not investing the outflow at the long-term market rate"""
    return future_value(outflow, settings.investment_rate, years) - outflow


def compute_static_impact(
    snapshot: BudgetSnapshot,
    purchase: PurchaseIntent,
    is_past: bool,
    is_current_month: bool,
) -> StaticImpact:
    """
    Budget-level impact by payment mode.

    - CASH_SAVINGS: reserve drops (floored at 0); already reflected when past
    - CASH_ACCOUNT: the month's remainder drops if the purchase falls this month
    - SUBSCRIPTION: new monthly cost; real cost is one year of payments
    - CREDIT / SPLIT: the installment weighs on the month; CREDIT adds interest cost
    - Reimbursable: a pass-through advance, no real cost
    - Professional: no opportunity cost
    """
    mode = PaymentMode.parse(purchase.payment_mode)
    amount = abs(safe_float(purchase.amount))

    new_reserve = snapshot.reserve
    new_remaining = snapshot.remaining_to_live
    monthly_cost = 0.0
    credit_cost = 0.0
    real_cost = amount
    opportunity_cost = opportunity_cost_of(amount, settings.opportunity_horizon_years)

    if mode == PaymentMode.CASH_SAVINGS:
        if not is_past:
            new_reserve = max(0.0, round_cents(snapshot.reserve - amount))

    elif mode == PaymentMode.CASH_ACCOUNT:
        if is_current_month:
            new_remaining = round_cents(snapshot.remaining_to_live - amount)

    elif mode == PaymentMode.SUBSCRIPTION:
        monthly_cost = amount
        if is_current_month:
            new_remaining = round_cents(snapshot.remaining_to_live - monthly_cost)
        exposure = amount * 12 * settings.subscription_opportunity_years
        opportunity_cost = opportunity_cost_of(exposure, settings.subscription_opportunity_years)
        real_cost = amount * 12

    elif mode in (PaymentMode.CREDIT, PaymentMode.SPLIT):
        _, total, installment = installment_terms(purchase, mode)
        monthly_cost = round_cents(installment)
        if mode == PaymentMode.CREDIT:
            credit_cost = round_cents(total - amount)
            real_cost = total
        if is_current_month:
            new_remaining = round_cents(snapshot.remaining_to_live - monthly_cost)

    work_time_days = 0.0
    if purchase.is_reimbursable:
        real_cost = credit_cost = opportunity_cost = 0.0
    else:
        if purchase.is_professional:
            opportunity_cost = 0.0
        if snapshot.daily_income > 1:
            work_time_days = round_cents(real_cost / snapshot.daily_income)

    return StaticImpact(
        new_reserve=new_reserve,
        new_remaining_to_live=new_remaining,
        monthly_cost=monthly_cost,
        real_cost=round_cents(real_cost),
        credit_cost=round_cents(credit_cost),
        opportunity_cost=round_cents(opportunity_cost),
        work_time_days=work_time_days,
    )


def projected_ratios(snapshot: BudgetSnapshot, impact: StaticImpact) -> Tuple[float, float]:
    """
    Safety months and engagement rate after the purchase.

    Returns: (new_safety_months, new_engagement_rate)
    """
    monthly_needs = (
        snapshot.mandatory_expenses + max(impact.monthly_cost, 0.0) + snapshot.discretionary_expenses * 0.5
    )
    if monthly_needs > 0:
        safety_months = min(round_cents(impact.new_reserve / monthly_needs), settings.safety_months_cap)
    elif impact.new_reserve > 0:
        safety_months = settings.safety_months_cap
    else:
        safety_months = 0.0

    engagement_rate = 0.0
    if snapshot.monthly_income > 0:
        engagement_rate = round_cents(
            (snapshot.mandatory_expenses + impact.monthly_cost) / snapshot.monthly_income * 100
        )

    return safety_months, engagement_rate


def compute_cashflow_impact(
    profile: Optional[ProfileSnapshot],
    history: Sequence[HistoryEntry],
    purchase: PurchaseIntent,
    now: date,
) -> CashflowImpact:
    """Inject the purchase into a short projection and look for the lowest point"""
    if profile is None:
        return CashflowImpact(lowest_balance=None, first_danger_date=None, curve=())

    simulated = generate_simulated_events(purchase, now)
    timeline = build_timeline(
        profile,
        history,
        simulated,
        horizon_days=settings.analysis_horizon_days,
        now=now,
    )

    lowest: Optional[float] = None
    first_danger: Optional[date] = None
    curve: List[CurvePoint] = []

    for day in flatten_days(timeline):
        if day.balance is None:
            continue
        if lowest is None or day.balance < lowest:
            lowest = day.balance
        if day.balance < 0 and first_danger is None:
            first_danger = day.date
        if day.date >= now and len(curve) < settings.projected_curve_days:
            curve.append(CurvePoint(date=day.date, value=day.balance))

    return CashflowImpact(
        lowest_balance=float(lowest) if lowest is not None else None,
        first_danger_date=first_danger,
        curve=tuple(curve),
    )


def analyze_purchase_impact(
    snapshot: BudgetSnapshot,
    purchase: PurchaseIntent,
    now: date,
    profile: Optional[ProfileSnapshot] = None,
    history: Sequence[HistoryEntry] = (),
) -> AnalysisResult:
    """
    Main entry point: classify a hypothetical purchase as green / orange / red.

    Verdict matrix (first match wins):
    - Past-dated:                           green, regularization
    - CASH_SAVINGS above the reserve:       red, score 0
    - Budget ok and cashflow ok:            green, 100
    - Budget ok, projected overdraft:       orange, 40
    - Budget short, cashflow ok:            orange, 45
    - Neither:                              red, 10

    Budget ok means the reserve covers a CASH_SAVINGS purchase, otherwise the new monthly
    remainder stays above the persona's minimum. Cashflow ok means the 45-day projection
    never goes negative (always true without a profile).

    Future, non-reimbursable purchases then lose 10 points for a safety runway below the
    persona target and 10 for an engagement rate above its debt ceiling.
    """
    mode = PaymentMode.parse(purchase.payment_mode)
    amount = abs(safe_float(purchase.amount))
    rules = snapshot.rules

    purchase_date = parse_date(purchase.date, default=now)
    is_past = purchase_date < now
    is_current_month = (purchase_date.year, purchase_date.month) == (now.year, now.month)

    impact = compute_static_impact(snapshot, purchase, is_past, is_current_month)
    new_safety_months, new_engagement_rate = projected_ratios(snapshot, impact)
    cashflow = compute_cashflow_impact(profile, history, purchase, now)

    savings_insufficient = mode == PaymentMode.CASH_SAVINGS and amount > snapshot.reserve
    if mode == PaymentMode.CASH_SAVINGS:
        is_budget_ok = not savings_insufficient
    else:
        is_budget_ok = impact.new_remaining_to_live >= rules.min_living
    is_cashflow_ok = cashflow.is_ok

    issues: List[Issue] = []
    tips: List[Tip] = []

    if is_past:
        verdict, score = Verdict.GREEN, 100
        title = "Updated"
        message = "Expense added to your history. This month's budget has been adjusted."

    elif savings_insufficient:
        verdict, score = Verdict.RED, 0
        title = "Insufficient funds"
        message = f"You are {format_currency(amount - snapshot.reserve)} short in savings."
        issues.append(Issue(level="red", text="Insufficient funds: savings do not cover this purchase."))
        tips.append(Tip(kind="stop", title="Blocking", text="Your reserve cannot pay for this purchase."))

    elif is_budget_ok and is_cashflow_ok:
        verdict, score = Verdict.GREEN, 100
        title = "Go ahead"
        message = "It fits your budget and your account stays positive."

    elif is_budget_ok:
        verdict, score = Verdict.ORANGE, 40
        title = "Wait a little"
        message = (
            "You have the budget, but your account will go overdrawn "
            f"(low point: {format_currency(cashflow.lowest_balance)}). Wait for your next income."
        )
        if cashflow.first_danger_date is not None:
            issues.append(
                Issue(level="red", text=f"Overdraft expected on {cashflow.first_danger_date:%d %b}")
            )
        tips.append(
            Tip(
                kind="warning",
                title="Cash-flow wall",
                text="Scheduled charges will push the account below zero if you buy now.",
            )
        )

    elif is_cashflow_ok:
        verdict, score = Verdict.ORANGE, 45
        title = "Mind your budget"
        message = "Your account can take it today, but this purchase cuts too deep into this month's remainder."
        issues.append(Issue(level="orange", text="Monthly remainder below the safety threshold"))
        shortfall = rules.min_living - impact.new_remaining_to_live
        if impact.new_reserve > shortfall > 0:
            tips.append(
                Tip(
                    kind="action",
                    title="Transfer needed",
                    text=f"Plan a transfer of {format_currency(shortfall)} from your savings.",
                )
            )

    else:
        verdict, score = Verdict.RED, 10
        title = "Not possible"
        message = "Neither the budget nor the cash flow can absorb this purchase."
        issues.append(Issue(level="red", text="Double alert: budget and cash flow"))

    if not is_past and not purchase.is_reimbursable and not savings_insufficient:
        if new_safety_months < rules.safety_months:
            issues.append(Issue(level="orange", text=f"Low safety runway ({new_safety_months:.1f} months)."))
            score -= 10
        if new_engagement_rate > rules.max_debt:
            issues.append(
                Issue(
                    level="orange",
                    text=f"High commitment rate ({new_engagement_rate:g}% > {rules.max_debt:g}%).",
                )
            )
            score -= 10

    return AnalysisResult(
        verdict=verdict,
        score=max(0, score),
        smart_title=title,
        smart_message=message,
        is_past=is_past,
        is_budget_ok=is_budget_ok,
        is_cashflow_ok=is_cashflow_ok,
        issues=tuple(issues),
        tips=tuple(tips),
        new_reserve=impact.new_reserve,
        new_remaining_to_live=impact.new_remaining_to_live,
        new_safety_months=new_safety_months,
        new_engagement_rate=new_engagement_rate,
        real_cost=impact.real_cost,
        credit_cost=impact.credit_cost,
        opportunity_cost=impact.opportunity_cost,
        work_time_days=impact.work_time_days,
        lowest_projected_balance=cashflow.lowest_balance,
        first_danger_date=cashflow.first_danger_date,
        projected_curve=cashflow.curve,
    )
