"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Any, ClassVar, Optional, Tuple, Union


class PaymentMode(str, Enum):
    """How a hypothetical purchase is paid"""

    CASH_SAVINGS = "CASH_SAVINGS"  # Taken from the reserve (stock)
    CASH_ACCOUNT = "CASH_ACCOUNT"  # Paid from the current account
    SPLIT = "SPLIT"  # Interest-free 3x/4x
    CREDIT = "CREDIT"  # Consumer credit / lease
    SUBSCRIPTION = "SUBSCRIPTION"  # New recurring charge

    @classmethod
    def parse(cls, value: Any) -> Optional["PaymentMode"]:
        """Unknown modes map to None (no cash-flow effect)"""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            return None


class Verdict(str, Enum):
    GREEN = "green"
    ORANGE = "orange"
    RED = "red"


# ---------------------------------------------------------------------------
# Profile inputs
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FinancialItem:
    """Declared recurring line (income, bill, subscription...); raw form values allowed"""

    name: str
    amount: Any
    day_of_month: Any = None
    frequency: str = "monthly"  # "monthly" | "annual"


@dataclass(frozen=True)
class Household:
    adults: Any = 1
    children: Any = 0


@dataclass(frozen=True)
class ProfileSnapshot:
    """User's declared financial state, supplied whole per invocation"""

    current_balance: Any = 0
    balance_date: Any = None
    updated_at: Any = None
    variable_costs: Any = 0  # Monthly variable-spending budget
    incomes: Tuple[FinancialItem, ...] = ()
    fixed_costs: Tuple[FinancialItem, ...] = ()
    subscriptions: Tuple[FinancialItem, ...] = ()
    credits: Tuple[FinancialItem, ...] = ()
    savings_contributions: Tuple[FinancialItem, ...] = ()
    annual_expenses: Tuple[FinancialItem, ...] = ()
    savings: Any = 0  # Reserve
    investments: Any = 0
    investment_yield: Any = 0
    persona: str = "salaried"
    household: Household = field(default_factory=Household)


@dataclass(frozen=True)
class PersonaRules:
    """Per-profile-type thresholds parameterizing the verdict matrix"""

    safety_months: float
    max_debt: float  # Percent of income
    min_living: float  # Minimum monthly remainder


# ---------------------------------------------------------------------------
# Timeline events (tagged union)
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RecurringEvent:
    """Periodic movement triggered on a day of month"""

    name: str
    kind: str  # "income" | "expense"
    amount: float  # Signed
    day: int

    source: ClassVar[str] = "recurring"
    is_simulation: ClassVar[bool] = False


@dataclass(frozen=True)
class OneOffEvent:
    """Dated movement replayed from a past decision"""

    name: str
    kind: str  # "purchase" | "income" | "subscription" | "debt"
    amount: float
    date: date

    source: ClassVar[str] = "history"
    is_simulation: ClassVar[bool] = False


@dataclass(frozen=True)
class SimulatedEvent:
    """Dated movement of the purchase under evaluation"""

    name: str
    kind: str
    amount: float
    date: date

    source: ClassVar[str] = "simulation"
    is_simulation: ClassVar[bool] = True


TimelineEvent = Union[RecurringEvent, OneOffEvent, SimulatedEvent]


@dataclass(frozen=True)
class DailyRecord:
    date: date
    day_of_month: int
    balance: Optional[int]  # None before the anchor date (unknown past)
    events: Tuple[TimelineEvent, ...]
    status: str  # "safe" | "warning" | "danger"


@dataclass(frozen=True)
class MonthBucket:
    key: str  # YYYY-MM
    label: str
    days: Tuple[DailyRecord, ...]
    balance_end: Optional[int]


# ---------------------------------------------------------------------------
# Purchases
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PurchaseIntent:
    """Hypothetical spend under evaluation"""

    name: str
    amount: Any
    payment_mode: Any = PaymentMode.CASH_ACCOUNT
    date: Any = None
    duration: Any = None  # Months, CREDIT / SPLIT
    rate: Any = None  # Annual percent, CREDIT
    is_reimbursable: bool = False
    is_professional: bool = False
    category: str = "desire"  # "need" | "useful" | "desire"


@dataclass(frozen=True)
class HistoryEntry:
    """A past decision replayed into the timeline"""

    purchase: Optional[PurchaseIntent]
    date: Any = None
    result: Any = None


@dataclass(frozen=True)
class BudgetSnapshot:
    """Static monthly aggregates derived from a profile"""

    monthly_income: float
    mandatory_expenses: float
    discretionary_expenses: float
    profitable_expenses: float
    total_recurring: float
    remaining_to_live: float
    capacity_to_save: float
    real_cashflow: float
    engagement_rate: float
    reserve: float
    investments: float
    total_wealth: float
    safety_months: float
    daily_income: float
    projected_annual_yield: float
    rules: PersonaRules
    persona: str


@dataclass(frozen=True)
class Issue:
    level: str  # "red" | "orange"
    text: str


@dataclass(frozen=True)
class Tip:
    kind: str  # "stop" | "action" | "warning"
    title: str
    text: str


@dataclass(frozen=True)
class CurvePoint:
    date: date
    value: int


@dataclass(frozen=True)
class AnalysisResult:
    """Verdict on a PurchaseIntent"""

    verdict: Verdict
    score: int
    smart_title: str
    smart_message: str
    is_past: bool
    is_budget_ok: bool
    is_cashflow_ok: bool
    issues: Tuple[Issue, ...]
    tips: Tuple[Tip, ...]
    new_reserve: float
    new_remaining_to_live: float
    new_safety_months: float
    new_engagement_rate: float
    real_cost: float
    credit_cost: float
    opportunity_cost: float
    work_time_days: float
    lowest_projected_balance: Optional[float]
    first_danger_date: Optional[date]
    projected_curve: Tuple[CurvePoint, ...]


# ---------------------------------------------------------------------------
# Goals
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Goal:
    name: str
    target_amount: Any
    current_saved: Any = 0
    deadline: Any = None
    monthly_contribution: Any = 0
    projected_yield: Any = 0
    is_invested: bool = False
    category: str = "OTHER"


@dataclass(frozen=True)
class GoalSuggestion:
    kind: str  # "extend_time" | "impossible"
    message: str
    new_deadline: Optional[date] = None
    needed_months: Optional[int] = None
    new_monthly_effort: Optional[float] = None


@dataclass(frozen=True)
class GoalSimulation:
    """Feasibility verdict for a Goal"""

    required_monthly_effort: float
    amount_to_save: float
    months: int
    is_possible: bool
    remaining_capacity: float
    suggestion: Optional[GoalSuggestion]


@dataclass(frozen=True)
class GoalProjectionPoint:
    month: int
    date: date
    balance: int
    contributed: int
    interests: int


@dataclass(frozen=True)
class GoalProjection:
    points: Tuple[GoalProjectionPoint, ...]
    total_contributed: int
    total_interests: int
    final_amount: int


@dataclass(frozen=True)
class GoalAllocation:
    name: str
    priority: int
    requested_effort: float
    allocated_effort: float
    status: str  # "FULL" | "PARTIAL"
    fill_rate: int


@dataclass(frozen=True)
class GoalStrategy:
    kind: str  # "inflation" | "down_payment" | "wait"
    title: str
    message: str
    value: Optional[float] = None
    new_deadline: Optional[date] = None


@dataclass(frozen=True)
class GoalDiagnosis:
    """How hard a goal is for this budget, and the levers that would make it fit"""

    status: str  # "POSSIBLE" | "HARD" | "IMPOSSIBLE"
    message: str
    gap: float  # Monthly shortfall, 0 when the goal fits
    strategies: Tuple[GoalStrategy, ...]


# ---------------------------------------------------------------------------
# Profile health
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class HealthOpportunity:
    id: str
    kind: str  # "BUDGET" | "SAVINGS" | "DEBT" | "INVESTMENT"
    level: str  # "CRITICAL" | "WARNING" | "SUCCESS" | "INFO"
    title: str
    message: str
    potential_gain: Optional[float] = None


@dataclass(frozen=True)
class HealthRatios:
    """Shares of income, in percent"""

    needs: int
    wants: int
    savings: int


@dataclass(frozen=True)
class HealthReport:
    global_score: int
    tags: Tuple[str, ...]
    ratios: HealthRatios
    wealth_10y: int
    wealth_20y: int
    opportunities: Tuple[HealthOpportunity, ...]
