"""Pydantic schemas for API request/response validation"""

import datetime
from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from cashflow_compass.domain.models import (
    FinancialItem,
    Goal,
    HistoryEntry,
    Household,
    PaymentMode,
    ProfileSnapshot,
    PurchaseIntent,
    Verdict,
)

# Form values arrive as numbers or raw strings ("1 200,50"); the engine coerces them
LooseNumber = Optional[Union[float, str]]


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class FinancialItemSchema(BaseModel):
    name: str = ""
    amount: LooseNumber = 0
    day_of_month: Optional[Union[int, str]] = None
    frequency: str = "monthly"

    def to_domain(self) -> FinancialItem:
        return FinancialItem(
            name=self.name,
            amount=self.amount,
            day_of_month=self.day_of_month,
            frequency=self.frequency,
        )


class HouseholdSchema(BaseModel):
    adults: Optional[Union[int, str]] = 1
    children: Optional[Union[int, str]] = 0


class ProfileSchema(BaseModel):
    """Declared financial situation, posted whole on every call"""

    current_balance: LooseNumber = 0
    balance_date: Optional[str] = None
    updated_at: Optional[str] = None
    variable_costs: LooseNumber = 0
    incomes: List[FinancialItemSchema] = Field(default_factory=list)
    fixed_costs: List[FinancialItemSchema] = Field(default_factory=list)
    subscriptions: List[FinancialItemSchema] = Field(default_factory=list)
    credits: List[FinancialItemSchema] = Field(default_factory=list)
    savings_contributions: List[FinancialItemSchema] = Field(default_factory=list)
    annual_expenses: List[FinancialItemSchema] = Field(default_factory=list)
    savings: LooseNumber = 0
    investments: LooseNumber = 0
    investment_yield: LooseNumber = 0
    persona: str = "salaried"
    household: HouseholdSchema = Field(default_factory=HouseholdSchema)

    def to_domain(self) -> ProfileSnapshot:
        def items(values: List[FinancialItemSchema]):
            return tuple(item.to_domain() for item in values)

        return ProfileSnapshot(
            current_balance=self.current_balance,
            balance_date=self.balance_date,
            updated_at=self.updated_at,
            variable_costs=self.variable_costs,
            incomes=items(self.incomes),
            fixed_costs=items(self.fixed_costs),
            subscriptions=items(self.subscriptions),
            credits=items(self.credits),
            savings_contributions=items(self.savings_contributions),
            annual_expenses=items(self.annual_expenses),
            savings=self.savings,
            investments=self.investments,
            investment_yield=self.investment_yield,
            persona=self.persona,
            household=Household(adults=self.household.adults, children=self.household.children),
        )


class PurchaseSchema(BaseModel):
    name: str = "Purchase"
    amount: LooseNumber = 0
    payment_mode: str = PaymentMode.CASH_ACCOUNT.value
    date: Optional[str] = None
    duration: LooseNumber = None
    rate: LooseNumber = None
    is_reimbursable: bool = False
    is_professional: bool = False
    category: str = "desire"

    def to_domain(self) -> PurchaseIntent:
        return PurchaseIntent(
            name=self.name,
            amount=self.amount,
            payment_mode=self.payment_mode,
            date=self.date,
            duration=self.duration,
            rate=self.rate,
            is_reimbursable=self.is_reimbursable,
            is_professional=self.is_professional,
            category=self.category,
        )


class HistoryEntrySchema(BaseModel):
    purchase: Optional[PurchaseSchema] = None
    date: Optional[str] = None
    result: Optional[Any] = None

    def to_domain(self) -> HistoryEntry:
        return HistoryEntry(
            purchase=self.purchase.to_domain() if self.purchase else None,
            date=self.date,
            result=self.result,
        )


class GoalSchema(BaseModel):
    name: str
    target_amount: LooseNumber = 0
    current_saved: LooseNumber = 0
    deadline: Optional[str] = None
    monthly_contribution: LooseNumber = 0
    projected_yield: LooseNumber = 0
    is_invested: bool = False
    category: str = "OTHER"

    def to_domain(self) -> Goal:
        return Goal(
            name=self.name,
            target_amount=self.target_amount,
            current_saved=self.current_saved,
            deadline=self.deadline,
            monthly_contribution=self.monthly_contribution,
            projected_yield=self.projected_yield,
            is_invested=self.is_invested,
            category=self.category,
        )


class TimelineRequest(BaseModel):
    """Request body for POST /v1/timeline"""

    profile: ProfileSchema
    history: List[HistoryEntrySchema] = Field(default_factory=list)
    purchase: Optional[PurchaseSchema] = None
    horizon_days: Optional[int] = Field(None, ge=1, le=3660, description="Projection length in days")
    warning_threshold: Optional[float] = None
    now: Optional[datetime.date] = None


class PurchaseAnalysisRequest(BaseModel):
    """Request body for POST /v1/purchase/analysis"""

    profile: ProfileSchema
    purchase: PurchaseSchema
    history: List[HistoryEntrySchema] = Field(default_factory=list)
    dynamic: bool = Field(True, description="Also run the short-term cash-flow projection")
    now: Optional[datetime.date] = None


class GoalSimulationRequest(BaseModel):
    """Request body for POST /v1/goal/simulation"""

    profile: ProfileSchema
    goal: GoalSchema
    other_goals: List[GoalSchema] = Field(default_factory=list)
    now: Optional[datetime.date] = None


class GoalAllocationRequest(BaseModel):
    """Request body for POST /v1/goal/allocation"""

    profile: ProfileSchema
    goals: List[GoalSchema] = Field(default_factory=list)
    now: Optional[datetime.date] = None


class ProfileHealthRequest(BaseModel):
    """Request body for POST /v1/profile/health"""

    profile: ProfileSchema


# ---------------------------------------------------------------------------
# Responses (validated straight from the domain dataclasses)
# ---------------------------------------------------------------------------


class DomainModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class EventSchema(DomainModel):
    name: str
    kind: str
    amount: float
    source: str
    is_simulation: bool
    day: Optional[int] = None
    date: Optional[datetime.date] = None


class DailyRecordSchema(DomainModel):
    date: datetime.date
    day_of_month: int
    balance: Optional[int]
    events: List[EventSchema]
    status: str


class MonthBucketSchema(DomainModel):
    key: str
    label: str
    days: List[DailyRecordSchema]
    balance_end: Optional[int]


class TimelineResponse(BaseModel):
    """Response for POST /v1/timeline"""

    anchor_date: datetime.date
    months: List[MonthBucketSchema]


class PersonaRulesSchema(DomainModel):
    safety_months: float
    max_debt: float
    min_living: float


class BudgetSnapshotSchema(DomainModel):
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
    rules: PersonaRulesSchema
    persona: str


class IssueSchema(DomainModel):
    level: str
    text: str


class TipSchema(DomainModel):
    kind: str
    title: str
    text: str


class CurvePointSchema(DomainModel):
    date: datetime.date
    value: int


class AnalysisSchema(DomainModel):
    verdict: Verdict
    score: int
    smart_title: str
    smart_message: str
    is_past: bool
    is_budget_ok: bool
    is_cashflow_ok: bool
    issues: List[IssueSchema]
    tips: List[TipSchema]
    new_reserve: float
    new_remaining_to_live: float
    new_safety_months: float
    new_engagement_rate: float
    real_cost: float
    credit_cost: float
    opportunity_cost: float
    work_time_days: float
    lowest_projected_balance: Optional[float]
    first_danger_date: Optional[datetime.date]
    projected_curve: List[CurvePointSchema]


class PurchaseAnalysisResponse(BaseModel):
    """Response for POST /v1/purchase/analysis"""

    analysis: AnalysisSchema
    budget: BudgetSnapshotSchema


class GoalSuggestionSchema(DomainModel):
    kind: str
    message: str
    new_deadline: Optional[datetime.date] = None
    needed_months: Optional[int] = None
    new_monthly_effort: Optional[float] = None


class GoalSimulationSchema(DomainModel):
    required_monthly_effort: float
    amount_to_save: float
    months: int
    is_possible: bool
    remaining_capacity: float
    suggestion: Optional[GoalSuggestionSchema]


class GoalProjectionPointSchema(DomainModel):
    month: int
    date: datetime.date
    balance: int
    contributed: int
    interests: int


class GoalProjectionSchema(DomainModel):
    points: List[GoalProjectionPointSchema]
    total_contributed: int
    total_interests: int
    final_amount: int


class GoalStrategySchema(DomainModel):
    kind: str
    title: str
    message: str
    value: Optional[float] = None
    new_deadline: Optional[datetime.date] = None


class GoalDiagnosisSchema(DomainModel):
    status: str
    message: str
    gap: float
    strategies: List[GoalStrategySchema]


class GoalSimulationResponse(BaseModel):
    """Response for POST /v1/goal/simulation"""

    capacity_to_save: float
    current_commitments: float
    simulation: GoalSimulationSchema
    diagnosis: GoalDiagnosisSchema
    projection: GoalProjectionSchema


class GoalAllocationSchema(DomainModel):
    name: str
    priority: int
    requested_effort: float
    allocated_effort: float
    status: str
    fill_rate: int


class GoalAllocationResponse(BaseModel):
    """Response for POST /v1/goal/allocation"""

    capacity_to_save: float
    total_allocated: float
    allocations: List[GoalAllocationSchema]


class HealthOpportunitySchema(DomainModel):
    id: str
    kind: str
    level: str
    title: str
    message: str
    potential_gain: Optional[float] = None


class HealthRatiosSchema(DomainModel):
    needs: int
    wants: int
    savings: int


class HealthReportSchema(DomainModel):
    global_score: int
    tags: List[str]
    ratios: HealthRatiosSchema
    wealth_10y: int
    wealth_20y: int
    opportunities: List[HealthOpportunitySchema]


class ProfileHealthResponse(BaseModel):
    """Response for POST /v1/profile/health"""

    budget: BudgetSnapshotSchema
    report: HealthReportSchema
