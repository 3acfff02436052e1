"""
E2E scenarios for user personas, driven through the HTTP API.

User personas:
- student: thin budget, low balance before payday
- freelance: comfortable income but stricter safety and debt thresholds
- retired couple: household-adjusted living threshold
- unemployed: any new commitment exceeds the debt ceiling
- salaried overdraft: credit purchase days before the account runs dry
"""

from fastapi.testclient import TestClient


def profile(persona: str, balance: float, income: float, fixed: float, variable: float, savings: float, **extra) -> dict:
    return {
        "persona": persona,
        "current_balance": balance,
        "balance_date": "2026-09-10",
        "variable_costs": variable,
        "incomes": [{"name": "Income", "amount": income, "day_of_month": 1}],
        "fixed_costs": [{"name": "Rent", "amount": fixed, "day_of_month": 5}],
        "savings": savings,
        **extra,
    }


def analyze(client: TestClient, profile_payload: dict, purchase: dict) -> dict:
    response = client.post("/v1/purchase/analysis", json={"profile": profile_payload, "purchase": purchase})
    assert response.status_code == 200
    return response.json()["analysis"]


def test_student_waits_for_payday(client: TestClient):
    """
    student: 150 on the account, 200 variable budget, payday on the 1st
    Expected: budget fits, but the account dips below zero before payday
    """
    analysis = analyze(
        client,
        profile("student", balance=150, income=700, fixed=350, variable=200, savings=300),
        {"name": "Concert", "amount": 60},
    )

    assert analysis["verdict"] == "orange"
    assert analysis["is_budget_ok"] is True
    assert analysis["is_cashflow_ok"] is False
    assert analysis["first_danger_date"] is not None
    assert analysis["score"] <= 40, "Low runway and high rent should cost points"


def test_freelance_split_purchase_is_penalized_not_blocked(client: TestClient):
    """
    freelance: targets 6 months of runway and at most 30% commitments
    Expected: green verdict, two penalties (runway 5 months, commitments 50%)
    """
    analysis = analyze(
        client,
        profile("freelance", balance=6000, income=4000, fixed=1500, variable=800, savings=12000),
        {"name": "Laptop", "amount": 2000, "payment_mode": "SPLIT", "duration": 4},
    )

    assert analysis["verdict"] == "green"
    assert analysis["score"] == 80
    assert analysis["new_safety_months"] == 5.0
    assert analysis["new_engagement_rate"] == 50.0


def test_retired_couple_needs_larger_remainder(client: TestClient):
    """
    retired, two adults: living threshold 400 + 150 = 550
    Expected: 100 purchase leaves 500, below the household threshold
    """
    analysis = analyze(
        client,
        profile(
            "retired",
            balance=3000,
            income=1800,
            fixed=1200,
            variable=300,
            savings=20000,
            household={"adults": 2, "children": 0},
        ),
        {"name": "Garden furniture", "amount": 100},
    )

    assert analysis["verdict"] == "orange"
    assert analysis["is_budget_ok"] is False
    assert analysis["is_cashflow_ok"] is True
    assert analysis["score"] == 35


def test_unemployed_subscription_breaks_debt_ceiling(client: TestClient):
    """
    unemployed: zero tolerance for commitments
    Expected: affordable, but any subscription raises the commitment issue
    """
    analysis = analyze(
        client,
        profile("unemployed", balance=800, income=900, fixed=400, variable=200, savings=2000),
        {"name": "Streaming", "amount": 15, "payment_mode": "SUBSCRIPTION"},
    )

    assert analysis["verdict"] == "green"
    assert analysis["score"] == 80
    assert analysis["real_cost"] == 180
    assert any("commitment" in issue["text"] for issue in analysis["issues"])


def test_salaried_credit_purchase_before_overdraft(client: TestClient):
    """
    salaried: 50 on the account ten days before payday
    Expected: the first installment pushes the account negative
    """
    analysis = analyze(
        client,
        profile("salaried", balance=50, income=2000, fixed=800, variable=300, savings=5000),
        {"name": "Phone", "amount": 300, "payment_mode": "CREDIT", "duration": 10, "rate": 15},
    )

    assert analysis["verdict"] == "orange"
    assert analysis["score"] == 30
    assert analysis["credit_cost"] == 37.5
    assert analysis["lowest_projected_balance"] < 0


def test_history_lowers_the_projection(client: TestClient):
    """Past decisions are replayed into the timeline"""
    payload = profile("salaried", balance=1000, income=2000, fixed=800, variable=0, savings=0)
    history = [{"purchase": {"name": "Shoes", "amount": 120, "date": "2026-09-20"}, "result": "green"}]

    without = client.post("/v1/timeline", json={"profile": payload, "horizon_days": 30}).json()
    replayed = client.post("/v1/timeline", json={"profile": payload, "history": history, "horizon_days": 30}).json()

    assert without["months"][0]["balance_end"] - replayed["months"][0]["balance_end"] == 120


def test_family_goal_plan(client: TestClient):
    """
    Family saving for an emergency fund, a house and a trip
    Expected: safety first, then real estate, the trip gets what is left
    """
    payload = profile(
        "salaried",
        balance=2000,
        income=4500,
        fixed=2200,
        variable=800,
        savings=3000,
        household={"adults": 2, "children": 2},
    )
    goals = [
        {"name": "Trip", "target_amount": 7200, "deadline": "2027-09-10", "category": "TRAVEL"},
        {"name": "House", "target_amount": 24000, "deadline": "2029-09-10", "category": "REAL_ESTATE"},
        {"name": "Emergency", "target_amount": 3000, "current_saved": 600, "deadline": "2027-09-10", "category": "SAFETY"},
    ]

    response = client.post("/v1/goal/allocation", json={"profile": payload, "goals": goals})

    assert response.status_code == 200
    data = response.json()
    allocations = {a["name"]: a for a in data["allocations"]}
    assert [a["name"] for a in data["allocations"]] == ["Emergency", "House", "Trip"]
    assert allocations["Emergency"]["status"] == "FULL"
    assert allocations["House"]["status"] == "FULL"
    assert allocations["Trip"]["status"] == "PARTIAL"
    assert data["total_allocated"] == 1350
