"""Pytest fixtures for testing"""

import pytest
from datetime import date
from fastapi.testclient import TestClient

from cashflow_compass.api.dependencies import get_today
from cashflow_compass.api.main import create_app
from cashflow_compass.domain.models import FinancialItem, ProfileSnapshot

# Thursday, in a 30-day month
FIXED_NOW = date(2026, 9, 10)


@pytest.fixture
def client() -> TestClient:
    """FastAPI test client with the clock pinned to FIXED_NOW"""
    app = create_app()
    app.dependency_overrides[get_today] = lambda: FIXED_NOW
    return TestClient(app)


@pytest.fixture
def baseline_profile() -> ProfileSnapshot:
    """Income 2000 on the 1st, rent 800 on the 5th, 300 variable budget, 500 on the account"""
    return ProfileSnapshot(
        current_balance=500,
        balance_date=FIXED_NOW.isoformat(),
        variable_costs=300,
        incomes=(FinancialItem(name="Salary", amount=2000, day_of_month=1),),
        fixed_costs=(FinancialItem(name="Rent", amount=800, day_of_month=5),),
        savings=5000,
    )


@pytest.fixture
def baseline_payload() -> dict:
    """JSON form of baseline_profile as posted by the UI"""
    return {
        "current_balance": 500,
        "balance_date": FIXED_NOW.isoformat(),
        "variable_costs": 300,
        "incomes": [{"name": "Salary", "amount": 2000, "day_of_month": 1}],
        "fixed_costs": [{"name": "Rent", "amount": 800, "day_of_month": 5}],
        "savings": 5000,
    }
