"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine and service configuration loaded from environment variables"""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_prefix="CASHFLOW_", extra="ignore"
    )

    # Service
    service_name: str = "cashflow-compass"
    log_level: str = "INFO"

    # Projection horizons (days)
    default_horizon_days: int = 730
    analysis_horizon_days: int = 45
    projected_curve_days: int = 30

    # Purchase simulation
    subscription_projection_months: int = 24
    reimbursement_delay_days: int = 30
    default_split_months: int = 3

    # Impact metrics
    investment_rate: float = 0.07  # Long-term market average, annual
    opportunity_horizon_years: int = 10
    subscription_opportunity_years: int = 5
    avg_work_days_month: float = 21.6
    safety_months_cap: float = 99.0

    # Goals
    goal_buffer_ratio: float = 0.10  # Share of capacity kept aside before allocating goals
    goal_feasibility_tolerance: float = 0.005
    goal_max_extension_months: int = 1200  # Longer deadline suggestions are reported as impossible
    goal_wait_horizon_months: int = 360
    inflation_rate: float = 0.025

    # Profile health check
    survival_buffer: float = 1000.0  # Reserve below this is no safety net at all
    max_debt_ratio: float = 35.0  # Credits as percent of income


settings = Settings()
