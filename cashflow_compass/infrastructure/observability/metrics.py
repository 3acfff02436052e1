"""Prometheus metrics for verdict distribution, goal feasibility, profile health and request latency"""

from prometheus_client import Counter, Histogram

# Purchase analysis metrics
verdict_counter = Counter(
    "cashflow_purchase_verdict_total",
    "Purchase analyses by verdict",
    ["verdict", "payment_mode"],  # green | orange | red
)

score_histogram = Histogram(
    "cashflow_purchase_score",
    "Distribution of purchase scores",
    buckets=[0, 10, 25, 40, 50, 75, 90, 100],
)

overdraft_counter = Counter(
    "cashflow_projected_overdraft_total",
    "Analyses whose short-term projection goes below zero",
)

# Goal metrics
goal_feasibility_counter = Counter(
    "cashflow_goal_simulation_total",
    "Goal feasibility checks by outcome",
    ["outcome"],  # possible | extend_time | impossible
)

# Profile health metrics
health_score_histogram = Histogram(
    "cashflow_profile_health_score",
    "Distribution of profile health scores",
    buckets=[10, 30, 50, 70, 90, 100],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_analysis(verdict: str, score: int, payment_mode: str, is_cashflow_ok: bool) -> None:
    verdict_counter.labels(verdict=verdict, payment_mode=payment_mode).inc()
    score_histogram.observe(score)
    if not is_cashflow_ok:
        overdraft_counter.inc()


def record_goal_simulation(is_possible: bool, suggestion_kind: str | None) -> None:
    outcome = "possible" if is_possible else (suggestion_kind or "impossible")
    goal_feasibility_counter.labels(outcome=outcome).inc()


def record_profile_health(score: int) -> None:
    health_score_histogram.observe(score)
