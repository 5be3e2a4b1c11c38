from __future__ import annotations

"""
Prometheus metrics for the DAC governance core.

We expose counters, a gauge and a histogram covering:
- donations: accepted/rejected donations and donated amounts
- proposals: created/rejected proposals by reason
- votes: recorded votes by choice, rejected votes by reason
- executions: executed/rejected executions by reason
- treasury: current balance snapshot
- latencies: wall time spent inside each engine operation

Hosts expose `REGISTRY` however they serve metrics; `render_latest()` returns
the text exposition format.
"""


import time
from contextlib import contextmanager
from typing import Optional

from prometheus_client import (CONTENT_TYPE_LATEST, CollectorRegistry, Counter,
                               Gauge, Histogram, generate_latest)

# Use a dedicated registry so embedding apps can choose to merge or expose it directly.
REGISTRY = CollectorRegistry()

# ────────────────────────────────────────────────────────────────────────────────
# Label conventions
#   result: "accepted" | "rejected"
#   reason: DACError.code of the failure, or "ok"
#   choice: "for" | "against"
#   op:     "donate" | "propose" | "vote" | "execute"
# ────────────────────────────────────────────────────────────────────────────────

DONATIONS = Counter(
    "dac_donations_total",
    "Donations processed by result.",
    labelnames=("result",),
    registry=REGISTRY,
)

DONATED_AMOUNT = Counter(
    "dac_donated_amount_total",
    "Sum of accepted donation amounts (base units).",
    registry=REGISTRY,
)

PROPOSALS = Counter(
    "dac_proposals_total",
    "Proposal creation attempts by result and reason.",
    labelnames=("result", "reason"),
    registry=REGISTRY,
)

VOTES = Counter(
    "dac_votes_total",
    "Votes recorded by choice.",
    labelnames=("choice",),
    registry=REGISTRY,
)

VOTES_REJECTED = Counter(
    "dac_votes_rejected_total",
    "Votes refused by reason.",
    labelnames=("reason",),
    registry=REGISTRY,
)

EXECUTIONS = Counter(
    "dac_executions_total",
    "Execution attempts by result and reason.",
    labelnames=("result", "reason"),
    registry=REGISTRY,
)

DISBURSED_AMOUNT = Counter(
    "dac_disbursed_amount_total",
    "Sum of executed proposal amounts (base units).",
    registry=REGISTRY,
)

TREASURY_BALANCE = Gauge(
    "dac_treasury_balance",
    "Current treasury balance (base units).",
    registry=REGISTRY,
)

_LATENCY_BUCKETS = (
    0.0001,
    0.0005,
    0.001,
    0.005,
    0.01,
    0.05,
    0.1,
    0.5,
    1.0,
)

OPERATION_SECONDS = Histogram(
    "dac_operation_seconds",
    "Time spent inside an engine operation, by op.",
    labelnames=("op",),
    buckets=_LATENCY_BUCKETS,
    registry=REGISTRY,
)

# ────────────────────────────────────────────────────────────────────────────────
# Recording helpers
# ────────────────────────────────────────────────────────────────────────────────


def record_donation(amount: int, balance_after: int) -> None:
    DONATIONS.labels(result="accepted").inc()
    DONATED_AMOUNT.inc(amount)
    TREASURY_BALANCE.set(balance_after)


def record_donation_rejected() -> None:
    DONATIONS.labels(result="rejected").inc()


def record_proposal(reason: str = "ok") -> None:
    """Record a proposal attempt; any reason other than 'ok' counts as rejected."""
    result = "accepted" if reason == "ok" else "rejected"
    PROPOSALS.labels(result=result, reason=reason).inc()


def record_vote(in_favor: bool) -> None:
    VOTES.labels(choice="for" if in_favor else "against").inc()


def record_vote_rejected(reason: str) -> None:
    VOTES_REJECTED.labels(reason=reason).inc()


def record_execution(amount: int, balance_after: int) -> None:
    EXECUTIONS.labels(result="executed", reason="ok").inc()
    DISBURSED_AMOUNT.inc(amount)
    TREASURY_BALANCE.set(balance_after)


def record_execution_rejected(reason: str) -> None:
    EXECUTIONS.labels(result="rejected", reason=reason).inc()


@contextmanager
def time_operation(op: str):
    """Context manager to observe how long an engine operation takes."""
    start = time.perf_counter()
    try:
        yield
    finally:
        OPERATION_SECONDS.labels(op=op).observe(time.perf_counter() - start)


def render_latest(registry: Optional[CollectorRegistry] = None) -> bytes:
    """Return metrics in the Prometheus text exposition format."""
    return generate_latest(registry or REGISTRY)


__all__ = [
    "REGISTRY",
    "CONTENT_TYPE_LATEST",
    "DONATIONS",
    "DONATED_AMOUNT",
    "PROPOSALS",
    "VOTES",
    "VOTES_REJECTED",
    "EXECUTIONS",
    "DISBURSED_AMOUNT",
    "TREASURY_BALANCE",
    "OPERATION_SECONDS",
    "record_donation",
    "record_donation_rejected",
    "record_proposal",
    "record_vote",
    "record_vote_rejected",
    "record_execution",
    "record_execution_rejected",
    "time_operation",
    "render_latest",
]
