import pytest

from dac import metrics
from dac.engine import GovernanceEngine
from dac.treasury.transfer import InMemoryPayments


@pytest.fixture
def payments() -> InMemoryPayments:
    return InMemoryPayments()


@pytest.fixture
def engine(payments: InMemoryPayments) -> GovernanceEngine:
    """Fresh engine with default config and an in-memory payout backend."""
    return GovernanceEngine(payments=payments)


@pytest.fixture
def sample_value():
    """
    Read a sample from the DAC metrics registry (0.0 when it has not been
    observed yet). Metrics are process-global, so tests compare deltas.
    """

    def _get(name: str, labels=None) -> float:
        v = metrics.REGISTRY.get_sample_value(name, labels or {})
        return float(v or 0.0)

    return _get


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: long-running concurrency or property suites")
