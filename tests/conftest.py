"""
Pytest configuration and fixtures for sheetrecon tests.
Provides shared sample tables, an isolated metrics registry and a clean
environment.
"""

from pathlib import Path

import pytest
from prometheus_client import CollectorRegistry

from sheetrecon.model import Table
from sheetrecon.utils.metrics import ReconciliationMetrics


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "property: hypothesis property-based test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Get project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture(autouse=True)
def clear_sheetrecon_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Drop environment overrides so tests see built-in defaults."""
    for name in (
        "SHEETRECON_TRIM",
        "SHEETRECON_CASE_INSENSITIVE",
        "SHEETRECON_PRESORT",
        "SHEETRECON_SPLIT_TRIM",
        "SHEETRECON_SPLIT_CASE_INSENSITIVE",
        "SHEETRECON_CSV_ENCODING",
        "SHEETRECON_CSV_DELIMITER",
        "OTLP_ENDPOINT",
        "TRACE_CONSOLE",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def registry() -> CollectorRegistry:
    """Fresh Prometheus registry per test."""
    return CollectorRegistry()


@pytest.fixture
def metrics(registry: CollectorRegistry) -> ReconciliationMetrics:
    """Metrics bound to the per-test registry."""
    return ReconciliationMetrics(registry=registry)


@pytest.fixture
def ledger() -> Table:
    """Left side of the basic amount scenario."""
    return Table(("id", "amount"), (("A", "10"), ("B", "5")))


@pytest.fixture
def bank() -> Table:
    """Right side of the basic amount scenario."""
    return Table(("id", "amount"), (("A", "20"),))


@pytest.fixture
def staff() -> Table:
    """Table with repeated department keys for split tests."""
    return Table(
        ("dept", "name", "joined"),
        (
            ("Sales", "Ito", "2023-04-01"),
            ("Dev", "Mori", "2021-10-15"),
            ("Sales", "Abe", "2022-01-20"),
            (" Dev ", "Kato", "2024-02-29"),
        ),
    )
