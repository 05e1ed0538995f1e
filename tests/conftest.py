"""
Pytest fixtures for the fiscal engine test suite.

Provides:
- Structured logging setup and log capture
- The bundled rule set, an in-memory rule store and a wired FiscalEngine
- An in-memory SQLite database with the tax_rules table
"""

import json
import logging
from datetime import date
from decimal import Decimal
from io import StringIO

import pytest

from fiscal_config import get_default_rule_set
from fiscal_engines import build_fiscal_engine
from fiscal_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session_factory,
    init_engine_from_url,
    reset_engine,
)
from fiscal_kernel.domain.rule_store import InMemoryTaxRuleStore
from fiscal_kernel.domain.values import TaxRule
from fiscal_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG)
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture fiscal_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, fiscal_engine):
            fiscal_engine.calculate_tax(...)
            logs = captured_logs()
            assert any(r["message"] == "FISCAL_ENGINE_TRACE" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("fiscal_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Rule fixtures
# =============================================================================


@pytest.fixture(scope="session")
def default_rule_set():
    """The rule set bundled in fiscal_config/sets/tax_rules.yaml."""
    return get_default_rule_set()


@pytest.fixture
def rule_store(default_rule_set):
    return InMemoryTaxRuleStore(default_rule_set.rules)


@pytest.fixture
def fiscal_engine(rule_store):
    return build_fiscal_engine(rule_store)


@pytest.fixture
def make_rule():
    """Factory for TaxRule with sensible defaults."""

    def _make(
        country: str = "FR",
        tax_category: str = "ACCOMMODATION",
        tax_rate: str = "0.1000",
        tax_name: str = "TVA",
        effective_from: date = date(2020, 1, 1),
    ) -> TaxRule:
        return TaxRule(
            country=country,
            tax_category=tax_category,
            tax_rate=Decimal(tax_rate),
            tax_name=tax_name,
            effective_from=effective_from,
        )

    return _make


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def sqlite_engine():
    """In-memory SQLite database with all fiscal tables created."""
    engine = init_engine_from_url("sqlite://")
    create_tables()
    yield engine
    drop_tables()
    reset_engine()


@pytest.fixture
def session_factory(sqlite_engine):
    return get_session_factory()


@pytest.fixture
def session(session_factory):
    session = session_factory()
    yield session
    session.rollback()
    session.close()
