"""
Pytest configuration and fixtures for the arbitrage detector tests.
"""

import pytest
from typing import Generator

from fastapi.testclient import TestClient

# Import application
import sys
sys.path.insert(0, '.')

from dashboard import app
from engine_graph import CurrencyGraph, build_graph
from exchanges.simulator import SimulatedRateProvider
from src.api.service import run_service


@pytest.fixture(autouse=True)
def fresh_run_service():
    """Fast, seeded simulator and empty history for every test"""
    original_provider = run_service.provider
    run_service.provider = SimulatedRateProvider(fetch_delay=0, seed=42)
    run_service.history = []
    yield run_service
    run_service.provider = original_provider
    run_service.history = []


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Create synchronous test client"""
    with TestClient(app) as c:
        yield c


@pytest.fixture
def seeded_simulator() -> SimulatedRateProvider:
    """Simulator with reproducible jitter and no fetch delay"""
    return SimulatedRateProvider(fetch_delay=0, seed=1234)


# Sample data fixtures

@pytest.fixture
def arbitrage_rates():
    """USD -> EUR -> GBP -> USD multiplies to ~1.271; reverse legs all lose"""
    return [
        ("USD", "EUR", 1.10),
        ("EUR", "GBP", 0.91),
        ("GBP", "USD", 1.27),
        ("EUR", "USD", 0.88),
        ("GBP", "EUR", 1.08),
        ("USD", "GBP", 0.77),
    ]


@pytest.fixture
def arbitrage_graph(arbitrage_rates) -> CurrencyGraph:
    return build_graph(["USD", "EUR", "GBP"], arbitrage_rates)


@pytest.fixture
def no_arbitrage_graph() -> CurrencyGraph:
    """Round trip USD -> EUR -> USD multiplies to 0.945"""
    return build_graph(["USD", "EUR"], [("USD", "EUR", 0.90), ("EUR", "USD", 1.05)])


@pytest.fixture
def isolated_source_graph() -> CurrencyGraph:
    """USD has no edges; EUR and GBP only trade with each other"""
    return build_graph(
        ["USD", "EUR", "GBP"],
        [("EUR", "GBP", 0.86), ("GBP", "EUR", 1.15)],
    )


@pytest.fixture
def fair_market_graph() -> CurrencyGraph:
    """
    Every cross rate is the consistent rate less 1%, so every loop loses
    and Bellman-Ford converges without a negative cycle.
    """
    base = {"USD": 1.0, "EUR": 0.92, "JPY": 149.5, "GBP": 0.79, "CHF": 0.88}
    rates = [
        (a, b, base[b] / base[a] * 0.99)
        for a in base
        for b in base
        if a != b
    ]
    return build_graph(list(base), rates)
