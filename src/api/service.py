"""
Run service: turns API requests into graphs and Bellman-Ford runs.
"""

import itertools
import logging
from typing import Optional, List, Tuple

from fastapi import HTTPException, status

from config import MIN_SELECTED_CURRENCIES
from engine_bellman_ford import BellmanFordStep, StepType, run
from engine_graph import CurrencyGraph, build_graph
from errors import ArbitrageInputError, InvalidInput, InvalidSource
from exchanges import ExchangeRate, RateProvider, create_simulated_provider
from src.core.opportunity import ArbitrageCycle

from .models import RunRequest

logger = logging.getLogger(__name__)


def http_error(error: ArbitrageInputError) -> HTTPException:
    """Map a caller error to the HTTP status the API reports"""
    logger.warning(f"Rejected run request: {error}")
    if isinstance(error, InvalidSource):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))


class RunService:
    """Holds the rate provider and the recent arbitrage history"""

    def __init__(self, provider: Optional[RateProvider] = None, history_size: int = 50):
        self.provider = provider or create_simulated_provider()
        self.history_size = history_size
        self.history: List[ArbitrageCycle] = []

    def validate_selection(self, currencies: List[str]):
        if len(currencies) < MIN_SELECTED_CURRENCIES:
            raise InvalidInput(
                f"Select at least {MIN_SELECTED_CURRENCIES} currencies, got {len(currencies)}"
            )

    async def get_rates(self, currencies: List[str]) -> List[ExchangeRate]:
        """Fetch a fresh simulated rate table for the selection"""
        self.validate_selection(currencies)
        return await self.provider.fetch_rates(currencies)

    async def prepare(self, request: RunRequest) -> Tuple[CurrencyGraph, str]:
        """
        Build the graph for a run request.

        Raises:
            InvalidInput: bad selection or rate data
        """
        self.validate_selection(request.currencies)

        if request.rates is not None:
            rates = [r.to_exchange_rate() for r in request.rates]
        else:
            rates = await self.provider.fetch_rates(request.currencies)

        graph = build_graph(request.currencies, rates)
        source = request.source or request.currencies[0]
        return graph, source

    def execute(self, graph: CurrencyGraph, source: str, max_steps: int) -> dict:
        """
        Run Bellman-Ford and collect up to max_steps steps.

        Raises:
            InvalidSource: source is not one of the graph's currencies
        """
        steps_iter = run(graph, source)
        steps: List[BellmanFordStep] = list(itertools.islice(steps_iter, max_steps))
        truncated = next(steps_iter, None) is not None

        last = steps[-1] if steps else None
        outcome = last.type.value if last is not None and last.is_terminal else None

        cycle = None
        if last is not None and last.type == StepType.NEGATIVE_CYCLE_FOUND:
            cycle = ArbitrageCycle.from_step(source, last)
            self._record(cycle)

        if truncated:
            logger.info(f"Run from {source} truncated at {max_steps} steps")

        return {
            "graph": graph.to_dict(),
            "source": source,
            "steps": [s.to_dict() for s in steps],
            "total_steps": len(steps),
            "truncated": truncated,
            "outcome": outcome,
            "arbitrage": cycle.to_dict() if cycle else None,
        }

    def _record(self, cycle: ArbitrageCycle):
        self.history.append(cycle)
        if len(self.history) > self.history_size:
            self.history.pop(0)


# Global run service instance
run_service = RunService()
