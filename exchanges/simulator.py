"""Simulated exchange-rate feed used in place of a real market data source"""
import asyncio
import logging
import random
from datetime import datetime
from typing import Dict, Optional, Tuple

from .base import ExchangeRate, RateProvider
from config import BASE_RATES, RATE_VARIATION, DEMO_ARBITRAGE_RATES, SIMULATED_FETCH_DELAY
from errors import InvalidInput

logger = logging.getLogger(__name__)


class SimulatedRateProvider(RateProvider):
    """
    Generates a full cross-rate table from a set of USD base rates.

    Every ordered pair gets base[to] / base[from] with a small random
    jitter, so round trips usually lose a little. The configured demo
    rates are then forced in so that USD -> EUR -> GBP -> USD is profitable
    whenever those three currencies are selected.
    """

    def __init__(
        self,
        name: str = "Simulator",
        base_rates: Optional[Dict[str, float]] = None,
        variation: float = RATE_VARIATION,
        demo_rates: Optional[Dict[Tuple[str, str], float]] = None,
        fetch_delay: float = SIMULATED_FETCH_DELAY,
        seed: Optional[int] = None,
    ):
        """
        Args:
            name: Provider name for logs
            base_rates: Units of each currency per 1 unit of the reference currency
            variation: Max relative jitter applied to each cross rate (0.02 = 2%)
            demo_rates: (from, to) -> rate overrides applied when all their currencies are selected
            fetch_delay: Simulated network latency in seconds
            seed: Seed for the jitter, for reproducible tables
        """
        super().__init__(name)
        self.base_rates = dict(base_rates if base_rates is not None else BASE_RATES)
        self.variation = variation
        self.demo_rates = dict(demo_rates if demo_rates is not None else DEMO_ARBITRAGE_RATES)
        self.fetch_delay = fetch_delay
        self._random = random.Random(seed)

    def generate_rates(self, currencies: list[str]) -> list[ExchangeRate]:
        """Generate bidirectional rates for every ordered pair of currencies"""
        unknown = [c for c in currencies if c not in self.base_rates]
        if unknown:
            raise InvalidInput(f"No base rate for currencies: {', '.join(unknown)}")

        now = datetime.now()
        rates: list[ExchangeRate] = []

        for from_currency in currencies:
            for to_currency in currencies:
                if from_currency == to_currency:
                    continue

                # Cross rate through the reference currency
                rate = self.base_rates[to_currency] / self.base_rates[from_currency]
                rate *= self._random.uniform(1 - self.variation, 1 + self.variation)

                rates.append(ExchangeRate(
                    from_currency=from_currency,
                    to_currency=to_currency,
                    rate=rate,
                    timestamp=now,
                ))

        self._inject_demo_cycle(currencies, rates)
        return rates

    def _inject_demo_cycle(self, currencies: list[str], rates: list[ExchangeRate]):
        """Overwrite the demo legs when every currency they touch is selected"""
        involved = {c for pair in self.demo_rates for c in pair}
        if not involved or not involved.issubset(currencies):
            return

        for rate in rates:
            override = self.demo_rates.get((rate.from_currency, rate.to_currency))
            if override is not None:
                rate.rate = override

        logger.debug(f"[{self.name}] Injected {len(self.demo_rates)} demo arbitrage legs")

    async def fetch_rates(self, currencies: list[str]) -> list[ExchangeRate]:
        """Simulate an API call with latency"""
        logger.info(f"[{self.name}] 🎮 SIMULATION MODE - Fetching mock rates for {len(currencies)} currencies")
        await asyncio.sleep(self.fetch_delay)
        return self.generate_rates(currencies)


def create_simulated_provider(seed: Optional[int] = None) -> SimulatedRateProvider:
    """Create a simulator wired to the configured rate tables"""
    return SimulatedRateProvider(
        name="Simulator",
        base_rates=BASE_RATES,
        variation=RATE_VARIATION,
        demo_rates=DEMO_ARBITRAGE_RATES,
        fetch_delay=SIMULATED_FETCH_DELAY,
        seed=seed,
    )
