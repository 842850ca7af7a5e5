"""
Request models for the run API.
"""

from typing import Optional, List
from pydantic import BaseModel, ConfigDict, Field

from config import DEFAULT_SELECTED_CURRENCIES, MAX_STEPS_PER_RUN
from exchanges.base import ExchangeRate


class RateIn(BaseModel):
    """One exchange-rate observation supplied by the caller"""
    model_config = ConfigDict(populate_by_name=True)

    from_currency: str = Field(..., alias="from", min_length=1, max_length=10)
    to_currency: str = Field(..., alias="to", min_length=1, max_length=10)
    # Domain (> 0) is enforced by the graph builder so it reports InvalidInput
    rate: float

    def to_exchange_rate(self) -> ExchangeRate:
        return ExchangeRate(
            from_currency=self.from_currency,
            to_currency=self.to_currency,
            rate=self.rate,
        )


class RatesRequest(BaseModel):
    """Ask the simulator for a rate table"""
    currencies: List[str] = Field(default_factory=lambda: list(DEFAULT_SELECTED_CURRENCIES))


class RunRequest(BaseModel):
    """Run Bellman-Ford over supplied or simulated rates"""
    currencies: List[str] = Field(default_factory=lambda: list(DEFAULT_SELECTED_CURRENCIES))
    source: Optional[str] = None  # Defaults to the first currency
    rates: Optional[List[RateIn]] = None  # Simulated when omitted
    max_steps: int = Field(default=MAX_STEPS_PER_RUN, ge=1, le=MAX_STEPS_PER_RUN)
