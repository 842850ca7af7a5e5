"""Base exchange-rate provider"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime

logger = logging.getLogger(__name__)


@dataclass
class ExchangeRate:
    """Standardized quote: units of to_currency received per unit of from_currency"""
    from_currency: str
    to_currency: str
    rate: float
    timestamp: datetime = field(default_factory=datetime.now)

    @property
    def pair(self) -> str:
        """Pair label (e.g., "USD/EUR")"""
        return f"{self.from_currency}/{self.to_currency}"

    def as_tuple(self) -> tuple[str, str, float]:
        return (self.from_currency, self.to_currency, self.rate)

    def to_dict(self) -> dict:
        return {
            "from": self.from_currency,
            "to": self.to_currency,
            "rate": self.rate,
            "timestamp": self.timestamp.isoformat(),
        }


class RateProvider(ABC):
    """Base class for anything that can supply a full rate table"""

    def __init__(self, name: str):
        self.name = name

    @abstractmethod
    def generate_rates(self, currencies: list[str]) -> list[ExchangeRate]:
        """Build rates for every ordered pair of the given currencies"""
        pass

    @abstractmethod
    async def fetch_rates(self, currencies: list[str]) -> list[ExchangeRate]:
        """Fetch a fresh rate table - provider specific"""
        pass
