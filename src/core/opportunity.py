"""
Data classes for detected arbitrage cycles.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List

from engine_bellman_ford import BellmanFordStep, StepType


@dataclass
class ArbitrageCycle:
    """A profitable conversion loop reported by a Bellman-Ford run"""
    source: str
    cycle: List[str]
    profit_percent: float
    timestamp: datetime = field(default_factory=datetime.now)
    start_amount: float = 1.0  # Units of cycle[0] carried once around the loop
    end_amount: Optional[float] = None

    def __post_init__(self):
        if self.end_amount is None:
            self.end_amount = self.start_amount * (1 + self.profit_percent / 100)

    @property
    def route(self) -> str:
        return " → ".join(self.cycle + self.cycle[:1])

    @classmethod
    def from_step(cls, source: str, step: BellmanFordStep) -> "ArbitrageCycle":
        if step.type != StepType.NEGATIVE_CYCLE_FOUND:
            raise ValueError(f"Step {step.index} is '{step.type.value}', not a negative cycle")
        return cls(
            source=source,
            cycle=list(step.negative_cycle or ()),
            profit_percent=step.profit_percent or 0.0,
        )

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "cycle": self.cycle,
            "route": self.route,
            "profit_percent": round(self.profit_percent, 4),
            "start_amount": self.start_amount,
            "end_amount": round(self.end_amount, 6) if self.end_amount is not None else None,
            "timestamp": self.timestamp.isoformat(),
        }

    def to_csv_row(self) -> List[str]:
        """Convert to CSV row for export"""
        return [
            self.timestamp.isoformat(),
            self.source,
            "->".join(self.cycle),
            str(round(self.profit_percent, 4)),
            str(self.start_amount),
            str(round(self.end_amount, 6)) if self.end_amount is not None else "",
        ]

    @staticmethod
    def csv_headers() -> List[str]:
        """CSV headers for export"""
        return [
            "timestamp",
            "source",
            "cycle",
            "profit_percent",
            "start_amount",
            "end_amount",
        ]
