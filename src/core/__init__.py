"""
Core result types shared by the API layer.
"""

from .opportunity import ArbitrageCycle

__all__ = [
    "ArbitrageCycle",
]
