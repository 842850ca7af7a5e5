"""Exchange-rate providers"""
from .base import ExchangeRate, RateProvider
from .simulator import SimulatedRateProvider, create_simulated_provider

__all__ = [
    "ExchangeRate",
    "RateProvider",
    "SimulatedRateProvider",
    "create_simulated_provider",
]
