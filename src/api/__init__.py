"""
HTTP API support: request models, run service and export routes.
"""

from .models import RateIn, RatesRequest, RunRequest
from .service import RunService, run_service

__all__ = [
    "RateIn",
    "RatesRequest",
    "RunRequest",
    "RunService",
    "run_service",
]
