"""Application services."""

from .reconciliation import ReconciliationError, ReconciliationService
from .studio import StudioService, get_studio_service, reset_studio_state

__all__ = [
    "ReconciliationError",
    "ReconciliationService",
    "StudioService",
    "get_studio_service",
    "reset_studio_state",
]
