"""Shared FastAPI dependencies."""

from functools import lru_cache

from pointledger.core.config import get_settings
from pointledger.services.points import PointService
from pointledger.storage.base import get_stores


@lru_cache
def get_point_service() -> PointService:
    """Process-wide PointService; one instance owns the stores and locks."""
    accounts, ledger = get_stores(get_settings().storage_backend)
    return PointService(accounts, ledger)
