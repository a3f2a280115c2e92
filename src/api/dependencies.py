from __future__ import annotations

from functools import lru_cache

from src.core.config import get_active_listing_statuses
from src.repositories.actuals_repository import ActualsRepository
from src.repositories.objectives_repository import ObjectivesRepository
from src.services.objectives_service import ObjectivesService


@lru_cache
def get_objectives_repository() -> ObjectivesRepository:
    return ObjectivesRepository()


@lru_cache
def get_actuals_repository() -> ActualsRepository:
    return ActualsRepository()


def get_objectives_service() -> ObjectivesService:
    return ObjectivesService(
        objectives_repository=get_objectives_repository(),
        actuals_repository=get_actuals_repository(),
        active_listing_statuses=get_active_listing_statuses(),
    )
