"""API dependencies wiring repositories, services and the cache."""
from datetime import timedelta
from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from app.core.cache import MemoryCache, get_cache
from app.core.config import settings
from app.core.database import get_db
from app.repositories.unit_of_work import UnitOfWork
from app.services.aggregation_service import AggregationService
from app.services.cached_response_service import CachedResponseService
from app.services.response_service import ResponseService
from app.services.survey_service import SurveyService


def get_uow(db: Annotated[Session, Depends(get_db)]) -> UnitOfWork:
    """One unit of work per request, bound to the request's session."""
    return UnitOfWork(db)


def get_survey_service(uow: Annotated[UnitOfWork, Depends(get_uow)]) -> SurveyService:
    return SurveyService(uow)


def get_response_service(
    uow: Annotated[UnitOfWork, Depends(get_uow)],
    cache: Annotated[MemoryCache, Depends(get_cache)],
) -> CachedResponseService:
    """
    Submission and aggregation composed behind the caching wrapper.

    The cache is process-wide; the services are per request.
    """
    return CachedResponseService(
        submission=ResponseService(uow),
        aggregation=AggregationService(uow),
        cache=cache,
        ttl=timedelta(seconds=settings.CACHE_TTL_SECONDS),
    )


# Common service dependencies
SurveyServiceDep = Annotated[SurveyService, Depends(get_survey_service)]
ResponseServiceDep = Annotated[CachedResponseService, Depends(get_response_service)]
