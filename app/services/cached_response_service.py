"""Caching wrapper around submission and aggregation."""
import logging
from datetime import timedelta
from typing import Optional
from uuid import UUID

from app.core.cache import MemoryCache
from app.schemas.response import SubmitResponseRequest, SurveyResultResponse
from app.services.aggregation_service import AggregationService
from app.services.response_service import ResponseService

logger = logging.getLogger(__name__)

RESULTS_CACHE_PREFIX = "survey_results_"
COUNT_CACHE_PREFIX = "survey_count_"
DEFAULT_CACHE_TTL = timedelta(minutes=1)


def results_cache_key(survey_id: UUID) -> str:
    return f"{RESULTS_CACHE_PREFIX}{survey_id}"


def count_cache_key(survey_id: UUID) -> str:
    return f"{COUNT_CACHE_PREFIX}{survey_id}"


class CachedResponseService:
    """
    Read-through cache for results and counts, invalidated on submission.

    Exposes the same operations as the wrapped services so callers do not
    know whether caching is in place.
    """

    def __init__(self, submission: ResponseService, aggregation: AggregationService,
                 cache: MemoryCache, ttl: timedelta = DEFAULT_CACHE_TTL):
        self.submission = submission
        self.aggregation = aggregation
        self.cache = cache
        self.ttl = ttl

    def submit_response(self, request: SubmitResponseRequest,
                        ip_address: Optional[str] = None) -> UUID:
        response_id = self.submission.submit_response(request, ip_address)

        # Only reached once the response is committed.
        self.cache.remove(results_cache_key(request.survey_id))
        self.cache.remove(count_cache_key(request.survey_id))
        return response_id

    def get_survey_results(self, survey_id: UUID) -> SurveyResultResponse:
        key = results_cache_key(survey_id)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Cache hit: %s", key)
            return cached.model_copy(deep=True)

        logger.debug("Cache miss: %s", key)
        results = self.aggregation.get_survey_results(survey_id)
        # Callers get their own copy; the cached entry is never handed out.
        self.cache.set(key, results.model_copy(deep=True), self.ttl)
        return results

    def get_response_count(self, survey_id: UUID) -> int:
        key = count_cache_key(survey_id)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Cache hit: %s", key)
            return cached

        logger.debug("Cache miss: %s", key)
        count = self.aggregation.get_response_count(survey_id)
        self.cache.set(key, count, self.ttl)
        return count
