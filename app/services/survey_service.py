"""Survey service."""
import logging
import math
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from app.core.exceptions import InvalidStateError, NotFoundError
from app.models.survey import Survey, SurveyStatus
from app.repositories.unit_of_work import UnitOfWork
from app.schemas.survey import (
    PaginatedSurveys,
    SurveyCreate,
    SurveySummaryResponse,
    SurveyUpdate,
)

logger = logging.getLogger(__name__)


class SurveyService:
    """Survey lifecycle business logic."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def create_survey(self, survey_data: SurveyCreate) -> Survey:
        """
        Create a draft survey with all questions and options.

        Questions and options are attached through the aggregate in display
        order, then committed together.
        """
        survey = Survey(title=survey_data.title, description=survey_data.description)

        for question_data in sorted(survey_data.questions, key=lambda q: q.order):
            question = survey.add_question(
                text=question_data.text,
                order=question_data.order,
                is_required=question_data.is_required,
            )
            for option_data in sorted(question_data.options, key=lambda o: o.order):
                question.add_option(text=option_data.text, order=option_data.order)

        self.uow.surveys.add(survey)
        self.uow.save_changes()

        logger.info("Created survey %s with %d questions", survey.id, len(survey.questions))
        return survey

    def get_survey(self, survey_id: UUID) -> Survey:
        """
        Get survey by ID with questions and options.

        Raises:
            NotFoundError: If survey not found
        """
        survey = self.uow.surveys.get_by_id(survey_id)
        if survey is None:
            raise NotFoundError("Survey", survey_id)
        return survey

    def list_surveys(self, page: int = 1, page_size: int = 10,
                     status: Optional[SurveyStatus] = None) -> PaginatedSurveys:
        """Get one page of surveys with question and response counts."""
        surveys, total = self.uow.surveys.get_paginated(page, page_size, status)
        return PaginatedSurveys(
            items=[self._summary(survey) for survey in surveys],
            page=page,
            page_size=page_size,
            total_count=total,
            total_pages=math.ceil(total / page_size) if page_size else 0,
        )

    def list_active_surveys(self) -> List[SurveySummaryResponse]:
        """Get surveys currently accepting responses."""
        return [self._summary(survey) for survey in self.uow.surveys.get_active()]

    def update_survey(self, survey_id: UUID, survey_data: SurveyUpdate) -> Survey:
        """
        Update title and description.

        Raises:
            NotFoundError: If survey not found
            InvalidStateError: If survey is not a draft
        """
        survey = self.get_survey(survey_id)

        if survey.status != SurveyStatus.DRAFT:
            raise InvalidStateError(
                "Only draft surveys can be updated.", current=survey.status.value
            )

        survey.set_title(survey_data.title)
        survey.set_description(survey_data.description)
        self.uow.save_changes()
        return survey

    def activate_survey(self, survey_id: UUID, start_date: Optional[datetime] = None,
                        end_date: Optional[datetime] = None) -> Survey:
        """
        Open a draft survey for responses.

        Raises:
            NotFoundError: If survey not found
            InvalidStateError: If survey is not a draft
            StructuralError: If a question has fewer than two options
        """
        survey = self.get_survey(survey_id)
        survey.activate(start_date, end_date)
        self.uow.save_changes()

        logger.info("Activated survey %s (ends %s)", survey.id, survey.end_date or "never")
        return survey

    def close_survey(self, survey_id: UUID) -> Survey:
        """
        Close an active survey.

        Raises:
            NotFoundError: If survey not found
            InvalidStateError: If survey is not active
        """
        survey = self.get_survey(survey_id)
        survey.close()
        self.uow.save_changes()

        logger.info("Closed survey %s", survey.id)
        return survey

    def delete_survey(self, survey_id: UUID) -> None:
        """
        Delete a survey with its questions, options and responses.

        Raises:
            NotFoundError: If survey not found
            InvalidStateError: If survey is active
        """
        survey = self.uow.surveys.get_by_id(survey_id, include_questions=False)
        if survey is None:
            raise NotFoundError("Survey", survey_id)

        if survey.status == SurveyStatus.ACTIVE:
            raise InvalidStateError(
                "Cannot delete an active survey. Close it first.",
                current=survey.status.value,
            )

        self.uow.surveys.delete(survey)
        self.uow.save_changes()
        logger.info("Deleted survey %s", survey_id)

    def _summary(self, survey: Survey) -> SurveySummaryResponse:
        return SurveySummaryResponse(
            id=survey.id,
            title=survey.title,
            description=survey.description,
            status=survey.status,
            start_date=survey.start_date,
            end_date=survey.end_date,
            question_count=len(survey.questions),
            response_count=self.uow.responses.count_by_survey(survey.id),
            created_at=survey.created_at,
            updated_at=survey.updated_at,
        )
