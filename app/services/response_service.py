"""Survey response submission service."""
import logging
from typing import Optional
from uuid import UUID

from app.core.exceptions import (
    DuplicateParticipantError,
    InvalidOptionError,
    MissingRequiredAnswerError,
    NotAcceptingError,
    NotFoundError,
    SurveyDomainError,
    UnknownQuestionError,
)
from app.models.response import Response
from app.repositories.unit_of_work import UnitOfWork
from app.schemas.response import SubmitResponseRequest

logger = logging.getLogger(__name__)


class ResponseService:
    """Validates a submission against the survey's question graph and stores it."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def submit_response(self, request: SubmitResponseRequest,
                        ip_address: Optional[str] = None) -> UUID:
        """
        Submit a response to an open survey.

        Checks run in a fixed order and the first failure wins; nothing is
        written unless every check passes.

        Raises:
            NotFoundError: survey does not exist
            NotAcceptingError: survey is not open
            DuplicateParticipantError: participant already responded
            MissingRequiredAnswerError: a required question was skipped
            UnknownQuestionError / InvalidOptionError: answer does not match the survey
            DuplicateAnswerError: the same question is answered twice
        """
        try:
            response = self._build_response(request, ip_address)
        except SurveyDomainError as exc:
            logger.info(
                "Rejected response for survey %s: %s", request.survey_id, exc.code
            )
            raise

        self.uow.responses.add(response)
        self.uow.save_changes()

        logger.info(
            "Stored response %s for survey %s (%d answers)",
            response.id, request.survey_id, len(request.answers),
        )
        return response.id

    def _build_response(self, request: SubmitResponseRequest,
                        ip_address: Optional[str]) -> Response:
        survey = self.uow.surveys.get_by_id(request.survey_id)
        if survey is None:
            raise NotFoundError("Survey", request.survey_id)

        if not survey.is_open:
            raise NotAcceptingError(survey.id)

        # Advisory only: two concurrent submissions can both pass this check.
        if request.participant_id:
            if self.uow.responses.has_responded(survey.id, request.participant_id):
                raise DuplicateParticipantError(survey.id, request.participant_id)

        answered = {answer.question_id for answer in request.answers}
        for question in survey.questions:
            if question.is_required and question.id not in answered:
                raise MissingRequiredAnswerError(question.id, question.text)

        for answer in request.answers:
            question = survey.find_question(answer.question_id)
            if question is None:
                raise UnknownQuestionError(answer.question_id)
            if question.find_option(answer.selected_option_id) is None:
                raise InvalidOptionError(question.id, answer.selected_option_id)

        response = Response(
            survey_id=survey.id,
            participant_id=request.participant_id,
            ip_address=ip_address,
        )
        for answer in request.answers:
            response.add_answer(answer.question_id, answer.selected_option_id)
        return response
