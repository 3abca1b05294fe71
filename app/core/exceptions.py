"""Domain exception classes for the survey system.

These are raised by models and service-layer code and mapped to HTTP
responses by the handlers registered in ``app.main``.
"""
from typing import Optional
from uuid import UUID


class SurveyDomainError(Exception):
    """Base class for every semantic failure raised by the core."""

    code = "domain_error"

    def __init__(self, message: str = ""):
        self.message = message
        super().__init__(message)


class ValidationError(SurveyDomainError):
    """Structurally invalid input (text length, order, counts)."""

    code = "validation_error"

    def __init__(self, message: str = "", field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class StructuralError(ValidationError):
    """Raised when a survey's question/option graph cannot be activated."""

    code = "structural_error"


class InvalidStateError(SurveyDomainError):
    """Operation attempted against a survey in the wrong lifecycle state."""

    code = "invalid_state"

    def __init__(self, message: str = "", current: Optional[str] = None):
        self.current = current
        super().__init__(message)


class NotFoundError(SurveyDomainError):
    code = "not_found"

    def __init__(self, entity: str, identifier: object = ""):
        self.entity = entity
        self.identifier = identifier
        super().__init__(f"{entity} not found: {identifier}")


class NotAcceptingError(SurveyDomainError):
    """Raised when a survey is not currently open for responses."""

    code = "survey_not_accepting"

    def __init__(self, survey_id: UUID):
        self.survey_id = survey_id
        super().__init__("Survey is not accepting responses.")


class DuplicateParticipantError(SurveyDomainError):
    code = "duplicate_participant"

    def __init__(self, survey_id: UUID, participant_id: str):
        self.survey_id = survey_id
        self.participant_id = participant_id
        super().__init__("You have already responded to this survey.")


class DuplicateAnswerError(SurveyDomainError):
    code = "duplicate_answer"

    def __init__(self, question_id: UUID):
        self.question_id = question_id
        super().__init__(f"Answer for question {question_id} already exists.")


class MissingRequiredAnswerError(SurveyDomainError):
    code = "missing_required_answer"

    def __init__(self, question_id: UUID, question_text: str = ""):
        self.question_id = question_id
        self.question_text = question_text
        super().__init__(f"Question '{question_text}' is required.")


class UnknownQuestionError(SurveyDomainError):
    code = "unknown_question"

    def __init__(self, question_id: UUID):
        self.question_id = question_id
        super().__init__(f"Question with ID {question_id} not found in this survey.")


class InvalidOptionError(SurveyDomainError):
    code = "invalid_option"

    def __init__(self, question_id: UUID, option_id: UUID):
        self.question_id = question_id
        self.option_id = option_id
        super().__init__(
            f"Option with ID {option_id} is not valid for question {question_id}."
        )
