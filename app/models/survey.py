"""Survey models.

Survey -> Question -> Option form one aggregate: children are created only
through the parent's mutators and are never shared between parents.
"""
from datetime import datetime
from enum import Enum
from typing import Optional
import uuid

from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey, Uuid, Enum as SQLEnum
from sqlalchemy.orm import relationship

from app.core.database import Base, UTCDateTime, as_utc, utcnow
from app.core.exceptions import (
    InvalidStateError,
    NotFoundError,
    StructuralError,
    ValidationError,
)

MAX_TITLE_LENGTH = 200
MAX_DESCRIPTION_LENGTH = 1000
MAX_QUESTION_TEXT_LENGTH = 500
MAX_OPTION_TEXT_LENGTH = 200
MAX_QUESTIONS = 50
MIN_OPTIONS = 2
MAX_OPTIONS = 10


class SurveyStatus(str, Enum):
    """Survey lifecycle states. Draft -> Active -> Closed, nothing leaves Closed."""
    DRAFT = "draft"
    ACTIVE = "active"
    CLOSED = "closed"


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


def _validate_text(value: Optional[str], field: str, max_length: int) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field} cannot be empty.", field=field)
    if len(value) > max_length:
        raise ValidationError(f"{field} cannot exceed {max_length} characters.", field=field)
    return value


def _validate_order(order: int, field: str) -> int:
    if order < 0:
        raise ValidationError(f"{field} cannot be negative.", field=field)
    return order


class Survey(Base):
    """Survey aggregate root; owns its questions and the lifecycle state machine."""

    __tablename__ = "surveys"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(MAX_TITLE_LENGTH), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(
        SQLEnum(SurveyStatus, name="survey_status", values_callable=_enum_values),
        nullable=False,
        default=SurveyStatus.DRAFT,
        index=True,
    )
    start_date = Column(UTCDateTime, nullable=True)
    end_date = Column(UTCDateTime, nullable=True)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(UTCDateTime, nullable=True)

    # Relationships
    questions = relationship(
        "Question",
        back_populates="survey",
        cascade="all, delete-orphan",
        order_by="Question.order",
    )
    responses = relationship(
        "Response",
        back_populates="survey",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __init__(self, title: str, description: Optional[str] = None):
        super().__init__()
        self.id = uuid.uuid4()
        self.status = SurveyStatus.DRAFT
        self.created_at = utcnow()
        self.title = _validate_text(title, "Survey title", MAX_TITLE_LENGTH)
        self.description = self._checked_description(description)

    @staticmethod
    def _checked_description(description: Optional[str]) -> Optional[str]:
        if description is not None and len(description) > MAX_DESCRIPTION_LENGTH:
            raise ValidationError(
                f"Survey description cannot exceed {MAX_DESCRIPTION_LENGTH} characters.",
                field="description",
            )
        return description

    def _touch(self) -> None:
        self.updated_at = utcnow()

    def _require_draft(self, action: str) -> None:
        if self.status != SurveyStatus.DRAFT:
            raise InvalidStateError(
                f"Cannot {action} a {self.status.value} survey.",
                current=self.status.value,
            )

    # -- Details --

    def set_title(self, title: str) -> None:
        self.title = _validate_text(title, "Survey title", MAX_TITLE_LENGTH)
        self._touch()

    def set_description(self, description: Optional[str]) -> None:
        self.description = self._checked_description(description)
        self._touch()

    # -- Structure --

    def add_question(self, text: str, order: int, is_required: bool = True) -> "Question":
        self._require_draft("add questions to")
        if len(self.questions) >= MAX_QUESTIONS:
            raise ValidationError(
                f"Survey cannot have more than {MAX_QUESTIONS} questions.",
                field="questions",
            )
        question = Question(survey_id=self.id, text=text, order=order, is_required=is_required)
        self.questions.append(question)
        self._touch()
        return question

    def remove_question(self, question_id: uuid.UUID) -> None:
        self._require_draft("remove questions from")
        question = self.find_question(question_id)
        if question is None:
            raise NotFoundError("Question", question_id)
        self.questions.remove(question)
        self._touch()

    def find_question(self, question_id: uuid.UUID) -> Optional["Question"]:
        return next((q for q in self.questions if q.id == question_id), None)

    # -- Lifecycle --

    def activate(self, start_date: Optional[datetime] = None,
                 end_date: Optional[datetime] = None) -> None:
        if self.status != SurveyStatus.DRAFT:
            raise InvalidStateError(
                "Only draft surveys can be activated.", current=self.status.value
            )
        if not self.questions:
            raise StructuralError(
                "Survey must have at least one question to be activated.",
                field="questions",
            )
        if any(len(q.options) < MIN_OPTIONS for q in self.questions):
            raise StructuralError(
                f"All questions must have at least {MIN_OPTIONS} options.",
                field="options",
            )

        self.start_date = as_utc(start_date) or utcnow()
        self.end_date = as_utc(end_date)
        self.status = SurveyStatus.ACTIVE
        self._touch()

    def close(self) -> None:
        if self.status != SurveyStatus.ACTIVE:
            raise InvalidStateError(
                "Only active surveys can be closed.", current=self.status.value
            )
        now = utcnow()
        self.status = SurveyStatus.CLOSED
        self.end_date = now
        self.updated_at = now

    @property
    def is_open(self) -> bool:
        """True while Active and before the end date; re-evaluated on every read."""
        return self.status == SurveyStatus.ACTIVE and (
            self.end_date is None or self.end_date > utcnow()
        )

    def __repr__(self):
        return f"<Survey(id={self.id}, title={self.title}, status={self.status})>"


class Question(Base):
    """Single-choice question; belongs to exactly one survey."""

    __tablename__ = "questions"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    survey_id = Column(Uuid, ForeignKey("surveys.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(String(MAX_QUESTION_TEXT_LENGTH), nullable=False)
    order = Column(Integer, nullable=False)  # Display order
    is_required = Column(Boolean, default=True, nullable=False)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=True)

    # Relationships
    survey = relationship("Survey", back_populates="questions")
    options = relationship(
        "Option",
        back_populates="question",
        cascade="all, delete-orphan",
        order_by="Option.order",
    )

    def __init__(self, survey_id: uuid.UUID, text: str, order: int, is_required: bool = True):
        super().__init__()
        self.id = uuid.uuid4()
        self.survey_id = survey_id
        self.created_at = utcnow()
        self.text = _validate_text(text, "Question text", MAX_QUESTION_TEXT_LENGTH)
        self.order = _validate_order(order, "Question order")
        self.is_required = is_required

    def _require_editable(self) -> None:
        if self.survey is not None and self.survey.status != SurveyStatus.DRAFT:
            raise InvalidStateError(
                "Questions and options can only be changed on draft surveys.",
                current=self.survey.status.value,
            )

    def _touch(self) -> None:
        self.updated_at = utcnow()

    def set_text(self, text: str) -> None:
        self._require_editable()
        self.text = _validate_text(text, "Question text", MAX_QUESTION_TEXT_LENGTH)
        self._touch()

    def set_order(self, order: int) -> None:
        self._require_editable()
        self.order = _validate_order(order, "Question order")
        self._touch()

    def add_option(self, text: str, order: int) -> "Option":
        self._require_editable()
        if len(self.options) >= MAX_OPTIONS:
            raise ValidationError(
                f"Question cannot have more than {MAX_OPTIONS} options.", field="options"
            )
        option = Option(question_id=self.id, text=text, order=order)
        folded = option.text.casefold()
        if any(o.text.casefold() == folded for o in self.options):
            raise ValidationError("Duplicate option text is not allowed.", field="options")
        self.options.append(option)
        self._touch()
        return option

    def remove_option(self, option_id: uuid.UUID) -> None:
        self._require_editable()
        option = self.find_option(option_id)
        if option is None:
            raise NotFoundError("Option", option_id)
        self.options.remove(option)
        self._touch()

    def find_option(self, option_id: uuid.UUID) -> Optional["Option"]:
        return next((o for o in self.options if o.id == option_id), None)

    def __repr__(self):
        return f"<Question(id={self.id}, text={self.text[:30]})>"


class Option(Base):
    """Selectable choice for a question."""

    __tablename__ = "options"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    question_id = Column(Uuid, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True)
    text = Column(String(MAX_OPTION_TEXT_LENGTH), nullable=False)
    order = Column(Integer, nullable=False)
    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=True)

    # Relationships
    question = relationship("Question", back_populates="options")

    def __init__(self, question_id: uuid.UUID, text: str, order: int):
        super().__init__()
        self.id = uuid.uuid4()
        self.question_id = question_id
        self.created_at = utcnow()
        self.text = _validate_text(text, "Option text", MAX_OPTION_TEXT_LENGTH)
        self.order = _validate_order(order, "Option order")

    def _require_editable(self) -> None:
        if self.question is not None:
            self.question._require_editable()

    def set_text(self, text: str) -> None:
        self._require_editable()
        text = _validate_text(text, "Option text", MAX_OPTION_TEXT_LENGTH)
        if self.question is not None:
            folded = text.casefold()
            if any(o is not self and o.text.casefold() == folded for o in self.question.options):
                raise ValidationError("Duplicate option text is not allowed.", field="options")
        self.text = text
        self.updated_at = utcnow()

    def set_order(self, order: int) -> None:
        self._require_editable()
        self.order = _validate_order(order, "Option order")
        self.updated_at = utcnow()

    def __repr__(self):
        return f"<Option(id={self.id}, text={self.text})>"
