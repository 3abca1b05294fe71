"""Survey response models."""
from typing import Optional
import uuid

from sqlalchemy import Column, String, ForeignKey, Index, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from app.core.database import Base, UTCDateTime, utcnow
from app.core.exceptions import DuplicateAnswerError


class Response(Base):
    """
    One respondent's submission to a survey.

    References its survey by id; owns its answers. Created once at submission
    time and never mutated afterwards.
    """

    __tablename__ = "responses"
    __table_args__ = (
        # Lookup index for the participant check; deliberately not unique.
        Index("ix_responses_survey_participant", "survey_id", "participant_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    survey_id = Column(Uuid, ForeignKey("surveys.id", ondelete="CASCADE"), nullable=False, index=True)
    participant_id = Column(String(100), nullable=True, index=True)
    ip_address = Column(String(45), nullable=True)  # informational only
    submitted_at = Column(UTCDateTime, nullable=False, default=utcnow, index=True)

    # Relationships
    survey = relationship("Survey", back_populates="responses")
    answers = relationship("Answer", back_populates="response", cascade="all, delete-orphan")

    def __init__(self, survey_id: uuid.UUID, participant_id: Optional[str] = None,
                 ip_address: Optional[str] = None):
        super().__init__()
        self.id = uuid.uuid4()
        self.survey_id = survey_id
        self.participant_id = participant_id
        self.ip_address = ip_address
        self.submitted_at = utcnow()

    def add_answer(self, question_id: uuid.UUID, selected_option_id: uuid.UUID) -> "Answer":
        """Attach an answer; a question may be answered at most once per response."""
        if any(a.question_id == question_id for a in self.answers):
            raise DuplicateAnswerError(question_id)
        answer = Answer(
            response_id=self.id,
            question_id=question_id,
            selected_option_id=selected_option_id,
        )
        self.answers.append(answer)
        return answer

    def __repr__(self):
        return f"<Response(id={self.id}, survey_id={self.survey_id})>"


class Answer(Base):
    """Selected option for one question within a response."""

    __tablename__ = "answers"
    __table_args__ = (
        UniqueConstraint("response_id", "question_id", name="uq_answers_response_question"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    response_id = Column(Uuid, ForeignKey("responses.id", ondelete="CASCADE"), nullable=False, index=True)
    question_id = Column(Uuid, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True)
    selected_option_id = Column(Uuid, ForeignKey("options.id", ondelete="CASCADE"), nullable=False, index=True)

    # Relationships
    response = relationship("Response", back_populates="answers")

    def __init__(self, response_id: uuid.UUID, question_id: uuid.UUID,
                 selected_option_id: uuid.UUID):
        super().__init__()
        self.id = uuid.uuid4()
        self.response_id = response_id
        self.question_id = question_id
        self.selected_option_id = selected_option_id

    def __repr__(self):
        return f"<Answer(id={self.id}, question_id={self.question_id})>"
