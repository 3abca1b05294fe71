"""Response submission and results schemas."""
from pydantic import BaseModel, Field
from typing import Optional, List
from uuid import UUID


class AnswerRequest(BaseModel):
    """One (question, selected option) pair."""
    question_id: UUID
    selected_option_id: UUID


class SubmitResponseRequest(BaseModel):
    """Response submission payload."""
    survey_id: UUID
    participant_id: Optional[str] = Field(None, max_length=100)
    answers: List[AnswerRequest] = Field(..., min_length=1)


class OptionResult(BaseModel):
    option_id: UUID
    option_text: str
    count: int
    percentage: float


class QuestionResult(BaseModel):
    question_id: UUID
    question_text: str
    options: List[OptionResult]


class SurveyResultResponse(BaseModel):
    """Aggregated results for a survey."""
    survey_id: UUID
    survey_title: str
    total_responses: int
    questions: List[QuestionResult]
