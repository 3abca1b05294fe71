"""Survey schemas."""
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, List
from datetime import datetime
from uuid import UUID

from app.models.survey import (
    SurveyStatus,
    MAX_TITLE_LENGTH,
    MAX_DESCRIPTION_LENGTH,
    MAX_QUESTION_TEXT_LENGTH,
    MAX_OPTION_TEXT_LENGTH,
    MAX_QUESTIONS,
    MIN_OPTIONS,
    MAX_OPTIONS,
)


# Option schemas
class OptionBase(BaseModel):
    """Base option schema."""
    text: str = Field(..., min_length=1, max_length=MAX_OPTION_TEXT_LENGTH)
    order: int = Field(..., ge=0)


class OptionCreate(OptionBase):
    """Create option."""
    pass


class OptionResponse(OptionBase):
    """Option response."""
    id: UUID

    model_config = ConfigDict(from_attributes=True)


# Question schemas
class QuestionBase(BaseModel):
    """Base question schema."""
    text: str = Field(..., min_length=1, max_length=MAX_QUESTION_TEXT_LENGTH)
    order: int = Field(..., ge=0)
    is_required: bool = True


class QuestionCreate(QuestionBase):
    """Create question with options."""
    options: List[OptionCreate] = Field(..., min_length=MIN_OPTIONS, max_length=MAX_OPTIONS)


class QuestionResponse(QuestionBase):
    """Question response."""
    id: UUID
    options: List[OptionResponse] = []

    model_config = ConfigDict(from_attributes=True)


# Survey schemas
class SurveyCreate(BaseModel):
    """Create survey with questions."""
    title: str = Field(..., min_length=1, max_length=MAX_TITLE_LENGTH)
    description: Optional[str] = Field(None, max_length=MAX_DESCRIPTION_LENGTH)
    questions: List[QuestionCreate] = Field(..., min_length=1, max_length=MAX_QUESTIONS)


class SurveyUpdate(BaseModel):
    """Update survey details (draft surveys only)."""
    title: str = Field(..., min_length=1, max_length=MAX_TITLE_LENGTH)
    description: Optional[str] = Field(None, max_length=MAX_DESCRIPTION_LENGTH)


class SurveyActivate(BaseModel):
    """Activation window; a missing start means now, a missing end means open-ended."""
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class SurveyDetailResponse(BaseModel):
    """Survey with its questions and options."""
    id: UUID
    title: str
    description: Optional[str] = None
    status: SurveyStatus
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    questions: List[QuestionResponse] = []
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class SurveySummaryResponse(BaseModel):
    """Survey list entry (without questions)."""
    id: UUID
    title: str
    description: Optional[str] = None
    status: SurveyStatus
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    question_count: int
    response_count: int
    created_at: datetime
    updated_at: Optional[datetime] = None


class PaginatedSurveys(BaseModel):
    """One page of survey summaries."""
    items: List[SurveySummaryResponse]
    page: int
    page_size: int
    total_count: int
    total_pages: int
