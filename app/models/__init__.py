"""Database models."""
from app.models.survey import Survey, SurveyStatus, Question, Option
from app.models.response import Response, Answer

__all__ = [
    "Survey",
    "SurveyStatus",
    "Question",
    "Option",
    "Response",
    "Answer",
]
