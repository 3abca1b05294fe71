"""Survey results aggregation."""
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict
from uuid import UUID

from app.core.exceptions import NotFoundError
from app.models.survey import Survey
from app.repositories.unit_of_work import UnitOfWork
from app.schemas.response import OptionResult, QuestionResult, SurveyResultResponse

_TWO_PLACES = Decimal("0.01")


def percentage(count: int, total: int) -> float:
    """
    Share of ``total`` as a percentage with two decimals, rounding half away
    from zero (1/3 -> 33.33, 2/3 -> 66.67). Zero when there are no responses.
    """
    if total <= 0:
        return 0.0
    share = Decimal(count) * 100 / Decimal(total)
    return float(share.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP))


def build_results(survey: Survey, total: int,
                  option_counts: Dict[UUID, int]) -> SurveyResultResponse:
    """Assemble per-question, per-option results; percentages are not normalized to 100."""
    questions = []
    for question in sorted(survey.questions, key=lambda q: q.order):
        options = []
        for option in sorted(question.options, key=lambda o: o.order):
            count = option_counts.get(option.id, 0)
            options.append(OptionResult(
                option_id=option.id,
                option_text=option.text,
                count=count,
                percentage=percentage(count, total),
            ))
        questions.append(QuestionResult(
            question_id=question.id,
            question_text=question.text,
            options=options,
        ))

    return SurveyResultResponse(
        survey_id=survey.id,
        survey_title=survey.title,
        total_responses=total,
        questions=questions,
    )


class AggregationService:
    """Computes vote counts and percentages from repository-side counts."""

    def __init__(self, uow: UnitOfWork):
        self.uow = uow

    def get_survey_results(self, survey_id: UUID) -> SurveyResultResponse:
        """
        Raises:
            NotFoundError: If survey not found
        """
        survey = self.uow.surveys.get_by_id(survey_id)
        if survey is None:
            raise NotFoundError("Survey", survey_id)

        total = self.uow.responses.count_by_survey(survey_id)
        option_counts = self.uow.responses.get_option_counts(survey_id)
        return build_results(survey, total, option_counts)

    def get_response_count(self, survey_id: UUID) -> int:
        return self.uow.responses.count_by_survey(survey_id)
