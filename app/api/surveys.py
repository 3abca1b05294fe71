"""Survey router (lifecycle operations)."""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from app.api.dependencies import SurveyServiceDep
from app.models.survey import SurveyStatus
from app.schemas.survey import (
    PaginatedSurveys,
    SurveyActivate,
    SurveyCreate,
    SurveyDetailResponse,
    SurveySummaryResponse,
    SurveyUpdate,
)

router = APIRouter(prefix="/api/surveys", tags=["Surveys"])

MAX_PAGE_SIZE = 100


@router.post("", response_model=SurveyDetailResponse, status_code=status.HTTP_201_CREATED)
def create_survey(survey_data: SurveyCreate, service: SurveyServiceDep, response: Response):
    """
    Create a new draft survey with questions and options.
    """
    survey = service.create_survey(survey_data)
    response.headers["Location"] = f"/api/surveys/{survey.id}"
    return survey


@router.get("", response_model=PaginatedSurveys)
def list_surveys(
    service: SurveyServiceDep,
    page: Optional[int] = None,
    page_size: Optional[int] = None,
    status: Optional[SurveyStatus] = None,
):
    """
    List surveys, newest first. Non-positive paging values fall back to defaults.
    """
    effective_page = page if page and page > 0 else 1
    effective_page_size = min(page_size, MAX_PAGE_SIZE) if page_size and page_size > 0 else 10
    return service.list_surveys(page=effective_page, page_size=effective_page_size, status=status)


@router.get("/active", response_model=List[SurveySummaryResponse])
def list_active_surveys(service: SurveyServiceDep):
    """
    List surveys currently accepting responses.
    """
    return service.list_active_surveys()


@router.get("/{survey_id}", response_model=SurveyDetailResponse)
def get_survey(survey_id: UUID, service: SurveyServiceDep):
    """
    Get survey details with questions and options.
    """
    return service.get_survey(survey_id)


@router.put("/{survey_id}", response_model=SurveyDetailResponse)
def update_survey(survey_id: UUID, survey_data: SurveyUpdate, service: SurveyServiceDep):
    """
    Update title and description (draft surveys only).
    """
    return service.update_survey(survey_id, survey_data)


@router.post("/{survey_id}/activate", response_model=SurveyDetailResponse)
def activate_survey(
    survey_id: UUID,
    service: SurveyServiceDep,
    activation: Optional[SurveyActivate] = None,
):
    """
    Activate a draft survey to start collecting responses.
    """
    activation = activation or SurveyActivate()
    return service.activate_survey(survey_id, activation.start_date, activation.end_date)


@router.post("/{survey_id}/close", response_model=SurveyDetailResponse)
def close_survey(survey_id: UUID, service: SurveyServiceDep):
    """
    Close an active survey.
    """
    return service.close_survey(survey_id)


@router.delete("/{survey_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_survey(survey_id: UUID, service: SurveyServiceDep):
    """
    Delete a survey that is not active.
    """
    service.delete_survey(survey_id)
