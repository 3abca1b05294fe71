"""Response router (submission and results)."""
from uuid import UUID

from fastapi import APIRouter, Request, status

from app.api.dependencies import ResponseServiceDep
from app.schemas.response import SubmitResponseRequest, SurveyResultResponse

router = APIRouter(prefix="/api/responses", tags=["Responses"])


@router.post("", response_model=UUID, status_code=status.HTTP_201_CREATED)
def submit_response(
    request_data: SubmitResponseRequest,
    request: Request,
    service: ResponseServiceDep,
):
    """
    Submit a response to an open survey. Returns the new response id.
    """
    ip_address = request.client.host if request.client else None
    return service.submit_response(request_data, ip_address)


@router.get("/surveys/{survey_id}/results", response_model=SurveyResultResponse)
def get_survey_results(survey_id: UUID, service: ResponseServiceDep):
    """
    Get aggregated counts and percentages per option.
    """
    return service.get_survey_results(survey_id)


@router.get("/surveys/{survey_id}/count", response_model=int)
def get_response_count(survey_id: UUID, service: ResponseServiceDep):
    """
    Get the total number of responses for a survey.
    """
    return service.get_response_count(survey_id)
