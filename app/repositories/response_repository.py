"""Response repository."""
from typing import Dict, List
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from app.models.response import Response, Answer


class ResponseRepository:
    """Survey response data access layer. Writes are committed by the unit of work."""

    def __init__(self, db: Session):
        self.db = db

    def add(self, response: Response) -> None:
        """Stage a response together with its answers."""
        self.db.add(response)

    def get_by_survey(self, survey_id: UUID, skip: int = 0, limit: int = 100) -> List[Response]:
        """Get responses for a survey, newest first."""
        return self.db.query(Response)\
            .options(joinedload(Response.answers))\
            .filter(Response.survey_id == survey_id)\
            .order_by(Response.submitted_at.desc())\
            .offset(skip).limit(limit)\
            .all()

    def has_responded(self, survey_id: UUID, participant_id: str) -> bool:
        """Check whether a participant already has a response for a survey."""
        return self.db.query(Response.id)\
            .filter(Response.survey_id == survey_id)\
            .filter(Response.participant_id == participant_id)\
            .first() is not None

    def count_by_survey(self, survey_id: UUID) -> int:
        """Count responses for a survey."""
        return self.db.query(func.count(Response.id))\
            .filter(Response.survey_id == survey_id)\
            .scalar() or 0

    def get_option_counts(self, survey_id: UUID) -> Dict[UUID, int]:
        """Map each selected option id to the number of answers choosing it."""
        rows = self.db.query(Answer.selected_option_id, func.count(Answer.id))\
            .join(Response, Answer.response_id == Response.id)\
            .filter(Response.survey_id == survey_id)\
            .group_by(Answer.selected_option_id)\
            .all()
        return {option_id: count for option_id, count in rows}
