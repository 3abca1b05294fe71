"""Unit of work over a single database session."""
import logging

from sqlalchemy.orm import Session

from app.repositories.survey_repository import SurveyRepository
from app.repositories.response_repository import ResponseRepository

logger = logging.getLogger(__name__)


class UnitOfWork:
    """
    Groups the repositories that share one session.

    Repositories only stage changes; ``save_changes`` commits everything
    staged so far as one transaction, or nothing.
    """

    def __init__(self, db: Session):
        self.db = db
        self.surveys = SurveyRepository(db)
        self.responses = ResponseRepository(db)

    def save_changes(self) -> None:
        try:
            self.db.commit()
        except Exception:
            logger.exception("Commit failed; rolling back")
            self.db.rollback()
            raise

    def rollback(self) -> None:
        self.db.rollback()
