"""Survey repository."""
from typing import Optional, List, Tuple
from uuid import UUID

from sqlalchemy import or_
from sqlalchemy.orm import Session, joinedload, selectinload

from app.core.database import utcnow
from app.models.survey import Survey, SurveyStatus, Question


class SurveyRepository:
    """Survey data access layer. Writes are committed by the unit of work."""

    def __init__(self, db: Session):
        self.db = db

    def add(self, survey: Survey) -> None:
        """Stage a new survey (with its questions and options)."""
        self.db.add(survey)

    def get_by_id(self, survey_id: UUID, include_questions: bool = True) -> Optional[Survey]:
        """Get survey by ID, optionally eager-loading questions and options."""
        query = self.db.query(Survey)

        if include_questions:
            query = query.options(
                joinedload(Survey.questions)
                .joinedload(Question.options)
            )

        return query.filter(Survey.id == survey_id).first()

    def get_paginated(self, page: int, page_size: int,
                      status: Optional[SurveyStatus] = None) -> Tuple[List[Survey], int]:
        """Get one page of surveys (newest first) and the total matching count."""
        query = self.db.query(Survey)

        if status is not None:
            query = query.filter(Survey.status == status)

        total = query.count()
        surveys = query.options(selectinload(Survey.questions))\
            .order_by(Survey.created_at.desc())\
            .offset((page - 1) * page_size)\
            .limit(page_size)\
            .all()
        return surveys, total

    def get_active(self) -> List[Survey]:
        """Get surveys that are active and not past their end date."""
        now = utcnow()
        return self.db.query(Survey)\
            .options(selectinload(Survey.questions))\
            .filter(Survey.status == SurveyStatus.ACTIVE)\
            .filter(or_(Survey.end_date.is_(None), Survey.end_date > now))\
            .order_by(Survey.created_at.desc())\
            .all()

    def delete(self, survey: Survey) -> None:
        """Stage deletion of a survey; questions, options and responses cascade."""
        self.db.delete(survey)
