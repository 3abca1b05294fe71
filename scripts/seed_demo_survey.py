"""
Seed an active demo survey with a few multiple-choice questions.
Safe to run multiple times; skips creation if the survey title already exists.
"""
import sys
from pathlib import Path
from datetime import datetime, timezone, timedelta

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app.core.database import SessionLocal, engine, Base
from app.models.survey import Survey
from app.repositories.unit_of_work import UnitOfWork
from app.schemas.survey import SurveyCreate
from app.services.survey_service import SurveyService

SURVEY_TITLE = "[DEMO] Team satisfaction pulse"

# -----------------------------------------------------------
# Question definitions: (text, required, options)
# -----------------------------------------------------------
QUESTIONS = [
    (
        "How satisfied are you with your current workload?",
        True,
        ["Very satisfied", "Satisfied", "Neutral", "Dissatisfied", "Very dissatisfied"],
    ),
    (
        "Which day works best for the team sync?",
        True,
        ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"],
    ),
    (
        "Would you recommend the team to a friend?",
        False,
        ["Yes", "No", "Not sure"],
    ),
]


def run():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    uow = UnitOfWork(db)
    try:
        # ── Idempotency check ────────────────────────────────
        existing = db.query(Survey).filter(Survey.title == SURVEY_TITLE).first()
        if existing:
            print(f"ℹ️  Demo survey already exists (id={existing.id}). Nothing to do.")
            return

        service = SurveyService(uow)

        # ── Create Survey (draft) ────────────────────────────
        survey = service.create_survey(SurveyCreate(
            title=SURVEY_TITLE,
            description="Short demo survey used to try out submission and live results.",
            questions=[
                {
                    "text": text,
                    "order": order,
                    "is_required": required,
                    "options": [
                        {"text": option, "order": opt_order}
                        for opt_order, option in enumerate(options, start=1)
                    ],
                }
                for order, (text, required, options) in enumerate(QUESTIONS, start=1)
            ],
        ))

        # ── Activate for 30 days ─────────────────────────────
        now = datetime.now(timezone.utc)
        service.activate_survey(survey.id, end_date=now + timedelta(days=30))

        print(f"✅ Demo survey created and activated (id={survey.id})")
        print(f"   {len(QUESTIONS)} questions, open until {(now + timedelta(days=30)).date()}")

    except Exception as e:
        print(f"❌ Error: {e}")
        import traceback; traceback.print_exc()
        uow.rollback()
    finally:
        db.close()


if __name__ == "__main__":
    run()
