import uuid
from datetime import datetime, timedelta, timezone

import pytest

from app.core.exceptions import (
    DuplicateAnswerError,
    DuplicateParticipantError,
    InvalidOptionError,
    MissingRequiredAnswerError,
    NotAcceptingError,
    NotFoundError,
    UnknownQuestionError,
)
from app.models.response import Response
from app.schemas.response import SubmitResponseRequest
from app.services.response_service import ResponseService
from app.services.survey_service import SurveyService

TWO_QUESTIONS = [
    ("Favourite colour?", True, ["Red", "Blue"]),
    ("Favourite season?", False, ["Summer", "Winter", "Autumn"]),
]


def _request(survey, answers, participant_id=None) -> SubmitResponseRequest:
    return SubmitResponseRequest(
        survey_id=survey.id,
        participant_id=participant_id,
        answers=[
            {"question_id": question_id, "selected_option_id": option_id}
            for question_id, option_id in answers
        ],
    )


def _first_choice(survey, index=0):
    question = survey.questions[index]
    return question.id, question.options[0].id


def _stored_responses(uow):
    return uow.db.query(Response).count()


def test_submit_returns_new_unique_ids(uow, make_survey):
    survey = make_survey(questions=TWO_QUESTIONS)
    service = ResponseService(uow)

    first = service.submit_response(_request(survey, [_first_choice(survey)]))
    second = service.submit_response(_request(survey, [_first_choice(survey)]))

    assert isinstance(first, uuid.UUID)
    assert first != second
    assert _stored_responses(uow) == 2


def test_submit_persists_answers_and_ip(uow, make_survey):
    survey = make_survey(questions=TWO_QUESTIONS)
    answers = [_first_choice(survey, 0), _first_choice(survey, 1)]

    response_id = ResponseService(uow).submit_response(
        _request(survey, answers, participant_id="alice"), ip_address="192.168.1.5"
    )

    stored = uow.db.get(Response, response_id)
    assert stored.participant_id == "alice"
    assert stored.ip_address == "192.168.1.5"
    assert {(a.question_id, a.selected_option_id) for a in stored.answers} == set(answers)


def test_unknown_survey(uow):
    request = SubmitResponseRequest(
        survey_id=uuid.uuid4(),
        answers=[{"question_id": uuid.uuid4(), "selected_option_id": uuid.uuid4()}],
    )
    with pytest.raises(NotFoundError):
        ResponseService(uow).submit_response(request)


def test_draft_survey_not_accepting(uow, make_survey):
    survey = make_survey(activate=False)
    with pytest.raises(NotAcceptingError):
        ResponseService(uow).submit_response(_request(survey, [_first_choice(survey)]))


def test_closed_survey_not_accepting(uow, make_survey):
    survey = make_survey()
    SurveyService(uow).close_survey(survey.id)
    with pytest.raises(NotAcceptingError):
        ResponseService(uow).submit_response(_request(survey, [_first_choice(survey)]))
    assert _stored_responses(uow) == 0


def test_expired_survey_not_accepting(uow, make_survey):
    survey = make_survey(end_date=datetime.now(timezone.utc) - timedelta(minutes=1))
    with pytest.raises(NotAcceptingError):
        ResponseService(uow).submit_response(_request(survey, [_first_choice(survey)]))


def test_duplicate_participant(uow, make_survey):
    survey = make_survey()
    service = ResponseService(uow)
    service.submit_response(_request(survey, [_first_choice(survey)], participant_id="bob"))

    with pytest.raises(DuplicateParticipantError) as exc_info:
        service.submit_response(_request(survey, [_first_choice(survey)], participant_id="bob"))

    assert exc_info.value.participant_id == "bob"
    assert _stored_responses(uow) == 1


def test_same_participant_allowed_on_another_survey(uow, make_survey):
    first = make_survey(title="First")
    second = make_survey(title="Second")
    service = ResponseService(uow)

    service.submit_response(_request(first, [_first_choice(first)], participant_id="bob"))
    service.submit_response(_request(second, [_first_choice(second)], participant_id="bob"))

    assert _stored_responses(uow) == 2


@pytest.mark.parametrize("participant_id", [None, ""])
def test_anonymous_submissions_never_duplicate(uow, make_survey, participant_id):
    survey = make_survey()
    service = ResponseService(uow)
    for _ in range(3):
        service.submit_response(
            _request(survey, [_first_choice(survey)], participant_id=participant_id)
        )
    assert _stored_responses(uow) == 3


def test_missing_required_answer(uow, make_survey):
    survey = make_survey(questions=TWO_QUESTIONS)
    required = survey.questions[0]

    with pytest.raises(MissingRequiredAnswerError) as exc_info:
        ResponseService(uow).submit_response(_request(survey, [_first_choice(survey, 1)]))

    assert exc_info.value.question_id == required.id
    assert _stored_responses(uow) == 0


def test_first_missing_required_question_is_reported(uow, make_survey):
    survey = make_survey(questions=[
        ("First?", True, ["A", "B"]),
        ("Second?", True, ["A", "B"]),
        ("Third?", False, ["A", "B"]),
    ])
    with pytest.raises(MissingRequiredAnswerError) as exc_info:
        ResponseService(uow).submit_response(_request(survey, [_first_choice(survey, 2)]))
    assert exc_info.value.question_text == "First?"


def test_optional_questions_may_be_skipped(uow, make_survey):
    survey = make_survey(questions=TWO_QUESTIONS)
    ResponseService(uow).submit_response(_request(survey, [_first_choice(survey, 0)]))
    assert _stored_responses(uow) == 1


def test_unknown_question(uow, make_survey):
    survey = make_survey()
    stray_question = uuid.uuid4()
    answers = [_first_choice(survey), (stray_question, uuid.uuid4())]

    with pytest.raises(UnknownQuestionError) as exc_info:
        ResponseService(uow).submit_response(_request(survey, answers))

    assert exc_info.value.question_id == stray_question


def test_option_from_other_question_is_invalid(uow, make_survey):
    survey = make_survey(questions=TWO_QUESTIONS)
    colour = survey.questions[0]
    season_option = survey.questions[1].options[0]

    with pytest.raises(InvalidOptionError) as exc_info:
        ResponseService(uow).submit_response(
            _request(survey, [(colour.id, season_option.id)])
        )

    assert exc_info.value.question_id == colour.id
    assert exc_info.value.option_id == season_option.id


def test_same_question_twice(uow, make_survey):
    survey = make_survey()
    question = survey.questions[0]
    answers = [(question.id, question.options[0].id), (question.id, question.options[1].id)]

    with pytest.raises(DuplicateAnswerError):
        ResponseService(uow).submit_response(_request(survey, answers))

    assert _stored_responses(uow) == 0


def test_not_accepting_checked_before_participant(uow, make_survey):
    survey = make_survey()
    service = ResponseService(uow)
    service.submit_response(_request(survey, [_first_choice(survey)], participant_id="carol"))
    SurveyService(uow).close_survey(survey.id)

    with pytest.raises(NotAcceptingError):
        service.submit_response(_request(survey, [_first_choice(survey)], participant_id="carol"))


def test_duplicate_participant_checked_before_answers(uow, make_survey):
    survey = make_survey(questions=TWO_QUESTIONS)
    service = ResponseService(uow)
    service.submit_response(_request(survey, [_first_choice(survey)], participant_id="dave"))

    with pytest.raises(DuplicateParticipantError):
        service.submit_response(
            _request(survey, [_first_choice(survey, 1)], participant_id="dave")
        )
