import uuid

import pytest

from app.core.exceptions import DuplicateAnswerError
from app.models.response import Response


def test_response_captures_submission_details():
    survey_id = uuid.uuid4()
    response = Response(survey_id, participant_id="p-1", ip_address="10.0.0.1")

    assert response.survey_id == survey_id
    assert response.participant_id == "p-1"
    assert response.ip_address == "10.0.0.1"
    assert response.submitted_at is not None
    assert response.answers == []


def test_add_answer_links_to_response():
    response = Response(uuid.uuid4())
    question_id, option_id = uuid.uuid4(), uuid.uuid4()

    answer = response.add_answer(question_id, option_id)

    assert answer.response_id == response.id
    assert answer.question_id == question_id
    assert answer.selected_option_id == option_id
    assert response.answers == [answer]


def test_second_answer_for_same_question_rejected():
    response = Response(uuid.uuid4())
    question_id = uuid.uuid4()
    response.add_answer(question_id, uuid.uuid4())

    with pytest.raises(DuplicateAnswerError) as exc_info:
        response.add_answer(question_id, uuid.uuid4())

    assert exc_info.value.question_id == question_id
    assert len(response.answers) == 1
