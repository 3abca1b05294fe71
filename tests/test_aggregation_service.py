import uuid

import pytest

from app.core.exceptions import NotFoundError
from app.models.survey import Survey
from app.schemas.response import SubmitResponseRequest
from app.services.aggregation_service import AggregationService, build_results, percentage
from app.services.response_service import ResponseService


def _two_option_survey():
    survey = Survey("Poll")
    question = survey.add_question("Pick one", order=0)
    option_a = question.add_option("A", 0)
    option_b = question.add_option("B", 1)
    return survey, option_a, option_b


@pytest.mark.parametrize(
    "count,total,expected",
    [
        (7, 10, 70.0),
        (3, 10, 30.0),
        (1, 3, 33.33),
        (2, 3, 66.67),
        (1, 32, 3.13),  # 3.125 rounds half away from zero
        (0, 5, 0.0),
        (5, 5, 100.0),
    ],
)
def test_percentage_rounding(count, total, expected):
    assert percentage(count, total) == expected


def test_percentage_is_zero_without_responses():
    assert percentage(4, 0) == 0.0


def test_build_results_counts_and_percentages():
    survey, option_a, option_b = _two_option_survey()

    results = build_results(survey, 10, {option_a.id: 7, option_b.id: 3})

    assert results.total_responses == 10
    assert results.survey_title == "Poll"
    options = results.questions[0].options
    assert [(o.option_text, o.count, o.percentage) for o in options] == [
        ("A", 7, 70.0),
        ("B", 3, 30.0),
    ]


def test_build_results_zero_total_ignores_counts():
    survey, option_a, _ = _two_option_survey()
    results = build_results(survey, 0, {option_a.id: 3})
    assert all(o.percentage == 0 for o in results.questions[0].options)


def test_build_results_missing_option_counts_as_zero():
    survey, option_a, option_b = _two_option_survey()
    results = build_results(survey, 4, {option_a.id: 4})
    by_id = {o.option_id: o for o in results.questions[0].options}
    assert by_id[option_b.id].count == 0
    assert by_id[option_b.id].percentage == 0.0


def test_build_results_orders_questions_and_options():
    survey = Survey("Ordering")
    later = survey.add_question("Later", order=5)
    later.add_option("Z", 9)
    later.add_option("Y", 1)
    earlier = survey.add_question("Earlier", order=1)
    earlier.add_option("Only", 0)

    results = build_results(survey, 0, {})

    assert [q.question_text for q in results.questions] == ["Earlier", "Later"]
    assert [o.option_text for o in results.questions[1].options] == ["Y", "Z"]


def test_percentages_are_not_normalized():
    survey = Survey("Thirds")
    question = survey.add_question("Pick", order=0)
    ids = [question.add_option(text, i).id for i, text in enumerate(["A", "B", "C"])]

    results = build_results(survey, 3, {option_id: 1 for option_id in ids})

    assert sum(o.percentage for o in results.questions[0].options) == pytest.approx(99.99)


def test_service_unknown_survey(uow):
    with pytest.raises(NotFoundError):
        AggregationService(uow).get_survey_results(uuid.uuid4())


def test_service_counts_from_storage(uow, make_survey):
    survey = make_survey()
    question = survey.questions[0]
    red, blue = question.options
    submissions = ResponseService(uow)
    for option in (red, red, blue):
        submissions.submit_response(SubmitResponseRequest(
            survey_id=survey.id,
            answers=[{"question_id": question.id, "selected_option_id": option.id}],
        ))

    service = AggregationService(uow)
    results = service.get_survey_results(survey.id)

    assert service.get_response_count(survey.id) == 3
    assert results.total_responses == 3
    assert [(o.option_text, o.count, o.percentage) for o in results.questions[0].options] == [
        ("Red", 2, 66.67),
        ("Blue", 1, 33.33),
    ]


def test_service_count_for_unknown_survey_is_zero(uow):
    assert AggregationService(uow).get_response_count(uuid.uuid4()) == 0
