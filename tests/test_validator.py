import pytest

from app.constants import (
    ISSUE_BAD_URL,
    ISSUE_CHOICE_COUNT,
    ISSUE_DUPLICATE_CHOICES,
    ISSUE_EMPTY_TEXT,
    ISSUE_NO_ANSWER,
    ISSUE_NO_CREATOR,
)
from app.models.quiz import Question, RelatedArticle
from app.services.validator import validate, validate_all


def test_complete_question_is_valid(make_question):
    res = validate(make_question())
    assert res.valid is True
    assert res.issues == []
    assert res.status == "ok"


@pytest.mark.parametrize(
    "changes, expected",
    [
        ({"text": "   "}, ISSUE_EMPTY_TEXT),
        ({"choices": ["only one"], "correct_index": 0}, ISSUE_CHOICE_COUNT),
        ({"choices": [str(i) for i in range(7)], "correct_index": 0}, ISSUE_CHOICE_COUNT),
        ({"choices": ["A", "A", "B"], "correct_index": 1}, ISSUE_DUPLICATE_CHOICES),
        ({"correct_index": None}, ISSUE_NO_ANSWER),
        ({"correct_index": 5}, ISSUE_NO_ANSWER),
        ({"creator": ""}, ISSUE_NO_CREATOR),
        ({"related_article": RelatedArticle(title="x", url="not a url")}, ISSUE_BAD_URL),
    ],
)
def test_each_missing_field_flips_only_its_check(make_question, changes, expected):
    res = validate(make_question(**changes))
    assert res.valid is False
    assert res.issues == [expected]
    assert res.status == "missing"


def test_bounds_are_inclusive(make_question):
    assert validate(make_question(choices=["a", "b"], correct_index=0)).valid
    assert validate(make_question(choices=list("abcdef"), correct_index=5)).valid


def test_missing_article_or_empty_url_is_fine(make_question):
    assert validate(make_question(related_article=None)).valid
    assert validate(make_question(related_article=RelatedArticle(title="t"))).valid


def test_all_failures_reported_in_rule_order():
    q = Question(id="x", date="2025-03-12", text="", choices=[], creator="")
    res = validate(q)
    assert res.issues == [
        ISSUE_EMPTY_TEXT,
        ISSUE_CHOICE_COUNT,
        ISSUE_NO_ANSWER,
        ISSUE_NO_CREATOR,
    ]


def test_free_text_skips_choice_count_and_needs_answer():
    q = Question(
        id="ft",
        date="2025-03-12",
        question_type="free-text",
        text="Capital of Korea?",
        answer="",
        creator="desk",
    )
    assert validate(q).issues == [ISSUE_NO_ANSWER]
    assert validate(q.copy(answer="Seoul")).valid


def test_validate_all_returns_positions_of_invalid_only(make_question):
    qs = [make_question(), make_question(text=""), make_question(), make_question(creator=" ")]
    assert validate_all(qs) == [(1, [ISSUE_EMPTY_TEXT]), (3, [ISSUE_NO_CREATOR])]
