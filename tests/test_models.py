"""Tests for the content model."""
import pytest
from trivia_quiz.errors import ConfigurationError
from trivia_quiz.models import Answer, Question, Subject, SubjectCatalog


def test_question_eligibility():
    wrong = [Answer(f"w{i}") for i in range(3)]
    assert Question("q", (Answer("r", True), *wrong)).is_eligible() is True
    assert Question("q", (Answer("r", True), *wrong[:2])).is_eligible() is False
    assert Question("q", tuple(wrong)).is_eligible() is False
    assert Question("q").is_eligible() is False


def test_question_splits_answers():
    right = Answer("r", True)
    wrong = Answer("w")
    question = Question("q", (right, wrong))
    assert question.correct_answers() == [right]
    assert question.incorrect_answers() == [wrong]


def test_questions_compare_by_identity():
    a = Question("same")
    b = Question("same")
    assert a != b
    assert len({a, b}) == 2


def test_credit_flag_defaults_false():
    assert Question("q").credited_once is False


def test_subject_counts_all_questions():
    subject = Subject("s", "S", (Question("a"), Question("b")))
    assert subject.question_count == 2
    assert subject.eligible_questions() == []


def test_catalog_lookup():
    lion = Subject("lion", "Lion")
    catalog = SubjectCatalog([lion])
    assert catalog.get("lion") is lion
    assert "lion" in catalog
    assert len(catalog) == 1
    assert catalog.ids() == ["lion"]


def test_catalog_unknown_subject():
    with pytest.raises(ConfigurationError):
        SubjectCatalog().get("missing")


def test_catalog_duplicate_id():
    with pytest.raises(ConfigurationError):
        SubjectCatalog([Subject("x", "X"), Subject("x", "Other")])
