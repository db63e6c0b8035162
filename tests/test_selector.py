"""Tests for the QuestionSelector module."""
import random
import pytest
from trivia_quiz.errors import InsufficientAnswers
from trivia_quiz.models import Answer, Question, Subject
from trivia_quiz.selector import QuestionSelector


def make_question(text, correct=1, incorrect=3):
    answers = [Answer(f"{text} right {i}", True) for i in range(correct)]
    answers += [Answer(f"{text} wrong {i}", False) for i in range(incorrect)]
    return Question(text, tuple(answers))


@pytest.fixture
def selector():
    return QuestionSelector(random.Random(42))


def test_pick_question_from_empty_subject(selector):
    assert selector.pick_question(Subject("empty", "Empty"), set()) is None


def test_pick_question_skips_used(selector):
    q1, q2 = make_question("q1"), make_question("q2")
    subject = Subject("s", "S", (q1, q2))
    for _ in range(20):
        assert selector.pick_question(subject, {q1}) is q2


def test_pick_question_all_used(selector):
    q1 = make_question("q1")
    subject = Subject("s", "S", (q1,))
    assert selector.pick_question(subject, {q1}) is None


def test_pick_question_skips_ineligible(selector):
    good = make_question("good")
    too_few_wrong = make_question("few", incorrect=2)
    no_correct = make_question("none", correct=0, incorrect=5)
    subject = Subject("s", "S", (too_few_wrong, good, no_correct))
    for _ in range(20):
        assert selector.pick_question(subject, set()) is good


def test_pick_question_none_eligible(selector):
    subject = Subject("s", "S", (make_question("a", incorrect=1), make_question("b", correct=0)))
    assert selector.pick_question(subject, set()) is None


def test_pick_question_reaches_every_candidate(selector):
    questions = tuple(make_question(f"q{i}") for i in range(5))
    subject = Subject("s", "S", questions)
    seen = {selector.pick_question(subject, set()) for _ in range(200)}
    assert seen == set(questions)


def test_answer_set_has_one_correct_and_three_wrong(selector):
    question = make_question("q", correct=2, incorrect=6)
    for _ in range(50):
        answers = selector.pick_answer_set(question)
        assert len(answers) == 4
        assert sum(a.is_correct for a in answers) == 1
        assert len({id(a) for a in answers}) == 4
        assert all(a in question.answers for a in answers)


def test_answer_set_order_varies(selector):
    question = make_question("q")
    orders = {tuple(a.text for a in selector.pick_answer_set(question)) for _ in range(100)}
    assert len(orders) > 1


def test_answer_set_rejects_ineligible(selector):
    with pytest.raises(InsufficientAnswers):
        selector.pick_answer_set(make_question("q", incorrect=2))
    with pytest.raises(InsufficientAnswers):
        selector.pick_answer_set(make_question("q", correct=0, incorrect=4))


def test_shuffle_is_a_permutation(selector):
    items = list(range(30))
    shuffled = selector.shuffle(items)
    assert sorted(shuffled) == items
    assert items == list(range(30))


def test_shuffle_moves_late_items_to_front(selector):
    # A full shuffle can put any element first, including the last one.
    firsts = {selector.shuffle(list(range(10)))[0] for _ in range(500)}
    assert firsts == set(range(10))


def test_pick_fact(selector):
    assert selector.pick_fact(Subject("s", "S")) is None
    subject = Subject("s", "S", facts=("one", "two"))
    assert selector.pick_fact(subject) in ("one", "two")
