"""Tests for the console host."""
import itertools
import random
import pytest
from unittest.mock import MagicMock, patch
from trivia_quiz.config import AppConfig, QuizConfig
from trivia_quiz.events import QuizFinished
from trivia_quiz.game import ConsoleGame, GameContext, main
from trivia_quiz.models import Answer, Question, Subject, SubjectCatalog
from trivia_quiz.progress_ledger import UnlockGate
from trivia_quiz.quiz_engine import Phase
from trivia_quiz.selector import QuestionSelector


def make_question(name):
    answers = (Answer(f"right {name}", True),) + tuple(Answer(f"wrong {name} {i}") for i in range(3))
    return Question(f"Question {name}?", answers)


def make_context(transitions=None):
    catalog = SubjectCatalog([
        Subject("pair", "Pair", (make_question("p0"), make_question("p1")), facts=("A fact.",)),
        Subject("single", "Single", (make_question("s0"),)),
    ])
    config = AppConfig(
        quiz=QuizConfig(question_limit=5, time_per_question=30, max_attempts=2),
        cooldown_duration=0.0,
        unlocks=[UnlockGate("Savanna", 1)],
    )
    return GameContext(catalog, config, selector=QuestionSelector(random.Random(5)),
                       transitions=transitions or MagicMock())


def answer_letter(game):
    texts = game.engine.current_answer_texts()
    return "ABCD"[next(i for i, t in enumerate(texts) if t.startswith("right"))]


def scripted(game, inputs):
    """Feed scripted inputs; None means answer correctly."""
    inputs = iter(inputs)

    def listen(*args):
        value = next(inputs)
        return answer_letter(game) if value is None else value
    return listen


def wrong_letter(game):
    texts = game.engine.current_answer_texts()
    rejected = game.engine.rejected_indices()
    return "ABCD"[next(i for i, t in enumerate(texts) if t.startswith("wrong") and i not in rejected)]


@pytest.fixture
def game():
    game_obj = ConsoleGame(make_context(), clock=lambda: 0.0, sleep=MagicMock())
    game_obj.speak = MagicMock()
    return game_obj


def test_context_registers_every_subject():
    context = make_context()
    assert context.ledger.get("pair").label() == "0 / 2"
    assert context.ledger.get("single").label() == "0 / 1"
    assert context.engine.ledger is context.ledger


# --- Commands ---

@pytest.mark.parametrize("text,expected", [
    ("quit", "quit"), ("EXIT", "quit"), ("back", "back"), ("menu.", "back"),
    ("repeat", "repeat"), ("a", None), ("Africa", None),
])
def test_handle_special_commands(game, text, expected):
    assert game.handle_special_commands(text) == expected


# --- Quiz loop ---

def test_run_quiz_all_correct(game):
    game.listen = MagicMock(side_effect=lambda *a: answer_letter(game))
    assert game.run_quiz("pair") is True
    assert game.engine.score() == 2
    assert game.context.ledger.get("pair").points == 2
    assert game.engine.current_phase() is Phase.IDLE


def test_run_quiz_wrong_then_right(game):
    answers = iter(["wrong", "right"])
    game.listen = MagicMock(
        side_effect=lambda *a: wrong_letter(game) if next(answers) == "wrong" else answer_letter(game)
    )
    game.run_quiz("single")
    assert game.engine.score() == 1
    assert game.engine.session_stats()["correct"] == 1


def test_run_quiz_invalid_input_is_reported(game):
    game.listen = MagicMock(side_effect=scripted(game, ["zzz", None]))
    game.run_quiz("single")
    game.speak.assert_any_call("Please choose one of the remaining options, A to D.")
    assert game.engine.score() == 1


def test_run_quiz_quit_aborts(game):
    game.listen = MagicMock(return_value="quit")
    assert game.run_quiz("pair") is False
    assert game.engine.current_phase() is Phase.IDLE
    assert game.engine.score() == 0


def test_run_quiz_back_returns_to_menu(game):
    game.listen = MagicMock(return_value="back")
    assert game.run_quiz("pair") is True
    assert game.engine.current_phase() is Phase.IDLE


def test_run_quiz_repeat(game):
    game.listen = MagicMock(side_effect=scripted(game, ["repeat", None]))
    game.run_quiz("single")
    game.speak.assert_any_call("Question s0?")
    assert game.engine.score() == 1


def test_timer_expiry_discards_late_answer():
    times = itertools.chain([0.0, 0.0, 100.0], itertools.repeat(100.0))
    game = ConsoleGame(make_context(), clock=lambda: next(times), sleep=MagicMock())
    game.speak = MagicMock()
    game.listen = MagicMock(return_value="a")
    assert game.run_quiz("single") is True
    assert game.listen.call_count == 1
    assert game.engine.score() == 0
    assert game.engine.session_stats()["timeout"] == 1


# --- Presentation ---

def test_present_quiz_finished(game):
    game.present(QuizFinished(1, 2, "A fact.", "completed"))
    game.speak.assert_any_call("A fact.")
    game.speak.assert_any_call("Your final score is 1 out of 2")


def test_unlock_is_announced(game):
    game.listen = MagicMock(side_effect=lambda *a: answer_letter(game))
    game.run_quiz("single")
    game.speak.assert_any_call("Unlocked: Savanna!")


# --- Menu and full run ---

def test_choose_subject_by_number(game):
    game.listen = MagicMock(side_effect=["9", "2"])
    assert game.choose_subject() == "single"
    game.speak.assert_any_call("Please pick a number from 1 to 2.")


def test_choose_subject_quit(game):
    game.listen = MagicMock(return_value="quit")
    assert game.choose_subject() is None


def test_run_full_game(game):
    game.listen = MagicMock(side_effect=scripted(game, ["", "2", None, "quit"]))
    assert game.run() == 1
    game.context.transitions.move.assert_any_call("play", False, 1.0)


def test_main_runs_and_quits(tmp_path):
    content = tmp_path / "subjects.yaml"
    content.write_text("subjects:\n  - {id: owl, name: Owl}\n")
    with patch("builtins.input", return_value="quit"):
        assert main(["--config", str(tmp_path / "none.yaml"), "--content", str(content)]) == 0


def test_main_reports_missing_content(tmp_path):
    assert main(["--config", str(tmp_path / "none.yaml"), "--content", str(tmp_path / "x.json")]) == 1
