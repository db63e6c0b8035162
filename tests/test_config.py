"""Tests for the config module."""
import pytest
from trivia_quiz.config import AppConfig, QuizConfig, load_config, parse_config
from trivia_quiz.errors import ConfigurationError


def test_defaults_when_file_missing(tmp_path):
    config = load_config(str(tmp_path / "missing.yaml"))
    assert isinstance(config, AppConfig)
    assert config.quiz.question_limit == 10
    assert config.quiz.time_per_question == 60.0
    assert config.quiz.max_attempts == 2
    assert config.unlocks == []


def test_load_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "quiz:\n"
        "  question_limit: 4\n"
        "  time_per_question: 15\n"
        "  max_attempts: 3\n"
        "cooldown:\n"
        "  duration: 2.5\n"
        "  speed_multiplier: 2\n"
        "content:\n"
        "  path: other.json\n"
        "speech:\n"
        "  enabled: true\n"
        "unlocks:\n"
        "  - {name: Savanna, threshold: 3}\n"
    )
    config = load_config(str(path))
    assert config.quiz == QuizConfig(question_limit=4, time_per_question=15.0, max_attempts=3)
    assert config.cooldown_duration == 2.5
    assert config.speed_multiplier == 2.0
    assert config.content_path == "other.json"
    assert config.speech.enabled is True
    assert config.unlocks[0].name == "Savanna"
    assert config.unlocks[0].threshold == 3


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert load_config(str(path)).quiz.question_limit == 10


@pytest.mark.parametrize("quiz", [
    {"question_limit": 0},
    {"time_per_question": 0},
    {"max_attempts": 0},
    {"advance_delay": -1},
    {"question_limit": "many"},
])
def test_invalid_quiz_values(quiz):
    with pytest.raises(ConfigurationError):
        parse_config({"quiz": quiz})


def test_invalid_cooldown():
    with pytest.raises(ConfigurationError):
        parse_config({"cooldown": {"duration": -1}})
    with pytest.raises(ConfigurationError):
        parse_config({"cooldown": {"speed_multiplier": 0}})


def test_invalid_unlock():
    with pytest.raises(ConfigurationError):
        parse_config({"unlocks": [{"threshold": 2}]})


def test_non_mapping_section():
    with pytest.raises(ConfigurationError):
        parse_config({"quiz": [1, 2]})


def test_unparseable_yaml(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("quiz: [unclosed\n")
    with pytest.raises(ConfigurationError):
        load_config(str(path))


def test_quiz_config_validate_returns_self():
    config = QuizConfig()
    assert config.validate() is config
