"""Configuration: Quiz settings and YAML config loading."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import yaml

from .errors import ConfigurationError
from .progress_ledger import UnlockGate

logger = logging.getLogger(__name__)

DEFAULT_QUESTION_LIMIT = 10
DEFAULT_TIME_PER_QUESTION = 60.0
DEFAULT_MAX_ATTEMPTS = 2
DEFAULT_COOLDOWN_DURATION = 5.0
DEFAULT_CONTENT_PATH = "data/subjects.yaml"


@dataclass
class QuizConfig:
    """Settings for one playthrough."""

    question_limit: int = DEFAULT_QUESTION_LIMIT
    time_per_question: float = DEFAULT_TIME_PER_QUESTION
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    advance_delay: float = 0.0

    def validate(self):
        if self.question_limit < 1:
            raise ConfigurationError(f"question_limit must be at least 1, got {self.question_limit}")
        if self.time_per_question <= 0:
            raise ConfigurationError(f"time_per_question must be positive, got {self.time_per_question}")
        if self.max_attempts < 1:
            raise ConfigurationError(f"max_attempts must be at least 1, got {self.max_attempts}")
        if self.advance_delay < 0:
            raise ConfigurationError(f"advance_delay must not be negative, got {self.advance_delay}")
        return self


@dataclass
class SpeechConfig:
    enabled: bool = False
    rate: int = 150
    volume: float = 1.0
    voice_index: int = 0


@dataclass
class AppConfig:
    """Everything read from config.yaml."""

    quiz: QuizConfig = field(default_factory=QuizConfig)
    cooldown_duration: float = DEFAULT_COOLDOWN_DURATION
    speed_multiplier: float = 1.0
    content_path: str = DEFAULT_CONTENT_PATH
    speech: SpeechConfig = field(default_factory=SpeechConfig)
    unlocks: List[UnlockGate] = field(default_factory=list)


def _number(section: dict, key: str, default, kind):
    value = section.get(key, default)
    try:
        return kind(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Invalid value for '{key}': {value!r}") from None


def _section(config: dict, name: str) -> dict:
    section = config.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"Config section '{name}' must be a mapping")
    return section


def parse_config(config: dict) -> AppConfig:
    """Build an AppConfig from an already-parsed mapping."""
    quiz_cfg = _section(config, "quiz")
    cooldown_cfg = _section(config, "cooldown")
    content_cfg = _section(config, "content")
    speech_cfg = _section(config, "speech")

    quiz = QuizConfig(
        question_limit=_number(quiz_cfg, "question_limit", DEFAULT_QUESTION_LIMIT, int),
        time_per_question=_number(quiz_cfg, "time_per_question", DEFAULT_TIME_PER_QUESTION, float),
        max_attempts=_number(quiz_cfg, "max_attempts", DEFAULT_MAX_ATTEMPTS, int),
        advance_delay=_number(quiz_cfg, "advance_delay", 0.0, float),
    ).validate()

    cooldown_duration = _number(cooldown_cfg, "duration", DEFAULT_COOLDOWN_DURATION, float)
    if cooldown_duration < 0:
        raise ConfigurationError(f"cooldown duration must not be negative, got {cooldown_duration}")
    speed_multiplier = _number(cooldown_cfg, "speed_multiplier", 1.0, float)
    if speed_multiplier <= 0:
        raise ConfigurationError(f"speed_multiplier must be positive, got {speed_multiplier}")

    speech = SpeechConfig(
        enabled=bool(speech_cfg.get("enabled", False)),
        rate=_number(speech_cfg, "rate", 150, int),
        volume=_number(speech_cfg, "volume", 1.0, float),
        voice_index=_number(speech_cfg, "voice_index", 0, int),
    )

    unlocks = []
    for item in config.get("unlocks") or []:
        if not isinstance(item, dict) or "name" not in item:
            raise ConfigurationError(f"Invalid unlock entry: {item!r}")
        unlocks.append(UnlockGate(str(item["name"]), _number(item, "threshold", 0, int)))

    return AppConfig(
        quiz=quiz,
        cooldown_duration=cooldown_duration,
        speed_multiplier=speed_multiplier,
        content_path=str(content_cfg.get("path", DEFAULT_CONTENT_PATH)),
        speech=speech,
        unlocks=unlocks,
    )


def load_config(path: Optional[str] = None) -> AppConfig:
    """Load config from a YAML file. A missing file yields the defaults."""
    config = {}
    if path:
        config_path = Path(path)
        if config_path.exists():
            with open(config_path) as f:
                try:
                    config = yaml.safe_load(f) or {}
                except yaml.YAMLError as e:
                    raise ConfigurationError(f"Cannot parse {config_path}: {e}") from e
            logger.info(f"Loaded config from {config_path}")
        else:
            logger.info(f"No config at {config_path}, using defaults")
    if not isinstance(config, dict):
        raise ConfigurationError("Config root must be a mapping")
    return parse_config(config)
