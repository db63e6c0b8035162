"""Events: Notifications raised by the quiz core and a small dispatcher for them."""

import itertools
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuestionShown:
    text: str
    answers: Tuple[str, ...]
    question_index: int
    question_limit: int
    score: int


@dataclass(frozen=True)
class AnswerRejected:
    """A wrong answer was chosen and attempts remain."""

    index: int
    attempts_remaining: int


@dataclass(frozen=True)
class AnswerAccepted:
    index: int


@dataclass(frozen=True)
class QuestionResolved:
    outcome: str  # "correct", "exhausted" or "timeout"
    question_index: int
    score: int


@dataclass(frozen=True)
class QuizFinished:
    score: int
    question_count: int
    fact_text: Optional[str] = None
    reason: str = "completed"


@dataclass(frozen=True)
class SessionAborted:
    score: int
    question_index: int


@dataclass(frozen=True)
class ProgressChanged:
    subject_id: str
    old_points: int
    new_points: int


@dataclass(frozen=True)
class AnswerSelected:
    """Player action routed from the presentation to the engine."""

    index: int


Listener = Callable[[object], None]


class EventDispatcher:
    """Delivers events to subscribed listeners.

    ``subscribe`` returns an integer handle; pass it to ``unsubscribe``.
    A listener that raises is logged and skipped, the others still run.
    """

    def __init__(self):
        self._listeners: Dict[int, Listener] = {}
        self._handles = itertools.count(1)

    def subscribe(self, listener: Listener) -> int:
        handle = next(self._handles)
        self._listeners[handle] = listener
        return handle

    def unsubscribe(self, handle: int) -> bool:
        return self._listeners.pop(handle, None) is not None

    def emit(self, event) -> None:
        for listener in list(self._listeners.values()):
            try:
                listener(event)
            except Exception as e:
                logger.error(f"Listener failed on {type(event).__name__}: {e}")

    def __len__(self) -> int:
        return len(self._listeners)
