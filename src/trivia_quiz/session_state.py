"""Session State: Runtime fields of one playthrough and its result history."""

import logging
import uuid
from typing import Dict, List, Optional, Set

from .config import QuizConfig
from .models import Answer, Question

logger = logging.getLogger(__name__)

OUTCOME_CORRECT = "correct"
OUTCOME_EXHAUSTED = "exhausted"
OUTCOME_TIMEOUT = "timeout"


class SessionState:
    """Holds the state of a single playthrough.

    A fresh instance is created for every ``start``; nothing here outlives
    the session except what was already credited to the ledger.
    """

    def __init__(self, config: QuizConfig):
        self.session_id = str(uuid.uuid4())
        self.config = config
        self.used_questions: Set[Question] = set()
        self.skipped_questions: Set[Question] = set()
        self.current_question: Optional[Question] = None
        self.current_answers: List[Answer] = []
        self.rejected_indices: Set[int] = set()
        self.attempts_remaining = 0
        self.remaining = 0.0
        self.elapsed = 0.0
        self.score = 0
        self.question_index = 0
        self._results: List[Dict] = []

    def begin_question(self, question: Question, answers: List[Answer]):
        """Make *question* current and reset the per-question counters."""
        self.current_question = question
        self.current_answers = list(answers)
        self.rejected_indices = set()
        self.attempts_remaining = self.config.max_attempts
        self.remaining = float(self.config.time_per_question)
        self.elapsed = 0.0
        self.used_questions.add(question)

    def clear_question(self):
        self.current_question = None
        self.current_answers = []
        self.rejected_indices = set()

    def record_result(self, outcome: str):
        """Record the resolution of the current question."""
        question = self.current_question
        self._results.append({
            "session_id": self.session_id,
            "question": question.text if question else "",
            "outcome": outcome,
            "attempts_used": self.config.max_attempts - self.attempts_remaining,
            "time_taken": self.elapsed,
        })

    def get_stats(self) -> dict:
        """Summary of the resolved questions so far."""
        total = len(self._results)
        correct = sum(1 for r in self._results if r["outcome"] == OUTCOME_CORRECT)
        exhausted = sum(1 for r in self._results if r["outcome"] == OUTCOME_EXHAUSTED)
        timeout = sum(1 for r in self._results if r["outcome"] == OUTCOME_TIMEOUT)
        avg_time = sum(r["time_taken"] for r in self._results) / total if total > 0 else 0.0

        return {
            "session_id": self.session_id,
            "total_questions": total,
            "correct": correct,
            "exhausted": exhausted,
            "timeout": timeout,
            "score": self.score,
            "avg_time": avg_time,
        }

    def get_history(self) -> List[Dict]:
        return list(self._results)
