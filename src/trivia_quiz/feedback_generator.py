"""Feedback Generator: Player-facing text for questions, answers and results."""

import logging
import math
import random
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)

CORRECT_TEMPLATES = [
    "Correct! {reinforcement}",
    "That's right! {reinforcement}",
    "Well done! {reinforcement}",
]

WRONG_TEMPLATES = [
    "Not quite. You have {attempts} {attempt_word} left.",
    "Try again! {attempts} {attempt_word} left.",
]

EXHAUSTED_TEMPLATES = [
    "Out of attempts. On to the next one.",
    "No more tries for this one. Moving on.",
]

TIMEOUT_TEMPLATES = [
    "Time's up!",
    "Out of time! Moving on.",
]

REINFORCEMENTS = [
    "Keep it up!",
    "You're doing well!",
    "Nice one!",
]

OPTION_LABELS = "ABCD"


class FeedbackGenerator:
    """Builds the strings the presentation shows or speaks."""

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def score_text(self, score: int, question_index: int) -> str:
        return f"Score: {score}/{question_index}"

    def final_score_text(self, score: int, question_count: int) -> str:
        return f"Your final score is {score} out of {question_count}"

    def progress_label(self, points: int, max_points: int) -> str:
        return f"{points} / {max_points}"

    def time_text(self, remaining: float) -> str:
        return f"Time left: {math.ceil(max(0.0, remaining))}s"

    def generate_intro(self, question_text: str, question_num: int, total: int) -> str:
        """Generate intro text for a question."""
        return f"Question {question_num} of {total}. {question_text}"

    def format_options(self, answers: Sequence[str], rejected: Sequence[int] = ()) -> List[str]:
        lines = []
        for i, text in enumerate(answers):
            label = OPTION_LABELS[i] if i < len(OPTION_LABELS) else str(i + 1)
            mark = " (x)" if i in rejected else ""
            lines.append(f"  {label}) {text}{mark}")
        return lines

    def parse_option(self, text: str) -> Optional[int]:
        """Map 'a'..'d' or '1'..'4' to an option index."""
        choice = text.strip().upper()
        if len(choice) == 1 and choice in OPTION_LABELS:
            return OPTION_LABELS.index(choice)
        if choice.isdigit():
            return int(choice) - 1
        return None

    def correct(self) -> str:
        template = self._rng.choice(CORRECT_TEMPLATES)
        return template.format(reinforcement=self._rng.choice(REINFORCEMENTS))

    def wrong(self, attempts_remaining: int) -> str:
        template = self._rng.choice(WRONG_TEMPLATES)
        attempt_word = "attempt" if attempts_remaining == 1 else "attempts"
        return template.format(attempts=attempts_remaining, attempt_word=attempt_word)

    def resolved(self, outcome: str) -> Optional[str]:
        """Text for a failed resolution; None for a correct one."""
        if outcome == "timeout":
            return self._rng.choice(TIMEOUT_TEMPLATES)
        if outcome == "exhausted":
            return self._rng.choice(EXHAUSTED_TEMPLATES)
        return None

    def generate_session_summary(self, session_stats: dict) -> str:
        """Generate end-of-quiz summary."""
        total = session_stats.get("total_questions", 0)
        correct = session_stats.get("correct", 0)
        exhausted = session_stats.get("exhausted", 0)
        timeout = session_stats.get("timeout", 0)

        if total == 0:
            return "There were no questions to answer this time."

        pct = correct / total * 100
        summary = (
            f"You answered {correct} of {total} questions correctly. "
            f"{exhausted} ran out of attempts and {timeout} ran out of time. "
        )
        if pct >= 80:
            summary += "Outstanding!"
        elif pct >= 60:
            summary += "Good work! Keep practicing."
        else:
            summary += "Keep playing, you'll improve with practice!"
        return summary
