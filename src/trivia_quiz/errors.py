"""Errors: Exception types raised by the quiz core and its loaders."""


class QuizError(Exception):
    """Base class for all quiz errors."""


class ConfigurationError(QuizError, ValueError):
    """Raised for invalid quiz configuration (e.g. a zero question limit)."""


class ContentError(ConfigurationError):
    """Raised when subject content cannot be loaded or is malformed."""


class InsufficientAnswers(QuizError):
    """Raised when a question lacks the answers needed for a full answer set."""

    def __init__(self, question_text: str, correct: int, incorrect: int):
        super().__init__(
            f"Question '{question_text}' has {correct} correct and {incorrect} "
            f"incorrect answers; need at least 1 and 3."
        )
        self.question_text = question_text
        self.correct = correct
        self.incorrect = incorrect
