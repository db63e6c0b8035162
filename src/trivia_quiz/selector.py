"""Randomized Selector: Picks unused eligible questions and balanced answer sets."""

import logging
import random
from typing import Collection, List, Optional, Sequence, TypeVar

from .errors import InsufficientAnswers
from .models import MIN_INCORRECT_ANSWERS, Answer, Question, Subject

logger = logging.getLogger(__name__)

ANSWER_SET_SIZE = 4

T = TypeVar("T")


class QuestionSelector:
    """Selects questions and answer sets using an injectable random source.

    Shuffles are full Fisher-Yates permutations (``random.Random.shuffle``),
    so every ordering of a candidate pool is equally likely.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def shuffle(self, items: Sequence[T]) -> List[T]:
        """Return a uniformly shuffled copy of *items*."""
        shuffled = list(items)
        self._rng.shuffle(shuffled)
        return shuffled

    def pick_question(self, subject: Subject, used: Collection[Question]) -> Optional[Question]:
        """Return a random eligible question not in *used*, or None."""
        candidates = [q for q in subject.questions if q not in used]
        if not candidates:
            return None
        for question in self.shuffle(candidates):
            if question.is_eligible():
                return question
        logger.debug(f"No eligible question among {len(candidates)} unused in '{subject.subject_id}'")
        return None

    def pick_answer_set(self, question: Question) -> List[Answer]:
        """Return 1 correct and 3 incorrect answers of *question* in random order."""
        correct = question.correct_answers()
        incorrect = question.incorrect_answers()
        if not correct or len(incorrect) < MIN_INCORRECT_ANSWERS:
            raise InsufficientAnswers(question.text, len(correct), len(incorrect))

        answers = [self._rng.choice(correct)]
        answers.extend(self._rng.sample(incorrect, ANSWER_SET_SIZE - 1))
        return self.shuffle(answers)

    def pick_fact(self, subject: Subject) -> Optional[str]:
        if not subject.facts:
            return None
        return self._rng.choice(subject.facts)
