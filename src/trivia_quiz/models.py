"""Content Model: Subjects, questions and answers supplied to the quiz."""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from .errors import ConfigurationError

MIN_CORRECT_ANSWERS = 1
MIN_INCORRECT_ANSWERS = 3


@dataclass(eq=False)
class Answer:
    """A single answer option. Compared by identity."""

    text: str
    is_correct: bool = False


@dataclass(eq=False)
class Question:
    """A multiple-choice question owned by one subject.

    ``credited_once`` is in-memory only. It flips to True the first time the
    question is answered correctly while the process runs and is never saved.
    """

    text: str
    answers: Tuple[Answer, ...] = ()
    credited_once: bool = False

    def correct_answers(self) -> List[Answer]:
        return [a for a in self.answers if a.is_correct]

    def incorrect_answers(self) -> List[Answer]:
        return [a for a in self.answers if not a.is_correct]

    def is_eligible(self) -> bool:
        """True if the question has at least 1 correct and 3 incorrect answers."""
        correct = incorrect = 0
        for answer in self.answers:
            if answer.is_correct:
                correct += 1
            else:
                incorrect += 1
            if correct >= MIN_CORRECT_ANSWERS and incorrect >= MIN_INCORRECT_ANSWERS:
                return True
        return False


@dataclass(eq=False)
class Subject:
    """A quiz topic with its question pool and optional end-of-quiz facts."""

    subject_id: str
    name: str
    questions: Tuple[Question, ...] = ()
    facts: Tuple[str, ...] = ()
    sound_cue: Optional[str] = None

    @property
    def question_count(self) -> int:
        return len(self.questions)

    def eligible_questions(self) -> List[Question]:
        return [q for q in self.questions if q.is_eligible()]


class SubjectCatalog:
    """Ordered, id-keyed collection of subjects."""

    def __init__(self, subjects=()):
        self._subjects: Dict[str, Subject] = {}
        for subject in subjects:
            self.add(subject)

    def add(self, subject: Subject):
        if subject.subject_id in self._subjects:
            raise ConfigurationError(f"Duplicate subject id: {subject.subject_id}")
        self._subjects[subject.subject_id] = subject

    def get(self, subject_id: str) -> Subject:
        try:
            return self._subjects[subject_id]
        except KeyError:
            raise ConfigurationError(f"Unknown subject: {subject_id}") from None

    def ids(self) -> List[str]:
        return list(self._subjects)

    def __contains__(self, subject_id) -> bool:
        return subject_id in self._subjects

    def __iter__(self) -> Iterator[Subject]:
        return iter(self._subjects.values())

    def __len__(self) -> int:
        return len(self._subjects)
