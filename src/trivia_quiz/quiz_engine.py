"""Quiz Engine: Drives one playthrough of a subject's quiz.

The engine is advanced only by ``start``, ``tick`` and ``submit_answer``
(plus ``abort`` for the back button). It never blocks and never reads the
clock; all timing comes from the ``dt`` passed to ``tick``.
"""

import logging
from enum import Enum
from typing import List, Optional

from .config import DEFAULT_COOLDOWN_DURATION, QuizConfig
from .errors import ConfigurationError, InsufficientAnswers
from .events import (
    AnswerAccepted,
    AnswerRejected,
    AnswerSelected,
    EventDispatcher,
    QuestionResolved,
    QuestionShown,
    QuizFinished,
    SessionAborted,
)
from .models import Subject, SubjectCatalog
from .ports import (
    CUE_CORRECT,
    CUE_MUSIC_START,
    CUE_MUSIC_STOP,
    CUE_VICTORY,
    CUE_WRONG,
    TRIGGER_QUIZ_END,
    TRIGGER_SELECT,
    AudioCues,
    SceneTransitions,
)
from .progress_ledger import ProgressLedger
from .selector import QuestionSelector
from .session_state import OUTCOME_CORRECT, OUTCOME_EXHAUSTED, OUTCOME_TIMEOUT, SessionState

logger = logging.getLogger(__name__)

FINISH_COMPLETED = "completed"
FINISH_NO_QUESTIONS = "no_questions"
FINISH_NO_ELIGIBLE = "no_eligible_questions"
FINISH_INVALID_CONFIG = "invalid_config"


class Phase(Enum):
    IDLE = "idle"
    QUESTION_ACTIVE = "question_active"
    AWAITING_NEXT = "awaiting_next"
    FINISHED = "finished"
    COOLDOWN = "cooldown"


class QuizSessionEngine:
    """Session state machine: question sequencing, attempts, timer, scoring.

    Phases run Idle -> QuestionActive -> AwaitingNext -> (QuestionActive | Finished)
    -> Cooldown -> Idle. ``question_index`` counts resolved questions, so
    ``0 <= score <= question_index <= question_limit`` holds between calls.
    """

    def __init__(
        self,
        catalog: SubjectCatalog,
        ledger: ProgressLedger,
        selector: Optional[QuestionSelector] = None,
        transitions: Optional[SceneTransitions] = None,
        audio: Optional[AudioCues] = None,
        default_config: Optional[QuizConfig] = None,
        cooldown_duration: float = DEFAULT_COOLDOWN_DURATION,
        speed_multiplier: float = 1.0,
    ):
        self.catalog = catalog
        self.ledger = ledger
        self.selector = selector or QuestionSelector()
        self.transitions = transitions or SceneTransitions()
        self.audio = audio or AudioCues()
        self.default_config = default_config or QuizConfig()
        self.cooldown_duration = cooldown_duration
        self.speed_multiplier = speed_multiplier
        self.events = EventDispatcher()

        self._phase = Phase.IDLE
        self._state: Optional[SessionState] = None
        self._subject: Optional[Subject] = None
        self._advance_remaining = 0.0
        self._cooldown_remaining = 0.0
        self._finish_reason: Optional[str] = None
        self._fact: Optional[str] = None
        self._ledger_handle = ledger.subscribe(self.events.emit)

    # --- Stimuli ---

    def start(self, subject_id: str, config: Optional[QuizConfig] = None) -> Phase:
        """Start a playthrough, discarding any session in progress."""
        if config is None:
            config = self.default_config
        if self._phase in (Phase.QUESTION_ACTIVE, Phase.AWAITING_NEXT):
            logger.info("Discarding in-flight session for a new start.")

        self._state = SessionState(config)
        self._subject = None
        self._advance_remaining = 0.0
        self._cooldown_remaining = 0.0
        self._finish_reason = None
        self._fact = None

        try:
            config.validate()
            subject = self.catalog.get(subject_id)
        except ConfigurationError as e:
            logger.warning(f"Cannot start quiz '{subject_id}': {e}")
            self._finish(FINISH_INVALID_CONFIG)
            return self._phase

        self._subject = subject
        self.ledger.get_or_create(subject)
        logger.info(
            f"Starting quiz '{subject.subject_id}' ({subject.question_count} questions, "
            f"limit {config.question_limit}, {config.time_per_question}s, "
            f"{config.max_attempts} attempts)"
        )

        self._cue(CUE_MUSIC_STOP)
        if subject.sound_cue:
            self._cue(subject.sound_cue)
        self._transition(TRIGGER_SELECT, reverse=False)
        self._cue(CUE_MUSIC_START)

        if subject.question_count == 0:
            logger.warning(f"Subject '{subject.subject_id}' has no questions.")
            self._finish(FINISH_NO_QUESTIONS)
        else:
            self._next_question()
        return self._phase

    def tick(self, dt: float) -> Phase:
        """Advance the active timer by *dt* seconds."""
        dt = max(0.0, float(dt))
        phase = self._phase
        if phase is Phase.QUESTION_ACTIVE:
            state = self._state
            state.elapsed += dt
            state.remaining -= dt
            if state.remaining <= 0:
                state.remaining = 0.0
                logger.info(f"Time is up on question {state.question_index + 1}.")
                self._cue(CUE_WRONG)
                self._resolve(OUTCOME_TIMEOUT)
        elif phase is Phase.AWAITING_NEXT:
            self._advance_remaining -= dt
            if self._advance_remaining <= 0:
                self._next_question()
        elif phase in (Phase.FINISHED, Phase.COOLDOWN):
            if phase is Phase.FINISHED:
                self._phase = Phase.COOLDOWN
                self._cooldown_remaining = self.cooldown_duration
            self._cooldown_remaining -= dt
            if self._cooldown_remaining <= 0:
                self._return_to_idle()
        return self._phase

    def submit_answer(self, index: int) -> bool:
        """Submit the option at *index*. Returns False if the submission was ignored."""
        if self._phase is not Phase.QUESTION_ACTIVE:
            logger.debug(f"Ignoring answer {index}: phase is {self._phase.value}")
            return False
        state = self._state
        if not isinstance(index, int) or not 0 <= index < len(state.current_answers):
            logger.debug(f"Ignoring answer {index}: out of range")
            return False
        if index in state.rejected_indices:
            logger.debug(f"Ignoring answer {index}: already rejected")
            return False

        if state.current_answers[index].is_correct:
            state.score += 1
            self._cue(CUE_CORRECT)
            self.ledger.credit(self._subject, state.current_question)
            self.events.emit(AnswerAccepted(index))
            self._resolve(OUTCOME_CORRECT)
            return True

        state.attempts_remaining -= 1
        state.rejected_indices.add(index)
        self._cue(CUE_WRONG)
        if state.attempts_remaining <= 0:
            self._resolve(OUTCOME_EXHAUSTED)
        else:
            self.events.emit(AnswerRejected(index, state.attempts_remaining))
        return True

    def on_answer_selected(self, event: AnswerSelected) -> bool:
        """Routed handler for the presentation's answer selection."""
        return self.submit_answer(event.index)

    def abort(self) -> bool:
        """Leave the quiz (back button). Returns False if already idle."""
        if self._phase is Phase.IDLE:
            return False
        state = self._state
        logger.info(f"Quiz aborted at question {state.question_index} with score {state.score}.")
        state.clear_question()
        self._phase = Phase.IDLE
        self.events.emit(SessionAborted(state.score, state.question_index))
        self._cue(CUE_MUSIC_STOP)
        self._transition(TRIGGER_SELECT, reverse=True)
        return True

    def close(self):
        self.ledger.unsubscribe(self._ledger_handle)

    # --- Transitions ---

    def _next_question(self):
        state = self._state
        subject = self._subject
        if (state.question_index >= state.config.question_limit
                or len(state.used_questions) >= subject.question_count):
            self._finish(FINISH_COMPLETED)
            return

        while True:
            question = self.selector.pick_question(
                subject, state.used_questions | state.skipped_questions
            )
            if question is None:
                logger.warning(
                    f"No remaining questions in '{subject.subject_id}' with at least "
                    f"1 correct and 3 wrong answers."
                )
                self._finish(FINISH_NO_ELIGIBLE)
                return
            try:
                answers = self.selector.pick_answer_set(question)
            except InsufficientAnswers as e:
                logger.warning(f"{e} Selecting another question.")
                state.skipped_questions.add(question)
                continue
            break

        state.begin_question(question, answers)
        self._phase = Phase.QUESTION_ACTIVE
        logger.info(f"Question {state.question_index + 1}: {question.text}")
        self.events.emit(QuestionShown(
            text=question.text,
            answers=tuple(a.text for a in answers),
            question_index=state.question_index,
            question_limit=state.config.question_limit,
            score=state.score,
        ))

    def _resolve(self, outcome: str):
        state = self._state
        state.record_result(outcome)
        state.question_index += 1
        state.clear_question()
        self._phase = Phase.AWAITING_NEXT
        self.events.emit(QuestionResolved(outcome, state.question_index, state.score))

        if state.config.advance_delay > 0:
            self._advance_remaining = state.config.advance_delay
        else:
            self._next_question()

    def _finish(self, reason: str):
        state = self._state
        state.clear_question()
        self._finish_reason = reason
        self._fact = self.selector.pick_fact(self._subject) if self._subject else None
        self._phase = Phase.FINISHED
        logger.info(f"Quiz finished ({reason}): {state.score} out of {state.question_index}")

        self._cue(CUE_VICTORY)
        self._transition(TRIGGER_QUIZ_END, reverse=False)
        self.events.emit(QuizFinished(state.score, state.question_index, self._fact, reason))

    def _return_to_idle(self):
        self._phase = Phase.IDLE
        self._cooldown_remaining = 0.0
        self._cue(CUE_MUSIC_STOP)
        self._transition(TRIGGER_SELECT, reverse=True)

    def _cue(self, cue: str):
        try:
            self.audio.play(cue)
        except Exception as e:
            logger.error(f"Audio cue '{cue}' failed: {e}")

    def _transition(self, trigger: str, reverse: bool):
        try:
            self.transitions.move(trigger, reverse, self.speed_multiplier)
        except Exception as e:
            logger.error(f"Scene transition '{trigger}' failed: {e}")

    # --- Queries ---

    def current_phase(self) -> Phase:
        return self._phase

    def current_subject(self) -> Optional[Subject]:
        return self._subject

    def current_question_text(self) -> Optional[str]:
        if self._state is None or self._state.current_question is None:
            return None
        return self._state.current_question.text

    def current_answer_texts(self) -> List[str]:
        if self._state is None:
            return []
        return [a.text for a in self._state.current_answers]

    def rejected_indices(self) -> List[int]:
        if self._state is None:
            return []
        return sorted(self._state.rejected_indices)

    def remaining_time(self) -> float:
        if self._phase is not Phase.QUESTION_ACTIVE:
            return 0.0
        return self._state.remaining

    def attempts_remaining(self) -> int:
        if self._phase is not Phase.QUESTION_ACTIVE:
            return 0
        return self._state.attempts_remaining

    def score(self) -> int:
        return self._state.score if self._state else 0

    def question_index(self) -> int:
        return self._state.question_index if self._state else 0

    def question_limit(self) -> int:
        return self._state.config.question_limit if self._state else self.default_config.question_limit

    def used_question_count(self) -> int:
        return len(self._state.used_questions) if self._state else 0

    def total_points(self) -> int:
        return self.ledger.total_points()

    def finish_reason(self) -> Optional[str]:
        return self._finish_reason

    def fact_text(self) -> Optional[str]:
        return self._fact

    def cooldown_remaining(self) -> float:
        return max(0.0, self._cooldown_remaining) if self._phase is Phase.COOLDOWN else 0.0

    def session_stats(self) -> dict:
        return self._state.get_stats() if self._state else {}
