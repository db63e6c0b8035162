"""Console Game: Host context and a text front end that drives the quiz engine."""

import argparse
import logging
import random
import sys
import time
from typing import Callable, Optional

from .config import AppConfig, load_config
from .content_loader import load_subjects
from .errors import ConfigurationError
from .events import (
    AnswerAccepted,
    AnswerRejected,
    AnswerSelected,
    ProgressChanged,
    QuestionResolved,
    QuestionShown,
    QuizFinished,
    SessionAborted,
)
from .feedback_generator import FeedbackGenerator
from .models import SubjectCatalog
from .ports import TRIGGER_PLAY, AudioCues, SceneTransitions
from .progress_ledger import ProgressLedger, UnlockGate, UnlockTracker
from .quiz_engine import Phase, QuizSessionEngine
from .selector import QuestionSelector
from .speech import SpeechOutput, SpokenCues

logger = logging.getLogger(__name__)

ACTIVE_PHASES = (Phase.QUESTION_ACTIVE, Phase.AWAITING_NEXT)
ENDING_PHASES = (Phase.FINISHED, Phase.COOLDOWN)
POLL_INTERVAL = 0.1


class GameContext:
    """Owns the single ProgressLedger and the engine for this process."""

    def __init__(
        self,
        catalog: SubjectCatalog,
        config: Optional[AppConfig] = None,
        selector: Optional[QuestionSelector] = None,
        transitions: Optional[SceneTransitions] = None,
        audio: Optional[AudioCues] = None,
    ):
        self.config = config or AppConfig()
        self.catalog = catalog
        self.transitions = transitions or SceneTransitions()
        self.ledger = ProgressLedger()
        for subject in catalog:
            self.ledger.get_or_create(subject)
        self.engine = QuizSessionEngine(
            catalog,
            self.ledger,
            selector=selector,
            transitions=self.transitions,
            audio=audio,
            default_config=self.config.quiz,
            cooldown_duration=self.config.cooldown_duration,
            speed_multiplier=self.config.speed_multiplier,
        )
        self.unlocks = UnlockTracker(self.ledger, self.config.unlocks)


class ConsoleGame:
    """
    Text front end for the quiz. Renders engine events, reads answers from
    stdin and feeds real elapsed time into ``engine.tick``.
    """

    def __init__(
        self,
        context: GameContext,
        feedback: Optional[FeedbackGenerator] = None,
        speech: Optional[SpeechOutput] = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.context = context
        self.engine = context.engine
        self.feedback = feedback or FeedbackGenerator()
        self.speech = speech
        self._clock = clock
        self._sleep = sleep
        self._last_tick = clock()
        self._handle = self.engine.events.subscribe(self.present)
        context.unlocks.on_unlock = self._announce_unlock

    def speak(self, text: str):
        """Print text and speak it when speech is enabled."""
        print(f"\n[Quiz]: {text}")
        if self.speech:
            self.speech.speak(text)

    def listen(self, prompt: str = "\n[You]: ") -> str:
        try:
            return input(prompt).strip()
        except (EOFError, KeyboardInterrupt):
            return "quit"

    def tick(self) -> Phase:
        now = self._clock()
        dt = now - self._last_tick
        self._last_tick = now
        return self.engine.tick(dt)

    # --- Presentation ---

    def present(self, event):
        """Render one engine event."""
        if isinstance(event, QuestionShown):
            print(self.feedback.score_text(event.score, event.question_index))
            self.speak(self.feedback.generate_intro(
                event.text, event.question_index + 1, event.question_limit
            ))
            self.show_options()
        elif isinstance(event, AnswerRejected):
            self.speak(self.feedback.wrong(event.attempts_remaining))
            self.show_options()
        elif isinstance(event, AnswerAccepted):
            self.speak(self.feedback.correct())
        elif isinstance(event, QuestionResolved):
            text = self.feedback.resolved(event.outcome)
            if text:
                self.speak(text)
        elif isinstance(event, QuizFinished):
            if event.fact_text:
                self.speak(event.fact_text)
            self.speak(self.feedback.final_score_text(event.score, event.question_count))
            self.speak(self.feedback.generate_session_summary(self.engine.session_stats()))
        elif isinstance(event, ProgressChanged):
            entry = self.context.ledger.get(event.subject_id)
            max_points = entry.max_points if entry else event.new_points
            print(f"  [Progress {event.subject_id}: "
                  f"{self.feedback.progress_label(event.new_points, max_points)}]")
        elif isinstance(event, SessionAborted):
            self.speak("Leaving the quiz.")

    def show_options(self):
        for line in self.feedback.format_options(
            self.engine.current_answer_texts(), self.engine.rejected_indices()
        ):
            print(line)
        print(f"  [{self.feedback.time_text(self.engine.remaining_time())}]")

    def _announce_unlock(self, gate: UnlockGate):
        self.speak(f"Unlocked: {gate.name}!")

    # --- Flow ---

    def handle_special_commands(self, text: str) -> Optional[str]:
        """Recognise 'quit', 'back' and 'repeat'."""
        lower = text.lower().strip().rstrip(".!?")
        if lower in ("quit", "exit"):
            return "quit"
        if lower in ("back", "menu"):
            return "back"
        if lower in ("repeat", "again"):
            return "repeat"
        return None

    def choose_subject(self) -> Optional[str]:
        """List the subjects and return the chosen id, or None to quit."""
        subjects = list(self.context.catalog)
        if not subjects:
            self.speak("There are no subjects to play.")
            return None

        print(f"\nTotal points: {self.context.ledger.total_points()}")
        for gate in self.context.unlocks.gates:
            state = "unlocked" if gate in self.context.unlocks.unlocked() else f"needs {gate.threshold}"
            print(f"  * {gate.name} ({state})")
        for i, subject in enumerate(subjects, start=1):
            entry = self.context.ledger.get_or_create(subject)
            print(f"  {i}) {subject.name} [{entry.label()}]")

        while True:
            answer = self.listen("\nChoose a subject: ")
            if self.handle_special_commands(answer) == "quit":
                return None
            if answer.isdigit() and 1 <= int(answer) <= len(subjects):
                return subjects[int(answer) - 1].subject_id
            if answer in self.context.catalog:
                return answer
            self.speak(f"Please pick a number from 1 to {len(subjects)}.")

    def run_quiz(self, subject_id: str) -> bool:
        """Play one quiz. Returns False if the player asked to quit."""
        self._last_tick = self._clock()
        self.engine.start(subject_id)

        while self.engine.current_phase() in ACTIVE_PHASES:
            if self.engine.current_phase() is Phase.AWAITING_NEXT:
                self._sleep(POLL_INTERVAL)
                self.tick()
                continue

            index_before = self.engine.question_index()
            answer = self.listen()
            self.tick()
            if self.engine.question_index() != index_before:
                # The timer ran out while the player was typing
                continue

            command = self.handle_special_commands(answer)
            if command == "quit":
                self.engine.abort()
                return False
            if command == "back":
                self.engine.abort()
                return True
            if command == "repeat":
                self.speak(self.engine.current_question_text() or "")
                self.show_options()
                continue

            index = self.feedback.parse_option(answer)
            if index is None or not self.engine.on_answer_selected(AnswerSelected(index)):
                self.speak("Please choose one of the remaining options, A to D.")

        while self.engine.current_phase() in ENDING_PHASES:
            self._sleep(POLL_INTERVAL)
            self.tick()
        return True

    def run(self) -> int:
        """Run the game until the player quits. Returns total points."""
        self.speak(f"Welcome to the quiz! There are {len(self.context.catalog)} subjects to explore.")
        if self.handle_special_commands(self.listen("Press Enter to play ")) == "quit":
            return self.context.ledger.total_points()
        self.context.transitions.move(TRIGGER_PLAY, False, self.context.config.speed_multiplier)

        while True:
            subject_id = self.choose_subject()
            if subject_id is None:
                break
            if not self.run_quiz(subject_id):
                break

        total = self.context.ledger.total_points()
        self.speak(f"Thanks for playing! You earned {total} points.")
        logger.info(f"Game over with {total} points")
        return total


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Subject trivia quiz")
    parser.add_argument("--config", default="config.yaml", help="Config file path")
    parser.add_argument("--content", default=None, help="Subject content file (JSON or YAML)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--speech", action="store_true", help="Speak text with pyttsx3")
    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose logging")
    args = parser.parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=log_level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    try:
        config = load_config(args.config)
        catalog = load_subjects(args.content or config.content_path)
    except ConfigurationError as e:
        logger.error(f"Cannot start: {e}")
        return 1

    speech = None
    audio = None
    if args.speech or config.speech.enabled:
        speech = SpeechOutput(
            rate=config.speech.rate,
            volume=config.speech.volume,
            voice_index=config.speech.voice_index,
        )
        audio = SpokenCues(speech)

    rng = random.Random(args.seed)
    context = GameContext(catalog, config, selector=QuestionSelector(rng), audio=audio)
    game = ConsoleGame(context, feedback=FeedbackGenerator(rng), speech=speech)
    game.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
