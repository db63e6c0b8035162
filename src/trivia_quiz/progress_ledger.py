"""Progress Ledger: Points earned per subject for the lifetime of the process."""

import logging
from typing import Callable, Dict, List, Optional

from .events import EventDispatcher, ProgressChanged
from .models import Question, Subject

logger = logging.getLogger(__name__)


class ProgressEntry:
    """Points earned for one subject, bounded by its question count."""

    def __init__(self, subject_id: str, max_points: int):
        self.subject_id = subject_id
        self._max_points = max(0, max_points)
        self._points = 0

    @property
    def points(self) -> int:
        return self._points

    @property
    def max_points(self) -> int:
        return self._max_points

    def _add_point(self) -> int:
        """Add one point, clamped to max_points. Returns the previous value."""
        old = self._points
        self._points = min(self._points + 1, self._max_points)
        return old

    def label(self) -> str:
        return f"{self._points} / {self._max_points}"

    def __repr__(self):
        return f"ProgressEntry({self.subject_id!r}, {self.label()})"


class ProgressLedger:
    """Maps subjects to their ProgressEntry.

    One ledger is owned by the host context and handed to the engine.
    Listeners receive a ProgressChanged whenever a credit raises the points.
    """

    def __init__(self):
        self._entries: Dict[str, ProgressEntry] = {}
        self._events = EventDispatcher()

    def subscribe(self, listener: Callable[[ProgressChanged], None]) -> int:
        return self._events.subscribe(listener)

    def unsubscribe(self, handle: int) -> bool:
        return self._events.unsubscribe(handle)

    def get_or_create(self, subject: Subject) -> ProgressEntry:
        """Return the subject's entry, creating it on first encounter."""
        entry = self._entries.get(subject.subject_id)
        if entry is None:
            entry = ProgressEntry(subject.subject_id, subject.question_count)
            self._entries[subject.subject_id] = entry
            logger.debug(f"Progress entry created for '{subject.subject_id}' (max {entry.max_points})")
        return entry

    def get(self, subject_id: str) -> Optional[ProgressEntry]:
        return self._entries.get(subject_id)

    def credit(self, subject: Subject, question: Question) -> bool:
        """Credit *question* once per process lifetime.

        Returns False if the question was already credited.
        """
        if question.credited_once:
            return False
        question.credited_once = True

        entry = self.get_or_create(subject)
        old = entry._add_point()
        logger.info(f"Credit for '{subject.subject_id}': {old} -> {entry.points}")
        if entry.points != old:
            self._events.emit(ProgressChanged(subject.subject_id, old, entry.points))
        return True

    def total_points(self) -> int:
        return sum(entry.points for entry in self._entries.values())

    def entries(self) -> List[ProgressEntry]:
        return list(self._entries.values())


class UnlockGate:
    """Something that unlocks once total points reach a threshold."""

    def __init__(self, name: str, threshold: int):
        self.name = name
        self.threshold = threshold

    def is_unlocked(self, total_points: int) -> bool:
        return total_points >= self.threshold

    def __repr__(self):
        return f"UnlockGate({self.name!r}, {self.threshold})"


class UnlockTracker:
    """Watches a ledger and reports each gate the first time it unlocks."""

    def __init__(self, ledger: ProgressLedger, gates: List[UnlockGate],
                 on_unlock: Optional[Callable[[UnlockGate], None]] = None):
        self.ledger = ledger
        self.gates = sorted(gates, key=lambda g: g.threshold)
        self.on_unlock = on_unlock
        total = ledger.total_points()
        self._unlocked = {g.name for g in self.gates if g.is_unlocked(total)}
        self._handle = ledger.subscribe(self._on_progress)

    def _on_progress(self, event: ProgressChanged):
        total = self.ledger.total_points()
        for gate in self.gates:
            if gate.name in self._unlocked or not gate.is_unlocked(total):
                continue
            self._unlocked.add(gate.name)
            logger.info(f"Unlocked '{gate.name}' at {total} points")
            if self.on_unlock:
                self.on_unlock(gate)

    def unlocked(self) -> List[UnlockGate]:
        return [g for g in self.gates if g.name in self._unlocked]

    def locked(self) -> List[UnlockGate]:
        return [g for g in self.gates if g.name not in self._unlocked]

    def close(self):
        self.ledger.unsubscribe(self._handle)
