"""Ports: Outward collaborators for scene transitions and audio cues."""

import logging

logger = logging.getLogger(__name__)

# Scene transition triggers
TRIGGER_SELECT = "select"
TRIGGER_QUIZ_END = "quiz-end"
TRIGGER_PLAY = "play"

# Audio cue categories
CUE_CORRECT = "correct"
CUE_WRONG = "wrong"
CUE_VICTORY = "victory"
CUE_MUSIC_START = "music-start"
CUE_MUSIC_STOP = "music-stop"


class SceneTransitions:
    """Moves the camera/scene to the state named by *trigger*.

    Hosts subclass this (or pass any object with a compatible ``move``).
    The base implementation only logs.
    """

    def move(self, trigger: str, reverse: bool = False, speed_multiplier: float = 1.0):
        logger.debug(f"Transition '{trigger}' (reverse={reverse}, speed={speed_multiplier})")


class AudioCues:
    """Plays a short cue by category. The base implementation only logs."""

    def play(self, cue: str):
        logger.debug(f"Audio cue '{cue}'")
