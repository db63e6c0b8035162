"""Speech: pyttsx3 text-to-speech for the console host and spoken audio cues."""

import logging
import threading
from typing import Dict, Optional

from .ports import (
    CUE_CORRECT,
    CUE_MUSIC_START,
    CUE_MUSIC_STOP,
    CUE_VICTORY,
    CUE_WRONG,
    AudioCues,
)

logger = logging.getLogger(__name__)

CUE_PHRASES: Dict[str, str] = {
    CUE_CORRECT: "Correct!",
    CUE_WRONG: "Wrong.",
    CUE_VICTORY: "Quiz complete!",
}

# Music has no spoken counterpart
SILENT_CUES = (CUE_MUSIC_START, CUE_MUSIC_STOP)


class SpeechOutput:
    """Speaks text with pyttsx3, falling back to printing."""

    def __init__(self, rate: int = 150, volume: float = 1.0, voice_index: int = 0):
        self.rate = rate
        self.volume = volume
        self.voice_index = voice_index
        self._engine = None
        self._lock = threading.Lock()
        self._init_engine()

    def _init_engine(self):
        try:
            import pyttsx3
            self._engine = pyttsx3.init()
            self._engine.setProperty("rate", self.rate)
            self._engine.setProperty("volume", self.volume)
            voices = self._engine.getProperty("voices")
            if voices:
                voice = voices[self.voice_index] if self.voice_index < len(voices) else voices[0]
                self._engine.setProperty("voice", voice.id)
        except Exception as e:
            logger.error(f"TTS init error: {e}")
            self._engine = None

    def speak(self, text: str):
        """Say *text* and wait until it has been spoken."""
        if not text:
            return
        logger.debug(f"TTS speaking: {text[:80]}")
        with self._lock:
            try:
                # pyttsx3 cannot restart its loop after runAndWait, so each
                # utterance gets a fresh engine.
                self._init_engine()
                if self._engine is None:
                    print(f"[TTS] {text}")
                    return
                self._engine.say(text)
                self._engine.runAndWait()
            except Exception as e:
                logger.error(f"TTS speak error: {e}")
                print(f"[TTS] {text}")
            finally:
                self._engine = None


class SpokenCues(AudioCues):
    """Audio cues voiced as short phrases.

    Subject sound cues (any category not in CUE_PHRASES) are spoken as-is.
    """

    def __init__(self, speech: SpeechOutput, phrases: Optional[Dict[str, str]] = None):
        self.speech = speech
        self.phrases = dict(CUE_PHRASES if phrases is None else phrases)

    def play(self, cue: str):
        if cue in SILENT_CUES:
            logger.debug(f"Audio cue '{cue}' has no spoken form")
            return
        self.speech.speak(self.phrases.get(cue, cue))
