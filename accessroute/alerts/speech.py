"""Speech channel that paces utterances by estimated speaking time.

Stands in for a text-to-speech engine in headless runs: it logs each
utterance and holds the channel for as long as speaking it would take.
"""

from __future__ import annotations

import asyncio
import logging

from accessroute.exceptions import ValidationError

logger = logging.getLogger(__name__)

_DEFAULT_WORDS_PER_SECOND: float = 2.5


class PacedSpeechChannel:
    """``SpeechChannel`` that records utterances instead of producing audio."""

    def __init__(self, *, words_per_second: float = _DEFAULT_WORDS_PER_SECOND) -> None:
        if words_per_second <= 0:
            raise ValidationError("words_per_second must be positive", field="words_per_second", value=words_per_second)
        self._words_per_second = words_per_second
        self._active: asyncio.Event | None = None
        self.spoken: list[str] = []
        self.interrupted: list[str] = []

    def duration_for(self, text: str) -> float:
        """Seconds it takes to say ``text``."""
        return len(text.split()) / self._words_per_second

    async def speak(self, text: str, stop: asyncio.Event) -> None:
        self._active = stop
        logger.info("Speaking: %s", text)
        try:
            await asyncio.wait_for(stop.wait(), timeout=self.duration_for(text))
        except TimeoutError:
            self.spoken.append(text)
        else:
            self.interrupted.append(text)
        finally:
            self._active = None

    def stop(self) -> None:
        if self._active is not None:
            self._active.set()
