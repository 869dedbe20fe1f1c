"""Persisted emotion preference, kept apart from the entries document."""

import asyncio
import json
from pathlib import Path

from spark.logging import get_logger
from spark.models import Emotion
from spark.services.persistence import write_bytes_atomic

logger = get_logger('services.preferences')

_EMOTION_KEY = "currentEmotion"


class EmotionPreferenceStore:
    """Remembers the user's last emotion choice across restarts."""

    def __init__(self, path: str, default: Emotion = Emotion.HAPPY):
        self.path = Path(path)
        self.default = default

    def _read(self) -> dict:
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable preferences at {self.path}: {e}")
            return {}
        return payload if isinstance(payload, dict) else {}

    def _write(self, emotion: Emotion) -> None:
        payload = self._read()
        payload[_EMOTION_KEY] = emotion.value
        write_bytes_atomic(self.path, (json.dumps(payload, indent=2) + "\n").encode("utf-8"))

    async def load(self) -> Emotion:
        """Return the stored emotion, recording the default on first run."""
        payload = await asyncio.to_thread(self._read)
        try:
            return Emotion(payload[_EMOTION_KEY])
        except (KeyError, ValueError):
            pass

        logger.info(f"No stored emotion, defaulting to {self.default.value}")
        await self.save(self.default)
        return self.default

    async def save(self, emotion: Emotion) -> bool:
        try:
            await asyncio.to_thread(self._write, emotion)
        except OSError as e:
            logger.error(f"Failed to save emotion preference: {e}")
            return False
        return True
