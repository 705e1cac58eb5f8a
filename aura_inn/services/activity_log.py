"""Bounded in-memory log of admin actions shown on the dashboard."""

import logging
from collections import deque
from datetime import datetime, timezone
from functools import lru_cache

logger = logging.getLogger(__name__)


class ActivityLog:
    """Append-only log that keeps the most recent ``maxlen`` entries."""

    def __init__(self, maxlen: int = 200) -> None:
        self._entries: deque[dict[str, str]] = deque(maxlen=maxlen)

    def record(self, message: str) -> None:
        self._entries.append(
            {"timestamp": datetime.now(timezone.utc).isoformat(), "message": message}
        )
        logger.info("[activity] %s", message)

    def entries(self) -> list[dict[str, str]]:
        """Entries newest first."""
        return list(reversed(self._entries))

    def __len__(self) -> int:
        return len(self._entries)


@lru_cache
def get_activity_log() -> ActivityLog:
    from aura_inn.config import settings

    return ActivityLog(settings.activity_log_size)
