"""Process-local cache of generated practice schedules."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from threading import RLock
from typing import Dict, Optional

from ..learner_profile import LearnerProfile, Schedule


def _normalize_username(username: str) -> str:
    normalized = username.strip().lower()
    if not normalized:
        raise ValueError("Username cannot be empty when caching schedules.")
    return normalized


@dataclass
class _ScheduleEntry:
    profile: LearnerProfile
    schedule: Schedule
    cached_at: datetime


class ScheduleCache:
    """Caches the last schedule per learner together with the settings it came from.

    A lookup with different settings misses, so a stale plan is never served
    after the learner edits their profile.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, _ScheduleEntry] = {}
        self._lock = RLock()

    def get(self, username: str, profile: LearnerProfile) -> Optional[Schedule]:
        key = _normalize_username(username)
        with self._lock:
            entry = self._entries.get(key)
        if entry is None or entry.profile != profile:
            return None
        return entry.schedule.model_copy(deep=True)

    def set(self, username: str, profile: LearnerProfile, schedule: Schedule) -> None:
        key = _normalize_username(username)
        entry = _ScheduleEntry(
            profile=profile.model_copy(deep=True),
            schedule=schedule.model_copy(deep=True),
            cached_at=datetime.now(timezone.utc),
        )
        with self._lock:
            self._entries[key] = entry

    def invalidate(self, username: str) -> None:
        key = _normalize_username(username)
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


schedule_cache = ScheduleCache()

__all__ = ["ScheduleCache", "schedule_cache"]
