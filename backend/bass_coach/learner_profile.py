"""Learner profile, schedule models, and the JSON-backed settings store."""

from __future__ import annotations

import json
import logging
import threading
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional, Tuple, get_args

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .config import get_settings
from .curriculum_catalog import LessonCategory, SkillKey

logger = logging.getLogger(__name__)

Weekday = Literal["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
WEEKDAYS: Tuple[str, ...] = get_args(Weekday)

BassType = Literal["4", "5", "6"]
TaskKind = Literal["lesson", "review", "free_practice"]


def _default_availability() -> Dict[str, bool]:
    return {day: day != "Sunday" for day in WEEKDAYS}


class LearnerProfile(BaseModel):
    """Practice settings a schedule is generated from.

    ``daily_minutes`` must be non-negative and ``start_date`` a real date; the
    sequencer assumes both and does not clamp them. A weekday missing from
    ``weekly_availability`` counts as a rest day.
    """

    user_name: str = ""
    start_date: date = Field(default_factory=date.today)
    weekly_availability: Dict[Weekday, bool] = Field(default_factory=_default_availability)
    daily_minutes: int = Field(default=60, ge=0)
    bass_type: BassType = "4"
    known_skills: Dict[SkillKey, bool] = Field(default_factory=dict)

    @property
    def string_count(self) -> int:
        return int(self.bass_type)

    def is_available(self, day: date) -> bool:
        return bool(self.weekly_availability.get(WEEKDAYS[day.weekday()], False))  # type: ignore[call-overload]

    def knows(self, skill: Optional[str]) -> bool:
        if not skill:
            return False
        return bool(self.known_skills.get(skill, False))  # type: ignore[call-overload]


class Task(BaseModel):
    """One scheduled practice activity. ``task_id`` is unique within a schedule."""

    model_config = ConfigDict(frozen=True)

    task_id: str
    kind: TaskKind = "lesson"
    title: str
    description: str = ""
    category: LessonCategory
    duration_minutes: int = Field(ge=0)
    origin_task_id: Optional[str] = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_review(self) -> bool:
        return self.kind == "review"


class DayPlan(BaseModel):
    """A single calendar day of the plan."""

    date: date
    day_index: int = Field(ge=1)
    week_number: int = Field(ge=1)
    is_rest_day: bool = False
    tasks: List[Task] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_minutes(self) -> int:
        return sum(task.duration_minutes for task in self.tasks)


class Schedule(BaseModel):
    """Fixed-horizon practice plan, index-aligned with day indices 1..horizon."""

    start_date: date
    horizon_days: int = Field(ge=1)
    active_titles: List[str] = Field(default_factory=list)
    days: List[DayPlan] = Field(default_factory=list)

    def day(self, day_index: int) -> DayPlan:
        if day_index < 1 or day_index > len(self.days):
            raise IndexError(f"Day index {day_index} is outside the 1..{len(self.days)} horizon.")
        return self.days[day_index - 1]

    def tasks(self) -> List[Tuple[DayPlan, Task]]:
        return [(day, task) for day in self.days for task in day.tasks]


class LearnerRecord(BaseModel):
    """Persisted learner document: settings plus the task completion map."""

    username: str
    settings: LearnerProfile = Field(default_factory=LearnerProfile)
    completed_tasks: Dict[str, bool] = Field(default_factory=dict)
    last_updated: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _normalize_username(value: str) -> str:
    normalized = value.strip().lower()
    if not normalized:
        raise ValueError("Username cannot be empty.")
    return normalized


class ProfileStore:
    """JSON-file key-value store for learner settings and completion state.

    The scheduler never reads from here; callers load settings, generate, and
    keep the completion map next to them unchanged.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path or get_settings().profile_store_path
        self._lock = threading.RLock()

    @property
    def path(self) -> Path:
        return self._path

    def _load_unlocked(self) -> Dict[str, LearnerRecord]:
        if not self._path.exists():
            return {}
        with self._path.open("r", encoding="utf-8") as handle:
            raw = json.load(handle)
        records: Dict[str, LearnerRecord] = {}
        for key, payload in raw.items():
            try:
                records[key] = LearnerRecord.model_validate(payload)
            except Exception:  # noqa: BLE001
                logger.exception("Failed to parse stored learner record %s", key)
        return records

    def _write_unlocked(self, records: Dict[str, LearnerRecord]) -> None:
        payload: Dict[str, Any] = {
            username: record.model_dump(mode="json")
            for username, record in records.items()
        }
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("w", encoding="utf-8") as handle:
            json.dump(payload, handle, indent=2, ensure_ascii=False)

    def get(self, username: str) -> Optional[LearnerRecord]:
        normalized = _normalize_username(username)
        with self._lock:
            record = self._load_unlocked().get(normalized)
            return record.model_copy(deep=True) if record else None

    def get_settings(self, username: str) -> Optional[LearnerProfile]:
        record = self.get(username)
        return record.settings if record else None

    def get_completion(self, username: str) -> Dict[str, bool]:
        record = self.get(username)
        return dict(record.completed_tasks) if record else {}

    def save_settings(self, username: str, settings: LearnerProfile) -> LearnerRecord:
        normalized = _normalize_username(username)
        with self._lock:
            records = self._load_unlocked()
            record = records.get(normalized) or LearnerRecord(username=normalized)
            record.settings = settings.model_copy(deep=True)
            record.last_updated = _now()
            records[normalized] = record
            self._write_unlocked(records)
            return record.model_copy(deep=True)

    def toggle_task(self, username: str, task_id: str) -> bool:
        normalized = _normalize_username(username)
        with self._lock:
            records = self._load_unlocked()
            record = records.get(normalized)
            if record is None:
                raise LookupError(f"Learner profile for '{username}' was not found.")
            completed = not record.completed_tasks.get(task_id, False)
            record.completed_tasks[task_id] = completed
            record.last_updated = _now()
            self._write_unlocked(records)
            return completed

    def delete(self, username: str) -> bool:
        normalized = _normalize_username(username)
        with self._lock:
            records = self._load_unlocked()
            if records.pop(normalized, None) is None:
                return False
            self._write_unlocked(records)
            return True


__all__ = [
    "BassType",
    "DayPlan",
    "LearnerProfile",
    "LearnerRecord",
    "ProfileStore",
    "Schedule",
    "Task",
    "TaskKind",
    "WEEKDAYS",
    "Weekday",
]
