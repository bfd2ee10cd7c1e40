"""Pending spaced-repetition review obligations."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Tuple

from .curriculum_catalog import LessonTemplate

REVIEW_INTERVALS_DAYS: Tuple[int, ...] = (1, 3, 7, 14, 30, 60)
REVIEW_DURATION_FACTOR = 0.5


@dataclass(frozen=True)
class ReviewEntry:
    lesson: LessonTemplate
    origin_task_id: str
    due_day: int

    @property
    def title(self) -> str:
        return self.lesson.title

    @property
    def review_minutes(self) -> int:
        return math.ceil(self.lesson.duration_minutes * REVIEW_DURATION_FACTOR)


@dataclass(frozen=True)
class ReviewLedger:
    """Immutable queue of review entries in enqueue order.

    Every operation that changes the queue returns a new ledger. Entries due
    after the planning horizon simply never come up.
    """

    entries: Tuple[ReviewEntry, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def schedule(self, lesson: LessonTemplate, origin_task_id: str, introduced_on: int) -> "ReviewLedger":
        added = tuple(
            ReviewEntry(lesson=lesson, origin_task_id=origin_task_id, due_day=introduced_on + interval)
            for interval in REVIEW_INTERVALS_DAYS
        )
        return replace(self, entries=self.entries + added)

    def due_on(self, day_index: int) -> List[ReviewEntry]:
        """Entries due on or before ``day_index``; missed reviews roll forward."""
        return [entry for entry in self.entries if entry.due_day <= day_index]

    @staticmethod
    def dedupe(entries: Iterable[ReviewEntry]) -> List[ReviewEntry]:
        """Collapse to one entry per title.

        The latest-enqueued entry wins, kept at the position where the title
        first appeared.
        """
        by_title: Dict[str, ReviewEntry] = {}
        for entry in entries:
            by_title[entry.title] = entry
        return list(by_title.values())

    def consume(self, title: str, day_index: int) -> "ReviewLedger":
        """Drop the entries for ``title`` that are due by ``day_index``."""
        remaining = tuple(
            entry for entry in self.entries if entry.title != title or entry.due_day > day_index
        )
        return replace(self, entries=remaining)

    def pending_for(self, title: str) -> List[ReviewEntry]:
        return [entry for entry in self.entries if entry.title == title]


__all__ = ["REVIEW_DURATION_FACTOR", "REVIEW_INTERVALS_DAYS", "ReviewEntry", "ReviewLedger"]
