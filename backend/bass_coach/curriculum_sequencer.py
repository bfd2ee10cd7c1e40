"""Day-by-day practice sequencing: new lessons interleaved with spaced reviews."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field, replace
from datetime import timedelta
from typing import List, Sequence, Set, Tuple

from .curriculum_catalog import CATALOG, LessonCategory, LessonTemplate
from .learner_profile import DayPlan, LearnerProfile, Schedule, Task
from .review_ledger import ReviewEntry, ReviewLedger

logger = logging.getLogger(__name__)


PLAN_HORIZON_DAYS = 90
REVIEW_BUDGET_SHARE = 0.6
NEW_LESSON_MIN_REMAINING_MINUTES = 10
FREE_PRACTICE_MIN_REMAINING_MINUTES = 15
FREE_PRACTICE_TITLE = "Pratique Libre / Improvisation"
FREE_PRACTICE_DESCRIPTION = "Appliquez les concepts appris sur un backing track."


@dataclass(frozen=True)
class SequencerState:
    """Running state threaded from one day to the next."""

    cursor: int = 0
    ledger: ReviewLedger = field(default_factory=ReviewLedger)

    def exhausted(self, curriculum: Sequence[LessonTemplate]) -> bool:
        return self.cursor >= len(curriculum)


def filter_curriculum(catalog: Sequence[LessonTemplate], profile: LearnerProfile) -> Tuple[LessonTemplate, ...]:
    """Catalog entries playable on the learner's bass and not already mastered, in order."""
    strings = profile.string_count
    return tuple(
        template
        for template in catalog
        if (template.min_strings is None or template.min_strings <= strings)
        and not profile.knows(template.required_skill)
    )


def _review_task(day_index: int, entry: ReviewEntry) -> Task:
    lesson = entry.lesson
    return Task(
        task_id=f"review-{day_index}-{entry.origin_task_id}",
        kind="review",
        title=lesson.title,
        description=lesson.description,
        category=lesson.category,
        duration_minutes=entry.review_minutes,
        origin_task_id=entry.origin_task_id,
    )


def allocate_day(
    day_index: int,
    budget_minutes: int,
    state: SequencerState,
    curriculum: Sequence[LessonTemplate],
) -> Tuple[List[Task], SequencerState]:
    """Fill one available day and return its tasks with the advanced state.

    Reviews come first and are held to ``REVIEW_BUDGET_SHARE`` of the budget
    until the curriculum is exhausted, after which they may use all of it.
    New lessons follow while more than ten minutes remain, truncated to fit.
    Once the curriculum is exhausted a single free-practice task absorbs any
    remainder above fifteen minutes.
    """
    tasks: List[Task] = []
    ledger = state.ledger
    remaining = budget_minutes

    if state.exhausted(curriculum):
        review_cap = budget_minutes
    else:
        review_cap = math.floor(budget_minutes * REVIEW_BUDGET_SHARE)

    review_minutes_used = 0
    reviewed_titles: Set[str] = set()
    for entry in ReviewLedger.dedupe(ledger.due_on(day_index)):
        minutes = entry.review_minutes
        if review_minutes_used + minutes > review_cap:
            continue
        tasks.append(_review_task(day_index, entry))
        review_minutes_used += minutes
        remaining -= minutes
        reviewed_titles.add(entry.title)
        ledger = ledger.consume(entry.title, day_index)

    cursor = state.cursor
    while remaining > NEW_LESSON_MIN_REMAINING_MINUTES and cursor < len(curriculum):
        template = curriculum[cursor]
        if template.title in reviewed_titles:
            # The cursor still moves past it, so this lesson is never introduced.
            logger.warning(
                "Day %d: '%s' is already under review today; skipping it as a new lesson for good",
                day_index,
                template.title,
            )
        else:
            minutes = min(template.duration_minutes, remaining)
            task = Task(
                task_id=f"lesson-{day_index}-{cursor}",
                kind="lesson",
                title=template.title,
                description=template.description,
                category=template.category,
                duration_minutes=minutes,
            )
            tasks.append(task)
            remaining -= minutes
            ledger = ledger.schedule(template, task.task_id, day_index)
        cursor += 1

    if cursor >= len(curriculum) and remaining > FREE_PRACTICE_MIN_REMAINING_MINUTES:
        tasks.append(
            Task(
                task_id=f"free-{day_index}",
                kind="free_practice",
                title=FREE_PRACTICE_TITLE,
                description=FREE_PRACTICE_DESCRIPTION,
                category=LessonCategory.IMPROVISATION,
                duration_minutes=remaining,
            )
        )

    return tasks, replace(state, cursor=cursor, ledger=ledger)


def generate_schedule(
    profile: LearnerProfile,
    catalog: Sequence[LessonTemplate] = CATALOG,
    *,
    horizon_days: int = PLAN_HORIZON_DAYS,
) -> Schedule:
    """Build the full practice plan for ``profile``.

    Pure: the same catalog and profile always produce the same schedule.
    """
    curriculum = filter_curriculum(catalog, profile)
    logger.debug(
        "Active curriculum for %s-string bass: %d of %d lessons",
        profile.bass_type,
        len(curriculum),
        len(catalog),
    )

    state = SequencerState()
    days: List[DayPlan] = []
    for day_index in range(1, horizon_days + 1):
        elapsed = day_index - 1
        current = profile.start_date + timedelta(days=elapsed)
        week_number = elapsed // 7 + 1
        if not profile.is_available(current):
            days.append(DayPlan(date=current, day_index=day_index, week_number=week_number, is_rest_day=True))
            continue
        tasks, state = allocate_day(day_index, profile.daily_minutes, state, curriculum)
        days.append(DayPlan(date=current, day_index=day_index, week_number=week_number, tasks=tasks))

    if not state.exhausted(curriculum):
        logger.info(
            "Horizon ended with %d of %d lessons not yet introduced",
            len(curriculum) - state.cursor,
            len(curriculum),
        )

    return Schedule(
        start_date=profile.start_date,
        horizon_days=horizon_days,
        active_titles=[template.title for template in curriculum],
        days=days,
    )


__all__ = [
    "FREE_PRACTICE_MIN_REMAINING_MINUTES",
    "FREE_PRACTICE_TITLE",
    "NEW_LESSON_MIN_REMAINING_MINUTES",
    "PLAN_HORIZON_DAYS",
    "REVIEW_BUDGET_SHARE",
    "SequencerState",
    "allocate_day",
    "filter_curriculum",
    "generate_schedule",
]
