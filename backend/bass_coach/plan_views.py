"""Read-only views over a generated schedule and a learner's completion map."""

from __future__ import annotations

from datetime import date
from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel, Field

from .curriculum_catalog import LessonCategory
from .learner_profile import DayPlan, Schedule, Task

CompletionMap = Mapping[str, bool]


class CategoryTaskEntry(BaseModel):
    date: date
    day_index: int
    task: Task
    completed: bool = False


class CategoryStats(BaseModel):
    category: LessonCategory
    total: int = Field(default=0, ge=0)
    completed: int = Field(default=0, ge=0)
    tasks: List[CategoryTaskEntry] = Field(default_factory=list)


class DayProgress(BaseModel):
    day: DayPlan
    completed_task_ids: List[str] = Field(default_factory=list)
    progress: float = Field(default=0.0, ge=0.0, le=1.0)
    is_complete: bool = False
    program_progress: float = Field(default=0.0, ge=0.0, le=1.0)


def find_day(schedule: Schedule, on: date) -> Optional[DayPlan]:
    for day in schedule.days:
        if day.date == on:
            return day
    return None


def week_days(schedule: Schedule, week_number: int) -> List[DayPlan]:
    return [day for day in schedule.days if day.week_number == week_number]


def day_progress(day: DayPlan, completion: CompletionMap) -> float:
    if not day.tasks:
        return 0.0
    done = sum(1 for task in day.tasks if completion.get(task.task_id))
    return done / len(day.tasks)


def is_day_complete(day: DayPlan, completion: CompletionMap) -> bool:
    """True for a practice day whose every task is checked off."""
    if day.is_rest_day or not day.tasks:
        return False
    return all(completion.get(task.task_id) for task in day.tasks)


def describe_day(day: DayPlan, completion: CompletionMap) -> DayProgress:
    return DayProgress(
        day=day,
        completed_task_ids=[task.task_id for task in day.tasks if completion.get(task.task_id)],
        progress=day_progress(day, completion),
        is_complete=is_day_complete(day, completion),
    )


def program_progress(schedule: Schedule, on: date) -> float:
    """Share of the plan elapsed by ``on``, counting that day; clamped to [0, 1]."""
    if not schedule.days or on < schedule.start_date:
        return 0.0
    day_index = (on - schedule.start_date).days + 1
    return min(day_index, schedule.horizon_days) / schedule.horizon_days


def category_stats(schedule: Schedule, completion: CompletionMap) -> List[CategoryStats]:
    """Task totals per category, always listing every category in enum order."""
    stats: Dict[LessonCategory, CategoryStats] = {
        category: CategoryStats(category=category) for category in LessonCategory
    }
    for day, task in schedule.tasks():
        bucket = stats[task.category]
        done = bool(completion.get(task.task_id))
        bucket.total += 1
        if done:
            bucket.completed += 1
        bucket.tasks.append(CategoryTaskEntry(date=day.date, day_index=day.day_index, task=task, completed=done))
    return list(stats.values())


def schedule_summary(schedule: Schedule) -> Dict[str, int]:
    """Flat counts used in telemetry and CLI output."""
    summary = {
        "day_count": len(schedule.days),
        "rest_days": 0,
        "lesson_count": 0,
        "review_count": 0,
        "free_practice_count": 0,
        "active_lesson_count": len(schedule.active_titles),
        "total_minutes": 0,
    }
    for day in schedule.days:
        if day.is_rest_day:
            summary["rest_days"] += 1
        summary["total_minutes"] += day.total_minutes
        for task in day.tasks:
            summary[f"{task.kind}_count"] += 1
    return summary


__all__ = [
    "CategoryStats",
    "CategoryTaskEntry",
    "CompletionMap",
    "DayProgress",
    "category_stats",
    "day_progress",
    "describe_day",
    "find_day",
    "is_day_complete",
    "program_progress",
    "schedule_summary",
    "week_days",
]
