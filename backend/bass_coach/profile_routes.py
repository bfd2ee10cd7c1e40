"""Learner settings and practice-plan endpoints."""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel

from .cache import schedule_cache
from .learner_profile import DayPlan, LearnerProfile, ProfileStore, Schedule
from .plan_views import (
    CategoryStats,
    DayProgress,
    category_stats,
    describe_day,
    find_day,
    program_progress,
    week_days,
)
from .schedule_service import generate_schedule_for_user, get_schedule_for_user
from .telemetry import emit_event

router = APIRouter(prefix="/api/profile", tags=["profile"])
logger = logging.getLogger(__name__)

_profile_store: Optional[ProfileStore] = None


def get_profile_store() -> ProfileStore:
    global _profile_store
    if _profile_store is None:
        _profile_store = ProfileStore()
    return _profile_store


class TaskToggleResponse(BaseModel):
    task_id: str
    completed: bool


class WeekResponse(BaseModel):
    week_number: int
    days: List[DayProgress]


def _not_found(username: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Learner profile for '{username}' was not found.",
    )


def _load_schedule(username: str, store: ProfileStore, *, refresh: bool = False) -> Schedule:
    try:
        return get_schedule_for_user(username, store, refresh=refresh)
    except LookupError as exc:
        raise _not_found(username) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc


@router.get("/{username}", response_model=LearnerProfile, status_code=status.HTTP_200_OK)
def get_profile(username: str, store: ProfileStore = Depends(get_profile_store)) -> LearnerProfile:
    try:
        settings = store.get_settings(username)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    if settings is None:
        raise _not_found(username)
    return settings


@router.put("/{username}", response_model=Schedule, status_code=status.HTTP_200_OK)
def update_profile(
    username: str,
    settings: LearnerProfile,
    store: ProfileStore = Depends(get_profile_store),
) -> Schedule:
    try:
        store.save_settings(username, settings)
        schedule_cache.invalidate(username)
        schedule = generate_schedule_for_user(username, store)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except LookupError as exc:
        raise _not_found(username) from exc
    emit_event(
        "settings_updated",
        username=username,
        start_date=settings.start_date,
        daily_minutes=settings.daily_minutes,
        bass_type=settings.bass_type,
        available_days=sum(1 for available in settings.weekly_availability.values() if available),
        known_skill_count=sum(1 for known in settings.known_skills.values() if known),
    )
    logger.info("Settings updated for %s; schedule regenerated", username)
    return schedule


@router.get("/{username}/schedule", response_model=Schedule, status_code=status.HTTP_200_OK)
def get_schedule(
    username: str,
    refresh: bool = Query(default=False, description="Regenerate even if a cached schedule matches."),
    store: ProfileStore = Depends(get_profile_store),
) -> Schedule:
    return _load_schedule(username, store, refresh=refresh)


@router.get("/{username}/today", response_model=DayProgress, status_code=status.HTTP_200_OK)
def get_today(
    username: str,
    on: Optional[date] = Query(default=None, description="Calendar date to look up (defaults to today)."),
    store: ProfileStore = Depends(get_profile_store),
) -> DayProgress:
    schedule = _load_schedule(username, store)
    target = on or date.today()
    day = find_day(schedule, target)
    if day is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{target.isoformat()} is outside the practice plan.",
        )
    described = describe_day(day, store.get_completion(username))
    described.program_progress = program_progress(schedule, target)
    return described


@router.get("/{username}/week/{week_number}", response_model=WeekResponse, status_code=status.HTTP_200_OK)
def get_week(username: str, week_number: int, store: ProfileStore = Depends(get_profile_store)) -> WeekResponse:
    schedule = _load_schedule(username, store)
    days: List[DayPlan] = week_days(schedule, week_number)
    if not days:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Week {week_number} is outside the practice plan.",
        )
    completion = store.get_completion(username)
    return WeekResponse(week_number=week_number, days=[describe_day(day, completion) for day in days])


@router.get("/{username}/stats", response_model=List[CategoryStats], status_code=status.HTTP_200_OK)
def get_stats(username: str, store: ProfileStore = Depends(get_profile_store)) -> List[CategoryStats]:
    schedule = _load_schedule(username, store)
    return category_stats(schedule, store.get_completion(username))


@router.get("/{username}/completion", response_model=Dict[str, bool], status_code=status.HTTP_200_OK)
def get_completion(username: str, store: ProfileStore = Depends(get_profile_store)) -> Dict[str, bool]:
    if store.get(username) is None:
        raise _not_found(username)
    return store.get_completion(username)


@router.post(
    "/{username}/tasks/{task_id}/toggle",
    response_model=TaskToggleResponse,
    status_code=status.HTTP_200_OK,
)
def toggle_task(username: str, task_id: str, store: ProfileStore = Depends(get_profile_store)) -> TaskToggleResponse:
    try:
        completed = store.toggle_task(username, task_id)
    except LookupError as exc:
        raise _not_found(username) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    emit_event("task_toggled", username=username, task_id=task_id, completed=completed)
    return TaskToggleResponse(task_id=task_id, completed=completed)
