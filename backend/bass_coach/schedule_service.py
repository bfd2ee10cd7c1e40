"""Glue between stored learner settings, the sequencer, and the schedule cache."""

from __future__ import annotations

import logging
import time

from .cache import schedule_cache
from .curriculum_sequencer import generate_schedule
from .learner_profile import LearnerProfile, ProfileStore, Schedule
from .plan_views import schedule_summary
from .telemetry import emit_event

logger = logging.getLogger(__name__)


def generate_schedule_for_user(username: str, store: ProfileStore) -> Schedule:
    """Regenerate and cache the schedule for a stored learner."""
    profile = store.get_settings(username)
    if profile is None:
        raise LookupError(f"Learner profile for '{username}' was not found.")
    return _generate(username, profile)


def get_schedule_for_user(username: str, store: ProfileStore, *, refresh: bool = False) -> Schedule:
    """Serve the cached schedule when it still matches the stored settings."""
    profile = store.get_settings(username)
    if profile is None:
        raise LookupError(f"Learner profile for '{username}' was not found.")
    if not refresh:
        cached = schedule_cache.get(username, profile)
        if cached is not None:
            return cached
    return _generate(username, profile)


def _generate(username: str, profile: LearnerProfile) -> Schedule:
    start = time.perf_counter()
    try:
        schedule = generate_schedule(profile)
    except Exception as exc:  # noqa: BLE001
        duration_ms = (time.perf_counter() - start) * 1000.0
        emit_event(
            "schedule_generation",
            username=username,
            status="error",
            duration_ms=round(duration_ms, 2),
            error=str(exc),
            exception_type=exc.__class__.__name__,
        )
        logger.exception("Failed to generate schedule for %s", username)
        raise
    duration_ms = (time.perf_counter() - start) * 1000.0
    schedule_cache.set(username, profile, schedule)
    emit_event(
        "schedule_generation",
        username=username,
        status="success",
        duration_ms=round(duration_ms, 2),
        start_date=profile.start_date,
        daily_minutes=profile.daily_minutes,
        bass_type=profile.bass_type,
        **schedule_summary(schedule),
    )
    return schedule


__all__ = ["generate_schedule_for_user", "get_schedule_for_user"]
