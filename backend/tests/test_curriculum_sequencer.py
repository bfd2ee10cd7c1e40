"""Tests for the day-by-day practice sequencer."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Dict, List

import pytest

from bass_coach.curriculum_catalog import CATALOG, LessonCategory, LessonTemplate
from bass_coach.curriculum_sequencer import (
    FREE_PRACTICE_TITLE,
    PLAN_HORIZON_DAYS,
    SequencerState,
    allocate_day,
    filter_curriculum,
    generate_schedule,
)
from bass_coach.learner_profile import WEEKDAYS, LearnerProfile, Schedule
from bass_coach.review_ledger import ReviewLedger

MONDAY = date(2024, 1, 1)


def _profile(**overrides) -> LearnerProfile:
    fields = {
        "start_date": MONDAY,
        "weekly_availability": {day: True for day in WEEKDAYS},
        "daily_minutes": 60,
        "bass_type": "4",
        "known_skills": {},
    }
    fields.update(overrides)
    return LearnerProfile(**fields)


def _lesson(title: str, minutes: int) -> LessonTemplate:
    return LessonTemplate(title=title, description=f"{title} drill", category=LessonCategory.TECHNIQUE, duration_minutes=minutes)


def _titles(schedule: Schedule, day_index: int, *, reviews: bool) -> List[str]:
    return [task.title for task in schedule.day(day_index).tasks if task.is_review is reviews]


PROFILE_VARIANTS = {
    "default": _profile(),
    "short-budget": _profile(daily_minutes=5),
    "long-budget": _profile(daily_minutes=200),
    "six-strings": _profile(bass_type="6"),
    "mastered-skills": _profile(known_skills={"slap_basic": True, "holding_posture": True, "chords": True}),
    "weekends-only": _profile(weekly_availability={"Saturday": True, "Sunday": True}),
    "sunday-start": _profile(start_date=date(2024, 3, 10), daily_minutes=45),
    "no-availability": _profile(weekly_availability={}),
}


@pytest.mark.parametrize("profile", PROFILE_VARIANTS.values(), ids=PROFILE_VARIANTS.keys())
def test_schedule_invariants(profile: LearnerProfile) -> None:
    schedule = generate_schedule(profile)

    assert len(schedule.days) == PLAN_HORIZON_DAYS
    assert [day.day_index for day in schedule.days] == list(range(1, PLAN_HORIZON_DAYS + 1))

    introduced: Dict[str, int] = {}
    task_ids: List[str] = []
    for day in schedule.days:
        assert day.date == profile.start_date + timedelta(days=day.day_index - 1)
        assert day.week_number == (day.day_index - 1) // 7 + 1
        weekday = WEEKDAYS[day.date.weekday()]
        assert day.is_rest_day is (not profile.weekly_availability.get(weekday, False))
        if day.is_rest_day:
            assert day.tasks == []
        assert day.total_minutes <= profile.daily_minutes
        assert sum(1 for task in day.tasks if task.kind == "free_practice") <= 1

        for task in day.tasks:
            task_ids.append(task.task_id)
            if task.kind == "lesson":
                assert task.title not in introduced, f"{task.title} introduced twice"
                introduced[task.title] = day.day_index
            elif task.kind == "review":
                assert task.title in introduced
                assert day.day_index >= introduced[task.title] + 1

    assert len(task_ids) == len(set(task_ids))


def test_generation_is_deterministic() -> None:
    profile = _profile(daily_minutes=75, weekly_availability={"Monday": True, "Wednesday": True, "Friday": True})

    first = generate_schedule(profile)
    second = generate_schedule(profile)

    assert first.model_dump(mode="json") == second.model_dump(mode="json")


def test_day_one_introduces_first_three_lessons() -> None:
    schedule = generate_schedule(_profile())
    day = schedule.day(1)

    assert [task.title for task in day.tasks] == [
        "Posture & Main Droite",
        "Muting Main Gauche",
        "Le Métronome: Temps 1 & 3",
    ]
    assert [task.duration_minutes for task in day.tasks] == [15, 15, 20]
    assert [task.task_id for task in day.tasks] == ["lesson-1-0", "lesson-1-1", "lesson-1-2"]
    assert day.total_minutes == 50
    assert not any(task.is_review for task in day.tasks)


def test_day_two_reviews_then_continues_cursor() -> None:
    schedule = generate_schedule(_profile())
    day = schedule.day(2)
    reviews = [task for task in day.tasks if task.is_review]
    lessons = [task for task in day.tasks if not task.is_review]

    assert [task.title for task in reviews] == [
        "Posture & Main Droite",
        "Muting Main Gauche",
        "Le Métronome: Temps 1 & 3",
    ]
    assert [task.duration_minutes for task in reviews] == [8, 8, 10]
    assert reviews[0].task_id == "review-2-lesson-1-0"
    assert reviews[0].origin_task_id == "lesson-1-0"
    assert day.tasks[: len(reviews)] == reviews

    assert [task.task_id for task in lessons] == ["lesson-2-3", "lesson-2-4"]
    assert [task.title for task in lessons] == [
        "Notes: Cordes à vide & Case 5",
        "Technique de l'Araignée (Chromatique)",
    ]
    assert day.total_minutes == 56


def test_lesson_is_truncated_to_remaining_budget() -> None:
    schedule = generate_schedule(_profile())
    day = schedule.day(3)
    lessons = {task.title: task.duration_minutes for task in day.tasks if not task.is_review}

    assert lessons == {
        "Notes: Cases 0 à 5 (E & A)": 15,
        "Raking (Main Droite)": 15,
        "Groove: La note noire": 15,
    }
    assert day.total_minutes == 60


def test_capped_reviews_roll_forward_to_next_day() -> None:
    schedule = generate_schedule(_profile())

    day_four_reviews = _titles(schedule, 4, reviews=True)
    assert day_four_reviews == [
        "Posture & Main Droite",
        "Muting Main Gauche",
        "Le Métronome: Temps 1 & 3",
        "Notes: Cases 0 à 5 (E & A)",
    ]
    assert sum(task.duration_minutes for task in schedule.day(4).tasks if task.is_review) <= 36

    day_five_reviews = _titles(schedule, 5, reviews=True)
    assert "Raking (Main Droite)" in day_five_reviews
    assert "Groove: La note noire" in day_five_reviews
    groove = next(task for task in schedule.day(5).tasks if task.title == "Groove: La note noire")
    # Half of the 20-minute nominal length, even though day 3 only allotted 15.
    assert groove.duration_minutes == 10


def test_four_string_profile_never_sees_extended_range_lessons() -> None:
    schedule = generate_schedule(_profile(bass_type="4"))
    extended = {template.title for template in CATALOG if template.min_strings in (5, 6)}

    assert extended
    assert extended.isdisjoint(schedule.active_titles)
    assert all(task.title not in extended for _, task in schedule.tasks())


def test_six_string_profile_keeps_extended_range_lessons() -> None:
    curriculum = filter_curriculum(CATALOG, _profile(bass_type="6"))
    titles = [template.title for template in curriculum]

    assert "Accords 6 cordes (Voicings C aiguë)" in titles
    assert "Notes: Corde de Si Grave" in titles
    assert len(curriculum) == len(CATALOG)


def test_mastered_skill_removes_lesson_everywhere() -> None:
    schedule = generate_schedule(_profile(known_skills={"slap_basic": True}))
    slap_titles = {"Slap: Le Thumb (Pouce)", "Slap: Le Pop (Tir)"}

    assert slap_titles.isdisjoint(schedule.active_titles)
    assert all(task.title not in slap_titles for _, task in schedule.tasks())


def test_filter_preserves_catalog_order() -> None:
    profile = _profile(known_skills={"holding_posture": True, "raking": True})
    curriculum = filter_curriculum(CATALOG, profile)
    positions = [CATALOG.index(template) for template in curriculum]

    assert positions == sorted(positions)
    assert curriculum[0].title == "Muting Main Gauche"
    assert "Raking (Main Droite)" not in [template.title for template in curriculum]


def test_unmastered_skill_flag_keeps_lesson() -> None:
    curriculum = filter_curriculum(CATALOG, _profile(known_skills={"tapping": False}))

    assert "Tapping: Une main" in [template.title for template in curriculum]


def test_tiny_budget_never_introduces_new_content() -> None:
    schedule = generate_schedule(_profile(daily_minutes=5))

    for day in schedule.days:
        assert not day.is_rest_day
        assert all(task.kind == "review" for task in day.tasks)
    assert all(not day.tasks for day in schedule.days)


def test_empty_curriculum_fills_every_practice_day() -> None:
    profile = _profile(weekly_availability={"Monday": True, "Tuesday": True})
    schedule = generate_schedule(profile, catalog=())

    assert schedule.active_titles == []
    for day in schedule.days:
        if day.is_rest_day:
            continue
        assert len(day.tasks) == 1
        filler = day.tasks[0]
        assert filler.task_id == f"free-{day.day_index}"
        assert filler.title == FREE_PRACTICE_TITLE
        assert filler.category is LessonCategory.IMPROVISATION
        assert filler.duration_minutes == 60


def test_filler_follows_reviews_once_curriculum_is_exhausted() -> None:
    catalog = (_lesson("Long Tones", 20),)
    schedule = generate_schedule(_profile(daily_minutes=30), catalog=catalog)

    assert [task.kind for task in schedule.day(1).tasks] == ["lesson"]
    day_two = schedule.day(2)
    assert [task.kind for task in day_two.tasks] == ["review", "free_practice"]
    assert [task.duration_minutes for task in day_two.tasks] == [10, 20]
    assert [task.kind for task in schedule.day(3).tasks] == ["free_practice"]


def test_reviews_stop_at_horizon() -> None:
    catalog = (_lesson("Long Tones", 20),)
    schedule = generate_schedule(_profile(), catalog=catalog)
    review_days = [day.day_index for day in schedule.days if any(task.is_review for task in day.tasks)]

    assert review_days == [2, 4, 8, 15, 31, 61]


def test_review_ids_stay_unique_for_titles_differing_only_in_spacing() -> None:
    catalog = (_lesson("Slap Drill", 20), _lesson("SlapDrill", 20))
    schedule = generate_schedule(_profile(), catalog=catalog)

    task_ids = [task.task_id for _, task in schedule.tasks()]
    assert len(task_ids) == len(set(task_ids))
    reviews = [task for task in schedule.day(2).tasks if task.is_review]
    assert [task.title for task in reviews] == ["Slap Drill", "SlapDrill"]
    assert [task.task_id for task in reviews] == ["review-2-lesson-1-0", "review-2-lesson-1-1"]


def test_review_cap_applies_while_new_lessons_remain() -> None:
    curriculum = (_lesson("A", 30), _lesson("B", 30), _lesson("C", 30))
    ledger = ReviewLedger().schedule(curriculum[0], "lesson-0-0", 0).schedule(curriculum[1], "lesson-0-1", 0)

    tasks, state = allocate_day(1, 40, SequencerState(cursor=2, ledger=ledger), curriculum)

    assert [(task.kind, task.title, task.duration_minutes) for task in tasks] == [
        ("review", "A", 15),
        ("lesson", "C", 25),
    ]
    assert state.cursor == 3
    assert [entry.due_day for entry in state.ledger.due_on(1)] == [1]


def test_review_cap_lifts_once_curriculum_is_exhausted() -> None:
    curriculum = (_lesson("A", 30), _lesson("B", 30), _lesson("C", 30))
    ledger = ReviewLedger().schedule(curriculum[0], "lesson-0-0", 0).schedule(curriculum[1], "lesson-0-1", 0)

    tasks, state = allocate_day(1, 40, SequencerState(cursor=3, ledger=ledger), curriculum)

    assert [(task.kind, task.title, task.duration_minutes) for task in tasks] == [
        ("review", "A", 15),
        ("review", "B", 15),
    ]
    assert state.ledger.due_on(1) == []


def test_review_collision_skips_lesson_permanently(caplog: pytest.LogCaptureFixture) -> None:
    curriculum = (_lesson("A", 15), _lesson("B", 15))
    ledger = ReviewLedger().schedule(curriculum[0], "lesson-0-0", 0)

    with caplog.at_level("WARNING", logger="bass_coach.curriculum_sequencer"):
        tasks, state = allocate_day(1, 60, SequencerState(cursor=0, ledger=ledger), curriculum)

    assert [(task.kind, task.title) for task in tasks] == [
        ("review", "A"),
        ("lesson", "B"),
        ("free_practice", FREE_PRACTICE_TITLE),
    ]
    assert state.cursor == 2
    assert "already under review" in caplog.text

    later, _ = allocate_day(2, 60, state, curriculum)
    assert all(not (task.kind == "lesson" and task.title == "A") for task in later)


def test_allocate_day_leaves_input_state_untouched() -> None:
    curriculum = (_lesson("A", 15),)
    state = SequencerState()

    allocate_day(1, 60, state, curriculum)

    assert state.cursor == 0
    assert len(state.ledger) == 0


def test_rest_days_do_not_advance_cursor() -> None:
    profile = _profile(weekly_availability={"Tuesday": True})
    schedule = generate_schedule(profile)

    assert schedule.day(1).is_rest_day
    assert schedule.day(2).tasks[0].task_id == "lesson-2-0"
    assert schedule.day(90).date == MONDAY + timedelta(days=89)
    assert schedule.day(90).week_number == 13
