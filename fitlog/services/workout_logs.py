# backend/fitlog/services/workout_logs.py
"""
Workout log ingestion and the progression state derived from it.

``submit_workout_log`` creates the log and recomputes the owner's profile
(XP, streak, weekly/monthly rollups, push-up counter, badges) in a single
unit of work: either all of it commits or none of it does.
"""
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import List, Optional

from .. import db
from ..badges import (
    FIRST_WORKOUT,
    PUSH_UP_PRO,
    SEVEN_DAY_STREAK,
    badges_to_unlock,
    push_up_pro_earned,
    push_up_volume,
    streak_badge_earned,
)
from ..buckets import days_between, month_id, week_id
from ..errors import ErrorReporter, FailureEvent, PermissionDenied
from ..models.user import UserBadge, UserProfile
from ..models.workout import WorkoutLog, new_id
from ..progression import XP_PER_WORKOUT
from ..schemas import WorkoutLogPayload
from ..store import Outcome, run_atomic

DIFFICULTY_RATINGS = ("easy", "moderate", "hard")


@dataclass
class WorkoutLogResult:
    unlocked_badges: List[str] = field(default_factory=list)
    # None means the log may not have been persisted
    log_id: Optional[str] = None
    failure: Optional[FailureEvent] = None


# ------------------------------
# Pure helpers
# ------------------------------
def next_streak(current: int, last_workout_date: Optional[date], today: date) -> int:
    if last_workout_date is None:
        return 1

    diff = days_between(last_workout_date, today)
    if diff == 1:
        return current + 1
    if diff > 1:
        return 1
    # same day (or a stored date ahead of today): leave the streak alone
    return current


def rolled_up(stored_bucket: Optional[str], current_bucket: str, stored_total: int, amount: int) -> int:
    """Accumulate within the same bucket, restart when the bucket changed."""
    if stored_bucket == current_bucket:
        return (stored_total or 0) + amount
    return amount


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ------------------------------
# Transaction branches
# ------------------------------
def _create_profile(user_id: str, payload: WorkoutLogPayload, today: date) -> List[str]:
    pushups = push_up_volume(payload.exercises)

    unlocked = [FIRST_WORKOUT]
    if push_up_pro_earned(pushups):
        unlocked.append(PUSH_UP_PRO)

    profile = UserProfile(
        id=user_id,
        display_name="New User",
        photo_url="",
        xp=XP_PER_WORKOUT,
        streak=1,
        last_workout_date=today,
        total_calories_this_week=payload.calories,
        total_workouts_this_week=1,
        last_activity_week=week_id(today),
        total_calories_this_month=payload.calories,
        total_workouts_this_month=1,
        last_activity_month=month_id(today),
        cumulative_pushups=pushups,
        post_count=0,
        badges=[UserBadge(badge_id=badge_id) for badge_id in unlocked],
    )
    db.session.add(profile)
    return unlocked


def _update_profile(profile: UserProfile, payload: WorkoutLogPayload, today: date) -> List[str]:
    held = profile.badge_ids
    candidates = []

    # Count BEFORE the new log is staged, otherwise autoflush counts it too
    if profile.workout_logs.count() == 0:
        candidates.append(FIRST_WORKOUT)

    streak = next_streak(profile.streak or 0, profile.last_workout_date, today)
    if streak_badge_earned(streak):
        candidates.append(SEVEN_DAY_STREAK)

    current_week = week_id(today)
    current_month = month_id(today)

    pushups = (profile.cumulative_pushups or 0) + push_up_volume(payload.exercises)
    if push_up_pro_earned(pushups):
        candidates.append(PUSH_UP_PRO)

    profile.total_calories_this_week = rolled_up(
        profile.last_activity_week, current_week,
        profile.total_calories_this_week, payload.calories,
    )
    profile.total_workouts_this_week = rolled_up(
        profile.last_activity_week, current_week,
        profile.total_workouts_this_week, 1,
    )
    profile.total_calories_this_month = rolled_up(
        profile.last_activity_month, current_month,
        profile.total_calories_this_month, payload.calories,
    )
    profile.total_workouts_this_month = rolled_up(
        profile.last_activity_month, current_month,
        profile.total_workouts_this_month, 1,
    )
    profile.last_activity_week = current_week
    profile.last_activity_month = current_month

    # increment in SQL so concurrent transactions compose
    profile.xp = UserProfile.xp + XP_PER_WORKOUT
    profile.streak = streak
    profile.last_workout_date = today
    profile.cumulative_pushups = pushups

    unlocked = badges_to_unlock(held, candidates)
    for badge_id in unlocked:
        profile.badges.append(UserBadge(badge_id=badge_id))
    return unlocked


# ------------------------------
# Public operations
# ------------------------------
def submit_workout_log(
    user_id: str,
    payload: WorkoutLogPayload,
    *,
    reporter: Optional[ErrorReporter] = None,
    now: Optional[datetime] = None,
) -> WorkoutLogResult:
    if not user_id:
        raise ValueError("User must be logged in to add a workout log.")

    moment = now or _utc_now()
    today = moment.date()
    log_id = new_id()

    def work():
        profile = db.session.get(UserProfile, user_id, with_for_update=True)
        if profile is None:
            unlocked = _create_profile(user_id, payload, today)
        else:
            unlocked = _update_profile(profile, payload, today)

        db.session.add(
            WorkoutLog(
                id=log_id,
                user_id=user_id,
                date=moment.replace(tzinfo=None),
                workout_title=payload.workout_title,
                duration=payload.duration,
                calories=payload.calories,
                exercises=[e.model_dump() for e in payload.exercises],
                difficulty_rating=payload.difficulty_rating,
            )
        )
        return unlocked

    outcome = run_atomic(
        work,
        path=f"transaction on users/{user_id} and users/{user_id}/workout_logs/{log_id}",
        operation="write",
        reporter=reporter,
    )
    if not outcome.ok:
        return WorkoutLogResult(failure=outcome.failure)
    return WorkoutLogResult(unlocked_badges=outcome.value, log_id=log_id)


def list_workout_logs(
    user_id: str,
    *,
    limit: Optional[int] = None,
    reporter: Optional[ErrorReporter] = None,
) -> List[WorkoutLog]:
    """Newest first. Store or decode failures are reported and yield []."""
    if not user_id:
        raise ValueError("User ID is required to get workout logs.")

    def work():
        query = WorkoutLog.query.filter_by(user_id=user_id).order_by(
            WorkoutLog.date.desc()
        )
        if limit is not None:
            query = query.limit(limit)
        logs = query.all()
        for log in logs:
            log.exercise_list()
        return logs

    outcome = run_atomic(
        work,
        path=f"users/{user_id}/workout_logs",
        operation="list",
        reporter=reporter,
    )
    return outcome.value if outcome.ok else []


def rate_workout_log(
    user_id: str,
    log_id: str,
    rating: str,
    *,
    reporter: Optional[ErrorReporter] = None,
) -> Outcome:
    """Best-effort: attach a difficulty rating to one of the user's logs."""
    if not user_id:
        raise ValueError("User ID is required to update feedback.")
    if rating not in DIFFICULTY_RATINGS:
        raise ValueError(f"difficulty_rating must be one of {DIFFICULTY_RATINGS}")

    path = f"users/{user_id}/workout_logs/{log_id}"

    def work():
        log = db.session.get(WorkoutLog, log_id)
        if log is None or log.user_id != user_id:
            raise PermissionDenied(path)
        log.difficulty_rating = rating

    return run_atomic(
        work,
        path=path,
        operation="update",
        request_resource_data={"difficulty_rating": rating},
        reporter=reporter,
    )
