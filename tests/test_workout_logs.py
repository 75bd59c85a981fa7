from datetime import date, datetime, timedelta

import pytest
from sqlalchemy.exc import OperationalError

from fitlog import db
from fitlog.badges import FIRST_WORKOUT, PUSH_UP_PRO, SEVEN_DAY_STREAK
from fitlog.buckets import month_id, week_id
from fitlog.errors import ErrorReporter
from fitlog.models.user import UserProfile
from fitlog.models.workout import WorkoutLog
from fitlog.schemas import WorkoutExercise
from fitlog.services.workout_logs import (
    list_workout_logs,
    next_streak,
    rate_workout_log,
    rolled_up,
    submit_workout_log,
)

MONDAY = datetime(2025, 11, 17, 8, 30)


def pushups(sets, reps):
    return [WorkoutExercise(name="Push-up", sets=sets, reps=reps, weight=0)]


# ------------------------------
# Pure helpers
# ------------------------------
@pytest.mark.parametrize(
    "current, last, today, expected",
    [
        (0, None, date(2025, 1, 2), 1),
        (6, date(2025, 1, 1), date(2025, 1, 2), 7),
        (6, date(2025, 1, 1), date(2025, 1, 3), 1),
        (4, date(2025, 1, 2), date(2025, 1, 2), 4),
        (4, date(2025, 1, 5), date(2025, 1, 2), 4),
    ],
)
def test_next_streak(current, last, today, expected):
    assert next_streak(current, last, today) == expected


def test_rolled_up():
    assert rolled_up("2025-W47", "2025-W47", 5, 1) == 6
    assert rolled_up("2025-W46", "2025-W47", 5, 1) == 1
    assert rolled_up(None, "2025-W47", None, 300) == 300


# ------------------------------
# Branch A: first-ever log
# ------------------------------
def test_first_log_creates_profile(app, workout):
    result = submit_workout_log(
        "alice", workout(calories=250, exercises=pushups(10, 12)), now=MONDAY
    )

    assert result.log_id is not None
    assert result.unlocked_badges == [FIRST_WORKOUT, PUSH_UP_PRO]

    profile = db.session.get(UserProfile, "alice")
    assert profile.xp == 25
    assert profile.streak == 1
    assert profile.cumulative_pushups == 120
    assert profile.badge_ids == {FIRST_WORKOUT, PUSH_UP_PRO}
    assert profile.last_workout_date == MONDAY.date()
    assert profile.last_activity_week == week_id(MONDAY)
    assert profile.last_activity_month == month_id(MONDAY)
    assert profile.total_calories_this_week == 250
    assert profile.total_workouts_this_week == 1
    assert profile.total_calories_this_month == 250
    assert profile.total_workouts_this_month == 1

    log = db.session.get(WorkoutLog, result.log_id)
    assert log.user_id == "alice"
    assert log.date == MONDAY
    assert [e.name for e in log.exercise_list()] == ["Push-up"]


def test_first_log_without_push_ups_only_unlocks_first_workout(app, workout):
    result = submit_workout_log("bob", workout(exercises=pushups(3, 10)), now=MONDAY)

    assert result.unlocked_badges == [FIRST_WORKOUT]
    assert db.session.get(UserProfile, "bob").cumulative_pushups == 30


def test_missing_user_id_is_a_contract_violation(app, workout, failures):
    with pytest.raises(ValueError):
        submit_workout_log("", workout())
    assert failures == []
    assert WorkoutLog.query.count() == 0


# ------------------------------
# Branch B: existing profile
# ------------------------------
def test_second_log_accumulates(app, workout, make_profile):
    make_profile("alice", when=MONDAY)

    result = submit_workout_log(
        "alice", workout(calories=400), now=MONDAY + timedelta(days=1)
    )

    assert result.unlocked_badges == []
    profile = db.session.get(UserProfile, "alice")
    assert profile.xp == 50
    assert profile.streak == 2
    assert profile.total_workouts_this_week == 2
    assert profile.total_calories_this_week == 700
    assert profile.workout_logs.count() == 2


def test_streak_continuation_unlocks_badge(app, workout, make_profile):
    yesterday = MONDAY - timedelta(days=1)
    profile = make_profile("alice", when=yesterday)
    profile.streak = 6
    db.session.commit()

    result = submit_workout_log("alice", workout(), now=MONDAY)

    assert result.unlocked_badges == [SEVEN_DAY_STREAK]
    profile = db.session.get(UserProfile, "alice")
    assert profile.streak == 7
    assert SEVEN_DAY_STREAK in profile.badge_ids


def test_streak_resets_after_a_gap(app, workout, make_profile):
    profile = make_profile("alice", when=MONDAY - timedelta(days=2))
    profile.streak = 6
    db.session.commit()

    result = submit_workout_log("alice", workout(), now=MONDAY)

    assert result.unlocked_badges == []
    assert db.session.get(UserProfile, "alice").streak == 1


def test_same_day_log_leaves_streak_unchanged(app, workout, make_profile):
    profile = make_profile("alice", when=MONDAY)
    profile.streak = 3
    db.session.commit()

    submit_workout_log("alice", workout(), now=MONDAY + timedelta(hours=5))

    profile = db.session.get(UserProfile, "alice")
    assert profile.streak == 3
    assert profile.xp == 50


def test_weekly_rollup_resets_in_a_new_week(app, workout, make_profile):
    last_week = MONDAY - timedelta(days=7)
    profile = make_profile("alice", when=last_week)
    profile.total_workouts_this_week = 5
    profile.total_calories_this_week = 1500
    db.session.commit()

    submit_workout_log("alice", workout(calories=200), now=MONDAY)

    profile = db.session.get(UserProfile, "alice")
    assert profile.total_workouts_this_week == 1
    assert profile.total_calories_this_week == 200
    assert profile.last_activity_week == week_id(MONDAY)
    # same month: keeps accumulating
    assert profile.total_workouts_this_month == 2
    assert profile.last_activity_month == "2025-11"


def test_monthly_rollup_resets_in_a_new_month(app, workout, make_profile):
    make_profile("alice", when=datetime(2025, 10, 31, 18, 0))

    submit_workout_log("alice", workout(calories=120), now=datetime(2025, 11, 1, 7, 0))

    profile = db.session.get(UserProfile, "alice")
    assert profile.last_activity_month == "2025-11"
    assert profile.total_workouts_this_month == 1
    assert profile.total_calories_this_month == 120
    # Friday and Saturday of the same ISO week
    assert profile.total_workouts_this_week == 2


def test_push_up_pro_is_not_unlocked_twice(app, workout):
    first = submit_workout_log("alice", workout(exercises=pushups(10, 12)), now=MONDAY)
    second = submit_workout_log(
        "alice", workout(exercises=pushups(10, 12)), now=MONDAY + timedelta(days=1)
    )

    assert PUSH_UP_PRO in first.unlocked_badges
    assert second.unlocked_badges == []

    profile = db.session.get(UserProfile, "alice")
    assert profile.cumulative_pushups == 240
    assert [b.badge_id for b in profile.badges].count(PUSH_UP_PRO) == 1


def test_cumulative_push_ups_cross_the_threshold(app, workout):
    submit_workout_log("alice", workout(exercises=pushups(6, 10)), now=MONDAY)
    result = submit_workout_log(
        "alice", workout(exercises=pushups(4, 10)), now=MONDAY + timedelta(days=1)
    )

    assert result.unlocked_badges == [PUSH_UP_PRO]


def test_first_workout_is_queued_for_profile_without_logs(app, workout):
    # profile created by another path (e.g. the profile screen) with no logs yet
    db.session.add(UserProfile(id="carol", display_name="Carol"))
    db.session.commit()

    result = submit_workout_log("carol", workout(), now=MONDAY)

    assert result.unlocked_badges == [FIRST_WORKOUT]
    profile = db.session.get(UserProfile, "carol")
    assert profile.xp == 25
    assert profile.streak == 1


# ------------------------------
# Atomicity
# ------------------------------
def _failing_commit():
    raise OperationalError("COMMIT", {}, Exception("transaction aborted"))


def test_failed_commit_persists_nothing_for_new_user(app, workout, failures, monkeypatch):
    monkeypatch.setattr(db.session, "commit", _failing_commit)

    result = submit_workout_log("alice", workout(exercises=pushups(10, 12)), now=MONDAY)
    monkeypatch.undo()

    assert result.log_id is None
    assert result.unlocked_badges == []
    assert result.failure.kind == "aborted"
    assert db.session.get(UserProfile, "alice") is None
    assert WorkoutLog.query.count() == 0

    assert len(failures) == 1
    event = failures[0]
    assert event.operation == "write"
    assert event.path.startswith("transaction on users/alice and users/alice/workout_logs/")


def test_failed_commit_leaves_existing_profile_untouched(
    app, workout, failures, make_profile, monkeypatch
):
    make_profile("alice", when=MONDAY - timedelta(days=1))
    monkeypatch.setattr(db.session, "commit", _failing_commit)

    result = submit_workout_log("alice", workout(exercises=pushups(10, 12)), now=MONDAY)
    monkeypatch.undo()

    assert result.log_id is None
    profile = db.session.get(UserProfile, "alice")
    assert profile.xp == 25
    assert profile.streak == 1
    assert profile.cumulative_pushups == 0
    assert profile.badge_ids == {FIRST_WORKOUT}
    assert WorkoutLog.query.count() == 1
    assert len(failures) == 1


def test_injected_reporter_receives_the_event(app, workout, failures, monkeypatch):
    own = ErrorReporter()
    received = []
    own.subscribe(received.append)
    monkeypatch.setattr(db.session, "commit", _failing_commit)

    submit_workout_log("alice", workout(), reporter=own, now=MONDAY)

    assert len(received) == 1
    assert failures == []


# ------------------------------
# Listing and rating
# ------------------------------
def test_list_workout_logs_newest_first(app, workout):
    for offset, title in enumerate(["one", "two", "three"]):
        submit_workout_log("alice", workout(title=title), now=MONDAY + timedelta(days=offset))
    submit_workout_log("bob", workout(title="other"), now=MONDAY)

    logs = list_workout_logs("alice")
    assert [log.workout_title for log in logs] == ["three", "two", "one"]
    assert [log.workout_title for log in list_workout_logs("alice", limit=2)] == [
        "three",
        "two",
    ]
    assert list_workout_logs("alice", limit=0) == []


def test_list_workout_logs_reports_malformed_documents(app, failures, make_profile):
    make_profile("alice")
    db.session.add(
        WorkoutLog(
            user_id="alice",
            date=MONDAY,
            workout_title="broken",
            exercises=[{"name": "Push-up", "sets": "lots"}],
        )
    )
    db.session.commit()

    assert list_workout_logs("alice") == []
    assert len(failures) == 1
    assert failures[0].kind == "decode"
    assert failures[0].operation == "list"


def test_rate_own_log(app, workout):
    result = submit_workout_log("alice", workout(), now=MONDAY)

    outcome = rate_workout_log("alice", result.log_id, "hard")

    assert outcome.ok
    assert db.session.get(WorkoutLog, result.log_id).difficulty_rating == "hard"


def test_rating_someone_elses_log_is_denied(app, workout, failures):
    result = submit_workout_log("alice", workout(), now=MONDAY)

    outcome = rate_workout_log("mallory", result.log_id, "easy")

    assert not outcome.ok
    assert outcome.failure.kind == "permission-denied"
    assert failures[0].request_resource_data == {"difficulty_rating": "easy"}
    assert db.session.get(WorkoutLog, result.log_id).difficulty_rating is None


def test_rating_must_be_known(app):
    with pytest.raises(ValueError):
        rate_workout_log("alice", "some-log", "brutal")
