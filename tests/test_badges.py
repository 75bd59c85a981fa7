from fitlog.badges import (
    BADGE_CATALOG,
    BADGE_IDS,
    FIRST_WORKOUT,
    PUSH_UP_PRO,
    badges_to_unlock,
    is_push_up,
    push_up_volume,
)
from fitlog.schemas import WorkoutExercise


def test_push_up_matching_is_loose():
    assert is_push_up("Push-up")
    assert is_push_up("incline PUSH UP variation")
    assert not is_push_up("Pushup")
    assert not is_push_up("Pull-up")
    assert not is_push_up("")


def test_push_up_volume_sums_matching_exercises_only():
    exercises = [
        WorkoutExercise(name="Push-up", sets=3, reps=10),
        WorkoutExercise(name="Squat", sets=5, reps=5, weight=80),
        WorkoutExercise(name="Diamond push up", sets=2, reps=8),
    ]
    assert push_up_volume(exercises) == 46
    assert push_up_volume([]) == 0
    assert push_up_volume(None) == 0


def test_badges_to_unlock_drops_held_and_duplicates():
    assert badges_to_unlock([FIRST_WORKOUT], [FIRST_WORKOUT, PUSH_UP_PRO]) == [PUSH_UP_PRO]
    assert badges_to_unlock([], [PUSH_UP_PRO, PUSH_UP_PRO]) == [PUSH_UP_PRO]
    assert badges_to_unlock({PUSH_UP_PRO}, [PUSH_UP_PRO]) == []


def test_catalog_covers_every_badge():
    assert set(BADGE_CATALOG) == set(BADGE_IDS)
    for meta in BADGE_CATALOG.values():
        assert meta["title"] and meta["description"]
