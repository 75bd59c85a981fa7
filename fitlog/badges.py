# backend/fitlog/badges.py
from typing import Iterable, List, Optional

FIRST_WORKOUT = "first-workout"
SEVEN_DAY_STREAK = "7-day-streak"
PUSH_UP_PRO = "push-up-pro"
TOP_CONTRIBUTOR = "top-contributor"
FIRST_CHALLENGE = "first-challenge"

BADGE_IDS = (
    FIRST_WORKOUT,
    SEVEN_DAY_STREAK,
    PUSH_UP_PRO,
    TOP_CONTRIBUTOR,
    FIRST_CHALLENGE,
)

STREAK_BADGE_DAYS = 7
PUSH_UP_PRO_VOLUME = 100
TOP_CONTRIBUTOR_POST_COUNT = 10

# Display metadata for the rewards overview.
BADGE_CATALOG = {
    FIRST_WORKOUT: {
        "title": "First Workout",
        "description": "Log your very first workout.",
    },
    SEVEN_DAY_STREAK: {
        "title": "7-Day Streak",
        "description": "Work out seven days in a row.",
    },
    PUSH_UP_PRO: {
        "title": "Push-up Pro",
        "description": "Complete 100 push-ups in total.",
    },
    TOP_CONTRIBUTOR: {
        "title": "Top Contributor",
        "description": "Share 10 posts with the community.",
    },
    FIRST_CHALLENGE: {
        "title": "Challenger",
        "description": "Join your first challenge.",
    },
}

_PUSH_UP_MARKERS = ("push-up", "push up")


def is_push_up(exercise_name: str) -> bool:
    # substring match, so "Incline Push-up Variation" counts
    name = (exercise_name or "").lower()
    return any(marker in name for marker in _PUSH_UP_MARKERS)


def push_up_volume(exercises: Optional[Iterable]) -> int:
    """Sum of sets * reps over every push-up-like exercise."""
    total = 0
    for exercise in exercises or ():
        if is_push_up(exercise.name):
            total += exercise.sets * exercise.reps
    return total


def streak_badge_earned(streak: int) -> bool:
    return streak >= STREAK_BADGE_DAYS


def push_up_pro_earned(cumulative_pushups: int) -> bool:
    return cumulative_pushups >= PUSH_UP_PRO_VOLUME


def top_contributor_earned(post_count: int) -> bool:
    return post_count >= TOP_CONTRIBUTOR_POST_COUNT


def badges_to_unlock(held: Iterable[str], candidates: Iterable[str]) -> List[str]:
    """
    Candidates not already held, in order and without duplicates.
    Re-triggering a held badge yields nothing.
    """
    seen = set(held)
    result = []
    for badge_id in candidates:
        if badge_id in seen:
            continue
        seen.add(badge_id)
        result.append(badge_id)
    return result
