# backend/fitlog/services/challenges.py
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from .. import db
from ..badges import FIRST_CHALLENGE, badges_to_unlock
from ..errors import DocumentNotFound, ErrorReporter
from ..models.social import Challenge, ChallengeParticipant
from ..models.user import UserBadge, UserProfile
from ..models.workout import new_id
from ..progression import CHALLENGE_JOIN_XP
from ..schemas import ChallengePayload
from ..store import run_atomic

logger = logging.getLogger(__name__)

# Starter challenges; end dates are relative to the seeding time.
STARTER_CHALLENGES = [
    {
        "id": "weekly-cardio-burn",
        "title": "Weekly Cardio Burn",
        "description": "Burn 2,500 calories through cardio this week.",
        "type": "time-bound",
        "goal_value": 2500,
        "goal_unit": "calories",
        "days": 7,
    },
    {
        "id": "monthly-pushup-challenge",
        "title": "Monthly Push-up Challenge",
        "description": "Complete 500 push-ups before the end of the month.",
        "type": "performance-based",
        "goal_value": 500,
        "goal_unit": "pushups",
        "days": 30,
    },
    {
        "id": "weekend-warrior-5k",
        "title": "Weekend Warrior 5k",
        "description": "Log a 5k run this weekend.",
        "type": "time-bound",
        "goal_value": 5,
        "goal_unit": "km",
        "days": 3,
    },
]


@dataclass
class ParticipationResult:
    joined: bool
    badge_unlocked: Optional[str] = None


def toggle_challenge_participation(
    user_id: str,
    challenge_id: str,
    *,
    reporter: Optional[ErrorReporter] = None,
) -> ParticipationResult:
    """
    Join the challenge if the user is not a participant, leave it otherwise.
    Membership is read inside the transaction, never taken from the caller.

    Failures are reported and then re-raised so the caller can undo any
    optimistic UI state.
    """
    if not user_id:
        raise ValueError("User must be logged in to join a challenge.")

    def work():
        profile = db.session.get(UserProfile, user_id, with_for_update=True)
        if profile is None:
            raise DocumentNotFound(f"users/{user_id}")
        challenge = db.session.get(Challenge, challenge_id, with_for_update=True)
        if challenge is None:
            raise DocumentNotFound(f"challenges/{challenge_id}")

        participant = db.session.get(ChallengeParticipant, (challenge_id, user_id))
        if participant is not None:
            db.session.delete(participant)
            challenge.participant_count = Challenge.participant_count - 1
            return ParticipationResult(joined=False)

        db.session.add(ChallengeParticipant(challenge_id=challenge_id, user_id=user_id))
        challenge.participant_count = Challenge.participant_count + 1
        profile.xp = UserProfile.xp + CHALLENGE_JOIN_XP

        unlocked = badges_to_unlock(profile.badge_ids, [FIRST_CHALLENGE])
        for badge_id in unlocked:
            profile.badges.append(UserBadge(badge_id=badge_id))
        return ParticipationResult(
            joined=True, badge_unlocked=unlocked[0] if unlocked else None
        )

    outcome = run_atomic(
        work,
        path=f"transaction on users/{user_id} and challenges/{challenge_id}",
        operation="update",
        reporter=reporter,
        reraise=True,
    )
    return outcome.value


def create_challenge(
    author_id: str,
    payload: ChallengePayload,
    *,
    reporter: Optional[ErrorReporter] = None,
) -> str:
    """The author becomes the first participant. Failures are re-raised."""
    if not author_id:
        raise ValueError("User must be logged in to create a challenge.")

    challenge_id = new_id()

    def work():
        if db.session.get(UserProfile, author_id) is None:
            raise DocumentNotFound(f"users/{author_id}")
        db.session.add(
            Challenge(
                id=challenge_id,
                author_id=author_id,
                title=payload.title,
                description=payload.description,
                type=payload.type,
                goal_value=payload.goal_value,
                goal_unit=payload.goal_unit,
                end_date=payload.end_date,
                participant_count=1,
                participants=[ChallengeParticipant(user_id=author_id)],
            )
        )
        return challenge_id

    outcome = run_atomic(
        work,
        path=f"transaction on challenges/{challenge_id} and users/{author_id}",
        operation="write",
        request_resource_data=payload.model_dump(mode="json"),
        reporter=reporter,
        reraise=True,
    )
    return outcome.value


def list_challenges() -> List[Challenge]:
    return Challenge.query.order_by(Challenge.end_date.asc()).all()


def seed_challenges(
    *,
    reporter: Optional[ErrorReporter] = None,
    now: Optional[datetime] = None,
) -> int:
    """Insert the starter challenges that are missing. Returns how many."""
    now = now or datetime.now(timezone.utc)

    def work():
        created = 0
        for starter in STARTER_CHALLENGES:
            if db.session.get(Challenge, starter["id"]) is not None:
                continue
            fields = {k: v for k, v in starter.items() if k != "days"}
            db.session.add(
                Challenge(
                    participant_count=0,
                    end_date=(now + timedelta(days=starter["days"])).replace(tzinfo=None),
                    **fields,
                )
            )
            created += 1
        return created

    outcome = run_atomic(work, path="challenges", operation="write", reporter=reporter)
    if outcome.ok and outcome.value:
        logger.info("Seeded %d starter challenges", outcome.value)
    return outcome.value if outcome.ok else 0
