from datetime import datetime

import pytest

from fitlog import db
from fitlog.badges import FIRST_CHALLENGE
from fitlog.errors import DocumentNotFound
from fitlog.models.social import Challenge, ChallengeParticipant
from fitlog.models.user import UserProfile
from fitlog.schemas import ChallengePayload
from fitlog.services.challenges import (
    STARTER_CHALLENGES,
    create_challenge,
    list_challenges,
    seed_challenges,
    toggle_challenge_participation,
)

SEEDED_AT = datetime(2025, 11, 17, 12, 0)


@pytest.fixture
def seeded(app):
    return seed_challenges(now=SEEDED_AT)


def test_seed_is_idempotent(app):
    assert seed_challenges(now=SEEDED_AT) == len(STARTER_CHALLENGES)
    assert seed_challenges(now=SEEDED_AT) == 0

    challenge = db.session.get(Challenge, "weekly-cardio-burn")
    assert challenge.participant_count == 0
    assert challenge.end_date == datetime(2025, 11, 24, 12, 0)


def test_list_challenges_by_end_date(app, seeded):
    ids = [c.id for c in list_challenges()]
    assert ids == ["weekend-warrior-5k", "weekly-cardio-burn", "monthly-pushup-challenge"]


def test_join_then_leave(app, seeded, make_profile):
    make_profile("alice")

    joined = toggle_challenge_participation("alice", "weekly-cardio-burn")
    assert joined.joined is True
    assert joined.badge_unlocked == FIRST_CHALLENGE

    challenge = db.session.get(Challenge, "weekly-cardio-burn")
    profile = db.session.get(UserProfile, "alice")
    assert challenge.participant_count == 1
    assert challenge.to_dict(user_id="alice")["is_participant"] is True
    assert profile.xp == 25 + 10
    assert FIRST_CHALLENGE in profile.badge_ids

    left = toggle_challenge_participation("alice", "weekly-cardio-burn")
    assert left.joined is False
    assert left.badge_unlocked is None
    assert db.session.get(Challenge, "weekly-cardio-burn").participant_count == 0
    assert db.session.get(ChallengeParticipant, ("weekly-cardio-burn", "alice")) is None
    # xp is kept after leaving
    assert db.session.get(UserProfile, "alice").xp == 35


def test_first_challenge_badge_only_once(app, seeded, make_profile):
    make_profile("alice")

    first = toggle_challenge_participation("alice", "weekly-cardio-burn")
    second = toggle_challenge_participation("alice", "weekend-warrior-5k")

    assert first.badge_unlocked == FIRST_CHALLENGE
    assert second.badge_unlocked is None
    assert db.session.get(UserProfile, "alice").xp == 45


def test_join_failure_is_reported_and_raised(app, seeded, failures):
    with pytest.raises(DocumentNotFound):
        toggle_challenge_participation("ghost", "weekly-cardio-burn")

    assert len(failures) == 1
    assert failures[0].operation == "update"
    assert failures[0].kind == "not-found"
    assert db.session.get(Challenge, "weekly-cardio-burn").participant_count == 0


def test_create_challenge_makes_author_first_participant(app, make_profile):
    make_profile("alice")
    payload = ChallengePayload(
        title="Plank Month",
        description="Hold it",
        type="performance-based",
        goal_value=600,
        goal_unit="seconds",
        end_date=datetime(2025, 12, 31),
    )

    challenge_id = create_challenge("alice", payload)

    challenge = db.session.get(Challenge, challenge_id)
    assert challenge.participant_count == 1
    assert challenge.author_id == "alice"
    assert [p.user_id for p in challenge.participants] == ["alice"]


def test_create_challenge_failure_carries_request_data(app, failures):
    payload = ChallengePayload(
        title="Plank Month", type="time-bound", goal_value=5, goal_unit="km"
    )

    with pytest.raises(DocumentNotFound):
        create_challenge("ghost", payload)

    assert failures[0].operation == "write"
    assert failures[0].request_resource_data["title"] == "Plank Month"
    assert Challenge.query.count() == 0
