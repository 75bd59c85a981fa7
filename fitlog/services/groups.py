# backend/fitlog/services/groups.py
import logging
from dataclasses import dataclass
from typing import List, Optional

from .. import db
from ..errors import DocumentNotFound, ErrorReporter, FailureEvent
from ..models.social import Group, GroupMember
from ..models.user import UserProfile
from ..store import run_atomic

logger = logging.getLogger(__name__)

STARTER_GROUPS = [
    {
        "id": "morning-runners",
        "name": "Morning Runners",
        "description": "Early risers logging their first miles before breakfast.",
    },
    {
        "id": "strength-society",
        "name": "Strength Society",
        "description": "Lifting heavy things and sharing PRs.",
    },
    {
        "id": "yoga-flow",
        "name": "Yoga Flow",
        "description": "Mobility, balance and mindful movement.",
    },
    {
        "id": "hiit-squad",
        "name": "HIIT Squad",
        "description": "Short, sharp, sweaty interval sessions.",
    },
]


@dataclass
class MembershipResult:
    member: Optional[bool] = None
    member_count: Optional[int] = None
    failure: Optional[FailureEvent] = None


def toggle_group_membership(
    user_id: str,
    group_id: str,
    *,
    reporter: Optional[ErrorReporter] = None,
) -> MembershipResult:
    """Join when not a member, leave otherwise (decided from stored membership)."""
    if not user_id:
        raise ValueError("User must be logged in to join a group.")

    def work():
        if db.session.get(UserProfile, user_id) is None:
            raise DocumentNotFound(f"users/{user_id}")
        group = db.session.get(Group, group_id, with_for_update=True)
        if group is None:
            raise DocumentNotFound(f"groups/{group_id}")

        membership = db.session.get(GroupMember, (group_id, user_id))
        if membership is None:
            db.session.add(GroupMember(group_id=group_id, user_id=user_id))
            group.member_count = Group.member_count + 1
            member = True
        else:
            db.session.delete(membership)
            group.member_count = Group.member_count - 1
            member = False

        db.session.flush()
        db.session.refresh(group, ["member_count"])
        return MembershipResult(member=member, member_count=group.member_count)

    outcome = run_atomic(
        work,
        path=f"transaction on users/{user_id} and groups/{group_id}",
        operation="update",
        reporter=reporter,
    )
    return outcome.value if outcome.ok else MembershipResult(failure=outcome.failure)


def list_groups() -> List[Group]:
    return Group.query.order_by(Group.name.asc()).all()


def seed_groups(*, reporter: Optional[ErrorReporter] = None) -> int:
    def work():
        created = 0
        for starter in STARTER_GROUPS:
            if db.session.get(Group, starter["id"]) is None:
                db.session.add(Group(member_count=0, **starter))
                created += 1
        return created

    outcome = run_atomic(work, path="groups", operation="write", reporter=reporter)
    if outcome.ok and outcome.value:
        logger.info("Seeded %d starter groups", outcome.value)
    return outcome.value if outcome.ok else 0
