# backend/fitlog/services/profiles.py
from typing import List, Optional

from .. import db
from ..errors import DocumentNotFound, ErrorReporter
from ..models.user import UserProfile
from ..schemas import ProfileUpdate
from ..store import run_atomic


def get_profile(user_id: str) -> Optional[UserProfile]:
    if not user_id:
        raise ValueError("User ID not provided.")
    return db.session.get(UserProfile, user_id)


def update_profile(
    user_id: str,
    changes: ProfileUpdate,
    *,
    reporter: Optional[ErrorReporter] = None,
) -> None:
    """
    Presentation fields only; progression state is never written here.
    Failures are reported and re-raised.
    """
    if not user_id:
        raise ValueError("User ID not provided.")

    data = changes.model_dump(exclude_unset=True)

    def work():
        profile = db.session.get(UserProfile, user_id)
        if profile is None:
            raise DocumentNotFound(f"users/{user_id}")
        for key, value in data.items():
            setattr(profile, key, value)

    run_atomic(
        work,
        path=f"users/{user_id}",
        operation="update",
        request_resource_data=data,
        reporter=reporter,
        reraise=True,
    )


def leaderboard(limit: int = 10) -> List[UserProfile]:
    return (
        UserProfile.query.order_by(UserProfile.xp.desc(), UserProfile.id.asc())
        .limit(limit)
        .all()
    )
