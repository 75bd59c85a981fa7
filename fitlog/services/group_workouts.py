# backend/fitlog/services/group_workouts.py
from typing import List, Optional

from .. import db
from ..errors import DocumentNotFound, ErrorReporter
from ..models.social import GroupWorkoutSession, SessionParticipant
from ..models.workout import new_id
from ..schemas import GroupWorkoutSessionPayload, SessionParticipantPayload
from ..store import run_atomic


def create_group_workout_session(
    host_id: str,
    payload: GroupWorkoutSessionPayload,
    *,
    reporter: Optional[ErrorReporter] = None,
) -> str:
    if not host_id:
        raise ValueError("User must be logged in to host a session.")

    session_id = new_id()

    def work():
        db.session.add(
            GroupWorkoutSession(
                id=session_id,
                host_id=host_id,
                host_name=payload.host_name,
                host_photo_url=payload.host_photo_url,
                workout_slug=payload.workout_slug,
                workout_title=payload.workout_title,
                status="active",
                participants=[
                    SessionParticipant(
                        user_id=host_id,
                        display_name=payload.host_name,
                        photo_url=payload.host_photo_url,
                    )
                ],
            )
        )
        return session_id

    outcome = run_atomic(
        work,
        path="group_workout_sessions",
        operation="create",
        request_resource_data=payload.model_dump(),
        reporter=reporter,
        reraise=True,
    )
    return outcome.value


def join_group_workout_session(
    session_id: str,
    user_id: str,
    payload: SessionParticipantPayload,
    *,
    reporter: Optional[ErrorReporter] = None,
) -> None:
    """Joining twice is a no-op."""
    if not user_id:
        raise ValueError("User must be logged in to join a session.")

    path = f"group_workout_sessions/{session_id}"

    def work():
        if db.session.get(GroupWorkoutSession, session_id) is None:
            raise DocumentNotFound(path)
        if db.session.get(SessionParticipant, (session_id, user_id)) is None:
            db.session.add(
                SessionParticipant(
                    session_id=session_id,
                    user_id=user_id,
                    display_name=payload.display_name,
                    photo_url=payload.photo_url,
                )
            )

    run_atomic(
        work,
        path=path,
        operation="update",
        request_resource_data=payload.model_dump(),
        reporter=reporter,
        reraise=True,
    )


def list_active_sessions() -> List[GroupWorkoutSession]:
    return (
        GroupWorkoutSession.query.filter_by(status="active")
        .order_by(GroupWorkoutSession.start_time.desc())
        .all()
    )
