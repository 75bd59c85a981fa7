from .user import UserBadge, UserProfile
from .workout import WorkoutLog
from .social import (
    Challenge,
    ChallengeParticipant,
    Comment,
    Group,
    GroupMember,
    GroupWorkoutSession,
    Post,
    PostLike,
    SessionParticipant,
)

__all__ = [
    "UserProfile",
    "UserBadge",
    "WorkoutLog",
    "Post",
    "PostLike",
    "Comment",
    "Challenge",
    "ChallengeParticipant",
    "Group",
    "GroupMember",
    "GroupWorkoutSession",
    "SessionParticipant",
]
