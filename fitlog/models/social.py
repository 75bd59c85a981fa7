# backend/fitlog/models/social.py
from datetime import datetime

from .. import db
from .workout import new_id


# -----------------------------
# Posts, likes & comments
# -----------------------------
class Post(db.Model):
    __tablename__ = "posts"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    author_id = db.Column(db.String(128), db.ForeignKey("users.id"), nullable=False)
    author_name = db.Column(db.String(100), nullable=False)
    author_photo_url = db.Column(db.String(255))
    content = db.Column(db.Text, nullable=False)
    category = db.Column(
        db.Enum(
            "General",
            "Nutrition",
            "Cardio",
            "Strength",
            "Recovery",
            name="post_category",
        ),
        nullable=False,
        default="General",
    )
    created_at = db.Column(db.DateTime, nullable=False, server_default=db.func.now())
    like_count = db.Column(db.Integer, nullable=False, default=0)
    comment_count = db.Column(db.Integer, nullable=False, default=0)

    likes = db.relationship(
        "PostLike", backref="post", cascade="all, delete-orphan"
    )
    comments = db.relationship(
        "Comment",
        backref="post",
        cascade="all, delete-orphan",
        order_by="Comment.created_at",
    )

    def to_dict(self):
        return {
            "id": self.id,
            "author_id": self.author_id,
            "author_name": self.author_name,
            "author_photo_url": self.author_photo_url,
            "content": self.content,
            "category": self.category,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "like_count": self.like_count or 0,
            "comment_count": self.comment_count or 0,
            "liked_by": [like.user_id for like in self.likes],
        }


class PostLike(db.Model):
    __tablename__ = "post_likes"

    post_id = db.Column(db.String(36), db.ForeignKey("posts.id"), primary_key=True)
    user_id = db.Column(db.String(128), db.ForeignKey("users.id"), primary_key=True)


class Comment(db.Model):
    __tablename__ = "post_comments"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    post_id = db.Column(db.String(36), db.ForeignKey("posts.id"), nullable=False)
    author_id = db.Column(db.String(128), db.ForeignKey("users.id"), nullable=False)
    author_name = db.Column(db.String(100), nullable=False)
    author_photo_url = db.Column(db.String(255))
    content = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "post_id": self.post_id,
            "author_id": self.author_id,
            "author_name": self.author_name,
            "author_photo_url": self.author_photo_url,
            "content": self.content,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }


# -----------------------------
# Challenges
# -----------------------------
class Challenge(db.Model):
    __tablename__ = "challenges"

    id = db.Column(db.String(64), primary_key=True, default=new_id)
    author_id = db.Column(db.String(128), db.ForeignKey("users.id"))
    title = db.Column(db.String(100), nullable=False)
    description = db.Column(db.String(255), nullable=False, default="")
    type = db.Column(
        db.Enum("time-bound", "performance-based", name="challenge_type"),
        nullable=False,
    )
    goal_value = db.Column(db.Integer, nullable=False)
    goal_unit = db.Column(db.String(30), nullable=False)
    participant_count = db.Column(db.Integer, nullable=False, default=0)
    end_date = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, nullable=False, server_default=db.func.now())

    participants = db.relationship(
        "ChallengeParticipant",
        back_populates="challenge",
        cascade="all, delete-orphan",
    )

    def to_dict(self, user_id=None):
        data = {
            "id": self.id,
            "author_id": self.author_id,
            "title": self.title,
            "description": self.description,
            "type": self.type,
            "goal_value": self.goal_value,
            "goal_unit": self.goal_unit,
            "participant_count": self.participant_count or 0,
            "end_date": self.end_date.isoformat() if self.end_date else None,
        }
        if user_id is not None:
            data["is_participant"] = any(
                p.user_id == user_id for p in self.participants
            )
        return data


class ChallengeParticipant(db.Model):
    __tablename__ = "challenge_participants"

    challenge_id = db.Column(
        db.String(64), db.ForeignKey("challenges.id"), primary_key=True
    )
    user_id = db.Column(db.String(128), db.ForeignKey("users.id"), primary_key=True)
    joined_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    challenge = db.relationship("Challenge", back_populates="participants")


# -----------------------------
# Groups
# -----------------------------
class Group(db.Model):
    __tablename__ = "groups"

    id = db.Column(db.String(64), primary_key=True, default=new_id)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.String(255), nullable=False, default="")
    member_count = db.Column(db.Integer, nullable=False, default=0)

    members = db.relationship(
        "GroupMember", backref="group", cascade="all, delete-orphan"
    )

    def to_dict(self, user_id=None):
        data = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "member_count": self.member_count or 0,
        }
        if user_id is not None:
            data["is_member"] = any(m.user_id == user_id for m in self.members)
        return data


class GroupMember(db.Model):
    __tablename__ = "group_members"

    group_id = db.Column(db.String(64), db.ForeignKey("groups.id"), primary_key=True)
    user_id = db.Column(db.String(128), db.ForeignKey("users.id"), primary_key=True)


# -----------------------------
# Live group workout sessions
# -----------------------------
class GroupWorkoutSession(db.Model):
    __tablename__ = "group_workout_sessions"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    host_id = db.Column(db.String(128), db.ForeignKey("users.id"), nullable=False)
    host_name = db.Column(db.String(100), nullable=False)
    host_photo_url = db.Column(db.String(255))
    workout_slug = db.Column(db.String(100), nullable=False)
    workout_title = db.Column(db.String(100), nullable=False)
    start_time = db.Column(db.DateTime, nullable=False, server_default=db.func.now())
    status = db.Column(
        db.Enum("active", "completed", name="group_session_status"),
        nullable=False,
        default="active",
    )

    participants = db.relationship(
        "SessionParticipant", backref="session", cascade="all, delete-orphan"
    )

    def to_dict(self):
        return {
            "id": self.id,
            "host_id": self.host_id,
            "host_name": self.host_name,
            "host_photo_url": self.host_photo_url,
            "workout_slug": self.workout_slug,
            "workout_title": self.workout_title,
            "start_time": self.start_time.isoformat() if self.start_time else None,
            "status": self.status,
            "participants": [
                {
                    "user_id": p.user_id,
                    "display_name": p.display_name,
                    "photo_url": p.photo_url,
                }
                for p in self.participants
            ],
        }


class SessionParticipant(db.Model):
    __tablename__ = "group_workout_participants"

    session_id = db.Column(
        db.String(36), db.ForeignKey("group_workout_sessions.id"), primary_key=True
    )
    user_id = db.Column(db.String(128), db.ForeignKey("users.id"), primary_key=True)
    display_name = db.Column(db.String(100), nullable=False)
    photo_url = db.Column(db.String(255))
