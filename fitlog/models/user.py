# backend/fitlog/models/user.py
from datetime import date, datetime
from typing import Dict, Optional, Tuple

from sqlalchemy.orm import validates

from .. import db
from ..badges import BADGE_IDS
from ..buckets import month_id, week_id
from ..progression import level_from_xp, progress_to_next_level

_NON_NEGATIVE = (
    "xp",
    "streak",
    "total_calories_this_week",
    "total_workouts_this_week",
    "total_calories_this_month",
    "total_workouts_this_month",
    "cumulative_pushups",
    "post_count",
)


class UserProfile(db.Model):
    """
    One per user. Progression fields are only written by the transactions in
    ``fitlog.services``.
    """

    __tablename__ = "users"

    id = db.Column(db.String(128), primary_key=True)
    display_name = db.Column(db.String(100), nullable=False, default="New User")
    photo_url = db.Column(db.String(255), nullable=False, default="")
    age = db.Column(db.Integer)
    primary_goal = db.Column(
        db.Enum(
            "weight-loss",
            "muscle-gain",
            "general-fitness",
            "endurance",
            name="primary_goal_enum",
        )
    )

    xp = db.Column(db.Integer, nullable=False, default=0)
    streak = db.Column(db.Integer, nullable=False, default=0)
    last_workout_date = db.Column(db.Date)

    # rollups: only meaningful for the bucket in last_activity_week / _month
    total_calories_this_week = db.Column(db.Integer, nullable=False, default=0)
    total_workouts_this_week = db.Column(db.Integer, nullable=False, default=0)
    last_activity_week = db.Column(db.String(10))
    total_calories_this_month = db.Column(db.Integer, nullable=False, default=0)
    total_workouts_this_month = db.Column(db.Integer, nullable=False, default=0)
    last_activity_month = db.Column(db.String(7))

    cumulative_pushups = db.Column(db.Integer, nullable=False, default=0)
    post_count = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(
        db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    badges = db.relationship(
        "UserBadge",
        backref="user",
        cascade="all, delete-orphan",
        order_by="UserBadge.id",
    )
    workout_logs = db.relationship(
        "WorkoutLog",
        backref="user",
        cascade="all, delete-orphan",
        lazy="dynamic",
    )

    __table_args__ = tuple(
        db.CheckConstraint(f"{col} >= 0", name=f"ck_users_{col}_non_negative")
        for col in _NON_NEGATIVE
    )

    @validates(*_NON_NEGATIVE)
    def _validate_counter(self, key, value):
        # SQL expressions (xp = users.xp + 25) are checked by the database
        if isinstance(value, int) and value < 0:
            raise ValueError(f"{key} must be non-negative")
        return value

    @property
    def badge_ids(self) -> set:
        return {b.badge_id for b in self.badges}

    @property
    def level(self) -> int:
        return level_from_xp(self.xp or 0)

    def weekly_totals(self, today: date) -> Tuple[int, int]:
        """(calories, workouts) for the week containing ``today``."""
        if self.last_activity_week != week_id(today):
            return 0, 0
        return self.total_calories_this_week or 0, self.total_workouts_this_week or 0

    def monthly_totals(self, today: date) -> Tuple[int, int]:
        if self.last_activity_month != month_id(today):
            return 0, 0
        return self.total_calories_this_month or 0, self.total_workouts_this_month or 0

    def to_dict(self, today: Optional[date] = None) -> Dict:
        data = {
            "id": self.id,
            "display_name": self.display_name,
            "photo_url": self.photo_url,
            "age": self.age,
            "primary_goal": self.primary_goal,
            "xp": self.xp or 0,
            "level": self.level,
            "streak": self.streak or 0,
            "last_workout_date": self.last_workout_date.isoformat()
            if self.last_workout_date
            else None,
            "cumulative_pushups": self.cumulative_pushups or 0,
            "post_count": self.post_count or 0,
            "unlocked_badges": [b.badge_id for b in self.badges],
        }
        if today is not None:
            week_calories, week_workouts = self.weekly_totals(today)
            month_calories, month_workouts = self.monthly_totals(today)
            data.update(
                {
                    "total_calories_this_week": week_calories,
                    "total_workouts_this_week": week_workouts,
                    "total_calories_this_month": month_calories,
                    "total_workouts_this_month": month_workouts,
                    "progress": progress_to_next_level(self.xp or 0),
                }
            )
        return data


class UserBadge(db.Model):
    """Append-only: one row per (user, badge)."""

    __tablename__ = "user_badges"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.String(128), db.ForeignKey("users.id"), nullable=False)
    badge_id = db.Column(db.Enum(*BADGE_IDS, name="badge_id_enum"), nullable=False)
    unlocked_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint("user_id", "badge_id", name="uq_user_badges_user_badge"),
    )
