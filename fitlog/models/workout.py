# backend/fitlog/models/workout.py
from typing import List
from uuid import uuid4

from pydantic import TypeAdapter, ValidationError

from .. import db
from ..errors import DecodeError
from ..schemas import WorkoutExercise

_EXERCISES = TypeAdapter(List[WorkoutExercise])


def new_id() -> str:
    return str(uuid4())


class WorkoutLog(db.Model):
    """
    Immutable once created, except for ``difficulty_rating`` which the user
    may attach afterwards.
    """

    __tablename__ = "workout_logs"

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(
        db.String(128), db.ForeignKey("users.id"), nullable=False, index=True
    )
    date = db.Column(db.DateTime, nullable=False, server_default=db.func.now())
    workout_title = db.Column(db.String(100), nullable=False)
    duration = db.Column(db.Integer, nullable=False, default=0)  # minutes
    calories = db.Column(db.Integer, nullable=False, default=0)
    # ordered list of {name, sets, reps, weight}
    exercises = db.Column(db.JSON, nullable=False, default=list)
    difficulty_rating = db.Column(
        db.Enum("easy", "moderate", "hard", name="difficulty_rating_enum")
    )

    def exercise_list(self) -> List[WorkoutExercise]:
        try:
            return _EXERCISES.validate_python(self.exercises or [])
        except ValidationError as e:
            raise DecodeError(f"workout log {self.id} has malformed exercises") from e

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "date": self.date.isoformat() if self.date else None,
            "workout_title": self.workout_title,
            "duration": self.duration,
            "calories": self.calories,
            "exercises": [e.model_dump() for e in self.exercise_list()],
            "difficulty_rating": self.difficulty_rating,
        }
