# backend/fitlog/schemas.py
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

DifficultyRating = Literal["easy", "moderate", "hard"]
PostCategory = Literal["General", "Nutrition", "Cardio", "Strength", "Recovery"]
ChallengeType = Literal["time-bound", "performance-based"]
PrimaryGoal = Literal["weight-loss", "muscle-gain", "general-fitness", "endurance"]


# -----------------------------
# Workout logs
# -----------------------------
class WorkoutExercise(BaseModel):
    name: str
    sets: int = Field(ge=0)
    reps: int = Field(ge=0)
    weight: float = Field(default=0, ge=0)


class WorkoutLogPayload(BaseModel):
    workout_title: str = Field(min_length=1, max_length=100)
    duration: int = Field(ge=0)  # minutes
    calories: int = Field(ge=0)
    exercises: List[WorkoutExercise] = Field(default_factory=list)
    difficulty_rating: Optional[DifficultyRating] = None


class DifficultyRatingPayload(BaseModel):
    difficulty_rating: DifficultyRating


# -----------------------------
# Social
# -----------------------------
class PostPayload(BaseModel):
    author_name: str = Field(min_length=1, max_length=100)
    author_photo_url: Optional[str] = None
    content: str = Field(min_length=1, max_length=5000)
    category: PostCategory = "General"


class CommentPayload(BaseModel):
    author_name: str = Field(min_length=1, max_length=100)
    author_photo_url: Optional[str] = None
    content: str = Field(min_length=1, max_length=2000)


class ChallengePayload(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    description: str = ""
    type: ChallengeType
    goal_value: int = Field(gt=0)
    goal_unit: str = Field(min_length=1, max_length=30)
    end_date: Optional[datetime] = None


class GroupWorkoutSessionPayload(BaseModel):
    host_name: str = Field(min_length=1, max_length=100)
    host_photo_url: Optional[str] = None
    workout_slug: str = Field(min_length=1, max_length=100)
    workout_title: str = Field(min_length=1, max_length=100)


class SessionParticipantPayload(BaseModel):
    display_name: str = Field(min_length=1, max_length=100)
    photo_url: Optional[str] = None


# -----------------------------
# Profile
# -----------------------------
class ProfileUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    # omitted is fine, explicit null is not: both columns are NOT NULL
    display_name: str = Field(default=None, min_length=1, max_length=100)
    photo_url: str = Field(default=None, max_length=255)
    age: Optional[int] = Field(default=None, ge=0, le=130)
    primary_goal: Optional[PrimaryGoal] = None


# -----------------------------
# Coaching collaborator I/O
# -----------------------------
class Insight(BaseModel):
    title: str
    description: str
    recommendation: str


class WorkoutInsights(BaseModel):
    insights: List[Insight] = Field(default_factory=list)


class RecommendationRequest(BaseModel):
    fitness_goals: str
    workout_history: str
    preferences: str


class Recommendation(BaseModel):
    title: str
    description: str
    slug: Optional[str] = None


class WorkoutRecommendations(BaseModel):
    summary: str
    recommendations: List[Recommendation] = Field(default_factory=list)
