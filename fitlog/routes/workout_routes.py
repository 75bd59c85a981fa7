# backend/fitlog/routes/workout_routes.py

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required, get_jwt_identity

from ..badges import BADGE_CATALOG
from ..schemas import DifficultyRatingPayload, WorkoutLogPayload
from ..services.workout_logs import (
    list_workout_logs,
    rate_workout_log,
    submit_workout_log,
)
from .common import failure_response, parse_body, safe_int

workouts_bp = Blueprint("workouts", __name__)

MAX_LOGS_PAGE = 200


# ------------------------------
# POST /api/workouts/logs
# ------------------------------
@workouts_bp.route("/logs", methods=["POST"])
@jwt_required()
def log_workout():
    """
    Expected body:
    {
      "workout_title": "Upper body",
      "duration": 45,
      "calories": 320,
      "exercises": [{"name": "Push-up", "sets": 3, "reps": 15, "weight": 0}],
      "difficulty_rating": "moderate"     # optional
    }
    """
    user_id = get_jwt_identity()
    payload = parse_body(WorkoutLogPayload)

    result = submit_workout_log(user_id, payload)
    if result.log_id is None:
        return failure_response("Logging workout", result.failure, unlocked_badges=[])

    current_app.logger.info(
        "User %s logged workout %s (badges: %s)",
        user_id,
        result.log_id,
        result.unlocked_badges,
    )
    return (
        jsonify(
            {
                "message": "Workout logged",
                "log_id": result.log_id,
                "unlocked_badges": [
                    {"id": badge_id, **BADGE_CATALOG[badge_id]}
                    for badge_id in result.unlocked_badges
                ],
            }
        ),
        201,
    )


# ------------------------------
# GET /api/workouts/logs?limit=50
# ------------------------------
@workouts_bp.route("/logs", methods=["GET"])
@jwt_required()
def get_workout_logs():
    user_id = get_jwt_identity()
    limit = safe_int(request.args.get("limit"), 50)
    limit = max(1, min(limit, MAX_LOGS_PAGE))

    logs = list_workout_logs(user_id, limit=limit)
    return jsonify({"logs": [log.to_dict() for log in logs]}), 200


# ------------------------------
# PATCH /api/workouts/logs/<log_id>/rating
# ------------------------------
@workouts_bp.route("/logs/<log_id>/rating", methods=["PATCH"])
@jwt_required()
def rate_workout(log_id):
    user_id = get_jwt_identity()
    payload = parse_body(DifficultyRatingPayload)

    outcome = rate_workout_log(user_id, log_id, payload.difficulty_rating)
    if not outcome.ok:
        return failure_response("Rating workout", outcome.failure)

    return jsonify({"message": "Rating saved", "log_id": log_id}), 200
