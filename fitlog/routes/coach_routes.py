# backend/fitlog/routes/coach_routes.py
from flask import Blueprint, current_app, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity

from ..schemas import RecommendationRequest
from ..services.coaching import (
    DEFAULT_MAX_LOGS,
    CoachingUnavailable,
    get_recommendations,
    get_workout_insights,
)
from ..services.workout_logs import list_workout_logs
from .common import parse_body

coach_bp = Blueprint("coach", __name__)


def _generator(config_key):
    # a callable taking the prepared input and returning the raw model output
    return current_app.config.get(config_key)


def _unavailable():
    return jsonify({"message": "Coaching service is not configured"}), 503


@coach_bp.route("/insights", methods=["POST"])
@jwt_required()
def workout_insights():
    """
    Analyses the caller's most recent logs. Fewer than 5 logs gives
    {"insights": []} without contacting the coaching service.
    """
    generator = _generator("COACH_INSIGHTS_GENERATOR")
    if generator is None:
        return _unavailable()

    max_logs = current_app.config.get("INSIGHTS_MAX_LOGS", DEFAULT_MAX_LOGS)
    logs = list_workout_logs(get_jwt_identity(), limit=max_logs)

    try:
        result = get_workout_insights(logs, generator, max_logs)
    except CoachingUnavailable as e:
        return jsonify({"message": str(e)}), 502

    return jsonify(result.model_dump()), 200


@coach_bp.route("/recommendations", methods=["POST"])
@jwt_required()
def workout_recommendations():
    """
    Body:
    {
      "fitness_goals": "run a sub-25 5k",
      "workout_history": "3 runs a week",
      "preferences": "mornings, no gym"
    }
    """
    request_data = parse_body(RecommendationRequest)

    generator = _generator("COACH_RECOMMENDATIONS_GENERATOR")
    if generator is None:
        return _unavailable()

    try:
        result = get_recommendations(request_data, generator)
    except CoachingUnavailable as e:
        return jsonify({"message": str(e)}), 502

    return jsonify(result.model_dump()), 200
