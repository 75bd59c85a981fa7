# backend/fitlog/routes/dashboard_routes.py
from datetime import datetime, timezone

from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity

from ..buckets import month_id, week_id
from ..progression import progress_to_next_level
from ..services.profiles import get_profile
from ..services.workout_logs import list_workout_logs

dashboard_bp = Blueprint("dashboard", __name__)

RECENT_LOGS = 5


# -------------------------
# DASHBOARD OVERVIEW
# -------------------------
@dashboard_bp.route("/overview", methods=["GET"])
@jwt_required()
def dashboard_overview():
    """
    Returns:
    {
      "user": { ... },
      "this_week": {"week": "2025-W47", "calories": 900, "workouts": 3},
      "this_month": {"month": "2025-11", "calories": 4100, "workouts": 12},
      "streak": {"current_streak_days": 4, "last_workout_date": "2025-11-20"},
      "progress": {"current_level": 3, ...},
      "recent_logs": [ ... ]
    }
    A user without a profile yet gets zeros everywhere.
    """
    user_id = get_jwt_identity()
    today = datetime.now(timezone.utc).date()
    profile = get_profile(user_id)

    if profile:
        week_calories, week_workouts = profile.weekly_totals(today)
        month_calories, month_workouts = profile.monthly_totals(today)
        xp = profile.xp or 0
        streak = {
            "current_streak_days": profile.streak or 0,
            "last_workout_date": profile.last_workout_date.isoformat()
            if profile.last_workout_date
            else None,
        }
        user = profile.to_dict()
        recent = list_workout_logs(user_id, limit=RECENT_LOGS)
    else:
        week_calories = week_workouts = month_calories = month_workouts = 0
        xp = 0
        streak = {"current_streak_days": 0, "last_workout_date": None}
        user = None
        recent = []

    return (
        jsonify(
            {
                "user": user,
                "this_week": {
                    "week": week_id(today),
                    "calories": week_calories,
                    "workouts": week_workouts,
                },
                "this_month": {
                    "month": month_id(today),
                    "calories": month_calories,
                    "workouts": month_workouts,
                },
                "streak": streak,
                "progress": progress_to_next_level(xp),
                "recent_logs": [log.to_dict() for log in recent],
            }
        ),
        200,
    )
