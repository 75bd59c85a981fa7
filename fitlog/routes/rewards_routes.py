# backend/fitlog/routes/rewards_routes.py
from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required, get_jwt_identity

from ..badges import BADGE_CATALOG, BADGE_IDS
from ..progression import progress_to_next_level, xp_threshold_for_level
from ..services.profiles import get_profile, leaderboard
from .common import safe_int

rewards_bp = Blueprint("rewards", __name__)


@rewards_bp.route("/overview", methods=["GET"])
@jwt_required()
def rewards_overview():
    """
    Returns:
    {
      "summary": {
        "xp": 425,
        "level": 3,
        "next_level_threshold": 600,
        "progress_percentage": 12.5,
        "unlocked_badges_count": 2,
        "total_badges_count": 5
      },
      "unlocked": [
        {"id": "first-workout", "title": "First Workout",
         "description": "...", "unlocked_at": "2025-11-21T10:05:00"},
        ...
      ],
      "locked": [
        {"id": "7-day-streak", "title": "7-Day Streak", "description": "..."},
        ...
      ]
    }
    """
    profile = get_profile(get_jwt_identity())

    xp = profile.xp if profile else 0
    progress = progress_to_next_level(xp)

    # ------------------------------
    # 1) Unlocked badges (in unlock order)
    # ------------------------------
    unlocked = []
    for badge in profile.badges if profile else []:
        unlocked.append(
            {
                "id": badge.badge_id,
                **BADGE_CATALOG[badge.badge_id],
                "unlocked_at": badge.unlocked_at.isoformat()
                if badge.unlocked_at
                else None,
            }
        )
    unlocked_ids = {b["id"] for b in unlocked}

    # ------------------------------
    # 2) Locked badges (catalog order)
    # ------------------------------
    locked = [
        {"id": badge_id, **BADGE_CATALOG[badge_id]}
        for badge_id in BADGE_IDS
        if badge_id not in unlocked_ids
    ]

    # ------------------------------
    # 3) Summary block
    # ------------------------------
    summary = {
        "xp": int(xp),
        "level": progress["current_level"],
        "next_level_threshold": xp_threshold_for_level(progress["current_level"] + 1),
        "progress_percentage": progress["progress_percentage"],
        "unlocked_badges_count": len(unlocked),
        "total_badges_count": len(BADGE_IDS),
    }

    return (
        jsonify(
            {
                "summary": summary,
                "unlocked": unlocked,
                "locked": locked,
            }
        ),
        200,
    )


@rewards_bp.route("/leaderboard", methods=["GET"])
@jwt_required()
def get_leaderboard():
    default_size = current_app.config.get("LEADERBOARD_SIZE", 10)
    limit = safe_int(request.args.get("limit"), default_size)
    limit = max(1, min(limit, 100))

    rows = leaderboard(limit)
    return (
        jsonify(
            {
                "leaderboard": [
                    {
                        "rank": rank,
                        "id": p.id,
                        "display_name": p.display_name,
                        "photo_url": p.photo_url,
                        "xp": p.xp or 0,
                        "level": p.level,
                        "streak": p.streak or 0,
                    }
                    for rank, p in enumerate(rows, start=1)
                ]
            }
        ),
        200,
    )
