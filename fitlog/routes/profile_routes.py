# backend/fitlog/routes/profile_routes.py
from datetime import datetime, timezone

from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity
from sqlalchemy.exc import SQLAlchemyError

from ..errors import StoreError
from ..schemas import ProfileUpdate
from ..services.profiles import get_profile, update_profile
from .common import failure_from_exception, parse_body

profile_bp = Blueprint("profile", __name__)


def _today():
    return datetime.now(timezone.utc).date()


@profile_bp.route("", methods=["GET"])
@jwt_required()
def read_profile():
    profile = get_profile(get_jwt_identity())
    if not profile:
        return jsonify({"message": "profile not found"}), 404
    return jsonify({"user": profile.to_dict(today=_today())}), 200


@profile_bp.route("", methods=["PUT"])
@jwt_required()
def edit_profile():
    """
    Body (all optional):
    {
      "display_name": "Sam",
      "photo_url": "https://...",
      "age": 31,
      "primary_goal": "endurance"
    }
    """
    user_id = get_jwt_identity()
    changes = parse_body(ProfileUpdate)

    try:
        update_profile(user_id, changes)
    except (SQLAlchemyError, StoreError) as e:
        return failure_from_exception("Updating profile", e)

    return jsonify({"user": get_profile(user_id).to_dict(today=_today())}), 200
