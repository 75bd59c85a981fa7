# backend/fitlog/routes/social_routes.py
from typing import get_args

from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required, get_jwt_identity
from sqlalchemy.exc import SQLAlchemyError

from ..errors import StoreError
from ..schemas import (
    ChallengePayload,
    CommentPayload,
    GroupWorkoutSessionPayload,
    PostCategory,
    PostPayload,
    SessionParticipantPayload,
)
from ..services import challenges, group_workouts, groups, posts
from .common import failure_from_exception, failure_response, parse_body, safe_int

social_bp = Blueprint("social", __name__)

POST_CATEGORIES = get_args(PostCategory)


# ---------------------------------------------------------------------------
# Posts
# ---------------------------------------------------------------------------

@social_bp.route("/posts", methods=["GET"])
@jwt_required()
def get_posts():
    """GET /api/social/posts?category=Cardio&limit=20"""
    category = request.args.get("category")
    if category and category not in POST_CATEGORIES:
        return jsonify({"message": "unknown category"}), 400

    limit = safe_int(request.args.get("limit"), posts.FEED_SIZE)
    limit = max(1, min(limit, 100))

    rows = posts.list_posts(category=category, limit=limit)
    return jsonify({"posts": [p.to_dict() for p in rows]}), 200


@social_bp.route("/posts", methods=["POST"])
@jwt_required()
def create_post():
    user_id = get_jwt_identity()
    payload = parse_body(PostPayload)

    result = posts.add_post(user_id, payload)
    if result.post_id is None:
        return failure_response("Creating post", result.failure)

    return (
        jsonify(
            {
                "message": "post created",
                "post_id": result.post_id,
                "badge_unlocked": result.badge_unlocked,
            }
        ),
        201,
    )


@social_bp.route("/posts/<post_id>/like", methods=["POST"])
@jwt_required()
def like_post(post_id):
    result = posts.toggle_post_like(post_id, get_jwt_identity())
    if result.liked is None:
        return failure_response("Liking post", result.failure)
    return jsonify({"liked": result.liked, "like_count": result.like_count}), 200


@social_bp.route("/posts/<post_id>", methods=["DELETE"])
@jwt_required()
def remove_post(post_id):
    outcome = posts.delete_post(post_id, get_jwt_identity())
    if not outcome.ok:
        return failure_response("Deleting post", outcome.failure)
    return jsonify({"message": "post deleted"}), 200


@social_bp.route("/posts/<post_id>/comments", methods=["GET"])
@jwt_required()
def get_comments(post_id):
    rows = posts.list_comments(post_id)
    return jsonify({"comments": [c.to_dict() for c in rows]}), 200


@social_bp.route("/posts/<post_id>/comments", methods=["POST"])
@jwt_required()
def create_comment(post_id):
    payload = parse_body(CommentPayload)

    outcome = posts.add_comment(post_id, get_jwt_identity(), payload)
    if not outcome.ok:
        return failure_response("Adding comment", outcome.failure)
    return jsonify({"message": "comment added", "comment_id": outcome.value}), 201


@social_bp.route("/posts/<post_id>/comments/<comment_id>", methods=["DELETE"])
@jwt_required()
def remove_comment(post_id, comment_id):
    outcome = posts.delete_comment(post_id, comment_id, get_jwt_identity())
    if not outcome.ok:
        return failure_response("Deleting comment", outcome.failure)
    return jsonify({"message": "comment deleted"}), 200


# ---------------------------------------------------------------------------
# Challenges
# ---------------------------------------------------------------------------

@social_bp.route("/challenges", methods=["GET"])
@jwt_required()
def get_challenges():
    """
    Returns:
    {
      "challenges": [
        {
          "id": "weekly-cardio-burn",
          "title": "Weekly Cardio Burn",
          "type": "time-bound",
          "goal_value": 2500,
          "goal_unit": "calories",
          "participant_count": 12,
          "end_date": "2025-11-25T00:00:00",
          "is_participant": false
        },
        ...
      ]
    }
    """
    user_id = get_jwt_identity()
    rows = challenges.list_challenges()
    return jsonify({"challenges": [c.to_dict(user_id=user_id) for c in rows]}), 200


@social_bp.route("/challenges", methods=["POST"])
@jwt_required()
def create_challenge():
    payload = parse_body(ChallengePayload)

    try:
        challenge_id = challenges.create_challenge(get_jwt_identity(), payload)
    except (SQLAlchemyError, StoreError) as e:
        return failure_from_exception("Creating challenge", e)

    return jsonify({"message": "challenge created", "challenge_id": challenge_id}), 201


@social_bp.route("/challenges/<challenge_id>/participation", methods=["POST"])
@jwt_required()
def toggle_challenge(challenge_id):
    """Joins the challenge, or leaves it if already joined."""
    try:
        result = challenges.toggle_challenge_participation(
            get_jwt_identity(), challenge_id
        )
    except (SQLAlchemyError, StoreError) as e:
        return failure_from_exception("Updating challenge participation", e)

    return (
        jsonify(
            {
                "message": "joined challenge" if result.joined else "left challenge",
                "challenge_id": challenge_id,
                "joined": result.joined,
                "badge_unlocked": result.badge_unlocked,
            }
        ),
        200,
    )


# ---------------------------------------------------------------------------
# Groups
# ---------------------------------------------------------------------------

@social_bp.route("/groups", methods=["GET"])
@jwt_required()
def get_groups():
    user_id = get_jwt_identity()
    rows = groups.list_groups()
    return jsonify({"groups": [g.to_dict(user_id=user_id) for g in rows]}), 200


@social_bp.route("/groups/<group_id>/membership", methods=["POST"])
@jwt_required()
def toggle_group(group_id):
    result = groups.toggle_group_membership(get_jwt_identity(), group_id)
    if result.member is None:
        return failure_response("Updating group membership", result.failure)
    return (
        jsonify(
            {
                "group_id": group_id,
                "member": result.member,
                "member_count": result.member_count,
            }
        ),
        200,
    )


# ---------------------------------------------------------------------------
# Live group workout sessions
# ---------------------------------------------------------------------------

@social_bp.route("/sessions", methods=["GET"])
@jwt_required()
def get_sessions():
    rows = group_workouts.list_active_sessions()
    return jsonify({"sessions": [s.to_dict() for s in rows]}), 200


@social_bp.route("/sessions", methods=["POST"])
@jwt_required()
def host_session():
    payload = parse_body(GroupWorkoutSessionPayload)

    try:
        session_id = group_workouts.create_group_workout_session(
            get_jwt_identity(), payload
        )
    except (SQLAlchemyError, StoreError) as e:
        return failure_from_exception("Hosting session", e)

    return jsonify({"message": "session created", "session_id": session_id}), 201


@social_bp.route("/sessions/<session_id>/join", methods=["POST"])
@jwt_required()
def join_session(session_id):
    payload = parse_body(SessionParticipantPayload)

    try:
        group_workouts.join_group_workout_session(
            session_id, get_jwt_identity(), payload
        )
    except (SQLAlchemyError, StoreError) as e:
        return failure_from_exception("Joining session", e)

    return jsonify({"message": "joined session", "session_id": session_id}), 200
