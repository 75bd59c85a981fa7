# backend/fitlog/services/posts.py
from dataclasses import dataclass
from typing import List, Optional

from .. import db
from ..badges import TOP_CONTRIBUTOR, badges_to_unlock, top_contributor_earned
from ..errors import DocumentNotFound, ErrorReporter, FailureEvent, PermissionDenied
from ..models.social import Comment, Post, PostLike
from ..models.user import UserBadge, UserProfile
from ..models.workout import new_id
from ..schemas import CommentPayload, PostPayload
from ..store import Outcome, run_atomic

FEED_SIZE = 20


@dataclass
class PostResult:
    post_id: Optional[str] = None
    badge_unlocked: Optional[str] = None
    failure: Optional[FailureEvent] = None


@dataclass
class LikeResult:
    liked: Optional[bool] = None
    like_count: Optional[int] = None
    failure: Optional[FailureEvent] = None


def _require_post(post_id: str) -> Post:
    post = db.session.get(Post, post_id, with_for_update=True)
    if post is None:
        raise DocumentNotFound(f"posts/{post_id}")
    return post


def add_post(
    author_id: str,
    payload: PostPayload,
    *,
    reporter: Optional[ErrorReporter] = None,
) -> PostResult:
    """
    Create a post and bump the author's post count; the 10th post unlocks
    ``top-contributor``.
    """
    if not author_id:
        raise ValueError("User must be logged in to add a post.")

    post_id = new_id()

    def work():
        profile = db.session.get(UserProfile, author_id, with_for_update=True)
        if profile is None:
            raise DocumentNotFound(f"users/{author_id}")

        new_post_count = (profile.post_count or 0) + 1
        db.session.add(
            Post(
                id=post_id,
                author_id=author_id,
                author_name=payload.author_name,
                author_photo_url=payload.author_photo_url,
                content=payload.content,
                category=payload.category,
                like_count=0,
                comment_count=0,
            )
        )
        profile.post_count = new_post_count

        candidates = [TOP_CONTRIBUTOR] if top_contributor_earned(new_post_count) else []
        unlocked = badges_to_unlock(profile.badge_ids, candidates)
        for badge_id in unlocked:
            profile.badges.append(UserBadge(badge_id=badge_id))
        return unlocked[0] if unlocked else None

    outcome = run_atomic(
        work,
        path=f"transaction on users/{author_id} and posts/{post_id}",
        operation="write",
        reporter=reporter,
    )
    if not outcome.ok:
        return PostResult(failure=outcome.failure)
    return PostResult(post_id=post_id, badge_unlocked=outcome.value)


def toggle_post_like(
    post_id: str,
    user_id: str,
    *,
    reporter: Optional[ErrorReporter] = None,
) -> LikeResult:
    """Like when the user has not liked the post yet, unlike otherwise."""
    if not user_id:
        raise ValueError("User must be logged in to like a post.")

    def work():
        post = _require_post(post_id)
        like = db.session.get(PostLike, (post_id, user_id))
        if like is None:
            db.session.add(PostLike(post_id=post_id, user_id=user_id))
            post.like_count = Post.like_count + 1
            liked = True
        else:
            db.session.delete(like)
            post.like_count = Post.like_count - 1
            liked = False
        db.session.flush()
        db.session.refresh(post, ["like_count"])
        return LikeResult(liked=liked, like_count=post.like_count)

    outcome = run_atomic(
        work, path=f"posts/{post_id}", operation="update", reporter=reporter
    )
    return outcome.value if outcome.ok else LikeResult(failure=outcome.failure)


def add_comment(
    post_id: str,
    author_id: str,
    payload: CommentPayload,
    *,
    reporter: Optional[ErrorReporter] = None,
) -> Outcome:
    """On success the outcome's value is the new comment id."""
    if not author_id:
        raise ValueError("User must be logged in to comment.")

    comment_id = new_id()

    def work():
        post = _require_post(post_id)
        db.session.add(
            Comment(
                id=comment_id,
                post_id=post_id,
                author_id=author_id,
                author_name=payload.author_name,
                author_photo_url=payload.author_photo_url,
                content=payload.content,
            )
        )
        post.comment_count = Post.comment_count + 1
        return comment_id

    return run_atomic(
        work,
        path=f"posts/{post_id}/comments",
        operation="create",
        request_resource_data=payload.model_dump(),
        reporter=reporter,
    )


def delete_post(
    post_id: str,
    user_id: str,
    *,
    reporter: Optional[ErrorReporter] = None,
) -> Outcome:
    """Authors only. Likes and comments go with the post."""
    path = f"posts/{post_id}"

    def work():
        post = _require_post(post_id)
        if post.author_id != user_id:
            raise PermissionDenied(path)
        db.session.delete(post)

    return run_atomic(work, path=path, operation="delete", reporter=reporter)


def delete_comment(
    post_id: str,
    comment_id: str,
    user_id: str,
    *,
    reporter: Optional[ErrorReporter] = None,
) -> Outcome:
    """The comment's author or the post's author may delete a comment."""
    path = f"posts/{post_id}/comments/{comment_id}"

    def work():
        post = _require_post(post_id)
        comment = db.session.get(Comment, comment_id)
        if comment is None or comment.post_id != post_id:
            raise DocumentNotFound(path)
        if user_id not in (comment.author_id, post.author_id):
            raise PermissionDenied(path)
        db.session.delete(comment)
        post.comment_count = Post.comment_count - 1

    return run_atomic(work, path=path, operation="delete", reporter=reporter)


def list_posts(category: Optional[str] = None, limit: int = FEED_SIZE) -> List[Post]:
    query = Post.query
    if category:
        query = query.filter_by(category=category)
    return query.order_by(Post.created_at.desc()).limit(limit).all()


def list_comments(post_id: str) -> List[Comment]:
    return (
        Comment.query.filter_by(post_id=post_id)
        .order_by(Comment.created_at.asc())
        .all()
    )
