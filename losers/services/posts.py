import logging
from typing import Optional

from sqlalchemy import case, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from losers.core.errors import ServiceError
from losers.models.comment import Comment
from losers.models.post import Category, Post
from losers.models.user import User
from losers.models.vote import Vote
from losers.schemas.comment_schema import CommentResponse
from losers.schemas.post_schema import FailurePostCreate, GeneralPostCreate
from losers.services.votes import count_votes, get_user_vote

logger = logging.getLogger(__name__)


def author_projection(user: User) -> dict:
    return {"id": user.id, "username": user.username, "nickname": user.nickname}


def post_payload(post: Post, comment_count: int, net_votes: int, user_vote: Optional[bool] = None) -> dict:
    """Build the response body for a post, shaped by its category."""
    payload = {
        "id": post.id,
        "title": post.title,
        "category": post.category.value,
        "author_id": post.author_id,
        "author": author_projection(post.author),
        "created_at": post.created_at,
        "counts": {"comments": comment_count, "votes": net_votes},
        "user_vote": user_vote,
    }
    if post.category == Category.GENERAL:
        payload["contents"] = post.contents
    else:
        payload["what_failed"] = post.what_failed
        payload["lesson_learned"] = post.lesson_learned
    return payload


def parse_category(value: Optional[str]) -> Category | None | ServiceError:
    """Turn the `category` query value into a filter; blank means no filter."""
    if value is None or not value.strip():
        return None
    try:
        return Category(value)
    except ValueError:
        allowed = ", ".join(c.value for c in Category)
        return ServiceError.validation(f"category must be one of: {allowed}")


def _comments_query(db: Session, post_id: str):
    return db.query(Comment)\
        .options(joinedload(Comment.author))\
        .filter(Comment.post_id == post_id)\
        .order_by(Comment.created_at.desc())


def create_post(data: GeneralPostCreate | FailurePostCreate, author_id: str, db: Session) -> dict | ServiceError:
    if isinstance(data, GeneralPostCreate):
        fields = {"contents": data.contents}
    else:
        fields = {"what_failed": data.what_failed,
                  "lesson_learned": data.lesson_learned}

    new_post = Post(title=data.title, category=Category(data.category),
                    author_id=author_id, **fields)
    try:
        db.add(new_post)
        db.commit()
        db.refresh(new_post)
        payload = post_payload(new_post, comment_count=0, net_votes=0)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating post")
        return ServiceError.internal("Failed to create post")

    logger.info(f"Post {new_post.id} created by {author_id}")
    return payload


def get_posts(db: Session, category: Optional[Category] = None, user_id: Optional[str] = None) -> list[dict] | ServiceError:
    """List posts newest first, each with its comment count and net votes."""
    comment_counts = db.query(
        Comment.post_id, func.count(Comment.id).label("total"))\
        .group_by(Comment.post_id)\
        .subquery()
    vote_totals = db.query(
        Vote.post_id, func.sum(case((Vote.is_upvote, 1), else_=-1)).label("net"))\
        .group_by(Vote.post_id)\
        .subquery()

    query = db.query(
        Post,
        func.coalesce(comment_counts.c.total, 0),
        func.coalesce(vote_totals.c.net, 0))\
        .outerjoin(comment_counts, comment_counts.c.post_id == Post.id)\
        .outerjoin(vote_totals, vote_totals.c.post_id == Post.id)\
        .options(joinedload(Post.author))
    if category is not None:
        query = query.filter(Post.category == category)

    try:
        rows = query.order_by(Post.created_at.desc()).all()
        user_votes = {}
        if user_id and rows:
            user_votes = dict(
                db.query(Vote.post_id, Vote.is_upvote)
                .filter(Vote.user_id == user_id,
                        Vote.post_id.in_([post.id for post, _, _ in rows]))
                .all()
            )
    except SQLAlchemyError:
        logger.exception("Error fetching posts")
        return ServiceError.internal("Failed to fetch posts")

    return [
        post_payload(post, int(comments), int(net), user_votes.get(post.id))
        for post, comments, net in rows
    ]


def get_post(post_id: str, db: Session, user_id: Optional[str] = None) -> dict | ServiceError:
    try:
        post = db.query(Post).options(joinedload(Post.author))\
            .filter(Post.id == post_id).first()
        if not post:
            return ServiceError.not_found("Post not found")

        comments = _comments_query(db, post_id).all()
        upvotes, downvotes = count_votes(db, post_id)
        user_vote = get_user_vote(db, post_id, user_id)
    except SQLAlchemyError:
        logger.exception(f"Error fetching post {post_id}")
        return ServiceError.internal("Failed to fetch post")

    net_votes = upvotes - downvotes
    payload = post_payload(post, len(comments), net_votes, user_vote)
    payload["net_votes"] = net_votes
    payload["comments"] = [CommentResponse.model_validate(c) for c in comments]
    return payload


def delete_post(post_id: str, user_id: str, db: Session) -> None | ServiceError:
    try:
        post = db.query(Post).filter(Post.id == post_id).first()
        if not post:
            return ServiceError.not_found("Post not found")
        if post.author_id != user_id:
            return ServiceError.forbidden("You can only delete your own posts")

        # Comments and votes go with it (relationship cascade)
        db.delete(post)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error deleting post {post_id}")
        return ServiceError.internal("Failed to delete post")

    logger.info(f"Post {post_id} deleted by {user_id}")
    return None


def create_comment(post_id: str, content: str, author_id: str, db: Session) -> Comment | ServiceError:
    try:
        if db.get(Post, post_id) is None:
            return ServiceError.not_found("Post not found")

        comment = Comment(content=content, post_id=post_id, author_id=author_id)
        db.add(comment)
        db.commit()
        db.refresh(comment)
        # Load the author while the session is still open
        comment.author
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error creating comment on post {post_id}")
        return ServiceError.internal("Failed to create comment")

    logger.info(f"Comment {comment.id} added to post {post_id}")
    return comment


def get_comments(post_id: str, db: Session) -> list[Comment] | ServiceError:
    try:
        if db.get(Post, post_id) is None:
            return ServiceError.not_found("Post not found")
        return _comments_query(db, post_id).all()
    except SQLAlchemyError:
        logger.exception(f"Error fetching comments for post {post_id}")
        return ServiceError.internal("Failed to fetch comments")
