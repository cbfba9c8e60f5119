import logging

from sqlalchemy import delete, func, insert, update
from sqlalchemy.dialects import mysql, postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from losers.core.errors import ServiceError
from losers.db.session import generate_id
from losers.models.post import Post
from losers.models.vote import Vote
from losers.schemas.vote_schema import VoteResult

logger = logging.getLogger(__name__)


def count_votes(db: Session, post_id: str) -> tuple[int, int]:
    """Return ``(upvotes, downvotes)`` counted from the post's vote rows."""
    upvotes = db.query(func.count(Vote.id)).filter(
        Vote.post_id == post_id, Vote.is_upvote.is_(True)).scalar()
    downvotes = db.query(func.count(Vote.id)).filter(
        Vote.post_id == post_id, Vote.is_upvote.is_(False)).scalar()
    return upvotes or 0, downvotes or 0


def get_user_vote(db: Session, post_id: str, user_id: str | None) -> bool | None:
    if user_id is None:
        return None
    return db.query(Vote.is_upvote).filter(
        Vote.post_id == post_id, Vote.user_id == user_id).scalar()


def _insert_or_flip_vote(db: Session, values: dict):
    """Upsert for dialects without native support.

    The insert runs in a savepoint; losing to a concurrent insert of the same
    (user_id, post_id) rolls back only the savepoint and the row is flipped
    in place instead.
    """
    try:
        with db.begin_nested():
            db.execute(insert(Vote).values(**values))
    except IntegrityError:
        db.execute(
            update(Vote).where(
                Vote.user_id == values["user_id"],
                Vote.post_id == values["post_id"],
            ).values(is_upvote=values["is_upvote"])
            .execution_options(synchronize_session=False)
        )


def _upsert_vote(db: Session, post_id: str, user_id: str, is_upvote: bool):
    """Insert the caller's vote or flip its direction, in one statement.

    Keyed on the (user_id, post_id) unique constraint so two concurrent
    submissions can never produce a second row for the same pair.
    """
    values = dict(id=generate_id(), user_id=user_id,
                  post_id=post_id, is_upvote=is_upvote)
    dialect = db.get_bind().dialect.name

    if dialect in ("postgresql", "sqlite"):
        dialect_insert = postgresql.insert if dialect == "postgresql" else sqlite.insert
        stmt = dialect_insert(Vote).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[Vote.user_id, Vote.post_id],
            set_={"is_upvote": stmt.excluded.is_upvote},
        )
        db.execute(stmt)
    elif dialect in ("mysql", "mariadb"):
        stmt = mysql.insert(Vote).values(**values)
        db.execute(stmt.on_duplicate_key_update(is_upvote=stmt.inserted.is_upvote))
    else:
        _insert_or_flip_vote(db, values)


def apply_vote(db: Session, post_id: str, user_id: str, is_upvote: bool) -> VoteResult | ServiceError:
    """Record ``user_id``'s vote on a post and return the fresh tally.

    - no existing vote: a vote in the requested direction is inserted
    - existing vote in the same direction: it is removed (toggle-off)
    - existing vote in the other direction: it is flipped in place

    The toggle-off is a conditional delete and the other two cases are a
    single upsert, so the decision never depends on a separate read.
    """
    logger.debug(f"Vote request: post={post_id} user={user_id} is_upvote={is_upvote}")
    try:
        if db.get(Post, post_id) is None:
            return ServiceError.not_found("Post not found")

        removed = db.execute(
            delete(Vote).where(
                Vote.user_id == user_id,
                Vote.post_id == post_id,
                Vote.is_upvote == is_upvote,
            ).execution_options(synchronize_session=False)
        )
        if removed.rowcount == 0:
            _upsert_vote(db, post_id, user_id, is_upvote)
        db.commit()

        upvotes, downvotes = count_votes(db, post_id)
        return VoteResult(
            net_votes=upvotes - downvotes,
            upvotes=upvotes,
            downvotes=downvotes,
            user_vote=get_user_vote(db, post_id, user_id),
        )
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error voting on post {post_id}")
        return ServiceError.internal("Failed to vote on post")
