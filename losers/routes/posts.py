from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from losers.core.deps import get_current_user_id, get_optional_user_id
from losers.core.errors import unwrap
from losers.db.session import get_db
from losers.schemas.comment_schema import CommentCreate, CommentResponse
from losers.schemas.post_schema import PostCreate, PostDetailResponse, PostResponse
from losers.schemas.vote_schema import VoteRequest, VoteResult
from losers.services import posts as posts_service
from losers.services.votes import apply_vote

router = APIRouter(prefix="/posts", tags=["posts"])

# ------------------------------------------
#  Posts
# ------------------------------------------
# userVote is left out of post bodies when the caller has not voted


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED,
             response_model_exclude_none=True)
def create_post(
    post: PostCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return unwrap(posts_service.create_post(post.root, user_id, db))


@router.get("", response_model=List[PostResponse], response_model_exclude_none=True)
def list_posts(
    category: Optional[str] = Query(None, description="Only posts in this category; blank for all"),
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_optional_user_id),
):
    """List posts newest first, optionally filtered by category."""
    category_filter = unwrap(posts_service.parse_category(category))
    return unwrap(posts_service.get_posts(db, category=category_filter, user_id=user_id))


@router.get("/{post_id}", response_model=PostDetailResponse, response_model_exclude_none=True)
def get_post(
    post_id: str = Path(..., description="Post identifier"),
    db: Session = Depends(get_db),
    user_id: Optional[str] = Depends(get_optional_user_id),
):
    """Get a single post with its net votes and comments."""
    return unwrap(posts_service.get_post(post_id, db, user_id=user_id))


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_post(
    post_id: str,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Delete a post; only its author may do so."""
    unwrap(posts_service.delete_post(post_id, user_id, db))


# ------------------------------------------
#  Comments
# ------------------------------------------
@router.get("/{post_id}/comments", response_model=List[CommentResponse])
def list_comments(post_id: str, db: Session = Depends(get_db)):
    return unwrap(posts_service.get_comments(post_id, db))


@router.post("/{post_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
def create_comment(
    post_id: str,
    comment: CommentCreate,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    return unwrap(posts_service.create_comment(post_id, comment.content, user_id, db))


# ------------------------------------------
#  Votes
# ------------------------------------------
@router.post("/{post_id}/vote", response_model=VoteResult)
def vote_post(
    post_id: str,
    vote: VoteRequest,
    db: Session = Depends(get_db),
    user_id: str = Depends(get_current_user_id),
):
    """Upvote or downvote a post; repeating the same vote removes it."""
    return unwrap(apply_vote(db, post_id, user_id, vote.is_upvote))
