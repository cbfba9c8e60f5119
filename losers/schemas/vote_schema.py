from typing import Optional
from pydantic import ConfigDict, StrictBool
from losers.schemas.base import CamelModel


class VoteRequest(CamelModel):
    is_upvote: StrictBool

    model_config = ConfigDict(extra="forbid")


class VoteResult(CamelModel):
    net_votes: int
    upvotes: int
    downvotes: int
    # None once the caller's vote has been toggled off
    user_vote: Optional[bool] = None
