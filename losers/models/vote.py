from sqlalchemy import Boolean, Column, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import relationship
from losers.db.session import Base, generate_id


class Vote(Base):
    __tablename__ = "votes"
    # One vote per (user, post); the upsert in services.votes relies on it
    __table_args__ = (
        UniqueConstraint("user_id", "post_id", name="uq_votes_user_post"),
    )

    id = Column(String(36), primary_key=True, default=generate_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    post_id = Column(String(36), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    is_upvote = Column(Boolean, nullable=False)

    post = relationship("Post", back_populates="votes")
