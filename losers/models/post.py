import enum

from sqlalchemy import Column, DateTime, Enum, ForeignKey, String, Text
from sqlalchemy.orm import relationship
from losers.db.session import Base, generate_id, utcnow


class Category(str, enum.Enum):
    GENERAL = "GENERAL"
    COLLEGE = "COLLEGE"
    ENTREPRENEURS = "ENTREPRENEURS"
    PROFESSIONALS = "PROFESSIONALS"
    LIFE = "LIFE"


class Post(Base):
    __tablename__ = "posts"

    id = Column(String(36), primary_key=True, default=generate_id)
    title = Column(String(150), nullable=False)
    category = Column(Enum(Category, name="post_category"), nullable=False, index=True)
    # GENERAL posts fill `contents`; every other category fills the
    # what_failed / lesson_learned pair.
    what_failed = Column(String(500), nullable=True)
    lesson_learned = Column(String(500), nullable=True)
    contents = Column(Text, nullable=True)
    author_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    author = relationship("User", back_populates="posts")
    comments = relationship(
        "Comment", back_populates="post", cascade="all, delete-orphan")
    votes = relationship(
        "Vote", back_populates="post", cascade="all, delete-orphan")
