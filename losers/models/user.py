from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
from losers.db.session import Base, generate_id, utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=generate_id)
    username = Column(String(20), unique=True, nullable=False, index=True)
    nickname = Column(String(50), nullable=False)
    password = Column(String, nullable=False)  # argon2 hash
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    posts = relationship("Post", back_populates="author")
    comments = relationship("Comment", back_populates="author")
