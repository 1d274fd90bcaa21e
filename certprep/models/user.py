"""
Learner profile model.

Identity is managed elsewhere; this table only mirrors the profile and holds
the global aggregates updated on session completion.
"""
from sqlalchemy import Boolean, Column, Integer, String, DateTime, Float
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from certprep.db.base import Base


class User(Base):
    """User profile model."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)
    role = Column(String, default="student")  # student, admin
    is_active = Column(Boolean, default=True)

    # Global aggregates
    total_tests_taken = Column(Integer, default=0, nullable=False)
    total_questions_taken = Column(Integer, default=0, nullable=False)  # weight of average_score
    average_score = Column(Float, default=0.0, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    test_sessions = relationship("TestSession", back_populates="user", cascade="all, delete-orphan")
    progress = relationship("UserProgress", back_populates="user", cascade="all, delete-orphan")
