"""
Per-category rolling progress statistics.
"""
from sqlalchemy import Column, Integer, DateTime, ForeignKey, Float, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from certprep.db.base import Base


class UserProgress(Base):
    """Cumulative statistics of one learner in one category."""

    __tablename__ = "user_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "category_id", name="uq_user_progress_user_category"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    questions_attempted = Column(Integer, default=0, nullable=False)
    questions_correct = Column(Integer, default=0, nullable=False)
    average_score = Column(Float, default=0.0, nullable=False)  # Percentage
    last_studied_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    user = relationship("User", back_populates="progress")
    category = relationship("Category")
