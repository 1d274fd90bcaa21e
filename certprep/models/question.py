"""
Question bank models: questions and their answer options.
"""
import enum

from sqlalchemy import Column, Integer, String, DateTime, Text, ForeignKey, Boolean, Float
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from certprep.db.base import Base


class QuestionType(str, enum.Enum):
    SINGLE_CHOICE = "single_choice"
    PERFORMANCE_BASED = "performance_based"


class Difficulty(str, enum.Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Question(Base):
    """Question model. Read-only for the test engine."""

    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False, index=True)
    question_type = Column(String(32), nullable=False, default=QuestionType.SINGLE_CHOICE.value)
    question_text = Column(Text, nullable=False)
    explanation = Column(Text, nullable=True)
    image_url = Column(String, nullable=True)
    difficulty = Column(String(16), nullable=False, default=Difficulty.MEDIUM.value)
    points = Column(Float, nullable=False, default=1.0)
    time_limit_seconds = Column(Integer, nullable=False, default=60)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    category = relationship("Category", back_populates="questions")
    options = relationship(
        "QuestionOption",
        back_populates="question",
        order_by="QuestionOption.position",
        cascade="all, delete-orphan",
    )

    @property
    def correct_options(self):
        return [o for o in self.options if o.is_correct]


class QuestionOption(Base):
    """Answer option belonging to exactly one question."""

    __tablename__ = "question_options"

    id = Column(Integer, primary_key=True, index=True)
    question_id = Column(Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    option_text = Column(Text, nullable=False)
    is_correct = Column(Boolean, nullable=False, default=False)
    explanation = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    question = relationship("Question", back_populates="options")
