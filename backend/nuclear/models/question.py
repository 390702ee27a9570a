"""
Question: free-standing question text, optionally attached to a block.
"""
from datetime import datetime
from sqlalchemy import String, Text, Integer, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from nuclear.database import Base
from nuclear.models.types import IdType, new_id, utcnow


class Question(Base):
    __tablename__ = "questions"

    id: Mapped[str] = mapped_column(IdType, primary_key=True, default=new_id)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    block_id: Mapped[str | None] = mapped_column(IdType, ForeignKey("blocks.id"), nullable=True, index=True)
    type: Mapped[str | None] = mapped_column(String(50), nullable=True)  # e.g. multiple_choice, short_answer
    difficulty: Mapped[str | None] = mapped_column(String(20), nullable=True)
    points: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("difficulty IS NULL OR difficulty IN ('easy', 'medium', 'hard')", name="questions_difficulty_check"),
        CheckConstraint("points IS NULL OR points >= 0", name="questions_points_check"),
    )

    block = relationship("Block", back_populates="questions")
