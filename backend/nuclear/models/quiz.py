"""
Quiz: optional block and topic; optional time limit (minutes) and passing score (0-100).
"""
from datetime import datetime
from sqlalchemy import String, Text, Integer, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from nuclear.database import Base
from nuclear.models.types import IdType, new_id, utcnow


class Quiz(Base):
    __tablename__ = "quizzes"

    id: Mapped[str] = mapped_column(IdType, primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    block_id: Mapped[str | None] = mapped_column(IdType, ForeignKey("blocks.id"), nullable=True, index=True)
    topic_id: Mapped[str | None] = mapped_column(IdType, ForeignKey("topics.id"), nullable=True, index=True)
    time_limit: Mapped[int | None] = mapped_column(Integer, nullable=True)
    passing_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("time_limit IS NULL OR time_limit > 0", name="quizzes_time_limit_check"),
        CheckConstraint("passing_score IS NULL OR (passing_score >= 0 AND passing_score <= 100)", name="quizzes_passing_score_check"),
    )

    block = relationship("Block", back_populates="quizzes")
    topic = relationship("Topic", back_populates="quizzes")
