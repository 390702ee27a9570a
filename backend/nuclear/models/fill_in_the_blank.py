"""
FillInTheBlank: a sentence containing the blank marker (___) and its expected answer.
"""
from datetime import datetime
from sqlalchemy import String, Text, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from nuclear.database import Base
from nuclear.models.types import IdType, new_id, utcnow

BLANK_MARKER = "___"


class FillInTheBlank(Base):
    __tablename__ = "fill_in_the_blanks"

    id: Mapped[str] = mapped_column(IdType, primary_key=True, default=new_id)
    sentence: Mapped[str] = mapped_column(Text, nullable=False)
    answer: Mapped[str] = mapped_column(String(512), nullable=False)
    block_id: Mapped[str | None] = mapped_column(IdType, ForeignKey("blocks.id"), nullable=True, index=True)
    hint: Mapped[str | None] = mapped_column(Text, nullable=True)
    difficulty: Mapped[str | None] = mapped_column(String(20), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("difficulty IS NULL OR difficulty IN ('easy', 'medium', 'hard')", name="fill_in_the_blanks_difficulty_check"),
    )

    block = relationship("Block", back_populates="fill_in_the_blanks")
