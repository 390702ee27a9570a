"""
Block: a content unit (lesson, post). Required author; optional folder.
Quizzes, questions, topics, fill-in-the-blanks and points updates reference it optionally.
"""
from datetime import datetime
from sqlalchemy import String, Text, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from nuclear.database import Base
from nuclear.models.types import IdType, new_id, utcnow


class Block(Base):
    __tablename__ = "blocks"

    id: Mapped[str] = mapped_column(IdType, primary_key=True, default=new_id)
    title: Mapped[str] = mapped_column(String(512), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author_id: Mapped[str] = mapped_column(IdType, ForeignKey("users.id"), nullable=False, index=True)
    folder_id: Mapped[str | None] = mapped_column(IdType, ForeignKey("folders.id"), nullable=True, index=True)
    published: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    author = relationship("User", back_populates="blocks")
    folder = relationship("Folder", back_populates="blocks")
    quizzes = relationship("Quiz", back_populates="block")
    questions = relationship("Question", back_populates="block")
    topics = relationship("Topic", back_populates="block")
    fill_in_the_blanks = relationship("FillInTheBlank", back_populates="block")
    points_updates = relationship("PointsUpdate", back_populates="block")
