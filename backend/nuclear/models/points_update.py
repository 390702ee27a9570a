"""
PointsUpdate: ledger entry of points awarded for an action on a block, optionally to a user.
Points are non-negative integers (enforced in services and by a check constraint).
"""
from datetime import datetime
from sqlalchemy import Integer, Text, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from nuclear.database import Base
from nuclear.models.types import IdType, new_id, utcnow


class PointsUpdate(Base):
    __tablename__ = "points_updates"

    id: Mapped[str] = mapped_column(IdType, primary_key=True, default=new_id)
    points: Mapped[int] = mapped_column(Integer, nullable=False)
    block_id: Mapped[str | None] = mapped_column(IdType, ForeignKey("blocks.id"), nullable=True, index=True)
    user_id: Mapped[str | None] = mapped_column(IdType, ForeignKey("users.id"), nullable=True, index=True)
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (CheckConstraint("points >= 0", name="points_updates_points_check"),)

    block = relationship("Block", back_populates="points_updates")
    user = relationship("User", back_populates="points_updates")
