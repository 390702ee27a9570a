"""
User: unique email, optional name, mode (STUDENT | TEACHER | ADMIN).
Authors blocks and folders; points updates may reference a user.
"""
from datetime import datetime
from sqlalchemy import String, DateTime, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from nuclear.database import Base
from nuclear.models.types import IdType, UserMode, new_id, utcnow


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(IdType, primary_key=True, default=new_id)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    mode: Mapped[str] = mapped_column(String(20), nullable=False, default=UserMode.STUDENT.value)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    __table_args__ = (CheckConstraint("mode IN ('STUDENT', 'TEACHER', 'ADMIN')", name="users_mode_check"),)

    blocks = relationship("Block", back_populates="author")
    folders = relationship("Folder", back_populates="author")
    points_updates = relationship("PointsUpdate", back_populates="user")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', mode={self.mode})>"

    @property
    def is_admin(self) -> bool:
        return self.mode == UserMode.ADMIN.value
