"""
models/task.py
--------------
Follow-up task created from an interaction.

Tenant chain: task → interaction → lead → client → company (the deepest
chain in the schema).
"""

from datetime import datetime
from enum import Enum as PyEnum
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from crm_backend.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class TaskStatus(str, PyEnum):
    pending = "pending"
    in_progress = "in progress"
    completed = "completed"


class Task(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "tasks"

    interaction_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("interactions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=TaskStatus.pending.value, index=True
    )
    due_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    assigned_to: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    # Relationships
    interaction: Mapped["Interaction"] = relationship(  # noqa: F821
        "Interaction", back_populates="tasks"
    )
    assignee: Mapped[Optional["User"]] = relationship("User")  # noqa: F821

    def __repr__(self) -> str:
        return f"<Task id={self.id} status={self.status}>"
