"""User model."""

from typing import TYPE_CHECKING

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from commandcenter.db.base import BaseModel

if TYPE_CHECKING:
    from commandcenter.models.workspace import WorkspaceUser


class User(BaseModel):
    """User profile as supplied by the identity provider."""

    __tablename__ = "users"

    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    image: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # Relationships
    memberships: Mapped[list["WorkspaceUser"]] = relationship(
        "WorkspaceUser", back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self) -> str:
        try:
            return f"<User {self.email}>"
        except Exception:
            return f"<User id={self.id}>"
