"""Workspace (tenant) and membership models."""

import enum
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import Enum, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from commandcenter.db.base import BaseModel

if TYPE_CHECKING:
    from commandcenter.models.user import User


def enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    """Persist enum members by value rather than by name."""
    return [member.value for member in enum_cls]


class WorkspaceRole(str, enum.Enum):
    OWNER = "owner"
    MEMBER = "member"


class Workspace(BaseModel):
    """Workspace - the tenancy boundary every entity belongs to."""

    __tablename__ = "workspaces"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)

    # Relationships
    members: Mapped[list["WorkspaceUser"]] = relationship(
        "WorkspaceUser", back_populates="workspace", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self) -> str:
        try:
            return f"<Workspace {self.slug}>"
        except Exception:
            return f"<Workspace id={self.id}>"


class WorkspaceUser(BaseModel):
    """Workspace membership with role."""

    __tablename__ = "workspace_users"
    __table_args__ = (
        UniqueConstraint("user_id", "workspace_id", name="uq_workspace_users_user_workspace"),
    )

    user_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    workspace_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True),
        ForeignKey("workspaces.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[WorkspaceRole] = mapped_column(
        Enum(WorkspaceRole, native_enum=False, length=50, values_callable=enum_values),
        nullable=False,
        default=WorkspaceRole.MEMBER,
    )

    # Relationships
    workspace: Mapped["Workspace"] = relationship(
        "Workspace", back_populates="members", lazy="joined"
    )
    user: Mapped["User"] = relationship("User", back_populates="memberships")

    def __repr__(self) -> str:
        return f"<WorkspaceUser workspace={self.workspace_id} user={self.user_id}>"
