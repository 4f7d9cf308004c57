"""Workspace and membership models."""

import uuid

from sqlalchemy import Column, ForeignKey, Integer, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from cloudspace.database import Base
from cloudspace.models.mixins import CreatedAtMixin, TimestampMixin


class Workspace(Base, TimestampMixin):
    """Named folder of files, owned by one user and shared through memberships."""

    __tablename__ = "workspaces"
    __table_args__ = (UniqueConstraint("owner_id", "name", name="uq_workspaces_owner_name"),)

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    owner_id = Column(
        Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Relationships
    owner = relationship("User", lazy="joined")


class UserWorkspace(Base, CreatedAtMixin):
    """Membership granting a user access to a workspace, independent of ownership."""

    __tablename__ = "user_workspaces"
    __table_args__ = (
        UniqueConstraint("user_id", "workspace_id", name="uq_user_workspaces_user_workspace"),
    )

    # Integer key preserves insertion order for listing
    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    workspace_id = Column(
        Uuid, ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Relationships
    user = relationship("User")
    workspace = relationship("Workspace")
