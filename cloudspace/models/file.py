"""File metadata model."""

import uuid

from sqlalchemy import Column, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from cloudspace.database import Base
from cloudspace.models.mixins import TimestampMixin
from cloudspace.utils.files import get_full_file_name


class File(Base, TimestampMixin):
    """Metadata for a blob stored in the workspace owner's bucket.

    The row decides whether a file exists; the blob at ``path`` holds its content.
    """

    __tablename__ = "files"
    __table_args__ = (
        UniqueConstraint(
            "workspace_id", "file_name", "file_extension", name="uq_files_workspace_name"
        ),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    workspace_id = Column(
        Uuid, ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False, index=True
    )
    file_name = Column(String(255), nullable=False)
    file_extension = Column(String(255), nullable=False, default="")
    path = Column(String(1024), nullable=False)

    # Relationships
    workspace = relationship("Workspace")

    @property
    def full_name(self) -> str:
        """Display name, base name and extension joined with a dot."""
        return get_full_file_name(self.file_name, self.file_extension)
