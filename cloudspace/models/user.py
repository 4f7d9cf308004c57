"""User model."""

import uuid

from sqlalchemy import Column, String, Uuid

from cloudspace.database import Base
from cloudspace.models.mixins import TimestampMixin


class User(Base, TimestampMixin):
    """User model for authentication and ownership.

    Every user owns exactly one object-store bucket, named after the user id.
    """

    __tablename__ = "users"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    username = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    bucket_name = Column(String(63), nullable=False)
