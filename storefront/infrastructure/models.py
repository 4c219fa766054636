"""SQLAlchemy models for shared tables.

Provides the users table referenced by orders as the buyer.
"""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import Column, DateTime, String

from storefront.infrastructure.database import Base


class UserModel(Base):
    """Registered storefront user.

    Accounts and credentials are managed elsewhere; orders only need
    the buyer's identity and display name.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
