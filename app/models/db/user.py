"""
User accounts: customers and staff.
"""

from sqlalchemy import Boolean, Column, Date, DateTime, Float, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB

from .base import Base, TimestampMixin, uuid_pk


class UserModel(Base, TimestampMixin):
    """
    Registered user.

    Attributes:
        email: Unique, stored lowercase
        password_hash: bcrypt hash, never serialised
        addresses: Embedded address book (JSONB list)
        role: super_admin | admin | customer
        status: active | blocked | pending
        is_deleted: Soft-delete flag
    """

    __tablename__ = "users"

    id = uuid_pk()
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)

    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    phone = Column(String(30))
    avatar = Column(String(500))
    bio = Column(Text)
    date_of_birth = Column(Date)
    gender = Column(String(10))
    addresses = Column(JSONB, default=list, nullable=False)

    role = Column(String(20), nullable=False, default="customer")
    status = Column(String(20), nullable=False, default="active")
    is_email_verified = Column(Boolean, default=False, nullable=False)
    is_deleted = Column(Boolean, default=False, nullable=False)

    # Denormalised counters
    total_orders = Column(Integer, default=0, nullable=False)
    total_spent = Column(Float, default=0, nullable=False)
    total_wishlist_items = Column(Integer, default=0, nullable=False)

    password_changed_at = Column(DateTime(timezone=True))
    last_login_at = Column(DateTime(timezone=True))

    __table_args__ = (
        Index("idx_users_role", role),
        Index("idx_users_status", status),
        Index("idx_users_created_at", "created_at"),
    )

    def __repr__(self):
        return f"<UserModel(id='{self.id}', email='{self.email}', role='{self.role}')>"
