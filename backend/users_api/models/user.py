"""
Users API — User SQLAlchemy Model
===================================

What:  ORM model representing the `users` table.
Why:   Maps Python objects to database rows for type-safe database operations.
How:   Inherits from SQLAlchemy's DeclarativeBase; Alembic reads this for migrations.
Who:   Used by UserRepository for CRUD operations and by Alembic for schema management.

Table Design:
    - Integer autoincrement primary key, assigned on insert and never reused
    - email carries a UNIQUE constraint: the service checks for an existing
      owner before writing, and the constraint settles races between
      concurrent requests that both pass that check
    - password holds the passlib hash string, never plaintext
"""

from datetime import datetime

from sqlalchemy import CheckConstraint, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from users_api.database import Base


class User(Base):
    """
    Represents a single user record.

    Lifecycle:
        1. Created by POST / (id assigned by the database)
        2. Fields changed in bulk (PUT) or one at a time (PATCH name/email/password)
        3. Deleted permanently by DELETE (no soft delete)
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    email: Mapped[str] = mapped_column(
        String(320),
        nullable=False,
        comment="Unique across all users",
    )

    age: Mapped[int] = mapped_column(Integer, nullable=False)

    dob: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="Date of birth (UTC)",
    )

    # passlib hash strings are well under 255 characters for bcrypt and pbkdf2
    password: Mapped[str] = mapped_column(String(255), nullable=False)

    __table_args__ = (
        UniqueConstraint("email", name="uq_users_email"),
        CheckConstraint("age > 0", name="ck_users_age_positive"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"
