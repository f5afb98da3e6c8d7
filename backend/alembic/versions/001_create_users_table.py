"""Create users table

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates the `users` table.
How:   Integer autoincrement key; UNIQUE on email so concurrent creates with
       the same address cannot both commit; CHECK keeps age positive.

Rollback: downgrade() drops the table entirely (destructive — all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column(
            "email",
            sa.String(320),
            nullable=False,
            comment="Unique across all users",
        ),
        sa.Column("age", sa.Integer(), nullable=False),
        sa.Column(
            "dob",
            sa.DateTime(timezone=True),
            nullable=False,
            comment="Date of birth (UTC)",
        ),
        # passlib hash string, never plaintext
        sa.Column("password", sa.String(255), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email", name="uq_users_email"),
        sa.CheckConstraint("age > 0", name="ck_users_age_positive"),
    )


def downgrade() -> None:
    """
    Drop the users table entirely.

    WARNING: Destructive. Production rollbacks should archive data in a
    forward migration instead.
    """
    op.drop_table("users")
