"""Database-level guard against overlapping active reservations

Adds an EXCLUDE USING gist constraint so two PENDING/CONFIRMED reservations
for the same room can never cover overlapping [check_in, check_out) ranges,
even if a writer bypasses the application's room lock. daterange '[)' matches
the application's half-open rule: a check-out and a check-in on the same day
do not conflict.

PostgreSQL only; other dialects rely on the application check.

Revision ID: 7c4e2d8a5b61
Revises: 3a1f0c2b9d10
Create Date: 2025-09-04 16:40:02.551930

"""

from alembic import op  # type: ignore[attr-defined]

# revision identifiers, used by Alembic.
revision = "7c4e2d8a5b61"
down_revision = "3a1f0c2b9d10"
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Upgrade schema."""
    if op.get_bind().dialect.name != "postgresql":
        return

    op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
    op.execute(
        """
        ALTER TABLE reservations
        ADD CONSTRAINT no_room_overlap
        EXCLUDE USING gist (
            room_id WITH =,
            daterange(check_in_date, check_out_date, '[)') WITH &&
        )
        WHERE (status IN ('PENDING', 'CONFIRMED'))
        """
    )


def downgrade() -> None:
    """Downgrade schema."""
    if op.get_bind().dialect.name != "postgresql":
        return

    op.execute("ALTER TABLE reservations DROP CONSTRAINT IF EXISTS no_room_overlap")
