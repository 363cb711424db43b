"""Row-level security on owner-scoped tables (PostgreSQL only).

Revision ID: 002_row_level_security
Revises: 001_initial
Create Date: 2026-10-16

Rows in applications and tasks are visible and writable only when user_id
matches the app.current_user_id setting, which the database session manager
sets per transaction for owner-bound sessions. FORCE makes the policy apply
to the table owner too, so the application role cannot bypass it. Without
the setting no row matches.
"""
from typing import Sequence, Union

from alembic import op

revision: str = "002_row_level_security"
down_revision: Union[str, None] = "001_initial"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

_OWNED_TABLES = ("applications", "tasks")
_CURRENT_USER = "NULLIF(current_setting('app.current_user_id', true), '')::uuid"


def upgrade() -> None:
    if op.get_bind().dialect.name != "postgresql":
        return
    for table in _OWNED_TABLES:
        op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY")
        op.execute(f"ALTER TABLE {table} FORCE ROW LEVEL SECURITY")
        op.execute(
            f"CREATE POLICY {table}_owner ON {table} "
            f"USING (user_id = {_CURRENT_USER}) "
            f"WITH CHECK (user_id = {_CURRENT_USER})"
        )


def downgrade() -> None:
    if op.get_bind().dialect.name != "postgresql":
        return
    for table in _OWNED_TABLES:
        op.execute(f"DROP POLICY IF EXISTS {table}_owner ON {table}")
        op.execute(f"ALTER TABLE {table} NO FORCE ROW LEVEL SECURITY")
        op.execute(f"ALTER TABLE {table} DISABLE ROW LEVEL SECURITY")
