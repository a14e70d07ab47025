"""Dialect-aware helpers for Alembic migrations."""
import sqlalchemy as sa
from alembic import op


def is_postgresql() -> bool:
    return op.get_bind().dialect.name == 'postgresql'


def get_false_default():
    """Server default for a boolean column that starts false (``false`` or ``0`` on SQLite)."""
    return sa.text('false') if is_postgresql() else sa.text('0')


def get_timestamp_default():
    """Server default for creation timestamps (``NOW()`` or ``CURRENT_TIMESTAMP`` on SQLite)."""
    return sa.text('NOW()') if is_postgresql() else sa.text('CURRENT_TIMESTAMP')
