"""Alembic environment configuration"""

from sqlalchemy import create_engine
from alembic import context

from dochost.core.config import get_settings
from dochost.models import Credential, Page, Tenant  # noqa: F401  registers tables

config = context.config
target_metadata = Tenant.metadata


def get_url():
    """Database URL from settings, falling back to alembic.ini"""
    return get_settings().DATABASE_URL or config.get_main_option("sqlalchemy.url")


def run_migrations_offline():
    """Run migrations in 'offline' mode"""
    context.configure(
        url=get_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    """Run migrations against a live connection"""
    engine = create_engine(get_url())

    with engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
