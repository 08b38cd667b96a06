"""
Alembic environment for the MedTracker schema.

Run from backend/ (alembic.ini lives there):
    alembic upgrade head
    alembic revision --autogenerate -m "..."

Migrations use the sync psycopg2 URL derived by Settings.database_url_sync;
the application itself talks to the same database through asyncpg.

The updated_at trigger function and its per-table triggers are created in
revision 001_initial with raw SQL. They are not part of Base.metadata, so
autogenerate neither sees nor drops them; tables added later that carry an
updated_at column need their trigger added by hand in the new revision.
"""

import logging
from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine, pool

from medtracker.config import get_settings
from medtracker.db.base import Base
from medtracker.db import models  # noqa: F401 - registers the tables on Base.metadata

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

logger = logging.getLogger("alembic.env")

target_metadata = Base.metadata
settings = get_settings()

# notes.tags is TEXT[] on Postgres and JSON elsewhere
_CONFIGURE_OPTS = {
    "target_metadata": target_metadata,
    "compare_type": True,
}


def _skip_empty_revisions(context, revision, directives) -> None:
    """Do not write an autogenerate revision that has no operations."""
    if getattr(config.cmd_opts, "autogenerate", False):
        script = directives[0]
        if script.upgrade_ops.is_empty():
            directives[:] = []
            logger.info("No schema changes detected; revision not generated")


def run_migrations_offline() -> None:
    """Emit the migration SQL to stdout without connecting."""
    context.configure(
        url=settings.database_url_sync,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_CONFIGURE_OPTS,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Apply migrations over a single sync connection."""
    connectable = create_engine(settings.database_url_sync, poolclass=pool.NullPool)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            process_revision_directives=_skip_empty_revisions,
            **_CONFIGURE_OPTS,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
