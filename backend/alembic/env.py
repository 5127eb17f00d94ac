import os
import sys
from logging.config import fileConfig

# Make the backend modules importable when alembic runs from this folder
sys.path.insert(0, os.path.realpath(os.path.join(os.path.dirname(__file__), '..')))

from alembic import context

from config import settings
from database import Base, _normalize_url, make_engine
import models.users  # noqa: F401
import models.session  # noqa: F401
import models.product  # noqa: F401
import models.cart  # noqa: F401
import models.order  # noqa: F401
import models.log  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _database_url() -> str:
    # DATABASE_URL wins over the placeholder in alembic.ini
    if settings.DATABASE_URL:
        return _normalize_url(settings.DATABASE_URL)
    return config.get_main_option("sqlalchemy.url")


def run_migrations_offline() -> None:
    """Emit the migration SQL without connecting."""
    context.configure(
        url=_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    # Same engine setup as the app, so SQLite gets its foreign key pragma
    connectable = make_engine(_database_url())
    try:
        with connectable.connect() as connection:
            context.configure(connection=connection, target_metadata=target_metadata)
            with context.begin_transaction():
                context.run_migrations()
    finally:
        connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
