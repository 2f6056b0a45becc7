"""Alembic environment for the BroResolve schema.

The database URL comes from the same settings the app uses (DATABASE_URL,
optionally from .env), so `alembic upgrade head` targets the app's database.
"""
from __future__ import annotations
import os
import sys
from logging.config import fileConfig
from alembic import context
from dotenv import load_dotenv
from sqlalchemy import engine_from_config, pool

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from broresolve.config.settings import default_settings  # noqa: E402
from broresolve.models.authz import Base  # noqa: E402
import broresolve.models.ticket  # noqa: E402,F401
import broresolve.models.audit  # noqa: E402,F401

load_dotenv()
config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)
config.set_main_option('sqlalchemy.url', default_settings()['DATABASE_URL'])

target_metadata = Base.metadata

# SQLite cannot ALTER most constraints in place; batch mode rebuilds the table
CONFIGURE_OPTS = {'target_metadata': target_metadata, 'render_as_batch': True, 'compare_type': True}


def run_migrations_offline():
    context.configure(url=config.get_main_option('sqlalchemy.url'), literal_binds=True, **CONFIGURE_OPTS)
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    engine = engine_from_config(config.get_section(config.config_ini_section, {}),
                                prefix='sqlalchemy.', poolclass=pool.NullPool)
    with engine.connect() as connection:
        context.configure(connection=connection, **CONFIGURE_OPTS)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
