import os
import sys
from logging.config import fileConfig

from sqlalchemy import engine_from_config, pool
from alembic import context

# make the backend package importable when running `alembic` from backend/
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from steptracker.core.config import settings  # noqa: E402
from steptracker.db import Base  # noqa: E402
from steptracker.models.step_data import StepData  # noqa: E402,F401
from steptracker.models.step_goal import StepGoal  # noqa: E402,F401
from steptracker.models.walk_session import WalkSession  # noqa: E402,F401
from steptracker.models.route_coordinate import RouteCoordinate  # noqa: E402,F401
from steptracker.models.walk_track import WalkTrack  # noqa: E402,F401
from steptracker.models.saved_route import SavedRoute  # noqa: E402,F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline():
    context.configure(
        url=settings.database_url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    # database URL always comes from app settings, not alembic.ini
    config.set_main_option("sqlalchemy.url", settings.database_url)

    connectable = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
