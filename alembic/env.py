"""Alembic 환경 설정. DATABASE_URL은 tripcommit.database와 같은 값을 사용."""

from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from tripcommit.database import DATABASE_URL
from tripcommit.models.base import Base
from tripcommit.models.participant import TripParticipant  # noqa: F401 (autogenerate용 메타데이터 등록)
from tripcommit.models.trip import Trip  # noqa: F401
from tripcommit.models.user import User  # noqa: F401

config = context.config
config.set_main_option("sqlalchemy.url", DATABASE_URL)

if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    """URL만으로 SQL 스크립트 생성 (DB 연결 없음)."""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
