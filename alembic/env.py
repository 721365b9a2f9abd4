from logging.config import fileConfig

from alembic import context

from thinklink.database import engine
from thinklink.models import feedback, message, meetup, participation, profile, user  # noqa: F401  테이블 메타데이터 등록용
from thinklink.models.base import Base

config = context.config

# 앱 기동 시(upgrade 호출)에는 앱 로깅 설정을 덮어쓰지 않음
if config.config_file_name is not None and config.attributes.get("configure_logger", True):
    fileConfig(config.config_file_name, disable_existing_loggers=False)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    context.configure(
        url=engine.url.render_as_string(hide_password=False),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    with engine.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
