# alembic/env.py
from logging.config import fileConfig

from alembic import context
from dotenv import find_dotenv, load_dotenv

# Load .env so DATABASE_URL is set before the engine is created
load_dotenv(find_dotenv(usecwd=True))

from sandfleet.db.session import engine  # noqa: E402
from sandfleet.models import Base  # noqa: E402  (imports every model module)

# Alembic Config object
config = context.config

# Configure Python logging from alembic.ini (if present)
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# Same URL as the application, also in offline mode
config.set_main_option("sqlalchemy.url", engine.url.render_as_string(hide_password=False))

target_metadata = Base.metadata


def _is_sqlite() -> bool:
    return engine.url.get_backend_name() == "sqlite"


def include_object(object, name, type_, reflected, compare_to):
    """
    Filter which objects Alembic should consider for autogenerate.

    - Skip Alembic's own version table.
    - Never propose DROP for objects present in the database but absent from
      the ORM (reporting views/tables managed by hand).
    """
    if type_ == "table" and name == "alembic_version":
        return False
    if reflected and compare_to is None and type_ in {
        "table", "index", "unique_constraint", "foreign_key"
    }:
        return False
    return True


def process_revision_directives(context, revision, directives):
    """Drop empty autogenerate revisions."""
    if getattr(context.config.cmd_opts, "autogenerate", False):
        script = directives[0]
        if script.upgrade_ops.is_empty():
            directives[:] = []


def run_migrations_offline():
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        compare_type=True,
        include_object=include_object,
        render_as_batch=_is_sqlite(),  # SQLite-friendly ALTER TABLE
        process_revision_directives=process_revision_directives,
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    with engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            include_object=include_object,
            render_as_batch=_is_sqlite(),
            process_revision_directives=process_revision_directives,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
