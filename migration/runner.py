"""
Apply pending storefront migrations.

- Opens one connection from the given settings and upgrades to `head` inside
  a single transaction on it
- Applied revisions are tracked by Alembic in `alembic_version`, so running
  this twice is a no-op the second time
- Errors (connection, broken revision, constraint violations) propagate
  unchanged; the caller decides whether to retry

Usage:
  python -m migration.runner --database-url postgresql+psycopg://...
  python -m migration.runner --sql > upgrade.sql
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext

from storefront.config import DatabaseSettings, load_settings, normalize_url
from storefront.db import make_engine

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parent


def alembic_config(settings: DatabaseSettings) -> Config:
    cfg = Config()
    cfg.set_main_option("script_location", settings.migrations_path or str(MIGRATIONS_DIR))
    # ConfigParser interpolation treats % specially; URL-encoded passwords contain it
    cfg.set_main_option("sqlalchemy.url", settings.database_url.replace("%", "%%"))
    return cfg


def migrate(settings: Optional[DatabaseSettings] = None, revision: str = "head", sql: bool = False) -> None:
    """Upgrade the database described by `settings` to `revision`.

    With ``sql=True`` nothing is executed; Alembic prints the upgrade script.
    """
    if settings is None:
        settings = load_settings()
    cfg = alembic_config(settings)

    if sql:
        try:
            command.upgrade(cfg, revision, sql=True)
        except Exception:
            logger.exception("rendering upgrade SQL to %s failed", revision)
            raise
        return

    engine = make_engine(settings)
    logger.info("migrating %s to %s", engine.url.render_as_string(hide_password=True), revision)
    try:
        with engine.begin() as connection:
            cfg.attributes["connection"] = connection
            command.upgrade(cfg, revision)
    except Exception:
        logger.exception("migration to %s failed", revision)
        raise
    finally:
        engine.dispose()
    logger.info("migration complete")


def current_revision(settings: DatabaseSettings) -> Optional[str]:
    """Revision recorded in alembic_version, or None for an unmigrated database."""
    engine = make_engine(settings)
    try:
        with engine.connect() as connection:
            return MigrationContext.configure(connection).get_current_revision()
    finally:
        engine.dispose()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Apply pending storefront migrations")
    parser.add_argument("--database-url", help="Overrides DATABASE_URL / POSTGRES_URL")
    parser.add_argument("--revision", default="head", help="Target revision (default: head)")
    parser.add_argument("--sql", action="store_true", help="Print the upgrade SQL instead of running it")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    settings = load_settings()
    if args.database_url:
        settings = settings._replace(database_url=normalize_url(args.database_url))

    try:
        migrate(settings, revision=args.revision, sql=args.sql)
    except Exception:
        # already logged with traceback by migrate()
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
