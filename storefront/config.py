"""Database settings, passed explicitly to engines and the migration runner."""
import os
from typing import Mapping, NamedTuple, Optional

DEFAULT_DATABASE_URL = "sqlite:///./storefront.db"


class DatabaseSettings(NamedTuple):
    database_url: str
    # Alembic script_location; None means the bundled `migration` package
    migrations_path: Optional[str] = None
    echo: bool = False


def normalize_url(url: str) -> str:
    # Hosted Postgres providers hand out postgres:// URLs, which SQLAlchemy rejects
    if url.startswith("postgres://"):
        return "postgresql+psycopg://" + url[len("postgres://"):]
    if url.startswith("postgresql://"):
        return "postgresql+psycopg://" + url[len("postgresql://"):]
    return url


def load_settings(environ: Optional[Mapping[str, str]] = None) -> DatabaseSettings:
    """Build settings from environment variables.

    DATABASE_URL wins over POSTGRES_URL; both fall back to a local SQLite file.
    """
    env = os.environ if environ is None else environ
    url = env.get("DATABASE_URL") or env.get("POSTGRES_URL") or DEFAULT_DATABASE_URL
    echo = env.get("DATABASE_ECHO", "0") in ("1", "true", "True")
    return DatabaseSettings(
        database_url=normalize_url(url),
        migrations_path=env.get("MIGRATIONS_PATH") or None,
        echo=echo,
    )
