"""Database construction from CLI options and the environment."""

import os
from pathlib import Path
from typing import Optional

from ledgerimport.database.sqlalchemy_db import SQLAlchemyDatabase

DB_PATH_ENVVAR = "LEDGERIMPORT_DB_PATH"
DEFAULT_DB_PATH = Path("~/.ledgerimport/ledgerimport.db")


def resolve_database_path(database_path: Optional[str] = None) -> Path:
    """Pick the SQLite file: explicit path, then $LEDGERIMPORT_DB_PATH, then the default."""
    chosen = database_path or os.environ.get(DB_PATH_ENVVAR) or DEFAULT_DB_PATH
    return Path(chosen).expanduser()


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite-backed database, creating its directory if needed.

    Args:
        database_path: Path to the SQLite file (see ``resolve_database_path``)

    Returns:
        SQLAlchemyDatabase instance
    """
    path = resolve_database_path(database_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    return SQLAlchemyDatabase(f"sqlite:///{path}")
