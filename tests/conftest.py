"""Shared pytest fixtures for ledgerimport tests."""

import tempfile
import os
from pathlib import Path
import pytest

from ledgerimport.database.factories import create_sqlite_database
from ledgerimport.domain.account import AccountService
from ledgerimport.domain.formats import FormatService
from ledgerimport.domain.imports import ImportService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def format_service(temp_db):
    """Create a FormatService with a temporary database."""
    return FormatService(temp_db)


@pytest.fixture
def import_service(temp_db):
    """Create an ImportService with a temporary database."""
    return ImportService(temp_db)


@pytest.fixture
def sample_account(account_service):
    """Create a sample account for testing."""
    account_id = account_service.create_account(name="Caja Ahorro Pesos", bank_name="Banco Galicia")
    return account_service.get_account(account_id)


@pytest.fixture
def galicia_csv(fixtures_dir):
    """Full Banco Galicia export with multi-line descriptions."""
    return (fixtures_dir / "banco_galicia.csv").read_text(encoding="utf-8-sig")


@pytest.fixture
def generic_csv(fixtures_dir):
    """Plain comma CSV with account, category and tag columns."""
    return (fixtures_dir / "generic.csv").read_text(encoding="utf-8")


@pytest.fixture
def galicia_import(import_service, sample_account, galicia_csv):
    """Pending Banco Galicia import into the sample account."""
    return import_service.create_import(
        "banco-galicia", galicia_csv, account_id=sample_account.id
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
