"""CLI tests for account, format and import commands."""

from ledgerimport.cli.main import cli


def invoke(cli_runner, temp_db, *args, **kwargs):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], **kwargs)


def test_help_does_not_touch_database(cli_runner):
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "import" in result.output


class TestAccountCommands:
    def test_create_and_list(self, cli_runner, temp_db):
        result = invoke(cli_runner, temp_db, "account", "create", "Caja Ahorro Pesos", "--bank", "Banco Galicia")
        assert result.exit_code == 0
        assert "Created account 'Caja Ahorro Pesos' (ID: 1)" in result.output

        result = invoke(cli_runner, temp_db, "account", "list")
        assert result.exit_code == 0
        assert "Caja Ahorro Pesos" in result.output
        assert "Banco Galicia" in result.output

    def test_duplicate_account_fails(self, cli_runner, temp_db):
        invoke(cli_runner, temp_db, "account", "create", "Checking")
        result = invoke(cli_runner, temp_db, "account", "create", "Checking")
        assert result.exit_code == 1
        assert "Error: Account with name 'Checking' already exists" in result.output


class TestFormatCommands:
    def test_list_shows_presets(self, cli_runner, temp_db):
        result = invoke(cli_runner, temp_db, "format", "list")
        assert result.exit_code == 0
        assert "✓ banco-galicia (built-in)" in result.output
        assert "✓ generic (built-in)" in result.output

    def test_create_map_and_show(self, cli_runner, temp_db):
        result = invoke(
            cli_runner, temp_db,
            "format", "create", "santander",
            "--preamble", "2", "--delimiter", ";", "--number-format", "1.234,56", "--date-format", "%d/%m/%Y",
        )
        assert result.exit_code == 0

        result = invoke(cli_runner, temp_db, "format", "list")
        assert "✗ santander (stored)" in result.output
        assert "Missing required fields: date, amount" in result.output

        for field, column in [("date", "Fecha"), ("amount", "Importe"), ("name", "Concepto")]:
            result = invoke(cli_runner, temp_db, "format", "map", "santander", field, column)
            assert result.exit_code == 0

        result = invoke(cli_runner, temp_db, "format", "show", "santander")
        assert result.exit_code == 0
        assert "Preamble lines: 2" in result.output
        assert "Importe -> amount" in result.output
        assert "Fecha;Concepto;Importe" in result.output
        assert "15/01/2024;Sample transaction;1.234,56" in result.output

    def test_map_invalid_field_is_rejected(self, cli_runner, temp_db):
        invoke(cli_runner, temp_db, "format", "create", "bank")
        result = invoke(cli_runner, temp_db, "format", "map", "bank", "balance", "Saldo")
        assert result.exit_code != 0

    def test_show_unknown_format(self, cli_runner, temp_db):
        result = invoke(cli_runner, temp_db, "format", "show", "nope")
        assert result.exit_code == 1
        assert "Import format 'nope' not found" in result.output

    def test_delete_with_confirmation(self, cli_runner, temp_db):
        invoke(cli_runner, temp_db, "format", "create", "bank")

        result = invoke(cli_runner, temp_db, "format", "delete", "bank", input="n\n")
        assert "Deletion cancelled." in result.output

        result = invoke(cli_runner, temp_db, "format", "delete", "bank", "--yes")
        assert result.exit_code == 0
        assert "Deleted format 'bank'" in result.output


class TestImportCommands:
    def test_run_galicia(self, cli_runner, temp_db, fixtures_dir):
        invoke(cli_runner, temp_db, "account", "create", "Caja Ahorro Pesos")

        result = invoke(
            cli_runner, temp_db,
            "import", "run", str(fixtures_dir / "banco_galicia.csv"),
            "--format", "banco-galicia", "--account", "Caja Ahorro Pesos",
        )

        assert result.exit_code == 0, result.output
        assert "Import complete:" in result.output
        assert "Committed: 4 entries" in result.output
        assert temp_db.count_ledger_entries() == 4

        result = invoke(cli_runner, temp_db, "account", "entries", "Caja Ahorro Pesos")
        assert "2025-10-03 |     -287756.65 USD | CREDITO TRANSFERENCIA" in result.output

        result = invoke(cli_runner, temp_db, "import", "list")
        assert "committed" in result.output
        assert "banco-galicia" in result.output

    def test_step_by_step(self, cli_runner, temp_db, fixtures_dir):
        result = invoke(
            cli_runner, temp_db, "import", "create", str(fixtures_dir / "generic.csv"), "--format", "generic"
        )
        assert result.exit_code == 0, result.output
        assert "Created import 1" in result.output
        assert "Staged: 3 rows" in result.output

        result = invoke(cli_runner, temp_db, "import", "dry-run", "1")
        assert "Transactions: 3" in result.output
        assert "Accounts: 2" in result.output

        result = invoke(cli_runner, temp_db, "import", "mappings", "1")
        assert "(unresolved)" in result.output

        invoke(cli_runner, temp_db, "account", "create", "Everyday")
        result = invoke(cli_runner, temp_db, "import", "map", "1", "account", "Checking", "1")
        assert result.exit_code == 0, result.output

        result = invoke(cli_runner, temp_db, "import", "resolve", "1")
        assert "Resolved 6 mappings for import 1" in result.output

        result = invoke(cli_runner, temp_db, "import", "commit", "1")
        assert result.exit_code == 0, result.output
        assert "Committed 3 entries for import 1" in result.output

        result = invoke(cli_runner, temp_db, "import", "show", "1")
        assert "Status: committed" in result.output
        assert "-2500.00 USD | Salary" in result.output

    def test_unknown_account_fails(self, cli_runner, temp_db, fixtures_dir):
        result = invoke(
            cli_runner, temp_db,
            "import", "run", str(fixtures_dir / "banco_galicia.csv"),
            "--format", "banco-galicia", "--account", "Nowhere",
        )
        assert result.exit_code == 1
        assert "Account 'Nowhere' not found" in result.output

    def test_galicia_without_account_fails(self, cli_runner, temp_db, fixtures_dir):
        result = invoke(
            cli_runner, temp_db,
            "import", "run", str(fixtures_dir / "banco_galicia.csv"), "--format", "banco-galicia",
        )
        assert result.exit_code == 1
        assert "fixed account or an account column" in result.output

    def test_commit_twice_fails(self, cli_runner, temp_db, fixtures_dir):
        invoke(cli_runner, temp_db, "import", "run", str(fixtures_dir / "generic.csv"), "--format", "generic")
        result = invoke(cli_runner, temp_db, "import", "commit", "1")
        assert result.exit_code == 1
        assert "already committed" in result.output

    def test_show_unknown_import(self, cli_runner, temp_db):
        result = invoke(cli_runner, temp_db, "import", "show", "9")
        assert result.exit_code == 1
        assert "Import 9 not found" in result.output
