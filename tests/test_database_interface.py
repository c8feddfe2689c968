"""Tests for Database interface returning domain models."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from ledgerimport.database.factories import create_sqlite_database
from ledgerimport.domain import entities
from ledgerimport.domain.errors import NotFoundError, ValidationError


class TestDatabaseInterface:
    """Tests to verify Database interface returns domain models."""

    def test_get_account_returns_domain_model(self, temp_db):
        account_id = temp_db.create_account(name="Test Account", bank_name="Test Bank")

        account = temp_db.get_account(account_id)

        assert isinstance(account, entities.Account)
        assert account.id == account_id
        assert account.name == "Test Account"
        assert account.bank_name == "Test Bank"
        assert isinstance(account.created_at, datetime)

    def test_list_accounts_sorted_by_name(self, temp_db):
        temp_db.create_account(name="Savings")
        temp_db.create_account(name="Checking")
        assert [a.name for a in temp_db.list_accounts()] == ["Checking", "Savings"]

    def test_import_format_round_trip(self, temp_db):
        config = entities.ImportConfig(
            preamble_lines=3,
            delimiter=";",
            number_format="1.234,56",
            columns={"date": "Fecha", "amount": "Importe"},
            signage_convention=entities.INFLOWS_POSITIVE,
            skip_unmatched=True,
        )
        format_id = temp_db.create_import_format(name="bank", config=config)

        fmt = temp_db.get_import_format_by_name("bank")

        assert isinstance(fmt, entities.ImportFormat)
        assert fmt.id == format_id
        assert fmt.config == config

    def test_import_returns_domain_model(self, temp_db):
        config = entities.ImportConfig(columns={"date": "Date", "amount": "Amount"}, account_id=1)
        import_id = temp_db.create_import(format_name="bank", config=config, raw_source="Date,Amount\n")

        imp = temp_db.get_import(import_id)

        assert isinstance(imp, entities.Import)
        assert imp.status == entities.STATUS_PENDING
        assert imp.config == config
        assert imp.raw_source == "Date,Amount\n"

    def test_update_import_status_sets_and_clears_error(self, temp_db):
        import_id = temp_db.create_import("bank", entities.ImportConfig(), "")
        temp_db.update_import_status(import_id, entities.STATUS_FAILED, "Row 2: Missing name")
        assert temp_db.get_import(import_id).error == "Row 2: Missing name"
        temp_db.update_import_status(import_id, entities.STATUS_ROWS_STAGED)
        assert temp_db.get_import(import_id).error is None

    def test_missing_import_raises(self, temp_db):
        with pytest.raises(NotFoundError):
            temp_db.update_import_status(7, entities.STATUS_MAPPED)

    def test_staged_rows_keep_order_and_tags(self, temp_db):
        import_id = temp_db.create_import("bank", entities.ImportConfig(), "")
        rows = [
            entities.StagedRow("Checking", "2024-01-15", "50.00", "USD", "Grocery", "Food", ("weekly", "cash")),
            entities.StagedRow("Checking", "2024-01-16", "-2500.00", "USD", "Salary"),
        ]
        temp_db.replace_staged_rows(import_id, rows)

        stored = temp_db.list_staged_rows(import_id)

        assert [r.position for r in stored] == [0, 1]
        assert stored[0].tags_labels == ("weekly", "cash")
        assert stored[1].tags_labels == ()
        assert all(isinstance(r, entities.StagedRow) and r.import_id == import_id for r in stored)

    def test_sync_mappings(self, temp_db):
        import_id = temp_db.create_import("bank", entities.ImportConfig(), "")
        temp_db.sync_mappings(import_id, {"account": {"Checking", "Savings"}, "tag": {"cash"}})
        checking = temp_db.list_mappings(import_id, kind="account")[0]
        temp_db.resolve_mapping(checking.id, 5)

        temp_db.sync_mappings(import_id, {"account": {"Checking"}, "tag": set()})

        mappings = temp_db.list_mappings(import_id)
        assert [(m.kind, m.label, m.entity_id) for m in mappings] == [("account", "Checking", 5)]

    def test_ledger_entry_returns_domain_model(self, temp_db):
        account_id = temp_db.create_account(name="Checking")
        tag_b = temp_db.create_tag("b")
        tag_a = temp_db.create_tag("a")
        entry_id = temp_db.create_ledger_entry(
            import_id=None,
            account_id=account_id,
            date=date(2024, 1, 15),
            amount=Decimal("13900.00"),
            currency="ARS",
            name="Compra",
            tag_ids=[tag_a, tag_b],
        )

        (entry,) = temp_db.list_ledger_entries(account_id=account_id)

        assert isinstance(entry, entities.LedgerEntry)
        assert entry.id == entry_id
        assert entry.amount == Decimal("13900.00")
        assert isinstance(entry.amount, Decimal)
        assert entry.date == date(2024, 1, 15)
        assert entry.tag_ids == (tag_b, tag_a)


class TestEntityStore:
    def test_find_or_create_category_path(self, temp_db):
        ref = temp_db.find_or_create_entity("category", "Food > Groceries")

        assert ref.kind == "category"
        assert ref.name == "Groceries"
        assert temp_db.get_category(ref.id).parent_id == temp_db.get_category_by_path("Food").id
        assert temp_db.find_or_create_entity("category", "Food>Groceries") == ref

    def test_find_entity(self, temp_db):
        account_id = temp_db.create_account(name="Checking")
        assert temp_db.find_entity("account", "Checking") == entities.EntityRef("account", account_id, "Checking")
        assert temp_db.find_entity("tag", "missing") is None

    def test_get_entity(self, temp_db):
        tag_id = temp_db.create_tag("cash")
        assert temp_db.get_entity("tag", tag_id).name == "cash"
        assert temp_db.get_entity("account", tag_id) is None

    def test_invalid_kind(self, temp_db):
        with pytest.raises(ValidationError, match="Invalid entity kind"):
            temp_db.find_entity("payee", "x")


class TestAtomic:
    def test_rollback_on_error(self, temp_db):
        with pytest.raises(RuntimeError):
            with temp_db.atomic():
                temp_db.create_account(name="Checking")
                temp_db.create_tag("cash")
                raise RuntimeError("boom")

        assert temp_db.list_accounts() == []
        assert temp_db.get_tag_by_name("cash") is None

    def test_nested_blocks_commit_once(self, temp_db):
        with pytest.raises(RuntimeError):
            with temp_db.atomic():
                with temp_db.atomic():
                    temp_db.create_account(name="Inner")
                raise RuntimeError("boom")

        assert temp_db.get_account_by_name("Inner") is None

    def test_commit_on_success(self, temp_db):
        with temp_db.atomic():
            temp_db.create_account(name="Checking")

        other = create_sqlite_database(database_path=temp_db.database_path)
        try:
            assert other.get_account_by_name("Checking") is not None
        finally:
            other.disconnect()


def test_database_path_from_environment(tmp_path, monkeypatch):
    db_path = tmp_path / "env.db"
    monkeypatch.setenv("LEDGERIMPORT_DB_PATH", str(db_path))

    db = create_sqlite_database()
    db.create_account(name="Checking")
    db.disconnect()

    assert db.database_url == f"sqlite:///{db_path}"
    assert db_path.exists()
