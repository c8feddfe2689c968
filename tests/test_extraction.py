"""Tests for row extraction from raw bank exports."""

import pytest

from ledgerimport.domain.errors import MalformedSourceError
from ledgerimport.domain.extraction import extract_rows, read_header, split_preamble


def test_galicia_export_yields_one_record_per_logical_row(galicia_csv):
    """Quoted multi-line descriptions stay in one record."""
    records = list(extract_rows(galicia_csv, 5, ";"))

    assert len(records) == 4
    assert records[0]["Fecha"] == "06/10/2025"
    assert records[0]["Movimiento"].startswith("COMPRA DEBITO\n")
    assert records[0]["Débito"] == "-13.900,00"
    assert records[1]["Crédito"] == "287.756,65"
    assert records[3]["Movimiento"].endswith("A001")
    assert records[3]["Comentarios"] == ""


def test_header_labels(galicia_csv):
    assert read_header(galicia_csv, 5, ";") == [
        "Fecha",
        "Movimiento",
        "Débito",
        "Crédito",
        "Saldo Parcial",
        "Comentarios",
    ]


def test_extraction_is_restartable(generic_csv):
    first = list(extract_rows(generic_csv, 0, ","))
    second = list(extract_rows(generic_csv, 0, ","))
    assert first == second
    assert [r["Name"] for r in first] == ["Grocery Store", "Salary", "Coffee"]


def test_preamble_only_is_malformed():
    with pytest.raises(MalformedSourceError, match="expected at least 6"):
        extract_rows("a\nb\nc\nd\ne\n", 5, ";")


def test_empty_source_is_malformed():
    with pytest.raises(MalformedSourceError):
        extract_rows("", 0, ",")


def test_empty_header_is_malformed():
    with pytest.raises(MalformedSourceError, match="Header row is empty"):
        extract_rows("meta\n;;;\n01/10/2025;x;1;0\n", 1, ";")


def test_negative_preamble_is_malformed():
    with pytest.raises(MalformedSourceError):
        split_preamble("Date\n", -1)


def test_header_without_rows_yields_nothing():
    assert list(extract_rows("Date,Amount\n", 0, ",")) == []


def test_blank_lines_are_skipped_and_short_rows_padded():
    source = "Date,Name,Amount\n\n2024-01-15,Coffee\n,,\n"
    records = list(extract_rows(source, 0, ","))
    assert records == [{"Date": "2024-01-15", "Name": "Coffee", "Amount": ""}]


def test_extra_trailing_empty_fields_are_tolerated():
    records = list(extract_rows("Date;Amount\n2024-01-15;5;;\n", 0, ";"))
    assert records == [{"Date": "2024-01-15", "Amount": "5"}]


def test_extra_non_empty_fields_are_malformed():
    rows = extract_rows("Date,Amount\n2024-01-15,5,oops\n", 0, ",")
    with pytest.raises(MalformedSourceError, match="Row 1"):
        list(rows)
