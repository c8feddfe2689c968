"""Built-in import formats, keyed by format identifier.

Each supported bank layout is one configuration value. Adding a bank means
adding a table entry here (or storing a format in the database), never a
new class.
"""

from ledgerimport.domain.entities import ImportConfig, INFLOWS_NEGATIVE

PRESETS: dict[str, ImportConfig] = {
    # Banco de Galicia "Movimientos" export. Five metadata lines (bank name,
    # account number, current date, current time, query interval) precede
    # the header. Debits are written as negative numbers.
    "banco-galicia": ImportConfig(
        preamble_lines=5,
        delimiter=";",
        number_format="1.234,56",
        date_format="%d/%m/%Y",
        columns={
            "date": "Fecha",
            "name": "Movimiento",
            "debit": "Débito",
            "credit": "Crédito",
            "notes": "Comentarios",
        },
        signage_convention=INFLOWS_NEGATIVE,
    ),
    "generic": ImportConfig(
        preamble_lines=0,
        delimiter=",",
        number_format="1,234.56",
        date_format="%Y-%m-%d",
        columns={
            "date": "Date",
            "name": "Name",
            "amount": "Amount",
            "currency": "Currency",
            "category": "Category",
            "tags": "Tags",
            "notes": "Notes",
            "account": "Account",
        },
        signage_convention=INFLOWS_NEGATIVE,
    ),
}

