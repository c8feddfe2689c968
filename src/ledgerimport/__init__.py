"""Bank export importer: raw statement text to signed ledger entries."""

__version__ = "0.1.0"


def __getattr__(name):
    # cli.main pulls in click and the database layer; load it on demand
    if name == "main":
        from ledgerimport.cli.main import main
        return main
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
