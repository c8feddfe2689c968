"""Domain layer for ledgerimport application."""

_SERVICES = {
    "ImportService": "ledgerimport.domain.imports",
    "FormatService": "ledgerimport.domain.formats",
    "AccountService": "ledgerimport.domain.account",
    "MappingResolver": "ledgerimport.domain.mapping",
    "LedgerCommitter": "ledgerimport.domain.ledger_commit",
}

__all__ = list(_SERVICES)


# Import services lazily: the database layer imports domain.entities, and
# the services import the database layer
def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
