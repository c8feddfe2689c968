"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity or path does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class MalformedSourceError(ValidationError):
    """Raw source text is too short or has no usable header row."""


class InvalidNumberError(ValidationError):
    """A numeric field cannot be parsed in the configured number format."""


class InvalidDateError(ValidationError):
    """A date field cannot be parsed in the configured date format."""


class UnresolvableMappingError(DomainError):
    """A mapping step could neither find nor create a target entity."""


class CommitValidationError(ValidationError):
    """A ledger entry failed validation while committing an import."""


class ImportStateError(ConflictError):
    """Operation is not allowed in the import's current state."""


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def import_not_found(import_id: int) -> str:
    """Return message for missing import."""
    return f"Import {import_id} not found"


def format_not_found(name: str) -> str:
    """Return message for missing import format."""
    return f"Import format '{name}' not found"


def row_error(row_num: int, message: str) -> str:
    """Prefix a message with the 1-based data row number."""
    return f"Row {row_num}: {message}"


def import_committed(import_id: int) -> str:
    """Return message for an attempt to change a committed import."""
    return f"Import {import_id} is already committed and cannot be changed"

