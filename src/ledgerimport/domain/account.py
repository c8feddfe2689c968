"""Account domain service."""

from typing import Optional
from ledgerimport.database.base import Database
from ledgerimport.domain.entities import Account as AccountEntity, LedgerEntry
from ledgerimport.domain.errors import ConflictError, NotFoundError, ValidationError, account_not_found


class AccountService:
    """Target accounts of imports."""

    def __init__(self, db: Database):
        self.db = db

    def create_account(self, name: str, bank_name: str = "") -> int:
        """Create an account and return its ID.

        Account names are unique; surrounding whitespace is dropped.

        Raises:
            ValidationError: If the name is empty
            ConflictError: If an account with that name exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Account name cannot be empty")
        if self.db.get_account_by_name(name) is not None:
            raise ConflictError(f"Account with name '{name}' already exists")
        return self.db.create_account(name=name, bank_name=bank_name.strip())

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        return self.db.get_account(account_id)

    def get_account_by_name(self, name: str) -> Optional[AccountEntity]:
        return self.db.get_account_by_name(name)

    def list_accounts(self) -> list[AccountEntity]:
        """All accounts, sorted by name."""
        return self.db.list_accounts()

    def list_entries(self, account_id: int) -> list[LedgerEntry]:
        """Ledger entries booked on an account, oldest first.

        Raises:
            NotFoundError: If the account doesn't exist
        """
        if self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))
        return self.db.list_ledger_entries(account_id=account_id)
