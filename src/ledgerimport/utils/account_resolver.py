"""Resolve an account given on the command line as a name or an ID."""

from ledgerimport.domain.account import AccountService
from ledgerimport.domain.errors import NotFoundError


def resolve_account(account_service: AccountService, account: str | int) -> int:
    """Return the ID of the account named or numbered ``account``.

    Digits ("3" or 3) are read as an ID; anything else as an exact name.

    Raises:
        NotFoundError: If no such account exists
    """
    if isinstance(account, int) or str(account).strip().isdigit():
        account_id = int(account)
        if account_service.get_account(account_id) is None:
            raise NotFoundError(f"Account ID {account_id} not found")
        return account_id

    found = account_service.get_account_by_name(account.strip())
    if found is None:
        raise NotFoundError(f"Account '{account}' not found")
    return found.id
