"""Account domain service."""

from typing import Optional

from ledgerflow.database.base import Database
from ledgerflow.domain.entities import Account as AccountEntity, AccountType
from ledgerflow.domain.errors import ConflictError, ValidationError


class AccountService:
    """Service for managing the local chart of accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self, name: str, account_type: str, code: Optional[str] = None
    ) -> AccountEntity:
        """Create a new account.

        Args:
            name: Account name
            account_type: One of Asset, Liability, Equity, Revenue, Expense
            code: Optional account code

        Returns:
            Created account

        Raises:
            ValidationError: If the name is blank or the type is unknown
            ConflictError: If account name already exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Account name must not be empty")

        valid_types = {t.value for t in AccountType}
        if account_type not in valid_types:
            raise ValidationError(
                f"Invalid account type '{account_type}'. "
                f"Must be one of: {', '.join(sorted(valid_types))}"
            )

        with self.db.unit_of_work() as uow:
            if uow.find_account(name) is not None:
                raise ConflictError(f"Account with name '{name}' already exists")
            return uow.create_account(name, account_type, code=code)

    def list_accounts(self) -> list[AccountEntity]:
        """List all accounts.

        Returns:
            List of account entities
        """
        return self.db.list_accounts()
