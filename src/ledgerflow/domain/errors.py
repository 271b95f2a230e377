"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class FormatError(ValidationError):
    """CSV content does not match a supported dialect or cannot be parsed."""


class NotFoundError(ValidationError):
    """Requested domain entity does not exist."""


class ConflictError(ValidationError):
    """Domain conflict, such as an illegal status transition."""


class CategorizationFailure(DomainError):
    """The suggestion service failed or returned an unusable answer.

    Always recovered inside the categorization engine.
    """


class PersistenceError(DomainError):
    """A database operation failed and the batch was rolled back."""


class PostingRuleViolation(DomainError):
    """A transaction cannot be turned into a balanced journal entry."""


class ExternalServiceError(DomainError):
    """An external collaborator, such as the accounts service, failed."""


def account_not_found(account_id: str) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing bank transaction."""
    return f"Transaction {transaction_id} not found"


def illegal_transition(transaction_id: str, current: str, target: str) -> str:
    """Return message for a status change the state machine forbids."""
    return f"Transaction {transaction_id} is {current} and cannot become {target}"


def missing_posting_accounts(transaction_id: str) -> str:
    """Return message when a debit or credit account cannot be resolved."""
    return f"Missing account information for transaction {transaction_id}"


def row_error(line_number: int, message: str) -> str:
    """Return message for a CSV row that failed to parse."""
    return f"Row {line_number}: {message}"
