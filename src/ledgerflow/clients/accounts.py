"""Read-only access to the chart of accounts."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, TYPE_CHECKING

import httpx

from ledgerflow.domain.entities import Account
from ledgerflow.domain.errors import ExternalServiceError

if TYPE_CHECKING:
    from ledgerflow.database.base import Database

logger = logging.getLogger(__name__)


class AccountCatalog(ABC):
    """Source of the chart of accounts used for categorization."""

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """Return every account in the chart."""

    def close(self) -> None:
        """Release any held resources."""


class DatabaseAccountCatalog(AccountCatalog):
    """Chart of accounts read from the local ``accounts`` table."""

    def __init__(self, db: "Database"):
        self.db = db

    def list_accounts(self) -> list[Account]:
        return self.db.list_accounts()


def _account_from_payload(item: dict[str, Any]) -> Account:
    """Convert one row of the CRUD layer's PascalCase payload."""
    is_active = item.get("IsActive", True)
    return Account(
        id=str(item["Id"]),
        code=item.get("Code"),
        name=item["Name"],
        type=item.get("Type") or "",
        is_active=bool(is_active) if is_active is not None else True,
    )


class HttpAccountCatalog(AccountCatalog):
    """Chart of accounts read from the generic CRUD REST layer.

    ``GET {base_url}/accounts`` answers ``{"value": [Account, ...]}``.
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(timeout=float(timeout_seconds), transport=transport)

    def list_accounts(self) -> list[Account]:
        url = f"{self.base_url}/accounts"
        try:
            response = self._client.get(url)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.error("Accounts API error %s at %s", e.response.status_code, url)
            raise ExternalServiceError(
                f"Accounts service returned {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            logger.error("Accounts request failed: %s (URL: %s)", e, url)
            raise ExternalServiceError(f"Accounts service unavailable: {e}") from e
        except ValueError as e:
            raise ExternalServiceError("Accounts service returned invalid JSON") from e

        items = (payload.get("value") or []) if isinstance(payload, dict) else []
        try:
            return [_account_from_payload(item) for item in items]
        except (KeyError, TypeError) as e:
            raise ExternalServiceError(f"Malformed account record: {e}") from e

    def close(self) -> None:
        self._client.close()
