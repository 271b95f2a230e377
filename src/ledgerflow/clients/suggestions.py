"""Client for the AI chat-completion service used for category suggestions.

The service is addressed with the Azure OpenAI URL shape
(``{endpoint}/openai/deployments/{deployment}/chat/completions``) and
answers with free text that is expected to contain one JSON object.

Privacy: prompts carry transaction descriptions, so they are never logged
above DEBUG level.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import httpx

from ledgerflow.domain.errors import CategorizationFailure

logger = logging.getLogger(__name__)


class SuggestionClient(ABC):
    """Narrow interface over a chat-completion service."""

    @abstractmethod
    def complete(self, system_prompt: str, user_prompt: str) -> str:
        """Send a system+user prompt pair and return the reply text.

        Raises:
            CategorizationFailure: If the service cannot produce a reply
        """

    def close(self) -> None:
        """Release any held resources."""


class DisabledSuggestionClient(SuggestionClient):
    """Stand-in used when no AI service is configured."""

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        raise CategorizationFailure("AI suggestion service is not configured")


class ChatCompletionClient(SuggestionClient):
    """HTTP client for an Azure OpenAI style chat-completion deployment."""

    def __init__(
        self,
        endpoint: str,
        api_key: str,
        deployment: str = "gpt-4",
        api_version: str = "2024-02-01",
        timeout_seconds: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.endpoint = endpoint.rstrip("/")
        self.deployment = deployment
        self.api_version = api_version
        self.timeout_seconds = timeout_seconds
        self._client = httpx.Client(
            timeout=httpx.Timeout(float(timeout_seconds)),
            headers={"api-key": api_key, "Content-Type": "application/json"},
            transport=transport,
        )

    @property
    def url(self) -> str:
        return (
            f"{self.endpoint}/openai/deployments/{self.deployment}/chat/completions"
            f"?api-version={self.api_version}"
        )

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        payload = {
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": 0,
        }
        logger.debug("Requesting suggestion from %s", self.deployment)

        try:
            response = self._client.post(self.url, json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.TimeoutException as e:
            logger.warning("AI request timed out after %ss", self.timeout_seconds)
            raise CategorizationFailure("AI request timed out") from e
        except httpx.HTTPStatusError as e:
            logger.error(
                "AI API error %s for deployment '%s'",
                e.response.status_code,
                self.deployment,
            )
            raise CategorizationFailure(f"AI API error {e.response.status_code}") from e
        except httpx.RequestError as e:
            logger.error("AI request failed: %s", e)
            raise CategorizationFailure(f"AI request failed: {e}") from e
        except ValueError as e:
            raise CategorizationFailure("AI response was not JSON") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise CategorizationFailure("AI response had no message content") from e

        if not isinstance(content, str):
            raise CategorizationFailure("AI response had no message content")

        logger.debug("AI deployment %s returned %d chars", self.deployment, len(content))
        return content

    def close(self) -> None:
        self._client.close()
