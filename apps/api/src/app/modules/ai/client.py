"""
DeepSeek Client

Minimal async client for the DeepSeek chat completions API (OpenAI
compatible), plus resolution of which API key to use.
"""

import logging
from dataclasses import dataclass

import httpx
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.modules.admin import repository as admin_repository

logger = logging.getLogger(__name__)

PROVIDER = "deepseek"
MAX_TOKENS = 4000
TEMPERATURE = 0.7


class AIProviderError(Exception):
    """Raised when the AI provider call fails."""

    def __init__(self, message: str, status_code: int | None = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    @property
    def is_auth_error(self) -> bool:
        return self.status_code == 401


@dataclass
class ApiCredentials:
    """API key to use, and the api_keys row it came from (None for the environment key)."""

    api_key: str
    key_id: str | None = None
    name: str = "environment"


async def resolve_api_credentials(db: AsyncSession | None) -> ApiCredentials | None:
    """
    Environment key first, then the oldest active DeepSeek key in the database.
    """
    if settings.deepseek_api_key:
        return ApiCredentials(api_key=settings.deepseek_api_key)

    if db is None:
        return None

    key = await admin_repository.get_active_api_key(db, PROVIDER)
    if key is None:
        logger.warning("No DeepSeek API key found in environment or database")
        return None

    logger.info(f"Using database-managed DeepSeek API key: {key.name}")
    return ApiCredentials(api_key=key.api_key, key_id=str(key.id), name=key.name)


class DeepSeekClient:
    """Chat completions against the DeepSeek API."""

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        model: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.base_url = (base_url or settings.deepseek_base_url).rstrip("/")
        self.model = model or settings.deepseek_model
        self.timeout = timeout or settings.ai_request_timeout_seconds
        self._transport = transport

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        """
        Run one chat completion and return the message content ("" if none).

        Raises:
            AIProviderError: On HTTP errors, timeouts or malformed responses
        """
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "max_tokens": MAX_TOKENS,
            "temperature": TEMPERATURE,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    json=payload,
                    headers=headers,
                )
        except httpx.TimeoutException as e:
            raise AIProviderError(f"DeepSeek request timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise AIProviderError(f"DeepSeek request failed: {e}") from e

        if response.status_code >= 400:
            logger.error(f"DeepSeek API error: {response.status_code}")
            raise AIProviderError(
                f"DeepSeek API error: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
            choices = data.get("choices") or []
            message = (choices[0].get("message") or {}) if choices else {}
        except (ValueError, AttributeError) as e:
            raise AIProviderError("DeepSeek returned an unreadable response") from e

        return message.get("content") or ""
