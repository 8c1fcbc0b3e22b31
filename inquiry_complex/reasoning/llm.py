"""Content generator client for OpenAI-compatible chat completion APIs."""
from typing import Dict, Any, List, Optional, Protocol
import asyncio
import logging

import aiohttp

log = logging.getLogger(__name__)

RETRY_STATUSES = frozenset({429, 500, 502, 503, 504})


class ContentGenerator(Protocol):
    """Anything that turns a natural-language instruction into free text."""

    async def complete(
        self,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 1000
    ) -> str:
        ...


class LLMConfig:
    """Configuration for the LLM client."""

    def __init__(
        self,
        api_key: str = "ollama",
        model: str = "gpt-oss:20b",
        base_url: str = "http://localhost:11434/v1",
        max_retries: int = 2,
        timeout: int = 120,
        retry_interval: float = 1.0
    ):
        """Initialize LLM config.

        Args:
            api_key: API key sent as bearer token
            model: Model name to use
            base_url: Base API URL
            max_retries: Retries on throttling, server errors and dropped connections
            timeout: Request timeout in seconds
            retry_interval: Base wait between retries in seconds
        """
        self.api_key = api_key
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.max_retries = max_retries
        self.timeout = timeout
        self.retry_interval = retry_interval


class LLMClient:
    """Chat completion client used as the content generator."""

    def __init__(self, config: LLMConfig):
        """Initialize LLM client.

        Args:
            config: Client configuration
        """
        self.config = config
        self._session: Optional[aiohttp.ClientSession] = None

    async def __aenter__(self) -> "LLMClient":
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def _ensure_session(self) -> None:
        """Ensure aiohttp session exists."""
        if self._session is None:
            timeout = aiohttp.ClientTimeout(total=self.config.timeout)
            self._session = aiohttp.ClientSession(
                headers={"Authorization": f"Bearer {self.config.api_key}"},
                timeout=timeout
            )

    async def close(self):
        """Close the client session."""
        if self._session:
            await self._session.close()
            self._session = None

    async def generate(
        self,
        messages: List[Dict[str, str]],
        temperature: float = 0.7,
        max_tokens: int = 1000
    ) -> Dict[str, Any]:
        """Generate a chat completion.

        Args:
            messages: Chat messages
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate

        Returns:
            Dict[str, Any]: Response data
        """
        await self._ensure_session()
        if not self._session:
            raise RuntimeError("Failed to initialize session")

        attempt = 0
        while True:
            try:
                response = await self._session.post(
                    f"{self.config.base_url}/chat/completions",
                    json={
                        "model": self.config.model,
                        "messages": messages,
                        "temperature": temperature,
                        "max_tokens": max_tokens
                    }
                )
                response.raise_for_status()
                data = await response.json()
                return dict(data)
            except aiohttp.ClientResponseError as e:
                if e.status not in RETRY_STATUSES or attempt >= self.config.max_retries:
                    raise
                log.warning(f"Completion request failed with {e.status}, retrying")
            except (aiohttp.ClientConnectionError, asyncio.TimeoutError) as e:
                if attempt >= self.config.max_retries:
                    raise
                log.warning(f"Completion request failed: {e!r}, retrying")
            attempt += 1
            await asyncio.sleep(self.config.retry_interval * attempt)

    async def complete(
        self,
        prompt: str,
        temperature: float = 0.7,
        max_tokens: int = 1000
    ) -> str:
        """Send a single user prompt and return the reply text.

        Args:
            prompt: Instruction text
            temperature: Sampling temperature
            max_tokens: Maximum tokens to generate

        Returns:
            str: Content of the first choice, empty if the reply has none
        """
        data = await self.generate(
            [{"role": "user", "content": prompt}],
            temperature=temperature,
            max_tokens=max_tokens
        )
        choices = data.get("choices") or []
        if not choices:
            return ""
        message = choices[0].get("message") or {}
        return message.get("content") or ""
