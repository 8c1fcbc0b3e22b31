"""Factory for creating the content generator client."""
import os
from typing import Optional

from dotenv import load_dotenv

from .llm import LLMClient, LLMConfig

# Load environment variables
load_dotenv()

DEFAULT_MODEL = "gpt-oss:20b"
DEFAULT_BASE_URL = "http://localhost:11434/v1"


def create_llm(
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    base_url: Optional[str] = None,
    max_retries: Optional[int] = None,
    timeout: Optional[int] = None
) -> LLMClient:
    """Create an LLM client.

    Args:
        api_key: API key (defaults to INQUIRY_LLM_API_KEY env var or "ollama")
        model: Model name (defaults to INQUIRY_LLM_MODEL env var)
        base_url: Base API URL (defaults to INQUIRY_LLM_BASE_URL env var, a local Ollama server)
        max_retries: Maximum number of retries (defaults to INQUIRY_LLM_MAX_RETRIES or 2)
        timeout: Request timeout in seconds (defaults to INQUIRY_LLM_TIMEOUT or 120)

    Returns:
        LLMClient: LLM client
    """
    config = LLMConfig(
        api_key=api_key or os.environ.get("INQUIRY_LLM_API_KEY", "ollama"),
        model=model or os.environ.get("INQUIRY_LLM_MODEL", DEFAULT_MODEL),
        base_url=base_url or os.environ.get("INQUIRY_LLM_BASE_URL", DEFAULT_BASE_URL),
        max_retries=max_retries if max_retries is not None else int(
            os.environ.get("INQUIRY_LLM_MAX_RETRIES", "2")
        ),
        timeout=timeout if timeout is not None else int(
            os.environ.get("INQUIRY_LLM_TIMEOUT", "120")
        )
    )
    return LLMClient(config)


def auto_expand_delay(default: float = 1.0) -> float:
    """Pacing delay between auto-expansion steps, from INQUIRY_AUTO_EXPAND_DELAY."""
    return float(os.environ.get("INQUIRY_AUTO_EXPAND_DELAY", str(default)))
