"""
Chat completion client for any OpenAI-compatible backend.
"""

import logging
from typing import Optional

import openai

import config
from errors import ExtractionUnavailableError

logger = logging.getLogger(__name__)


class ChatCompletionClient:
    """
    Thin wrapper that sends one user prompt and returns the reply text.

    Retries are disabled: extraction calls are paid, and a failed call is
    surfaced to the user to retry manually.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str = config.OPENAI_MODEL,
        base_url: Optional[str] = config.OPENAI_BASE_URL,
        temperature: float = config.OPENAI_TEMPERATURE,
        timeout: float = config.OPENAI_TIMEOUT,
        client=None,
    ):
        """
        Initialize the client.

        Args:
            api_key: API key for the backend; without one every call fails
            model: Chat model name
            base_url: Base URL of the OpenAI-compatible API
            temperature: Sampling temperature
            timeout: Request timeout in seconds
            client: Preconfigured ``openai.OpenAI`` instance (used by tests)
        """
        self.model = model
        self.temperature = temperature
        if client is None and api_key:
            client = openai.OpenAI(
                api_key=api_key, base_url=base_url, timeout=timeout, max_retries=0
            )
        self._client = client

    @property
    def configured(self) -> bool:
        return self._client is not None

    def complete(self, prompt: str, max_tokens: int = 1024) -> str:
        """
        Send a prompt and return the reply text.

        Raises:
            ExtractionUnavailableError: no API key, transport or API failure
        """
        if self._client is None:
            raise ExtractionUnavailableError("AI backend is not configured")

        try:
            completion = self._client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
                max_tokens=max_tokens,
            )
        except openai.OpenAIError as api_error:
            logger.error(f"AI backend error: {api_error}")
            raise ExtractionUnavailableError("AI backend is unavailable, please try again")

        content = completion.choices[0].message.content if completion.choices else None
        return (content or "").strip()
