"""Generator collaborators: natural-language instruction in, text blob out."""

from typing import Protocol

import anthropic
from loguru import logger
from tenacity import Retrying, retry_if_exception_type, stop_after_attempt, wait_exponential

from radar.config import GeneratorSettings, settings
from radar.errors import GenerationError

# Worth another attempt; anything else fails the scan immediately
TRANSIENT_ERRORS = (
    anthropic.APIConnectionError,
    anthropic.RateLimitError,
    anthropic.InternalServerError,
)


class Generator(Protocol):
    """Anything that turns a prompt into raw text."""

    def generate(self, prompt: str) -> str: ...


class AnthropicGenerator:
    """Generator backed by the Anthropic Messages API."""

    def __init__(self, generator_settings: GeneratorSettings | None = None, client: anthropic.Anthropic | None = None):
        self.settings = generator_settings or settings.generator
        self._client = client

    @property
    def client(self) -> anthropic.Anthropic:
        if self._client is None:
            if not self.settings.anthropic_api_key:
                raise GenerationError("No Anthropic API key configured")
            self._client = anthropic.Anthropic(
                api_key=self.settings.anthropic_api_key,
                timeout=self.settings.timeout,
                max_retries=0,  # retries handled by tenacity
            )
        return self._client

    def _request_kwargs(self, prompt: str) -> dict:
        kwargs = {
            "model": self.settings.model,
            "max_tokens": self.settings.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if self.settings.web_search:
            kwargs["tools"] = [{
                "type": "web_search_20250305",
                "name": "web_search",
                "max_uses": self.settings.web_search_max_uses,
            }]
        return kwargs

    def generate(self, prompt: str) -> str:
        """Send the prompt; return the concatenated text blocks of the reply.

        Raises:
            GenerationError: missing key, or the API call failed after retries
        """
        retrying = Retrying(
            stop=stop_after_attempt(max(1, self.settings.max_retries)),
            wait=wait_exponential(multiplier=self.settings.retry_delay, min=self.settings.retry_delay, max=30),
            retry=retry_if_exception_type(TRANSIENT_ERRORS),
            reraise=True,
        )

        try:
            response = retrying(self.client.messages.create, **self._request_kwargs(prompt))
        except anthropic.APIError as e:
            logger.error(f"Anthropic API error: {e}")
            raise GenerationError("Generator call failed", cause=e) from e

        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        logger.info(f"Generator returned {len(text)} chars ({self.settings.model})")
        return text
