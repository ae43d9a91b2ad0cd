"""Grok (xAI) adapter for vision recognition."""

import logging

import httpx

from recognizer.adapters.base import ModelReply, VisionAdapter, build_messages, content_to_text
from recognizer.config import (
    GROK_API_KEY,
    GROK_API_URL,
    GROK_MODEL,
    RECOGNIZER_REQUEST_TIMEOUT,
    RECOGNIZER_TEMPERATURE,
)
from recognizer.errors import ConfigurationError, EmptyReplyError, UpstreamError
from recognizer.schemas.base import PromptSpec

logger = logging.getLogger(__name__)


class GrokAdapter(VisionAdapter):
    """Calls the xAI chat completions endpoint directly over httpx."""

    def __init__(
        self,
        api_key: str | None = None,
        api_url: str = GROK_API_URL,
        model: str = GROK_MODEL,
        temperature: float = RECOGNIZER_TEMPERATURE,
        timeout: float = RECOGNIZER_REQUEST_TIMEOUT,
    ):
        self.api_key = GROK_API_KEY if api_key is None else api_key
        self.api_url = api_url
        self.model = model
        self.temperature = temperature
        self.timeout = timeout

    def _headers(self) -> dict:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    async def invoke(self, image_url: str, prompt: PromptSpec) -> ModelReply:
        """Send one chat completion request carrying the prompt and image."""
        if not self.api_key:
            logger.error("GROK_API_KEY missing")
            raise ConfigurationError("Grok API key missing")

        payload = {
            "model": self.model,
            "messages": build_messages(image_url, prompt),
            "temperature": self.temperature,
            "max_tokens": prompt.max_tokens,
        }
        logger.info(
            f"Calling Grok model={self.model} mode={prompt.mode.value} "
            f"prompt_length={len(prompt.instruction_text)}"
        )

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.api_url, json=payload, headers=self._headers())
        except httpx.TimeoutException as e:
            logger.error(f"Grok request timed out after {self.timeout}s: {e}")
            raise UpstreamError(f"Grok API timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            logger.error(f"Grok request failed: {e}")
            raise UpstreamError(f"Grok API request failed: {e}") from e

        logger.info(f"Grok API response status: {response.status_code}")

        if not response.is_success:
            body = response.text
            logger.error(f"Grok API error: {response.status_code} {body}")
            raise UpstreamError(
                f"Grok API error: {response.status_code} - {body[:300]}",
                status=response.status_code,
                body=body,
            )

        try:
            data = response.json()
        except ValueError:
            logger.error(f"Grok returned a non-JSON body: {response.text[:300]}")
            raise EmptyReplyError("No content from Grok") from None

        if not isinstance(data, dict):
            data = {}
        message = {}
        choices = data.get("choices")
        if isinstance(choices, list) and choices and isinstance(choices[0], dict):
            message = choices[0].get("message") or {}

        text = content_to_text(message.get("content"))
        if not text.strip():
            logger.error(f"Grok response had no content: {data}")
            raise EmptyReplyError("No content from Grok")

        model_name = data.get("model")
        usage = data.get("usage")
        return ModelReply(
            raw_text=text,
            model_name=model_name if isinstance(model_name, str) and model_name else self.model,
            usage=usage if isinstance(usage, dict) else None,
        )

    async def is_available(self) -> bool:
        """Check if the Grok endpoint is reachable with the configured key."""
        if not self.api_key:
            return False
        models_url = self.api_url.rsplit("/chat/completions", 1)[0] + "/models"
        try:
            async with httpx.AsyncClient(timeout=5.0) as client:
                response = await client.get(models_url, headers=self._headers())
                return response.status_code == 200
        except Exception as e:
            logger.warning(f"Grok availability check failed: {e}")
            return False
