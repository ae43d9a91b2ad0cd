"""OpenAI-compatible adapter for vision recognition."""
import logging

import openai

from recognizer.adapters.base import ModelReply, VisionAdapter, build_messages, content_to_text
from recognizer.config import (
    OPENAI_API_KEY,
    OPENAI_BASE_URL,
    OPENAI_MODEL,
    RECOGNIZER_REQUEST_TIMEOUT,
    RECOGNIZER_TEMPERATURE,
)
from recognizer.errors import ConfigurationError, EmptyReplyError, UpstreamError
from recognizer.schemas.base import PromptSpec

logger = logging.getLogger(__name__)


class OpenAIAdapter(VisionAdapter):
    """Vision adapter backed by the official SDK against any OpenAI-compatible API."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str = OPENAI_BASE_URL,
        model: str = OPENAI_MODEL,
        temperature: float = RECOGNIZER_TEMPERATURE,
        timeout: float = RECOGNIZER_REQUEST_TIMEOUT,
    ):
        self.api_key = OPENAI_API_KEY if api_key is None else api_key
        self.base_url = base_url
        self.model = model
        self.temperature = temperature
        self.timeout = timeout
        self._client = None

    @property
    def client(self):
        if self._client is None:
            if not self.api_key:
                raise ConfigurationError("OPENAI_API_KEY environment variable is required")
            # SDK retries are disabled; retry policy belongs to the caller
            self._client = openai.AsyncOpenAI(
                api_key=self.api_key,
                base_url=self.base_url,
                timeout=self.timeout,
                max_retries=0,
            )
        return self._client

    async def invoke(self, image_url: str, prompt: PromptSpec) -> ModelReply:
        """Describe the image with the configured chat model."""
        if not self.api_key:
            logger.error("OPENAI_API_KEY missing")
            raise ConfigurationError("OpenAI API key missing")

        logger.info(f"Calling {self.model} mode={prompt.mode.value}")
        try:
            response = await self.client.chat.completions.create(
                model=self.model,
                messages=build_messages(image_url, prompt),
                temperature=self.temperature,
                max_tokens=prompt.max_tokens,
            )
        except openai.APIStatusError as e:
            body = e.response.text if e.response is not None else str(e.body)
            logger.error(f"OpenAI API error: {e.status_code} {body}")
            raise UpstreamError(
                f"OpenAI API error: {e.status_code} - {body[:300]}",
                status=e.status_code,
                body=body,
            ) from e
        except openai.APITimeoutError as e:
            logger.error(f"OpenAI request timed out: {e}")
            raise UpstreamError(f"OpenAI API timed out after {self.timeout}s") from e
        except openai.APIConnectionError as e:
            logger.error(f"OpenAI connection failed: {e}")
            raise UpstreamError(f"OpenAI API request failed: {e}") from e

        if not response.choices:
            logger.error(f"OpenAI response had no choices: {response}")
            raise EmptyReplyError("No content from OpenAI")

        text = content_to_text(response.choices[0].message.content)
        if not text.strip():
            logger.error(f"OpenAI response had no content: {response}")
            raise EmptyReplyError("No content from OpenAI")

        model_name = getattr(response, "model", None)
        usage = getattr(response, "usage", None)
        if hasattr(usage, "model_dump"):
            usage = usage.model_dump()
        return ModelReply(
            raw_text=text,
            model_name=model_name if isinstance(model_name, str) and model_name else self.model,
            usage=usage if isinstance(usage, dict) else None,
        )

    async def is_available(self) -> bool:
        """Check if the OpenAI-compatible API is available."""
        try:
            await self.client.models.list()
            return True
        except Exception as e:
            logger.warning(f"OpenAI availability check failed: {e}")
            return False
