"""Base adapter interface for vision model invocation."""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, ConfigDict

from recognizer.schemas.base import PromptSpec


class ModelReply(BaseModel):
    """Raw text produced by the model for one request."""

    model_config = ConfigDict(protected_namespaces=())

    raw_text: str
    model_name: str = ""
    usage: dict[str, Any] | None = None


class VisionAdapter(ABC):
    """Abstract base class for vision-capable chat completion providers."""

    @abstractmethod
    async def invoke(self, image_url: str, prompt: PromptSpec) -> ModelReply:
        """Send the instruction text and the image reference in one request.

        Args:
            image_url: Publicly fetchable URL of the image
            prompt: Prompt spec selected for the request's mode

        Returns:
            ModelReply holding the model's untouched text

        Raises:
            ConfigurationError: If the provider credential is absent
            UpstreamError: On a non-success response or transport failure
            EmptyReplyError: If the response carries no textual content
        """
        pass

    @abstractmethod
    async def is_available(self) -> bool:
        """Check if the provider is reachable.

        Returns:
            True if available, False otherwise
        """
        pass


def build_messages(image_url: str, prompt: PromptSpec) -> list[dict]:
    """Build the single-turn user message: instruction text plus image reference."""
    return [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": prompt.instruction_text},
                {"type": "image_url", "image_url": {"url": image_url}},
            ],
        }
    ]


def content_to_text(content: Any) -> str:
    """Flatten a chat message content (string or list of parts) to text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, dict) and part.get("type") == "text":
                parts.append(part.get("text") or "")
            elif isinstance(part, str):
                parts.append(part)
        return "".join(parts)
    return ""
