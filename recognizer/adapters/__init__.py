"""Adapter factory and exports."""
from recognizer.adapters.base import ModelReply, VisionAdapter
from recognizer.config import RECOGNIZER_PROVIDER


def get_adapter() -> VisionAdapter:
    """Get the configured vision adapter.

    Returns:
        VisionAdapter instance based on RECOGNIZER_PROVIDER config
    """
    if RECOGNIZER_PROVIDER == "openai":
        from recognizer.adapters.openai import OpenAIAdapter
        return OpenAIAdapter()
    else:
        # Default to Grok
        from recognizer.adapters.grok import GrokAdapter
        return GrokAdapter()


__all__ = ["ModelReply", "VisionAdapter", "get_adapter"]
