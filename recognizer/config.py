import os

RECOGNIZER_PROVIDER = os.environ.get("RECOGNIZER_PROVIDER", "grok")

GROK_API_KEY = os.environ.get("GROK_API_KEY", "")
GROK_API_URL = os.environ.get("GROK_API_URL", "https://api.x.ai/v1/chat/completions")
GROK_MODEL = os.environ.get("GROK_MODEL", "grok-2-vision")

OPENAI_API_KEY = os.environ.get("OPENAI_API_KEY", "")
OPENAI_BASE_URL = os.environ.get("OPENAI_BASE_URL", "https://api.openai.com/v1")
OPENAI_MODEL = os.environ.get("OPENAI_MODEL", "gpt-4o-mini")

RECOGNIZER_USAGE_FILE = os.environ.get("RECOGNIZER_USAGE_FILE", ".recognizer/usage.json")
RECOGNIZER_UPLOAD_DIR = os.environ.get("RECOGNIZER_UPLOAD_DIR", ".recognizer/uploads")
RECOGNIZER_PUBLIC_BASE_URL = os.environ.get(
    "RECOGNIZER_PUBLIC_BASE_URL", "http://localhost:8000/uploads"
)

RECOGNIZER_LOG_LEVEL = os.environ.get("RECOGNIZER_LOG_LEVEL", "INFO")
RECOGNIZER_HOST = os.environ.get("RECOGNIZER_HOST", "0.0.0.0")

try:
    RECOGNIZER_TEMPERATURE = float(os.environ.get("RECOGNIZER_TEMPERATURE", "0.3"))
    RECOGNIZER_REQUEST_TIMEOUT = float(os.environ.get("RECOGNIZER_REQUEST_TIMEOUT", "60"))
    RECOGNIZER_DAILY_QUOTA = int(os.environ.get("RECOGNIZER_DAILY_QUOTA", "5"))
    RECOGNIZER_PORT = int(os.environ.get("RECOGNIZER_PORT", "8000"))
except ValueError as e:
    raise RuntimeError(f"Invalid numeric recognizer configuration: {e}") from e

# Upper bound on the slice of offending model output kept on a ParseError
PARSE_ERROR_SNIPPET = 500
