"""Error taxonomy for the recognition pipeline.

Every failure the pipeline can produce is a ``RecognitionError`` subclass
carrying a human-readable message and the HTTP status the service maps it to.
"""


class RecognitionError(Exception):
    """Base class for classified recognition failures."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict:
        """Error body returned to API callers."""
        return {"error": self.message}


class InvalidModeError(RecognitionError):
    """Requested mode is not one of the supported modes."""

    status_code = 400


class MissingInputError(RecognitionError):
    """No image reference (or no uploaded file) was supplied."""

    status_code = 400


class ConfigurationError(RecognitionError):
    """A required credential or setting is absent."""


class UpstreamError(RecognitionError):
    """The model endpoint failed, returned a non-success status, or timed out."""

    def __init__(self, message: str, status: int | None = None, body: str = ""):
        super().__init__(message)
        self.status = status
        self.body = body


class EmptyReplyError(RecognitionError):
    """The endpoint succeeded but produced no textual content."""


class ParseError(RecognitionError):
    """Model output could not be parsed into the mode's record."""

    def __init__(self, message: str, text: str = ""):
        super().__init__(message)
        self.text = text


class QuotaExceededError(RecognitionError):
    """The daily usage ceiling has been reached."""

    status_code = 429
