"""Structured result extraction from free-form model output.

The model's reply is untrusted text. It may wrap the JSON answer in a
```json fence or surround it with commentary despite the prompt. This module
is the single place that turns that text into a validated record, or fails
with a ParseError that keeps the offending text for diagnostics.
"""

import json
import logging
import re

from pydantic import ValidationError

from recognizer.config import PARSE_ERROR_SNIPPET
from recognizer.errors import ParseError
from recognizer.schemas import Mode, RecordModel, get_record_model

logger = logging.getLogger(__name__)

# First ```json fence, up to the next closing fence or the end of the text
_JSON_FENCE_RE = re.compile(r"```json(.*?)(?:```|\Z)", re.IGNORECASE | re.DOTALL)


def strip_fences(raw_text: str) -> str:
    """Return the JSON candidate inside the first ```json fence, or the whole text.

    An empty fenced body falls back to the whole trimmed text.
    """
    text = (raw_text or "").strip()
    match = _JSON_FENCE_RE.search(text)
    if match:
        inner = match.group(1).strip()
        if inner:
            return inner
    return text


def _snippet(text: str) -> str:
    if len(text) <= PARSE_ERROR_SNIPPET:
        return text
    return text[:PARSE_ERROR_SNIPPET] + "..."


def parse_json_object(text: str) -> dict:
    """Parse text as a JSON object.

    Raises:
        ParseError: If the text is not valid JSON or not an object
    """
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        logger.warning(f"Model output is not valid JSON ({e}): {_snippet(text)!r}")
        raise ParseError(f"Model output is not valid JSON: {e.msg}", text=_snippet(text)) from e

    if not isinstance(parsed, dict):
        logger.warning(f"Model output is JSON {type(parsed).__name__}, not an object: {_snippet(text)!r}")
        raise ParseError("Model output is not a JSON object", text=_snippet(text))
    return parsed


def extract(raw_text: str, mode: Mode | str) -> RecordModel:
    """Extract the record for ``mode`` from raw model output.

    Args:
        raw_text: Untouched text returned by the model
        mode: Mode that selected the prompt; decides the record schema

    Returns:
        MovieRecord or ActorRecord with every declared field present

    Raises:
        InvalidModeError: If the mode is not supported
        ParseError: If no JSON object can be parsed or its fields do not match
    """
    record_cls = get_record_model(mode)
    candidate = strip_fences(raw_text)
    if not candidate:
        raise ParseError("Model output is empty", text="")

    data = parse_json_object(candidate)

    try:
        return record_cls.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}" for err in e.errors()
        )
        logger.warning(f"Model output does not match {record_cls.__name__}: {problems}")
        raise ParseError(
            f"Model output does not match the {record_cls.__name__} schema: {problems}",
            text=_snippet(candidate),
        ) from e
