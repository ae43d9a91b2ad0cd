"""Mode router: one dispatch point from a mode to its record schema and prompt."""

from recognizer.schemas import actor, movie
from recognizer.schemas.actor import ActorRecord
from recognizer.schemas.base import (
    FieldSpec,
    Mode,
    PromptSpec,
    RecognitionRequest,
    RecordModel,
    render_fields,
)
from recognizer.schemas.movie import MovieRecord


def _build_spec(mode: Mode, module) -> PromptSpec:
    return PromptSpec(
        mode=mode,
        instruction_text=module.PROMPT.format(fields=render_fields(module.FIELDS)),
        schema_description=module.FIELDS,
        max_tokens=module.MAX_TOKENS,
    )


_VARIANTS: dict[Mode, tuple[type[RecordModel], PromptSpec]] = {
    Mode.MOVIE: (MovieRecord, _build_spec(Mode.MOVIE, movie)),
    Mode.ACTOR: (ActorRecord, _build_spec(Mode.ACTOR, actor)),
}


def get_variant(mode: Mode | str) -> tuple[type[RecordModel], PromptSpec]:
    """Get the record model and prompt spec for a mode.

    Args:
        mode: A Mode or its string value ("movie", "actor")

    Returns:
        Tuple of (record_class, prompt_spec)

    Raises:
        InvalidModeError: If the mode is not supported
    """
    return _VARIANTS[Mode.parse(mode)]


def select_prompt(mode: Mode | str) -> PromptSpec:
    """Return the instruction text and output contract for a mode."""
    return get_variant(mode)[1]


def get_record_model(mode: Mode | str) -> type[RecordModel]:
    """Return the record class the extractor validates against for a mode."""
    return get_variant(mode)[0]


__all__ = [
    "ActorRecord",
    "FieldSpec",
    "Mode",
    "MovieRecord",
    "PromptSpec",
    "RecognitionRequest",
    "RecordModel",
    "get_record_model",
    "get_variant",
    "select_prompt",
]
