"""Shared types for recognition modes, prompts and records."""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from recognizer.errors import InvalidModeError


class Mode(str, Enum):
    """Which kind of entity the pipeline is asked to identify."""

    MOVIE = "movie"
    ACTOR = "actor"

    @classmethod
    def parse(cls, value: "Mode | str | None") -> "Mode":
        """Coerce a raw mode value, raising InvalidModeError when unsupported."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(m.value for m in cls)
            raise InvalidModeError(f"Invalid mode {value!r}; expected one of: {allowed}") from None


@dataclass(frozen=True)
class FieldSpec:
    """One output field the model must emit."""

    name: str
    type: str
    sentinel: str
    description: str


@dataclass(frozen=True)
class PromptSpec:
    """Instruction text plus the output contract for one mode."""

    mode: Mode
    instruction_text: str
    schema_description: tuple[FieldSpec, ...]
    max_tokens: int

    @property
    def field_names(self) -> list[str]:
        return [f.name for f in self.schema_description]


class RecognitionRequest(BaseModel):
    """Inbound request: an image reference and the mode to run."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    image_url: str = Field(min_length=1)
    mode: Mode

    @field_validator("image_url")
    @classmethod
    def _strip_url(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("image_url must not be blank")
        return value


class RecordModel(BaseModel):
    """Base for structured records parsed from model output.

    Keys are camelCase on the wire, every field is required and unknown
    keys are rejected so the parsed field set always matches the schema.
    Strict mode keeps values exactly as the model sent them.
    """

    model_config = ConfigDict(alias_generator=to_camel, extra="forbid", strict=True)

    @classmethod
    def field_names(cls) -> list[str]:
        return [field.alias or name for name, field in cls.model_fields.items()]


def render_fields(fields: tuple[FieldSpec, ...]) -> str:
    """Render field specs as the bullet list embedded in a prompt."""
    lines = []
    for f in fields:
        lines.append(f'- "{f.name}" ({f.type}): {f.description} If unknown, use {f.sentinel}.')
    return "\n".join(lines)
