"""Actor/actress identification schema."""

from pydantic import Field

from recognizer.schemas.base import FieldSpec, RecordModel

MAX_MOVIES = 10


class ActorRecord(RecordModel):
    """A performer identified from a photo."""

    name: str
    info: str
    movies: list[str] = Field(max_length=MAX_MOVIES)  # "Title (Year)" labels


FIELDS = (
    FieldSpec("name", "string", '"unknown"', "Chinese name / English name of the performer."),
    FieldSpec("info", "string", '"unknown"',
              "Background, debut year and best-known work, at most 150 words."),
    FieldSpec("movies", "array of strings", "[]",
              f'Notable films as "Title (Year)", most famous first, at most {MAX_MOVIES} entries.'),
)

MAX_TOKENS = 500

# Prompt template for actor identification
PROMPT = """You are an expert actor/actress recognition AI. Analyze this photo and identify the person.

Return a single JSON object with exactly these fields:
{fields}

Every field must be present. Do not add other fields.
Respond with JSON only, no commentary and no markdown."""
