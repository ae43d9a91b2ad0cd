"""Movie identification schema."""

from pydantic import field_validator

from recognizer.schemas.base import FieldSpec, RecordModel

RATING_UNKNOWN = "unknown"


class MovieRecord(RecordModel):
    """A movie identified from a poster or screenshot."""

    title: str
    year: str | int
    rating: str | int | float  # 0-10, or "unknown"
    actors: list[str]
    watch_links: list[str]
    download_links: list[str]
    torrent: str
    description: str
    is_adult_content: bool

    @field_validator("rating")
    @classmethod
    def _rating_in_range(cls, value: str | int | float) -> str | int | float:
        if isinstance(value, str):
            if value.strip().lower() == RATING_UNKNOWN:
                return value
            try:
                score = float(value)
            except ValueError:
                raise ValueError(f"rating {value!r} is neither a number nor \"unknown\"") from None
        else:
            score = float(value)
        if not 0 <= score <= 10:
            raise ValueError(f"rating {value!r} outside 0-10")
        return value


FIELDS = (
    FieldSpec("title", "string", '"unknown"',
              "Original title, followed by the Chinese title in parentheses when one exists."),
    FieldSpec("year", "string", '"unknown"', "Release year, e.g. \"2010\"."),
    FieldSpec("rating", "string", '"unknown"',
              "Douban or IMDb rating on a 0-10 scale, e.g. \"8.8\"."),
    FieldSpec("actors", "array of strings", "[]", "Main cast, most prominent first, at most 5 names."),
    FieldSpec("watchLinks", "array of strings", '["none"]',
              "Official streaming or purchase pages."),
    FieldSpec("downloadLinks", "array of strings", '["none"]', "Legal download pages."),
    FieldSpec("torrent", "string", '"none"', "Magnet or torrent reference."),
    FieldSpec("description", "string", '"unknown"',
              "Short plot summary or notable features, at most 50 words."),
    FieldSpec("isAdultContent", "boolean", "false", "true only for adult/pornographic works."),
)

MAX_TOKENS = 800

# Prompt template for movie identification
PROMPT = """You are an expert movie recognition AI. Analyze this movie poster or screenshot and identify the movie.

Return a single JSON object with exactly these fields:
{fields}

Every field must be present. Do not add other fields.
Respond with JSON only, no commentary and no markdown."""
