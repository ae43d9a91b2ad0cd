"""Tests for structured result extraction."""
import json

import pytest

from recognizer.errors import InvalidModeError, ParseError
from recognizer.extractor import extract, strip_fences
from recognizer.schemas import ActorRecord, MovieRecord

INCEPTION = {
    "title": "Inception",
    "year": "2010",
    "rating": "8.8",
    "actors": ["Leonardo DiCaprio"],
    "watchLinks": ["none"],
    "downloadLinks": ["none"],
    "torrent": "none",
    "description": "A thief steals secrets via dreams.",
    "isAdultContent": False,
}


def test_fenced_movie_reply_returns_exact_record():
    """Test a fenced compliant movie reply extracts unchanged."""
    raw = "```json\n" + json.dumps(INCEPTION) + "\n```"

    record = extract(raw, "movie")

    assert isinstance(record, MovieRecord)
    assert record.model_dump(by_alias=True) == INCEPTION


def test_fenced_equals_unwrapped():
    """Test fence stripping yields the same record as the bare JSON."""
    bare = json.dumps(INCEPTION)
    wrapped = f"Here is what I found:\n```json\n{bare}\n```\nHope this helps!"

    assert extract(wrapped, "movie") == extract(bare, "movie")


def test_unwrapped_actor_reply_parses():
    """Test fence stripping is a no-op when there is no fence."""
    record = extract('{"name":"Jane Doe","info":"unknown","movies":[]}', "actor")

    assert isinstance(record, ActorRecord)
    assert record.name == "Jane Doe"
    assert record.info == "unknown"
    assert record.movies == []


def test_extract_is_idempotent():
    """Test repeated extraction of the same text yields equal records."""
    raw = '  ```json\n{"name":"Jane Doe","info":"Actress","movies":["Film (2001)"]}\n```  '

    assert extract(raw, "actor") == extract(raw, "actor")


def test_refusal_is_parse_error():
    """Test prose with no structured content fails instead of returning a default."""
    with pytest.raises(ParseError) as exc_info:
        extract("Sorry, I cannot help with that.", "movie")

    assert exc_info.value.text == "Sorry, I cannot help with that."
    assert exc_info.value.status_code == 500


@pytest.mark.parametrize("raw", ["", "   ", "```json\n```"])
def test_empty_output_is_parse_error(raw):
    """Test blank output is a parse failure."""
    with pytest.raises(ParseError):
        extract(raw, "actor")


def test_missing_field_is_parse_error():
    """Test missing keys are reported, not auto-filled."""
    data = dict(INCEPTION)
    del data["torrent"]

    with pytest.raises(ParseError) as exc_info:
        extract(json.dumps(data), "movie")

    assert "torrent" in exc_info.value.message


@pytest.mark.parametrize("rating", ["42", "-1", "banana", ""])
def test_bad_string_rating_is_parse_error(rating):
    """Test string ratings must be "unknown" or a number on the 0-10 scale."""
    data = dict(INCEPTION, rating=rating)

    with pytest.raises(ParseError) as exc_info:
        extract(json.dumps(data), "movie")

    assert "rating" in exc_info.value.message


@pytest.mark.parametrize("rating", ["unknown", "Unknown", "0", "10", 9, 7.5])
def test_valid_rating_is_returned_unchanged(rating):
    """Test the sentinel and in-range ratings pass through as written."""
    data = dict(INCEPTION, rating=rating)

    record = extract(json.dumps(data), "movie")

    assert record.model_dump(by_alias=True)["rating"] == rating
    assert type(record.rating) is type(rating)


@pytest.mark.parametrize("flag", ["yes", "false", 1])
def test_non_boolean_adult_flag_is_parse_error(flag):
    """Test the adult flag is not coerced from strings or numbers."""
    data = dict(INCEPTION, isAdultContent=flag)

    with pytest.raises(ParseError) as exc_info:
        extract(json.dumps(data), "movie")

    assert "isAdultContent" in exc_info.value.message


def test_actor_movie_list_is_capped():
    """Test more than ten movies is rejected rather than returned."""
    movies = [f"Film {i} (200{i % 10})" for i in range(11)]
    raw = json.dumps({"name": "Jane Doe", "info": "Actress", "movies": movies})

    with pytest.raises(ParseError) as exc_info:
        extract(raw, "actor")

    assert "movies" in exc_info.value.message


def test_actor_movie_list_at_cap_is_accepted():
    movies = [f"Film {i} (2001)" for i in range(10)]
    raw = json.dumps({"name": "Jane Doe", "info": "Actress", "movies": movies})

    assert extract(raw, "actor").movies == movies


def test_mode_schema_mismatch_is_parse_error():
    """Test an actor-shaped reply does not satisfy the movie schema."""
    with pytest.raises(ParseError):
        extract('{"name":"Jane Doe","info":"unknown","movies":[]}', "movie")


def test_non_object_json_is_parse_error():
    """Test a JSON array is rejected."""
    with pytest.raises(ParseError):
        extract('["Inception"]', "movie")


def test_parse_error_text_is_truncated():
    """Test diagnostics keep only a bounded slice of huge outputs."""
    raw = "x" * 5000

    with pytest.raises(ParseError) as exc_info:
        extract(raw, "movie")

    assert len(exc_info.value.text) < 600


def test_invalid_mode_is_rejected():
    """Test extraction for an unknown mode fails with InvalidModeError."""
    with pytest.raises(InvalidModeError):
        extract(json.dumps(INCEPTION), "series")


def test_strip_fences_takes_first_fence_only():
    """Test only the first ```json block is used."""
    raw = 'intro ```json\n{"a": 1}\n``` middle ```json\n{"b": 2}\n```'

    assert strip_fences(raw) == '{"a": 1}'


def test_strip_fences_unclosed_fence_takes_rest():
    """Test an unterminated fence keeps everything after the opener."""
    assert strip_fences('```json\n{"a": 1}') == '{"a": 1}'


def test_strip_fences_without_fence_returns_trimmed_text():
    """Test text without a json fence is only trimmed."""
    assert strip_fences('  {"a": 1}\n') == '{"a": 1}'
