import json
import logging
import sys
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from sqlalchemy.orm import Session

from app import crud, models
from app.analyzer import analyze, compute_sha256, count_words, is_palindrome
from app.NLP import interpret_nl_query
from app.schemas import StringProperties

logger = logging.getLogger("string_analyzer")

_TRUTHY = {"1", "true", "yes", "on"}


class StringNotFoundError(ValueError):
    """Raised when no stored string matches the requested value."""


def _parse_bool(raw: Any) -> bool:
    if isinstance(raw, bool):
        return raw
    return str(raw).strip().lower() in _TRUTHY


def resolve_properties(value: str, stored: Any) -> StringProperties:
    """Build the fixed-shape properties of a record.

    Fields missing from (or unreadable in) the stored payload are recomputed
    from ``value``.
    """
    data = stored
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except ValueError:
            data = None
    if not isinstance(data, dict):
        data = {}

    try:
        return StringProperties.model_validate(data)
    except ValidationError:
        logger.warning("Stored properties incomplete for %r; recomputing missing fields", value)

    computed = analyze(value)
    merged = {name: data.get(name, computed[name]) for name in StringProperties.model_fields}
    try:
        return StringProperties.model_validate(merged)
    except ValidationError:
        return StringProperties.model_validate(computed)


def serialize_record(record: models.AnalyzedString) -> Dict[str, Any]:
    return {
        "id": record.sha256_hash,
        "value": record.value,
        "properties": resolve_properties(record.value, record.properties),
        "created_at": record.created_at,
    }


def _record_metrics(record: models.AnalyzedString) -> Dict[str, Any]:
    """Length, palindrome flag and word count, read from storage with fallback."""
    stored = record.properties if isinstance(record.properties, dict) else {}
    value = record.value

    length = stored.get("length")
    if not isinstance(length, int) or isinstance(length, bool):
        length = len(value)

    palindrome = stored.get("is_palindrome")
    palindrome = _parse_bool(palindrome) if palindrome is not None else is_palindrome(value)

    words = stored.get("word_count")
    if not isinstance(words, int) or isinstance(words, bool):
        words = count_words(value)

    return {"length": length, "is_palindrome": palindrome, "word_count": words}


def _matches_filters(record: models.AnalyzedString, filters: Dict[str, Any]) -> bool:
    metrics = _record_metrics(record)

    if metrics["length"] < filters.get("min_length", 0):
        return False
    if metrics["length"] > filters.get("max_length", sys.maxsize):
        return False

    if "is_palindrome" in filters:
        if metrics["is_palindrome"] != _parse_bool(filters["is_palindrome"]):
            return False

    if "word_count" in filters:
        if metrics["word_count"] != int(filters["word_count"]):
            return False

    needle = filters.get("contains_character")
    if needle:
        if str(needle).lower() not in record.value.lower():
            return False

    return True


def validate_query_filters(
    is_palindrome: Optional[str] = None,
    min_length: Optional[int] = None,
    max_length: Optional[int] = None,
    word_count: Optional[int] = None,
    contains_character: Optional[str] = None,
) -> Dict[str, Any]:
    filters: Dict[str, Any] = {}

    if is_palindrome is not None:
        filters["is_palindrome"] = _parse_bool(is_palindrome)

    if min_length is not None:
        if min_length < 0:
            raise ValueError("min_length must be non-negative")
        filters["min_length"] = min_length

    if max_length is not None:
        if max_length < 0:
            raise ValueError("max_length must be non-negative")
        filters["max_length"] = max_length

    if word_count is not None:
        if word_count < 0:
            raise ValueError("word_count must be non-negative")
        filters["word_count"] = word_count

    if contains_character:
        filters["contains_character"] = contains_character

    return filters


def create_string(db: Session, raw_value: str) -> Dict[str, Any]:
    value = raw_value.strip()
    properties = analyze(value)
    record = crud.create_string(db, value, properties["sha256_hash"], properties)
    logger.info("Stored string %s (length=%d)", record.sha256_hash, properties["length"])
    return serialize_record(record)


def get_string_by_value(db: Session, raw_value: str) -> Dict[str, Any]:
    value = raw_value.strip()
    record = crud.get_string_by_value(db, value)
    if record is None:
        raise StringNotFoundError("String does not exist in the system")
    return serialize_record(record)


def delete_string_by_value(db: Session, value: str) -> None:
    if not crud.delete_string(db, value):
        raise StringNotFoundError("String not found in the system")
    logger.info("Deleted string with hash %s", compute_sha256(value))


def get_all_strings_with_filters(
    db: Session, filters: Dict[str, Any], filters_applied: Dict[str, Any]
) -> Dict[str, Any]:
    records: List[models.AnalyzedString] = [r for r in crud.list_strings(db) if _matches_filters(r, filters)]
    return {
        "data": [serialize_record(r) for r in records],
        "count": len(records),
        "filters_applied": filters_applied,
    }


def get_strings_by_natural_language(db: Session, query: Optional[str]) -> Dict[str, Any]:
    if query is None or not query.strip():
        raise ValueError('Missing "query" parameter')

    interpreted = interpret_nl_query(query)
    parsed = interpreted["parsed_filters"]
    if parsed.get("conflict"):
        logger.info("Natural language query %r has conflicting length bounds", query)

    records = crud.query_strings(db, parsed)
    return {
        "data": [serialize_record(r) for r in records],
        "count": len(records),
        "interpreted_query": interpreted,
    }
