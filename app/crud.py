from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app import models


class StringAlreadyExistsError(ValueError):
    """Raised when a value (or its hash) is already stored."""


def create_string(db: Session, value: str, sha256_hash: str, properties: Dict[str, Any]) -> models.AnalyzedString:
    """Insert a new row in one statement; the unique constraints decide conflicts."""
    record = models.AnalyzedString(value=value, sha256_hash=sha256_hash, properties=properties)
    db.add(record)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise StringAlreadyExistsError("String already exists in the system") from e
    db.refresh(record)
    return record


def get_string_by_value(db: Session, value: str) -> Optional[models.AnalyzedString]:
    return db.query(models.AnalyzedString).filter(models.AnalyzedString.value == value).first()


def get_string_by_hash(db: Session, sha256_hash: str) -> Optional[models.AnalyzedString]:
    return db.query(models.AnalyzedString).filter(models.AnalyzedString.sha256_hash == sha256_hash).first()


def list_strings(db: Session) -> List[models.AnalyzedString]:
    return db.query(models.AnalyzedString).order_by(models.AnalyzedString.id.asc()).all()


def delete_string(db: Session, value: str) -> bool:
    record = get_string_by_value(db, value)
    if record:
        db.delete(record)
        db.commit()
        return True
    return False


def query_strings(db: Session, filters: Dict[str, Any]) -> List[models.AnalyzedString]:
    """Apply parsed natural-language filters as SQL predicates.

    Length compares the character length of the raw value and word count uses
    spaces + 1, not the analyzer's alphabetic word count.
    """
    value_col = models.AnalyzedString.value
    query = db.query(models.AnalyzedString)

    if "is_palindrome" in filters:
        flag = models.AnalyzedString.properties["is_palindrome"].as_boolean()
        query = query.filter(flag == bool(filters["is_palindrome"]))
    if "min_length" in filters:
        query = query.filter(func.length(value_col) >= int(filters["min_length"]))
    if "max_length" in filters:
        query = query.filter(func.length(value_col) <= int(filters["max_length"]))
    if "word_count" in filters:
        spaces = func.length(value_col) - func.length(func.replace(value_col, " ", ""))
        query = query.filter(spaces + 1 == int(filters["word_count"]))
    if filters.get("contains_character"):
        query = query.filter(value_col.icontains(str(filters["contains_character"]), autoescape=True))

    return query.order_by(models.AnalyzedString.id.asc()).all()
