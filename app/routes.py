from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session

from app.crud import StringAlreadyExistsError
from app.database import get_db
from app.schemas import StringRequest, StringResponse, FilterResponse, NaturalLanguageResponse
from app.services import (
    StringNotFoundError,
    create_string,
    get_string_by_value,
    delete_string_by_value,
    validate_query_filters,
    get_all_strings_with_filters,
    get_strings_by_natural_language,
)

router = APIRouter()


@router.get("/health")
def health() -> dict:
    """Basic health check endpoint."""
    return {"status": "ok"}


@router.post("/strings", response_model=StringResponse, status_code=201)
def create_string_endpoint(payload: StringRequest, db: Session = Depends(get_db)) -> dict:
    """Create and analyze a string."""
    try:
        return create_string(db, payload.value)
    except StringAlreadyExistsError as e:
        raise HTTPException(status_code=409, detail=str(e))


@router.get("/strings/filter-by-natural-language", response_model=NaturalLanguageResponse)
def filter_by_natural_language(
    query: Optional[str] = Query(None, description="Free-text filter, e.g. 'palindromic strings longer than 3'"),
    db: Session = Depends(get_db),
) -> dict:
    """Filter strings using a natural language query."""
    try:
        return get_strings_by_natural_language(db, query)
    except (ValueError, TypeError) as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/strings", response_model=FilterResponse)
def get_all_strings(
    request: Request,
    is_palindrome: Optional[str] = Query(None),
    min_length: Optional[int] = Query(None),
    max_length: Optional[int] = Query(None),
    word_count: Optional[int] = Query(None),
    contains_character: Optional[str] = Query(None),
    db: Session = Depends(get_db),
) -> dict:
    """Get all strings with optional filtering."""
    try:
        filters = validate_query_filters(is_palindrome, min_length, max_length, word_count, contains_character)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return get_all_strings_with_filters(db, filters, dict(request.query_params))


@router.get("/strings/{string_value:path}", response_model=StringResponse)
def get_string_endpoint(string_value: str, db: Session = Depends(get_db)) -> dict:
    """Get a specific string by its raw value (slashes and spaces allowed)."""
    try:
        return get_string_by_value(db, string_value)
    except StringNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.delete("/strings/{string_value:path}", status_code=204)
def delete_string_endpoint(string_value: str, db: Session = Depends(get_db)) -> None:
    """Delete a string by its exact raw value."""
    try:
        delete_string_by_value(db, string_value)
    except StringNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
