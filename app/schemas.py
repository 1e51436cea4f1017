from pydantic import BaseModel, StrictStr
from datetime import datetime
from typing import Dict, Any, Optional, List


class StringRequest(BaseModel):
    """Request schema for creating/analyzing a string."""
    value: StrictStr


class StringProperties(BaseModel):
    """Computed properties of an analyzed string."""
    length: int
    is_palindrome: bool
    unique_characters: int
    word_count: int
    sha256_hash: str
    character_frequency_map: Dict[str, int]


class StringResponse(BaseModel):
    """Response schema for string records."""
    id: str
    value: str
    properties: StringProperties
    created_at: Optional[datetime] = None


class FilterResponse(BaseModel):
    """Response schema for GET /strings."""
    data: List[StringResponse]
    count: int
    filters_applied: Dict[str, Any]


class InterpretedQuery(BaseModel):
    original: str
    parsed_filters: Dict[str, Any]


class NaturalLanguageResponse(BaseModel):
    """Response schema for natural language filtering."""
    data: List[StringResponse]
    count: int
    interpreted_query: InterpretedQuery
