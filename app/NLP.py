import re
from typing import Dict, Any

_LONGER_THAN = re.compile(r'longer than (\d+)')
_SHORTER_THAN = re.compile(r'shorter than (\d+)')
_CONTAINS_LETTER = re.compile(r'contain(?:ing)? the letter (\w)')

# Largest value a SQL INTEGER parameter can carry
_MAX_BOUND = 2 ** 63 - 1


def _to_bound(digits: str) -> int:
    """Parse a matched number, capped at the SQL integer range."""
    if len(digits) > len(str(_MAX_BOUND)):
        return _MAX_BOUND
    return min(int(digits), _MAX_BOUND)


def interpret_nl_query(query: str) -> Dict[str, Any]:
    """Interpret a natural language filter query into structured filters.

    Rules are applied in order and a later rule overwrites an earlier one on
    the same field. ``conflict`` is set when the parsed length bounds cannot
    both hold; it is informational and does not stop the query.
    """
    if not isinstance(query, str):
        raise TypeError("query must be a string")

    q = query.lower()
    filters: Dict[str, Any] = {}

    if 'single word' in q:
        filters['word_count'] = 1
    elif 'two word' in q:
        filters['word_count'] = 2

    if 'palindromic' in q or 'palindrome' in q:
        filters['is_palindrome'] = True

    m = _LONGER_THAN.search(q)
    if m:
        filters['min_length'] = min(_to_bound(m.group(1)) + 1, _MAX_BOUND)

    m = _SHORTER_THAN.search(q)
    if m:
        filters['max_length'] = _to_bound(m.group(1)) - 1

    m = _CONTAINS_LETTER.search(q)
    if m:
        filters['contains_character'] = m.group(1)

    if 'first vowel' in q:
        filters['contains_character'] = 'a'

    if 'min_length' in filters and 'max_length' in filters:
        if filters['min_length'] > filters['max_length']:
            filters['conflict'] = True

    return {'original': query, 'parsed_filters': filters}
