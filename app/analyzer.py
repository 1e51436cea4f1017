import re
from collections import Counter
from hashlib import sha256
from typing import Any, Dict

# Runs of letters; an apostrophe or hyphen between two letters keeps the word whole
_WORD_RE = re.compile(r"[^\W\d_]+(?:['\-]+[^\W\d_]+)*")
_WHITESPACE_RE = re.compile(r"\s+")


def compute_sha256(value: str) -> str:
    return sha256(value.encode("utf-8")).hexdigest()


def is_palindrome(value: str) -> bool:
    """Whitespace-insensitive, case-insensitive palindrome check by code point."""
    normalized = _WHITESPACE_RE.sub("", value).casefold()
    return normalized == normalized[::-1]


def count_words(value: str) -> int:
    """Count alphabetic words; digits and punctuation are not word characters."""
    return len(_WORD_RE.findall(value))


def count_spaced_words(value: str) -> int:
    """Word count as seen by the storage query path: spaces + 1."""
    return value.count(" ") + 1


def analyze(value: str) -> Dict[str, Any]:
    """Compute every derived property of ``value``.

    Never raises for string input; whitespace-only and empty strings still
    produce a complete property set.
    """
    return {
        "length": len(value),
        "is_palindrome": is_palindrome(value),
        "unique_characters": len(set(value)),
        "word_count": count_words(value),
        "sha256_hash": compute_sha256(value),
        "character_frequency_map": dict(Counter(value)),
    }
