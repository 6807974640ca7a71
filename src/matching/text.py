# src/matching/text.py

"""Title normalisation, tokenisation and n-gram generation."""

import re

# English articles, prepositions and conjunctions that carry no identity.
STOP_WORDS: frozenset[str] = frozenset(
    {
        "the", "a", "an", "and", "or", "but",
        "in", "on", "at", "to", "for", "of", "with", "by",
    }
)

_NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")


def normalise_text(text: str) -> str:
    """Lowercase and replace every non-alphanumeric character with a space."""
    return _NON_ALNUM_RE.sub(" ", (text or "").lower())


def tokenize(
    text: str,
    min_length: int = 2,
    stop_words: frozenset[str] = STOP_WORDS,
) -> list[str]:
    """Split *text* into lowercase word tokens.

    Tokens shorter than *min_length* and stop words are dropped; order
    and repeats are preserved.
    """
    return [
        token
        for token in normalise_text(text).split()
        if len(token) >= min_length and token not in stop_words
    ]


def generate_ngrams(tokens: list[str], n: int) -> list[str]:
    """Return every contiguous window of *n* tokens joined by a space."""
    if n <= 0 or len(tokens) < n:
        return []
    return [
        " ".join(tokens[i:i + n])
        for i in range(len(tokens) - n + 1)
    ]
