"""Keyword extraction for documentation entry names and queries."""

import re

# Leading section numbers such as "2.1. " in "2.1. Getting Started"
SECTION_NUMBER_PATTERN = re.compile(r"^\d+(?:\.\d+)*\.?\s*")

SEPARATOR_PATTERN = re.compile(r"[\s\-_.()<>,:]+")

STOPWORDS = frozenset({"and", "the", "for", "with", "from", "using", "objects", "object"})

MIN_KEYWORD_LENGTH = 3


def extract_keywords(text: str) -> list[str]:
    """Extract lowercase keywords from an entry name or query.

    Strips section-number prefixes, splits on whitespace and punctuation
    separators, drops short tokens and stopwords, and removes duplicates
    while keeping first-seen order.

    Example:
        >>> extract_keywords("2.1. Getting Started")
        ['getting', 'started']
        >>> extract_keywords("asyncio.create_task()")
        ['asyncio', 'create', 'task']
    """
    if not text:
        return []

    normalized = SECTION_NUMBER_PATTERN.sub("", text.lower(), count=1)

    keywords: dict[str, None] = {}
    for token in SEPARATOR_PATTERN.split(normalized):
        if len(token) < MIN_KEYWORD_LENGTH or token in STOPWORDS:
            continue
        keywords.setdefault(token, None)
    return list(keywords)
