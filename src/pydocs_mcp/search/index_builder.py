"""Search index construction.

Builds keyword to documentation-type mappings from a DocIndex so that a free
text query can be mapped onto the index's type taxonomy ("Library",
"Built-in Functions", "Tutorial", ...).

Complexity is linear in the number of keyword occurrences: every entry name is
tokenized once and counts are accumulated in dicts.
"""

from collections import Counter
from datetime import datetime, timezone

from pydocs_mcp.docs.models import DocIndex
from pydocs_mcp.search.keywords import extract_keywords
from pydocs_mcp.search.models import KeywordMapping, SearchIndex

MAX_SAMPLE_ENTRIES = 3
MAX_TYPES_PER_KEYWORD = 5
MIN_TYPE_OCCURRENCES = 2


def calculate_type_stats(index: DocIndex) -> dict[str, int]:
    """Count entries per type, keyed in first-seen order."""
    stats: dict[str, int] = {}
    for entry in index.entries:
        stats[entry.type] = stats.get(entry.type, 0) + 1
    return stats


def build_keyword_mappings(index: DocIndex) -> list[KeywordMapping]:
    """Map each entry-name keyword to the types it appears under.

    A type is kept for a keyword when it occurs at least twice, or when it is
    the only type the keyword ever appears under. Keywords left with no type
    are dropped. The result is sorted by total occurrences, descending.
    """
    type_counts: dict[str, Counter[str]] = {}
    samples: dict[str, list[str]] = {}

    for entry in index.entries:
        for keyword in extract_keywords(entry.name):
            counts = type_counts.get(keyword)
            if counts is None:
                counts = type_counts[keyword] = Counter()
                samples[keyword] = []
            counts[entry.type] += 1
            keyword_samples = samples[keyword]
            if len(keyword_samples) < MAX_SAMPLE_ENTRIES:
                keyword_samples.append(f"{entry.name} ({entry.type})")

    mappings: list[KeywordMapping] = []
    for keyword, counts in type_counts.items():
        single_type = len(counts) == 1
        # sorted() is stable, so equal counts keep first-seen type order
        ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
        types = [
            type_name
            for type_name, count in ranked
            if count >= MIN_TYPE_OCCURRENCES or single_type
        ][:MAX_TYPES_PER_KEYWORD]
        if not types:
            continue
        mappings.append(
            KeywordMapping(
                keyword=keyword,
                types=types,
                sample_entries=samples[keyword],
                score=sum(counts.values()),
            )
        )

    mappings.sort(key=lambda mapping: mapping.score, reverse=True)
    return mappings


def create_search_index(index: DocIndex, version: str) -> SearchIndex:
    """Create a SearchIndex for one documentation version."""
    return SearchIndex(
        version=version,
        generated_at=datetime.now(timezone.utc).isoformat(),
        total_entries=len(index.entries),
        type_stats=calculate_type_stats(index),
        keyword_mappings=build_keyword_mappings(index),
    )


def get_available_types(search_index: SearchIndex) -> list[str]:
    """Return all types in the index, most frequent first."""
    ranked = sorted(search_index.type_stats.items(), key=lambda item: item[1], reverse=True)
    return [type_name for type_name, _ in ranked]
