"""Type inference: guess which documentation types best match a query."""

from pydocs_mcp.search.keywords import extract_keywords
from pydocs_mcp.search.models import SearchIndex, TypeInferenceResult

MAX_INFERRED_TYPES = 3
MAX_ALTERNATIVE_TYPES = 3
MAX_MATCHING_KEYWORDS = 5


def infer_types_for_query(query: str, search_index: SearchIndex) -> TypeInferenceResult:
    """Rank documentation types for a free-text query.

    A keyword mapping matches when its keyword is a substring of the
    lowercased query or one of the query's own keywords. Each match adds the
    mapping's score to every type it lists; types are then ranked by summed
    score (ties keep first-accumulated order).

    Confidence is ``min(100, matches * 10 + total_score / 100)``, or 0 when
    nothing matched. The search index is not modified.

    Example:
        >>> result = infer_types_for_query("asyncio queue", search_index)
        >>> result.inferred_types
        ['Asynchronous I/O', 'Library']
    """
    query_lower = query.lower()
    query_keywords = set(extract_keywords(query))

    type_scores: dict[str, int] = {}
    matching_keywords: list[str] = []
    match_count = 0

    if query_lower:
        for mapping in search_index.keyword_mappings:
            if mapping.keyword not in query_lower and mapping.keyword not in query_keywords:
                continue
            match_count += 1
            if mapping.keyword not in matching_keywords:
                matching_keywords.append(mapping.keyword)
            for type_name in mapping.types:
                type_scores[type_name] = type_scores.get(type_name, 0) + mapping.score

    ranked = [
        type_name
        for type_name, _ in sorted(type_scores.items(), key=lambda item: item[1], reverse=True)
    ]

    if match_count:
        total_score = sum(type_scores.values())
        confidence = min(100.0, match_count * 10 + total_score / 100)
    else:
        confidence = 0.0

    return TypeInferenceResult(
        query=query,
        inferred_types=ranked[:MAX_INFERRED_TYPES],
        alternative_types=ranked[MAX_INFERRED_TYPES:MAX_INFERRED_TYPES + MAX_ALTERNATIVE_TYPES],
        confidence=confidence,
        matching_keywords=matching_keywords[:MAX_MATCHING_KEYWORDS],
    )
