"""Search index construction and type inference."""

from pydocs_mcp.search.index_builder import create_search_index, get_available_types
from pydocs_mcp.search.inference import infer_types_for_query
from pydocs_mcp.search.keywords import extract_keywords
from pydocs_mcp.search.models import KeywordMapping, SearchIndex, TypeInferenceResult

__all__ = [
    "extract_keywords",
    "create_search_index",
    "get_available_types",
    "infer_types_for_query",
    "KeywordMapping",
    "SearchIndex",
    "TypeInferenceResult",
]
