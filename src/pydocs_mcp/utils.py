"""Validation types and helpers for pydocs-mcp tool arguments."""

from typing import Annotated, Literal, Optional

from pydantic import Field
from pydantic.functional_validators import AfterValidator

# Search limits
MAX_SEARCH_LIMIT = 100

# Document pagination (characters)
MAX_WINDOW_CHARS = 100_000


def normalize_input(value: Optional[str], lowercase: bool = False) -> str:
    """Normalize user input: collapse whitespace, optionally lowercase."""
    if value is None:
        return ""
    normalized = " ".join(value.split())
    return normalized.lower() if lowercase else normalized


def validate_non_empty_string(value: str) -> str:
    """Validate that a string is not empty after stripping whitespace."""
    stripped = value.strip()
    if not stripped:
        raise ValueError("Value cannot be empty or whitespace only")
    return stripped


def split_fragment(path: str) -> tuple[str, Optional[str]]:
    """Split 'library/asyncio#asyncio.run' into the page path and fragment."""
    page, sep, fragment = path.partition("#")
    return page, (fragment or None) if sep else None


DocsQuery = Annotated[
    str,
    AfterValidator(validate_non_empty_string),
    Field(
        ...,
        min_length=1,
        description=(
            "Search text matched against entry names (case-insensitive substring). "
            "Examples: 'asyncio', 'pathlib.Path', 'dataclass'."
        ),
    ),
]

DocVersion = Annotated[
    Optional[Literal["3.14", "3.13", "3.12", "3.11", "3.10", "3.9"]],
    Field(default=None, description="Python documentation version (default: 3.14)"),
]

DocType = Annotated[
    Optional[str],
    Field(
        default=None,
        description=(
            "Optional documentation type filter, e.g. 'Library', 'Built-in Functions', "
            "'Language Reference', 'Tutorial'. Inferred automatically when it matches nothing."
        ),
    ),
]

SearchLimit = Annotated[
    Optional[int],
    Field(
        default=None,
        ge=1,
        le=MAX_SEARCH_LIMIT,
        description=f"Maximum number of results (1-{MAX_SEARCH_LIMIT}, default 20).",
    ),
]

DocPath = Annotated[
    str,
    AfterValidator(validate_non_empty_string),
    Field(
        ...,
        min_length=1,
        description="Document path returned by python_docs, e.g. 'library/asyncio-task'.",
    ),
]

AnchorName = Annotated[
    Optional[str],
    Field(default=None, description="Section anchor to return instead of the whole page"),
]

CharOffset = Annotated[
    int,
    Field(default=0, ge=0, description="Character offset to start reading from"),
]

WindowLimit = Annotated[
    Optional[int],
    Field(
        default=None,
        ge=1,
        le=MAX_WINDOW_CHARS,
        description="Maximum characters to return (default 12000).",
    ),
]
