"""Response envelope shared by the documentation tools.

Every tool returns ``{"ok": ..., "data": ..., "error": ...}``. On success
``data`` is a :class:`DocsData` describing where the entries came from and
what the caller asked for:

- python_docs: source ``index``, action ``search``; entries are DocEntry rows
- fetch_python_doc: source ``document``, action ``fetch``; one entry holding
  the rendered window
- suggest_python_doc_types: source ``types``, action ``suggest``; entries are
  ranked type names

Failures set ``ok=false`` and carry a :class:`ToolError`; fetch failures use
the ``fetch_failed`` code (see ``formatting.build_fetch_error``).
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator

# Where a payload's entries come from: the entry index, one converted page,
# or the type taxonomy derived from the search index.
DocsSource = Literal["index", "document", "types"]

# What the caller asked for, one per tool.
DocsAction = Literal["search", "fetch", "suggest"]


class ToolError(BaseModel):
    """Machine-readable failure attached to an ``ok=false`` response."""

    code: str = Field(description="Stable error code, e.g. 'fetch_failed'")
    message: str = Field(description="One-line summary for the caller")
    details: dict[str, Any] | None = Field(
        default=None, description="Context such as url, reason, version and path"
    )


class ToolEnvelope(BaseModel):
    """Top-level tool response; ``error`` is present exactly when ``ok`` is false."""

    ok: bool = Field(description="Whether the lookup succeeded")
    data: Any | None = Field(default=None, description="DocsData payload on success")
    error: ToolError | None = Field(default=None, description="Failure details")

    @model_validator(mode="after")
    def _validate_coherence(self) -> "ToolEnvelope":
        if self.ok and self.error is not None:
            raise ValueError("ok=true responses must not include error")
        if not self.ok and self.error is None:
            raise ValueError("ok=false responses must include error")
        return self


class DocsData(BaseModel):
    """Successful documentation payload: rows plus a free-form summary."""

    source: DocsSource
    action: DocsAction
    entries: list[dict[str, Any]]
    summary: dict[str, Any] = Field(
        default_factory=dict,
        description="Counts, pagination offsets and the rendered text message",
    )


def build_ok(data: Any) -> dict[str, Any]:
    return ToolEnvelope(ok=True, data=data).model_dump(exclude_none=True)


def build_error(
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
    *,
    data: Any | None = None,
) -> dict[str, Any]:
    """Build an ``ok=false`` response; ``data`` may carry partial results."""
    return ToolEnvelope(
        ok=False,
        data=data,
        error=ToolError(code=code, message=message, details=details),
    ).model_dump(exclude_none=True)


def build_docs_data(
    *,
    source: DocsSource,
    action: DocsAction,
    entries: list[dict[str, Any]],
    summary: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Validate and serialize a DocsData payload for ``build_ok``."""
    return DocsData(
        source=source,
        action=action,
        entries=entries,
        summary=summary or {},
    ).model_dump(exclude_none=True)
