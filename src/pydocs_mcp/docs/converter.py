"""HTML to Markdown conversion for DevDocs pages.

DevDocs serves pre-cleaned Sphinx HTML fragments. The converter walks the
BeautifulSoup tree and renders the subset of HTML those pages use:

- ATX headings, paragraphs, links, bold/italic/strikethrough, inline code
- fenced code blocks (``data-language`` becomes the fence info string)
- bullet/numbered lists, definition lists, blockquotes, simple tables
- Python signatures (``<dt class="sig">``) as bold lines

It also builds an AnchorIndex so callers can jump to a single section. Anchors
come from headings and from signatures that carry an ``id`` (the fragment
DevDocs index paths point at, e.g. ``library/json#json.dumps``). Their offsets
are taken from markers placed while rendering, never by re-reading the
Markdown, so body text that happens to start with ``#`` is not a heading.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
import re
from typing import Literal

from bs4 import BeautifulSoup, Comment, Declaration, Doctype, NavigableString, ProcessingInstruction, Tag

from pydocs_mcp.docs.models import Anchor, AnchorIndex

REMOVED_TAGS = ["script", "style", "nav", "footer", "header"]

HEADING_TAGS = {"h1": 1, "h2": 2, "h3": 3, "h4": 4, "h5": 5, "h6": 6}

BLOCK_TAGS = {
    "address", "article", "aside", "body", "dd", "details", "div", "dl", "fieldset",
    "figcaption", "figure", "form", "html", "main", "p", "section", "summary",
}

WHITESPACE_PATTERN = re.compile(r"\s+")
FENCE_PATTERN = re.compile(r"^\s*```")
SLUG_PATTERN = re.compile(r"[^a-z0-9]+")

# Private-use code point; wraps the section number at the start of each
# anchored block in the rendered text and is removed before returning.
SECTION_MARK = "\ue000"
SECTION_MARK_PATTERN = re.compile(f"{SECTION_MARK}(\\d+){SECTION_MARK}")


@dataclass(frozen=True)
class ConvertedDoc:
    markdown: str
    anchor_index: AnchorIndex


@dataclass(frozen=True)
class Section:
    """A heading or an id-carrying signature seen while rendering."""

    kind: Literal["heading", "signature"]
    level: int
    text: str
    anchor_id: str | None
    offset: int = 0


class _MarkdownRenderer:
    """Single-use renderer; records anchored blocks while rendering."""

    def __init__(self) -> None:
        self.sections: list[Section] = []

    def mark(self, section: Section) -> str:
        self.sections.append(section)
        return f"{SECTION_MARK}{len(self.sections) - 1}{SECTION_MARK}"

    def render(self, node) -> str:
        if isinstance(node, (Comment, Declaration, Doctype, ProcessingInstruction)):
            return ""
        if isinstance(node, NavigableString):
            return WHITESPACE_PATTERN.sub(" ", str(node).replace(SECTION_MARK, ""))
        if not isinstance(node, Tag):
            return ""

        name = node.name
        if name in HEADING_TAGS:
            return self._heading(node, HEADING_TAGS[name])
        if name == "pre":
            return self._code_block(node)
        if name in ("ul", "ol"):
            return self._list(node, ordered=name == "ol")
        if name == "table":
            return self._table(node)
        if name == "blockquote":
            inner = _tidy(self.children(node))
            quoted = "\n".join(f"> {line}" if line else ">" for line in inner.split("\n"))
            return f"\n\n{quoted}\n\n"
        if name == "dt":
            text = _inline(self.children(node))
            if not text:
                return ""
            anchor_id = node.get("id")
            mark = self.mark(Section("signature", 0, text, str(anchor_id))) if anchor_id else ""
            return f"\n\n{mark}**{text}**\n\n"
        if name == "br":
            return "\n"
        if name == "hr":
            return "\n\n---\n\n"
        if name == "a":
            if "headerlink" in (node.get("class") or []):
                return ""
            text = _inline(self.children(node))
            href = node.get("href")
            if text and href:
                return f"[{text}]({href})"
            return text
        if name in ("strong", "b"):
            return _wrap(self.children(node), "**")
        if name in ("em", "i"):
            return _wrap(self.children(node), "_")
        if name in ("del", "s", "strike"):
            return _wrap(self.children(node), "~~")
        if name in ("code", "kbd", "samp", "tt"):
            text = node.get_text()
            return f"`{text}`" if text else ""
        if name == "img":
            alt = node.get("alt") or ""
            src = node.get("src")
            return f"![{alt}]({src})" if src else alt
        if name in BLOCK_TAGS:
            inner = self.children(node)
            return f"\n\n{inner.strip()}\n\n" if name == "p" else f"\n\n{inner}\n\n"
        return self.children(node)

    def children(self, node: Tag) -> str:
        return "".join(self.render(child) for child in node.children)

    def _heading(self, node: Tag, level: int) -> str:
        text = _inline(self.children(node)).rstrip("¶").strip()
        if not text:
            return ""
        mark = self.mark(Section("heading", level, text, _heading_id(node)))
        return f"\n\n{mark}{'#' * level} {text}\n\n"

    def _code_block(self, node: Tag) -> str:
        language = node.get("data-language") or ""
        code = node.get_text().strip("\n")
        return f"\n\n```{language}\n{code}\n```\n\n"

    def _list(self, node: Tag, ordered: bool) -> str:
        items: list[str] = []
        number = 1
        for child in node.find_all("li", recursive=False):
            prefix = f"{number}. " if ordered else "- "
            number += 1
            content = re.sub(r"\n{2,}", "\n", _tidy(self.children(child)))
            lines = content.split("\n")
            indent = " " * len(prefix)
            rendered = [prefix + lines[0]] + [indent + line if line else "" for line in lines[1:]]
            items.append("\n".join(rendered))
        if not items:
            return ""
        return "\n\n" + "\n".join(items) + "\n\n"

    def _table(self, node: Tag) -> str:
        rows: list[list[str]] = []
        for row in node.find_all("tr"):
            cells = [
                _inline(self.children(cell)).replace("|", "\\|")
                for cell in row.find_all(["th", "td"], recursive=False)
            ]
            if cells:
                rows.append(cells)
        if not rows:
            return ""
        width = max(len(row) for row in rows)
        rows = [row + [""] * (width - len(row)) for row in rows]
        lines = ["| " + " | ".join(rows[0]) + " |", "| " + " | ".join(["---"] * width) + " |"]
        lines.extend("| " + " | ".join(row) + " |" for row in rows[1:])
        return "\n\n" + "\n".join(lines) + "\n\n"


def _inline(text: str) -> str:
    return WHITESPACE_PATTERN.sub(" ", text).strip()


def _wrap(text: str, marker: str) -> str:
    stripped = text.strip()
    if not stripped:
        return text
    return f"{marker}{stripped}{marker}"


def _tidy(markdown: str) -> str:
    """Right-strip lines, collapse blank runs outside code fences, trim."""
    lines: list[str] = []
    in_fence = False
    for line in markdown.split("\n"):
        if FENCE_PATTERN.match(line):
            in_fence = not in_fence
            lines.append(line.strip())
            continue
        if in_fence:
            lines.append(line)
            continue
        line = line.rstrip()
        if not line.strip():
            line = ""
        elif not lines or not lines[-1]:
            # block starts carry the separator space of the text node before them
            line = line.lstrip()
        if not line and lines and not lines[-1]:
            continue
        lines.append(line)
    return "\n".join(lines).strip()


def _heading_id(node: Tag) -> str | None:
    anchor_id = node.get("id")
    if anchor_id:
        return str(anchor_id)
    parent = node.parent
    if isinstance(parent, Tag) and parent.name == "section" and parent.get("id"):
        first_heading = parent.find(list(HEADING_TAGS), recursive=False)
        if first_heading is node:
            return str(parent["id"])
    return None


def slugify(text: str) -> str:
    return SLUG_PATTERN.sub("-", text.lower()).strip("-") or "section"


def _place_sections(marked: str, sections: list[Section]) -> tuple[str, list[Section]]:
    """Remove section marks from marked text and record where each one stood."""
    parts: list[str] = []
    placed: list[Section] = []
    cursor = length = 0
    for match in SECTION_MARK_PATTERN.finditer(marked):
        chunk = marked[cursor:match.start()]
        parts.append(chunk)
        length += len(chunk)
        placed.append(replace(sections[int(match.group(1))], offset=length))
        cursor = match.end()
    parts.append(marked[cursor:])
    return "".join(parts), placed


def build_anchor_index(markdown: str, sections: list[Section]) -> AnchorIndex:
    """Index placed headings and signatures of markdown as navigable sections.

    A heading section runs to the next heading of the same or a higher level;
    a signature section runs to the next heading or signature. Names come
    from the source ids when known, otherwise from a slug of the heading
    text; duplicates get a numeric suffix. Signatures sit one level below
    the heading that encloses them.
    """
    anchors: list[Anchor] = []
    used: dict[str, int] = {}
    stack: list[tuple[int, str]] = []
    for position, section in enumerate(sections):
        name = section.anchor_id or slugify(section.text)
        if name in used:
            used[name] += 1
            name = f"{name}-{used[name]}"
        else:
            used[name] = 1

        end = len(markdown)
        for following in sections[position + 1:]:
            if section.kind == "signature" or (
                following.kind == "heading" and following.level <= section.level
            ):
                end = following.offset
                break

        if section.kind == "heading":
            while stack and stack[-1][0] >= section.level:
                stack.pop()
            parent = stack[-1][1] if stack else None
            stack.append((section.level, name))
            level = section.level
        else:
            parent = stack[-1][1] if stack else None
            level = min(stack[-1][0] + 1, 6) if stack else 1

        anchors.append(
            Anchor(
                name=name,
                heading=section.text,
                level=level,
                start_offset=section.offset,
                end_offset=end,
                parent_anchor=parent,
            )
        )

    return AnchorIndex(anchors=anchors, total_length=len(markdown))


def html_to_markdown(html: str) -> ConvertedDoc:
    """Convert a DevDocs HTML page to Markdown plus its anchor index."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup.find_all(REMOVED_TAGS):
        tag.decompose()

    renderer = _MarkdownRenderer()
    markdown, sections = _place_sections(_tidy(renderer.children(soup)), renderer.sections)
    return ConvertedDoc(markdown=markdown, anchor_index=build_anchor_index(markdown, sections))
