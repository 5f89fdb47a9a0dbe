"""Agent-facing retrieval boundary: request schemas, handle parsing, and response envelopes"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from memoria.core.frontmatter import split_frontmatter
from memoria.core.models import RankedResult, SortOrder
from memoria.core.search import DEFAULT_LIMIT, MAX_LIMIT
from memoria.errors import InvalidHandleError


DEFAULT_MAX_BYTES = 64 * 1024
ABSOLUTE_MAX_BYTES = 800 * 1024


class SearchParams(BaseModel):
    """Validated arguments of the search_documents tool."""
    query: str = Field(..., min_length=1, max_length=200)
    limit: int = Field(default=DEFAULT_LIMIT, ge=1, le=MAX_LIMIT)
    sort: SortOrder = "relevance"


def parse_doc_handle(handle: str) -> tuple[str, str]:
    """Split '<slug>-<suffix>' on the last hyphen. Raises InvalidHandleError."""
    slug, sep, suffix = handle.rpartition('-')
    if not sep or not suffix:
        raise InvalidHandleError(handle)
    return slug, suffix


def to_agent_result(result: RankedResult) -> dict[str, Any]:
    """Map a ranked result to the search tool's result envelope."""
    return {
        "doc_handle": result.compound_slug,
        "title": result.title,
        "updated": result.updated,
        "approx_size": result.size_bytes,
    }


def _truncate_utf8(text: str, max_bytes: int) -> tuple[str, int, bool]:
    """Return (text cut to max_bytes, full byte size, truncated flag). Partial characters are dropped."""
    raw = text.encode('utf-8')
    if len(raw) <= max_bytes:
        return text, len(raw), False
    return raw[:max_bytes].decode('utf-8', errors='ignore'), len(raw), True


def document_payload(body: str, updated: int, max_bytes: int | None = None) -> dict[str, Any]:
    """Build the get_document envelope for a stored body.

    max_bytes defaults to 64KB and is capped at 800KB. The frontmatter block is
    split off after truncation, so a cut inside the block leaves it in body.
    Raises ValueError when max_bytes is below 1.
    """
    if max_bytes is None:
        max_bytes = DEFAULT_MAX_BYTES
    elif max_bytes < 1:
        raise ValueError(f"max_bytes must be at least 1, got {max_bytes}")
    limit = min(max_bytes, ABSOLUTE_MAX_BYTES)
    text, full_size, is_truncated = _truncate_utf8(body, limit)
    frontmatter, rest = split_frontmatter(text)
    return {
        "frontmatter": frontmatter.rstrip('\r\n'),
        "body": rest,
        "updated": updated,
        "full_size": full_size,
        "is_truncated": is_truncated,
    }


def format_bytes(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


def _format_ms(ms: int) -> str:
    return datetime.fromtimestamp(ms / 1000).strftime('%Y-%m-%d %H:%M:%S')


def format_search_results(results: list[dict[str, Any]]) -> str:
    """Render agent result envelopes as a numbered text listing."""
    if not results:
        return "No documents matched your search."
    lines = [
        f"{i}. {r['title']} - handle: {r['doc_handle']} "
        f"(updated: {_format_ms(r['updated'])}, approx size: {format_bytes(r['approx_size'])})"
        for i, r in enumerate(results, start=1)
    ]
    return "\n".join(["Search results:", *lines])


def format_document(handle: str, payload: dict[str, Any]) -> str:
    """Render a get_document envelope as a header line followed by the body."""
    header = (
        f'Document "{handle}" (updated: {_format_ms(payload["updated"])}, '
        f'full size: {format_bytes(payload["full_size"])})'
    )
    if payload["is_truncated"]:
        return f"{header}\nWARNING: Response truncated.\n\n{payload['body']}"
    return f"{header}\n\n{payload['body']}"
