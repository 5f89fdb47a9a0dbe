"""Frontmatter block extraction, line-grammar parsing, validation, and rendering"""

import math
import re
import time

from memoria.core.models import ParsedFrontmatter, Scalar, ValidatedFrontmatter
from memoria.errors import FrontmatterFormatError, FrontmatterValidationError


FRONTMATTER_RE = re.compile(r'\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)', re.DOTALL | re.MULTILINE)
_LINE_SPLIT_RE = re.compile(r'\r?\n')

# Literals accepted by a JavaScript-style Number() conversion.
_DECIMAL_RE = re.compile(r'[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?')
_RADIX_RE = re.compile(r'0(?:[xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)')

DEFAULT_STATUS = "draft"


def _to_number(text: str) -> int | float | None:
    """Return text as a finite number, or None when it is not a numeric literal."""
    if _RADIX_RE.fullmatch(text):
        return int(text, 0)
    if not _DECIMAL_RE.fullmatch(text):
        return None
    if not any(c in text for c in '.eE'):
        return int(text)
    value = float(text)
    return value if math.isfinite(value) else None


def parse_scalar(text: str) -> Scalar:
    """Coerce a raw frontmatter value into bool, None, number, or string."""
    text = text.strip()
    if text == 'true':
        return True
    if text == 'false':
        return False
    if text in ('', 'null'):
        return None
    if len(text) >= 2 and text[0] == text[-1] and text[0] in ('"', "'"):
        return text[1:-1]
    number = _to_number(text)
    return text if number is None else number


def split_frontmatter(body: str) -> tuple[str, str]:
    """Return (block_text, rest). block_text is '' when body has no leading block."""
    m = FRONTMATTER_RE.match(body)
    if not m:
        return '', body
    return m.group(1), body[m.end():]


def _parse_line(line: str, data: ParsedFrontmatter, array_key: str | None) -> str | None:
    """Apply one block line to data and return the array key for the next line."""
    stripped = line.strip()
    if not stripped:
        return None

    if stripped.startswith('- '):
        if array_key is None:
            raise FrontmatterFormatError("List item without a preceding key", line)
        data[array_key].append(parse_scalar(stripped[2:]))
        return array_key

    if line[0] in ' \t':
        raise FrontmatterFormatError("Unexpected indentation", line)

    key, sep, value = stripped.partition(':')
    if not sep:
        raise FrontmatterFormatError("Unable to parse line", line)
    key, value = key.strip(), value.strip()
    if not key:
        raise FrontmatterFormatError("Missing key", line)

    if not value:
        data[key] = []
        return key
    if value.startswith('[') and value.endswith(']'):
        inner = value[1:-1]
        data[key] = [parse_scalar(part) for part in inner.split(',')] if inner.strip() else []
        return None
    data[key] = parse_scalar(value)
    return None


def parse_frontmatter(body: str) -> ParsedFrontmatter:
    """Parse the leading ---delimited block of body into a key/value mapping.

    Raises FrontmatterFormatError when the block is missing or a line breaks the grammar.
    """
    m = FRONTMATTER_RE.match(body)
    if not m:
        raise FrontmatterFormatError("Document must begin with a '---' delimited frontmatter block")

    data: ParsedFrontmatter = {}
    array_key = None
    for line in _LINE_SPLIT_RE.split(m.group(1)):
        array_key = _parse_line(line, data, array_key)
    return data


def _normalize_tags(value) -> list[str]:
    """Trim tags and drop empties. Accepts a list of strings or a comma-separated string."""
    if isinstance(value, list):
        for item in value:
            if not isinstance(item, str):
                raise FrontmatterValidationError("tags", f"expected strings, got {type(item).__name__}")
        items = value
    elif isinstance(value, str):
        items = value.split(',')
    else:
        return []
    return [t.strip() for t in items if t.strip()]


def _resolve_updated(value, now: int | None) -> int | float:
    if isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value):
        return value
    if isinstance(value, str):
        number = _to_number(value.strip())
        if number is not None:
            return number
    return now if now is not None else int(time.time() * 1000)


def validate_and_fill_frontmatter(parsed: ParsedFrontmatter, now: int | None = None) -> ValidatedFrontmatter:
    """Check required fields and fill defaults for status and updated.

    now is the fallback updated timestamp in ms; the current time when omitted.
    Raises FrontmatterValidationError when title is missing/blank or tags hold non-strings.
    """
    title = parsed.get('title')
    if not isinstance(title, str) or not title.strip():
        raise FrontmatterValidationError("title", "must be a non-empty string")

    status = parsed.get('status')
    return ValidatedFrontmatter(
        title=title.strip(),
        tags=_normalize_tags(parsed.get('tags')),
        status=status.strip() if isinstance(status, str) and status.strip() else DEFAULT_STATUS,
        updated=_resolve_updated(parsed.get('updated'), now),
    )


def _render_scalar(text: str) -> str:
    """Quote text when the parser would otherwise read it back as something else."""
    bracketed = text.startswith('[') and text.endswith(']')
    if bracketed or parse_scalar(text) != text:
        return f'"{text}"'
    return text


def render_frontmatter(fm: ValidatedFrontmatter, body: str = '') -> str:
    """Emit fm as a canonical frontmatter block, followed by body."""
    lines = ['---', f"title: {_render_scalar(fm.title)}"]
    if fm.tags:
        lines.append('tags:')
        lines.extend(f"- {_render_scalar(tag)}" for tag in fm.tags)
    else:
        lines.append('tags: []')
    lines.append(f"status: {_render_scalar(fm.status)}")
    lines.append(f"updated: {fm.updated}")
    lines.append('---')
    return '\n'.join(lines) + '\n' + body
