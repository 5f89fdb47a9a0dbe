"""Slug and suffix generation for document handles"""

import re
import unicodedata
from uuid import uuid4


SUFFIX_LENGTH = 8
MAX_SUFFIX_ATTEMPTS = 20


def slugify(text: str) -> str:
    """Convert text to a lowercase, hyphen-separated URL-safe slug (accents folded)."""
    text = unicodedata.normalize('NFKD', text.lower())
    text = ''.join(c for c in text if not unicodedata.combining(c))
    return re.sub(r'[^a-z0-9]+', '-', text).strip('-')


def generate_document_slug(title: str) -> str:
    """Slug for a document title; 'untitled' when nothing slug-safe remains."""
    return slugify(title) or 'untitled'


def generate_suffix(existing: set[str] | list[str] = ()) -> str:
    """Random 8-hex-char suffix not present in existing."""
    taken = set(existing)
    for _ in range(MAX_SUFFIX_ATTEMPTS):
        suffix = uuid4().hex[-SUFFIX_LENGTH:]
        if suffix not in taken:
            return suffix
    raise RuntimeError("Failed to generate a unique document suffix")


def generate_slug_and_suffix(title: str, existing_suffixes: set[str] | list[str] = ()) -> tuple[str, str]:
    """Return (slug, suffix) for a new document."""
    return generate_document_slug(title), generate_suffix(existing_suffixes)
