"""Token-based ranking of a caller's documents over compound slug, title, and tags"""

import locale
import re
from typing import Iterable

from memoria.core.models import RankedResult, SearchableDocument, SortOrder


MAX_LIMIT = 10
DEFAULT_LIMIT = 5

# (exact, prefix, substring) weights per field
SLUG_WEIGHTS = (100, 60, 30)
TITLE_WEIGHTS = (50, 25, 10)
TAG_EXACT = 15
TAG_CONTAINS = 10
MATCH_BONUS = 5

_TOKEN_SPLIT_RE = re.compile(r'[-\s]+')


def tokenize(query: str) -> list[str]:
    """Lowercase query and split on whitespace/hyphen runs. Duplicates are kept."""
    return [t for t in _TOKEN_SPLIT_RE.split(query.lower()) if t]


def _match_text(text: str, token: str, weights: tuple[int, int, int]) -> int:
    """Score token against one lowercased text field; 0 when it does not occur."""
    exact, prefix, contains = weights
    if text == token:
        return exact
    if text.startswith(token):
        return prefix
    if token in text:
        return contains
    return 0


def _match_tags(tags: list[str], token: str) -> int:
    if token in tags:
        return TAG_EXACT
    if any(token in tag for tag in tags):
        return TAG_CONTAINS
    return 0


def score_token(slug: str, title: str, tags: list[str], token: str) -> int | None:
    """Sum of field scores for one token plus the match bonus, or None if no field matched."""
    field_scores = (
        _match_text(slug, token, SLUG_WEIGHTS),
        _match_text(title, token, TITLE_WEIGHTS),
        _match_tags(tags, token),
    )
    if not any(field_scores):
        return None
    return sum(field_scores) + MATCH_BONUS


def score_document(doc: SearchableDocument, tokens: list[str]) -> int | None:
    """Total score for doc, or None when any token matches none of its fields."""
    slug = doc.compound_slug.lower()
    title = doc.title.lower()
    tags = [t.lower() for t in doc.tags]

    token_scores = [score_token(slug, title, tags, token) for token in tokens]
    if any(s is None for s in token_scores):
        return None
    return sum(token_scores)


def _clamp_limit(limit: int | None) -> int:
    if limit is None:
        return DEFAULT_LIMIT
    return max(1, min(limit, MAX_LIMIT))


def _to_result(doc: SearchableDocument) -> RankedResult:
    return RankedResult(
        id=doc.id,
        compound_slug=doc.compound_slug,
        title=doc.title,
        updated=doc.updated,
        size_bytes=doc.size_bytes,
    )


def rank(
    documents: Iterable[SearchableDocument],
    query: str,
    limit: int | None = DEFAULT_LIMIT,
    sort: SortOrder = "relevance",
    ) -> list[RankedResult]:
    """Rank documents against query and return at most limit results.

    A blank query skips scoring and returns the newest documents first.
    Otherwise every query token must match the slug, title, or a tag of a
    document for it to be returned. Relevance order is score desc, then
    updated desc, then compound slug asc; recency order is updated desc only.
    """
    documents = list(documents)
    limit = _clamp_limit(limit)

    if not query.strip():
        newest = sorted(documents, key=lambda d: d.updated, reverse=True)
        return [_to_result(d) for d in newest[:limit]]

    tokens = tokenize(query)
    scored = []
    for doc in documents:
        score = score_document(doc, tokens)
        if score is not None:
            scored.append((score, doc))

    if sort == "recency":
        scored.sort(key=lambda pair: pair[1].updated, reverse=True)
    else:
        # slug ties collate under the process LC_COLLATE; code-point order in the default C locale
        scored.sort(key=lambda pair: (-pair[0], -pair[1].updated, locale.strxfrm(pair[1].compound_slug)))

    return [_to_result(doc) for _, doc in scored[:limit]]
