"""Document persistence: owner-scoped lookup, search, and frontmatter-driven commits"""

import logging
import time
from pathlib import Path
from uuid import uuid4

from sqlmodel import Session, select

from memoria.core.frontmatter import parse_frontmatter, validate_and_fill_frontmatter
from memoria.core.models import RankedResult, SortOrder, ValidatedFrontmatter
from memoria.core.retrieval import parse_doc_handle
from memoria.core.search import DEFAULT_LIMIT, MAX_LIMIT, rank
from memoria.core.utils.hashing import byte_size, sha256
from memoria.core.utils.slug import generate_document_slug, generate_slug_and_suffix
from memoria.crud.models import Document
from memoria.errors import DocumentLimitError, DocumentNotFound, DocumentTooLargeError


logger = logging.getLogger(__name__)

DOCUMENT_LIMIT = MAX_LIMIT
MAX_DOCUMENT_SIZE_BYTES = 800 * 1024


def _now_ms() -> int:
    return int(time.time() * 1000)


def list_documents(session: Session, owner_id: str, limit: int | None = None) -> list[Document]:
    """Return the owner's documents, most recently updated first."""
    stmt = select(Document).where(Document.owner_id == owner_id).order_by(Document.updated.desc())
    if limit is not None:
        stmt = stmt.limit(limit)
    return list(session.exec(stmt).all())


def get_by_path(session: Session, owner_id: str, path: str) -> Document | None:
    """Return the owner's Document loaded from path, or None if not found."""
    return session.exec(
        select(Document).where(Document.owner_id == owner_id).where(Document.path == path)
    ).one_or_none()


def get_by_suffix(session: Session, owner_id: str, suffix: str) -> Document | None:
    """Return the owner's Document with the given suffix; other owners' documents are invisible."""
    return session.exec(
        select(Document).where(Document.owner_id == owner_id).where(Document.suffix == suffix)
    ).first()


def get_by_handle(session: Session, owner_id: str, handle: str) -> Document:
    """Resolve a '<slug>-<suffix>' handle. Raises InvalidHandleError or DocumentNotFound."""
    _, suffix = parse_doc_handle(handle)
    doc = get_by_suffix(session, owner_id, suffix)
    if doc is None:
        raise DocumentNotFound(handle)
    return doc


def search_documents(
    session: Session,
    owner_id: str,
    query: str,
    limit: int | None = DEFAULT_LIMIT,
    sort: SortOrder = "relevance",
    ) -> list[RankedResult]:
    """Rank the owner's documents (at most DOCUMENT_LIMIT are considered) against query."""
    docs = list_documents(session, owner_id, limit=DOCUMENT_LIMIT)
    results = rank([d.to_searchable() for d in docs], query, limit=limit, sort=sort)
    logger.debug("search %r over %d document(s) -> %d result(s)", query, len(docs), len(results))
    return results


def extract_fields(raw: str, fallback_title: str, now: int) -> ValidatedFrontmatter:
    """Derive title/tags/status/updated for a body.

    Bodies starting with '---' must carry a valid frontmatter block; the parse
    and validation errors propagate unchanged. Other bodies take fallback_title.
    """
    if raw.startswith('---'):
        return validate_and_fill_frontmatter(parse_frontmatter(raw), now=now)
    return ValidatedFrontmatter(title=fallback_title, updated=now)


def commit_doc(
    session: Session,
    owner_id: str,
    path: str,
    raw: str,
    max_documents: int = DOCUMENT_LIMIT,
    max_bytes: int = MAX_DOCUMENT_SIZE_BYTES,
    now: int | None = None,
    ) -> tuple[Document, str]:
    """Create or update the owner's document stored for path.

    Returns (doc, status) where status is 'created', 'updated', or 'unchanged'.
    Flushes but does not commit; caller controls the transaction. Nothing is
    written when a limit is exceeded or the frontmatter is rejected.
    """
    size = byte_size(raw)
    if size > max_bytes:
        raise DocumentTooLargeError(size, max_bytes)

    digest = sha256(raw)
    doc = get_by_path(session, owner_id, path)
    if doc and doc.hash == digest:
        return doc, 'unchanged'

    now = now if now is not None else _now_ms()
    fields = extract_fields(raw, fallback_title=Path(path).stem, now=now)

    if doc:
        if fields.title != doc.title:
            # Suffix is kept so existing handles keep resolving.
            doc.slug = generate_document_slug(fields.title)
        doc.title = fields.title
        doc.tags = list(fields.tags)
        doc.status = fields.status
        doc.updated = int(fields.updated)
        doc.body = raw
        doc.size_bytes = size
        doc.hash = digest
        doc.revision_token = uuid4().hex
        session.add(doc)
        session.flush()
        logger.info("updated %s (%s)", doc.compound_slug, path)
        return doc, 'updated'

    existing = list_documents(session, owner_id)
    if len(existing) >= max_documents:
        raise DocumentLimitError(max_documents)

    slug, suffix = generate_slug_and_suffix(fields.title, {d.suffix for d in existing})
    doc = Document(
        owner_id=owner_id,
        path=path,
        title=fields.title,
        body=raw,
        tags=list(fields.tags),
        slug=slug,
        suffix=suffix,
        status=fields.status,
        updated=int(fields.updated),
        size_bytes=size,
        hash=digest,
    )
    session.add(doc)
    session.flush()
    logger.info("created %s (%s)", doc.compound_slug, path)
    return doc, 'created'
