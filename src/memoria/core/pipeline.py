"""File discovery and ingest orchestration"""

import logging
from pathlib import Path

from sqlmodel import Session

from memoria.crud.documents import commit_doc


logger = logging.getLogger(__name__)

MD_EXTENSIONS = {'.md', '.mdx'}


def discover_files(path: Path) -> list[Path]:
    """Return sorted .md/.mdx files under path, or [path] if a single file."""
    if path.is_file():
        return [path] if path.suffix in MD_EXTENSIONS else []
    return sorted(p for p in path.rglob('*') if p.suffix in MD_EXTENSIONS)


def run_ingest(
    engine,
    path: str,
    owner_id: str,
    max_documents: int,
    max_bytes: int,
    ) -> tuple[dict[str, int], list[tuple[str, str]]]:
    """Commit every markdown file under path for owner_id in one transaction.

    Returns (counts, changes) where changes is a list of (status, handle) for
    created/updated docs. Any rejected file aborts the batch with nothing stored;
    the error is re-raised as RuntimeError naming the file.
    """
    files = discover_files(Path(path))
    counts = {"created": 0, "updated": 0, "unchanged": 0}
    changes = []
    with Session(engine) as session:
        for p in files:
            try:
                doc, status = commit_doc(
                    session, owner_id, p.as_posix(), p.read_text(encoding='utf-8'),
                    max_documents=max_documents, max_bytes=max_bytes,
                )
            except Exception as e:
                logger.debug("ingest aborted at %s", p, exc_info=True)
                raise RuntimeError(f"Failed to ingest {p}: {e}") from e
            counts[status] += 1
            if status != 'unchanged':
                changes.append((status, doc.compound_slug))
        session.commit()
    logger.info("ingested %d file(s) from %s", len(files), path)
    return counts, changes
