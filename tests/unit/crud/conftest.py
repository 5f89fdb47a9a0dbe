"""Shared fixtures for crud unit tests"""

import pytest
from sqlalchemy import create_engine
from sqlmodel import SQLModel, Session

from memoria.core.utils.hashing import byte_size, sha256
from memoria.crud.models import Document


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Fresh session per test; changes are not committed."""
    with Session(engine) as s:
        yield s


@pytest.fixture(name="add_doc")
def add_doc_fixture(session):
    """Insert a Document directly, bypassing commit_doc limits."""
    def _add(
        slug: str,
        suffix: str,
        title: str = "Untitled",
        tags: list[str] = None,
        updated: int = 0,
        owner_id: str = "alice",
        ) -> Document:
        body = f"# {title}\n"
        doc = Document(
            owner_id=owner_id,
            path=f"docs/{slug}-{suffix}.md",
            title=title,
            body=body,
            tags=tags or [],
            slug=slug,
            suffix=suffix,
            updated=updated,
            size_bytes=byte_size(body),
            hash=sha256(body),
        )
        session.add(doc)
        session.flush()
        return doc
    return _add
