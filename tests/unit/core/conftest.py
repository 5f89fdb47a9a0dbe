"""Shared fixtures for core unit tests"""

import pytest

from memoria.core.models import SearchableDocument


def make_doc(
    slug: str,
    suffix: str = "",
    title: str = "",
    tags: list[str] = None,
    updated: int = 0,
    size_bytes: int = 0,
    ) -> SearchableDocument:
    """Build a SearchableDocument with an id derived from its handle."""
    handle = f"{slug}-{suffix}" if suffix else slug
    return SearchableDocument(
        id=f"id-{handle}",
        slug=slug,
        suffix=suffix,
        title=title,
        tags=tags or [],
        updated=updated,
        size_bytes=size_bytes,
    )


SAMPLE_FM_MD = """\
---
title: Test Doc
tags: [a, b]
status: published
updated: 1700000000000
---

# Title

Body content.
"""


@pytest.fixture(name="meeting_docs")
def meeting_docs_fixture():
    return [
        make_doc("meeting-notes", "abc123", "Meeting Notes", updated=200),
        make_doc("meeting-notes", "xyz789", "Old Meeting", updated=100),
    ]


@pytest.fixture(name="workspace_docs")
def workspace_docs_fixture():
    """A mixed workspace of six documents with distinct update times."""
    return [
        make_doc("design-review", "ef901234", "Design Review", ["design", "process"], updated=600),
        make_doc("api-guide", "a1b2c3d4", "API Guide", ["python", "api"], updated=500),
        make_doc("roadmap", "r00dmap1", "Product Roadmap 2025", ["planning"], updated=400),
        make_doc("retro-notes", "c0ffee00", "Sprint Retro Notes", ["process", "team"], updated=300),
        make_doc("python-tips", "deadbeef", "Python Tips", ["pythonic", "tips"], updated=200),
        make_doc("onboarding", "0n0b0a4d", "Onboarding Checklist", [], updated=100),
    ]


@pytest.fixture(name="make_doc")
def make_doc_fixture():
    return make_doc
