"""CLI command implementations"""

import json
from datetime import datetime
from typing import Annotated, Optional

import typer
from pydantic import ValidationError
from sqlmodel import Session

from memoria.config import Settings, load_config
from memoria.core.pipeline import run_ingest
from memoria.core.retrieval import (
    SearchParams,
    document_payload,
    format_document,
    format_search_results,
    to_agent_result,
)
from memoria.crud.database import init_db, make_engine, reset_db
from memoria.crud.documents import get_by_handle, list_documents, search_documents
from memoria.errors import MemoriaError
from memoria.logging_config import setup_logging


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling, then configure logging."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    setup_logging(settings.log_level)
    return settings


def _engine(settings: Settings):
    engine = make_engine(settings.db_url)
    init_db(engine)
    return engine


def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate all tables")] = False,
    ):
    """Initialize database schema. Use --reset to clear existing data."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    if reset:
        reset_db(engine)
        typer.echo("Existing data cleared.")
    else:
        init_db(engine)
    typer.echo(f"Database initialized at: {settings.db_url}")


def ingest_cmd(
    path: Annotated[str, typer.Argument(help="Markdown file or directory to load")],
    owner: Annotated[Optional[str], typer.Option("--owner", help="Owner the documents belong to")] = None,
    ):
    """Load .md/.mdx files into the store, parsing frontmatter for title, tags, and status."""
    settings = _settings(overrides={"owner_id": owner})
    engine = _engine(settings)
    try:
        counts, changes = run_ingest(
            engine, path, settings.owner_id, settings.max_documents, settings.max_document_bytes,
        )
    except RuntimeError as e:
        _fail("Ingest failed", e)
    for status, handle in changes:
        typer.echo(f"  {status}: {handle}")
    typer.echo(
        f"Ingest complete - "
        f"{counts['created']} created, "
        f"{counts['updated']} updated, "
        f"{counts['unchanged']} unchanged"
    )


def list_cmd(
    owner: Annotated[Optional[str], typer.Option("--owner", help="Owner whose documents to list")] = None,
    ):
    """List stored documents, most recently updated first."""
    settings = _settings(overrides={"owner_id": owner})
    engine = _engine(settings)
    with Session(engine) as session:
        docs = list_documents(session, settings.owner_id)
        rows = [(d.compound_slug, d.title, d.status, d.updated) for d in docs]
    if not rows:
        typer.echo("No documents found in database.")
        raise typer.Exit(1)
    for handle, title, status, updated in rows:
        stamp = datetime.fromtimestamp(updated / 1000).strftime('%Y-%m-%d %H:%M')
        typer.echo(f"{handle}\t{title}\t{status}\t{stamp}")


def search_cmd(
    query: Annotated[str, typer.Argument(help="Search terms (matched against slug, title, and tags)")],
    limit: Annotated[Optional[int], typer.Option("--limit", "-n", help="Max results (1-10)")] = None,
    sort: Annotated[str, typer.Option("--sort", help="relevance or recency")] = "relevance",
    as_json: Annotated[bool, typer.Option("--json", help="Print agent result envelopes as JSON")] = False,
    owner: Annotated[Optional[str], typer.Option("--owner", help="Owner whose documents to search")] = None,
    ):
    """Search documents by slug, title, and tags."""
    settings = _settings(overrides={"owner_id": owner})
    try:
        params = SearchParams(
            query=query,
            limit=limit if limit is not None else settings.search_limit,
            sort=sort,
        )
    except ValidationError as e:
        _fail("Invalid search parameters", e)

    engine = _engine(settings)
    with Session(engine) as session:
        ranked = search_documents(session, settings.owner_id, params.query, params.limit, params.sort)
    results = [to_agent_result(r) for r in ranked]

    if as_json:
        typer.echo(json.dumps(results, indent=2))
    else:
        typer.echo(format_search_results(results))


def get_cmd(
    handle: Annotated[str, typer.Argument(help="Document handle, e.g. design-doc-abc123")],
    max_bytes: Annotated[Optional[int], typer.Option("--max-bytes", min=1, help="Truncate the body at this many bytes")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Print the document envelope as JSON")] = False,
    owner: Annotated[Optional[str], typer.Option("--owner", help="Owner the document belongs to")] = None,
    ):
    """Print a document's body by handle."""
    settings = _settings(overrides={"owner_id": owner})
    engine = _engine(settings)
    try:
        with Session(engine) as session:
            doc = get_by_handle(session, settings.owner_id, handle)
            payload = document_payload(doc.body, doc.updated, max_bytes if max_bytes is not None else settings.default_max_bytes)
    except MemoriaError as e:
        _fail(str(e))

    if as_json:
        typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        typer.echo(format_document(handle, payload))
