"""Integration tests for the memoria CLI (init, ingest, list, search, get)"""

import json

import pytest
from typer.testing import CliRunner

from memoria.cli.cli import app


runner = CliRunner()


@pytest.fixture(name="workspace")
def workspace_fixture(tmp_path, monkeypatch):
    """A working directory with its own database and two notes."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("MEMORIA_DB_URL", f"sqlite:///{tmp_path}/test.db")
    monkeypatch.delenv("MEMORIA_OWNER_ID", raising=False)
    notes = tmp_path / "notes"
    notes.mkdir()
    (notes / "design.md").write_text(
        "---\ntitle: Design Review\ntags: [design, process]\nupdated: 2000\n---\n# Design\n\nDetails.\n"
    )
    (notes / "python.md").write_text(
        "---\ntitle: Python Tips\ntags:\n- python\nupdated: 1000\n---\nUse pathlib.\n"
    )
    return tmp_path


def _ingest(*extra):
    return runner.invoke(app, ["ingest", "notes", *extra])


def _search_json(*args):
    result = runner.invoke(app, ["search", *args, "--json"])
    assert result.exit_code == 0, result.output
    return json.loads(result.stdout)


def test_init_cmd(workspace):
    """init creates the schema and reports the database URL."""
    result = runner.invoke(app, ["init"])
    assert result.exit_code == 0, result.output
    assert "Database initialized" in result.output


def test_init_cmd_reset(workspace):
    """init --reset clears previously ingested documents."""
    _ingest()
    result = runner.invoke(app, ["init", "--reset"])
    assert result.exit_code == 0, result.output
    assert runner.invoke(app, ["list"]).exit_code == 1


def test_ingest_cmd_reports_counts(workspace):
    """ingest prints per-document status and a summary."""
    result = _ingest()
    assert result.exit_code == 0, result.output
    assert "2 created, 0 updated, 0 unchanged" in result.output

    result = _ingest()
    assert "0 created, 0 updated, 2 unchanged" in result.output


def test_ingest_cmd_bad_frontmatter(workspace):
    """A malformed file fails the ingest and stores nothing."""
    (workspace / "notes" / "broken.md").write_text("---\ntitle: X\nno colon here\n---\n")
    result = _ingest()
    assert result.exit_code == 1
    assert "Ingest failed" in result.output
    assert "Unable to parse line" in result.output
    assert runner.invoke(app, ["list"]).exit_code == 1


def test_list_cmd(workspace):
    """list prints handles newest first."""
    _ingest()
    result = runner.invoke(app, ["list"])
    assert result.exit_code == 0, result.output
    lines = result.stdout.strip().splitlines()
    assert lines[0].startswith("design-review-")
    assert lines[1].startswith("python-tips-")


def test_search_cmd_json(workspace):
    """search --json prints agent result envelopes."""
    _ingest()
    results = _search_json("python")
    assert len(results) == 1
    assert results[0]["doc_handle"].startswith("python-tips-")
    assert results[0]["title"] == "Python Tips"
    assert results[0]["updated"] == 1000
    assert set(results[0]) == {"doc_handle", "title", "updated", "approx_size"}


def test_search_cmd_text(workspace):
    """search prints a numbered listing, or a no-match message."""
    _ingest()
    result = runner.invoke(app, ["search", "design review"])
    assert result.exit_code == 0, result.output
    assert "1. Design Review - handle: design-review-" in result.output

    result = runner.invoke(app, ["search", "nothing-matches-this"])
    assert "No documents matched your search." in result.output


def test_search_cmd_recency(workspace):
    """--sort recency orders by updated."""
    _ingest()
    results = _search_json(" ", "--sort", "recency")
    assert [r["title"] for r in results] == ["Design Review", "Python Tips"]


def test_search_cmd_scoped_to_owner(workspace):
    """Documents ingested for another owner are not searchable."""
    _ingest("--owner", "bob")
    assert _search_json("python") == []
    assert len(_search_json("python", "--owner", "bob")) == 1


@pytest.mark.parametrize("args", [
    ["search", "x", "--limit", "11"],
    ["search", "x", "--sort", "popular"],
    ["search", "x" * 201],
])
def test_search_cmd_invalid_params(workspace, args):
    """Out-of-range search parameters fail with exit code 1."""
    result = runner.invoke(app, args)
    assert result.exit_code == 1
    assert "Invalid search parameters" in result.output


def test_get_cmd(workspace):
    """get prints the body of a document by handle."""
    _ingest()
    handle = _search_json("design")[0]["doc_handle"]
    result = runner.invoke(app, ["get", handle, "--json"])
    assert result.exit_code == 0, result.output
    payload = json.loads(result.stdout)
    assert payload["body"] == "# Design\n\nDetails.\n"
    assert "title: Design Review" in payload["frontmatter"]
    assert payload["is_truncated"] is False


def test_get_cmd_truncates(workspace):
    """--max-bytes truncates the returned body."""
    _ingest()
    handle = _search_json("design")[0]["doc_handle"]
    result = runner.invoke(app, ["get", handle, "--max-bytes", "10"])
    assert result.exit_code == 0, result.output
    assert "WARNING: Response truncated." in result.output


@pytest.mark.parametrize("max_bytes", ["0", "-2"])
def test_get_cmd_rejects_non_positive_max_bytes(workspace, max_bytes):
    """--max-bytes below 1 is a usage error."""
    _ingest()
    handle = _search_json("design")[0]["doc_handle"]
    result = runner.invoke(app, ["get", handle, "--max-bytes", max_bytes])
    assert result.exit_code == 2


@pytest.mark.parametrize("handle,message", [
    ("nohyphen", "Invalid document handle"),
    ("design-review-00000000", "Document not found"),
])
def test_get_cmd_errors(workspace, handle, message):
    """Bad or unknown handles fail with exit code 1."""
    _ingest()
    result = runner.invoke(app, ["get", handle])
    assert result.exit_code == 1
    assert message in result.output
