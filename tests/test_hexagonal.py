"""
Tests for the hexagonal wiring

Domain models, the container and the MCP handlers on top of it.
"""
import asyncio
import dataclasses
from pathlib import Path
from unittest.mock import patch

import pytest

from mcp_find_replace.adapters import FilesystemVault, InMemoryVault
from mcp_find_replace.adapters.mcp.handlers import MCPHandlers
from mcp_find_replace.container import Container
from mcp_find_replace.core.domain import Document, MatchRecord, ScanResult


class TestDomainModels:
    """Test domain models are simple frozen dataclasses."""

    def test_document_creation(self):
        """Test Document model."""
        document = Document(path="notes/a.md", content="hello")
        assert document.path == "notes/a.md"
        assert document.content == "hello"

    def test_match_record_is_immutable(self):
        """Test MatchRecord cannot be changed after creation."""
        record = MatchRecord(
            path="a.md", line_number=1, match="x", replacement="y",
            context="x", before="", after="", start=0, end=1
        )
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.start = 5

    def test_empty_scan_result(self):
        """Test ScanResult.empty()."""
        result = ScanResult.empty()
        assert result.matches == []
        assert result.affected_paths == []
        assert result.total_matches == 0


class TestContainer:
    """Test dependency injection container."""

    def test_container_creates_all_services(self, tmp_path):
        """Test container initializes all dependencies."""
        container = Container(vault_dir=tmp_path)

        assert isinstance(container.store, FilesystemVault)
        assert container.store.root == Path(tmp_path)
        assert container.validate_pattern is not None
        assert container.scan_vault is not None
        assert container.replace_all is not None
        assert container.replace_one is not None

    def test_container_accepts_store(self, tmp_path):
        """Test a store can be injected."""
        store = InMemoryVault()
        container = Container(vault_dir=tmp_path, store=store)
        assert container.store is store
        assert container.scan_vault.store is store


@pytest.fixture
def handlers(tmp_path):
    store = InMemoryVault({
        "a.md": "one colour\ntwo colours",
        "b.md": "Colour",
        "c.md": "plain",
    })
    return MCPHandlers(Container(vault_dir=tmp_path, store=store))


class TestMCPHandlers:
    """Test MCP handlers use the container."""

    def test_handlers_initialization(self, tmp_path):
        """Test MCP handlers can be created."""
        container = Container(vault_dir=tmp_path)
        handlers = MCPHandlers(container)
        assert handlers.container is container

    def test_validate_pattern(self, handlers):
        """Test validate handler."""
        result = asyncio.run(handlers.validate_pattern("(colour"))
        assert result["success"] is True
        assert result["valid"] is False
        assert result["message"]

        result = asyncio.run(handlers.validate_pattern("colour", "gi"))
        assert result["valid"] is True
        assert result["message"] is None

    def test_search_vault(self, handlers):
        """Test search handler output."""
        result = asyncio.run(handlers.search_vault("colour", "color", "gi"))

        assert result["success"] is True
        assert result["match_count"] == 3
        assert result["file_count"] == 2
        assert result["files"] == ["a.md", "b.md"]

        first = result["matches"][0]
        assert first["path"] == "a.md"
        assert first["line_number"] == 1
        assert first["start"] == 4
        assert first["end"] == 10
        assert first["before"] == "one "
        assert first["replacement"] == "color"

    def test_search_pagination(self, handlers):
        """Test max_results and offset."""
        result = asyncio.run(handlers.search_vault("colour", flags="gi", max_results=1, offset=1))
        assert result["match_count"] == 3
        assert len(result["matches"]) == 1
        assert result["matches"][0]["line_number"] == 2

    def test_search_error(self, handlers):
        """Test exceptions become error results."""
        with patch.object(handlers.container.scan_vault, "execute", side_effect=Exception("Disk error")):
            result = asyncio.run(handlers.search_vault("colour"))

        assert result["success"] is False
        assert "Disk error" in result["error"]

    def test_replace_all(self, handlers):
        """Test replace handler writes and reports."""
        result = asyncio.run(handlers.replace_all("colour", "color", "gi", adjust_case=True))

        assert result["success"] is True
        assert result["changed_files"] == ["a.md", "b.md"]
        assert result["written"] == ["a.md", "b.md"]
        assert handlers.container.store.read("b.md") == "Color"

    def test_replace_all_dry_run(self, handlers):
        """Test dry run handler leaves the vault alone."""
        result = asyncio.run(handlers.replace_all("colour", "color", "gi", dry_run=True))

        assert result["dry_run"] is True
        assert result["written"] == []
        assert handlers.container.store.read("b.md") == "Colour"

    def test_replace_one(self, handlers):
        """Test single replacement by record fields."""
        result = asyncio.run(handlers.replace_one("a.md", 2, 4, "colour", "color"))

        assert result["success"] is True
        assert result["applied"] is True
        assert handlers.container.store.read("a.md") == "one colour\ntwo colors"

    def test_replace_one_conflict(self, handlers):
        """Test stale offsets report a conflict."""
        result = asyncio.run(handlers.replace_one("a.md", 2, 0, "colour", "color"))

        assert result["success"] is True
        assert result["applied"] is False
        assert result["conflict"]["expected"] == "colour"
        assert result["conflict"]["found"] == "two co"

    def test_replace_one_missing_document(self, handlers):
        """Test unknown path is an error result."""
        result = asyncio.run(handlers.replace_one("zzz.md", 1, 0, "x", "y"))
        assert result["success"] is False
        assert "zzz.md" in result["error"]

    def test_search_negative_paging(self, handlers):
        """Test negative max_results or offset is an error result."""
        result = asyncio.run(handlers.search_vault("colour", offset=-1))
        assert result["success"] is False

        result = asyncio.run(handlers.search_vault("colour", max_results=-2))
        assert result["success"] is False
        assert "negative" in result["error"]

    def test_search_reports_progress(self, tmp_path):
        """Test search progress goes through the handler callback in order."""
        store = InMemoryVault({f"{i:02}.md": "colour" for i in range(60)})
        calls = []
        handlers = MCPHandlers(
            Container(vault_dir=tmp_path, store=store),
            progress=lambda current, total, message: calls.append((current, total, message))
        )

        result = asyncio.run(handlers.search_vault("colour"))

        assert result["match_count"] == 60
        loading = [current for current, _, message in calls if message.startswith("Load")]
        scanning = [current for current, _, message in calls if message.startswith("Scan")]
        assert loading == [0, 25, 50, 60]
        assert scanning == [0, 25, 50, 60]
        assert all(total == 60 for _, total, _ in calls)

    def test_replace_all_reports_progress(self, tmp_path):
        """Test replace progress ends at the document count."""
        store = InMemoryVault({f"{i:02}.md": "colour" for i in range(30)})
        calls = []
        handlers = MCPHandlers(
            Container(vault_dir=tmp_path, store=store),
            progress=lambda current, total, message: calls.append(current)
        )

        result = asyncio.run(handlers.replace_all("colour", "color"))

        assert len(result["written"]) == 30
        assert calls == [0, 25, 30, 0, 25, 30]

    def test_default_progress_is_logged(self, handlers, caplog):
        """Test progress is logged when no callback is given."""
        with caplog.at_level("INFO", logger="mcp_find_replace.adapters.mcp.handlers"):
            asyncio.run(handlers.search_vault("colour"))

        assert "[3/3] Scanned 3 of 3 documents" in caplog.text
