"""
Unit tests for mcp_find_replace.core.batching

Async wrappers are driven with asyncio.run().
"""
import asyncio

import pytest

from mcp_find_replace.adapters import FilesystemVault, InMemoryVault
from mcp_find_replace.core.batching import (
    apply_all_batched,
    chunked,
    load_documents,
    read_documents,
    scan_batched,
)
from mcp_find_replace.core.domain import Document, PatternSpec
from mcp_find_replace.core.replacer import apply_all
from mcp_find_replace.core.scanner import scan


def make_documents(count):
    return [
        Document(path=f"note-{i:03d}.md", content=f"note {i}\ntodo item {i}" if i % 2 else f"note {i}")
        for i in range(count)
    ]


class FlakyVault(InMemoryVault):
    """Vault where some reads fail"""

    def __init__(self, documents, broken):
        super().__init__(documents)
        self.broken = set(broken)

    def read(self, path):
        if path in self.broken:
            raise OSError(f"cannot read {path}")
        return super().read(path)


class TestChunked:
    """Test chunked()."""

    def test_fixed_size_chunks(self):
        """Test chunk sizes and order."""
        chunks = list(chunked(list(range(7)), 3))
        assert chunks == [[0, 1, 2], [3, 4, 5], [6]]

    def test_empty(self):
        """Test no items gives no chunks."""
        assert list(chunked([], 25)) == []

    def test_invalid_size(self):
        """Test non-positive size is rejected."""
        with pytest.raises(ValueError):
            list(chunked([1], 0))


class TestScanBatched:
    """Test scan_batched()."""

    def test_same_result_as_scan(self):
        """Test chunking does not change matches or their order."""
        documents = make_documents(60)
        spec = PatternSpec(pattern="todo", replacement="done")

        batched = asyncio.run(scan_batched(documents, spec, batch_size=25))
        direct = scan(documents, "todo", "done")

        assert batched == direct
        assert batched.total_matches == 30

    def test_progress_is_monotonic(self):
        """Test progress is reported per chunk, ending at the total."""
        documents = make_documents(60)
        calls = []

        asyncio.run(scan_batched(
            documents,
            PatternSpec(pattern="todo"),
            progress=lambda current, total, message: calls.append((current, total)),
            batch_size=25
        ))

        assert calls == [(0, 60), (25, 60), (50, 60), (60, 60)]

    def test_invalid_pattern(self):
        """Test invalid pattern gives an empty result."""
        result = asyncio.run(scan_batched(make_documents(3), PatternSpec(pattern="(")))
        assert result.total_matches == 0

    def test_affected_paths_unique_across_chunks(self):
        """Test a path repeated in two chunks is listed once."""
        documents = [Document("a.md", "x"), Document("a.md", "x")]
        result = asyncio.run(scan_batched(documents, PatternSpec(pattern="x"), batch_size=1))
        assert result.affected_paths == ["a.md"]
        assert result.total_matches == 2


class TestApplyAllBatched:
    """Test apply_all_batched()."""

    def test_same_result_as_apply_all(self):
        """Test chunking does not change the batch."""
        documents = make_documents(30)
        spec = PatternSpec(pattern="TODO", replacement="done", flags="gi", adjust_case=True)

        batched = asyncio.run(apply_all_batched(documents, spec, batch_size=7))
        direct = apply_all(documents, "TODO", "done", "gi", adjust_case=True)

        assert batched == direct
        assert len(batched) == 15


class TestLoadDocuments:
    """Test load_documents()."""

    def test_reads_all(self):
        """Test every document is loaded in store order."""
        vault = InMemoryVault({"a.md": "one", "b.md": "two"})
        documents = asyncio.run(load_documents(vault))
        assert documents == [Document("a.md", "one"), Document("b.md", "two")]

    def test_skips_unreadable(self):
        """Test failed reads are skipped, not raised."""
        vault = FlakyVault({"a.md": "one", "b.md": "two", "c.md": "three"}, broken=["b.md"])
        calls = []
        documents = asyncio.run(load_documents(
            vault,
            progress=lambda current, total, message: calls.append(current),
            batch_size=2
        ))
        assert [d.path for d in documents] == ["a.md", "c.md"]
        assert calls == [0, 2, 3]

    def test_skips_paths_outside_vault(self, tmp_path):
        """Test a listed path escaping the vault is skipped, not raised."""
        (tmp_path / "vault").mkdir()
        (tmp_path / "vault" / "a.md").write_text("one")
        (tmp_path / "secret.md").write_text("two")
        vault = FilesystemVault(tmp_path / "vault")

        documents = read_documents(vault, ["a.md", "../secret.md"])

        assert documents == [Document("a.md", "one")]
