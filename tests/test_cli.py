"""
Tests for mcp_find_replace.cli

Runs main() against a temporary vault.
"""
import sys
from unittest.mock import patch

from mcp_find_replace.cli import build_flags, main


def run_cli(*args):
    with patch.object(sys, "argv", ["mcp-find-replace-cli", *args]):
        return main()


class TestBuildFlags:
    """Test -i/-m merging."""

    def test_adds_missing_flags(self):
        """Test switches append flags once."""
        assert build_flags("g", ignore_case=True) == "gi"
        assert build_flags("gi", ignore_case=True, multiline=True) == "gim"
        assert build_flags("g") == "g"


class TestCommands:
    """Test CLI commands end to end."""

    def test_no_command(self, capsys):
        """Test help and failure without a command."""
        assert run_cli() == 1

    def test_list_tools(self, capsys):
        """Test tool definitions are printed."""
        assert run_cli("list-tools") == 0
        out = capsys.readouterr().out
        assert "search_vault" in out
        assert "replace_one" in out

    def test_validate(self, tmp_path, capsys):
        """Test validate exit codes."""
        assert run_cli("--vault-dir", str(tmp_path), "validate", "colou?r") == 0
        assert run_cli("--vault-dir", str(tmp_path), "validate", "(colour") == 1
        assert "INVALID" in capsys.readouterr().out

    def test_search(self, tmp_path, capsys):
        """Test search output."""
        (tmp_path / "a.md").write_text("the colour wheel")

        assert run_cli("--vault-dir", str(tmp_path), "search", "colour", "--replace", "color") == 0
        out = capsys.readouterr().out
        assert "1 match in 1 file" in out
        assert "[colour|color]" in out

    def test_replace(self, tmp_path, capsys):
        """Test replace writes the vault."""
        note = tmp_path / "a.md"
        note.write_text("Colour and colour")

        assert run_cli("--vault-dir", str(tmp_path), "replace", "colour", "color", "-i", "--adjust-case") == 0
        assert note.read_text() == "Color and color"

    def test_replace_dry_run(self, tmp_path, capsys):
        """Test dry run leaves files alone."""
        note = tmp_path / "a.md"
        note.write_text("colour")

        assert run_cli("--vault-dir", str(tmp_path), "replace", "colour", "color", "--dry-run") == 0
        assert note.read_text() == "colour"
        assert "DRY RUN" in capsys.readouterr().out

    def test_replace_invalid_pattern(self, tmp_path, capsys):
        """Test invalid pattern fails instead of reporting no changes."""
        (tmp_path / "a.md").write_text("colour")
        assert run_cli("--vault-dir", str(tmp_path), "replace", "(colour", "color") == 1

    def test_replace_one_conflict(self, tmp_path, capsys):
        """Test replace-one with stale offsets."""
        note = tmp_path / "a.md"
        note.write_text("the colour wheel")

        assert run_cli("--vault-dir", str(tmp_path), "replace-one", "a.md", "1", "0", "colour", "color") == 1
        assert "CONFLICT" in capsys.readouterr().out
        assert note.read_text() == "the colour wheel"

        assert run_cli("--vault-dir", str(tmp_path), "replace-one", "a.md", "1", "4", "colour", "color") == 0
        assert note.read_text() == "the color wheel"
