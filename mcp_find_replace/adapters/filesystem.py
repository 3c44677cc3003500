"""
Filesystem Vault Adapter

Implements DocumentStore port over a directory of markdown notes.
"""
import logging
from pathlib import Path

from ..core.ports import DocumentNotFoundError, DocumentStore

logger = logging.getLogger(__name__)


class PathOutsideVaultError(PermissionError):
    """Raised when a document path resolves outside the vault root"""


class FilesystemVault(DocumentStore):
    """Filesystem-based document store"""

    def __init__(self, root: str | Path, pattern: str = "**/*.md"):
        self.root = Path(root)
        self.pattern = pattern

    def _resolve(self, path: str) -> Path:
        """Get absolute path for a vault-relative document path"""
        root = self.root.resolve()
        full = (root / path).resolve()
        if full != root and root not in full.parents:
            raise PathOutsideVaultError(f"Path escapes vault: {path}")
        return full

    def list_documents(self) -> list[str]:
        """List vault-relative paths of matching files, sorted"""
        if not self.root.exists():
            return []

        paths = []
        for file_path in self.root.glob(self.pattern):
            if not file_path.is_file():
                continue
            relative = file_path.relative_to(self.root)
            # Skip hidden folders such as .obsidian and .git
            if any(part.startswith(".") for part in relative.parts[:-1]):
                continue
            # Symlinks pointing outside the vault are not vault documents
            try:
                self._resolve(relative.as_posix())
            except PathOutsideVaultError:
                continue
            paths.append(relative.as_posix())

        paths.sort()
        return paths

    def read(self, path: str) -> str:
        """Read document content as UTF-8, line endings untouched"""
        full = self._resolve(path)
        if not full.is_file():
            raise DocumentNotFoundError(path)
        with open(full, "r", encoding="utf-8", newline="") as f:
            return f.read()

    def write(self, path: str, content: str) -> bool:
        """Write document content, creating parent folders"""
        try:
            full = self._resolve(path)
            full.parent.mkdir(parents=True, exist_ok=True)
            with open(full, "w", encoding="utf-8", newline="") as f:
                f.write(content)
        except OSError as e:
            logger.warning(f"Failed to write {path}: {e}")
            return False
        return True
