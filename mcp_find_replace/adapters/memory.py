"""
In-Memory Vault Adapter

Implements DocumentStore port over a dict. Used by tests and by callers
that already hold their documents in memory.
"""
from typing import Optional

from ..core.ports import DocumentNotFoundError, DocumentStore


class InMemoryVault(DocumentStore):
    """Dict-backed document store"""

    def __init__(self, documents: Optional[dict[str, str]] = None):
        self.documents = dict(documents or {})

    def list_documents(self) -> list[str]:
        return list(self.documents)

    def read(self, path: str) -> str:
        try:
            return self.documents[path]
        except KeyError:
            raise DocumentNotFoundError(path) from None

    def write(self, path: str, content: str) -> bool:
        self.documents[path] = content
        return True
