"""
Ports - Interfaces for external dependencies

These define HOW the core's callers reach the documents,
but NOT the storage details.
"""
import logging
from abc import ABC, abstractmethod
from typing import Iterable

from .domain import Replacement

logger = logging.getLogger(__name__)


class DocumentNotFoundError(KeyError):
    """Raised when a store has no document at the given path"""


class DocumentStore(ABC):
    """Port for listing, reading and writing vault documents"""

    @abstractmethod
    def list_documents(self) -> list[str]:
        """List document paths in a stable order"""
        pass

    @abstractmethod
    def read(self, path: str) -> str:
        """Read current content of a document"""
        pass

    @abstractmethod
    def write(self, path: str, content: str) -> bool:
        """Replace a document's content, return False if it could not be written"""
        pass

    def write_batch(self, replacements: Iterable[Replacement]) -> list[tuple[str, bool]]:
        """
        Write replacements in order, return (path, ok) per write.

        Later writes to the same path win. A failed write does not stop
        the rest of the batch.
        """
        results = []
        for replacement in replacements:
            ok = self.write(replacement.path, replacement.new_content)
            if not ok:
                logger.warning(f"write_batch: failed to write {replacement.path}")
            results.append((replacement.path, ok))
        return results
