"""
Dependency Injection Container

Wires together the hexagonal architecture by creating and injecting dependencies.
"""
from pathlib import Path
from typing import Optional

from .adapters import FilesystemVault
from .core import (
    DocumentStore,
    ValidatePatternService,
    ScanVaultService,
    ReplaceAllService,
    ReplaceOneService,
)


class Container:
    """Dependency injection container for the application"""

    def __init__(
        self,
        vault_dir: str | Path,
        glob: str = "**/*.md",
        store: Optional[DocumentStore] = None
    ):
        self.vault_dir = Path(vault_dir)

        # Adapters (infrastructure)
        self.store = store if store is not None else FilesystemVault(self.vault_dir, glob)

        # Services (use cases)
        self.validate_pattern = ValidatePatternService()

        self.scan_vault = ScanVaultService(
            store=self.store
        )

        self.replace_all = ReplaceAllService(
            store=self.store
        )

        self.replace_one = ReplaceOneService(
            store=self.store
        )
