"""
Adapters - External implementations of ports

This package contains implementations of the core ports:
- filesystem.py: Markdown vault on local disk
- memory.py: Dict-backed vault
"""
from .filesystem import FilesystemVault, PathOutsideVaultError
from .memory import InMemoryVault

__all__ = [
    "FilesystemVault",
    "PathOutsideVaultError",
    "InMemoryVault",
]
