"""
Core - Domain logic and ports

This package contains:
- domain.py: Pure domain models
- patterns.py: Pattern compilation, validation and the match loop
- casing.py: Case adjustment for replacements
- scanner.py: Match scanner
- replacer.py: Replacement engine
- batching.py: Chunked async wrappers with progress
- ports.py: Port interfaces (abstractions for external dependencies)
- services.py: Application services (use cases)
"""
from .domain import (
    Document,
    PatternSpec,
    MatchRecord,
    ScanResult,
    Replacement,
    Conflict,
    ReplaceAllResult,
    ReplaceOneResult,
)
from .patterns import PatternCompileError, compile_pattern, validate
from .casing import adjust_case
from .scanner import scan
from .replacer import apply_all, apply_single
from .batching import BATCH_SIZE, load_documents, scan_batched, apply_all_batched
from .ports import DocumentStore, DocumentNotFoundError
from .services import (
    ValidatePatternService,
    ScanVaultService,
    ReplaceAllService,
    ReplaceOneService,
)

__all__ = [
    # Domain models
    "Document",
    "PatternSpec",
    "MatchRecord",
    "ScanResult",
    "Replacement",
    "Conflict",
    "ReplaceAllResult",
    "ReplaceOneResult",
    # Core operations
    "PatternCompileError",
    "compile_pattern",
    "validate",
    "adjust_case",
    "scan",
    "apply_all",
    "apply_single",
    "BATCH_SIZE",
    "load_documents",
    "scan_batched",
    "apply_all_batched",
    # Ports
    "DocumentStore",
    "DocumentNotFoundError",
    # Services
    "ValidatePatternService",
    "ScanVaultService",
    "ReplaceAllService",
    "ReplaceOneService",
]
