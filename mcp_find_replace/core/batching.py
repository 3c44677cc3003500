"""
Chunked async wrappers around the scanner and replacement engine

Large vaults are processed BATCH_SIZE documents at a time, yielding to the
event loop between chunks and reporting (current, total, message) progress.
Cancelling the awaiting task stops work at the next chunk boundary.
"""
import asyncio
import logging
from typing import Callable, Iterator, Optional, Sequence, TypeVar

from .domain import Document, PatternSpec, Replacement, ScanResult
from .ports import DocumentNotFoundError, DocumentStore
from .replacer import apply_all
from .scanner import scan

logger = logging.getLogger(__name__)

BATCH_SIZE = 25

ProgressCallback = Callable[[int, int, str], None]

T = TypeVar("T")


def chunked(items: Sequence[T], size: int = BATCH_SIZE) -> Iterator[Sequence[T]]:
    """Fixed-size slices of items, in order"""
    if size < 1:
        raise ValueError(f"batch size must be positive, got {size}")
    for i in range(0, len(items), size):
        yield items[i:i + size]


def _report(progress: Optional[ProgressCallback], current: int, total: int, message: str) -> None:
    if progress is not None:
        progress(current, total, message)


def read_documents(store: DocumentStore, paths: Sequence[str]) -> list[Document]:
    """Read the given paths, skipping any that cannot be read"""
    documents = []
    for path in paths:
        try:
            documents.append(Document(path=path, content=store.read(path)))
        except (DocumentNotFoundError, OSError, UnicodeDecodeError) as e:
            logger.warning(f"Skipping {path}: {e}")
    return documents


async def load_documents(
    store: DocumentStore,
    progress: Optional[ProgressCallback] = None,
    batch_size: int = BATCH_SIZE
) -> list[Document]:
    """Read every document in the store; unreadable ones are skipped"""
    paths = await asyncio.to_thread(store.list_documents)
    total = len(paths)
    documents: list[Document] = []

    _report(progress, 0, total, "Loading documents")
    done = 0
    for chunk in chunked(paths, batch_size):
        documents.extend(await asyncio.to_thread(read_documents, store, chunk))
        done += len(chunk)
        _report(progress, done, total, f"Loaded {done} of {total} documents")
        await asyncio.sleep(0)

    return documents


async def scan_batched(
    documents: Sequence[Document],
    spec: PatternSpec,
    progress: Optional[ProgressCallback] = None,
    batch_size: int = BATCH_SIZE
) -> ScanResult:
    """scan() over documents one chunk at a time"""
    total = len(documents)
    matches = []
    affected: list[str] = []
    seen: set[str] = set()

    _report(progress, 0, total, "Scanning documents")
    done = 0
    for chunk in chunked(documents, batch_size):
        result = scan(chunk, spec.pattern, spec.replacement, spec.flags, spec.adjust_case)
        matches.extend(result.matches)
        for path in result.affected_paths:
            if path not in seen:
                seen.add(path)
                affected.append(path)
        done += len(chunk)
        _report(progress, done, total, f"Scanned {done} of {total} documents")
        await asyncio.sleep(0)

    return ScanResult(matches=matches, affected_paths=affected, total_matches=len(matches))


async def apply_all_batched(
    documents: Sequence[Document],
    spec: PatternSpec,
    progress: Optional[ProgressCallback] = None,
    batch_size: int = BATCH_SIZE
) -> list[Replacement]:
    """apply_all() over documents one chunk at a time"""
    total = len(documents)
    batch: list[Replacement] = []

    _report(progress, 0, total, "Computing replacements")
    done = 0
    for chunk in chunked(documents, batch_size):
        batch.extend(apply_all(chunk, spec.pattern, spec.replacement, spec.flags, spec.adjust_case))
        done += len(chunk)
        _report(progress, done, total, f"Processed {done} of {total} documents")
        await asyncio.sleep(0)

    return batch
