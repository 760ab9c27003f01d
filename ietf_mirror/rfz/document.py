"""Mirrored documents with lazily loaded metadata."""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from .errors import DocumentError, MetadataRetrievalError, ReadError
from .identity import DocumentIdentity, parse_identity
from .metadata import (
    MetadataMap,
    extract_metadata,
    format_metadata_line,
    format_metadata_summary,
)

logger = logging.getLogger(__name__)


class CacheState(Enum):
    UNCOMPUTED = "uncomputed"
    COMPUTED = "computed"
    FAILED = "failed"


@dataclass(eq=False)
class Document:
    """One mirrored file, identified by its name.

    Metadata is read and parsed on the first call to :meth:`metadata` and the
    outcome, value or error, is kept for every later call. Concurrent first
    calls are serialised so the file is parsed once.
    """

    identity: DocumentIdentity
    path: Path
    _state: CacheState = field(default=CacheState.UNCOMPUTED, init=False, repr=False)
    _meta: MetadataMap | None = field(default=None, init=False, repr=False)
    _error: DocumentError | None = field(default=None, init=False, repr=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False)

    @classmethod
    def from_path(cls, path: str | Path) -> Document | None:
        identity = parse_identity(path)
        if identity is None:
            return None
        return cls(identity, Path(path).absolute())

    @property
    def id(self) -> str:
        return self.identity.id

    @property
    def version(self) -> int:
        return self.identity.version

    def metadata(self) -> MetadataMap:
        if self._state is CacheState.UNCOMPUTED:
            with self._lock:
                if self._state is CacheState.UNCOMPUTED:
                    self._resolve()
        if self._state is CacheState.FAILED:
            assert self._error is not None
            raise self._error.with_traceback(None)
        assert self._meta is not None
        return self._meta

    def _resolve(self) -> None:
        try:
            meta = self._load()
        except DocumentError as exc:
            exc.path = self.path
            self._fill(CacheState.FAILED, error=exc)
        else:
            self._fill(CacheState.COMPUTED, meta=meta)

    def _load(self) -> MetadataMap:
        try:
            raw = self.path.read_bytes()
        except OSError as exc:
            raise ReadError(f"Failed to read document: {exc}") from exc
        return extract_metadata(raw)

    def _fill(
        self,
        state: CacheState,
        *,
        meta: MetadataMap | None = None,
        error: DocumentError | None = None,
    ) -> None:
        if self._state is not CacheState.UNCOMPUTED:
            logger.error("Metadata for %s was already %s", self.path, self._state.value)
            raise MetadataRetrievalError("Failed to set metadata for document", self.path)
        self._meta = meta
        self._error = error
        self._state = state
        logger.debug("Metadata for %s %s", self.path, state.value)

    def header(self) -> str:
        if self.identity.is_draft():
            return f"{self.path} {self.id} (version {self.version})"
        return f"{self.path} {self.id.upper()}"

    def format_line(self) -> str:
        return f"{self.header()} {format_metadata_line(self.metadata())}"

    def format_summary(self) -> str:
        return f"{self.header()}\n\n{format_metadata_summary(self.metadata())}"
