"""Document collections and newest-version selection."""
from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path

from .document import Document
from .errors import DirectoryReadError

logger = logging.getLogger(__name__)


def iter_candidate_files(root: Path) -> Iterator[Path]:
    """Yield the regular files directly inside ``root``, sorted by name."""

    try:
        entries = sorted(root.iterdir())
    except OSError as exc:
        raise DirectoryReadError(root, str(exc)) from exc
    for path in entries:
        if path.is_file():
            yield path


class Collection:
    """An unordered group of documents, possibly several versions per id."""

    def __init__(self, documents: Iterable[Document] = ()) -> None:
        self._documents: list[Document] = list(documents)

    @classmethod
    def from_directory(cls, path: str | Path) -> Collection:
        root = Path(path)
        documents: list[Document] = []
        skipped = 0
        for file_path in iter_candidate_files(root):
            document = Document.from_path(file_path)
            if document is None:
                skipped += 1
                continue
            documents.append(document)
        logger.debug(
            "Found %d documents in %s (%d other files skipped)",
            len(documents),
            root,
            skipped,
        )
        return cls(documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(self._documents)

    def __len__(self) -> int:
        return len(self._documents)

    def __contains__(self, document: object) -> bool:
        return any(document is candidate for candidate in self._documents)

    def __repr__(self) -> str:
        return f"Collection({len(self._documents)} documents)"

    def filter_types(self, types: str | Iterable[str] | None) -> Collection:
        if types is None:
            return Collection(self._documents)
        prefixes = (types,) if isinstance(types, str) else tuple(types)
        return Collection(doc for doc in self._documents if doc.id.startswith(prefixes))

    def version_index(self) -> dict[str, list[Document]]:
        """Group documents by id, newest version first within each family."""

        index: dict[str, list[Document]] = {}
        for document in self._documents:
            index.setdefault(document.id, []).append(document)
        for versions in index.values():
            versions.sort(key=lambda doc: doc.version, reverse=True)
        return index

    def newest(self, count: int = 1) -> Collection:
        if count < 1:
            raise ValueError(f"count must be at least 1, got {count}")
        selected: list[Document] = []
        for versions in self.version_index().values():
            selected.extend(versions[:count])
        return Collection(selected)

    def documents(self) -> Sequence[Document]:
        return tuple(self._documents)
