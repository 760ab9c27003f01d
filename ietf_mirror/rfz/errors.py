"""Exception hierarchy for the mirror indexer."""
from __future__ import annotations

from pathlib import Path


class RfzError(Exception):
    """Base class for every error raised by the indexer."""


class DocumentError(RfzError):
    """A failure tied to a single document.

    ``path`` is filled in once the document the error belongs to is known;
    the extractor itself works on markup only and leaves it unset.
    """

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.path}: {self.message}"


class ReadError(DocumentError):
    """The document could not be read from storage."""


class ParseError(DocumentError):
    """The document markup could not be decoded or parsed."""


class NoMetadataFound(DocumentError):
    """The document parsed cleanly but carried no recognised metadata."""


class DuplicateAttributeError(DocumentError):
    """A single-valued metadata field appeared more than once."""

    def __init__(self, field_name: str, path: Path | None = None) -> None:
        super().__init__(f"Got unexpected duplicate attribute '{field_name}'", path)
        self.field_name = field_name


class AttributeTypeError(DocumentError):
    """A multivalued field was found holding a single value."""

    def __init__(self, field_name: str, path: Path | None = None) -> None:
        super().__init__(
            f"Expected multivalued attribute type for '{field_name}'", path
        )
        self.field_name = field_name


class MetadataRetrievalError(DocumentError):
    """The metadata cache of a document was written twice."""


class DirectoryReadError(RfzError):
    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Failed to read directory {path}: {reason}")
        self.path = path


class DocumentNotFound(RfzError):
    def __init__(self, path: Path) -> None:
        super().__init__(f"Failed to create a valid document from path '{path}'")
        self.path = path


class SyncError(RfzError):
    """The external mirror command failed to start or exited with an error."""
