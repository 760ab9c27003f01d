"""IETF HTML mirror indexer."""
from __future__ import annotations

from . import collection, config, document, errors, identity, metadata, reducer, sync
from .collection import Collection
from .document import Document
from .identity import DocumentIdentity, parse_identity
from .reducer import LineResult, iter_results

__all__ = [
    "collection",
    "config",
    "document",
    "errors",
    "identity",
    "metadata",
    "reducer",
    "sync",
    "Collection",
    "Document",
    "DocumentIdentity",
    "LineResult",
    "iter_results",
    "parse_identity",
]
