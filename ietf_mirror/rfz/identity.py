"""Derive document identities from mirror file names."""
from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

DOCUMENT_SUFFIX = ".html"

VERSION_RE = re.compile(r"(?P<id>.+)-(?P<version>[0-9]+)")


@dataclass(frozen=True, order=True)
class DocumentIdentity:
    """Family name plus version number of one mirrored document."""

    id: str
    version: int = 0

    def is_draft(self) -> bool:
        return self.id.startswith("draft")


def parse_identity(name: str | Path) -> DocumentIdentity | None:
    """Split ``<id>[-<NN>].html`` into an identity.

    ``None`` means the name is not a candidate document at all. Only the final
    path component is considered, and names that are not valid UTF-8 are
    never candidates.
    """

    file_name = Path(name).name
    try:
        file_name.encode("utf-8")
    except UnicodeEncodeError:
        return None
    if not file_name.endswith(DOCUMENT_SUFFIX):
        return None
    stem = file_name[: -len(DOCUMENT_SUFFIX)]
    if not stem:
        return None
    match = VERSION_RE.fullmatch(stem)
    if match:
        return DocumentIdentity(match.group("id"), int(match.group("version")))
    return DocumentIdentity(stem, 0)
