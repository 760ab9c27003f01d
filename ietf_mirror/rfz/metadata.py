"""Dublin Core metadata extraction from document heads."""
from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field

from bs4 import BeautifulSoup, ParserRejectedMarkup

from .errors import (
    AttributeTypeError,
    DuplicateAttributeError,
    NoMetadataFound,
    ParseError,
)

logger = logging.getLogger(__name__)

META_SELECTOR = "head meta"

PREFIX = "DC."

MULTIVALUED_FIELDS = frozenset(
    {
        "Creator",
        "Relation.Replaces",
    }
)

LINE_ATTR_SEP = " // "
LINE_KEYVAL_SEP = ": "
LINE_VALUE_SEP = "; "

SUMMARY_ATTR_SEP = "\n\n"
SUMMARY_KEYVAL_SEP = ":\n"
SUMMARY_VALUE_SEP = ";\n"

LINE_BREAK_RE = re.compile(r"\r?\n")


@dataclass
class Single:
    value: str


@dataclass
class Multi:
    values: list[str] = field(default_factory=list)


MetadataValue = Single | Multi
MetadataMap = dict[str, MetadataValue]


def is_multivalued(key: str) -> bool:
    return key in MULTIVALUED_FIELDS


def parse_markup(markup: bytes | str) -> BeautifulSoup:
    if isinstance(markup, bytes):
        try:
            markup = markup.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(f"Document is not valid UTF-8: {exc}") from exc
    try:
        return BeautifulSoup(markup, "lxml")
    except ParserRejectedMarkup as exc:
        raise ParseError(f"Failed to parse document markup: {exc}") from exc


def extract_metadata(markup: bytes | str) -> MetadataMap:
    """Collect the ``DC.*`` ``<meta>`` fields found under ``<head>``.

    Fields listed in :data:`MULTIVALUED_FIELDS` accumulate every value in
    document order; any other field may appear only once.
    """

    soup = parse_markup(markup)
    meta: MetadataMap = {}
    for node in soup.select(META_SELECTOR):
        name = node.get("name")
        content = node.get("content")
        if name is None or content is None:
            continue
        if not name.startswith(PREFIX):
            continue
        key = name[len(PREFIX):]
        existing = meta.get(key)
        if existing is None:
            meta[key] = Multi([content]) if is_multivalued(key) else Single(content)
            continue
        if not is_multivalued(key):
            raise DuplicateAttributeError(key)
        if isinstance(existing, Single):
            raise AttributeTypeError(key)
        existing.values.append(content)
    if not meta:
        raise NoMetadataFound("No metadata found in document head")
    logger.debug("Extracted %d metadata fields", len(meta))
    return meta


def format_value(value: MetadataValue, value_sep: str, flatten: bool) -> str:
    if isinstance(value, Multi):
        return value_sep.join(value.values)
    if flatten:
        return LINE_BREAK_RE.sub(" ", value.value)
    return value.value


def format_metadata(
    meta: Mapping[str, MetadataValue],
    *,
    attr_sep: str,
    keyval_sep: str,
    value_sep: str,
    flatten: bool,
) -> str:
    return attr_sep.join(
        f"{key}{keyval_sep}{format_value(value, value_sep, flatten)}"
        for key, value in meta.items()
    )


def format_metadata_line(meta: Mapping[str, MetadataValue]) -> str:
    body = format_metadata(
        meta,
        attr_sep=LINE_ATTR_SEP,
        keyval_sep=LINE_KEYVAL_SEP,
        value_sep=LINE_VALUE_SEP,
        flatten=True,
    )
    return f"<{body}>"


def format_metadata_summary(meta: Mapping[str, MetadataValue]) -> str:
    return format_metadata(
        meta,
        attr_sep=SUMMARY_ATTR_SEP,
        keyval_sep=SUMMARY_KEYVAL_SEP,
        value_sep=SUMMARY_VALUE_SEP,
        flatten=False,
    )
