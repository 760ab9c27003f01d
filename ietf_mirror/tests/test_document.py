from __future__ import annotations

import threading
import traceback
from pathlib import Path

import pytest

from ietf_mirror.rfz import document as document_module
from ietf_mirror.rfz.document import CacheState, Document
from ietf_mirror.rfz.errors import (
    DuplicateAttributeError,
    MetadataRetrievalError,
    ReadError,
)
from ietf_mirror.rfz.identity import DocumentIdentity
from ietf_mirror.rfz.metadata import Multi, Single


def test_from_path_accepts_candidates(mirror: Path) -> None:
    doc = Document.from_path(mirror / "draft-ietf-sidrops-rpkimaxlen-05.html")
    assert doc is not None
    assert doc.identity == DocumentIdentity("draft-ietf-sidrops-rpkimaxlen", 5)
    assert doc.id == "draft-ietf-sidrops-rpkimaxlen"
    assert doc.version == 5
    assert doc.path.is_absolute()


def test_from_path_rejects_non_candidates(tmp_path: Path) -> None:
    assert Document.from_path(tmp_path / "notes.txt") is None
    assert Document.from_path(tmp_path) is None


def test_creation_does_not_touch_the_file(tmp_path: Path) -> None:
    doc = Document.from_path(tmp_path / "rfc1.html")
    assert doc is not None
    assert doc._state is CacheState.UNCOMPUTED


def test_metadata_is_extracted_once(
    mirror: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    calls: list[bytes] = []
    original = document_module.extract_metadata

    def counting(markup: bytes):
        calls.append(markup)
        return original(markup)

    monkeypatch.setattr(document_module, "extract_metadata", counting)
    doc = Document.from_path(mirror / "rfc6468.html")
    assert doc is not None
    first = doc.metadata()
    second = doc.metadata()
    assert first is second
    assert first["Identifier"] == Single("urn:ietf:rfc:6468")
    assert len(calls) == 1


def test_concurrent_first_access_extracts_once(
    mirror: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    calls: list[bytes] = []
    original = document_module.extract_metadata
    lock = threading.Lock()

    def counting(markup: bytes):
        with lock:
            calls.append(markup)
        return original(markup)

    monkeypatch.setattr(document_module, "extract_metadata", counting)
    doc = Document.from_path(mirror / "rfc6468.html")
    assert doc is not None
    results: list[object] = []
    threads = [
        threading.Thread(target=lambda: results.append(doc.metadata())) for _ in range(8)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert len(calls) == 1
    assert len(results) == 8
    assert all(result is results[0] for result in results)


def test_failure_is_memoized_with_path(
    mirror: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    doc = Document.from_path(mirror / "draft-duplicates-00.html")
    assert doc is not None
    with pytest.raises(DuplicateAttributeError) as excinfo:
        doc.metadata()
    assert excinfo.value.path == doc.path
    assert doc._state is CacheState.FAILED

    def fail(markup: bytes):
        raise AssertionError("metadata should not be extracted again")

    monkeypatch.setattr(document_module, "extract_metadata", fail)
    with pytest.raises(DuplicateAttributeError):
        doc.metadata()


def test_repeated_failure_does_not_grow_traceback(mirror: Path) -> None:
    doc = Document.from_path(mirror / "draft-duplicates-00.html")
    assert doc is not None
    depths = []
    for _ in range(3):
        with pytest.raises(DuplicateAttributeError) as excinfo:
            doc.metadata()
        depths.append(len(traceback.extract_tb(excinfo.value.__traceback__)))
    assert depths[1] == depths[2]
    assert depths[1] <= depths[0]


def test_missing_file_raises_read_error(tmp_path: Path) -> None:
    doc = Document.from_path(tmp_path / "rfc9999.html")
    assert doc is not None
    with pytest.raises(ReadError) as excinfo:
        doc.metadata()
    assert str(doc.path) in str(excinfo.value)


def test_second_fill_is_rejected(mirror: Path) -> None:
    doc = Document.from_path(mirror / "rfc6468.html")
    assert doc is not None
    meta = doc.metadata()
    with pytest.raises(MetadataRetrievalError):
        doc._fill(CacheState.COMPUTED, meta={"Title": Single("other")})
    assert doc.metadata() is meta


def test_format_line_for_rfc(mirror: Path) -> None:
    doc = Document.from_path(mirror / "rfc6468.html")
    assert doc is not None
    line = doc.format_line()
    assert line.startswith(f"{doc.path} RFC6468 <")
    assert "Title: Sieve Notification Mechanism: SIP MESSAGE" in line
    assert (
        "Creator: Alexey Melnikov <alexey.melnikov@isode.com>; "
        "Barry Leiba <barryleiba@computer.org>; Kepeng Li <likepeng@huawei.com>"
    ) in line
    assert "\n" not in line
    assert line.endswith(">")


def test_format_line_for_draft(mirror: Path) -> None:
    doc = Document.from_path(mirror / "draft-ietf-sidrops-rpkimaxlen-05.html")
    assert doc is not None
    line = doc.format_line()
    assert line.startswith(f"{doc.path} draft-ietf-sidrops-rpkimaxlen (version 5) <")
    assert "Date.Issued: November, 2020" in line


def test_format_summary(tmp_path: Path, html_writer) -> None:
    path = html_writer(
        tmp_path / "draft-foo-03.html",
        ("DC.Title", "Foo"),
        ("DC.Creator", "A"),
        ("DC.Creator", "B"),
    )
    doc = Document.from_path(path)
    assert doc is not None
    assert doc.metadata()["Creator"] == Multi(["A", "B"])
    assert doc.format_summary() == (
        f"{doc.path} draft-foo (version 3)\n\nTitle:\nFoo\n\nCreator:\nA;\nB"
    )


def test_format_propagates_errors(mirror: Path) -> None:
    doc = Document.from_path(mirror / "draft-duplicates-00.html")
    assert doc is not None
    with pytest.raises(DuplicateAttributeError):
        doc.format_line()
    with pytest.raises(DuplicateAttributeError):
        doc.format_summary()
