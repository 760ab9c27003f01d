"""Bounded concurrent metadata resolution over a document batch."""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass

from .document import Document
from .errors import DocumentError

logger = logging.getLogger(__name__)

Renderer = Callable[[Document], str]


@dataclass
class LineResult:
    """Outcome of rendering one document: a line or the error it raised."""

    document: Document
    line: str | None = None
    error: DocumentError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def render_one(document: Document, render: Renderer) -> LineResult:
    try:
        return LineResult(document, line=render(document))
    except DocumentError as exc:
        return LineResult(document, error=exc)


def iter_results(
    documents: Iterable[Document],
    jobs: int = 1,
    render: Renderer = Document.format_line,
) -> Iterator[LineResult]:
    """Render ``documents`` with at most ``jobs`` in flight at once.

    Results are yielded as they complete. With a single job they follow input
    order; otherwise the order is whatever the workers finish in.
    """

    if jobs < 1:
        raise ValueError(f"jobs must be at least 1, got {jobs}")
    pending = list(documents)
    logger.debug("Resolving %d documents with %d jobs", len(pending), jobs)
    if jobs == 1:
        for document in pending:
            yield render_one(document, render)
        return

    doc_iter = iter(pending)
    exhausted = False
    futures: set[Future[LineResult]] = set()
    with ThreadPoolExecutor(max_workers=jobs, thread_name_prefix="rfz-index") as executor:
        while futures or not exhausted:
            while not exhausted and len(futures) < jobs:
                try:
                    document = next(doc_iter)
                except StopIteration:
                    exhausted = True
                    break
                futures.add(executor.submit(render_one, document, render))
            if not futures:
                break
            done, futures = wait(futures, return_when=FIRST_COMPLETED)
            for future in done:
                yield future.result()
