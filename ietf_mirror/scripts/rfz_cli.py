#!/usr/bin/env python3
"""CLI entrypoint for the IETF HTML mirror indexer."""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Any

from ietf_mirror.rfz import config, sync
from ietf_mirror.rfz.collection import Collection
from ietf_mirror.rfz.document import Document
from ietf_mirror.rfz.errors import DocumentNotFound, RfzError
from ietf_mirror.rfz.reducer import iter_results

logger = logging.getLogger("ietf_mirror.rfz.cli")


def configure_logging(verbosity: int = 0) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbosity else logging.INFO,
        format="[%(levelname)s] %(message)s",
    )


def command_index(args: argparse.Namespace) -> int:
    directory = config.resolve_data_dir(args.dir)
    jobs = config.resolve_jobs(args.jobs)
    collection = Collection.from_directory(directory)
    newest = collection.filter_types(args.type).newest(1)
    logger.debug("Indexing %d of %d documents in %s", len(newest), len(collection), directory)
    failures = 0
    try:
        for result in iter_results(newest, jobs):
            if result.ok:
                print(result.line, flush=True)
            else:
                failures += 1
                logger.warning("%s", result.error)
    except BrokenPipeError:
        # Reader went away (e.g. piped into head); stop quietly.
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        return 0
    if failures:
        logger.debug("%d documents failed to index", failures)
    return 0


def command_summary(args: argparse.Namespace) -> int:
    path = Path(args.doc)
    document = Document.from_path(path)
    if document is None:
        raise DocumentNotFound(path)
    print(document.format_summary())
    return 0


def command_sync(args: argparse.Namespace) -> int:
    sync.sync_mirror(
        config.resolve_data_dir(args.dir),
        command=config.resolve_rsync_command(args.rsync_command),
        remote=config.resolve_remote(args.remote),
        verbosity=args.verbose,
    )
    return 0


def add_common_arguments(parser_obj: argparse.ArgumentParser, **defaults: Any) -> None:
    parser_obj.add_argument(
        "-d",
        "--dir",
        default=defaults.get("dir"),
        help=f"Directory containing IETF html docs (overrides {config.DIR_ENV})",
    )
    parser_obj.add_argument(
        "-j",
        "--jobs",
        type=int,
        default=defaults.get("jobs"),
        help=f"Number of concurrent jobs to run (overrides {config.JOBS_ENV})",
    )
    parser_obj.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=defaults.get("verbose"),
        help="Increase output verbosity",
    )


def build_parser() -> argparse.ArgumentParser:
    parser_obj = argparse.ArgumentParser(
        prog="rfz", description="Index a local mirror of IETF html documents"
    )
    add_common_arguments(parser_obj, dir=None, jobs=None, verbose=0)
    # Sub-commands accept the same options; SUPPRESS keeps them from
    # clobbering values given before the sub-command name.
    common = argparse.ArgumentParser(add_help=False)
    add_common_arguments(
        common,
        dir=argparse.SUPPRESS,
        jobs=argparse.SUPPRESS,
        verbose=argparse.SUPPRESS,
    )
    subparsers = parser_obj.add_subparsers(dest="subcommand")

    index_parser = subparsers.add_parser(
        "index",
        parents=[common],
        help="List the latest version of each document with associated metadata",
    )
    index_parser.add_argument(
        "-t",
        "--type",
        action="extend",
        nargs="+",
        choices=config.DOCUMENT_TYPES,
        help="Limit output by document type",
    )
    index_parser.set_defaults(func=command_index)

    summary_parser = subparsers.add_parser(
        "summary", parents=[common], help="Print a summary of the metadata in <doc>"
    )
    summary_parser.add_argument("doc", help="Path to the document")
    summary_parser.set_defaults(func=command_summary)

    sync_parser = subparsers.add_parser(
        "sync", parents=[common], help="Synchronize the local document mirror"
    )
    sync_parser.add_argument(
        "-r",
        "--remote",
        help=f"Remote rsync target to sync from (overrides {config.REMOTE_ENV})",
    )
    sync_parser.add_argument(
        "--command",
        dest="rsync_command",
        help=f"Rsync command (overrides {config.RSYNC_ENV})",
    )
    sync_parser.set_defaults(func=command_sync)

    return parser_obj


def main(argv: list[str] | None = None) -> int:
    parser_obj = build_parser()
    args = parser_obj.parse_args(argv)
    if not getattr(args, "subcommand", None):
        parser_obj.print_help()
        return 1
    configure_logging(args.verbose)
    try:
        return int(args.func(args))
    except RfzError as exc:
        logger.error("%s", exc)
        return 1


if __name__ == "__main__":
    sys.exit(main())
