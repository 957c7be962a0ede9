from __future__ import annotations
import argparse
import asyncio
import os
from typing import List

from tqdm import tqdm
from rich import print

from .container import container
from .domain.services import IngestionPipeline, LocalFile
from .domain.services.ingestion_service import SUPPORTED_EXTENSIONS
from .exceptions import DocumentProcessingError, StorageError


def gather_files(root: str, only_ext: List[str] | None = None) -> List[str]:
    """Return supported files under ``root``.

    If ``only_ext`` is given, restrict to those extensions (case-insensitive,
    with or without leading dot); they must still be supported ones.
    """
    allowed = set(SUPPORTED_EXTENSIONS)
    if only_ext:
        only = {e.lower() if e.startswith('.') else f".{e.lower()}" for e in only_ext}
        allowed &= only
    all_files: List[str] = []
    for base, _dirs, files in os.walk(root):
        for fname in sorted(files):
            if os.path.splitext(fname)[1].lower() in allowed:
                all_files.append(os.path.join(base, fname))
    return sorted(all_files)


def _parse_arguments():
    """Parse command line arguments for ingestion."""
    ap = argparse.ArgumentParser(description="Ingest documents into the RAG chat knowledge base")
    ap.add_argument('--input', required=True, help='Root folder to scan recursively')
    ap.add_argument('--exclude', action='append', default=[], help='Substring filter; if present in path skip (can repeat)')
    ap.add_argument('--only-ext', action='append', default=[], help='Restrict ingestion to these extensions (repeatable, e.g. --only-ext md)')
    ap.add_argument('--debug', action='store_true', help='Verbose listing of discovered / skipped files')
    ap.add_argument('--reset', action='store_true', help='Remove all stored documents before ingest')
    return ap.parse_args()


def _discover_and_filter_files(args) -> List[str]:
    """Discover files and apply exclusion filters."""
    if args.debug:
        print(f"[cyan]Scanning root:[/] {args.input}")

    files = gather_files(args.input, only_ext=args.only_ext or None)

    if args.exclude:
        before = len(files)
        files = [f for f in files if not any(ex.lower() in f.lower() for ex in args.exclude)]
        if args.debug:
            print(f"[yellow]Excluded by patterns:[/] {before - len(files)} (remaining {len(files)})")

    print(f"[cyan]Found candidate files:[/] {len(files)}")
    return files


async def _ingest_files(pipeline: IngestionPipeline, files: List[str], debug: bool = False) -> dict:
    """Ingest files one at a time; a failing file is reported and skipped."""
    counters = {"files": 0, "accepted": 0, "rejected": 0, "chunks": 0}
    for fp in tqdm(files, desc="Files"):
        counters["files"] += 1
        try:
            document = await pipeline.ingest(LocalFile(fp))
        except DocumentProcessingError as e:
            counters["rejected"] += 1
            if debug:
                print(f"[yellow]Skipped {fp}:[/] {e.message}")
            continue
        counters["accepted"] += 1
        counters["chunks"] += document.chunk_count
    return counters


def main() -> None:
    args = _parse_arguments()

    if args.reset:
        print('[yellow]Removing stored documents...[/]')
        container.document_repository().clear()

    files = _discover_and_filter_files(args)
    if not files:
        print("[yellow]No documents to ingest.[/]")
        return

    try:
        counters = asyncio.run(_ingest_files(container.ingestion_pipeline(), files, args.debug))
    except StorageError as e:
        print(f"[red]Storage error:[/] {e.message}")
        raise SystemExit(1)

    print(f"[green]Summary:[/] processed={counters['files']} accepted={counters['accepted']} "
          f"rejected={counters['rejected']} total_chunks={counters['chunks']}")
    total = len(container.document_repository().list_documents())
    print(f"[green]Done.[/] Knowledge base now holds {total} documents.")


if __name__ == '__main__':  # pragma: no cover
    main()
