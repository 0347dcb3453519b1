"""Ingestion: read a garden directory and build a repository in one step.

Parsing is independent per file, so it runs on a thread pool; the results
are collected in input order and handed to :meth:`NoteRepository.build` as a
single batch. A caller therefore only ever sees an empty or a fully built
repository.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from garden.errors import Diagnostic, IngestError, ParseError
from garden.note import Note, note_id_from_path
from garden.parser import parse_note
from garden.repository import NoteRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestResult:
    repository: NoteRepository
    diagnostics: tuple[Diagnostic, ...]

    @property
    def errors(self) -> tuple[Diagnostic, ...]:
        return tuple(d for d in self.diagnostics if d.level == "error")


def discover(root: Path) -> list[Path]:
    """Return every ``.md`` file below *root*, sorted."""
    return sorted(p for p in Path(root).glob("**/*.md") if p.is_file())


def _parse_one(item: tuple[str, str, str], public_field: str) -> Note | Diagnostic:
    note_id, content, source = item
    try:
        return parse_note(note_id, content, source=source, public_field=public_field)
    except ParseError as exc:
        return Diagnostic.from_error(exc)


def ingest_contents(
    items: Iterable[tuple[str, str, str]],
    *,
    workers: int | None = None,
    public_field: str = "public",
    diagnostics: Iterable[Diagnostic] = (),
) -> IngestResult:
    """Parse ``(note_id, content, source)`` triples and build a repository.

    Files that fail to parse are skipped and reported as error diagnostics;
    duplicate ids are reported as warnings by the repository.
    """
    collected = list(diagnostics)
    notes: list[Note] = []
    with ThreadPoolExecutor(max_workers=workers) as pool:
        for outcome in pool.map(lambda item: _parse_one(item, public_field), items):
            if isinstance(outcome, Diagnostic):
                logger.warning("Skipping note: %s", outcome.message)
                collected.append(outcome)
            else:
                notes.append(outcome)

    repository = NoteRepository.build(notes)
    collected.extend(repository.diagnostics)
    logger.info(
        "Ingested %d note(s), %d published, %d diagnostic(s)",
        len(repository),
        len(repository.published),
        len(collected),
    )
    return IngestResult(repository=repository, diagnostics=tuple(collected))


def load_garden(
    root: Path | str,
    *,
    workers: int | None = None,
    public_field: str = "public",
) -> IngestResult:
    """Read every note below *root* and ingest it.

    Raises :class:`IngestError` when *root* is not a directory; unreadable
    files are reported as diagnostics and skipped.
    """
    root = Path(root)
    if not root.is_dir():
        raise IngestError(f"garden root {root} is not a directory")

    def read(path: Path) -> tuple[str, str, str] | Diagnostic:
        try:
            return note_id_from_path(path, root), path.read_bytes().decode("utf-8"), str(path)
        except (OSError, UnicodeDecodeError) as exc:
            return Diagnostic.from_error(ParseError(str(path), f"could not read file: {exc}"))

    logger.info("Loading notes from %s", root)
    items: list[tuple[str, str, str]] = []
    diagnostics: list[Diagnostic] = []
    with ThreadPoolExecutor(max_workers=workers) as pool:
        for outcome in pool.map(read, discover(root)):
            if isinstance(outcome, Diagnostic):
                logger.warning("Skipping note: %s", outcome.message)
                diagnostics.append(outcome)
            else:
                items.append(outcome)

    return ingest_contents(
        items, workers=workers, public_field=public_field, diagnostics=diagnostics
    )
