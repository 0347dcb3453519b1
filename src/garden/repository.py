"""NoteRepository: the full in-memory set of notes and its derived views."""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping

import networkx as nx

from garden import graph as link_graph
from garden.errors import Diagnostic, DuplicateNoteId
from garden.note import Note, chronological, normalise_tag

logger = logging.getLogger(__name__)


class NoteRepository:
    """Owns every parsed note and the views derived from them.

    Instances are built in one step by :meth:`build` and never modified
    afterwards; a changed note set means a new repository.
    """

    def __init__(
        self,
        notes: Mapping[str, Note],
        diagnostics: Iterable[Diagnostic] = (),
    ) -> None:
        self._notes: Mapping[str, Note] = MappingProxyType(dict(notes))
        self.diagnostics: tuple[Diagnostic, ...] = tuple(diagnostics)
        self._build_views()

    @classmethod
    def build(cls, notes: Iterable[Note]) -> "NoteRepository":
        """Build a repository from *notes*; on a duplicate id the later note wins."""
        by_id: dict[str, Note] = {}
        sources: dict[str, list[str]] = {}
        diagnostics: list[Diagnostic] = []
        for note in notes:
            sources.setdefault(note.id, []).append(note.source or note.id)
            if note.id in by_id:
                error = DuplicateNoteId(note.id, sources[note.id])
                logger.warning("%s", error)
                diagnostics.append(Diagnostic.from_error(error, level="warning"))
            by_id[note.id] = note
        return cls(by_id, diagnostics)

    def rebuild(self, notes: Iterable[Note]) -> "NoteRepository":
        """Return a new repository over *notes*; this one is left untouched."""
        return type(self).build(notes)

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    def _build_views(self) -> None:
        self.chronological: tuple[Note, ...] = tuple(chronological(self._notes.values()))
        self.published: tuple[Note, ...] = tuple(n for n in self.chronological if n.public)
        self.tags: Mapping[str, frozenset[str]] = self._tag_index(self.chronological)
        self.published_tags: Mapping[str, frozenset[str]] = self._tag_index(self.published)
        self.graph: nx.DiGraph = link_graph.build_link_graph(self.chronological)

    @staticmethod
    def _tag_index(notes: Iterable[Note]) -> Mapping[str, frozenset[str]]:
        index: dict[str, set[str]] = {}
        for note in notes:
            for tag in note.tags:
                index.setdefault(tag, set()).add(note.id)
        return MappingProxyType({tag: frozenset(ids) for tag, ids in sorted(index.items())})

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------

    def get(self, note_id: str) -> Note | None:
        return self._notes.get(note_id)

    def __getitem__(self, note_id: str) -> Note:
        return self._notes[note_id]

    def __contains__(self, note_id: object) -> bool:
        return note_id in self._notes

    def __len__(self) -> int:
        return len(self._notes)

    def __iter__(self) -> Iterator[Note]:
        return iter(self.chronological)

    @property
    def ids(self) -> frozenset[str]:
        return frozenset(self._notes)

    def with_tag(self, tag: str, *, descendants: bool = False) -> tuple[Note, ...]:
        """Notes carrying *tag*, newest first.

        With ``descendants=True`` notes tagged anywhere below *tag* in the
        hierarchy (``area`` → ``area/hobby``) are included too.
        """
        tag = normalise_tag(tag)
        ids: set[str] = set(self.tags.get(tag, ()))
        if descendants:
            prefix = f"{tag}/"
            for other, other_ids in self.tags.items():
                if other.startswith(prefix):
                    ids.update(other_ids)
        return tuple(n for n in self.chronological if n.id in ids)

    def backlinks(self, note_id: str) -> list[str]:
        return link_graph.backlinks(self.graph, note_id)

    def edges(self) -> list[tuple[str, str]]:
        """Return ``(source_id, target_id)`` pairs for every resolved link."""
        return sorted(self.graph.edges())

    def orphans(self) -> list[str]:
        """Published notes that neither link nor are linked to."""
        return link_graph.orphans(self.graph)
