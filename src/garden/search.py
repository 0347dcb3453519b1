"""SearchIndex: tiered, case-insensitive lookup over notes.

Ranking is deliberately simple and predictable. A note matches a query in
one of three tiers, and tiers never interleave:

1. tag   - the query equals one of the note's tags, or an ancestor of one
           (``area`` matches ``area/hobby``)
2. title - the query is a substring of the title
3. body  - the query is a substring of the body

Within a tier notes are ordered newest first, then by id.

The query text is matched as typed apart from case: ``"apple "`` only
matches where a space follows ``apple``. A query of only whitespace
matches nothing.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping

from garden.errors import IndexBuildError
from garden.note import Note, chronological

_TAG_TIER = 0
_TITLE_TIER = 1
_BODY_TIER = 2


@dataclass(frozen=True)
class _Entry:
    note_id: str
    rank: int  # position in chronological order
    title: str
    body: str


def _with_ancestors(tags: Iterable[str]) -> set[str]:
    expanded: set[str] = set()
    for tag in tags:
        parts = tag.casefold().split("/")
        expanded.update("/".join(parts[: i + 1]) for i in range(len(parts)))
    return expanded


class SearchIndex:
    """Immutable index over one snapshot of notes. Rebuild it when the notes change."""

    def __init__(self, entries: Iterable[_Entry], tags: Mapping[str, frozenset[str]]) -> None:
        self._entries: tuple[_Entry, ...] = tuple(entries)
        self.tags: Mapping[str, frozenset[str]] = MappingProxyType(dict(tags))

    @classmethod
    def build(cls, notes: Iterable[Note]) -> "SearchIndex":
        """Index *notes*. Raises :class:`IndexBuildError` on a repeated note id."""
        seen: set[str] = set()
        entries: list[_Entry] = []
        tags: dict[str, set[str]] = {}
        for rank, note in enumerate(chronological(notes)):
            if note.id in seen:
                raise IndexBuildError(f"note id '{note.id}' indexed twice")
            seen.add(note.id)
            entries.append(_Entry(note.id, rank, note.title.casefold(), note.body.casefold()))
            for tag in _with_ancestors(note.tags):
                tags.setdefault(tag, set()).add(note.id)

        return cls(entries, {tag: frozenset(ids) for tag, ids in tags.items()})

    def __len__(self) -> int:
        return len(self._entries)

    def query(self, text: str) -> tuple[str, ...]:
        """Return note ids matching *text*, most relevant first. ``""`` matches nothing."""
        if not text.strip():
            return ()
        needle = text.casefold()
        tagged = self.tags.get(needle, frozenset())

        scored: list[tuple[int, int, str]] = []
        for entry in self._entries:
            if entry.note_id in tagged:
                tier = _TAG_TIER
            elif needle in entry.title:
                tier = _TITLE_TIER
            elif needle in entry.body:
                tier = _BODY_TIER
            else:
                continue
            scored.append((tier, entry.rank, entry.note_id))

        scored.sort()
        return tuple(note_id for *_, note_id in scored)
