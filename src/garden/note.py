"""Core Note dataclass."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import PurePath
from types import MappingProxyType
from typing import Any, Mapping

#: Fixed textual format of the ``created`` / ``modified`` header fields.
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M"

_WHITESPACE_RE = re.compile(r"\s+")
_EPOCH = datetime(1970, 1, 1)
_NOTE_SUFFIXES = {".md", ".markdown"}


def note_id_from_path(path: PurePath | str, root: PurePath | str | None = None) -> str:
    """Derive a stable note id from a file path.

    A ``.md`` suffix is dropped, separators become ``/``, the result is
    lowercased and whitespace runs collapse to ``-``: ``Notes/My Idea.md``
    becomes ``notes/my-idea``.
    """
    path = PurePath(path)
    if root is not None:
        path = path.relative_to(root)
    if path.suffix.lower() in _NOTE_SUFFIXES:
        path = path.with_suffix("")
    stem = path.as_posix()
    return _WHITESPACE_RE.sub("-", stem.strip()).lower()


def normalise_tag(tag: str) -> str:
    return tag.strip().lstrip("#").strip("/").casefold()


@dataclass(frozen=True)
class Note:
    """A single parsed note. Immutable after parse."""

    id: str
    title: str
    created: datetime
    modified: datetime
    body: str
    description: str = ""
    image: str | None = None
    tags: frozenset[str] = frozenset()
    public: bool = False
    #: Note ids this note links to via ``[[WikiLinks]]``
    links: tuple[str, ...] = ()
    #: ``![[media/...]]`` embeds, in order of appearance
    media: tuple[str, ...] = ()
    #: Path or label the note was read from, for diagnostics
    source: str = ""
    #: Unrecognised header keys, kept read-only for collaborators
    extra: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}), compare=False)

    @property
    def page_name(self) -> str:
        """File name of the rendered page."""
        return f"{self.id}.html"

    @property
    def sort_key(self) -> tuple[int, str]:
        """Chronological key: newest ``created`` first, then id ascending."""
        return (-((self.created - _EPOCH) // timedelta(minutes=1)), self.id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "image": self.image,
            "tags": sorted(self.tags),
            "public": self.public,
            "created": self.created.strftime(TIMESTAMP_FORMAT),
            "modified": self.modified.strftime(TIMESTAMP_FORMAT),
            "links": list(self.links),
            "media": list(self.media),
        }


def chronological(notes) -> list[Note]:
    """Return *notes* ordered by ``created`` descending, ties by id ascending."""
    return sorted(notes, key=lambda n: n.sort_key)
