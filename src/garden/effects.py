"""Declarative UI effects returned by the dispatcher.

A rendering collaborator applies these to whatever surface it drives; the
dispatcher itself never produces output.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Union


class Mode(enum.Enum):
    NORMAL = "normal"
    SEARCH = "search"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class ModeChanged:
    mode: Mode
    #: When leaving SEARCH, restore the list and cursor saved on entry
    restore: bool = True


@dataclass(frozen=True)
class QueryChanged:
    query: str


@dataclass(frozen=True)
class ListUpdated:
    note_ids: tuple[str, ...]


@dataclass(frozen=True)
class CursorMoved:
    index: int


@dataclass(frozen=True)
class FocusRequested:
    target: str


@dataclass(frozen=True)
class NoteOpened:
    note_id: str


Effect = Union[ModeChanged, QueryChanged, ListUpdated, CursorMoved, FocusRequested, NoteOpened]
