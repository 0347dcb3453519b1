"""Navigate module: move a cursor over the displayed notes in NORMAL mode.

The cursor is clamped to the list bounds; it never wraps around.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from garden.effects import CursorMoved, Effect, Mode, NoteOpened
from garden.registry import Module

if TYPE_CHECKING:
    from garden.dispatcher import DispatchView

NAME = "navigate"


def _move(step: int):
    def handler(view: "DispatchView", key: str) -> list[Effect]:
        if not view.displayed:
            return []
        target = max(0, min(view.cursor + step, len(view.displayed) - 1))
        return [CursorMoved(target)]

    return handler


def first(view: "DispatchView", key: str) -> list[Effect]:
    return [CursorMoved(0)] if view.displayed else []


def last(view: "DispatchView", key: str) -> list[Effect]:
    return [CursorMoved(len(view.displayed) - 1)] if view.displayed else []


def open_selected(view: "DispatchView", key: str) -> list[Effect]:
    selected = view.selected
    return [NoteOpened(selected)] if selected is not None else []


def create_module() -> Module:
    down, up = _move(1), _move(-1)
    return Module(
        NAME,
        {
            (Mode.NORMAL, "j"): down,
            (Mode.NORMAL, "down"): down,
            (Mode.NORMAL, "k"): up,
            (Mode.NORMAL, "up"): up,
            (Mode.NORMAL, "g"): first,
            (Mode.NORMAL, "G"): last,
            (Mode.NORMAL, "enter"): open_selected,
        },
    )
