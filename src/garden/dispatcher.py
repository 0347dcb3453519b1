"""Input dispatcher: routes key events to module handlers and tracks UI state.

The dispatcher owns the current mode, the query, the displayed list and the
cursor. Handlers only see a :class:`DispatchView` snapshot and return effects;
the dispatcher applies them to its own state and hands them back to the
caller for rendering.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from garden.effects import (
    CursorMoved,
    Effect,
    ListUpdated,
    Mode,
    ModeChanged,
    QueryChanged,
)
from garden.registry import ModuleRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DispatchView:
    mode: Mode
    query: str
    displayed: tuple[str, ...]
    cursor: int

    @property
    def selected(self) -> str | None:
        if not self.displayed:
            return None
        return self.displayed[self.cursor]


class Dispatcher:
    """Single-threaded key-event loop over a frozen :class:`ModuleRegistry`."""

    def __init__(self, registry: ModuleRegistry, displayed: Iterable[str] = ()) -> None:
        registry.freeze()
        self.registry = registry
        self.mode = Mode.NORMAL
        self.query = ""
        self.displayed: tuple[str, ...] = tuple(displayed)
        self.cursor = 0
        self._saved: tuple[tuple[str, ...], int] | None = None
        self._busy = False

    @property
    def view(self) -> DispatchView:
        return DispatchView(self.mode, self.query, self.displayed, self.cursor)

    def dispatch(self, key: str) -> list[Effect]:
        """Process one key event fully and return the effects it produced."""
        if self._busy:
            raise RuntimeError("dispatch() called while another event is being processed")
        handler = self.registry.resolve(self.mode, key)
        if handler is None:
            return []

        self._busy = True
        try:
            effects: list[Effect] = []
            for effect in handler(self.view, key):
                effects.extend(self._apply(effect))
            return effects
        finally:
            self._busy = False

    # ------------------------------------------------------------------
    # State transitions
    # ------------------------------------------------------------------

    def _apply(self, effect: Effect) -> list[Effect]:
        """Apply *effect*; return it as applied, followed by any follow-up effects."""
        if isinstance(effect, ModeChanged):
            return [effect, *self._change_mode(effect)]
        if isinstance(effect, QueryChanged):
            self.query = effect.query
        elif isinstance(effect, ListUpdated):
            if effect.note_ids != self.displayed:
                self.displayed = effect.note_ids
                self.cursor = 0
        elif isinstance(effect, CursorMoved):
            self.cursor = self._clamp(effect.index)
            return [CursorMoved(self.cursor)]
        return [effect]

    def _change_mode(self, effect: ModeChanged) -> list[Effect]:
        previous, self.mode = self.mode, effect.mode
        if previous == effect.mode:
            return []
        logger.debug("Mode %s -> %s", previous, effect.mode)

        if effect.mode is Mode.SEARCH:
            self._saved = (self.displayed, self.cursor)
            self.query = ""
            return []

        saved, self._saved = self._saved, None
        self.query = ""
        if previous is Mode.SEARCH and effect.restore and saved is not None:
            self.displayed, self.cursor = saved
            return [ListUpdated(self.displayed), CursorMoved(self.cursor)]
        return []

    def _clamp(self, index: int) -> int:
        if not self.displayed:
            return 0
        return max(0, min(index, len(self.displayed) - 1))
