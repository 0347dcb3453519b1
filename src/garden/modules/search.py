"""Search module: ``/`` opens a query, typed characters refine it.

Bindings
--------
- NORMAL ``/``          enter search mode with an empty query
- SEARCH ``esc``        discard the query, restore the previous list
- SEARCH ``enter``      leave search mode keeping the results on screen
- SEARCH ``backspace``  drop the last query character
- SEARCH any other key  single characters are appended to the query
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from garden.effects import Effect, FocusRequested, ListUpdated, Mode, ModeChanged, QueryChanged
from garden.registry import ANY_KEY, Module

if TYPE_CHECKING:
    from garden.dispatcher import DispatchView
    from garden.search import SearchIndex

NAME = "search"


class _SearchModule:
    def __init__(self, index: "SearchIndex") -> None:
        self._index = index

    def enter(self, view: "DispatchView", key: str) -> list[Effect]:
        return [ModeChanged(Mode.SEARCH), QueryChanged(""), FocusRequested(NAME)]

    def leave(self, view: "DispatchView", key: str) -> list[Effect]:
        return [QueryChanged(""), ModeChanged(Mode.NORMAL)]

    def commit(self, view: "DispatchView", key: str) -> list[Effect]:
        return [ModeChanged(Mode.NORMAL, restore=False)]

    def backspace(self, view: "DispatchView", key: str) -> list[Effect]:
        return self._requery(view.query[:-1])

    def type_text(self, view: "DispatchView", key: str) -> list[Effect]:
        # Named keys ("tab", "left", ...) without a binding are not text
        if len(key) != 1:
            return []
        return self._requery(view.query + key)

    def _requery(self, query: str) -> list[Effect]:
        return [QueryChanged(query), ListUpdated(self._index.query(query))]

    def module(self) -> Module:
        return Module(
            NAME,
            {
                (Mode.NORMAL, "/"): self.enter,
                (Mode.SEARCH, "esc"): self.leave,
                (Mode.SEARCH, "enter"): self.commit,
                (Mode.SEARCH, "backspace"): self.backspace,
                (Mode.SEARCH, ANY_KEY): self.type_text,
            },
        )


def create_module(index: "SearchIndex") -> Module:
    return _SearchModule(index).module()
