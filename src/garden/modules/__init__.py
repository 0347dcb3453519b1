"""Interactive modules: each ``create_module`` factory returns a :class:`Module`."""

from __future__ import annotations

from typing import TYPE_CHECKING

from garden.modules import navigate, search

if TYPE_CHECKING:
    from garden.registry import Module
    from garden.search import SearchIndex


def create_modules(index: "SearchIndex") -> list["Module"]:
    """Build the default module set, once, in a fixed order."""
    return [
        search.create_module(index),
        navigate.create_module(),
    ]
