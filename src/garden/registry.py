"""Module registry for the interactive layer.

A module is a named bundle of key bindings. Each binding is keyed by a
``(mode, key)`` pattern, so a module may act in several modes::

    Module("search", {
        (Mode.NORMAL, "/"):   enter_search,
        (Mode.SEARCH, "esc"): leave_search,
        (Mode.SEARCH, ANY_KEY): append_text,
    })

Modules are built once by an initialisation routine and handed to
:class:`ModuleRegistry`, which rejects duplicate names and conflicting
patterns up front. Once a dispatcher starts, the registry is frozen.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Iterable, Mapping, Protocol

from garden.effects import Effect, Mode
from garden.errors import ConflictingBinding, DuplicateModule, RegistryFrozen

if TYPE_CHECKING:
    from garden.dispatcher import DispatchView

logger = logging.getLogger(__name__)

#: Pattern key matching any key without an exact binding in the same mode
ANY_KEY = "<any>"

KeyPattern = tuple[Mode, str]


class Handler(Protocol):
    def __call__(self, view: "DispatchView", key: str) -> list[Effect]: ...


# ---------------------------------------------------------------------------
# Module
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Module:
    name: str
    bindings: Mapping[KeyPattern, Handler] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "bindings", MappingProxyType(dict(self.bindings)))

    @property
    def modes(self) -> frozenset[Mode]:
        return frozenset(mode for mode, _ in self.bindings)


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class ModuleRegistry:
    """Table of registered modules and the patterns they claim."""

    def __init__(self, modules: Iterable[Module] = ()) -> None:
        self._modules: dict[str, Module] = {}
        self._owners: dict[KeyPattern, str] = {}
        self._frozen = False
        for module in modules:
            self.register(module)

    def register(self, module: Module) -> None:
        """Add *module*; nothing is registered if validation fails."""
        if self._frozen:
            raise RegistryFrozen(f"cannot register '{module.name}' after dispatch has started")
        if module.name in self._modules:
            raise DuplicateModule(module.name)
        for mode, key in module.bindings:
            owner = self._owners.get((mode, key))
            if owner is not None:
                raise ConflictingBinding(module.name, mode, key, owner)

        self._modules[module.name] = module
        for pattern in module.bindings:
            self._owners[pattern] = module.name
        logger.debug("Registered module %s (%d bindings)", module.name, len(module.bindings))

    def resolve(self, mode: Mode, key: str) -> Handler | None:
        """Return the handler bound to *key* in *mode*, else the mode's wildcard, else ``None``."""
        for pattern in ((mode, key), (mode, ANY_KEY)):
            owner = self._owners.get(pattern)
            if owner is not None:
                return self._modules[owner].bindings[pattern]
        return None

    def freeze(self) -> None:
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def clear(self) -> None:
        self._modules.clear()
        self._owners.clear()

    def names(self) -> list[str]:
        return list(self._modules)

    def __contains__(self, name: object) -> bool:
        return name in self._modules

    def __len__(self) -> int:
        return len(self._modules)
