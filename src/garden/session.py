"""Interactive session bootstrap.

One routine builds everything in a fixed order: search index, module list,
registry, dispatcher. A registry error aborts startup before any key event
is accepted.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from garden.dispatcher import Dispatcher
from garden.effects import Effect
from garden.errors import ConflictingBinding, Diagnostic, DuplicateModule
from garden.ingest import load_garden
from garden.modules import create_modules
from garden.registry import ModuleRegistry
from garden.repository import NoteRepository
from garden.search import SearchIndex
from garden.settings import Settings, configure_logging

logger = logging.getLogger(__name__)


@dataclass
class Session:
    repository: NoteRepository
    index: SearchIndex
    registry: ModuleRegistry
    dispatcher: Dispatcher
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)

    def dispatch(self, key: str) -> list[Effect]:
        return self.dispatcher.dispatch(key)

    def close(self) -> None:
        self.registry.clear()


def start_session(
    repository: NoteRepository,
    *,
    published: bool = True,
    diagnostics: tuple[Diagnostic, ...] = (),
) -> Session:
    """Build the index, modules, registry and dispatcher over *repository*.

    With ``published=False`` (local preview) private notes are searchable
    and listed too.
    """
    notes = repository.published if published else repository.chronological
    index = SearchIndex.build(notes)
    try:
        registry = ModuleRegistry(create_modules(index))
    except (DuplicateModule, ConflictingBinding) as exc:
        logger.error("Module registration failed: %s", exc)
        raise
    dispatcher = Dispatcher(registry, displayed=[n.id for n in notes])
    logger.info(
        "Session ready: %d note(s), modules %s", len(notes), ", ".join(registry.names())
    )
    return Session(repository, index, registry, dispatcher, diagnostics)


def open_garden(settings: Settings, *, published: bool = True) -> Session:
    """Configure logging, load the notes named in *settings* and start a session over them."""
    configure_logging(settings.log_level)
    result = load_garden(
        settings.paths.input,
        workers=settings.workers,
        public_field=settings.front_matter.public_field,
    )
    return start_session(result.repository, published=published, diagnostics=result.diagnostics)
