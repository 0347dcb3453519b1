"""Error taxonomy and the diagnostics they turn into.

Recoverable errors (a bad note file, a duplicate id) are converted into
:class:`Diagnostic` records and collected; the remaining errors are fatal
and propagate to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence


class GardenError(Exception):
    """Base class for every error raised by :mod:`garden`."""

    source: str = ""


# ---------------------------------------------------------------------------
# Ingestion (recoverable)
# ---------------------------------------------------------------------------


class ParseError(GardenError):
    """A note's header is malformed, incomplete or fails validation."""

    def __init__(self, source: str, reason: str, field: str | None = None) -> None:
        self.source = source
        self.reason = reason
        self.field = field
        where = f" (field '{field}')" if field else ""
        super().__init__(f"{source}: {reason}{where}")


class DuplicateNoteId(GardenError):
    """Two notes derived the same id; the later one was kept."""

    def __init__(self, note_id: str, sources: Sequence[str]) -> None:
        self.note_id = note_id
        self.sources = tuple(sources)
        self.source = self.sources[-1] if self.sources else note_id
        super().__init__(
            f"duplicate note id '{note_id}' from {', '.join(self.sources)}; keeping the last"
        )


class IngestError(GardenError):
    """Ingestion cannot proceed at all (e.g. the garden root is missing)."""


# ---------------------------------------------------------------------------
# Startup (fatal)
# ---------------------------------------------------------------------------


class DuplicateModule(GardenError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"module '{name}' is already registered")


class ConflictingBinding(GardenError):
    def __init__(self, module: str, mode: object, key: str, owner: str) -> None:
        self.module = module
        self.mode = mode
        self.key = key
        self.owner = owner
        super().__init__(
            f"module '{module}' binds '{key}' in {mode}, already claimed by '{owner}'"
        )


class RegistryFrozen(GardenError):
    """Registration attempted after dispatch started."""


class IndexBuildError(GardenError):
    """Internal invariant violation while building the search index."""


class ConfigError(GardenError):
    """Settings file or environment override is invalid."""


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Diagnostic:
    level: str  # "error" | "warning"
    source: str
    code: str  # error class name, e.g. "ParseError"
    message: str

    @classmethod
    def from_error(cls, error: GardenError, level: str = "error") -> "Diagnostic":
        return cls(
            level=level,
            source=error.source,
            code=type(error).__name__,
            message=str(error),
        )

    def __str__(self) -> str:
        return f"[{self.level}] {self.message}"
