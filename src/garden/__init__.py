"""Digital-garden builder: notes in, site model, search index and key dispatcher out."""

from garden.dispatcher import Dispatcher
from garden.effects import Mode
from garden.ingest import IngestResult, ingest_contents, load_garden
from garden.note import Note
from garden.parser import parse_note
from garden.registry import Module, ModuleRegistry
from garden.repository import NoteRepository
from garden.search import SearchIndex
from garden.session import Session, start_session
from garden.site import Site, build_site

__all__ = [
    "Note",
    "parse_note",
    "NoteRepository",
    "IngestResult",
    "ingest_contents",
    "load_garden",
    "SearchIndex",
    "Mode",
    "Module",
    "ModuleRegistry",
    "Dispatcher",
    "Session",
    "start_session",
    "Site",
    "build_site",
]
