"""Site model handed to the rendering collaborator.

Only published notes reach the site: the collaborator receives the notes in
chronological order, the tag index, the navigation tree, the content map
used for client-side search, and the index's query function. It never sees
raw file content.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping

from garden import graph as link_graph
from garden.navigation import TagNode, build_navigation
from garden.note import Note
from garden.repository import NoteRepository
from garden.search import SearchIndex


@dataclass(frozen=True)
class Site:
    notes: tuple[Note, ...]
    tag_index: Mapping[str, frozenset[str]]
    navigation: TagNode
    content_map: dict[str, dict[str, Any]]
    links: tuple[tuple[str, str], ...]
    query: Callable[[str], tuple[str, ...]]


def build_content_map(notes) -> dict[str, dict[str, Any]]:
    """Map each page name to the fields the client-side search needs."""
    return {
        note.page_name: {
            "title": note.title,
            "description": note.description,
            "tags": sorted(note.tags),
        }
        for note in notes
    }


def build_site(repository: NoteRepository, index: SearchIndex | None = None) -> Site:
    """Assemble the published view of *repository*.

    *index* defaults to a fresh index over the published notes.
    """
    published = repository.published
    if index is None:
        index = SearchIndex.build(published)

    return Site(
        notes=published,
        tag_index=repository.published_tags,
        navigation=build_navigation(published),
        content_map=build_content_map(published),
        links=tuple(sorted(link_graph.published_subgraph(repository.graph).edges())),
        query=index.query,
    )
