"""Link graph over the notes of a repository.

Uses :mod:`networkx` to hold the directed ``[[WikiLink]]`` graph so backlink
and orphan queries don't need their own bookkeeping.
"""

from __future__ import annotations

from typing import Iterable

import networkx as nx

from garden.note import Note


def build_link_graph(notes: Iterable[Note]) -> nx.DiGraph:
    """Return a ``DiGraph`` with one node per note and one edge per resolved link.

    A link resolves to the note with that exact id, else to the only note
    whose id ends in that file name (``[[gamma]]`` → ``sub/gamma``).
    Unresolved or ambiguous links are dropped. Every node carries the note's
    ``title`` and ``public`` flag as attributes.
    """
    notes = list(notes)
    graph: nx.DiGraph = nx.DiGraph()
    by_name: dict[str, list[str]] = {}
    for note in notes:
        graph.add_node(note.id, title=note.title, public=note.public)
        by_name.setdefault(note.id.rsplit("/", 1)[-1], []).append(note.id)
    for note in notes:
        for link in note.links:
            target = link if link in graph else resolve_link(link, by_name)
            if target is not None and target != note.id:
                graph.add_edge(note.id, target)
    return graph


def resolve_link(link: str, by_name: dict[str, list[str]]) -> str | None:
    candidates = by_name.get(link.rsplit("/", 1)[-1], [])
    return candidates[0] if len(candidates) == 1 else None


def backlinks(graph: nx.DiGraph, note_id: str) -> list[str]:
    """Ids of notes linking *to* ``note_id``, sorted."""
    if note_id not in graph:
        return []
    return sorted(graph.predecessors(note_id))


def orphans(graph: nx.DiGraph, *, public_only: bool = True) -> list[str]:
    """Ids of notes with no incoming or outgoing links, sorted."""
    return sorted(
        node
        for node, data in graph.nodes(data=True)
        if graph.degree(node) == 0 and (data.get("public") or not public_only)
    )


def published_subgraph(graph: nx.DiGraph) -> nx.DiGraph:
    """View of *graph* restricted to public notes."""
    return graph.subgraph(n for n, data in graph.nodes(data=True) if data.get("public"))
