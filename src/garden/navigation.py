"""Hierarchical tag tree used for site navigation.

``area/hobby`` on a note places it under node ``area`` → child ``hobby``.
Children and files are sorted so the tree renders identically every run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from garden.note import Note

logger = logging.getLogger(__name__)

ROOT_TAG = "#"


@dataclass(frozen=True)
class TagNode:
    tag: str
    children: tuple["TagNode", ...] = ()
    files: tuple[str, ...] = ()

    def find(self, path: str) -> "TagNode | None":
        """Return the node for a ``/``-separated tag path, or ``None``."""
        node: TagNode | None = self
        for part in filter(None, path.split("/")):
            node = next((c for c in node.children if c.tag == part), None)
            if node is None:
                return None
        return node

    def to_dict(self) -> dict[str, Any]:
        return {
            "tag": self.tag,
            "child_tags": [c.to_dict() for c in self.children],
            "files": list(self.files),
        }


@dataclass
class _RawNode:
    tag: str
    children: dict[str, "_RawNode"] = field(default_factory=dict)
    files: set[str] = field(default_factory=set)

    def freeze(self) -> TagNode:
        return TagNode(
            tag=self.tag,
            children=tuple(self.children[t].freeze() for t in sorted(self.children)),
            files=tuple(sorted(self.files)),
        )


def build_navigation(notes: Iterable[Note]) -> TagNode:
    root = _RawNode(ROOT_TAG)
    for note in notes:
        for tag in note.tags:
            parts = [p for p in tag.split("/") if p]
            if not parts:
                continue
            node = root
            for part in parts:
                node = node.children.setdefault(part, _RawNode(part))
            node.files.add(note.id)
            logger.debug("Inserted %s under the tag %s", note.id, tag)
    return root.freeze()
