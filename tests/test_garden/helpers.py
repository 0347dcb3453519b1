"""Note builders shared by the test modules."""

from __future__ import annotations

import textwrap
from datetime import datetime
from pathlib import Path

from garden.note import Note


def note_text(
    title: str | None = "A Note",
    *,
    tags: list[str] | None = None,
    public: bool | None = True,
    created: str = "2024-01-01T10:00",
    modified: str | None = None,
    body: str = "Body.\n",
    extra: str = "",
) -> str:
    """Render a note file with a YAML header."""
    lines = ["---"]
    if title is not None:
        lines.append(f"title: {title}")
    if tags is not None:
        lines.append(f"tags: [{', '.join(tags)}]")
    if public is not None:
        lines.append(f"public: {'true' if public else 'false'}")
    lines.append(f"created: {created}")
    lines.append(f"modified: {modified or created}")
    if extra:
        lines.append(extra.rstrip("\n"))
    lines.append("---")
    return "\n".join(lines) + "\n" + body


def write_note(directory: Path, name: str, content: str) -> Path:
    path = directory / f"{name}.md"
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


def make_note(
    note_id: str,
    *,
    title: str | None = None,
    body: str = "",
    tags: tuple[str, ...] = (),
    public: bool = True,
    created: str = "2024-01-01T10:00",
    links: tuple[str, ...] = (),
    source: str = "",
) -> Note:
    stamp = datetime.strptime(created, "%Y-%m-%dT%H:%M")
    return Note(
        id=note_id,
        title=title or note_id.title(),
        created=stamp,
        modified=stamp,
        body=body,
        tags=frozenset(tags),
        public=public,
        links=links,
        source=source or f"{note_id}.md",
    )


