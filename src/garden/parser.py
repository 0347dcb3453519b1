"""YAML front-matter, WikiLink and media-embed parser.

:func:`parse_note` is a pure function from file content to :class:`Note`; it
never touches the filesystem, so callers may run it on many files at once.
"""

from __future__ import annotations

import re
from datetime import datetime
from types import MappingProxyType
from typing import Any

import yaml

from garden.errors import ParseError
from garden.note import TIMESTAMP_FORMAT, Note, normalise_tag, note_id_from_path

# [[Target]], [[Target|Alias]] or [[Target#Heading]], but not ![[embeds]]
_WIKILINK_RE = re.compile(r"(?<!!)\[\[([^\]|#]+)(?:[|#][^\]]*)?\]\]")
# ![[media/file.png]] or ![[media/file.png|caption]]
_MEDIA_RE = re.compile(r"!\[\[(media/[^|\]]+)(?:\|[^\[\]]+)?\]\]")
# Header block: opening marker on the first line, closing marker on its own line
_FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)", re.DOTALL | re.MULTILINE
)
_TIMESTAMP_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}$")

_KNOWN_FIELDS = {"title", "description", "image", "tags", "created", "modified"}


def split_frontmatter(content: str, source: str = "<string>") -> tuple[dict[str, Any], str]:
    """Split the YAML header from the body text.

    Returns ``(metadata, body)``; *body* is everything after the closing
    marker line, untouched. Raises :class:`ParseError` when there is no header
    block or it is not a YAML mapping.
    """
    match = _FRONTMATTER_RE.match(content)
    if not match:
        raise ParseError(source, "missing front matter block")
    try:
        meta = yaml.safe_load(match.group(1))
    except yaml.YAMLError as exc:
        raise ParseError(source, f"invalid YAML in front matter: {exc}") from exc
    if meta is None:
        meta = {}
    if not isinstance(meta, dict):
        raise ParseError(source, "front matter is not a mapping")
    return meta, content[match.end() :]


def parse_wikilinks(text: str) -> list[str]:
    """Return the note ids of all ``[[WikiLink]]`` targets in *text* (de-duped, ordered)."""
    seen: set[str] = set()
    result: list[str] = []
    for m in _WIKILINK_RE.finditer(text):
        raw = m.group(1).strip()
        if not raw:
            continue
        target = note_id_from_path(raw)
        if target not in seen:
            seen.add(target)
            result.append(target)
    return result


def parse_media(text: str) -> list[str]:
    """Return all ``![[media/...]]`` embed paths in *text* (de-duped, ordered)."""
    return list(dict.fromkeys(m.group(1).strip() for m in _MEDIA_RE.finditer(text)))


def parse_tags(value: Any, source: str) -> frozenset[str]:
    if value is None:
        return frozenset()
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, list) or not all(isinstance(t, str) for t in value):
        raise ParseError(source, "expected a list of strings", "tags")
    return frozenset(tag for tag in map(normalise_tag, value) if tag)


def parse_timestamp(value: Any, source: str, field: str) -> datetime:
    if value is None:
        raise ParseError(source, "missing required field", field)
    if not isinstance(value, str) or not _TIMESTAMP_RE.match(value.strip()):
        raise ParseError(source, f"expected a timestamp formatted YYYY-MM-DDTHH:MM, got {value!r}", field)
    try:
        return datetime.strptime(value.strip(), TIMESTAMP_FORMAT)
    except ValueError as exc:
        raise ParseError(source, f"invalid timestamp {value!r}: {exc}", field) from exc


def _optional_str(meta: dict[str, Any], key: str, source: str) -> str | None:
    value = meta.get(key)
    if value is not None and not isinstance(value, str):
        raise ParseError(source, "expected a string", key)
    return value


def parse_note(
    note_id: str,
    content: str,
    *,
    source: str | None = None,
    public_field: str = "public",
) -> Note:
    """Parse one note's raw *content* into a :class:`Note`.

    *public_field* names the header key holding the publish flag. Raises
    :class:`ParseError` on any malformed or missing header field.
    """
    source = source or note_id
    meta, body = split_frontmatter(content, source)

    title = _optional_str(meta, "title", source)
    if not title or not title.strip():
        raise ParseError(source, "missing required field", "title")

    public = meta.get(public_field, False)
    if not isinstance(public, bool):
        raise ParseError(source, f"expected true or false, got {public!r}", public_field)

    created = parse_timestamp(meta.get("created"), source, "created")
    modified = parse_timestamp(meta.get("modified"), source, "modified")
    if modified < created:
        raise ParseError(source, "modified is earlier than created", "modified")

    extra = {k: v for k, v in meta.items() if k not in _KNOWN_FIELDS and k != public_field}

    return Note(
        id=note_id,
        title=title.strip(),
        description=_optional_str(meta, "description", source) or "",
        image=_optional_str(meta, "image", source),
        tags=parse_tags(meta.get("tags"), source),
        public=public,
        created=created,
        modified=modified,
        body=body,
        links=tuple(parse_wikilinks(body)),
        media=tuple(parse_media(body)),
        source=source,
        extra=MappingProxyType(extra),
    )


def dump_frontmatter(note: Note, *, public_field: str = "public") -> str:
    """Serialise the recognised header fields of *note* as a ``---`` block.

    ``parse_note(note.id, dump_frontmatter(note) + note.body)`` yields a note
    with the same header fields, body and links as *note*.
    """
    meta: dict[str, Any] = {
        "title": note.title,
        "description": note.description,
        "tags": sorted(note.tags),
        public_field: note.public,
        "created": note.created.strftime(TIMESTAMP_FORMAT),
        "modified": note.modified.strftime(TIMESTAMP_FORMAT),
    }
    if note.image is not None:
        meta["image"] = note.image
    header = yaml.safe_dump(meta, sort_keys=False, allow_unicode=True)
    return f"---\n{header}---\n"
