"""Unit tests for garden.repository.NoteRepository."""

import random

import pytest

from garden.repository import NoteRepository
from helpers import make_note


@pytest.fixture()
def repo() -> NoteRepository:
    """Five notes: linked, tagged, one private, two sharing a timestamp."""
    return NoteRepository.build([
        make_note("alpha", tags=("area/hobby", "first"), created="2024-01-03T09:00", links=("beta", "gamma")),
        make_note("beta", tags=("second",), created="2024-01-02T09:00", links=("alpha",)),
        make_note("gamma", tags=("first", "second"), created="2024-01-02T09:00"),
        make_note("delta", tags=("area/work",), created="2023-12-01T09:00"),
        make_note("secret", tags=("first",), public=False, created="2024-02-01T09:00"),
    ])


# ---------------------------------------------------------------------------
# Lookup
# ---------------------------------------------------------------------------


class TestLookup:
    def test_get_by_id(self, repo: NoteRepository):
        assert repo.get("alpha").title == "Alpha"
        assert repo["beta"].id == "beta"

    def test_missing_id(self, repo: NoteRepository):
        assert repo.get("nope") is None
        assert "nope" not in repo
        with pytest.raises(KeyError):
            repo["nope"]

    def test_len_and_ids(self, repo: NoteRepository):
        assert len(repo) == 5
        assert repo.ids == {"alpha", "beta", "gamma", "delta", "secret"}

    def test_empty_repository(self):
        repo = NoteRepository.build([])
        assert len(repo) == 0
        assert repo.chronological == ()
        assert repo.published == ()
        assert repo.edges() == []
        assert repo.diagnostics == ()


# ---------------------------------------------------------------------------
# Ordering and publish filter
# ---------------------------------------------------------------------------


class TestOrdering:
    def test_chronological_newest_first_ties_by_id(self, repo: NoteRepository):
        assert [n.id for n in repo.chronological] == ["secret", "alpha", "beta", "gamma", "delta"]

    def test_non_increasing_created(self, repo: NoteRepository):
        stamps = [n.created for n in repo.chronological]
        assert stamps == sorted(stamps, reverse=True)

    def test_order_independent_of_input_order(self, repo: NoteRepository):
        notes = list(repo.chronological)
        for seed in range(5):
            random.Random(seed).shuffle(notes)
            rebuilt = NoteRepository.build(notes)
            assert rebuilt.chronological == repo.chronological

    def test_iteration_is_chronological(self, repo: NoteRepository):
        assert tuple(repo) == repo.chronological


class TestPublishFilter:
    def test_excludes_private(self, repo: NoteRepository):
        assert [n.id for n in repo.published] == ["alpha", "beta", "gamma", "delta"]

    def test_filter_holds_for_all_notes(self, repo: NoteRepository):
        published = {n.id for n in repo.published}
        for note in repo.chronological:
            assert (note.id in published) is note.public


# ---------------------------------------------------------------------------
# Tags
# ---------------------------------------------------------------------------


class TestTags:
    def test_tag_index(self, repo: NoteRepository):
        assert repo.tags["first"] == {"alpha", "gamma", "secret"}
        assert repo.tags["second"] == {"beta", "gamma"}

    def test_published_tags_exclude_private(self, repo: NoteRepository):
        assert repo.published_tags["first"] == {"alpha", "gamma"}

    def test_every_indexed_id_exists(self, repo: NoteRepository):
        for ids in list(repo.tags.values()) + list(repo.published_tags.values()):
            assert ids <= repo.ids

    def test_with_tag_is_chronological(self, repo: NoteRepository):
        assert [n.id for n in repo.with_tag("first")] == ["secret", "alpha", "gamma"]

    def test_with_tag_normalises(self, repo: NoteRepository):
        assert repo.with_tag("#Second") == repo.with_tag("second")

    def test_with_tag_descendants(self, repo: NoteRepository):
        assert repo.with_tag("area") == ()
        assert [n.id for n in repo.with_tag("area", descendants=True)] == ["alpha", "delta"]


# ---------------------------------------------------------------------------
# Links
# ---------------------------------------------------------------------------


class TestLinks:
    def test_edges(self, repo: NoteRepository):
        assert repo.edges() == [("alpha", "beta"), ("alpha", "gamma"), ("beta", "alpha")]

    def test_backlinks(self, repo: NoteRepository):
        assert repo.backlinks("alpha") == ["beta"]
        assert repo.backlinks("gamma") == ["alpha"]
        assert repo.backlinks("missing") == []

    def test_orphans_are_published_only(self, repo: NoteRepository):
        assert repo.orphans() == ["delta"]

    def test_unresolved_links_dropped(self):
        repo = NoteRepository.build([make_note("a", links=("nowhere", "a"))])
        assert repo.edges() == []

    def test_link_resolves_by_file_name(self):
        repo = NoteRepository.build([
            make_note("index", links=("gamma",)),
            make_note("sub/gamma"),
        ])
        assert repo.edges() == [("index", "sub/gamma")]

    def test_ambiguous_file_name_dropped(self):
        repo = NoteRepository.build([
            make_note("index", links=("gamma",)),
            make_note("a/gamma"),
            make_note("b/gamma"),
        ])
        assert repo.edges() == []


# ---------------------------------------------------------------------------
# Duplicates and rebuild
# ---------------------------------------------------------------------------


class TestDuplicates:
    def test_later_note_wins(self):
        first = make_note("same", title="First", source="Same.md")
        second = make_note("same", title="Second", source="same.md")
        repo = NoteRepository.build([first, second])
        assert len(repo) == 1
        assert repo["same"].title == "Second"

    def test_duplicate_reported(self):
        repo = NoteRepository.build([
            make_note("same", source="Same.md"),
            make_note("same", source="same.md"),
        ])
        (diagnostic,) = repo.diagnostics
        assert diagnostic.code == "DuplicateNoteId"
        assert diagnostic.level == "warning"
        assert diagnostic.source == "same.md"
        assert "Same.md" in diagnostic.message


class TestRebuild:
    def test_rebuild_returns_new_repository(self, repo: NoteRepository):
        rebuilt = repo.rebuild(list(repo.chronological) + [make_note("epsilon", tags=("first",))])
        assert "epsilon" in rebuilt
        assert "epsilon" not in repo
        assert "epsilon" in rebuilt.tags["first"]
        assert "epsilon" not in repo.tags["first"]
