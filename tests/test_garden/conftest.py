"""Shared fixtures: a small on-disk garden."""

from __future__ import annotations

from pathlib import Path

import pytest

from helpers import note_text, write_note


@pytest.fixture()
def garden_dir(tmp_path: Path) -> Path:
    """Four notes: three public (one nested), one private."""
    write_note(tmp_path, "alpha", note_text(
        "Alpha", tags=["area/hobby", "first"], created="2024-01-03T09:00",
        body="See [[beta]] and [[Gamma]].\n",
    ))
    write_note(tmp_path, "beta", note_text(
        "Beta", tags=["second"], created="2024-01-02T09:00",
        body="Links back to [[alpha]].\n",
    ))
    write_note(tmp_path, "sub/gamma", note_text(
        "Gamma", tags=["area/work"], created="2024-01-01T09:00",
        body="Standalone note about gardening.\n",
    ))
    write_note(tmp_path, "secret", note_text(
        "Secret", public=False, created="2024-01-04T09:00", body="Private thoughts.\n",
    ))
    return tmp_path
