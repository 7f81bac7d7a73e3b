"""Shared fixtures for dialogscript tests."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from dialogscript.config import Config
from dialogscript.models import ScreenplayElement, Session, Speaker

from factories import action, dialogue, paren


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2024, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def sample_elements() -> list[ScreenplayElement]:
    return [
        dialogue(Speaker.A, "Hello", element_id="E1"),
        paren(Speaker.A, "pause"),
        dialogue(Speaker.A, "There"),
        action("She leaves"),
        dialogue(Speaker.B, "Wait!"),
    ]


@pytest.fixture
def sample_session(sample_elements: list[ScreenplayElement], fixed_now: datetime) -> Session:
    return Session(
        id="S1",
        title="Coffee Shop",
        elements=sample_elements,
        custom_speaker_names={Speaker.A: "Anna"},
        flagged_element_ids={"E1"},
        created_at=fixed_now,
        last_modified=fixed_now,
    )


@pytest.fixture
def sample_config(tmp_path: Path) -> Config:
    return Config(
        output_dir=tmp_path / "out",
        formats=["txt", "fdx"],
        library_path=tmp_path / "library.json",
    )
