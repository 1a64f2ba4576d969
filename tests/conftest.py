from __future__ import annotations

import os
from collections.abc import Iterator

import pytest

from confseek.settings import reset_settings


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Make every test read settings from a clean environment."""
    for key in list(os.environ):
        if key.upper().startswith("CONFSEEK_"):
            monkeypatch.delenv(key, raising=False)
    reset_settings()
    yield
    reset_settings()
