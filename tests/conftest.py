from pathlib import Path

import pytest

GOLDEN_DIR = Path(__file__).resolve().parent / "golden"


@pytest.fixture
def golden():
    """Return a loader for the stored reference patterns."""

    def _load(name: str) -> str:
        return (GOLDEN_DIR / f"{name}.txt").read_text()

    return _load
