"""
Pytest configuration and fixtures for wasmic tests.
"""
from pathlib import Path

import pytest

from python.tests.wat_samples import SAMPLE_WAT


@pytest.fixture
def wat_dir(tmp_path: Path) -> Path:
    """Directory holding the sample WAT programs plus a non-WAT distractor."""

    directory = tmp_path / "wat"
    directory.mkdir()
    for name, source in SAMPLE_WAT.items():
        (directory / f"{name}.wat").write_text(source, encoding="utf-8")
    (directory / "README.txt").write_text("not a test program\n", encoding="utf-8")
    return directory
