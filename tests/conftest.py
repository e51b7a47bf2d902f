"""
Shared fixtures for the scanning core tests.
Creates isolated temporary directories with controlled test files.
"""
import os
import shutil
import uuid
import pytest
import tempfile
from pathlib import Path
from typing import Dict
import sys

# Add src/ to sys.path so 'dirscout' is importable without installation
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def home_cache_dir():
    """
    Scratch directory under $HOME/.cache.
    /tmp is often tmpfs, which the safety guard blocks as a virtual filesystem.
    """
    home = os.environ.get("HOME")
    if not home:
        pytest.skip("HOME is not set")
    path = Path(home) / ".cache" / f"dirscout_test_{uuid.uuid4().hex[:8]}"
    path.mkdir(parents=True)
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def test_files(temp_dir) -> Dict[str, Path]:
    """
    Creates controlled test files:
    - 2 identical files (duplicates, "hello world")
    - 2 unique files (different content)
    - 1 empty file
    - 1 subdirectory holding a third copy of the duplicate and an empty dir
    """
    files = {}

    files["dup_a"] = temp_dir / "dup_a.txt"
    files["dup_b"] = temp_dir / "dup_b.txt"
    files["dup_a"].write_bytes(b"hello world")
    files["dup_b"].write_bytes(b"hello world")

    files["unique_a"] = temp_dir / "unique_a.txt"
    files["unique_a"].write_bytes(b"content A")
    files["unique_b"] = temp_dir / "unique_b.txt"
    files["unique_b"].write_bytes(b"content B")

    files["empty"] = temp_dir / "empty.txt"
    files["empty"].write_bytes(b"")

    subdir = temp_dir / "subdir"
    subdir.mkdir()
    files["subdir"] = subdir
    files["sub_dup"] = subdir / "dup_in_subdir.txt"
    files["sub_dup"].write_bytes(b"hello world")

    files["empty_dir"] = subdir / "nested_empty"
    files["empty_dir"].mkdir()

    return files
