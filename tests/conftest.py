"""Pytest fixtures for yamlmerge tests."""

import tempfile
from pathlib import Path

import pytest


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def yaml_pair(temp_dir):
    """Write source and destination YAML files and return their paths."""

    def _write(source: str, destination: str):
        source_path = temp_dir / "source.yaml"
        dest_path = temp_dir / "destination.yaml"
        source_path.write_text(source)
        dest_path.write_text(destination)
        return source_path, dest_path

    return _write


@pytest.fixture
def sample_source():
    """Source file from the original end-to-end scenario."""
    return "key1: value1\n'key2': value2_src"


@pytest.fixture
def sample_destination():
    """Destination file with single-quoted keys."""
    return "'key2': value2\n'key3': value3"
