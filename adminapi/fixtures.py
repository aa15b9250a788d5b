"""
Fixture file resolution.

Upload helpers take paths relative to the fixtures directory. This is the only
place the client touches the local filesystem.
"""

from __future__ import annotations

from pathlib import Path

from adminapi.errors import FixtureNotFoundError


def resolve_fixture(file_path: str | Path, fixtures_dir: str | Path) -> Path:
    """
    Resolve file_path against fixtures_dir.

    Args:
        file_path: Path relative to the fixtures directory
        fixtures_dir: Root directory holding fixture files

    Returns:
        Absolute path of an existing file inside fixtures_dir

    Raises:
        FixtureNotFoundError: If the file does not exist, is not a regular
            file, or resolves outside fixtures_dir
    """
    root = Path(fixtures_dir).resolve()
    candidate = (root / file_path).resolve()

    if not candidate.is_relative_to(root):
        raise FixtureNotFoundError(file_path, root)
    if not candidate.is_file():
        raise FixtureNotFoundError(file_path, root)
    return candidate
