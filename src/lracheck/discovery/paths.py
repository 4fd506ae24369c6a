"""Path filtering and classification for discovery."""

import logging
import zipfile
from enum import Enum
from pathlib import Path

logger = logging.getLogger(__name__)


class DiscoveryError(Exception):
    """Discovery could not produce class models; the run aborts before validation."""


class PathType(str, Enum):
    """Kinds of scanned paths."""
    DIRECTORY = "directory"
    ARCHIVE = "archive"


def filter_existing_paths(paths: list[str | Path], fail_when_path_not_exist: bool = True) -> list[Path]:
    """Drop or reject paths that do not exist.

    Args:
        paths: Paths requested for scanning
        fail_when_path_not_exist: Raise on a missing path instead of skipping it

    Returns:
        Existing paths in the requested order

    Raises:
        DiscoveryError: If no paths were given, or a path is missing and
            fail_when_path_not_exist is set
    """
    if not paths:
        raise DiscoveryError("No paths provided, nothing to be scanned")

    existing = []
    for raw_path in paths:
        path = Path(raw_path)
        if path.exists():
            existing.append(path)
        elif fail_when_path_not_exist:
            raise DiscoveryError(f"Provided path '{raw_path}' does not exist")
        else:
            logger.warning(f"Skipping non-existent path: {raw_path}")

    if not existing:
        logger.warning(f"None of the provided paths {[str(p) for p in paths]} exists, nothing to check")
    return existing


def classify_path(path: Path) -> PathType:
    """Tell whether a path is a directory or a zip archive.

    Raises:
        DiscoveryError: If the path is neither
    """
    if path.is_dir():
        return PathType.DIRECTORY
    if path.is_file() and zipfile.is_zipfile(path):
        return PathType.ARCHIVE
    raise DiscoveryError(f"Provided path '{path}' is neither directory nor archive")


def classify_paths(paths: list[Path]) -> dict[Path, PathType]:
    return {path: classify_path(path) for path in paths}
