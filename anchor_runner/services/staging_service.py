"""
Staging Service
===============
Copies compiled program artifacts into the local deploy directory the
test command reads from.

Semantics:
    - Destination is created recursively; an existing one is fine.
    - The CONTENTS of the source directory are copied into the destination,
      preserving structure and file metadata.
    - Conflicting files are overwritten; extra destination files are kept.
    - Any filesystem failure raises StagingError (fail fast).
"""
import os
import shutil
import logging
from dataclasses import dataclass, field

from anchor_runner.core.errors import StagingError

logger = logging.getLogger(__name__)


@dataclass
class StagedArtifacts:
    """Resolved source/destination and the files copied between them (relative, POSIX, sorted)."""
    source_dir: str
    dest_dir: str
    files: list[str] = field(default_factory=list)


def stage_artifacts(source_dir: str, dest_dir: str) -> StagedArtifacts:
    """
    Copy everything under ``source_dir`` into ``dest_dir``.

    Parameters
    ----------
    source_dir : str
        Build-output directory (e.g. ../target/deploy).
    dest_dir : str
        Staging directory (e.g. target/deploy).

    Returns
    -------
    StagedArtifacts

    Raises
    ------
    StagingError
        If the source is missing or not a directory, or any copy fails.
    """
    source = os.path.abspath(source_dir)
    dest = os.path.abspath(dest_dir)

    if not os.path.isdir(source):
        raise StagingError(
            f"Source directory does not exist or is not a directory: {source}",
            source_dir=source, dest_dir=dest,
        )

    copied: list[str] = []

    def _copy(src: str, dst: str) -> str:
        copied.append(os.path.relpath(src, source).replace(os.sep, "/"))
        return shutil.copy2(src, dst)

    logger.info("Staging artifacts | from=%s | to=%s", source, dest)
    try:
        os.makedirs(dest, exist_ok=True)
        shutil.copytree(source, dest, copy_function=_copy, dirs_exist_ok=True)
    except (shutil.Error, OSError) as e:
        raise StagingError(
            f"Failed to stage artifacts from {source} to {dest}: {e}",
            source_dir=source, dest_dir=dest,
        ) from e

    logger.info("Staged %d file(s) into %s", len(copied), dest)
    return StagedArtifacts(source_dir=source, dest_dir=dest, files=sorted(copied))
