"""Directory walking and source/project file discovery."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence

from .config import CounterConfig
from .lexers import ALL_SUFFIXES, is_project_file, is_source_file
from .logging import get_logger

_LOGGER = get_logger("scanner")

_EXCLUDED_DIRS = {
    "bin",
    "obj",
    "packages",
}


@dataclass
class DirectoryEntry:
    """One directory holding files of interest.

    ``project_file`` is the project declared in this directory, or the one
    inherited from the nearest ancestor that declares one.
    """

    path: Path
    relative: str
    project_file: Optional[Path] = None
    owns_project: bool = False
    source_files: List[Path] = field(default_factory=list)
    file_count: int = 0


def is_ignored_dir(name: str, patterns: Sequence[re.Pattern[str]]) -> bool:
    """Return True for directories that are never descended into."""
    if not name.strip():
        return True
    if name.startswith("."):
        return True
    if name in _EXCLUDED_DIRS:
        return True
    return any(pattern.search(name) for pattern in patterns)


class CodeScanner:
    """Walks a source tree in a deterministic (sorted, depth-first) order."""

    def __init__(self, config: CounterConfig) -> None:
        self._patterns = config.ignore_patterns()

    def scan(self, root: str | Path) -> Iterator[DirectoryEntry]:
        """Yield every directory under ``root`` that holds source or project files."""
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Source path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Source path is not a directory: {root}")

        projects: Dict[Path, Optional[Path]] = {}
        for dirpath, dirnames, filenames in os.walk(root_path):
            current = Path(dirpath)
            dirnames[:] = sorted(name for name in dirnames if not is_ignored_dir(name, self._patterns))

            files = sorted(
                name for name in filenames if not name.startswith(".") and name.endswith(ALL_SUFFIXES)
            )
            inherited = projects.get(current.parent) if current != root_path else None
            project_names = [name for name in files if is_project_file(name)]
            project_file = current / project_names[-1] if project_names else inherited
            if len(project_names) > 1:
                _LOGGER.debug("Several projects in %s, using %s", current, project_names[-1])
            projects[current] = project_file

            if not files:
                continue

            relative = current.relative_to(root_path).as_posix() if current != root_path else ""
            yield DirectoryEntry(
                path=current,
                relative=relative,
                project_file=project_file,
                owns_project=bool(project_names),
                source_files=[current / name for name in files if is_source_file(name)],
                file_count=len(files),
            )


__all__ = ["CodeScanner", "DirectoryEntry", "is_ignored_dir"]
