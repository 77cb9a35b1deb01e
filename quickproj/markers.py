"""Project markers — which names make a directory a project, which are never entered."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable

logger = logging.getLogger(__name__)

DEFAULT_MARKERS = (
    ".git", "Cargo.toml", "package.json", "go.mod", "pyproject.toml",
    "setup.py", "pom.xml", "build.gradle", "Makefile", "CMakeLists.txt",
    "composer.json", "Gemfile", "mix.exs", "deno.json",
)

DEFAULT_EXCLUDE_DIRS = (
    "node_modules", "target", ".venv", "venv", "__pycache__", ".cache",
    "dist", "build", ".next", ".nuxt", "vendor",
)


class MarkerSet:
    """Membership tests for marker names and excluded directory names.

    Markers keep their configured order so detection is reproducible when
    a directory holds more than one of them.
    """

    def __init__(
        self,
        markers: Iterable[str] = DEFAULT_MARKERS,
        exclude_dirs: Iterable[str] = DEFAULT_EXCLUDE_DIRS,
    ) -> None:
        ordered: list[str] = []
        for m in markers:
            if m not in ordered:
                ordered.append(m)
        self.markers: tuple[str, ...] = tuple(ordered)
        self._markers = frozenset(self.markers)
        self.exclude_dirs = frozenset(exclude_dirs)

    def is_marker(self, entry_name: str) -> bool:
        return entry_name in self._markers

    def is_excluded(self, dir_name: str) -> bool:
        return dir_name in self.exclude_dirs

    def __repr__(self) -> str:
        return f"MarkerSet(markers={list(self.markers)!r}, exclude_dirs={sorted(self.exclude_dirs)!r})"


def detect_marker(directory: str, marker_set: MarkerSet) -> str | None:
    """Return the first configured marker present inside directory, or None.

    A marker counts whether it is a file or a directory. Checks that fail
    with an OS error are treated as "marker absent".
    """
    for marker in marker_set.markers:
        candidate = os.path.join(directory, marker)
        try:
            os.stat(candidate)
        except FileNotFoundError:
            continue
        except (PermissionError, OSError) as e:
            logger.debug("Cannot check %s: %s", candidate, e)
            continue
        return marker
    return None
