"""Project discovery — find project roots under the configured search roots."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field

from quickproj.config import Config, ConfigurationError
from quickproj.markers import DEFAULT_EXCLUDE_DIRS, DEFAULT_MARKERS, MarkerSet, detect_marker
from quickproj.walker import walk_directories

logger = logging.getLogger(__name__)

MAX_WORKERS = 8


@dataclass(frozen=True)
class Project:
    path: str
    name: str = field(compare=False)
    marker: str = field(compare=False)

    def display_string(self) -> str:
        return f"{self.name} ({self.path})"

    def short_display(self) -> str:
        return self.path


def _is_under_project(path: str, detected: set[str]) -> bool:
    """True if any ancestor of path is already a detected project."""
    current = os.path.dirname(path)
    while True:
        if current in detected:
            return True
        parent = os.path.dirname(current)
        if parent == current:
            return False
        current = parent


def _check_names(values: Iterable[str], label: str) -> list[str]:
    if isinstance(values, (str, bytes)):
        raise ConfigurationError(f"{label} must be a list of names, not a single string")
    names = list(values)
    for v in names:
        if not isinstance(v, str) or not v:
            raise ConfigurationError(f"{label} entries must be non-empty strings, got {v!r}")
    return names


def merge_results(per_root: Iterable[list[Project]]) -> list[Project]:
    """Combine per-root results, keeping the first project seen for each path.

    The merged list is sorted by case-insensitive name, then by path.
    """
    seen: set[str] = set()
    merged: list[Project] = []
    for projects in per_root:
        for project in projects:
            if project.path in seen:
                continue
            seen.add(project.path)
            merged.append(project)
    merged.sort(key=lambda p: (p.name.lower(), p.path))
    return merged


class Scanner:
    """Scans search roots for project directories.

    Each root is walked on its own worker thread. Within a root, once a
    directory is identified as a project none of its descendants are
    reported. Filesystem problems only ever shrink the result; the only
    error raised is ConfigurationError for unusable input.
    """

    def __init__(
        self,
        markers: Iterable[str] = DEFAULT_MARKERS,
        exclude_dirs: Iterable[str] = DEFAULT_EXCLUDE_DIRS,
        max_depth: int = 4,
        max_workers: int = MAX_WORKERS,
        use_ignore_files: bool = True,
    ) -> None:
        if isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 0:
            raise ConfigurationError(f"max_depth must be a non-negative integer, got {max_depth!r}")
        if max_workers < 1:
            raise ConfigurationError(f"max_workers must be at least 1, got {max_workers!r}")

        self.marker_set = MarkerSet(
            _check_names(markers, "project markers"),
            _check_names(exclude_dirs, "exclude dirs"),
        )
        self.max_depth = max_depth
        self.max_workers = max_workers
        self.use_ignore_files = use_ignore_files

    @classmethod
    def from_config(cls, config: Config, **kwargs) -> "Scanner":
        if config is None:
            raise ConfigurationError("No configuration given")
        return cls(
            markers=config.project_markers,
            exclude_dirs=config.exclude_dirs,
            max_depth=config.max_depth,
            **kwargs,
        )

    def scan(self, roots: Sequence[str | os.PathLike[str]]) -> list[Project]:
        """Scan every root concurrently and return the merged, sorted projects."""
        root_list = self._check_roots(roots)
        if not root_list:
            return []

        results: list[list[Project]] = []
        workers = min(self.max_workers, len(root_list))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {executor.submit(self.scan_root, r): r for r in root_list}
            for future in as_completed(futures):
                try:
                    results.append(future.result())
                except Exception:
                    logger.exception("Scan of %s failed", futures[future])

        projects = merge_results(results)
        logger.debug("Found %d projects under %d roots", len(projects), len(root_list))
        return projects

    def scan_root(self, root: str | os.PathLike[str]) -> list[Project]:
        """Find the projects under a single root. A missing root yields nothing."""
        root = os.path.realpath(os.path.expanduser(os.fspath(root)))
        if not os.path.isdir(root):
            logger.debug("Root unavailable, skipping: %s", root)
            return []

        projects: list[Project] = []
        detected: set[str] = set()

        walker = walk_directories(
            root,
            self.max_depth,
            self.marker_set,
            use_ignore_files=self.use_ignore_files,
            descend=lambda d: d not in detected,
        )

        try:
            for path in walker:
                name = os.path.basename(path)
                if self.marker_set.is_excluded(name):
                    continue
                if _is_under_project(path, detected):
                    continue

                marker = detect_marker(path, self.marker_set)
                if marker is None:
                    continue

                projects.append(Project(path=path, name=name or path, marker=marker))
                detected.add(path)
        except OSError as e:
            logger.debug("Walk of %s stopped early: %s", root, e)

        return projects

    @staticmethod
    def _check_roots(roots: Sequence[str | os.PathLike[str]]) -> list[str]:
        if roots is None:
            raise ConfigurationError("No root paths given")
        if isinstance(roots, (str, bytes, os.PathLike)):
            raise ConfigurationError("Root paths must be a list of paths, not a single path")
        checked: list[str] = []
        for r in roots:
            if not isinstance(r, (str, os.PathLike)) or not os.fspath(r):
                raise ConfigurationError(f"Invalid root path: {r!r}")
            checked.append(os.fspath(r))
        return checked


def scan(roots: Sequence[str | os.PathLike[str]], config: Config) -> list[Project]:
    """Scan roots with the markers, excludes and depth from config."""
    return Scanner.from_config(config).scan(roots)


def filter_projects(projects: Sequence[Project], query: str) -> list[Project]:
    """Keep projects matching every whitespace-separated term of query.

    A term matches if it is a case-insensitive substring of the project's
    name or full path. An empty query keeps everything.
    """
    terms = query.lower().split()
    if not terms:
        return list(projects)

    matched: list[Project] = []
    for p in projects:
        name = p.name.lower()
        path = p.path.lower()
        if all(t in name or t in path for t in terms):
            matched.append(p)
    return matched
