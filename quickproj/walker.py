"""Directory walker — ignore-aware, depth-bounded traversal of one search root."""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Optional

import pathspec

from quickproj.markers import MarkerSet

logger = logging.getLogger(__name__)


@dataclass
class IgnoreScope:
    """Patterns from one ignore file, anchored at the directory that holds it."""

    base: str
    spec: pathspec.GitIgnoreSpec


def global_excludes_path() -> Optional[str]:
    """Locate the user's global git excludes file.

    Uses `core.excludesFile` when git has one configured, otherwise the
    XDG default `$XDG_CONFIG_HOME/git/ignore`.
    """
    value = ""
    try:
        result = subprocess.run(
            ["git", "config", "--get", "core.excludesFile"],
            capture_output=True,
            text=True,
            timeout=5,
            errors="replace",
        )
        value = result.stdout.strip()
    except (subprocess.TimeoutExpired, FileNotFoundError, OSError):
        pass

    if value:
        return os.path.expanduser(value)

    xdg = os.environ.get("XDG_CONFIG_HOME") or os.path.join(os.path.expanduser("~"), ".config")
    return os.path.join(xdg, "git", "ignore")


def load_ignore_file(path: str, base: str) -> Optional[IgnoreScope]:
    """Compile an ignore file into a scope, or None if it is missing or unreadable."""
    try:
        with open(path, "r", encoding="utf-8", errors="ignore") as f:
            lines = f.read().splitlines()
    except FileNotFoundError:
        return None
    except OSError as e:
        logger.debug("Cannot read ignore file %s: %s", path, e)
        return None

    try:
        spec = pathspec.GitIgnoreSpec.from_lines(lines)
    except ValueError:
        # git skips patterns it cannot parse; keep the rest of the file
        spec = pathspec.GitIgnoreSpec.from_lines(_valid_lines(lines, path))

    if not any(p.include is not None for p in spec.patterns):
        return None
    return IgnoreScope(base=base, spec=spec)


def _valid_lines(lines: list[str], path: str) -> list[str]:
    valid: list[str] = []
    for lineno, line in enumerate(lines, 1):
        try:
            pathspec.GitIgnoreSpec.from_lines([line])
        except ValueError as e:
            logger.debug("Skipping bad pattern in %s:%d: %s", path, lineno, e)
            continue
        valid.append(line)
    return valid


def is_ignored(directory: str, scopes: list[IgnoreScope]) -> bool:
    """Decide whether directory is ignored by the active scopes.

    Later scopes take precedence, mirroring git: a deeper .gitignore beats
    a shallower one, and any .gitignore beats .git/info/exclude and the
    global excludes file. The last matching pattern of a scope wins, so
    `!` negations re-include.
    """
    for scope in reversed(scopes):
        rel = os.path.relpath(directory, scope.base)
        if rel == os.pardir or rel.startswith(os.pardir + os.sep):
            continue
        rel = rel.replace(os.sep, "/") + "/"
        result = scope.spec.check_file(rel)
        if result.include is not None:
            return result.include
    return False


def _local_scopes(directory: str) -> list[IgnoreScope]:
    scopes: list[IgnoreScope] = []
    exclude = load_ignore_file(os.path.join(directory, ".git", "info", "exclude"), directory)
    if exclude:
        scopes.append(exclude)
    gitignore = load_ignore_file(os.path.join(directory, ".gitignore"), directory)
    if gitignore:
        scopes.append(gitignore)
    return scopes


def walk_directories(
    root: str,
    max_depth: int,
    marker_set: Optional[MarkerSet] = None,
    *,
    use_ignore_files: bool = True,
    descend: Optional[Callable[[str], bool]] = None,
) -> Iterator[str]:
    """Lazily yield every directory under root, root itself first.

    Directories are yielded depth-first in name order. Nothing deeper than
    max_depth levels below root is produced, excluded names are never
    entered, symlinks are never followed and unreadable directories are
    skipped. Hidden directories are walked like any other.

    When given, descend(path) is consulted after a directory has been
    yielded and before its children are listed; returning False prunes
    the subtree.
    """
    root = os.path.abspath(root)
    if max_depth < 0 or not os.path.isdir(root):
        return

    scopes: list[IgnoreScope] = []
    if use_ignore_files:
        global_path = global_excludes_path()
        if global_path:
            scope = load_ignore_file(global_path, root)
            if scope:
                scopes.append(scope)

    def _walk(path: str, depth: int, active: list[IgnoreScope]) -> Iterator[str]:
        yield path

        if depth >= max_depth:
            return
        if descend is not None and not descend(path):
            return

        try:
            with os.scandir(path) as it:
                entries = list(it)
        except (PermissionError, OSError) as e:
            logger.debug("Skipping unreadable directory %s: %s", path, e)
            return

        if use_ignore_files:
            active = active + _local_scopes(path)

        subdirs: list[str] = []
        for entry in entries:
            try:
                if not entry.is_dir(follow_symlinks=False):
                    continue
            except (PermissionError, OSError):
                continue
            if marker_set is not None and marker_set.is_excluded(entry.name):
                continue
            if active and is_ignored(entry.path, active):
                logger.debug("Ignored by ignore rules: %s", entry.path)
                continue
            subdirs.append(entry.path)

        for d in sorted(subdirs):
            yield from _walk(d, depth + 1, active)

    yield from _walk(root, 0, scopes)
