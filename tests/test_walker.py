"""Tests for the ignore-aware directory walker."""

import os
import tempfile

from quickproj.markers import MarkerSet
from quickproj.walker import is_ignored, load_ignore_file, walk_directories


def _rel(root, paths):
    return sorted(os.path.relpath(p, root) for p in paths)


def _write(path: str, content: str) -> None:
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w") as f:
        f.write(content)


def test_walk_yields_root_first_and_dirs_only():
    with tempfile.TemporaryDirectory() as tmp:
        os.makedirs(os.path.join(tmp, "a", "b"))
        _write(os.path.join(tmp, "a", "file.txt"), "x")
        paths = list(walk_directories(tmp, 5))
        assert paths[0] == os.path.abspath(tmp)
        assert _rel(tmp, paths) == [".", "a", os.path.join("a", "b")]


def test_walk_depth_bound():
    with tempfile.TemporaryDirectory() as tmp:
        os.makedirs(os.path.join(tmp, "a", "b", "c"))
        assert _rel(tmp, walk_directories(tmp, 0)) == ["."]
        assert _rel(tmp, walk_directories(tmp, 1)) == [".", "a"]
        assert _rel(tmp, walk_directories(tmp, 2)) == [".", "a", os.path.join("a", "b")]


def test_walk_skips_excluded_names():
    with tempfile.TemporaryDirectory() as tmp:
        os.makedirs(os.path.join(tmp, "node_modules", "dep"))
        os.makedirs(os.path.join(tmp, "src"))
        marker_set = MarkerSet(exclude_dirs=["node_modules"])
        assert _rel(tmp, walk_directories(tmp, 5, marker_set)) == [".", "src"]


def test_walk_missing_root_yields_nothing():
    assert list(walk_directories("/does/not/exist", 3)) == []


def test_walk_descend_predicate_prunes():
    with tempfile.TemporaryDirectory() as tmp:
        os.makedirs(os.path.join(tmp, "stop", "inside"))
        os.makedirs(os.path.join(tmp, "go", "inside"))
        stop = os.path.join(os.path.abspath(tmp), "stop")
        paths = walk_directories(tmp, 5, descend=lambda p: p != stop)
        assert _rel(tmp, paths) == [".", "go", os.path.join("go", "inside"), "stop"]


def test_walk_gitignore_and_negation():
    with tempfile.TemporaryDirectory() as tmp:
        _write(os.path.join(tmp, ".gitignore"), "out*/\n!outkeep/\n")
        os.makedirs(os.path.join(tmp, "outdir"))
        os.makedirs(os.path.join(tmp, "outkeep"))
        assert _rel(tmp, walk_directories(tmp, 3)) == [".", "outkeep"]


def test_walk_gitignore_anchored_pattern():
    with tempfile.TemporaryDirectory() as tmp:
        _write(os.path.join(tmp, ".gitignore"), "/top/\n")
        os.makedirs(os.path.join(tmp, "top"))
        os.makedirs(os.path.join(tmp, "x", "top"))
        assert _rel(tmp, walk_directories(tmp, 3)) == [".", "x", os.path.join("x", "top")]


def test_walk_nested_gitignore_overrides_parent():
    with tempfile.TemporaryDirectory() as tmp:
        _write(os.path.join(tmp, ".gitignore"), "generated/\n")
        _write(os.path.join(tmp, "sub", ".gitignore"), "!generated/\n")
        os.makedirs(os.path.join(tmp, "generated"))
        os.makedirs(os.path.join(tmp, "sub", "generated"))
        assert _rel(tmp, walk_directories(tmp, 3)) == [
            ".", "sub", os.path.join("sub", "generated"),
        ]


def test_walk_git_info_exclude():
    with tempfile.TemporaryDirectory() as tmp:
        _write(os.path.join(tmp, ".git", "info", "exclude"), "local-only/\n")
        os.makedirs(os.path.join(tmp, "local-only"))
        os.makedirs(os.path.join(tmp, "shared"))
        paths = _rel(tmp, walk_directories(tmp, 1))
        assert "local-only" not in paths
        assert "shared" in paths


def test_walk_global_excludes(monkeypatch):
    with tempfile.TemporaryDirectory() as tmp:
        global_file = os.path.join(tmp, "global-ignore")
        _write(global_file, "scratch/\n")
        root = os.path.join(tmp, "root")
        os.makedirs(os.path.join(root, "a", "scratch"))
        monkeypatch.setattr("quickproj.walker.global_excludes_path", lambda: global_file)
        assert _rel(root, walk_directories(root, 3)) == [".", "a"]
        assert _rel(root, walk_directories(root, 3, use_ignore_files=False)) == [
            ".", "a", os.path.join("a", "scratch"),
        ]


def test_walk_does_not_follow_symlinks():
    with tempfile.TemporaryDirectory() as tmp:
        os.makedirs(os.path.join(tmp, "real"))
        os.symlink(os.path.join(tmp, "real"), os.path.join(tmp, "link"))
        assert _rel(tmp, walk_directories(tmp, 3)) == [".", "real"]


def test_load_ignore_file_missing_or_empty():
    with tempfile.TemporaryDirectory() as tmp:
        assert load_ignore_file(os.path.join(tmp, "nope"), tmp) is None
        _write(os.path.join(tmp, "empty"), "# only a comment\n\n")
        assert load_ignore_file(os.path.join(tmp, "empty"), tmp) is None


def test_is_ignored_outside_scope_base():
    with tempfile.TemporaryDirectory() as tmp:
        _write(os.path.join(tmp, "inner", ".gitignore"), "*\n")
        scope = load_ignore_file(os.path.join(tmp, "inner", ".gitignore"), os.path.join(tmp, "inner"))
        assert is_ignored(os.path.join(tmp, "inner", "x"), [scope])
        assert not is_ignored(os.path.join(tmp, "sibling"), [scope])


def test_load_ignore_file_skips_bad_patterns():
    with tempfile.TemporaryDirectory() as tmp:
        path = os.path.join(tmp, ".gitignore")
        _write(path, "!\nbuild-out/\n")
        scope = load_ignore_file(path, tmp)
        assert scope is not None
        assert is_ignored(os.path.join(tmp, "build-out"), [scope])
        assert not is_ignored(os.path.join(tmp, "src"), [scope])


def test_walk_continues_past_bad_gitignore():
    with tempfile.TemporaryDirectory() as tmp:
        _write(os.path.join(tmp, "zzz", ".gitignore"), "!\n")
        os.makedirs(os.path.join(tmp, "aaa"))
        os.makedirs(os.path.join(tmp, "zzz", "sub"))
        assert _rel(tmp, walk_directories(tmp, 3)) == [
            ".", "aaa", "zzz", os.path.join("zzz", "sub"),
        ]


def test_global_excludes_anchored_at_scan_root(monkeypatch):
    with tempfile.TemporaryDirectory() as tmp:
        global_file = os.path.join(tmp, "global-ignore")
        _write(global_file, "/top/\n")
        root = os.path.join(tmp, "root")
        os.makedirs(os.path.join(root, "top"))
        os.makedirs(os.path.join(root, "repo", "top"))
        monkeypatch.setattr("quickproj.walker.global_excludes_path", lambda: global_file)
        assert _rel(root, walk_directories(root, 3)) == [
            ".", "repo", os.path.join("repo", "top"),
        ]
