"""Tests for display helpers."""

from quickproj.scanner import Project
from quickproj.theme import DEFAULT_ICON, format_project_item, marker_icon, render_banner, shorten_home_path


def test_shorten_home_path():
    assert shorten_home_path("/home/dev/projects/test", home="/home/dev") == "~/projects/test"
    assert shorten_home_path("/home/dev", home="/home/dev") == "~"


def test_shorten_home_path_only_whole_segments():
    assert shorten_home_path("/home/developer/x", home="/home/dev") == "/home/developer/x"
    assert shorten_home_path("/srv/app", home="") == "/srv/app"


def test_shorten_home_path_uses_env(monkeypatch):
    monkeypatch.setenv("HOME", "/users/me")
    assert shorten_home_path("/users/me/code") == "~/code"


def test_format_project_item():
    project = Project(path="/tmp/test-project", name="test-project", marker=".git")
    text = format_project_item(project)
    assert text.plain == "test-project (/tmp/test-project)"


def test_marker_icon():
    assert marker_icon("pyproject.toml") == "🐍"
    assert marker_icon("something.else") == DEFAULT_ICON


def test_render_banner():
    assert "fast project launcher" in render_banner().plain
