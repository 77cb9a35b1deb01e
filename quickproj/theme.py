"""Shared visual constants and helpers for quickproj."""

from __future__ import annotations

import os

from rich.style import Style
from rich.text import Text

# ── Color Palette (GitHub Dark + Neon Accents) ──────────────────────────

MUTED = "#8b949e"
FG = "#e6edf3"

CYAN = "#58a6ff"
GREEN = "#39d353"
YELLOW = "#e3b341"
RED = "#f85149"

# ── ASCII Banner ────────────────────────────────────────────────────────

BANNER = r"""
              _      _                          _
   __ _ _   _(_) ___| | __    _ __  _ __ ___   (_)
  / _` | | | | |/ __| |/ /___| '_ \| '__/ _ \  | |
 | (_| | |_| | | (__|   <____| |_) | | | (_) | | |
  \__, |\__,_|_|\___|_|\_\   | .__/|_|  \___/ _/ |
     |_|                     |_|             |__/"""

TAGLINE = "fast project launcher for developers"

# ── Marker Icons (Universal Unicode — no Nerd Fonts needed) ─────────────

MARKER_ICONS: dict[str, str] = {
    ".git": "🌿",
    "Cargo.toml": "⚙️",
    "package.json": "📜",
    "deno.json": "🦕",
    "go.mod": "🔷",
    "pyproject.toml": "🐍",
    "setup.py": "🐍",
    "pom.xml": "☕",
    "build.gradle": "🐘",
    "Makefile": "🔧",
    "CMakeLists.txt": "🔧",
    "composer.json": "🎼",
    "Gemfile": "💎",
    "mix.exs": "💧",
}
DEFAULT_ICON = "📁"

# ── Status Icons ────────────────────────────────────────────────────────

ICON_OK = "✓"
ICON_MISSING = "✗"
ICON_WARN = "⚠"
ICON_BULLET = "•"


def marker_icon(marker: str) -> str:
    return MARKER_ICONS.get(marker, DEFAULT_ICON)


def shorten_home_path(path: str, home: str | None = None) -> str:
    """Replace a leading home directory with ~."""
    home = home if home is not None else os.environ.get("HOME", "")
    if home and (path == home or path.startswith(home.rstrip(os.sep) + os.sep)):
        return "~" + path[len(home.rstrip(os.sep)):]
    return path


def format_project_item(project) -> Text:
    """Render "name (~/path)" for pickers and listings."""
    text = Text()
    text.append(project.name, style=Style(color=FG, bold=True))
    text.append(f" ({shorten_home_path(project.path)})", style=Style(color=MUTED))
    return text


# ── Banner Rendering ────────────────────────────────────────────────────

def render_banner() -> Text:
    """Render the quickproj ASCII banner as styled Rich Text."""
    text = Text(justify="center")
    for line in BANNER.strip("\n").split("\n"):
        text.append(line + "\n", style=Style(color=GREEN, bold=True))
    text.append(f"  {TAGLINE}\n", style=Style(color=MUTED, italic=True))
    return text
