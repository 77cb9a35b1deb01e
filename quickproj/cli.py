"""CLI entry point for quickproj."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import time
from collections.abc import Callable, Sequence
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

from quickproj import __version__
from quickproj.config import Config, ConfigurationError, config_path, expand_path
from quickproj.launcher import LaunchError, Launcher
from quickproj.scanner import Project, Scanner, filter_projects
from quickproj.theme import (
    CYAN,
    GREEN,
    ICON_BULLET,
    ICON_MISSING,
    ICON_OK,
    ICON_WARN,
    MUTED,
    RED,
    YELLOW,
    format_project_item,
    shorten_home_path,
)

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)


# ── Output helpers ──────────────────────────────────────────────────────

def print_success(message: str) -> None:
    console.print(f"[bold {GREEN}]{ICON_OK}[/bold {GREEN}] {message}")


def print_warning(message: str) -> None:
    console.print(f"[bold {YELLOW}]{ICON_WARN}[/bold {YELLOW}] {message}")


def print_error(message: str) -> None:
    err_console.print(f"[bold {RED}]Error:[/bold {RED}] {message}")


def print_scan_summary(projects: Sequence[Project], elapsed_ms: int) -> None:
    console.print()
    console.print(
        f"[bold {GREEN}]{ICON_OK}[/bold {GREEN}] [{CYAN}]{len(projects)}[/{CYAN}] "
        f"projects found in {elapsed_ms}ms"
    )


def print_project_list(projects: Sequence[Project]) -> None:
    if not projects:
        console.print(f"[{YELLOW}]No projects found.[/{YELLOW}]")
        return

    console.print()
    console.print("[bold]Projects:[/bold]")
    console.print()
    for p in projects:
        line = Text(f"  {ICON_BULLET} ", style=CYAN)
        line.append_text(format_project_item(p))
        console.print(line)
    console.print()
    console.print(f"Total: [{CYAN}]{len(projects)}[/{CYAN}] projects")


def print_root_paths(paths: Sequence[str]) -> None:
    if not paths:
        console.print(f"[{YELLOW}]No root paths configured.[/{YELLOW}]")
        console.print()
        console.print("Add a path with:")
        console.print(f"  [{CYAN}]quickproj add[/{CYAN}] [{MUTED}]<PATH>[/{MUTED}]")
        return

    console.print()
    console.print("[bold]Registered paths:[/bold]")
    console.print()
    for i, path in enumerate(paths, 1):
        if os.path.isdir(path):
            status = f"[{GREEN}]{ICON_OK}[/{GREEN}]"
        else:
            status = f"[{RED}]{ICON_MISSING}[/{RED}]"
        console.print(f"  {status} {i}. {shorten_home_path(path)}", highlight=False)
    console.print()


def print_config_path(path: str) -> None:
    exists = f"[{GREEN}]Yes[/{GREEN}]" if os.path.exists(path) else f"[{YELLOW}]No[/{YELLOW}]"
    console.print()
    console.print("[bold]Configuration:[/bold]")
    console.print()
    console.print(f"  Path: [{CYAN}]{path}[/{CYAN}]", highlight=False)
    console.print(f"  Exists: {exists}")
    console.print()


def _timed_scan(config: Config) -> tuple[list[Project], int]:
    start = time.perf_counter()
    projects = Scanner.from_config(config).scan(config.root_paths)
    elapsed_ms = int((time.perf_counter() - start) * 1000)
    return projects, elapsed_ms


def _load_config(max_depth: Optional[int] = None) -> Config:
    config = Config.load()
    if max_depth is not None:
        config.max_depth = max_depth
    return config


def _launch_editor(editor_cmd: str, path: str) -> None:
    Launcher(editor_cmd).launch(path)


# ── Commands ────────────────────────────────────────────────────────────

def cmd_select(
    editor: Optional[str],
    max_depth: Optional[int],
    *,
    choose: Optional[Callable[[Sequence[Project]], Optional[Project]]] = None,
    launch: Optional[Callable[[str, str], object]] = None,
) -> int:
    """Scan, let the user pick a project, open it in the editor."""
    config = _load_config(max_depth)

    if not config.root_paths:
        print_warning("No root paths configured.")
        console.print()
        console.print("Add a search path first:")
        console.print(f"  [{CYAN}]quickproj add[/{CYAN}] [{MUTED}]~/src[/{MUTED}]")
        console.print(f"  [{CYAN}]quickproj add[/{CYAN}] [{MUTED}]~/projects[/{MUTED}]")
        return 0

    projects, elapsed_ms = _timed_scan(config)
    if not projects:
        print_warning("No projects found in registered paths.")
        console.print()
        console.print("Check if your paths contain projects with markers like:")
        console.print("  .git, Cargo.toml, package.json, go.mod, etc.")
        return 0

    print_scan_summary(projects, elapsed_ms)

    if choose is None:
        from quickproj.tui import select_project
        choose = select_project
    project = choose(projects)

    if project is None:
        console.print()
        console.print(f"[{MUTED}]Selection cancelled.[/{MUTED}]")
        return 0

    editor_cmd = config.get_editor(editor)
    console.print()
    console.print(
        f"Opening [bold {CYAN}]{project.name}[/bold {CYAN}] with [{GREEN}]{editor_cmd}[/{GREEN}]..."
    )
    (launch or _launch_editor)(editor_cmd, project.path)
    return 0


def cmd_add(path: str) -> int:
    config = Config.load()
    if config.add_root_path(path):
        config.save()
        print_success(f"Added: {config.root_paths[-1]}")
    else:
        print_warning("Path is already registered.")
    return 0


def cmd_remove(path: str) -> int:
    config = Config.load()
    if config.remove_root_path(path):
        config.save()
        print_success(f"Removed: {expand_path(path)}")
    else:
        print_warning("Path not found in configuration.")
    return 0


def cmd_list() -> int:
    config = Config.load()
    print_root_paths(config.root_paths)
    return 0


def cmd_config() -> int:
    path = config_path()
    print_config_path(path)

    config = Config.load()
    editor = config.editor or "(not set, using $EDITOR or 'code')"
    console.print("[bold]Current settings:[/bold]")
    console.print()
    console.print(f"  Editor:      [{CYAN}]{editor}[/{CYAN}]", highlight=False)
    console.print(f"  Max depth:   [{CYAN}]{config.max_depth}[/{CYAN}]")
    console.print(f"  Markers:     [{CYAN}]{len(config.project_markers)}[/{CYAN}] items")
    console.print(f"  Exclude:     [{CYAN}]{len(config.exclude_dirs)}[/{CYAN}] patterns")
    console.print()
    return 0


def cmd_scan(max_depth: Optional[int], query: Sequence[str] = (), json_output: bool = False) -> int:
    """Scan and print the projects without the picker."""
    config = _load_config(max_depth)

    if not config.root_paths:
        if json_output:
            print(json.dumps({"error": "No root paths configured"}))
        else:
            print_warning("No root paths configured.")
        return 0

    projects, elapsed_ms = _timed_scan(config)
    if query:
        projects = filter_projects(projects, " ".join(query))

    if json_output:
        data = {
            "projects": [
                {"name": p.name, "path": p.path, "marker": p.marker}
                for p in projects
            ],
            "elapsed_ms": elapsed_ms,
        }
        print(json.dumps(data, indent=2))
        return 0

    print_project_list(projects)
    console.print(f"Scan completed in [{GREEN}]{elapsed_ms}[/{GREEN}]ms")
    return 0


def cmd_set_editor(editor: str) -> int:
    config = Config.load()

    if not Launcher(editor).check_editor_available():
        print_warning(f"Editor '{editor}' not found in PATH. Setting anyway.")

    config.set_editor(editor)
    config.save()
    print_success(f"Default editor set to: [{CYAN}]{editor}[/{CYAN}]")
    return 0


# ── Argument parsing ────────────────────────────────────────────────────

def _depth(value: str) -> int:
    try:
        depth = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid depth: {value!r}")
    if depth < 0:
        raise argparse.ArgumentTypeError("depth must be non-negative")
    return depth


def _add_global_options(parser: argparse.ArgumentParser, default: object) -> None:
    parser.add_argument(
        "-e", "--editor",
        default=default,
        help="Editor command to open the project with",
    )
    parser.add_argument(
        "-d", "--max-depth",
        type=_depth,
        default=default,
        metavar="N",
        help="Maximum directory depth to search",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=default,
        help="Show debug logging",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quickproj",
        description="Fast project launcher — fuzzy-find a project and open it in your editor.",
        epilog="examples:\n  quickproj add ~/src    register a search path\n"
               "  quickproj              pick a project and open it",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    _add_global_options(parser, None)
    parser.add_argument("--version", action="version", version=f"quickproj {__version__}")

    # Subcommands accept the global options too; SUPPRESS keeps them from
    # clobbering values given before the subcommand.
    common = argparse.ArgumentParser(add_help=False)
    _add_global_options(common, argparse.SUPPRESS)

    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    p_add = sub.add_parser("add", parents=[common], help="Add a search path")
    p_add.add_argument("path", help="Directory to add")

    p_remove = sub.add_parser("remove", parents=[common], help="Remove a search path")
    p_remove.add_argument("path", help="Directory to remove")

    sub.add_parser("list", parents=[common], help="List registered search paths")
    sub.add_parser("config", parents=[common], help="Show the config file path and settings")

    p_scan = sub.add_parser("scan", parents=[common], help="Scan and list projects")
    p_scan.add_argument("query", nargs="*", help="Only show projects matching every term")
    p_scan.add_argument("--json", action="store_true", dest="json_output", help="Output as JSON")

    p_editor = sub.add_parser("set-editor", parents=[common], help="Set the default editor")
    p_editor.add_argument("editor_command", metavar="EDITOR", help="Editor command")

    return parser


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


def run(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        if args.command == "add":
            return cmd_add(args.path)
        if args.command == "remove":
            return cmd_remove(args.path)
        if args.command == "list":
            return cmd_list()
        if args.command == "config":
            return cmd_config()
        if args.command == "scan":
            return cmd_scan(args.max_depth, args.query, args.json_output)
        if args.command == "set-editor":
            return cmd_set_editor(args.editor_command)
        return cmd_select(args.editor, args.max_depth)
    except (ConfigurationError, LaunchError) as e:
        print_error(str(e))
        return 1


def main() -> None:
    """Entry point for the quickproj CLI."""
    sys.exit(run())


if __name__ == "__main__":
    main()
