"""Editor launching — resolve editor aliases and open a project directory."""

from __future__ import annotations

import logging
import shlex
import shutil
import subprocess

logger = logging.getLogger(__name__)

# alias -> executable
EDITOR_ALIASES: dict[str, str] = {
    "code": "code",
    "vscode": "code",
    "cursor": "cursor",
    "vim": "vim",
    "nvim": "nvim",
    "neovim": "nvim",
    "emacs": "emacs",
    "sublime": "subl",
    "subl": "subl",
    "atom": "atom",
    "idea": "idea",
    "intellij": "idea",
    "webstorm": "webstorm",
    "pycharm": "pycharm",
    "goland": "goland",
    "rustrover": "rustrover",
    "zed": "zed",
}


class LaunchError(RuntimeError):
    """The editor process could not be started."""


class Launcher:
    def __init__(self, editor: str) -> None:
        self.editor = editor

    def resolve_editor(self) -> str:
        """Map a known alias (case-insensitive) to its executable."""
        return EDITOR_ALIASES.get(self.editor.lower(), self.editor)

    def command(self, project_path: str) -> list[str]:
        """Argument vector for opening project_path.

        Editor strings may carry their own arguments, e.g. "code -n".
        """
        try:
            parts = shlex.split(self.editor)
        except ValueError as e:
            raise LaunchError(f"Cannot parse editor command '{self.editor}': {e}") from e
        if not parts:
            raise LaunchError("No editor configured")
        parts[0] = EDITOR_ALIASES.get(parts[0].lower(), parts[0])
        return parts + [project_path]

    def launch(self, project_path: str) -> subprocess.Popen:
        """Spawn the editor on project_path without waiting for it."""
        argv = self.command(project_path)
        logger.debug("Launching %s", argv)
        try:
            return subprocess.Popen(argv)
        except (FileNotFoundError, PermissionError, OSError) as e:
            raise LaunchError(
                f"Failed to launch editor '{argv[0]}'. Is it installed and in PATH?"
            ) from e

    def check_editor_available(self) -> bool:
        try:
            executable = self.command("")[0]
        except LaunchError:
            return False
        return shutil.which(executable) is not None


def get_available_editors() -> list[str]:
    """Aliases whose executable is on PATH."""
    return [alias for alias, exe in EDITOR_ALIASES.items() if shutil.which(exe) is not None]
