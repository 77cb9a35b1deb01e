"""Textual TUI picker — fuzzy-select a project from the scan results."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Optional

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.fuzzy import Matcher
from textual.widgets import Footer, Header, Input, Label, OptionList
from textual.widgets.option_list import Option

from quickproj.scanner import Project
from quickproj.theme import format_project_item, marker_icon


def rank_projects(projects: Sequence[Project], query: str) -> list[Project]:
    """Fuzzy-rank projects against query, best match first.

    Candidates are matched on "name path"; ties keep the incoming order,
    which is the scanner's name order. An empty query returns everything.
    """
    query = query.strip()
    if not query:
        return list(projects)

    matcher = Matcher(query)
    scored: list[tuple[float, int, Project]] = []
    for idx, p in enumerate(projects):
        score = matcher.match(f"{p.name} {p.path}")
        if score > 0:
            scored.append((score, idx, p))
    scored.sort(key=lambda s: (-s[0], s[1]))
    return [p for _, _, p in scored]


class ProjectPicker(App[Optional[Project]]):
    """quickproj — pick a project to open."""

    CSS = """
    #query {
        dock: top;
        margin: 0 1;
        border: tall $accent;
    }

    #projects {
        height: 1fr;
        border: solid $secondary;
        margin: 0 1;
    }

    #loading {
        height: 1fr;
        content-align: center middle;
        text-align: center;
    }

    #status {
        dock: bottom;
        padding: 0 2;
        color: $text-muted;
    }
    """

    TITLE = "quickproj"
    SUB_TITLE = "select a project"

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
        Binding("down", "cursor_down", "Next", show=False),
        Binding("up", "cursor_up", "Prev", show=False),
        Binding("enter", "choose", "Open"),
    ]

    def __init__(self, load: Callable[[], Sequence[Project]]) -> None:
        super().__init__()
        self.load = load
        self.projects: list[Project] = []
        self.visible: list[Project] = []

    def compose(self) -> ComposeResult:
        yield Header()
        yield Input(placeholder="Type to filter…", id="query")
        yield Label("  Scanning projects...", id="loading")
        yield Label("", id="status")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#query", Input).focus()
        self.run_load()

    @work(thread=True)
    def run_load(self) -> None:
        """Load projects in a background thread."""
        projects = list(self.load())
        self.call_from_thread(self._show_projects, projects)

    def _show_projects(self, projects: list[Project]) -> None:
        self.projects = projects
        loading = self.query_one("#loading", Label)
        if not projects:
            loading.update("  No projects found.")
            return

        loading.remove()
        self.mount(OptionList(id="projects"), before=self.query_one("#status"))
        self._refilter(self.query_one("#query", Input).value)

    def _refilter(self, query: str) -> None:
        if not self.projects:
            return
        option_list = self.query_one("#projects", OptionList)
        self.visible = rank_projects(self.projects, query)
        option_list.clear_options()
        option_list.add_options(
            Option(format_project_item(p).append(f"  {marker_icon(p.marker)}"), id=str(i))
            for i, p in enumerate(self.visible)
        )
        if self.visible:
            option_list.highlighted = 0
        self.query_one("#status", Label).update(f"{len(self.visible)}/{len(self.projects)}")

    def on_input_changed(self, event: Input.Changed) -> None:
        self._refilter(event.value)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self.action_choose()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.exit(self.visible[event.option_index])

    def action_cursor_down(self) -> None:
        if self.visible:
            self.query_one("#projects", OptionList).action_cursor_down()

    def action_cursor_up(self) -> None:
        if self.visible:
            self.query_one("#projects", OptionList).action_cursor_up()

    def action_choose(self) -> None:
        if not self.visible:
            return
        highlighted = self.query_one("#projects", OptionList).highlighted
        if highlighted is not None:
            self.exit(self.visible[highlighted])

    def action_cancel(self) -> None:
        self.exit(None)


def select_project(projects: Sequence[Project]) -> Optional[Project]:
    """Show the picker and return the chosen project, or None if cancelled."""
    if not projects:
        return None
    return ProjectPicker(lambda: projects).run()
