"""Search Deck - an interactive TUI for indexing and searching workspaces."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from textual import work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import (
    Button,
    Checkbox,
    DataTable,
    DirectoryTree,
    Footer,
    Header,
    Input,
    Label,
    Log,
    Rule,
    Static,
)

from codeseek.engine import SemanticSearchEngine
from codeseek.errors import CodeSeekError
from codeseek.models import IndexStats, IndexStatus, SearchHit, SearchRequest


class StatsPanel(Static):
    """Index status and last build statistics."""

    def compose(self) -> ComposeResult:
        yield Static(id="stats-content")

    def on_mount(self) -> None:
        self.show(None, None, "idle")

    def show(self, status: IndexStatus | None, stats: IndexStats | None, state: str) -> None:
        content = self.query_one("#stats-content", Static)
        state_color = {
            "idle": "dim",
            "indexing": "yellow",
            "searching": "green",
            "ready": "cyan",
            "error": "red",
        }.get(state, "white")

        files = status.total_files if status and status.exists else None
        chunks = status.total_chunks if status and status.exists else None
        if stats is not None:
            files, chunks = stats.total_files, stats.total_chunks

        lines = [
            f"[b]STATUS[/b]  [{state_color}]{state.upper()}[/]",
            "",
            "[b]INDEX[/b]",
            f"  Files       [cyan]{files if files is not None else '--'}[/]",
            f"  Chunks      [magenta]{chunks if chunks is not None else '--'}[/]",
        ]
        if stats is not None:
            lines += [
                "",
                "[b]LAST BUILD[/b]",
                f"  Reused      [green]{stats.reused_files:,}[/]",
                f"  Updated     [blue]{stats.updated_files:,}[/]",
                f"  Removed     [dim]{stats.removed_files:,}[/]",
                f"  Took        [yellow]{stats.duration_ms:,} ms[/]",
            ]
        if status and status.last_error:
            lines += ["", f"[red]{status.last_error}[/]"]
        content.update("\n".join(lines))


class HitsTable(DataTable):
    """Ranked search results."""

    def on_mount(self) -> None:
        self.add_columns("Score", "Source", "Location", "Snippet")
        self.cursor_type = "row"

    def show_hits(self, hits: list[SearchHit]) -> None:
        self.clear()
        source_color = {"semantic": "magenta", "rg": "blue", "hybrid": "green"}
        for hit in hits:
            snippet = " ".join(hit.snippet.split())
            if len(snippet) > 60:
                snippet = snippet[:57] + "..."
            color = source_color.get(hit.source, "white")
            self.add_row(
                f"{hit.score:.3f}",
                f"[{color}]{hit.source}[/]",
                f"{hit.path}:{hit.start_line}-{hit.end_line}",
                snippet,
            )


class SearchDeck(App):
    """The codeseek Search Deck."""

    CSS = """
    #main-container {
        layout: horizontal;
        height: 100%;
    }

    #left-panel {
        width: 35;
        background: $surface-darken-1;
        border-right: solid $primary-darken-2;
        padding: 1;
    }

    #center-panel {
        width: 1fr;
        padding: 1;
    }

    #right-panel {
        width: 30;
        background: $surface-darken-1;
        border-left: solid $primary-darken-2;
        padding: 1;
    }

    StatsPanel {
        height: auto;
        padding: 1;
        background: $surface-darken-2;
        border: round $primary;
        margin-bottom: 1;
    }

    #action-buttons {
        layout: horizontal;
        height: 3;
        margin-bottom: 1;
    }

    #action-buttons Button {
        margin-right: 1;
    }

    HitsTable {
        height: 1fr;
        border: round $primary-darken-1;
    }

    #log-panel {
        height: 10;
        border: round $primary-darken-2;
        background: $surface-darken-2;
    }

    .section-title {
        text-style: bold;
        margin-bottom: 1;
    }

    DirectoryTree {
        height: 100%;
        border: round $primary-darken-1;
        background: $surface-darken-2;
    }
    """

    BINDINGS = [
        Binding("ctrl+r", "index", "Index", show=True),
        Binding("ctrl+s", "search", "Search", show=True),
        Binding("ctrl+q", "quit", "Quit", show=True),
    ]

    TITLE = "codeseek Search Deck"
    SUB_TITLE = "Offline code search"

    def __init__(self, engine: SemanticSearchEngine, workspace: str | None = None):
        super().__init__()
        self.engine = engine
        self.initial_workspace = workspace or str(Path.cwd())
        self.last_stats: IndexStats | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Container(id="main-container"):
            with Vertical(id="left-panel"):
                yield Label("INDEX", classes="section-title")
                yield StatsPanel()
                yield Rule()
                yield Label("Workspace")
                yield Input(value=self.initial_workspace, id="workspace-input")
                yield Label("Query")
                yield Input(placeholder="e.g. computeTotal", id="query-input")
                yield Checkbox("Smart mode (ripgrep)", value=True, id="smart-mode")
                with Horizontal(id="action-buttons"):
                    yield Button("SEARCH", id="search-btn", variant="success")
                    yield Button("Index", id="index-btn", variant="warning")

            with Vertical(id="center-panel"):
                yield Label("RESULTS", classes="section-title")
                yield HitsTable(id="hits")
                yield Rule()
                yield Label("LOG", classes="section-title")
                yield Log(id="log-panel", highlight=True, auto_scroll=True)

            with Vertical(id="right-panel"):
                yield Label("FILE BROWSER", classes="section-title")
                yield DirectoryTree(self.initial_workspace, id="dir-tree")

        yield Footer()

    def on_mount(self) -> None:
        self._log("Search Deck initialized")
        self.refresh_status()

    def _log(self, message: str) -> None:
        timestamp = datetime.now().strftime("%H:%M:%S")
        self.query_one("#log-panel", Log).write_line(f"[{timestamp}] {message}")

    @property
    def workspace(self) -> str:
        return self.query_one("#workspace-input", Input).value.strip()

    def on_directory_tree_directory_selected(
        self, event: DirectoryTree.DirectorySelected
    ) -> None:
        self.query_one("#workspace-input", Input).value = str(event.path)
        self.refresh_status()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "query-input":
            self.action_search()
        else:
            self.refresh_status()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "search-btn":
            self.action_search()
        elif event.button.id == "index-btn":
            self.action_index()

    def action_index(self) -> None:
        if not self.workspace:
            self._log("ERROR: No workspace specified")
            return
        self.run_index(self.workspace)

    def action_search(self) -> None:
        query = self.query_one("#query-input", Input).value.strip()
        if not self.workspace or not query:
            self._log("ERROR: Workspace and query are required")
            return
        smart = self.query_one("#smart-mode", Checkbox).value
        self.run_search(self.workspace, query, "smart" if smart else "semantic")

    @work(exclusive=True, group="status")
    async def refresh_status(self) -> None:
        if not self.workspace:
            return
        status = await self.engine.get_status(self.workspace)
        state = "indexing" if status.indexing else ("ready" if status.exists else "idle")
        self.query_one(StatsPanel).show(status, None, state)

    @work(exclusive=True, group="index")
    async def run_index(self, workspace: str) -> None:
        panel = self.query_one(StatsPanel)
        panel.show(None, self.last_stats, "indexing")
        self._log(f"Indexing {workspace}...")
        try:
            stats = await self.engine.index_workspace(workspace)
        except (CodeSeekError, OSError) as e:
            panel.show(await self.engine.get_status(workspace), None, "error")
            self._log(f"ERROR: {e}")
            return

        self.last_stats = stats
        panel.show(None, stats, "ready")
        self._log(
            f"Indexed {stats.total_files} files, {stats.total_chunks} chunks "
            f"in {stats.duration_ms} ms"
        )

    @work(exclusive=True, group="search")
    async def run_search(self, workspace: str, query: str, mode: str) -> None:
        self._log(f"Searching {query!r} ({mode})")
        try:
            response = await self.engine.search(
                SearchRequest(workspace_path=workspace, query=query, mode=mode)  # type: ignore[arg-type]
            )
        except (CodeSeekError, OSError) as e:
            self._log(f"ERROR: {e}")
            return

        self.query_one("#hits", HitsTable).show_hits(response.hits)
        refreshed = ", index refreshed" if response.auto_refreshed else ""
        self._log(f"{len(response.hits)} hits in {response.took_ms} ms{refreshed}")
        self.refresh_status()


def main(engine: SemanticSearchEngine | None = None, workspace: str | None = None) -> None:
    """Run the Search Deck TUI."""
    app = SearchDeck(engine or SemanticSearchEngine(), workspace)
    app.run()


if __name__ == "__main__":
    main()
