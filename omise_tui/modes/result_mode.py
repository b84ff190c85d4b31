"""
Result - end of a shop keeper round
"""

from textual.app import ComposeResult
from textual.containers import Center, Container, Middle
from textual.widgets import Static

from ..constants import ICON_TROPHY
from ..orders import mode_display_name


class ResultContent(Static):
    """Score, high score and a cheer for new records"""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.lines: list[str] = []

    def render(self) -> str:
        return "\n".join(self.lines)


class ResultMode(Container):

    DEFAULT_CSS = """
    ResultMode {
        width: 100%;
        height: 100%;
        align: center middle;
    }

    #result-content {
        text-align: center;
        width: auto;
        height: auto;
    }
    """

    def compose(self) -> ComposeResult:
        with Center():
            with Middle():
                yield ResultContent(id="result-content")

    def update_from(self, store) -> None:
        ja = store.current_language == "ja"
        mode = mode_display_name(store.current_game_mode, store.current_language)
        limit = store.selected_time_limit.display_name(store.current_language)
        lines = [
            f"[bold]{'おしまい！' if ja else 'Finished!'}[/]",
            "",
            f"{mode} ({limit})",
            "",
            f"{'スコア' if ja else 'Score'}: [bold]{store.current_score}[/]",
            f"{ICON_TROPHY} {'ハイスコア' if ja else 'High score'}: {store.high_score}",
        ]
        if store.is_new_high_score:
            lines += ["", f"[bold]🎉 {'ハイスコア こうしん！' if ja else 'New high score!'} 🎉[/]"]
        lines += ["", f"[dim]{'Enter: もどる' if ja else 'Enter: back'}[/]"]
        content = self.query_one("#result-content", ResultContent)
        content.lines = lines
        content.refresh()

    def handle_key(self, key: str, character, store) -> bool:
        if key in ("enter", "escape"):
            store.reset_game()
            return True
        return False
