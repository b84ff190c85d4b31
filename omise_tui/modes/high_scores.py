"""
High Scores - best score per game and time limit, newest day first

Also shows how many days a round has been cleared.
Escape or Enter closes.
"""

from textual.app import ComposeResult
from textual.containers import Container, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Static

from ..constants import ICON_TROPHY
from ..orders import mode_display_name
from ..scores import ScoreStore


def high_score_lines(scores: ScoreStore, language: str) -> list[str]:
    """Rows for the high score list, grouped by the day each record was set."""
    ja = language == "ja"
    by_date = scores.load_scores_by_date()
    if not by_date:
        return ["まだ きろくが ありません" if ja else "No high scores yet"]
    lines = []
    for day in sorted(by_date, reverse=True):
        lines.append(f"[bold]{day.isoformat()}[/]")
        for mode, limit, score in sorted(by_date[day], key=lambda r: -r[2]):
            lines.append(f"  {mode_display_name(mode, language)} ({limit.display_name(language)}): {score}")
    return lines


class HighScoreScreen(ModalScreen):
    """List of high scores and cleared days."""

    CSS = """
    HighScoreScreen {
        align: center middle;
    }

    #scores-dialog {
        width: 60;
        height: 80%;
        padding: 1 2;
        background: $surface;
        border: heavy $primary;
    }

    #scores-title {
        width: 100%;
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }

    #scores-cleared {
        width: 100%;
        text-align: center;
        color: $success;
        margin-bottom: 1;
    }

    #scores-hint {
        width: 100%;
        text-align: center;
        color: $text-muted;
    }
    """

    BINDINGS = [
        ("escape", "dismiss", "Close"),
        ("enter", "dismiss", "Close"),
    ]

    def __init__(self, scores: ScoreStore, language: str, **kwargs) -> None:
        super().__init__(**kwargs)
        self._scores = scores
        self._language = language

    def compose(self) -> ComposeResult:
        ja = self._language == "ja"
        cleared = len(self._scores.load_cleared_dates())
        with Container(id="scores-dialog"):
            yield Static(f"{ICON_TROPHY} {'ハイスコア' if ja else 'High Scores'}", id="scores-title")
            yield Static(
                f"{'クリアした日' if ja else 'Days cleared'}: {cleared}",
                id="scores-cleared",
            )
            with VerticalScroll():
                yield Static("\n".join(high_score_lines(self._scores, self._language)), id="scores-list")
            yield Static("Esc: とじる" if ja else "Esc: close", id="scores-hint")
