"""
Shop Picker Screen: pick a shop, a time limit and a game

Three rows of options. Up/Down moves between rows, Left/Right picks
within a row, Enter starts the game, Escape goes back.
"""

from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Static

from .catalog import ShopType
from .constants import ICON_CALCULATOR, ICON_CART, ICON_EAR, ICON_YEN
from .orders import GameMode, TimeLimitOption, mode_display_name

MODE_ICONS = {
    GameMode.SHOPPING: ICON_CART,
    GameMode.CALCULATION_QUIZ: ICON_CALCULATOR,
    GameMode.PRICE_QUIZ: ICON_YEN,
    GameMode.LISTENING_QUIZ: ICON_EAR,
}

ROW_TITLES = {
    "shop": {"ja": "おみせ", "en": "Shop"},
    "time": {"ja": "じかん", "en": "Time"},
    "mode": {"ja": "あそびかた", "en": "Game"},
}

HINTS = {
    "ja": "↑ ↓ で えらぶ、← → で きりかえ、Enter で スタート",
    "en": "↑ ↓ to pick a row, ← → to change, Enter to start",
}


def available_modes(language: str) -> list[GameMode]:
    """Listening quiz is only offered in English."""
    modes = [GameMode.SHOPPING, GameMode.CALCULATION_QUIZ, GameMode.PRICE_QUIZ]
    if language == "en":
        modes.append(GameMode.LISTENING_QUIZ)
    return modes


def initial_mode_index(language: str, mode: GameMode) -> int:
    """Row position of the last game played, or the first game if it is not offered."""
    modes = available_modes(language)
    return modes.index(mode) if mode in modes else 0


class PickerOption(Static):
    """A single selectable option with icon and label."""

    DEFAULT_CSS = """
    PickerOption {
        width: 16;
        height: 4;
        content-align: center middle;
        text-align: center;
        border: round $surface-lighten-2;
        margin: 0 1;
    }

    PickerOption.selected {
        border: heavy $accent;
        background: $primary;
        color: $background;
        text-style: bold;
    }

    PickerOption.row-dim {
        color: $text-muted;
    }
    """

    def __init__(self, icon: str, label: str, **kwargs):
        super().__init__(**kwargs)
        self.icon = icon
        self.label = label

    def render(self) -> str:
        return f"{self.icon}\n{self.label}"


class ShopPickerScreen(ModalScreen):
    """
    Modal screen for choosing what to play.

    Returns {"shop": ShopType, "time": TimeLimitOption, "mode": GameMode}
    or None if cancelled.
    """

    CSS = """
    ShopPickerScreen {
        align: center middle;
    }

    #picker-dialog {
        width: 80;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: heavy $primary;
    }

    .picker-row-title {
        width: 100%;
        text-align: center;
        color: $text-muted;
    }

    .picker-row-title.active {
        color: $accent;
        text-style: bold;
    }

    .picker-row {
        width: 100%;
        height: auto;
        align: center middle;
        margin-bottom: 1;
    }

    #picker-hint {
        width: 100%;
        text-align: center;
        color: $text-muted;
    }
    """

    ROWS = ("shop", "time", "mode")

    def __init__(self, language: str, shop: ShopType, time_limit: TimeLimitOption,
                 mode: GameMode = GameMode.SHOPPING, **kwargs):
        super().__init__(**kwargs)
        self._language = language
        self._options = {
            "shop": list(ShopType),
            "time": list(TimeLimitOption),
            "mode": available_modes(language),
        }
        self._selected = {
            "shop": self._options["shop"].index(shop),
            "time": self._options["time"].index(time_limit),
            "mode": initial_mode_index(language, mode),
        }
        self._row = 0

    def _option_view(self, row: str, value) -> tuple[str, str]:
        if row == "shop":
            return value.emoji, value.localized_name(self._language)
        if row == "time":
            return "⏱", value.display_name(self._language)
        return MODE_ICONS[value], mode_display_name(value, self._language)

    def compose(self) -> ComposeResult:
        with Container(id="picker-dialog"):
            for row in self.ROWS:
                yield Static(ROW_TITLES[row][self._language], id=f"title-{row}", classes="picker-row-title")
                with Horizontal(classes="picker-row"):
                    for i, value in enumerate(self._options[row]):
                        icon, label = self._option_view(row, value)
                        yield PickerOption(icon, label, id=f"opt-{row}-{i}")
            yield Static(HINTS[self._language], id="picker-hint")

    def on_mount(self) -> None:
        self._update_selection()

    def _update_selection(self) -> None:
        """Update visual selection state."""
        for r, row in enumerate(self.ROWS):
            self.query_one(f"#title-{row}", Static).set_class(r == self._row, "active")
            for i in range(len(self._options[row])):
                option = self.query_one(f"#opt-{row}-{i}", PickerOption)
                option.set_class(i == self._selected[row], "selected")
                option.set_class(r != self._row, "row-dim")

    def result(self) -> dict:
        return {row: self._options[row][self._selected[row]] for row in self.ROWS}

    def on_key(self, event) -> None:
        key = event.key
        row = self.ROWS[self._row]
        if key in ("enter", "escape"):
            event.stop()
            event.prevent_default()
            self.dismiss(self.result() if key == "enter" else None)
            return
        if key == "up":
            self._row = max(0, self._row - 1)
        elif key == "down":
            self._row = min(len(self.ROWS) - 1, self._row + 1)
        elif key == "left":
            self._selected[row] = max(0, self._selected[row] - 1)
        elif key == "right":
            self._selected[row] = min(len(self._options[row]) - 1, self._selected[row] + 1)
        else:
            return
        event.stop()
        event.prevent_default()
        self._update_selection()
