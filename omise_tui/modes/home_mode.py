"""
Home - the first screen

Three big choices: run the shop, go shopping, or visit the puppy.
Number keys pick; H opens the high score list.
"""

from textual.app import ComposeResult
from textual.containers import Center, Container, Horizontal, Middle
from textual.widgets import Static

from ..constants import ICON_CART, ICON_DOG, ICON_STORE, ICON_TROPHY

HOME_OPTIONS = [
    ("1", ICON_STORE, {"ja": "おみせやさん", "en": "Shop Keeper"}),
    ("2", ICON_CART, {"ja": "おきゃくさん", "en": "Customer"}),
    ("3", ICON_DOG, {"ja": "どうぶつのおへや", "en": "Puppy Room"}),
]


class HomeOption(Static):
    """One big choice on the home screen"""

    DEFAULT_CSS = """
    HomeOption {
        width: 24;
        height: 7;
        content-align: center middle;
        text-align: center;
        border: round $primary;
        margin: 0 1;
    }
    """

    def __init__(self, key: str, icon: str, labels: dict[str, str], **kwargs):
        super().__init__(**kwargs)
        self.key = key
        self.icon = icon
        self.labels = labels
        self.language = "ja"

    def render(self) -> str:
        return f"[bold]{self.key}[/]\n\n{self.icon}  {self.labels[self.language]}"


class HomeHint(Static):

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.language = "ja"

    def render(self) -> str:
        if self.language == "ja":
            return f"[dim]{ICON_TROPHY} H: ハイスコア    F1: English[/]"
        return f"[dim]{ICON_TROPHY} H: High scores    F1: にほんご[/]"


class HomeMode(Container):
    """Initial selection screen."""

    DEFAULT_CSS = """
    HomeMode {
        width: 100%;
        height: 100%;
        align: center middle;
    }

    #home-options {
        width: auto;
        height: auto;
    }

    #home-hint {
        width: 100%;
        text-align: center;
        margin-top: 2;
    }
    """

    def compose(self) -> ComposeResult:
        with Center():
            with Middle():
                with Horizontal(id="home-options"):
                    for key, icon, labels in HOME_OPTIONS:
                        yield HomeOption(key, icon, labels, id=f"home-{key}")
                yield HomeHint(id="home-hint")

    def update_from(self, store) -> None:
        for widget in self.query(HomeOption):
            widget.language = store.current_language
            widget.refresh()
        hint = self.query_one("#home-hint", HomeHint)
        hint.language = store.current_language
        hint.refresh()

    def handle_key(self, key: str, character, store) -> bool:
        if key == "1":
            store.go_to_shop_mode_selection()
        elif key == "2":
            store.start_customer_mode()
        elif key == "3":
            store.start_animal_care_mode()
        elif key == "h":
            self.app.action_show_high_scores()
        else:
            return False
        return True
