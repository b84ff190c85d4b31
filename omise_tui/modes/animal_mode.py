"""
Puppy Room - look after the puppy

1: feed, 2: play, 3: pet, 4: clean up, N: give it a name.
If the puppy ran away, R adopts it again. Escape goes home.
"""

from datetime import datetime
from typing import Optional

from rich.markup import escape
from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Center, Container, Middle, Vertical
from textual.screen import ModalScreen
from textual.widgets import Input, Static

from ..constants import ICON_DOG, ICON_MOON, ICON_SUN, MAX_POOPS
from ..pet import DEFAULT_NAME, is_daytime

ACTIONS = {
    "ja": "1: ごはん   2: あそぶ   3: なでる   4: おそうじ   N: なまえ   Esc: もどる",
    "en": "1: feed   2: play   3: pet   4: clean   N: name   Esc: back",
}

FACES = {
    "happy": ["  /^ ^\\  ", " / 0 0 \\ ", " V\\ Y /V ", "  / - \\  ", " /  |  \\ "],
    "sad": ["  /^ ^\\  ", " / - - \\ ", " V\\ Y /V ", "  / ~ \\  ", " /  |  \\ "],
    "hungry": ["  /^ ^\\  ", " / o o \\ ", " V\\ Y /V ", "  / O \\  ", " /  |  \\ "],
    "sleeping": ["  /^ ^\\  ", " / - - \\ ", " V\\ Y /V ", "  / . \\  ", "   zzz   "],
}


class PuppyFace(Static):
    """ASCII puppy, face changes with mood"""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.mood = "happy"
        self.action = ""

    def render(self) -> str:
        lines = list(FACES[self.mood])
        if self.action:
            lines.append(self.action)
        return "\n".join(lines)


class CareMeter(Static):
    """A labelled 0-100 bar"""

    DEFAULT_CSS = """
    CareMeter {
        width: 100%;
        height: 1;
    }

    CareMeter.low {
        color: $warning;
    }
    """

    BAR_WIDTH = 20

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.label = ""
        self.value = 0.0

    def render(self) -> Text:
        filled = round(self.value / 100 * self.BAR_WIDTH)
        text = Text(f"{self.label:<8} ")
        text.append("█" * filled, style="bold")
        text.append("░" * (self.BAR_WIDTH - filled), style="dim")
        text.append(f" {int(self.value):>3}")
        return text


class PuppyNameScreen(ModalScreen):
    """
    Ask for the puppy's name.

    Returns the typed name, or None if cancelled.
    """

    CSS = """
    PuppyNameScreen {
        align: center middle;
    }

    #name-dialog {
        width: 50;
        height: auto;
        padding: 1 2;
        background: $surface;
        border: heavy $primary;
    }

    #name-title {
        width: 100%;
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }
    """

    BINDINGS = [("escape", "dismiss(None)", "Cancel")]

    def __init__(self, language: str, current: str = "", **kwargs) -> None:
        super().__init__(**kwargs)
        self._language = language
        self._current = current

    def compose(self) -> ComposeResult:
        title = "なまえを つけてね" if self._language == "ja" else "Name your puppy"
        with Container(id="name-dialog"):
            yield Static(title, id="name-title")
            yield Input(value=self._current, max_length=20, id="name-input")

    def on_mount(self) -> None:
        self.query_one("#name-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        event.stop()
        self.dismiss(event.value.strip() or None)


class AnimalMode(Container):
    """Puppy room."""

    DEFAULT_CSS = """
    AnimalMode {
        width: 100%;
        height: 100%;
        align: center middle;
    }

    #puppy-box {
        width: 50;
        height: auto;
        padding: 1 2;
        border: round $primary;
    }

    PuppyFace {
        width: 100%;
        text-align: center;
        color: $primary;
        margin: 1 0;
    }

    #puppy-title, #puppy-poops, #puppy-hint {
        width: 100%;
        text-align: center;
    }

    #puppy-hint {
        color: $text-muted;
        margin-top: 1;
    }
    """

    def compose(self) -> ComposeResult:
        with Center():
            with Middle():
                with Vertical(id="puppy-box"):
                    yield Static("", id="puppy-title")
                    yield PuppyFace(id="puppy-face")
                    yield CareMeter(id="meter-hunger")
                    yield CareMeter(id="meter-happiness")
                    yield Static("", id="puppy-poops")
                    yield Static("", id="puppy-hint")

    def _action_text(self, puppy, ja: bool) -> str:
        if puppy.show_eating:
            return "🍖 もぐもぐ" if ja else "🍖 munch munch"
        if puppy.show_playing:
            return "🎾 わんわん！" if ja else "🎾 woof woof!"
        if puppy.show_petting:
            return "💕 くぅ～ん" if ja else "💕 aww"
        if puppy.show_cleaning:
            return "✨ ピカピカ" if ja else "✨ sparkly clean"
        return ""

    def update_from(self, store, now: Optional[datetime] = None) -> None:
        ja = store.current_language == "ja"
        puppy = store.puppy
        now = now or store.clock()
        daytime = is_daytime(now)

        title = self.query_one("#puppy-title", Static)
        sky = ICON_SUN if daytime else ICON_MOON
        days = puppy.days_with_you(now)
        if ja:
            title.update(f"{sky} {ICON_DOG} [bold]{escape(puppy.name)}[/]  いっしょに {days}日")
        else:
            title.update(f"{sky} {ICON_DOG} [bold]{escape(puppy.name)}[/]  {days} days together")

        face = self.query_one("#puppy-face", PuppyFace)
        hint = self.query_one("#puppy-hint", Static)
        if puppy.is_missing:
            face.mood = "sad"
            face.action = "いなくなっちゃった…" if ja else "Your puppy ran away..."
            hint.update("R: もういちど むかえる   Esc: もどる" if ja else "R: adopt again   Esc: back")
        else:
            face.mood = puppy.mood() if daytime else "sleeping"
            face.action = self._action_text(puppy, ja)
            hint.update(ACTIONS[store.current_language])
        face.refresh()

        hunger = self.query_one("#meter-hunger", CareMeter)
        hunger.label = "おなか" if ja else "Food"
        hunger.value = puppy.hunger
        hunger.set_class(puppy.hunger < 20, "low")
        hunger.refresh()

        happiness = self.query_one("#meter-happiness", CareMeter)
        happiness.label = "ごきげん" if ja else "Happy"
        happiness.value = puppy.happiness
        happiness.set_class(puppy.happiness < 20, "low")
        happiness.refresh()

        poops = self.query_one("#puppy-poops", Static)
        poops.update("💩" * min(puppy.poop_count, MAX_POOPS))

    def handle_key(self, key: str, character, store) -> bool:
        puppy = store.puppy
        if key == "escape":
            store.return_to_mode_selection()
        elif puppy.is_missing:
            if key == "r":
                store.reset_puppy_adoption()
            else:
                return False
        elif key == "1":
            store.feed_puppy()
        elif key == "2":
            store.play_with_puppy()
        elif key == "3":
            store.pet_puppy()
        elif key == "4":
            store.clean_poops()
        elif key == "n":
            self._ask_name(store)
        else:
            return False
        return True

    def _ask_name(self, store) -> None:
        current = store.puppy.name if store.puppy.name != DEFAULT_NAME else ""

        def on_name(name) -> None:
            if name:
                store.name_puppy(name)

        self.app.push_screen(PuppyNameScreen(store.current_language, current), on_name)
