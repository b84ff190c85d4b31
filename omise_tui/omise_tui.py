#!/usr/bin/env python3
"""
Omise - Main Textual TUI Application

A shop keeping game for kids: run a shop, go shopping, look after a puppy.

Keyboard controls:
- Number keys: pick products, options and coins
- Enter: hand over / answer / pay
- Backspace: fix mistakes
- Escape: go back
- H: high scores (home screen)
- F1: Japanese / English
- F12: Toggle dark/light theme
"""

import logging
import os
from typing import Optional

from textual import events
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.css.query import NoMatches
from textual.theme import Theme
from textual.widgets import Static

from . import tts
from .constants import (
    CARE_ANIMATION_DELAY, CLEAN_ANIMATION_DELAY, DAYTIME_CHECK_INTERVAL,
    FEEDBACK_DELAY, ICON_MOON, ICON_SUN, SCREEN_TITLES, TAP_HIGHLIGHT_DELAY,
    TIMER_INTERVAL,
)
from .game import GameState, GameStore
from .modes.animal_mode import AnimalMode
from .modes.customer_mode import CustomerMode
from .modes.high_scores import HighScoreScreen
from .modes.home_mode import HomeMode
from .modes.result_mode import ResultMode
from .modes.shop_mode import ShopMode
from .scores import get_data_dir
from .shop_picker import ShopPickerScreen
from .sounds import SoundPlayer

logger = logging.getLogger(__name__)

# Which view container shows each game state
STATE_VIEWS = {
    GameState.INITIAL_SELECTION: ("view-home", "initial"),
    GameState.MODE_SELECTION: ("view-home", "initial"),
    GameState.PLAYING: ("view-shop", "shop"),
    GameState.PLAYING_CUSTOMER: ("view-customer", "customer"),
    GameState.ANIMAL_CARE: ("view-animal", "animal"),
    GameState.RESULT: ("view-result", "result"),
}


class ScreenTitle(Static):
    """Shows the current screen title above the viewport"""

    DEFAULT_CSS = """
    ScreenTitle {
        width: 1fr;
        height: 1;
        text-align: center;
        color: $primary;
        text-style: bold;
    }
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.screen_name = "initial"
        self.language = "ja"

    def render(self) -> str:
        icon, labels = SCREEN_TITLES[self.screen_name]
        return f"{icon}  {labels[self.language]}"


class StatusBadges(Static):
    """Language and theme keys in the top-right corner"""

    DEFAULT_CSS = """
    StatusBadges {
        width: auto;
        height: 1;
        color: $text-muted;
    }
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.language = "ja"
        self.dark = True

    def render(self) -> str:
        language = "あ" if self.language == "ja" else "A"
        return f"F1 {language}   F12 {ICON_MOON if self.dark else ICON_SUN}"


class FeedbackBanner(Static):
    """Big right/wrong banner shown for a moment after each answer"""

    DEFAULT_CSS = """
    FeedbackBanner {
        dock: top;
        width: 100%;
        height: 3;
        content-align: center middle;
        text-align: center;
        text-style: bold;
        display: none;
    }

    FeedbackBanner.correct {
        background: $success;
        color: $background;
    }

    FeedbackBanner.incorrect {
        background: $error;
        color: $background;
    }
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.correct = True
        self.language = "ja"

    def render(self) -> str:
        ja = self.language == "ja"
        if self.correct:
            return "⭕ " + ("せいかい！" if ja else "Correct!")
        return "❌ " + ("ざんねん！" if ja else "Try again!")


class OmiseApp(App):
    """
    Omise - shop keeping for kids.

    F1: Switch language
    F12: Toggle dark/light mode
    """

    CSS = """
    Screen {
        background: $background;
    }

    #outer-container {
        width: 100%;
        height: 100%;
        align: center middle;
        background: $background;
    }

    #viewport-wrapper {
        width: auto;
        height: auto;
    }

    #title-row {
        width: 100;
        height: 1;
        margin-bottom: 1;
    }

    #viewport {
        width: 100;
        height: 30;
        border: heavy $primary;
        background: $surface;
        padding: 1;
    }

    #content-area {
        width: 100%;
        height: 100%;
    }

    .view-content {
        width: 100%;
        height: 100%;
        display: none;
    }

    .view-content.active {
        display: block;
    }
    """

    BINDINGS = [
        Binding("f1", "toggle_language", "Language", show=False, priority=True),
        Binding("f12", "toggle_theme", "Theme", show=False, priority=True),
    ]

    def __init__(self, store: Optional[GameStore] = None):
        super().__init__()
        self.store = store or GameStore()
        self.active_theme = "omise-dark"
        self._shown_state = None
        self._unsubscribe = None

        # Timer handles, owned by the app so the store stays free of clocks
        self._countdown = None
        self._feedback_timer = None
        self._tap_timer = None
        self._tap_key = None
        self._animation_timer = None
        self._puppy_refresh = None

        self.register_theme(
            Theme(
                name="omise-dark",
                primary="#e89b7b",
                secondary="#c47a5c",
                warning="#e8c060",
                error="#c46b7b",
                success="#7bc48a",
                accent="#f4c0a0",
                background="#2a1a14",
                surface="#3a2820",
                panel="#3a2820",
                dark=True,
            )
        )
        self.register_theme(
            Theme(
                name="omise-light",
                primary="#b0583a",
                secondary="#904830",
                warning="#a08040",
                error="#a04050",
                success="#40a050",
                accent="#904830",
                background="#fbf0e8",
                surface="#f4e2d6",
                panel="#f4e2d6",
                dark=False,
            )
        )
        self.theme = "omise-dark"

    def compose(self) -> ComposeResult:
        """Create the UI layout"""
        with Container(id="outer-container"):
            with Vertical(id="viewport-wrapper"):
                with Horizontal(id="title-row"):
                    yield ScreenTitle(id="screen-title")
                    yield StatusBadges(id="status-badges")
                with Container(id="viewport"):
                    yield FeedbackBanner(id="feedback")
                    with Container(id="content-area"):
                        yield HomeMode(id="view-home", classes="view-content")
                        yield ShopMode(id="view-shop", classes="view-content")
                        yield CustomerMode(id="view-customer", classes="view-content")
                        yield AnimalMode(id="view-animal", classes="view-content")
                        yield ResultMode(id="view-result", classes="view-content")

    def on_mount(self) -> None:
        """Called when app starts"""
        self._apply_theme()
        self._unsubscribe = self.store.subscribe(self._on_store_changed)
        self._on_store_changed(self.store)

    def on_unmount(self) -> None:
        """Called when app is shutting down"""
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None
        tts.stop()
        if self.store.sounds is not None:
            self.store.sounds.cleanup()

    # =========================================================================
    # Store -> UI
    # =========================================================================

    def _active_view(self):
        view_id, _ = STATE_VIEWS[self.store.game_state]
        try:
            return self.query_one(f"#{view_id}")
        except NoMatches:
            return None

    def _on_store_changed(self, store: GameStore) -> None:
        """Re-render from the store and (re)schedule delayed callbacks."""
        view_id, screen_name = STATE_VIEWS[store.game_state]

        if store.game_state != self._shown_state:
            previous = self._shown_state
            self._shown_state = store.game_state
            for view in self.query(".view-content"):
                view.set_class(view.id == view_id, "active")
            logger.debug("Game state %s -> %s", previous, store.game_state)
            if store.game_state == GameState.MODE_SELECTION:
                self._show_shop_picker()

        title = self.query_one("#screen-title", ScreenTitle)
        title.screen_name = screen_name
        title.language = store.current_language
        title.refresh()

        badges = self.query_one("#status-badges", StatusBadges)
        badges.language = store.current_language
        badges.dark = self.active_theme == "omise-dark"
        badges.refresh()

        banner = self.query_one("#feedback", FeedbackBanner)
        banner.correct = store.feedback_is_correct
        banner.language = store.current_language
        banner.set_class(store.feedback_is_correct, "correct")
        banner.set_class(not store.feedback_is_correct, "incorrect")
        banner.display = store.show_feedback_overlay
        banner.refresh()

        view = self._active_view()
        if view is not None:
            view.update_from(store)

        self._sync_timers(store)

    def _sync_timers(self, store: GameStore) -> None:
        # Countdown
        if store.timer_running and self._countdown is None:
            self._countdown = self.set_interval(TIMER_INTERVAL, store.tick)
        elif not store.timer_running and self._countdown is not None:
            self._countdown.stop()
            self._countdown = None

        # Feedback overlay
        if store.pending_feedback is not None and self._feedback_timer is None:
            self._feedback_timer = self.set_timer(FEEDBACK_DELAY, self._end_feedback)
        elif store.pending_feedback is None and self._feedback_timer is not None:
            self._feedback_timer.stop()
            self._feedback_timer = None

        # Product tap flash, restarted when another product is tapped
        key = store.tapped_product_key
        if key is not None and key != self._tap_key:
            if self._tap_timer is not None:
                self._tap_timer.stop()
            self._tap_key = key
            self._tap_timer = self.set_timer(TAP_HIGHLIGHT_DELAY, lambda: self._end_tap(key))

        # Puppy room
        puppy = store.puppy
        animating = puppy.show_eating or puppy.show_playing or puppy.show_petting or puppy.show_cleaning
        if animating and self._animation_timer is None:
            delay = CLEAN_ANIMATION_DELAY if puppy.show_cleaning else CARE_ANIMATION_DELAY
            self._animation_timer = self.set_timer(delay, self._end_animation)

        in_room = store.game_state == GameState.ANIMAL_CARE
        if in_room and self._puppy_refresh is None:
            self._puppy_refresh = self.set_interval(DAYTIME_CHECK_INTERVAL, store.refresh_puppy)
        elif not in_room and self._puppy_refresh is not None:
            self._puppy_refresh.stop()
            self._puppy_refresh = None

    def _end_feedback(self) -> None:
        self._feedback_timer = None
        self.store.finish_feedback()

    def _end_tap(self, key: str) -> None:
        self._tap_timer = None
        self._tap_key = None
        self.store.clear_tap(key)

    def _end_animation(self) -> None:
        self._animation_timer = None
        self.store.end_puppy_animations()

    # =========================================================================
    # Modal screens
    # =========================================================================

    def _show_shop_picker(self) -> None:
        store = self.store

        def on_picked(choice) -> None:
            if choice is None:
                store.return_to_mode_selection()
                return
            store.set_shop_type(choice["shop"])
            store.set_time_limit(choice["time"])
            store.setup_game(choice["mode"])

        picker = ShopPickerScreen(
            store.current_language, store.current_shop_type, store.selected_time_limit, store.current_game_mode,
        )
        self.push_screen(picker, on_picked)

    def action_show_high_scores(self) -> None:
        self.push_screen(HighScoreScreen(self.store.scores, self.store.current_language))

    # =========================================================================
    # Actions
    # =========================================================================

    def _apply_theme(self) -> None:
        """Apply the current color theme"""
        self.theme = self.active_theme
        try:
            self.query_one("#status-badges", StatusBadges).refresh()
        except NoMatches:
            pass

    def action_toggle_theme(self) -> None:
        """Toggle between dark and light mode (F12)"""
        self.active_theme = "omise-light" if self.active_theme == "omise-dark" else "omise-dark"
        self._apply_theme()
        self._on_store_changed(self.store)

    def action_toggle_language(self) -> None:
        """Switch between Japanese and English (F1)"""
        self.store.toggle_language()

    def on_key(self, event: events.Key) -> None:
        """Route keys to the view for the current game state"""
        # Modal screens handle their own keys
        if len(self.screen_stack) > 1:
            return
        view = self._active_view()
        if view is None:
            return
        if view.handle_key(event.key, event.character, self.store):
            event.stop()
            event.prevent_default()


def setup_logging() -> None:
    """Log to a file in the data directory. Textual owns the terminal."""
    log_dir = get_data_dir()
    level_name = os.environ.get("OMISE_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        logging.basicConfig(
            filename=str(log_dir / "omise.log"),
            level=level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    except OSError:
        # No writable data dir: keep running without a log file
        logging.getLogger().addHandler(logging.NullHandler())


def main():
    """Entry point for Omise"""
    setup_logging()
    logger.info("Starting Omise")
    store = GameStore(sounds=SoundPlayer(), speak=tts.speak)
    app = OmiseApp(store)
    app.run(mouse=False)  # Keyboard-only


if __name__ == "__main__":
    main()
