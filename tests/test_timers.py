#!/usr/bin/env python3
"""Tests for the app's timer bookkeeping.

The app owns every timer. These tests drive its sync step with a fake
timer factory instead of a running Textual app.

Run with: pytest tests/test_timers.py -v
"""

import random
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from omise_tui.game import GameStore
from omise_tui.omise_tui import OmiseApp
from omise_tui.orders import GameMode
from omise_tui.scores import ScoreStore


class FakeTimer:
    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.stopped = False

    def stop(self):
        self.stopped = True


class TimerHost:
    """Stands in for OmiseApp: the same timer slots and timer factories."""

    def __init__(self):
        self.created = []
        self._countdown = None
        self._feedback_timer = None
        self._tap_timer = None
        self._tap_key = None
        self._animation_timer = None
        self._puppy_refresh = None

    def set_timer(self, delay, callback):
        timer = FakeTimer(delay, callback)
        self.created.append(timer)
        return timer

    set_interval = set_timer

    def _end_feedback(self):
        pass

    def _end_tap(self, key):
        pass

    def _end_animation(self):
        pass

    def sync(self, store):
        OmiseApp._sync_timers(self, store)


class QuietSounds:
    def play(self, effect):
        return True


@pytest.fixture
def store(tmp_path):
    return GameStore(
        scores=ScoreStore(tmp_path / "scores.json"),
        rng=random.Random(3),
        sounds=QuietSounds(),
        speak=lambda text, language: None,
    )


@pytest.fixture
def host():
    return TimerHost()


def answer(store):
    for key, quantity in store.current_order.as_selection().items():
        for _ in range(quantity):
            store.product_tapped(key)
    store.submit_user_selection()


class TestFeedbackTimer:

    def test_started_for_pending_feedback(self, store, host):
        store.setup_game(GameMode.SHOPPING)
        answer(store)
        host.sync(store)
        assert host._feedback_timer is not None
        assert not host._feedback_timer.stopped

    def test_dropped_when_round_is_left(self, store, host):
        store.setup_game(GameMode.SHOPPING)
        answer(store)
        host.sync(store)
        stale = host._feedback_timer

        store.return_to_mode_selection()
        host.sync(store)
        assert stale.stopped
        assert host._feedback_timer is None

    def test_next_round_gets_a_fresh_timer(self, store, host):
        store.setup_game(GameMode.SHOPPING)
        answer(store)
        host.sync(store)
        stale = host._feedback_timer
        store.return_to_mode_selection()
        host.sync(store)

        store.setup_game(GameMode.SHOPPING)
        answer(store)
        host.sync(store)
        assert host._feedback_timer is not stale
        assert not host._feedback_timer.stopped


class TestCountdown:

    def test_stops_with_the_round(self, store, host):
        store.setup_game(GameMode.SHOPPING)
        host.sync(store)
        countdown = host._countdown
        assert countdown is not None
        store.return_to_mode_selection()
        host.sync(store)
        assert countdown.stopped
        assert host._countdown is None
