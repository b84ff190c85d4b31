#!/usr/bin/env python3
"""Tests for screen helpers that don't need a running app.

Run with: pytest tests/test_screens.py -v
"""

import sys
from datetime import date
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from omise_tui.modes.customer_mode import shelf_index
from omise_tui.modes.high_scores import high_score_lines
from omise_tui.orders import GameMode, TimeLimitOption
from omise_tui.scores import ScoreStore
from omise_tui.shop_picker import available_modes, initial_mode_index


@pytest.fixture
def scores(tmp_path):
    return ScoreStore(tmp_path / "scores.json")


class TestAvailableModes:

    def test_listening_only_in_english(self):
        assert GameMode.LISTENING_QUIZ not in available_modes("ja")
        assert GameMode.LISTENING_QUIZ in available_modes("en")

    def test_shopping_first(self):
        assert available_modes("ja")[0] == GameMode.SHOPPING

    def test_picker_keeps_last_game(self):
        assert initial_mode_index("ja", GameMode.PRICE_QUIZ) == 2
        assert initial_mode_index("en", GameMode.LISTENING_QUIZ) == 3

    def test_picker_falls_back_when_game_not_offered(self):
        assert initial_mode_index("ja", GameMode.LISTENING_QUIZ) == 0


class TestShelfKeys:

    def test_numbers_add(self):
        assert shelf_index("1") == (0, False)
        assert shelf_index("6") == (5, False)

    def test_shifted_numbers_remove(self):
        assert shelf_index("!") == (0, True)
        assert shelf_index("^") == (5, True)

    @pytest.mark.parametrize("character", [None, "", "0", "7", "a", "&"])
    def test_other_keys(self, character):
        assert shelf_index(character) is None


class TestHighScoreLines:

    def test_empty(self, scores):
        assert high_score_lines(scores, "en") == ["No high scores yet"]
        assert high_score_lines(scores, "ja") == ["まだ きろくが ありません"]

    def test_newest_day_first(self, scores):
        scores.save_high_score(3, GameMode.SHOPPING, TimeLimitOption.SHORT, today=date(2024, 5, 1))
        scores.save_high_score(8, GameMode.PRICE_QUIZ, TimeLimitOption.LONG, today=date(2024, 6, 1))
        lines = high_score_lines(scores, "en")
        assert lines[0] == "[bold]2024-06-01[/]"
        assert lines[1] == "  Price Quiz (90s): 8"
        assert lines[2] == "[bold]2024-05-01[/]"
        assert lines[3] == "  Shopping (30s): 3"

    def test_best_score_first_within_a_day(self, scores):
        day = date(2024, 5, 1)
        scores.save_high_score(3, GameMode.SHOPPING, TimeLimitOption.SHORT, today=day)
        scores.save_high_score(9, GameMode.CALCULATION_QUIZ, TimeLimitOption.SHORT, today=day)
        lines = high_score_lines(scores, "ja")
        assert lines[1] == "  けいさん (30秒): 9"
        assert lines[2] == "  おかいもの (30秒): 3"
