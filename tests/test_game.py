#!/usr/bin/env python3
"""Tests for the game store: rounds, scoring, customer mode and the puppy room.

The store gets a temp score file, a seeded rng, a fake sound player and a
fake clock, so every test is deterministic.

Run with: pytest tests/test_game.py -v
"""

import random
import sys
from datetime import date, datetime, timedelta
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from omise_tui.catalog import ShopType
from omise_tui.constants import MAX_MISTAKES, MONEY_VALUES
from omise_tui.game import Feedback, GameState, GameStore
from omise_tui.orders import (
    CHANGE_ANSWER, GameMode, TimeLimitOption, expected_price_answer,
)
from omise_tui.scores import ScoreStore
from omise_tui.sounds import SoundEffect


class FakeSounds:
    def __init__(self):
        self.played = []

    def play(self, effect):
        self.played.append(effect)
        return True


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 5, 1, 10, 0, 0))


@pytest.fixture
def sounds():
    return FakeSounds()


@pytest.fixture
def spoken():
    return []


@pytest.fixture
def scores(tmp_path):
    return ScoreStore(tmp_path / "scores.json")


@pytest.fixture
def store(scores, sounds, spoken, clock):
    return GameStore(
        scores=scores,
        rng=random.Random(7),
        sounds=sounds,
        speak=lambda text, language: spoken.append((text, language)),
        clock=clock,
    )


def answer_correctly(store):
    order = store.current_order
    if store.current_game_mode == GameMode.CALCULATION_QUIZ:
        for digit in str(order.sentinel("total_quantity_answer")):
            store.type_digit(digit)
    elif store.current_game_mode == GameMode.PRICE_QUIZ:
        for digit in str(expected_price_answer(order, store.products)):
            store.type_digit(digit)
    else:
        for key, quantity in order.as_selection().items():
            for _ in range(quantity):
                store.product_tapped(key)
    return store.submit_user_selection()


def pay_exactly(store, amount):
    for value in MONEY_VALUES:
        while amount >= value:
            store.add_payment(value)
            amount -= value


class TestInitialState:

    def test_starts_on_home_screen(self, store):
        assert store.game_state == GameState.INITIAL_SELECTION
        assert store.current_language == "ja"
        assert store.current_shop_type == ShopType.FRUIT_STAND
        assert store.selected_time_limit == TimeLimitOption.MEDIUM
        assert len(store.products) == 6

    def test_go_to_mode_selection(self, store):
        store.go_to_shop_mode_selection()
        assert store.game_state == GameState.MODE_SELECTION


class TestSubscriptions:

    def test_subscriber_called_on_change(self, store):
        calls = []
        store.subscribe(lambda s: calls.append(s.game_state))
        store.go_to_shop_mode_selection()
        assert calls == [GameState.MODE_SELECTION]

    def test_unsubscribe(self, store):
        calls = []
        unsubscribe = store.subscribe(lambda s: calls.append(1))
        unsubscribe()
        store.go_to_shop_mode_selection()
        assert calls == []

    def test_failing_subscriber_does_not_break_others(self, store):
        calls = []

        def broken(_):
            raise RuntimeError("boom")

        store.subscribe(broken)
        store.subscribe(lambda s: calls.append(1))
        store.go_to_shop_mode_selection()
        assert calls == [1]


class TestSettings:

    def test_language(self, store):
        store.set_language("en")
        assert store.current_language == "en"
        store.toggle_language()
        assert store.current_language == "ja"

    def test_unsupported_language(self, store):
        with pytest.raises(ValueError):
            store.set_language("fr")

    def test_shop_type_loads_products(self, store):
        store.set_shop_type(ShopType.BAKERY)
        assert {p.key for p in store.products} >= {"bread", "donut"}

    def test_time_limit(self, store):
        store.set_time_limit(TimeLimitOption.SHORT)
        assert store.remaining_time == 30


class TestShoppingRound:

    def test_setup(self, store, sounds, spoken):
        store.setup_game(GameMode.SHOPPING)
        assert store.game_state == GameState.PLAYING
        assert store.timer_running
        assert store.current_order is not None
        assert store.current_score == 0
        assert SoundEffect.ORDER_NEW in sounds.played
        assert spoken and spoken[-1][1] == "ja"

    def test_correct_answer(self, store, sounds):
        store.setup_game(GameMode.SHOPPING)
        assert answer_correctly(store) is True
        assert store.current_score == 1
        assert store.show_feedback_overlay
        assert store.feedback_is_correct
        assert store.pending_feedback == Feedback.CORRECT
        assert sounds.played[-1] == SoundEffect.CORRECT

    def test_submit_ignored_during_feedback(self, store):
        store.setup_game(GameMode.SHOPPING)
        answer_correctly(store)
        assert store.submit_user_selection() is None
        assert store.current_score == 1

    def test_next_order_after_feedback(self, store):
        store.setup_game(GameMode.SHOPPING)
        answer_correctly(store)
        store.finish_feedback()
        assert not store.show_feedback_overlay
        assert store.user_selection == {}
        assert store.current_order is not None

    def test_wrong_answer(self, store, sounds):
        store.setup_game(GameMode.SHOPPING)
        assert store.submit_user_selection() is False
        assert store.mistake_count == 1
        assert not store.feedback_is_correct
        assert sounds.played[-1] == SoundEffect.INCORRECT

    def test_round_ends_on_max_mistakes(self, store):
        store.setup_game(GameMode.SHOPPING)
        for _ in range(MAX_MISTAKES):
            store.submit_user_selection()
            store.finish_feedback()
        assert store.game_state == GameState.RESULT
        assert not store.timer_running

    def test_tap_highlight(self, store):
        store.setup_game(GameMode.SHOPPING)
        key = store.products[0].key
        store.product_tapped(key)
        assert store.tapped_product_key == key
        assert store.user_selection[key] == 1
        store.clear_tap("someone-else")
        assert store.tapped_product_key == key
        store.clear_tap(key)
        assert store.tapped_product_key is None

    def test_unknown_product_ignored(self, store):
        store.setup_game(GameMode.SHOPPING)
        store.product_tapped("bread")
        assert store.user_selection == {}

    def test_clear_selection(self, store):
        store.setup_game(GameMode.SHOPPING)
        store.product_tapped(store.products[0].key)
        store.clear_selection()
        assert store.user_selection == {}

    def test_too_few_products_falls_back_to_shopping(self, store, caplog):
        store.setup_game(GameMode.CALCULATION_QUIZ)
        only = store.products[0]
        store.products = [only]
        store.generate_new_order()
        assert store.current_game_mode == GameMode.SHOPPING
        assert [item.product_key for item in store.current_order.items] == [only.key]
        assert store.current_order.items[0].quantity == 1
        assert "Switching to shopping" in caplog.text

    def test_escape_back_home(self, store):
        store.setup_game(GameMode.SHOPPING)
        store.return_to_mode_selection()
        assert store.game_state == GameState.INITIAL_SELECTION
        assert not store.timer_running
        assert store.current_order is None


class TestNumberQuizzes:

    def test_calculation_quiz(self, store):
        store.setup_game(GameMode.CALCULATION_QUIZ)
        assert answer_correctly(store) is True

    def test_calculation_wrong(self, store):
        store.setup_game(GameMode.CALCULATION_QUIZ)
        store.type_digit("9")
        store.type_digit("9")
        assert store.submit_user_selection() is False

    def test_price_quiz(self, store):
        store.setup_game(GameMode.PRICE_QUIZ)
        assert answer_correctly(store) is True

    def test_change_quiz_at_high_score(self, store):
        store.setup_game(GameMode.PRICE_QUIZ)
        store.current_score = 9
        store.generate_new_order()
        assert store.current_order.sentinel(CHANGE_ANSWER) is not None
        assert answer_correctly(store) is True

    def test_digit_input(self, store):
        store.setup_game(GameMode.PRICE_QUIZ)
        for digit in "12345678":
            store.type_digit(digit)
        assert store.current_input() == "123456"
        store.type_digit("x")
        assert store.current_input() == "123456"
        store.delete_digit()
        assert store.current_input() == "12345"

    def test_digits_ignored_in_shopping(self, store):
        store.setup_game(GameMode.SHOPPING)
        store.type_digit("1")
        assert store.current_input() == ""


class TestListeningQuiz:

    def test_needs_english(self, store):
        store.setup_game(GameMode.LISTENING_QUIZ)
        assert store.current_game_mode == GameMode.SHOPPING

    def test_speaks_the_order(self, store, spoken):
        store.set_language("en")
        store.setup_game(GameMode.LISTENING_QUIZ)
        assert store.current_game_mode == GameMode.LISTENING_QUIZ
        text, language = spoken[-1]
        assert language == "en"
        assert text.startswith("Can I have")
        assert store.display_order_text() == "Listen carefully!"

    def test_switching_to_japanese_ends_round(self, store):
        store.set_language("en")
        store.setup_game(GameMode.LISTENING_QUIZ)
        store.set_language("ja")
        assert store.game_state == GameState.INITIAL_SELECTION


class TestTimer:

    def test_tick_counts_down(self, store):
        store.setup_game(GameMode.SHOPPING)
        store.tick()
        assert store.remaining_time == 59

    def test_time_up_records_high_score(self, store, scores, clock):
        store.set_time_limit(TimeLimitOption.SHORT)
        store.setup_game(GameMode.SHOPPING)
        answer_correctly(store)
        store.finish_feedback()
        for _ in range(30):
            store.tick()
        assert store.game_state == GameState.RESULT
        assert store.remaining_time == 0
        assert store.is_new_high_score
        assert store.high_score == 1
        assert scores.load_high_score(GameMode.SHOPPING, TimeLimitOption.SHORT) == 1
        assert scores.load_cleared_dates() == [date(2024, 5, 1)]

    def test_zero_score_not_cleared(self, store, scores):
        store.set_time_limit(TimeLimitOption.SHORT)
        store.setup_game(GameMode.SHOPPING)
        for _ in range(30):
            store.tick()
        assert not store.is_new_high_score
        assert scores.load_cleared_dates() == []

    def test_tick_outside_round_stops_timer(self, store):
        store.tick()
        assert not store.timer_running

    def test_reset_after_result(self, store):
        store.setup_game(GameMode.SHOPPING)
        store.handle_time_up()
        store.reset_game()
        assert store.game_state == GameState.INITIAL_SELECTION
        assert store.current_score == 0


class TestCustomerMode:

    def fill_cart(self, store):
        for item in store.current_shopping_list:
            for _ in range(item.quantity):
                store.add_to_customer_cart(item.product_key)

    def test_start(self, store):
        store.start_customer_mode()
        assert store.game_state == GameState.PLAYING_CUSTOMER
        assert len(store.current_shopping_list) == 2
        assert store.customer_cart == []
        assert not store.timer_running

    def test_cart_add_and_remove(self, store):
        store.start_customer_mode()
        key = store.products[0].key
        store.add_to_customer_cart(key)
        store.add_to_customer_cart(key)
        assert store.customer_cart[0].quantity == 2
        store.remove_from_customer_cart(key)
        assert store.customer_cart[0].quantity == 1
        store.remove_from_customer_cart(key)
        assert store.customer_cart == []

    def test_cart_total(self, store):
        store.start_customer_mode()
        self.fill_cart(store)
        assert store.cart_total() == store.shopping_list_total()

    def test_checkout_needs_items(self, store):
        store.start_customer_mode()
        store.go_to_checkout()
        assert not store.at_checkout

    def test_exact_payment(self, store):
        store.start_customer_mode()
        self.fill_cart(store)
        store.go_to_checkout()
        pay_exactly(store, store.cart_total())
        assert store.confirm_payment() is True
        assert store.current_score == 1
        assert store.pending_feedback == Feedback.PAYMENT_CORRECT
        store.finish_feedback()
        assert store.customer_cart == []
        assert store.payment_amount == 0
        assert len(store.current_shopping_list) == 2
        assert store.game_state == GameState.PLAYING_CUSTOMER

    def test_wrong_amount(self, store):
        store.start_customer_mode()
        self.fill_cart(store)
        store.go_to_checkout()
        pay_exactly(store, store.cart_total() + 1)
        assert store.confirm_payment() is False
        store.finish_feedback()
        assert store.payment_amount == 0
        assert store.at_checkout
        assert store.current_score == 0

    def test_wrong_items(self, store):
        store.start_customer_mode()
        wanted = {item.product_key for item in store.current_shopping_list}
        other = next(p.key for p in store.products if p.key not in wanted)
        store.add_to_customer_cart(other)
        store.go_to_checkout()
        pay_exactly(store, store.cart_total())
        assert store.confirm_payment() is False

    def test_only_real_money(self, store):
        store.start_customer_mode()
        with pytest.raises(ValueError):
            store.add_payment(3)

    def test_back_to_shopping(self, store):
        store.start_customer_mode()
        self.fill_cart(store)
        store.go_to_checkout()
        store.add_payment(100)
        store.back_to_shopping()
        assert not store.at_checkout
        assert store.payment_amount == 0
        assert store.customer_cart

    def test_money_ignored_while_wrong_payment_shows(self, store):
        store.start_customer_mode()
        self.fill_cart(store)
        store.go_to_checkout()
        store.add_payment(1)
        assert store.confirm_payment() is False
        store.add_payment(100)
        store.add_payment(10)
        assert store.payment_amount == 1
        store.reset_payment()
        store.back_to_shopping()
        assert store.payment_amount == 1
        assert store.at_checkout
        store.finish_feedback()
        assert store.payment_amount == 0
        store.add_payment(100)
        assert store.payment_amount == 100

    def test_cart_locked_while_right_payment_shows(self, store):
        store.start_customer_mode()
        self.fill_cart(store)
        store.go_to_checkout()
        pay_exactly(store, store.cart_total())
        assert store.confirm_payment() is True
        cart = [(item.product_key, item.quantity) for item in store.customer_cart]
        store.add_to_customer_cart(store.products[0].key)
        store.remove_from_customer_cart(cart[0][0])
        store.go_to_checkout()
        assert [(item.product_key, item.quantity) for item in store.customer_cart] == cart
        assert not store.at_checkout
        store.finish_feedback()
        assert store.customer_cart == []
        store.add_to_customer_cart(store.products[0].key)
        assert len(store.customer_cart) == 1

    def test_cart_ignored_outside_customer_mode(self, store):
        store.setup_game(GameMode.SHOPPING)
        store.add_to_customer_cart(store.products[0].key)
        store.add_payment(100)
        assert store.customer_cart == []
        assert store.payment_amount == 0


class TestPuppyRoom:

    def test_enter_room(self, store):
        store.start_animal_care_mode()
        assert store.game_state == GameState.ANIMAL_CARE

    def test_care_actions(self, store):
        store.start_animal_care_mode()
        store.feed_puppy()
        assert store.puppy.hunger == 100
        assert store.puppy.show_eating
        store.end_puppy_animations()
        assert not store.puppy.show_eating
        store.play_with_puppy()
        assert store.puppy.show_playing
        store.pet_puppy()
        assert store.puppy.show_petting

    def test_refresh_applies_decay(self, store, clock):
        store.start_animal_care_mode()
        clock.advance(hours=2)
        store.refresh_puppy()
        assert store.puppy.hunger == pytest.approx(70)

    def test_clean_poops(self, store, clock):
        clock.advance(hours=1)
        store.start_animal_care_mode()
        assert store.puppy.poop_count > 0
        store.clean_poops()
        assert store.puppy.poop_count == 0

    def test_name(self, store, scores):
        store.name_puppy("  ポチ  ")
        assert store.puppy.name == "ポチ"
        assert scores.get("puppyName") == "ポチ"

    def test_blank_name_ignored(self, store):
        before = store.puppy.name
        store.name_puppy("   ")
        assert store.puppy.name == before

    def test_runs_away_and_comes_back(self, store, clock):
        clock.advance(days=4)
        store.start_animal_care_mode()
        assert store.puppy.is_missing
        store.reset_puppy_adoption()
        assert not store.puppy.is_missing
        assert store.puppy.adoption_date == clock.now
