"""
Game store: all game state and the rules that change it

The UI never mutates state directly. It calls a store method, the store
updates its fields and notifies subscribers, and the UI re-renders from
the fields. Delays (feedback overlay, tap flash, countdown) are scheduled
by the UI, which calls back into finish_feedback(), clear_tap() and tick().

Screen flow:

    INITIAL_SELECTION -> MODE_SELECTION -> PLAYING -> RESULT -> INITIAL_SELECTION
                      -> PLAYING_CUSTOMER
                      -> ANIMAL_CARE
"""

import logging
import random
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from .catalog import Product, ShopType, find_product, load_products
from .constants import LANGUAGES, MAX_MISTAKES, MONEY_VALUES
from .orders import (
    GameMode, Order, OrderItem, TimeLimitOption,
    carts_match, check_calculation, check_price, check_shopping,
    calculation_order_text, generate_calculation_order, generate_price_order,
    generate_shopping_list, generate_shopping_order, items_total,
    listening_prompt, price_order_text, selection_text, shopping_order_text,
)
from .pet import Puppy
from .scores import ScoreStore
from .sounds import SoundEffect

logger = logging.getLogger(__name__)

CUSTOMERS = ["🧒", "👵", "👨"]

MAX_INPUT_DIGITS = 6


class GameState(Enum):
    INITIAL_SELECTION = 1   # Pick shop keeper, customer or puppy room
    MODE_SELECTION = 2      # Pick shop, game mode and time limit
    PLAYING = 3             # Shop keeper round in progress
    PLAYING_CUSTOMER = 4    # Customer mode
    ANIMAL_CARE = 5         # Puppy room
    RESULT = 6              # Round over


class CustomerSubMode(Enum):
    SHOPPING_LIST = 1
    BUDGET_CHALLENGE = 2    # Not playable yet


class Feedback(Enum):
    """What finish_feedback() has to do once the overlay goes away."""
    CORRECT = 1
    INCORRECT = 2
    PAYMENT_CORRECT = 3
    PAYMENT_INCORRECT = 4


class GameStore:
    """Observable game state. Subscribers are called after every change."""

    def __init__(
        self,
        scores: Optional[ScoreStore] = None,
        rng: Optional[random.Random] = None,
        sounds=None,
        speak: Optional[Callable[[str, str], object]] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.scores = scores or ScoreStore()
        self.rng = rng or random.Random()
        self.sounds = sounds
        self.speak = speak
        self.clock = clock
        self._subscribers: list[Callable[["GameStore"], None]] = []

        # Settings
        self.current_game_mode = GameMode.SHOPPING
        self.current_shop_type = ShopType.FRUIT_STAND
        self.current_language = "ja"
        self.selected_time_limit = TimeLimitOption.MEDIUM

        # Round state
        self.game_state = GameState.INITIAL_SELECTION
        self.products: list[Product] = []
        self.current_order: Optional[Order] = None
        self.user_selection: dict[str, int] = {}
        self.calculation_input = ""
        self.price_input = ""
        self.current_score = 0
        self.mistake_count = 0
        self.remaining_time = self.selected_time_limit.seconds
        self.timer_running = False
        self.current_customer = CUSTOMERS[0]

        # Feedback
        self.show_feedback_overlay = False
        self.feedback_is_correct = True
        self.pending_feedback: Optional[Feedback] = None
        self.tapped_product_key: Optional[str] = None

        # Result
        self.is_new_high_score = False
        self.high_score = 0

        # Customer mode
        self.customer_sub_mode = CustomerSubMode.SHOPPING_LIST
        self.current_shopping_list: Optional[list[OrderItem]] = None
        self.customer_cart: list[OrderItem] = []
        self.payment_amount = 0
        self.payment_successful = False
        self.at_checkout = False

        # Puppy room
        self.puppy = Puppy(self.scores, now=self.clock())
        self.puppy.load(self.clock())

        self.load_products()

    # =========================================================================
    # Subscriptions
    # =========================================================================

    def subscribe(self, callback: Callable[["GameStore"], None]) -> Callable[[], None]:
        """Register a listener. Returns a function that unregisters it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)
        return unsubscribe

    def _notify(self) -> None:
        for callback in list(self._subscribers):
            try:
                callback(self)
            except Exception:
                logger.exception("Subscriber %r failed", callback)

    # =========================================================================
    # Side effects
    # =========================================================================

    def _play(self, effect: SoundEffect) -> None:
        if self.sounds is not None:
            self.sounds.play(effect)

    def speak_prompt(self) -> None:
        """Read the current question aloud (if speech is available)."""
        if self.speak is None or self.current_order is None:
            return
        self.speak(self.spoken_prompt(), self.current_language)

    # =========================================================================
    # Settings
    # =========================================================================

    def set_language(self, language: str) -> None:
        if language not in LANGUAGES:
            raise ValueError(f"Unsupported language: {language}")
        self.current_language = language
        if (language == "ja" and self.current_game_mode == GameMode.LISTENING_QUIZ
                and self.game_state == GameState.PLAYING):
            logger.info("Language changed to Japanese during Listening Quiz. Returning to mode selection.")
            self.return_to_mode_selection()
            return
        self._notify()

    def toggle_language(self) -> None:
        self.set_language("en" if self.current_language == "ja" else "ja")

    def set_shop_type(self, shop_type: ShopType) -> None:
        self.current_shop_type = shop_type
        self.load_products()
        self._notify()

    def set_time_limit(self, option: TimeLimitOption) -> None:
        self.selected_time_limit = option
        if self.game_state != GameState.PLAYING:
            self.remaining_time = option.seconds
        self._notify()

    def load_products(self) -> None:
        self.products = load_products(self.current_shop_type, self.rng)
        logger.info("Loaded products for shop type: %s", self.current_shop_type.value)

    def get_product(self, key: str) -> Optional[Product]:
        return find_product(self.products, key)

    # =========================================================================
    # Navigation
    # =========================================================================

    def go_to_shop_mode_selection(self) -> None:
        logger.info("Navigating to Shop Mode Selection")
        self.game_state = GameState.MODE_SELECTION
        self._notify()

    def setup_game(self, mode: GameMode) -> None:
        """Start a shop keeper round in the given mode."""
        if mode == GameMode.LISTENING_QUIZ and self.current_language != "en":
            logger.info("Listening Quiz requires English. Switching to Shopping mode.")
            self.current_game_mode = GameMode.SHOPPING
        else:
            self.current_game_mode = mode

        self.current_score = 0
        self.mistake_count = 0
        self.is_new_high_score = False
        self.game_state = GameState.PLAYING
        self.show_feedback_overlay = False
        self.pending_feedback = None
        self.remaining_time = self.selected_time_limit.seconds
        self.load_products()
        self.generate_new_order(notify=False)
        self.timer_running = True
        self._notify()

    def return_to_mode_selection(self) -> None:
        """Back to the first screen, dropping the round in progress."""
        self.timer_running = False
        self.game_state = GameState.INITIAL_SELECTION
        self.current_order = None
        self._clear_inputs()
        self.current_score = 0
        self.is_new_high_score = False
        self.show_feedback_overlay = False
        self.pending_feedback = None
        self.at_checkout = False
        self._notify()

    def reset_game(self) -> None:
        self.return_to_mode_selection()

    # =========================================================================
    # Orders
    # =========================================================================

    def _clear_inputs(self) -> None:
        self.user_selection = {}
        self.calculation_input = ""
        self.price_input = ""
        self.tapped_product_key = None

    def generate_new_order(self, notify: bool = True) -> None:
        self._clear_inputs()
        self.current_customer = self.rng.choice(CUSTOMERS)

        mode = self.current_game_mode
        order: Optional[Order]
        if mode == GameMode.CALCULATION_QUIZ:
            order = generate_calculation_order(self.products, self.rng)
        elif mode == GameMode.PRICE_QUIZ:
            order = generate_price_order(self.products, self.current_score, self.rng)
        else:
            order = generate_shopping_order(self.products, self.current_score, self.rng)

        if order is None:
            logger.error("Not enough products for %s. Switching to shopping.", mode.value)
            self.current_game_mode = GameMode.SHOPPING
            order = generate_shopping_order(self.products, self.current_score, self.rng)

        self.current_order = order
        logger.info("Generated new order: %s", order.items)
        self._play(SoundEffect.ORDER_NEW)
        self.speak_prompt()
        if notify:
            self._notify()

    def product_tapped(self, key: str) -> None:
        if self.game_state != GameState.PLAYING or self.show_feedback_overlay:
            return
        if self.get_product(key) is None:
            logger.warning("Tapped unknown product %s", key)
            return
        self.user_selection[key] = self.user_selection.get(key, 0) + 1
        logger.debug("User selected: %s, new count: %d", key, self.user_selection[key])
        self._play(SoundEffect.ITEM_SELECT)
        self.tapped_product_key = key
        self._notify()

    def clear_tap(self, key: str) -> None:
        """End the tap flash, unless another product was tapped since."""
        if self.tapped_product_key == key:
            self.tapped_product_key = None
            self._notify()

    def clear_selection(self) -> None:
        self._clear_inputs()
        self._notify()

    def _input_field(self) -> Optional[str]:
        if self.current_game_mode == GameMode.CALCULATION_QUIZ:
            return "calculation_input"
        if self.current_game_mode == GameMode.PRICE_QUIZ:
            return "price_input"
        return None

    def type_digit(self, digit: str) -> None:
        field = self._input_field()
        if field is None or self.game_state != GameState.PLAYING or self.show_feedback_overlay:
            return
        if not (len(digit) == 1 and digit.isdigit()):
            return
        value = getattr(self, field)
        if len(value) < MAX_INPUT_DIGITS:
            setattr(self, field, value + digit)
            self._notify()

    def delete_digit(self) -> None:
        field = self._input_field()
        if field is None:
            return
        setattr(self, field, getattr(self, field)[:-1])
        self._notify()

    def submit_user_selection(self) -> Optional[bool]:
        """Judge the answer. Returns whether it was correct, or None if ignored."""
        order = self.current_order
        if order is None or self.game_state != GameState.PLAYING or self.show_feedback_overlay:
            return None

        mode = self.current_game_mode
        if mode == GameMode.CALCULATION_QUIZ:
            correct = check_calculation(order, self.calculation_input)
        elif mode == GameMode.PRICE_QUIZ:
            correct = check_price(order, self.products, self.price_input)
        else:
            correct = check_shopping(order, self.user_selection)

        if correct:
            self._handle_correct_submission()
        else:
            self._handle_incorrect_submission()
        return correct

    def _handle_correct_submission(self) -> None:
        self.current_score += 1
        logger.info("Submission Correct! Score: %d", self.current_score)
        self._play(SoundEffect.CORRECT)
        self.feedback_is_correct = True
        self.show_feedback_overlay = True
        self.pending_feedback = Feedback.CORRECT
        self._notify()

    def _handle_incorrect_submission(self) -> None:
        self.mistake_count += 1
        logger.info("Submission Incorrect! Mistakes: %d", self.mistake_count)
        self._play(SoundEffect.INCORRECT)
        self.feedback_is_correct = False
        self.show_feedback_overlay = True
        self.pending_feedback = Feedback.INCORRECT
        self._notify()

    def finish_feedback(self) -> None:
        """Called by the UI once the feedback overlay has been shown."""
        pending = self.pending_feedback
        self.pending_feedback = None
        self.show_feedback_overlay = False

        if pending == Feedback.CORRECT:
            if self.game_state == GameState.PLAYING:
                self.generate_new_order(notify=False)
        elif pending == Feedback.INCORRECT:
            self._clear_inputs()
            if self.mistake_count >= MAX_MISTAKES:
                self.handle_time_up(notify=False)
        elif pending == Feedback.PAYMENT_CORRECT:
            if self.game_state == GameState.PLAYING_CUSTOMER:
                self.generate_shopping_list_mission(notify=False)
        elif pending == Feedback.PAYMENT_INCORRECT:
            self.payment_amount = 0
        self._notify()

    # =========================================================================
    # Timer
    # =========================================================================

    def tick(self) -> None:
        """One second of the countdown."""
        if self.game_state != GameState.PLAYING:
            self.timer_running = False
            self._notify()
            return
        self.remaining_time -= 1
        logger.debug("Remaining Time: %d", self.remaining_time)
        if self.remaining_time <= 0:
            self.remaining_time = 0
            self.handle_time_up(notify=False)
        self._notify()

    def handle_time_up(self, notify: bool = True) -> None:
        """End of round: out of time or out of mistakes."""
        if self.game_state != GameState.PLAYING:
            return
        logger.info("Time Up or Max Mistakes Reached! Final Score: %d", self.current_score)
        self.timer_running = False
        self.game_state = GameState.RESULT

        mode, limit = self.current_game_mode, self.selected_time_limit
        now = self.clock()
        self.is_new_high_score = self.scores.record_high_score(
            self.current_score, mode, limit, today=now.date()
        )
        self.high_score = self.scores.load_high_score(mode, limit)
        if self.current_score > 0:
            self.scores.save_cleared_date(now)
        if notify:
            self._notify()

    # =========================================================================
    # Customer mode
    # =========================================================================

    def start_customer_mode(self) -> None:
        logger.info("Starting Customer Mode - Shopping List")
        self.game_state = GameState.PLAYING_CUSTOMER
        self.customer_sub_mode = CustomerSubMode.SHOPPING_LIST
        self.timer_running = False
        self.show_feedback_overlay = False
        self.pending_feedback = None
        self.current_score = 0
        self.mistake_count = 0
        self.load_products()
        self.generate_shopping_list_mission(notify=False)
        self._notify()

    def generate_shopping_list_mission(self, notify: bool = True) -> None:
        self.current_shopping_list = generate_shopping_list(self.products, self.rng)
        logger.info("New shopping list mission: %s", self.current_shopping_list)
        self.reset_customer_cart_and_payment(notify=False)
        if notify:
            self._notify()

    def add_to_customer_cart(self, key: str) -> None:
        if self._customer_input_blocked():
            return
        if self.get_product(key) is None:
            logger.warning("Cannot add unknown product %s to cart", key)
            return
        for item in self.customer_cart:
            if item.product_key == key:
                item.quantity += 1
                break
        else:
            self.customer_cart.append(OrderItem(key, 1))
        self._play(SoundEffect.ITEM_SELECT)
        logger.debug("Cart: %s", self.customer_cart)
        self._notify()

    def remove_from_customer_cart(self, key: str) -> None:
        if self._customer_input_blocked():
            return
        for index, item in enumerate(self.customer_cart):
            if item.product_key == key:
                if item.quantity > 1:
                    item.quantity -= 1
                else:
                    del self.customer_cart[index]
                logger.debug("Removed %s from cart: %s", key, self.customer_cart)
                self._notify()
                return

    def _customer_input_blocked(self) -> bool:
        return self.game_state != GameState.PLAYING_CUSTOMER or self.show_feedback_overlay

    def cart_total(self) -> int:
        return items_total(self.customer_cart, self.products)

    def shopping_list_total(self) -> int:
        return items_total(self.current_shopping_list or [], self.products)

    def go_to_checkout(self) -> None:
        if self._customer_input_blocked() or not self.customer_cart:
            return
        self.at_checkout = True
        self._notify()

    def back_to_shopping(self) -> None:
        if self._customer_input_blocked():
            return
        self.at_checkout = False
        self.payment_amount = 0
        self._notify()

    def add_payment(self, amount: int) -> None:
        if amount not in MONEY_VALUES:
            raise ValueError(f"Not a coin or bill: {amount}")
        if self._customer_input_blocked():
            return
        self.payment_amount += amount
        logger.debug("Payment amount: %d", self.payment_amount)
        self._notify()

    def reset_payment(self) -> None:
        if self._customer_input_blocked():
            return
        self.payment_amount = 0
        self._notify()

    def confirm_payment(self) -> Optional[bool]:
        """Pay for the cart. Right when the cart matches the list and the money matches the total."""
        if self.game_state != GameState.PLAYING_CUSTOMER or self.show_feedback_overlay:
            return None
        expected = self.cart_total()
        list_ok = carts_match(self.customer_cart, self.current_shopping_list or [])
        correct = list_ok and self.payment_amount == expected

        self.feedback_is_correct = correct
        self.show_feedback_overlay = True
        if correct:
            logger.info("Payment correct!")
            self.payment_successful = True
            self.current_score += 1
            self.at_checkout = False
            self._play(SoundEffect.CORRECT)
            self.pending_feedback = Feedback.PAYMENT_CORRECT
        else:
            logger.info("Payment incorrect! Expected: %d, Paid: %d, list ok: %s",
                        expected, self.payment_amount, list_ok)
            self._play(SoundEffect.INCORRECT)
            self.pending_feedback = Feedback.PAYMENT_INCORRECT
        self._notify()
        return correct

    def reset_customer_cart_and_payment(self, notify: bool = True) -> None:
        self.customer_cart = []
        self.payment_amount = 0
        self.payment_successful = False
        self.at_checkout = False
        if notify:
            self._notify()

    # =========================================================================
    # Puppy room
    # =========================================================================

    def start_animal_care_mode(self) -> None:
        logger.info("Starting Animal Care Mode")
        self.game_state = GameState.ANIMAL_CARE
        self.timer_running = False
        self.current_score = 0
        self.mistake_count = 0
        now = self.clock()
        self.puppy.check_missing(now)
        self.puppy.update_status(now)
        self._notify()

    def feed_puppy(self) -> None:
        self.puppy.feed(self.clock())
        self._notify()

    def play_with_puppy(self) -> None:
        self.puppy.play(self.clock())
        self._notify()

    def pet_puppy(self) -> None:
        self.puppy.pet(self.clock())
        self._notify()

    def clean_poops(self) -> None:
        if self.puppy.clean(self.clock()):
            self._notify()

    def name_puppy(self, name: str) -> None:
        name = name.strip()
        if not name:
            return
        self.puppy.save_name(name, self.clock())
        self._notify()

    def reset_puppy_adoption(self) -> None:
        self.puppy.reset_adoption(self.clock())
        self._notify()

    def refresh_puppy(self) -> None:
        """Periodic update while the puppy room is open."""
        now = self.clock()
        self.puppy.update_status(now)
        self.puppy.check_missing(now)
        self._notify()

    def end_puppy_animations(self) -> None:
        self.puppy.clear_animations()
        self._notify()

    # =========================================================================
    # Text for the views
    # =========================================================================

    def display_order_text(self) -> str:
        if self.current_game_mode == GameMode.LISTENING_QUIZ:
            return listening_prompt(self.current_language)
        order = self.current_order
        if order is None or not order.items:
            return "..."
        if self.current_game_mode == GameMode.CALCULATION_QUIZ:
            return calculation_order_text(order, self.products, self.current_language)
        if self.current_game_mode == GameMode.PRICE_QUIZ:
            return price_order_text(order, self.products, self.current_language)
        return shopping_order_text(order, self.products, self.current_language)

    def spoken_prompt(self) -> str:
        order = self.current_order
        if order is None:
            return ""
        mode = self.current_game_mode
        ja = self.current_language == "ja"
        if mode == GameMode.CALCULATION_QUIZ:
            return "いくつですか？" if ja else "How many items in total?"
        if mode == GameMode.PRICE_QUIZ:
            return "いくらですか？" if ja else "How much is it?"
        return shopping_order_text(order, self.products, self.current_language)

    def display_user_selection_text(self) -> str:
        return selection_text(self.user_selection, self.products, self.current_language)

    def current_input(self) -> str:
        field = self._input_field()
        return getattr(self, field) if field else ""
