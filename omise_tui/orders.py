"""
Orders: generation, answer checking and order text

Pure functions over the catalog. Randomness comes from an injected
random.Random so rounds are reproducible in tests.

Difficulty tiers follow the current score:

    Shopping             Price quiz
    score 0-1  1 x 1     score 0-2   2 items x 1
    score 2-4  2 x 2     score 3-5   2 items x 1-2
    score 5-7  3 x 2     score 6-8   3 items x 1-2
    score 8+   3 x 3     score 9+    change quiz, 2-3 items x 1-2

(types x max quantity)
"""

import logging
import math
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .catalog import Product, find_product

logger = logging.getLogger(__name__)


# Sentinel item keys. They ride along in Order.items but are never products.
TOTAL_QUANTITY_ANSWER = "total_quantity_answer"
PRICE_ANSWER = "price_answer"
PAYMENT_AMOUNT = "payment_amount"
CHANGE_ANSWER = "change_answer"

SENTINEL_KEYS = frozenset({TOTAL_QUANTITY_ANSWER, PRICE_ANSWER, PAYMENT_AMOUNT, CHANGE_ANSWER})

# English names that read the same in plural
UNCOUNTABLE_NAMES = {"Gyoza", "Curry Rice"}

CHANGE_QUIZ_SCORE = 9


class GameMode(Enum):
    SHOPPING = "shopping"
    CALCULATION_QUIZ = "calculationQuiz"
    PRICE_QUIZ = "priceQuiz"
    LISTENING_QUIZ = "listeningQuiz"


MODE_NAMES = {
    GameMode.SHOPPING: {"ja": "おかいもの", "en": "Shopping"},
    GameMode.CALCULATION_QUIZ: {"ja": "けいさん", "en": "Calculation"},
    GameMode.PRICE_QUIZ: {"ja": "おかねクイズ", "en": "Price Quiz"},
    GameMode.LISTENING_QUIZ: {"ja": "リスニング", "en": "Listening Quiz"},
}


def mode_display_name(mode: GameMode, language: str) -> str:
    return MODE_NAMES[mode]["ja" if language == "ja" else "en"]


class TimeLimitOption(Enum):
    SHORT = 30
    MEDIUM = 60
    LONG = 90

    @property
    def seconds(self) -> int:
        return self.value

    def display_name(self, language: str = "ja") -> str:
        if language == "ja":
            return f"{self.value}秒"
        return f"{self.value}s"


@dataclass
class OrderItem:
    product_key: str
    quantity: int


@dataclass
class Order:
    items: list[OrderItem] = field(default_factory=list)

    def display_items(self) -> list[OrderItem]:
        """Items a customer actually asks for (sentinels removed)."""
        return [item for item in self.items if item.product_key not in SENTINEL_KEYS]

    def sentinel(self, key: str) -> Optional[int]:
        for item in self.items:
            if item.product_key == key:
                return item.quantity
        return None

    def as_selection(self) -> dict[str, int]:
        """The {product_key: quantity} map a correct shopping answer must equal."""
        selection: dict[str, int] = {}
        for item in self.display_items():
            selection[item.product_key] = item.quantity
        return selection


# =============================================================================
# DIFFICULTY
# =============================================================================

def shopping_limits(score: int, product_count: int) -> tuple[int, int]:
    """(max item types, max quantity per item) for a shopping order."""
    if score < 2:
        return min(1, product_count), 1
    if score < 5:
        return min(2, product_count), 2
    if score < 8:
        return min(3, product_count), 2
    return min(3, product_count), 3


def price_quiz_limits(score: int, rng: random.Random) -> tuple[int, int, bool]:
    """(number of items, max quantity, is change quiz) for a price quiz."""
    if score >= CHANGE_QUIZ_SCORE:
        return rng.randint(2, 3), 2, True
    if score >= 6:
        return 3, 2, False
    if score >= 3:
        return 2, 2, False
    return 2, 1, False


# =============================================================================
# GENERATORS
# =============================================================================

def generate_shopping_order(products: list[Product], score: int, rng: random.Random) -> Order:
    max_types, max_quantity = shopping_limits(score, len(products))
    if max_types < 1:
        return Order()
    count = rng.randint(1, max_types)
    chosen = rng.sample(products, count)
    return Order([OrderItem(p.key, rng.randint(1, max_quantity)) for p in chosen])


def generate_calculation_order(products: list[Product], rng: random.Random) -> Optional[Order]:
    """Two products and the total count. None if the shop has fewer than 2 products."""
    if len(products) < 2:
        return None
    first, second = rng.sample(products, 2)
    q1 = rng.randint(1, 3)
    q2 = rng.randint(1, 3)
    return Order([
        OrderItem(first.key, q1),
        OrderItem(second.key, q2),
        OrderItem(TOTAL_QUANTITY_ANSWER, q1 + q2),
    ])


def round_payment(total: int) -> int:
    """A tidy amount a customer would hand over for this total. Always > total."""
    if total < 100:
        payment = 100
    elif total < 500:
        payment = math.ceil(total / 100) * 100
    else:
        payment = max(math.ceil(total / 500) * 500, math.ceil(total / 100) * 100)
    if payment <= total:
        payment += 100 if payment < 500 else 500
    return payment


def generate_price_order(products: list[Product], score: int, rng: random.Random) -> Optional[Order]:
    """Total-price quiz, or a change quiz from CHANGE_QUIZ_SCORE on.

    None if the shop has too few products for this difficulty.
    """
    num_items, max_quantity, is_change = price_quiz_limits(score, rng)
    if len(products) < num_items:
        return None

    items = []
    total = 0
    for product in rng.sample(products, num_items):
        quantity = rng.randint(1, max_quantity)
        items.append(OrderItem(product.key, quantity))
        total += product.price * quantity

    if is_change:
        payment = round_payment(total)
        items.append(OrderItem(PAYMENT_AMOUNT, payment))
        items.append(OrderItem(CHANGE_ANSWER, payment - total))
    else:
        items.append(OrderItem(PRICE_ANSWER, total))
    return Order(items)


def generate_shopping_list(products: list[Product], rng: random.Random) -> list[OrderItem]:
    """Customer mode mission: two different products, one or two of each."""
    if len(products) < 2:
        logger.info("Not enough products to generate a shopping list")
        return []
    first, second = rng.sample(products, 2)
    return [OrderItem(first.key, rng.randint(1, 2)), OrderItem(second.key, rng.randint(1, 2))]


# =============================================================================
# ANSWER CHECKING
# =============================================================================

def items_total(items: list[OrderItem], products: list[Product]) -> int:
    """Sum of price x quantity. Unknown keys are skipped with a warning."""
    total = 0
    for item in items:
        product = find_product(products, item.product_key)
        if product is None:
            logger.warning("Product not found for key %s", item.product_key)
            continue
        total += product.price * item.quantity
    return total


def parse_answer(text: str) -> Optional[int]:
    try:
        return int(text.strip())
    except ValueError:
        return None


def check_shopping(order: Order, selection: dict[str, int]) -> bool:
    """Order-independent: the picked counts must equal the requested counts."""
    picked = {key: qty for key, qty in selection.items() if qty > 0}
    return picked == order.as_selection()


def check_calculation(order: Order, answer_text: str) -> bool:
    answer = parse_answer(answer_text)
    expected = order.sentinel(TOTAL_QUANTITY_ANSWER)
    return answer is not None and expected is not None and answer == expected


def expected_price_answer(order: Order, products: list[Product]) -> int:
    """Change for a change quiz, otherwise the total price."""
    change = order.sentinel(CHANGE_ANSWER)
    if change is not None:
        return change
    total = order.sentinel(PRICE_ANSWER)
    if total is not None:
        return total
    return items_total(order.display_items(), products)


def check_price(order: Order, products: list[Product], answer_text: str) -> bool:
    answer = parse_answer(answer_text)
    return answer is not None and answer == expected_price_answer(order, products)


def carts_match(cart: list[OrderItem], shopping_list: list[OrderItem]) -> bool:
    def counts(items):
        result: dict[str, int] = {}
        for item in items:
            result[item.product_key] = result.get(item.product_key, 0) + item.quantity
        return result
    return counts(cart) == counts(shopping_list)


# =============================================================================
# TEXT
# =============================================================================

def english_quantity_name(name: str, quantity: int, say_one: bool = True) -> str:
    """'one Apple', '2 Apples', '3 Gyoza'."""
    if quantity == 1:
        return f"one {name}" if say_one else f"1 {name}"
    if name in UNCOUNTABLE_NAMES or name.endswith("s"):
        return f"{quantity} {name}"
    return f"{quantity} {name}s"


def join_english(parts: list[str]) -> str:
    if not parts:
        return "something"
    if len(parts) == 1:
        return parts[0]
    return f"{', '.join(parts[:-1])} and {parts[-1]}"


def _known_items(order: Order, products: list[Product]) -> list[tuple[Product, int]]:
    pairs = []
    for item in order.display_items():
        product = find_product(products, item.product_key)
        if product is not None:
            pairs.append((product, item.quantity))
    return pairs


def shopping_order_text(order: Order, products: list[Product], language: str) -> str:
    pairs = _known_items(order, products)
    if not pairs:
        return "..."
    if language == "ja":
        parts = [f"{p.name_ja} {qty}個" for p, qty in pairs]
        return f"{' と '.join(parts)} ください"
    parts = [english_quantity_name(p.name_en, qty) for p, qty in pairs]
    return f"Can I have {join_english(parts)} please?"


def calculation_order_text(order: Order, products: list[Product], language: str) -> str:
    pairs = _known_items(order, products)
    if language == "ja":
        if not pairs:
            return "ぜんぶで なんこ？"
        parts = [f"{p.name_ja} {qty}こ" for p, qty in pairs]
        return f"{' と '.join(parts)} で ぜんぶで なんこ？"
    if not pairs:
        return "How many in total?"
    parts = [english_quantity_name(p.name_en, qty, say_one=False) for p, qty in pairs]
    return f"How many {' and '.join(parts)} in total?"


def price_order_text(order: Order, products: list[Product], language: str) -> str:
    pairs = _known_items(order, products)
    if not pairs:
        return "..."
    if language == "ja":
        joined = " と ".join(f"{p.name_ja}(¥{p.price}) {qty}個" for p, qty in pairs)
    else:
        joined = " and ".join(f"{qty} {p.name_en}(¥{p.price})" for p, qty in pairs)

    payment = order.sentinel(PAYMENT_AMOUNT)
    if payment is not None:
        if language == "ja":
            return f"{joined} で {payment}円 はらったら おつりは いくら？"
        return f"You bought {joined}. If you pay ¥{payment}, how much change?"
    if language == "ja":
        return f"{joined} で おかね は いくら？"
    return f"How much is {joined} in total?"


def selection_text(selection: dict[str, int], products: list[Product], language: str) -> str:
    picked = {key: qty for key, qty in selection.items() if qty > 0}
    if not picked:
        return "(まだ選んでいません)" if language == "ja" else "(Nothing selected yet)"
    parts = []
    for key in sorted(picked):
        product = find_product(products, key)
        if product is None:
            continue
        quantity = picked[key]
        if language == "ja":
            parts.append(f"{product.name_ja} {quantity}つ")
        else:
            parts.append(f"{quantity} {product.name_en}{'s' if quantity > 1 else ''}")
    return ", ".join(parts)


def listening_prompt(language: str) -> str:
    return "よく聞いてね！" if language == "ja" else "Listen carefully!"
