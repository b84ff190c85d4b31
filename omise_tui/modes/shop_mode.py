"""
Shop Mode - the kid runs the shop

A customer asks for something. Depending on the game:
- Shopping / Listening: press 1-6 to put products on the counter, Enter to hand them over
- Calculation: count everything, type the number, Enter
- Price quiz: add up the prices (or work out the change), type it, Enter

Backspace fixes mistakes, Escape leaves the shop.
"""

from textual.app import ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import Static

from ..constants import ICON_HEART, ICON_TIMER, MAX_MISTAKES
from ..orders import GameMode

NUMBER_MODES = (GameMode.CALCULATION_QUIZ, GameMode.PRICE_QUIZ)

HINTS = {
    "pick": {
        "ja": "1-6: えらぶ   Enter: わたす   ←: やりなおし   Esc: おわる",
        "en": "1-6: pick   Enter: hand over   Backspace: start over   Esc: quit",
    },
    "listen": {
        "ja": "1-6: えらぶ   Enter: わたす   F2: もういちど   Esc: おわる",
        "en": "1-6: pick   Enter: hand over   F2: hear again   Esc: quit",
    },
    "number": {
        "ja": "0-9: こたえ   Enter: こたえる   ←: けす   Esc: おわる",
        "en": "0-9: answer   Enter: submit   Backspace: delete   Esc: quit",
    },
}


class StatusBar(Static):
    """Time left, score and remaining hearts"""

    DEFAULT_CSS = """
    StatusBar {
        width: 100%;
        height: 1;
        color: $primary;
    }

    StatusBar.hurry {
        color: $warning;
        text-style: bold;
    }
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.remaining = 0
        self.score = 0
        self.mistakes = 0

    def render(self) -> str:
        hearts = "♥" * (MAX_MISTAKES - self.mistakes) + "♡" * self.mistakes
        return f"{ICON_TIMER} {self.remaining:>3}    ★ {self.score}    {ICON_HEART} {hearts}"


class CustomerBubble(Static):
    """The customer and what they want"""

    DEFAULT_CSS = """
    CustomerBubble {
        width: 100%;
        height: auto;
        min-height: 3;
        padding: 1 2;
        border: round $accent;
        text-align: center;
    }
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.customer = ""
        self.text = ""

    def render(self) -> str:
        return f"{self.customer}  {self.text}"


class ShelfItem(Static):
    """One product on the shelf with its key number"""

    DEFAULT_CSS = """
    ShelfItem {
        width: 15;
        height: 5;
        content-align: center middle;
        text-align: center;
        border: round $surface-lighten-2;
        margin: 0 0;
    }

    ShelfItem.tapped {
        border: heavy $accent;
        background: $primary;
        color: $background;
    }
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.number = ""
        self.emoji = ""
        self.label = ""
        self.detail = ""

    def render(self) -> str:
        return f"[bold]{self.number}[/] {self.emoji}\n{self.label}\n[dim]{self.detail}[/]"


class AnswerLine(Static):
    """What the kid has picked or typed so far"""

    DEFAULT_CSS = """
    AnswerLine {
        width: 100%;
        height: 3;
        content-align: center middle;
        text-align: center;
        text-style: bold;
        border: round $primary;
    }
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.text = ""

    def render(self) -> str:
        return self.text


class ShopHint(Static):

    DEFAULT_CSS = """
    ShopHint {
        width: 100%;
        height: 1;
        text-align: center;
        color: $text-muted;
    }
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.text = ""

    def render(self) -> str:
        return self.text


class ShopMode(Container):
    """Gameplay screen for a shop keeper round."""

    DEFAULT_CSS = """
    ShopMode {
        width: 100%;
        height: 100%;
    }

    #shop-main {
        width: 100%;
        height: 100%;
    }

    #shelf {
        width: 100%;
        height: auto;
        align: center middle;
        margin: 1 0;
    }
    """

    SHELF_SIZE = 6

    def compose(self) -> ComposeResult:
        with Vertical(id="shop-main"):
            yield StatusBar(id="status-bar")
            yield CustomerBubble(id="customer-bubble")
            with Horizontal(id="shelf"):
                for i in range(self.SHELF_SIZE):
                    yield ShelfItem(id=f"shelf-{i}")
            yield AnswerLine(id="answer-line")
            yield ShopHint(id="shop-hint")

    def update_from(self, store) -> None:
        language = store.current_language
        mode = store.current_game_mode

        status = self.query_one("#status-bar", StatusBar)
        status.remaining = store.remaining_time
        status.score = store.current_score
        status.mistakes = store.mistake_count
        status.set_class(store.remaining_time <= 10, "hurry")
        status.refresh()

        bubble = self.query_one("#customer-bubble", CustomerBubble)
        bubble.customer = store.current_customer
        bubble.text = store.display_order_text()
        bubble.refresh()

        self._update_shelf(store)

        answer = self.query_one("#answer-line", AnswerLine)
        if mode in NUMBER_MODES:
            typed = store.current_input()
            suffix = "円" if mode == GameMode.PRICE_QUIZ and language == "ja" else ""
            prefix = "¥" if mode == GameMode.PRICE_QUIZ and language != "ja" else ""
            answer.text = f"{prefix}{typed or '_'}{suffix}"
        else:
            answer.text = store.display_user_selection_text()
        answer.refresh()

        hint = self.query_one("#shop-hint", ShopHint)
        if mode in NUMBER_MODES:
            hint.text = HINTS["number"][language]
        elif mode == GameMode.LISTENING_QUIZ:
            hint.text = HINTS["listen"][language]
        else:
            hint.text = HINTS["pick"][language]
        hint.refresh()

    def _update_shelf(self, store) -> None:
        """Whole shelf when picking; only the asked-for products in quizzes."""
        language = store.current_language
        mode = store.current_game_mode
        entries = []
        if mode in NUMBER_MODES and store.current_order is not None:
            for item in store.current_order.display_items():
                product = store.get_product(item.product_key)
                if product is None:
                    continue
                detail = f"¥{product.price}" if mode == GameMode.PRICE_QUIZ else ""
                entries.append(("", product.emoji * item.quantity, product.localized_name(language), detail, product.key))
        else:
            for i, product in enumerate(store.products[:self.SHELF_SIZE]):
                count = store.user_selection.get(product.key, 0)
                detail = f"x{count}" if count else ""
                entries.append((str(i + 1), product.emoji, product.localized_name(language), detail, product.key))

        for i in range(self.SHELF_SIZE):
            item = self.query_one(f"#shelf-{i}", ShelfItem)
            if i < len(entries):
                number, emoji, label, detail, key = entries[i]
                item.number, item.emoji, item.label, item.detail = number, emoji, label, detail
                item.set_class(key == store.tapped_product_key, "tapped")
                item.display = True
            else:
                item.display = False
            item.refresh()

    def handle_key(self, key: str, character, store) -> bool:
        mode = store.current_game_mode
        if key == "escape":
            store.return_to_mode_selection()
        elif key == "enter":
            store.submit_user_selection()
        elif mode in NUMBER_MODES:
            if key == "backspace":
                store.delete_digit()
            elif character and character.isdigit():
                store.type_digit(character)
            else:
                return False
        else:
            if key == "backspace":
                store.clear_selection()
            elif key == "f2":
                store.speak_prompt()
            elif character and character.isdigit() and character != "0":
                index = int(character) - 1
                if index < len(store.products[:self.SHELF_SIZE]):
                    store.product_tapped(store.products[index].key)
            else:
                return False
        return True
