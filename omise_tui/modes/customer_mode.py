"""
Customer Mode - the kid goes shopping

Follow the shopping list: put the right things in the cart, go to the
register and pay exactly the total with coins and bills.

Shopping: 1-6 add to cart, Shift+1-6 put one back, Backspace takes the last
thing out, Enter goes to the register.
Register: 1-9 hand over money, Backspace takes it all back, Enter pays,
Escape goes back to the shelves.
"""

from typing import Optional

from textual.app import ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import Static

from ..constants import MONEY_VALUES

# Shift+1 to Shift+6 on a US keyboard
SHIFTED_DIGITS = "!@#$%^"


def shelf_index(character) -> Optional[tuple[int, bool]]:
    """(shelf position, remove) for a number key, or None. Shifted numbers remove."""
    if not character:
        return None
    if character in "123456":
        return int(character) - 1, False
    if character in SHIFTED_DIGITS:
        return SHIFTED_DIGITS.index(character), True
    return None


HINTS = {
    "shopping": {
        "ja": "1-6: カートへ   Shift+1-6: ひとつ もどす   ←: さいごを もどす   Enter: レジにすすむ   Esc: おわる",
        "en": "1-6: add to cart   Shift+1-6: put one back   Backspace: put last back   Enter: checkout   Esc: quit",
    },
    "checkout": {
        "ja": "1-9: おかねを だす   ←: ぜんぶもどす   Enter: これで払う   Esc: おみせに もどる",
        "en": "1-9: add money   Backspace: reset all   Enter: pay now   Esc: back to shelves",
    },
}


class ListPanel(Static):
    """A titled list (shopping list or cart)"""

    DEFAULT_CSS = """
    ListPanel {
        width: 1fr;
        height: auto;
        min-height: 6;
        padding: 0 1;
        border: round $primary;
    }
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.title_text = ""
        self.lines: list[str] = []

    def render(self) -> str:
        return "\n".join([f"[bold]{self.title_text}[/]", *self.lines])


class CustomerShelf(Static):
    """Products for sale with key numbers"""

    DEFAULT_CSS = """
    CustomerShelf {
        width: 100%;
        height: auto;
        padding: 0 1;
        text-align: center;
    }
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.text = ""

    def render(self) -> str:
        return self.text


class MoneyTray(Static):
    """Coins and bills for paying, numbered 1-9"""

    DEFAULT_CSS = """
    MoneyTray {
        width: 100%;
        height: auto;
        padding: 1 2;
        border: round $accent;
        text-align: center;
    }
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.language = "ja"
        self.total = 0
        self.paid = 0

    def render(self) -> str:
        ja = self.language == "ja"
        coins = []
        for i, value in enumerate(MONEY_VALUES):
            label = f"{value}円" if ja else f"¥{value}"
            coins.append(f"[bold]{i + 1}[/] {label}")
        rows = ["   ".join(coins[:3]), "   ".join(coins[3:6]), "   ".join(coins[6:])]
        return "\n".join([
            f"{'合計金額' if ja else 'Total Amount'}: ¥{self.total}",
            f"{'支払う金額' if ja else 'Paying Amount'}: [bold]¥{self.paid}[/]",
            "",
            *rows,
        ])


class CustomerHint(Static):

    DEFAULT_CSS = """
    CustomerHint {
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


class CustomerMode(Container):
    """Shopping list, cart and register."""

    DEFAULT_CSS = """
    CustomerMode {
        width: 100%;
        height: 100%;
    }

    #customer-lists {
        width: 100%;
        height: auto;
    }

    #customer-score {
        width: 100%;
        height: 1;
        color: $primary;
    }
    """

    SHELF_SIZE = 6

    def compose(self) -> ComposeResult:
        with Vertical():
            yield Static("", id="customer-score")
            with Horizontal(id="customer-lists"):
                yield ListPanel(id="shopping-list")
                yield ListPanel(id="cart")
            yield CustomerShelf(id="customer-shelf")
            yield MoneyTray(id="money-tray")
            yield CustomerHint(id="customer-hint")

    def _item_lines(self, items, store) -> list[str]:
        language = store.current_language
        lines = []
        for item in items:
            product = store.get_product(item.product_key)
            if product is None:
                continue
            name = product.localized_name(language)
            lines.append(f"{product.emoji} {name} x{item.quantity}  ¥{product.price * item.quantity}")
        return lines

    def update_from(self, store) -> None:
        ja = store.current_language == "ja"
        self.query_one("#customer-score", Static).update(f"★ {store.current_score}")

        shopping_list = self.query_one("#shopping-list", ListPanel)
        shopping_list.title_text = "かいものリスト" if ja else "Shopping List"
        shopping_list.lines = self._item_lines(store.current_shopping_list or [], store)
        shopping_list.refresh()

        cart = self.query_one("#cart", ListPanel)
        cart.title_text = "カート" if ja else "Cart"
        if store.customer_cart:
            cart.lines = self._item_lines(store.customer_cart, store)
            cart.lines.append(f"{'ごうけい' if ja else 'Total'}: ¥{store.cart_total()}")
        else:
            cart.lines = ["(からっぽ)" if ja else "(empty)"]
        cart.refresh()

        shelf = self.query_one("#customer-shelf", CustomerShelf)
        shelf.text = "   ".join(
            f"[bold]{i + 1}[/] {p.emoji} {p.localized_name(store.current_language)} ¥{p.price}"
            for i, p in enumerate(store.products[:self.SHELF_SIZE])
        )
        shelf.display = not store.at_checkout
        shelf.refresh()

        tray = self.query_one("#money-tray", MoneyTray)
        tray.language = store.current_language
        tray.total = store.cart_total()
        tray.paid = store.payment_amount
        tray.display = store.at_checkout
        tray.refresh()

        hint = self.query_one("#customer-hint", CustomerHint)
        hint.text = HINTS["checkout" if store.at_checkout else "shopping"][store.current_language]
        hint.refresh()

    def handle_key(self, key: str, character, store) -> bool:
        if store.at_checkout:
            return self._handle_checkout_key(key, character, store)
        if key == "escape":
            store.return_to_mode_selection()
        elif key == "enter":
            store.go_to_checkout()
        elif key == "backspace":
            if store.customer_cart:
                store.remove_from_customer_cart(store.customer_cart[-1].product_key)
        elif (picked := shelf_index(character)) is not None:
            index, remove = picked
            if index < len(store.products[:self.SHELF_SIZE]):
                key = store.products[index].key
                if remove:
                    store.remove_from_customer_cart(key)
                else:
                    store.add_to_customer_cart(key)
        else:
            return False
        return True

    def _handle_checkout_key(self, key: str, character, store) -> bool:
        if key == "escape":
            store.back_to_shopping()
        elif key == "enter":
            if store.payment_amount > 0:
                store.confirm_payment()
        elif key == "backspace":
            store.reset_payment()
        elif character and character.isdigit() and character != "0":
            store.add_payment(MONEY_VALUES[int(character) - 1])
        else:
            return False
        return True
