"""
Product catalog for Omise

Static shop and product tables. Every shop sells six products with a
Japanese name, an English name and a price in yen.

Images are shown as emoji in the terminal; image_name is kept so sound
and picture packs can map a product to an asset file.
"""

import random
from dataclasses import dataclass
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class Product:
    key: str
    name_ja: str
    name_en: str
    image_name: str
    color_key: str
    price: int
    emoji: str = ""

    def localized_name(self, language: str) -> str:
        return self.name_ja if language == "ja" else self.name_en


class ShopType(Enum):
    """The four shops a kid can run"""
    FRUIT_STAND = "fruit_stand"
    BAKERY = "bakery"
    CAKE_SHOP = "cake_shop"
    RESTAURANT = "restaurant"

    @property
    def name_ja(self) -> str:
        return SHOP_INFO[self]["ja"]

    @property
    def name_en(self) -> str:
        return SHOP_INFO[self]["en"]

    @property
    def image_name(self) -> str:
        return SHOP_INFO[self]["icon"]

    @property
    def emoji(self) -> str:
        return SHOP_INFO[self]["emoji"]

    def localized_name(self, language: str) -> str:
        return self.name_ja if language == "ja" else self.name_en


SHOP_INFO = {
    ShopType.FRUIT_STAND: {"ja": "くだものや", "en": "Fruit Stand", "icon": "shop_icon_fruit", "emoji": "🍎"},
    ShopType.BAKERY: {"ja": "パンや", "en": "Bakery", "icon": "shop_icon_bakery", "emoji": "🍞"},
    ShopType.CAKE_SHOP: {"ja": "ケーキや", "en": "Cake Shop", "icon": "shop_icon_cake", "emoji": "🍰"},
    ShopType.RESTAURANT: {"ja": "レストラン", "en": "Restaurant", "icon": "shop_icon_restaurant", "emoji": "🍽️"},
}


FRUIT_PRODUCTS = [
    Product("apple", "りんご", "Apple", "apple", "red", 100, "🍎"),
    Product("banana", "バナナ", "Banana", "banana", "yellow", 150, "🍌"),
    Product("orange", "オレンジ", "Orange", "orange", "orange", 120, "🍊"),
    Product("grape", "ぶどう", "Grape", "grape", "purple", 300, "🍇"),
    Product("peach", "もも", "Peach", "peach", "pink", 500, "🍑"),
    Product("strawberry", "いちご", "Strawberry", "strawberry", "red", 250, "🍓"),
]

BAKERY_PRODUCTS = [
    Product("bread", "しょくパン", "White Bread", "bread", "white", 200, "🍞"),
    Product("melonpan", "メロンパン", "Melon Bread", "melonpan", "green", 180, "🍈"),
    Product("currypan", "カレーパン", "Curry Bread", "currypan", "brown", 220, "🥟"),
    Product("croissant", "クロワッサン", "Croissant", "croissant", "brown", 150, "🥐"),
    Product("sandwich", "サンドイッチ", "Sandwich", "sandwich", "white", 350, "🥪"),
    Product("donut", "ドーナツ", "Donut", "donut", "brown", 160, "🍩"),
]

CAKE_PRODUCTS = [
    Product("shortcake", "ショートケーキ", "Shortcake", "shortcake", "white", 450, "🍰"),
    Product("chocolatecake", "チョコケーキ", "Chocolate Cake", "chocolate_cake", "brown", 480, "🎂"),
    Product("cheesecake", "チーズケーキ", "Cheesecake", "cheesecake", "yellow", 420, "🧀"),
    Product("montblanc", "モンブラン", "Mont Blanc", "mont_blanc", "brown", 500, "🌰"),
    Product("roll_cake", "ロールケーキ", "Roll Cake", "roll_cake", "white", 380, "🍥"),
    Product("tart", "タルト", "Tart", "tart", "yellow", 300, "🥧"),
]

RESTAURANT_PRODUCTS = [
    Product("hamburg_steak", "ハンバーグ", "Hamburg Steak", "hamburg_steak", "brown", 850, "🥩"),
    Product("gyoza", "ギョーザ", "Gyoza", "gyoza", "white", 450, "🥟"),
    Product("hamburger", "ハンバーガー", "Hamburger", "hamburger", "brown", 600, "🍔"),
    Product("curry", "カレーライス", "Curry Rice", "curry", "brown", 700, "🍛"),
    Product("beer", "ビール", "Beer", "beer", "yellow", 550, "🍺"),
    Product("wine", "ワイン", "Wine", "wine", "red", 650, "🍷"),
]

SHOP_PRODUCTS = {
    ShopType.FRUIT_STAND: FRUIT_PRODUCTS,
    ShopType.BAKERY: BAKERY_PRODUCTS,
    ShopType.CAKE_SHOP: CAKE_PRODUCTS,
    ShopType.RESTAURANT: RESTAURANT_PRODUCTS,
}


def load_products(shop_type: ShopType, rng: Optional[random.Random] = None) -> list[Product]:
    """Products for a shop, shuffled so the shelf order changes every game."""
    products = list(SHOP_PRODUCTS[shop_type])
    (rng or random).shuffle(products)
    return products


def find_product(products: list[Product], key: str) -> Optional[Product]:
    """Look up a product by key. Returns None if the shop doesn't sell it."""
    for product in products:
        if product.key == key:
            return product
    return None
