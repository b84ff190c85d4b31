#!/usr/bin/env python3
"""Tests for the product catalog.

Run with: pytest tests/test_catalog.py -v
"""

import random
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

import pytest
from omise_tui.catalog import (
    SHOP_PRODUCTS, ShopType, find_product, load_products,
)


class TestShopTables:
    """Every shop has a full shelf of sellable products."""

    @pytest.mark.parametrize("shop", list(ShopType))
    def test_six_products_per_shop(self, shop):
        assert len(SHOP_PRODUCTS[shop]) == 6

    @pytest.mark.parametrize("shop", list(ShopType))
    def test_keys_unique_within_shop(self, shop):
        keys = [p.key for p in SHOP_PRODUCTS[shop]]
        assert len(keys) == len(set(keys))

    @pytest.mark.parametrize("shop", list(ShopType))
    def test_prices_positive(self, shop):
        assert all(p.price > 0 for p in SHOP_PRODUCTS[shop])

    def test_known_prices(self):
        fruit = SHOP_PRODUCTS[ShopType.FRUIT_STAND]
        assert find_product(fruit, "apple").price == 100
        assert find_product(fruit, "peach").price == 500
        restaurant = SHOP_PRODUCTS[ShopType.RESTAURANT]
        assert find_product(restaurant, "hamburg_steak").price == 850

    def test_shop_names(self):
        assert ShopType.BAKERY.localized_name("ja") == "パンや"
        assert ShopType.BAKERY.localized_name("en") == "Bakery"
        assert ShopType.CAKE_SHOP.emoji == "🍰"


class TestProduct:

    def test_localized_name(self):
        apple = find_product(SHOP_PRODUCTS[ShopType.FRUIT_STAND], "apple")
        assert apple.localized_name("ja") == "りんご"
        assert apple.localized_name("en") == "Apple"

    def test_products_are_immutable(self):
        apple = find_product(SHOP_PRODUCTS[ShopType.FRUIT_STAND], "apple")
        with pytest.raises(AttributeError):
            apple.price = 1


class TestLoadProducts:

    def test_returns_same_products_shuffled(self):
        products = load_products(ShopType.FRUIT_STAND, random.Random(3))
        assert sorted(p.key for p in products) == sorted(p.key for p in SHOP_PRODUCTS[ShopType.FRUIT_STAND])

    def test_does_not_shuffle_the_table(self):
        before = list(SHOP_PRODUCTS[ShopType.BAKERY])
        load_products(ShopType.BAKERY, random.Random(1))
        assert SHOP_PRODUCTS[ShopType.BAKERY] == before

    def test_seeded_rng_is_reproducible(self):
        a = load_products(ShopType.CAKE_SHOP, random.Random(42))
        b = load_products(ShopType.CAKE_SHOP, random.Random(42))
        assert a == b


class TestFindProduct:

    def test_unknown_key_is_none(self):
        assert find_product(SHOP_PRODUCTS[ShopType.FRUIT_STAND], "bread") is None

    def test_empty_list(self):
        assert find_product([], "apple") is None
