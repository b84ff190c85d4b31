"""
Omise Modes

Textual views for each game state. Views read from the GameStore and call
its methods; they never change game state themselves.
"""

from .animal_mode import AnimalMode
from .customer_mode import CustomerMode
from .home_mode import HomeMode
from .result_mode import ResultMode
from .shop_mode import ShopMode

__all__ = ["AnimalMode", "CustomerMode", "HomeMode", "ResultMode", "ShopMode"]
