"""
Omise - Let's Play Shop

A Textual TUI game for kids providing:
- Shop Keeper: fill orders, count items, add up prices
- Customer: follow a shopping list and pay at the register
- Puppy Room: feed, play with and look after a puppy

Japanese and English. Keyboard-only.
"""

__version__ = "1.0.0"
