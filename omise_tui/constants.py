"""
Omise - Shared Constants

Central location for constants used across the app.

Demo mode: Set OMISE_FAST_TIMERS=1 to use accelerated timings for testing.
"""

import os


def _get_timing(normal: float, demo: float) -> float:
    """Get timing value - uses demo value if OMISE_FAST_TIMERS is set."""
    if os.environ.get("OMISE_FAST_TIMERS"):
        return demo
    return normal


# =============================================================================
# GAME RULES
# =============================================================================

MAX_MISTAKES = 3              # Round ends on the third wrong answer
MAX_POOPS = 10

# Money the customer can hand over at checkout (yen)
MONEY_VALUES = [10000, 5000, 1000, 500, 100, 50, 10, 5, 1]

# =============================================================================
# TIMING (seconds)
# =============================================================================

TIMER_INTERVAL = _get_timing(1.0, 0.2)       # Countdown tick
FEEDBACK_DELAY = _get_timing(1.0, 0.1)       # Correct/incorrect overlay
TAP_HIGHLIGHT_DELAY = _get_timing(0.2, 0.05) # Product tap flash
CARE_ANIMATION_DELAY = _get_timing(3.0, 0.2) # Eating/playing puppy
CLEAN_ANIMATION_DELAY = _get_timing(2.0, 0.2)
DAYTIME_CHECK_INTERVAL = _get_timing(60.0, 1.0)

# Puppy care
PUPPY_MISSING_AFTER = 60 * 60 * 24 * 3   # 3 days without any interaction
POOP_INTERVAL = 30 * 60                  # One poop every 30 minutes (well fed)
DAYTIME_HOURS = range(6, 19)             # 6:00 - 18:59 is daytime

# =============================================================================
# ICONS
# =============================================================================

# Nerd Font icons (https://www.nerdfonts.com/cheat-sheet)
ICON_CART = "󰄐"             # nf-md-cart
ICON_CALCULATOR = "󰃬"       # nf-md-calculator
ICON_YEN = "󰆲"              # nf-md-currency_jpy
ICON_EAR = "󰋋"              # nf-md-headphones
ICON_STORE = "󰓜"            # nf-md-store
ICON_DOG = "󰩃"              # nf-md-dog
ICON_TROPHY = "󰔸"           # nf-md-trophy
ICON_HEART = "󰋑"            # nf-md-heart
ICON_TIMER = "󱎫"            # nf-md-timer_outline
ICON_MOON = "󰖙"             # nf-md-weather_night
ICON_SUN = "󰖨"              # nf-md-weather_sunny

# Screen titles with icons, per language
SCREEN_TITLES = {
    "initial": (ICON_STORE, {"ja": "おみせやさん", "en": "Let's Play Shop"}),
    "shop": (ICON_STORE, {"ja": "おみせやさんモード", "en": "Shop Keeper"}),
    "customer": (ICON_CART, {"ja": "おきゃくさんモード", "en": "Customer"}),
    "animal": (ICON_DOG, {"ja": "どうぶつのおへや", "en": "Puppy Room"}),
    "result": (ICON_TROPHY, {"ja": "けっか", "en": "Result"}),
}

LANGUAGES = ("ja", "en")
