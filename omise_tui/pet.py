"""
Puppy Room - care state for the virtual puppy

Hunger and happiness run from 0 to 100 and drop over time. Feeding,
playing, petting and cleaning bring them back up. Poops pile up while
nobody cleans. If nobody visits for three days the puppy wanders off
until the kid comes back and adopts again.

All methods take an optional `now` so tests can control time.
"""

import logging
from datetime import datetime
from typing import Optional

from .constants import DAYTIME_HOURS, MAX_POOPS, POOP_INTERVAL, PUPPY_MISSING_AFTER
from .scores import ScoreStore

logger = logging.getLogger(__name__)

# Storage keys
PUPPY_NAME_KEY = "puppyName"
PUPPY_ADOPTION_KEY = "puppyAdoptionDate"
PUPPY_INTERACTION_KEY = "lastInteractionDate"
PUPPY_STATUS_KEY = "puppyStatus"

DEFAULT_NAME = "まだ名前がありません"

# Decay per hour since the last status update
HUNGER_DECAY_PER_HOUR = 5
HAPPINESS_DECAY_PER_HOUR = 10


def _clamp(value: float) -> float:
    return max(0.0, min(100.0, value))


class Puppy:
    """The puppy and everything that happens to it."""

    def __init__(self, store: Optional[ScoreStore] = None, now: Optional[datetime] = None):
        now = now or datetime.now()
        self.store = store
        self.name = DEFAULT_NAME
        self.hunger = 80.0
        self.happiness = 80.0
        self.poop_count = 0
        self.adoption_date = now
        self.last_care_time = now
        self.last_status_update = now
        self.last_poop_time = now
        self.last_interaction = now
        self.is_missing = False

        # Animation flags, cleared by the UI after a short delay
        self.show_eating = False
        self.show_playing = False
        self.show_petting = False
        self.show_cleaning = False

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def load(self, now: Optional[datetime] = None) -> None:
        """Restore saved puppy info, then check whether it wandered off."""
        now = now or datetime.now()
        if self.store is None:
            return

        name = self.store.get(PUPPY_NAME_KEY)
        if isinstance(name, str) and name:
            self.name = name

        adopted = self.store.get_datetime(PUPPY_ADOPTION_KEY)
        if adopted is None:
            self.save_adoption_date(now)
        else:
            self.adoption_date = adopted

        interaction = self.store.get_datetime(PUPPY_INTERACTION_KEY)
        if interaction is None:
            self._save_interaction(now)
        else:
            self.last_interaction = interaction

        status = self.store.get(PUPPY_STATUS_KEY)
        if isinstance(status, dict):
            try:
                self.hunger = _clamp(float(status["hunger"]))
                self.happiness = _clamp(float(status["happiness"]))
                self.poop_count = min(int(status["poops"]), MAX_POOPS)
                self.last_care_time = datetime.fromisoformat(status["last_care"])
                self.last_status_update = datetime.fromisoformat(status["last_update"])
                self.last_poop_time = datetime.fromisoformat(status["last_poop"])
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Malformed puppy status, using defaults: %s", e)

        self.check_missing(now)

    def save_status(self) -> None:
        if self.store is None:
            return
        self.store.set(PUPPY_STATUS_KEY, {
            "hunger": self.hunger,
            "happiness": self.happiness,
            "poops": self.poop_count,
            "last_care": self.last_care_time.isoformat(),
            "last_update": self.last_status_update.isoformat(),
            "last_poop": self.last_poop_time.isoformat(),
        })

    def save_name(self, name: str, now: Optional[datetime] = None) -> None:
        self.name = name
        if self.store is not None:
            self.store.set(PUPPY_NAME_KEY, name)
        self.update_last_interaction(now)

    def save_adoption_date(self, when: datetime) -> None:
        self.adoption_date = when
        if self.store is not None:
            self.store.set_datetime(PUPPY_ADOPTION_KEY, when)

    def _save_interaction(self, when: datetime) -> None:
        self.last_interaction = when
        if self.store is not None:
            self.store.set_datetime(PUPPY_INTERACTION_KEY, when)

    # -------------------------------------------------------------------------
    # Care actions
    # -------------------------------------------------------------------------

    def feed(self, now: Optional[datetime] = None) -> None:
        now = now or datetime.now()
        self.hunger = min(self.hunger + 20, 100)
        self.happiness = min(self.happiness + 10, 100)
        self.last_care_time = now
        self.show_eating = True
        self.update_last_interaction(now)
        self.save_status()

    def play(self, now: Optional[datetime] = None) -> None:
        now = now or datetime.now()
        self.happiness = min(self.happiness + 25, 100)
        self.hunger = max(self.hunger - 5, 0)
        self.last_care_time = now
        self.show_playing = True
        self.update_last_interaction(now)
        self.save_status()

    def pet(self, now: Optional[datetime] = None) -> None:
        self.happiness = min(self.happiness + 5, 100)
        self.show_petting = True
        self.update_last_interaction(now)
        self.save_status()

    def clean(self, now: Optional[datetime] = None) -> bool:
        """Clean up poops. Returns False if there was nothing to clean."""
        if self.poop_count <= 0:
            return False
        now = now or datetime.now()
        self.poop_count = 0
        self.last_poop_time = now
        self.show_cleaning = True
        self.happiness = min(self.happiness + 5, 100)
        self.update_last_interaction(now)
        self.save_status()
        return True

    def clear_animations(self) -> None:
        self.show_eating = False
        self.show_playing = False
        self.show_petting = False
        self.show_cleaning = False

    # -------------------------------------------------------------------------
    # Time passing
    # -------------------------------------------------------------------------

    def update_status(self, now: Optional[datetime] = None) -> None:
        """Apply hunger/happiness decay and new poops since the last update."""
        now = now or datetime.now()
        since = max(self.last_care_time, self.last_status_update)
        hours = max((now - since).total_seconds(), 0) / 3600

        self.hunger = max(self.hunger - min(hours * HUNGER_DECAY_PER_HOUR, self.hunger), 0)
        self.happiness = max(self.happiness - min(hours * HAPPINESS_DECAY_PER_HOUR, self.happiness), 0)
        self.last_status_update = now

        self.calculate_poops(now)
        self.save_status()

    def calculate_poops(self, now: Optional[datetime] = None) -> int:
        """Add poops for time passed. A hungry puppy poops more often."""
        now = now or datetime.now()
        elapsed = (now - self.last_poop_time).total_seconds()
        hunger_factor = max(1.0, 2.0 - self.hunger / 100.0)
        new_poops = int(elapsed / (POOP_INTERVAL / hunger_factor))
        if new_poops > 0:
            self.poop_count = min(self.poop_count + new_poops, MAX_POOPS)
            self.last_poop_time = now
        return new_poops

    def update_last_interaction(self, now: Optional[datetime] = None) -> None:
        self._save_interaction(now or datetime.now())
        self.is_missing = False

    def check_missing(self, now: Optional[datetime] = None) -> bool:
        now = now or datetime.now()
        if (now - self.last_interaction).total_seconds() > PUPPY_MISSING_AFTER:
            if not self.is_missing:
                logger.info("Puppy wandered off (last visit %s)", self.last_interaction)
            self.is_missing = True
        return self.is_missing

    def reset_adoption(self, now: Optional[datetime] = None) -> None:
        now = now or datetime.now()
        self.save_adoption_date(now)
        self.update_last_interaction(now)
        self.hunger = 100.0
        self.happiness = 100.0
        self.poop_count = 0
        self.last_care_time = now
        self.last_status_update = now
        self.last_poop_time = now
        self.save_status()

    # -------------------------------------------------------------------------
    # Derived
    # -------------------------------------------------------------------------

    def days_with_you(self, now: Optional[datetime] = None) -> int:
        now = now or datetime.now()
        return max((now - self.adoption_date).days, 0)

    def mood(self) -> str:
        if self.hunger < 20:
            return "hungry"
        if self.happiness < 20 or self.poop_count >= 3:
            return "sad"
        return "happy"


def is_daytime(now: Optional[datetime] = None) -> bool:
    return (now or datetime.now()).hour in DAYTIME_HOURS
