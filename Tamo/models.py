import math
from enum import Enum
from dataclasses import dataclass, replace
from typing import Optional

from constants import (
    STAT_MIN, STAT_MAX,
    HUNGER_PER_TICK, HAPPINESS_PER_TICK, ENERGY_PER_TICK, SLEEP_ENERGY_PER_TICK,
    FEED_AMOUNT, PLAY_HAPPINESS, PLAY_ENERGY_COST,
    TIRED_ENERGY, SAD_HAPPINESS, SAD_HUNGER,
)


def clamp(value):
    return max(STAT_MIN, min(STAT_MAX, float(value)))


class Mood(Enum):
    """The pet's emotional/lifecycle state, derived from its stats."""
    HAPPY = "happy"
    SAD = "sad"
    TIRED = "tired"
    SLEEPING = "sleeping"
    GAME_OVER = "gameOver"

    @property
    def label(self):
        return _MOOD_LABELS[self]

    @property
    def emoji(self):
        return _MOOD_EMOJI[self]


_MOOD_LABELS = {
    Mood.HAPPY: "Happy",
    Mood.SAD: "Sad",
    Mood.TIRED: "Tired",
    Mood.SLEEPING: "Sleeping",
    Mood.GAME_OVER: "Game Over",
}

_MOOD_EMOJI = {
    Mood.HAPPY: "\U0001F425",
    Mood.SAD: "\U0001F423",
    Mood.TIRED: "\U0001F95A",
    Mood.SLEEPING: "\U0001F634",
    Mood.GAME_OVER: "\U0001F480",
}


@dataclass(frozen=True)
class PetView:
    """Read-only copy of what the UI needs to draw a frame."""
    hunger: float
    happiness: float
    energy: float
    is_sleeping: bool
    mood: Mood


@dataclass
class PetState:
    """
    The simulated pet. Stats live in [0, 100] and only change through the
    transition methods below. Guarded transitions return False instead of
    raising when they do not apply.
    """
    hunger: float = 0.0      # 0 = Full, 100 = Starving
    happiness: float = 100.0
    energy: float = 100.0
    is_sleeping: bool = False

    @property
    def mood(self) -> Mood:
        # Order matters: a sleeping pet never reads as game over.
        if self.is_sleeping:
            return Mood.SLEEPING
        if self.hunger >= STAT_MAX and self.happiness <= STAT_MIN and self.energy <= STAT_MIN:
            return Mood.GAME_OVER
        if self.energy < TIRED_ENERGY:
            return Mood.TIRED
        if self.happiness < SAD_HAPPINESS or self.hunger > SAD_HUNGER:
            return Mood.SAD
        return Mood.HAPPY

    @property
    def is_game_over(self) -> bool:
        return self.mood is Mood.GAME_OVER

    @property
    def is_rested(self) -> bool:
        return self.energy >= STAT_MAX

    def _can_act(self) -> bool:
        return not self.is_sleeping and not self.is_game_over

    # --- Decay ---

    def _decay_once(self) -> bool:
        if not self._can_act():
            return False
        self.hunger = clamp(self.hunger + HUNGER_PER_TICK)
        self.happiness = clamp(self.happiness - HAPPINESS_PER_TICK)
        self.energy = clamp(self.energy - ENERGY_PER_TICK)
        return True

    def apply_decay(self, ticks: int = 1) -> bool:
        """Apply `ticks` decay ticks one after another.

        Each tick clamps before the next one runs, so a stat stuck at a bound
        stays there while the others keep moving. Returns True if any tick
        applied.
        """
        changed = False
        for _ in range(ticks):
            if not self._decay_once():
                break
            changed = True
        return changed

    # --- Actions ---

    def feed(self) -> bool:
        if not self._can_act():
            return False
        self.hunger = clamp(self.hunger - FEED_AMOUNT)
        return True

    def play(self) -> bool:
        if not self._can_act():
            return False
        self.happiness = clamp(self.happiness + PLAY_HAPPINESS)
        self.energy = clamp(self.energy - PLAY_ENERGY_COST)
        return True

    def sleep_tick(self) -> bool:
        """Restore energy while asleep. Hunger and happiness hold still."""
        if not self.is_sleeping:
            return False
        self.energy = clamp(self.energy + SLEEP_ENERGY_PER_TICK)
        return True

    def set_sleeping(self, sleeping: bool) -> bool:
        if sleeping:
            if self.is_sleeping or self.is_game_over:
                return False
        elif not self.is_sleeping:
            return False
        self.is_sleeping = sleeping
        return True

    # --- Snapshots ---

    def copy(self) -> "PetState":
        return replace(self)

    def view(self) -> PetView:
        return PetView(self.hunger, self.happiness, self.energy, self.is_sleeping, self.mood)

    def to_dict(self):
        return {
            "hunger": float(self.hunger),
            "happiness": float(self.happiness),
            "energy": float(self.energy),
            "isSleeping": bool(self.is_sleeping),
        }

    @classmethod
    def from_dict(cls, data):
        """Build a pet from saved data. Raises on missing keys or bad types."""
        is_sleeping = data["isSleeping"]
        if not isinstance(is_sleeping, bool):
            raise TypeError(f"isSleeping must be a bool, got {is_sleeping!r}")
        return cls(
            hunger=clamp(data["hunger"]),
            happiness=clamp(data["happiness"]),
            energy=clamp(data["energy"]),
            is_sleeping=is_sleeping,
        )


@dataclass
class SessionSnapshot:
    """What gets persisted when the app goes to the background."""
    pet: PetState
    last_active_timestamp: Optional[float] = None  # epoch seconds

    def to_dict(self):
        return {
            "pet": self.pet.to_dict(),
            "lastActiveTimestamp": self.last_active_timestamp,
        }

    @classmethod
    def from_dict(cls, data):
        pet = PetState.from_dict(data["pet"])
        # A bad timestamp only disables catch-up; the pet itself is still usable.
        ts = data.get("lastActiveTimestamp")
        try:
            ts = float(ts) if ts is not None else None
        except (TypeError, ValueError):
            ts = None
        if ts is not None and (not math.isfinite(ts) or ts <= 0):
            ts = None
        return cls(pet=pet, last_active_timestamp=ts)
