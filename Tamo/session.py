import time
import math
import logging
from enum import Enum, auto
from dataclasses import dataclass

from constants import TICK_INTERVAL
from models import Mood, PetState, SessionSnapshot

logger = logging.getLogger(__name__)


class Regime(Enum):
    """Which repeating rule set is driving ticks. Only one runs at a time."""
    IDLE = auto()    # no timer: backgrounded or game over
    ACTIVE = auto()  # awake, stats decay every tick
    SLEEP = auto()   # asleep, energy restores every tick


@dataclass
class CatchUpReport:
    """What happened to the pet while the app was closed."""
    elapsed: float = 0.0
    missed_ticks: int = 0
    was_sleeping: bool = False
    woke_up: bool = False
    mood: Mood = Mood.HAPPY


def missed_ticks(elapsed, tick_interval):
    """Whole ticks that fit in `elapsed` seconds.

    The fraction of a tick left over is dropped, not carried to the next
    resume. Negative elapsed time (clock moved backwards) or a non-finite
    value counts as zero.
    """
    if not math.isfinite(elapsed) or elapsed <= 0:
        return 0
    return int(math.floor(elapsed / tick_interval))


class SessionController:
    """Owns the pet, its tick timer and its saved snapshot.

    Collaborators are injected: `store` (load/save of SessionSnapshot),
    `scheduler` (schedule_repeating/cancel) and `clock` (epoch seconds).
    Nothing is loaded or scheduled until the host calls on_foreground().
    """

    def __init__(self, store, scheduler, clock=time.time, tick_interval=TICK_INTERVAL):
        if tick_interval <= 0:
            raise ValueError(f"tick_interval must be positive, got {tick_interval}")
        self.store = store
        self.scheduler = scheduler
        self.clock = clock
        self.tick_interval = tick_interval
        self.pet = PetState()
        self.regime = Regime.IDLE
        self._timer = None

    # --- Regimes ---

    def _switch_regime(self, regime):
        """Cancel whatever timer runs, then start the one for `regime`."""
        if self._timer is not None:
            self.scheduler.cancel(self._timer)
            self._timer = None
        if regime is Regime.ACTIVE:
            self._timer = self.scheduler.schedule_repeating(self.tick_interval, self._tick)
        elif regime is Regime.SLEEP:
            self._timer = self.scheduler.schedule_repeating(self.tick_interval, self._sleep_tick)
        if regime is not self.regime:
            logger.debug("Regime %s -> %s", self.regime.name, regime.name)
        self.regime = regime

    def _tick(self):
        if self.pet.is_game_over:
            logger.info("Pet reached game over; stopping the game loop")
            self._switch_regime(Regime.IDLE)
            return
        self.pet.apply_decay()

    def _sleep_tick(self):
        self.pet.sleep_tick()
        if self.pet.is_rested:
            logger.info("Pet is fully rested and wakes up")
            self.wake()

    def _regime_for_pet(self):
        if self.pet.is_game_over:
            return Regime.IDLE
        if self.pet.is_sleeping:
            return Regime.SLEEP
        return Regime.ACTIVE

    # --- User actions ---

    def feed(self):
        return self.pet.feed()

    def play(self):
        return self.pet.play()

    def sleep(self):
        if not self.pet.set_sleeping(True):
            return False
        self._switch_regime(Regime.SLEEP)
        return True

    def wake(self):
        if not self.pet.set_sleeping(False):
            return False
        self._switch_regime(Regime.ACTIVE)
        return True

    def reset(self):
        """Start over with a fresh pet and a running game loop."""
        self._switch_regime(Regime.IDLE)
        self.pet = PetState()
        self._switch_regime(Regime.ACTIVE)
        logger.info("Pet reset to defaults")

    def view(self):
        return self.pet.view()

    # --- Host lifecycle ---

    def on_foreground(self):
        """Restore the saved pet and replay the ticks missed while away."""
        report = CatchUpReport()
        snapshot = self.store.load()
        if snapshot is not None:
            self.pet = snapshot.pet

        if snapshot is not None and snapshot.last_active_timestamp is not None:
            elapsed = self.clock() - snapshot.last_active_timestamp
            if elapsed < 0:
                logger.warning("Saved timestamp is %.1fs in the future; skipping catch-up", -elapsed)
                elapsed = 0.0
            report.elapsed = elapsed
            report.missed_ticks = missed_ticks(elapsed, self.tick_interval)
            report.was_sleeping = self.pet.is_sleeping
            self._catch_up(report)

        self._switch_regime(self._regime_for_pet())
        report.mood = self.pet.mood
        logger.info(
            "Resumed after %.1fs: %d missed ticks, mood=%s",
            report.elapsed, report.missed_ticks, report.mood.value,
        )
        return report

    def _catch_up(self, report):
        n = report.missed_ticks
        if n <= 0:
            return
        if self.pet.is_sleeping:
            for _ in range(n):
                if self.pet.is_rested:
                    break
                self.pet.sleep_tick()
            # Auto-wake is checked once at the end, not per tick
            if self.pet.is_rested:
                self.pet.set_sleeping(False)
                report.woke_up = True
        else:
            self.pet.apply_decay(n)

    def on_background(self):
        """Save the pet with the current time and stop ticking."""
        self.store.save(SessionSnapshot(self.pet.copy(), self.clock()))
        self._switch_regime(Regime.IDLE)
