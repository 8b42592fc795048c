import os

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame

import main
from models import Mood, PetState, SessionSnapshot
from session import Regime
from storage import MemorySnapshotStore


class FakeClock:
    def __init__(self, now=1_700_000_000.0):
        self.now = now

    def __call__(self):
        return self.now


def make_engine(pet=None, seconds_ago=0.0):
    clock = FakeClock()
    snapshot = SessionSnapshot(pet, clock.now - seconds_ago) if pet is not None else None
    store = MemorySnapshotStore(snapshot)
    eng = main.GameEngine(store=store, clock=clock)
    pygame.event.clear()
    return eng, store, clock


def labels(eng):
    return [label for _, label, _ in eng.buttons()]


def test_engine_resumes_session_on_start():
    eng, _, _ = make_engine()
    assert eng.in_foreground
    assert eng.session.regime is Regime.ACTIVE
    assert labels(eng) == ["Feed", "Play", "Sleep"]


def test_click_play_button():
    eng, _, _ = make_engine()
    evt = pygame.event.Event(pygame.MOUSEBUTTONDOWN, {"pos": eng.btn_play.center, "button": 1})
    pygame.event.post(evt)
    assert eng.step() is True
    assert eng.session.view().energy == 90.0
    assert eng.hud_text == "Play!"


def test_sleep_shows_only_wake():
    eng, _, _ = make_engine()
    eng.handle_click(eng.btn_sleep.center)
    assert eng.session.view().mood is Mood.SLEEPING
    assert labels(eng) == ["Wake"]
    eng.handle_click(eng.btn_wake.center)
    assert labels(eng) == ["Feed", "Play", "Sleep"]


def test_restart_after_game_over():
    eng, _, _ = make_engine(PetState(100.0, 0.0, 0.0))
    assert eng.session.regime is Regime.IDLE
    assert labels(eng) == ["Restart"]
    eng.handle_click(eng.btn_restart.center)
    assert eng.session.pet == PetState()
    assert eng.session.regime is Regime.ACTIVE


def test_missed_ticks_show_away_message():
    eng, _, _ = make_engine(PetState(), seconds_ago=30.0)
    assert eng.hud_text.startswith("While you were away")
    assert eng.session.view().hunger == 20.0


def test_background_saves_and_ignores_clicks():
    eng, store, clock = make_engine()
    eng.enter_background()
    assert store.snapshot.last_active_timestamp == clock.now
    assert eng.session.regime is Regime.IDLE
    eng.handle_click(eng.btn_play.center)
    assert eng.session.view().energy == 100.0
    # Repeated focus loss does not save again
    eng.enter_background()
    assert store.saves == 1

    clock.now += 9.0
    eng.enter_foreground()
    assert eng.session.regime is Regime.ACTIVE
    assert eng.session.view().hunger == 6.0


def test_quit_event_stops_loop():
    eng, _, _ = make_engine()
    pygame.event.post(pygame.event.Event(pygame.QUIT))
    assert eng.step() is False
