#!/usr/bin/env python3
import sys
import math
import time
import logging
import pygame

from constants import (
    SCREEN_WIDTH, SCREEN_HEIGHT, FPS, SAVE_FILE, DB_FILE, STORE_KIND, LOG_LEVEL,
    COLOR_BG, COLOR_PET_BODY, COLOR_PET_EYES, COLOR_UI_BAR_BG,
    COLOR_HUNGER, COLOR_HAPPY, COLOR_ENERGY, COLOR_TEXT, COLOR_BTN, COLOR_GAME_OVER,
    COLOR_MESSAGE_BOX_BG,
)
from models import Mood
from session import SessionController
from storage import open_store
from timers import TickScheduler

logger = logging.getLogger(__name__)

# Window events that mean the app left or came back to the foreground
BACKGROUND_EVENTS = (pygame.WINDOWFOCUSLOST, pygame.WINDOWMINIMIZED)
FOREGROUND_EVENTS = (pygame.WINDOWFOCUSGAINED, pygame.WINDOWRESTORED)


def default_store():
    path = DB_FILE if STORE_KIND == "sqlite" else SAVE_FILE
    return open_store(STORE_KIND, path)


class GameEngine:
    """Hosts the session: window, input, frame loop and the tick scheduler."""
    def __init__(self, store=None, clock=time.time):
        pygame.init()
        try:
            self.screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT), pygame.SCALED | pygame.RESIZABLE)
        except pygame.error:
            # Some headless drivers do not support scaled/resizable; fall back
            self.screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
        pygame.display.set_caption("Tamo")
        self.frame_clock = pygame.time.Clock()
        self.font = pygame.font.Font(None, 24)
        self.small_font = pygame.font.Font(None, 18)

        self.scheduler = TickScheduler()
        self.session = SessionController(store if store is not None else default_store(), self.scheduler, clock=clock)
        self.in_foreground = False

        # HUD message (transient, centered above pet)
        self.hud_text = None
        self.hud_expiry = 0.0

        btn_y = SCREEN_HEIGHT - 44
        self.btn_feed = pygame.Rect(60, btn_y, 100, 32)
        self.btn_play = pygame.Rect(190, btn_y, 100, 32)
        self.btn_sleep = pygame.Rect(320, btn_y, 100, 32)
        self.btn_wake = pygame.Rect(190, btn_y, 100, 32)
        self.btn_restart = pygame.Rect(190, btn_y, 100, 32)

        self.enter_foreground()

    # --- Lifecycle ---

    def enter_foreground(self):
        if self.in_foreground:
            return
        self.in_foreground = True
        report = self.session.on_foreground()
        if report.missed_ticks > 0:
            if report.woke_up:
                self.show_hud("Woke up fully rested while you were away!", duration=4.0)
            elif report.mood is Mood.GAME_OVER:
                self.show_hud("Your pet was left alone too long...", duration=4.0)
            else:
                self.show_hud(f"While you were away: {report.missed_ticks} ticks passed", duration=4.0)

    def enter_background(self):
        if not self.in_foreground:
            return
        self.in_foreground = False
        self.session.on_background()

    def show_hud(self, text, duration=1.5):
        self.hud_text = text
        self.hud_expiry = time.time() + duration

    # --- Input ---

    def buttons(self):
        """The (rect, label, handler) buttons valid for the current mood."""
        view = self.session.view()
        if view.mood is Mood.GAME_OVER:
            return [(self.btn_restart, "Restart", self.session.reset)]
        if view.is_sleeping:
            return [(self.btn_wake, "Wake", self.session.wake)]
        return [
            (self.btn_feed, "Feed", self.session.feed),
            (self.btn_play, "Play", self.session.play),
            (self.btn_sleep, "Sleep", self.session.sleep),
        ]

    def handle_click(self, pos):
        if not self.in_foreground:
            return
        for rect, label, handler in self.buttons():
            if rect.collidepoint(pos):
                if handler() is not False:
                    self.show_hud(label + "!")
                break

    # --- Drawing ---

    def draw_bar(self, x, y, value, color, label):
        """Renders stat progress bars."""
        pygame.draw.rect(self.screen, COLOR_UI_BAR_BG, (x, y, 100, 15), border_radius=4)
        width = max(0, min(100, int(value)))
        pygame.draw.rect(self.screen, color, (x, y, width, 15), border_radius=4)
        self.screen.blit(self.small_font.render(label, True, COLOR_TEXT), (x, y - 16))

    def draw_pet(self, center, mood):
        cx, cy = center
        color = COLOR_GAME_OVER if mood is Mood.GAME_OVER else COLOR_PET_BODY
        pygame.draw.ellipse(self.screen, color, (cx - 45, cy - 36, 90, 72))
        eye_y = cy - 10
        if mood in (Mood.SLEEPING, Mood.GAME_OVER, Mood.TIRED):
            # Closed (or crossed-out) eyes
            for ex in (cx - 18, cx + 18):
                pygame.draw.line(self.screen, COLOR_PET_EYES, (ex - 6, eye_y), (ex + 6, eye_y), 2)
        else:
            for ex in (cx - 18, cx + 18):
                pygame.draw.circle(self.screen, COLOR_PET_EYES, (ex, eye_y), 5)
        mouth = pygame.Rect(cx - 12, cy + 8, 24, 10)
        if mood is Mood.HAPPY:
            pygame.draw.arc(self.screen, COLOR_PET_EYES, mouth, math.pi, 2 * math.pi, 2)
        elif mood is Mood.SAD:
            pygame.draw.arc(self.screen, COLOR_PET_EYES, mouth.move(0, 6), 0, math.pi, 2)
        else:
            pygame.draw.line(self.screen, COLOR_PET_EYES, mouth.midleft, mouth.midright, 2)
        if mood is Mood.SLEEPING:
            zzz = self.font.render("Zzz", True, COLOR_TEXT)
            self.screen.blit(zzz, zzz.get_rect(center=(cx + 55, cy - 40)))

    def render(self):
        view = self.session.view()
        self.screen.fill(COLOR_BG)
        self.draw_bar(40, 30, view.hunger, COLOR_HUNGER, "Hunger")
        self.draw_bar(190, 30, view.happiness, COLOR_HAPPY, "Happiness")
        self.draw_bar(340, 30, view.energy, COLOR_ENERGY, "Energy")

        center = (SCREEN_WIDTH // 2, SCREEN_HEIGHT // 2)
        self.draw_pet(center, view.mood)
        mood_surf = self.font.render(view.mood.label, True, COLOR_TEXT)
        self.screen.blit(mood_surf, mood_surf.get_rect(center=(center[0], center[1] + 56)))

        for rect, label, _ in self.buttons():
            pygame.draw.rect(self.screen, COLOR_BTN, rect, border_radius=6)
            text_surf = self.font.render(label, True, COLOR_TEXT)
            self.screen.blit(text_surf, text_surf.get_rect(center=rect.center))

        if self.hud_text:
            if time.time() < self.hud_expiry:
                hud_surf = self.small_font.render(self.hud_text, True, COLOR_TEXT)
                hud_rect = hud_surf.get_rect(center=(SCREEN_WIDTH // 2, 70))
                bg = pygame.Surface(hud_rect.inflate(16, 8).size, pygame.SRCALPHA)
                bg.fill(COLOR_MESSAGE_BOX_BG)
                self.screen.blit(bg, hud_rect.inflate(16, 8).topleft)
                self.screen.blit(hud_surf, hud_rect)
            else:
                self.hud_text = None

    # --- Loop ---

    def step(self):
        """Process a single loop iteration (useful for headless tests). Returns False to stop."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False
            if event.type in BACKGROUND_EVENTS:
                self.enter_background()
            elif event.type in FOREGROUND_EVENTS:
                self.enter_foreground()
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self.handle_click(event.pos)

        # Timer callbacks run here, on the same thread as input handling
        self.scheduler.run_due()
        self.render()
        pygame.display.flip()
        self.frame_clock.tick(FPS)
        return True

    def run(self):
        running = True
        while running:
            running = self.step()
        self.enter_background()
        pygame.quit()


def main():
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting Tamo (store=%s)", STORE_KIND)
    engine = GameEngine()
    try:
        engine.run()
    except KeyboardInterrupt:
        engine.enter_background()
        pygame.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())
