import os


def _env_float(name, default):
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


def _env_int(name, default):
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


# --- GLOBAL CONFIGURATION ---
SCREEN_WIDTH = 480
SCREEN_HEIGHT = 320
FPS = _env_int("TAMO_FPS", 30)
SAVE_FILE = os.getenv("TAMO_SAVE_FILE", "tamo_save.json")
DB_FILE = os.getenv("TAMO_DB_FILE", "tamo.db")
STORE_KIND = os.getenv("TAMO_STORE", "json")  # json, sqlite or memory
LOG_LEVEL = os.getenv("TAMO_LOG_LEVEL", "INFO").upper()

# Seconds of simulated time per tick, shared by both regimes and catch-up
TICK_INTERVAL = _env_float("TAMO_TICK_INTERVAL", 3.0)

# --- STAT RULES (units per tick or per action) ---
STAT_MIN = 0.0
STAT_MAX = 100.0
HUNGER_PER_TICK = 2.0
HAPPINESS_PER_TICK = 1.5
ENERGY_PER_TICK = 1.0
SLEEP_ENERGY_PER_TICK = 5.0
FEED_AMOUNT = 20.0
PLAY_HAPPINESS = 15.0
PLAY_ENERGY_COST = 10.0

# --- MOOD THRESHOLDS ---
TIRED_ENERGY = 20.0    # energy < this reads as tired
SAD_HAPPINESS = 30.0   # happiness < this reads as sad
SAD_HUNGER = 80.0      # hunger > this reads as sad

# --- RETRO UI PALETTE ---
COLOR_BG = (40, 44, 52)
COLOR_PET_BODY = (171, 220, 255)
COLOR_PET_EYES = (33, 37, 43)
COLOR_UI_BAR_BG = (62, 68, 81)
COLOR_HUNGER = (224, 108, 117)
COLOR_HAPPY = (229, 192, 123)
COLOR_ENERGY = (97, 175, 239)
COLOR_TEXT = (171, 178, 191)
COLOR_BTN = (100, 100, 100)
COLOR_GAME_OVER = (198, 120, 221)
COLOR_MESSAGE_BOX_BG = (50, 50, 50, 128)  # Semi-transparent dark grey
