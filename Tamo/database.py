import math
import sqlite3
import logging

from models import PetState, SessionSnapshot, clamp

logger = logging.getLogger(__name__)


class DatabaseManager:
    """Handles SQL persistence to keep the pet 'alive' on disk.

    If the database cannot be opened the manager stays usable: loads return
    None and saves are dropped with a warning.
    """
    def __init__(self, db_path):
        self.db_path = db_path
        self.conn = None
        try:
            self.conn = sqlite3.connect(db_path)
            self.create_tables()
        except sqlite3.Error as e:
            logger.warning("Could not open session database '%s': %s", db_path, e)
            self.close()

    def create_tables(self):
        """A single-row table holding the last saved session."""
        self.conn.execute("""
            CREATE TABLE IF NOT EXISTS pet_session (
                id INTEGER PRIMARY KEY,
                hunger REAL NOT NULL,
                happiness REAL NOT NULL,
                energy REAL NOT NULL,
                is_sleeping INTEGER NOT NULL,
                last_active REAL
            )
        """)
        self.conn.commit()

    def save(self, snapshot):
        if self.conn is None:
            logger.warning("No session database open; not saving to '%s'", self.db_path)
            return
        pet = snapshot.pet
        query = """
        INSERT OR REPLACE INTO pet_session
        (id, hunger, happiness, energy, is_sleeping, last_active)
        VALUES (1,?,?,?,?,?)
        """
        try:
            self.conn.execute(query, (
                pet.hunger, pet.happiness, pet.energy,
                1 if pet.is_sleeping else 0, snapshot.last_active_timestamp,
            ))
            self.conn.commit()
        except sqlite3.Error as e:
            logger.warning("Failed to save session to '%s': %s", self.db_path, e)

    def load(self):
        """Return the saved SessionSnapshot, or None when there is nothing usable."""
        if self.conn is None:
            return None
        try:
            row = self.conn.execute(
                "SELECT hunger, happiness, energy, is_sleeping, last_active FROM pet_session WHERE id = 1"
            ).fetchone()
        except sqlite3.Error as e:
            logger.warning("Failed to read session from '%s': %s", self.db_path, e)
            return None
        if row is None:
            return None
        hunger, happiness, energy, is_sleeping, last_active = row
        try:
            pet = PetState(clamp(hunger), clamp(happiness), clamp(energy), bool(is_sleeping))
            last_active = float(last_active) if last_active is not None else None
        except (TypeError, ValueError) as e:
            logger.warning("Ignoring corrupt session row in '%s': %s", self.db_path, e)
            return None
        if last_active is not None and (not math.isfinite(last_active) or last_active <= 0):
            last_active = None
        return SessionSnapshot(pet, last_active)

    def close(self):
        if self.conn is not None:
            self.conn.close()
            self.conn = None
