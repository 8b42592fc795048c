import os
import json
import logging

from models import SessionSnapshot

logger = logging.getLogger(__name__)

# Unreadable file, bad JSON, or a document SessionSnapshot.from_dict rejects
READ_ERRORS = (OSError, KeyError, TypeError, ValueError, AttributeError)


class JsonSnapshotStore:
    """Persists the session snapshot to a JSON file between runs."""

    def __init__(self, path):
        self.path = path

    def load(self):
        """Return the saved SessionSnapshot, or None if missing or unreadable."""
        if not os.path.exists(self.path):
            return None
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
            return SessionSnapshot.from_dict(data)
        except READ_ERRORS as e:
            logger.warning("Ignoring unreadable save file '%s': %s", self.path, e)
            return None

    def save(self, snapshot):
        """Write the snapshot with an atomic replace so a crash never truncates it."""
        tmp = self.path + ".tmp"
        try:
            with open(tmp, "w") as f:
                json.dump(snapshot.to_dict(), f)
            os.replace(tmp, self.path)
        except OSError as e:
            logger.warning("Failed to write save file '%s': %s", self.path, e)


class MemorySnapshotStore:
    """Keeps the snapshot in process. Used for headless runs and tests."""

    def __init__(self, snapshot=None):
        self.snapshot = snapshot
        self.saves = 0

    def load(self):
        if self.snapshot is None:
            return None
        return SessionSnapshot(self.snapshot.pet.copy(), self.snapshot.last_active_timestamp)

    def save(self, snapshot):
        self.snapshot = SessionSnapshot(snapshot.pet.copy(), snapshot.last_active_timestamp)
        self.saves += 1


def open_store(kind, path):
    """Build the store named by `kind` (json, sqlite or memory)."""
    kind = (kind or "").lower()
    if kind == "json":
        return JsonSnapshotStore(path)
    if kind == "sqlite":
        from database import DatabaseManager
        return DatabaseManager(path)
    if kind == "memory":
        return MemorySnapshotStore()
    raise ValueError(f"Unknown store kind '{kind}' (expected json, sqlite or memory)")
