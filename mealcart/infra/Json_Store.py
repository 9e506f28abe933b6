"""JSON key-value store: one file per key inside a data directory.

Every domain (plan, meal library, active shopping list, saved lists) lives
under its own key. Loading never crashes: a missing key or undecodable file
yields the caller's default.
"""
import copy
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Callable

from mealcart.infra.paths import DATA_DIR, key_file
from mealcart.utilities.errors import MalformedPersistedState

logger = logging.getLogger(__name__)


class JsonStore:
    def __init__(self, data_dir: Path = DATA_DIR):
        self.data_dir = Path(data_dir)

    def path_for(self, key: str) -> Path:
        return key_file(key, self.data_dir)

    def _read(self, key: str) -> Any:
        path = self.path_for(key)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise MalformedPersistedState(key, str(e)) from e
        except UnicodeDecodeError as e:
            raise MalformedPersistedState(key, "not valid UTF-8") from e

    def has(self, key: str) -> bool:
        return self.path_for(key).exists()

    def load(self, key: str, default: Any = None) -> Any:
        """Return the stored value for key, or a copy of default if missing or malformed."""
        try:
            return self._read(key)
        except FileNotFoundError:
            logger.debug("No persisted value for '%s', using default", key)
        except MalformedPersistedState as e:
            logger.warning("%s; resetting to default", e)
        except OSError as e:
            logger.error("Could not read '%s': %s", key, e)
        return copy.deepcopy(default)

    def save(self, key: str, value: Any) -> None:
        """Write value atomically (temp file + rename)."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        target = self.path_for(key)
        fd, tmp_path = tempfile.mkstemp(dir=str(self.data_dir), prefix=f".{key}_", suffix=".json")
        try:
            with os.fdopen(fd, 'w', encoding='utf-8') as tmp:
                json.dump(value, tmp, indent=2, ensure_ascii=False)
            os.replace(tmp_path, target)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)

    def delete(self, key: str) -> None:
        try:
            self.path_for(key).unlink()
        except FileNotFoundError:
            pass


class JsonRepository:
    """Typed access to one store key.

    ``update`` is the only way to do read-modify-write: it holds the
    repository lock across the read and the write so two writers on the same
    domain cannot both build on a stale read.
    """

    key: str = ""

    def __init__(self, store: JsonStore):
        self.store = store
        self._lock = threading.RLock()

    def default(self):
        raise NotImplementedError

    def decode(self, raw):
        raise NotImplementedError

    def encode(self, value):
        raise NotImplementedError

    def load(self):
        raw = self.store.load(self.key, None)
        if raw is None:
            return self.default()
        try:
            return self.decode(raw)
        except MalformedPersistedState as e:
            logger.warning("%s; resetting to default", e)
        except (TypeError, AttributeError, ValueError) as e:
            logger.warning("%s; resetting to default", MalformedPersistedState(self.key, str(e)))
        return self.default()

    def save(self, value) -> None:
        with self._lock:
            self.store.save(self.key, self.encode(value))

    def update(self, fn: Callable):
        """Apply fn to the current value, persist and return the result."""
        with self._lock:
            new_value = fn(self.load())
            self.save(new_value)
            return new_value
