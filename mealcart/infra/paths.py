from pathlib import Path

from mealcart.utilities.config import DATA_DIR

# Centralized paths for data files (single source of truth)


def key_file(key: str, data_dir: Path = DATA_DIR) -> Path:
    """Path of the JSON file backing one store key."""
    return Path(data_dir) / f"{key}.json"


__all__ = ['DATA_DIR', 'key_file']
