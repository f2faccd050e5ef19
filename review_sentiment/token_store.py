"""
Persistent key-value store for user preferences.

Holds the Hugging Face API token between runs in a small JSON file.
"""

import json
import logging
import os
from pathlib import Path

from .utils import ensure_dir

logger = logging.getLogger("review_sentiment")


TOKEN_KEY = "hfApiToken"
STORAGE_ENV_VAR = "REVIEW_SENTIMENT_STORAGE"


def default_storage_path() -> Path:
    env_path = os.environ.get(STORAGE_ENV_VAR)
    if env_path:
        return Path(env_path)

    config_home = os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config"
    return Path(config_home) / "review_sentiment" / "storage.json"


class TokenStore:
    """
    String key-value store backed by a JSON file.

    Values are written verbatim, so whatever is saved is read back unchanged.
    A missing or unreadable file behaves like an empty store.
    """

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path else default_storage_path()

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable storage file {self.path}: {e}")
            return {}

        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed storage file {self.path}")
            return {}

        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _write(self, data: dict[str, str]) -> None:
        ensure_dir(self.path.parent)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    def get(self, key: str = TOKEN_KEY) -> str | None:
        return self._read().get(key)

    def set(self, value: str, key: str = TOKEN_KEY) -> None:
        data = self._read()
        data[key] = value
        self._write(data)
        logger.debug(f"Saved '{key}' to {self.path}")

    def remove(self, key: str = TOKEN_KEY) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)
            logger.debug(f"Removed '{key}' from {self.path}")
