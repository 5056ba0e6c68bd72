"""
Credential persistence.

The API client keeps the access token under :data:`ACCESS_KEY` and the
refresh token under :data:`REFRESH_KEY`.  :class:`FileTokenStorage`
survives restarts, :class:`MemoryTokenStorage` is for tests and
short-lived scripts.
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

ACCESS_KEY = 'access_token'
REFRESH_KEY = 'refresh_token'


class TokenStorage:
    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        self.remove(ACCESS_KEY)
        self.remove(REFRESH_KEY)


class MemoryTokenStorage(TokenStorage):
    def __init__(self, initial: Optional[dict] = None):
        self._data = dict(initial or {})

    def get(self, key):
        return self._data.get(key)

    def set(self, key, value):
        self._data[key] = value

    def remove(self, key):
        self._data.pop(key, None)


class FileTokenStorage(TokenStorage):
    """JSON object on disk, written with owner-only permissions."""

    def __init__(self, path):
        self.path = Path(path).expanduser()
        self._data = self._load()

    def _load(self) -> dict:
        try:
            with self.path.open(encoding='utf-8') as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            logger.warning('ignoring unreadable credentials file %s: %s', self.path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + '.tmp')
        with tmp.open('w', encoding='utf-8') as fh:
            json.dump(self._data, fh)
        os.chmod(tmp, 0o600)
        os.replace(tmp, self.path)

    def get(self, key):
        return self._data.get(key)

    def set(self, key, value):
        self._data[key] = value
        self._save()

    def remove(self, key):
        if key in self._data:
            del self._data[key]
            self._save()
