"""Local JSON file DAO for development

The whole code -> record mapping lives in one JSON document:

    {
      "abc123": {"url": "https://example.com/a", "createdAt": "2025-10-15T00:00:00.000Z"},
      ...
    }

Every save reads the full mapping, adds one entry and writes the full
mapping back. The write goes to a temporary file in the same directory which
then atomically replaces the original, so readers never see a half-written
document.

NOTE: Single-writer only. Two processes saving at the same time both read the
      old mapping and the last one to replace the file wins, dropping the other
      process' record. Use the Redis backend for anything concurrent.
"""

import os
import json
import tempfile
import threading
from pathlib import Path
from typing import Any

from beartype import beartype

from shortlink.models import UrlRecordModel
from shortlink.constants import Defaults
from shortlink.dao.base import ShortURLBaseDAO
from shortlink.dao.exceptions import DataStoreError, ShortURLAlreadyExistsError


class ShortURLJsonDAO(ShortURLBaseDAO):
    """File-backed implementation of ShortURLBaseDAO.

    Attributes:
        path (Path):
            Location of the JSON document. Parent directories are created on first save.

    Example:
        >>> dao = ShortURLJsonDAO(path='data/urls.json')
        >>> dao.save('abc123', UrlRecordModel(url='https://example.com/a'))
        <ShortURLJsonDAO>
        >>> dao.get('abc123').url
        'https://example.com/a'
    """

    backend = 'local'

    def __init__(self, path: str | os.PathLike = Defaults.LOCAL_DATA_PATH):
        self.path = Path(path)
        self._lock = threading.Lock()

    @beartype
    def save(self, shortcode: str, record: UrlRecordModel, **kwargs) -> 'ShortURLJsonDAO':
        with self._lock:
            data = self._read()
            if shortcode in data:
                raise ShortURLAlreadyExistsError(f"Short URL with code '{shortcode}' already exists.")
            data[shortcode] = record.to_dict()
            self._write(data)
        return self

    @beartype
    def get(self, shortcode: str, **kwargs) -> UrlRecordModel | None:
        entry = self._read().get(shortcode)
        if entry is None:
            return None

        try:
            return UrlRecordModel.from_dict(entry)
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise DataStoreError(f"Short URL record with code '{shortcode}' is corrupt.") from e

    @beartype
    def exists(self, shortcode: str, **kwargs) -> bool:
        return shortcode in self._read()

    def _read(self) -> dict[str, Any]:
        """Load the full mapping. A missing file is an empty mapping."""
        try:
            with self.path.open(encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as e:
            # Refuse to continue: the next save would overwrite the unreadable file
            raise DataStoreError(f"Can't read short URL data from {self.path}.") from e

        if not isinstance(data, dict):
            raise DataStoreError(f'Short URL data in {self.path} is not a JSON object.')
        return data

    def _write(self, data: dict[str, Any]) -> None:
        """Atomically replace the file contents with `data`."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                'w', encoding='utf-8', dir=self.path.parent, prefix=f'.{self.path.name}.', suffix='.tmp', delete=False
            ) as tmp:
                json.dump(data, tmp, indent=2)
            os.replace(tmp.name, self.path)
        except OSError as e:
            raise DataStoreError(f"Can't write short URL data to {self.path}.") from e
