"""
JSON File Storage Implementation

DESIGN DECISION: A single JSON document on disk plays the role of the
platform preferences store. The tracker only persists a handful of keys
(the Pro flag, the profile list, one transaction list per profile), so a
flat file is enough.

TRADEOFFS:
- Every write rewrites the whole file (fine for personal-scale data)
- No cross-process locking (one writer per process is assumed)
- Transient write errors are retried a few times before surfacing
  as StorageError
"""

import json
from pathlib import Path
from typing import Any, Optional

import structlog
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from finance_tracker.services.storage.interface import KeyValueStore, StorageError


logger = structlog.get_logger(__name__)


class JsonFileKeyValueStore(KeyValueStore):
    """
    Key-value store persisted as one JSON object.

    The file is created lazily on first write. The whole document is
    cached in memory after the first read.
    """

    def __init__(self, path: Path):
        self._path = Path(path)
        self._cache: Optional[dict[str, Any]] = None

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, Any]:
        if self._cache is not None:
            return self._cache

        if not self._path.exists():
            self._cache = {}
            return self._cache

        try:
            raw = self._path.read_text(encoding="utf-8")
            data = json.loads(raw) if raw.strip() else {}
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Failed to read {self._path}: {e}")

        if not isinstance(data, dict):
            raise StorageError(f"Expected a JSON object in {self._path}")

        self._cache = data
        return self._cache

    @retry(
        retry=retry_if_exception_type(OSError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, max=1),
        reraise=True,
    )
    def _write_atomic(self, document: str) -> None:
        """Write via a temp file and rename, so readers never see half a file."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp_path.write_text(document, encoding="utf-8")
        tmp_path.replace(self._path)

    def _flush(self, data: dict[str, Any]) -> None:
        try:
            self._write_atomic(json.dumps(data, ensure_ascii=False, indent=2, sort_keys=True))
        except OSError as e:
            raise StorageError(f"Failed to write {self._path}: {e}")

        self._cache = data
        logger.debug("store_flushed", path=str(self._path), keys=len(data))

    def get_bool(self, key: str) -> Optional[bool]:
        value = self._load().get(key)
        return value if isinstance(value, bool) else None

    def set_bool(self, key: str, value: bool) -> None:
        data = dict(self._load())
        data[key] = bool(value)
        self._flush(data)

    def get_data(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set_data(self, key: str, value: str) -> None:
        data = dict(self._load())
        data[key] = value
        self._flush(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key not in data:
            return
        data = dict(data)
        del data[key]
        self._flush(data)

    def contains(self, key: str) -> bool:
        return key in self._load()
