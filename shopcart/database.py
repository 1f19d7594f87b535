# shopcart/database.py
"""
Durable key-value store backed by a two-column CSV file (key, value).
Every write replaces the whole file: the new table is written to a sibling
temp file and swapped in with os.replace while the file lock is held, so
readers never see a half-written snapshot.

Usage:
    from shopcart.database import FileBackedStore
    store = FileBackedStore()
    store.set("@RocketShoes:cart", "[]")
    store.get("@RocketShoes:cart")
"""

import logging
import os
from pathlib import Path
from typing import Dict, List, Optional
import pandas as pd
from filelock import FileLock
from shopcart.config import settings

logger = logging.getLogger(__name__)

COLUMNS = ["key", "value"]


class FileBackedStore:
    """
    Synchronous get/set of string blobs, persisted under DATA_DIR/STORE_FILE.
    """

    def __init__(self, data_dir: Optional[Path] = None, filename: Optional[str] = None):
        self.data_dir = Path(data_dir if data_dir is not None else settings.DATA_DIR)
        self.path = self.data_dir / (filename or settings.STORE_FILE)

    def _lock(self) -> FileLock:
        return FileLock(str(self.path) + ".lock")

    def _read_df(self) -> pd.DataFrame:
        if not self.path.exists():
            return pd.DataFrame(columns=COLUMNS)
        try:
            # keep_default_na=False so an empty string blob stays "" rather than NaN
            df = pd.read_csv(self.path, dtype=str, keep_default_na=False)
        except ValueError as e:
            # EmptyDataError and ParserError are ValueErrors; the next set() rewrites the file
            logger.warning("Store file %s is unreadable, treating it as empty: %s", self.path, e)
            return pd.DataFrame(columns=COLUMNS)
        if not set(COLUMNS).issubset(df.columns):
            logger.warning("Store file %s has columns %s, treating it as empty", self.path, list(df.columns))
            return pd.DataFrame(columns=COLUMNS)
        return df[COLUMNS]

    def _write_df_nolock(self, df: pd.DataFrame) -> None:
        """
        Write DataFrame WITHOUT acquiring the file lock.
        Use this only when the caller already holds the lock.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            df.to_csv(tmp, index=False)
            os.replace(tmp, self.path)
        finally:
            if tmp.exists():
                tmp.unlink()

    # --- key-value primitives ---

    def get(self, key: str) -> Optional[str]:
        with self._lock():
            df = self._read_df()
        if df.empty:
            return None
        rows = df[df["key"] == key]
        if rows.empty:
            return None
        return str(rows.iloc[-1]["value"])

    def set(self, key: str, value: str) -> None:
        with self._lock():
            df = self._read_df()
            df = df[df["key"] != key]
            df = pd.concat([df, pd.DataFrame([{"key": key, "value": value}], columns=COLUMNS)], ignore_index=True)
            self._write_df_nolock(df)
        logger.debug("Wrote %d bytes under %s", len(value), key)

    def delete(self, key: str) -> bool:
        """
        Remove `key`. Returns True if it was present.
        """
        with self._lock():
            df = self._read_df()
            if df.empty:
                return False
            kept = df[df["key"] != key]
            if len(kept) == len(df):
                return False
            self._write_df_nolock(kept)
            return True

    def keys(self) -> List[str]:
        with self._lock():
            df = self._read_df()
        return [str(k) for k in df["key"].tolist()] if not df.empty else []


class InMemoryStore:
    """Same interface as FileBackedStore, nothing survives the process."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def keys(self) -> List[str]:
        return list(self._data)
