"""L2 disk cache backed by SQLite."""

from __future__ import annotations

import logging
import sqlite3
import time
from pathlib import Path

from cached_marker.cache.stats import CachedImage

logger = logging.getLogger(__name__)

_DEFAULT_MAX_SIZE_MB = 500
_DEFAULT_DB_PATH = Path.home() / ".cached_marker" / "cache.db"


class DiskCache:
    """SQLite-backed persistent image cache with TTL and LRU eviction."""

    def __init__(
        self,
        db_path: Path | None = None,
        max_size_mb: float = _DEFAULT_MAX_SIZE_MB,
    ) -> None:
        self._db_path = db_path or _DEFAULT_DB_PATH
        self._max_size_bytes = int(max_size_mb * 1024 * 1024)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(str(self._db_path))
        self._conn.row_factory = sqlite3.Row
        self._create_table()

    def get(self, key: str) -> CachedImage | None:
        row = self._conn.execute(
            "SELECT * FROM images WHERE key = ?", (key,)
        ).fetchone()
        if row is None:
            return None
        image = self._row_to_image(row)
        if image.is_expired:
            self._conn.execute("DELETE FROM images WHERE key = ?", (key,))
            self._conn.commit()
            return None
        # Update last_accessed for LRU
        self._conn.execute(
            "UPDATE images SET last_accessed = ? WHERE key = ?",
            (time.time(), key),
        )
        self._conn.commit()
        return image

    def set(self, key: str, image: CachedImage) -> None:
        self._evict_if_needed(image.size_bytes, exclude=key)
        # Single statement + commit: a concurrent reader sees the old row or
        # the new one, never a partial blob.
        self._conn.execute(
            """INSERT OR REPLACE INTO images
               (key, data, width, height, source_url,
                created_at, ttl_seconds, last_accessed, size_bytes)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                key, sqlite3.Binary(image.data), image.width, image.height,
                image.source_url, image.created_at, image.ttl_seconds,
                time.time(), image.size_bytes,
            ),
        )
        self._conn.commit()

    def clear(self) -> None:
        self._conn.execute("DELETE FROM images")
        self._conn.commit()

    @property
    def entry_count(self) -> int:
        row = self._conn.execute("SELECT COUNT(*) FROM images").fetchone()
        return row[0]

    @property
    def size_mb(self) -> float:
        row = self._conn.execute("SELECT COALESCE(SUM(size_bytes), 0) FROM images").fetchone()
        return row[0] / (1024 * 1024)

    def close(self) -> None:
        self._conn.close()

    def _create_table(self) -> None:
        self._conn.execute("""
            CREATE TABLE IF NOT EXISTS images (
                key TEXT PRIMARY KEY,
                data BLOB NOT NULL,
                width INTEGER,
                height INTEGER,
                source_url TEXT,
                created_at REAL,
                ttl_seconds REAL,
                last_accessed REAL,
                size_bytes INTEGER
            )
        """)
        self._conn.commit()

    def _evict_if_needed(self, new_image_size: int, exclude: str) -> None:
        # First remove expired entries
        self._conn.execute(
            "DELETE FROM images WHERE created_at + ttl_seconds < ?",
            (time.time(),),
        )
        self._conn.commit()

        # Then LRU evict if still over limit; the row being replaced doesn't count
        while True:
            row = self._conn.execute(
                "SELECT COALESCE(SUM(size_bytes), 0) FROM images WHERE key != ?",
                (exclude,),
            ).fetchone()
            current_size = row[0]
            if current_size + new_image_size <= self._max_size_bytes:
                break
            oldest = self._conn.execute(
                "SELECT key FROM images WHERE key != ? ORDER BY last_accessed ASC LIMIT 1",
                (exclude,),
            ).fetchone()
            if oldest is None:
                break
            logger.debug("Evicting '%s' from disk cache", oldest[0])
            self._conn.execute("DELETE FROM images WHERE key = ?", (oldest[0],))
            self._conn.commit()

    @staticmethod
    def _row_to_image(row: sqlite3.Row) -> CachedImage:
        return CachedImage(
            key=row["key"],
            data=bytes(row["data"]),
            width=row["width"] or 0,
            height=row["height"] or 0,
            source_url=row["source_url"] or "",
            created_at=row["created_at"],
            ttl_seconds=row["ttl_seconds"],
        )
