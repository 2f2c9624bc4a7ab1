"""Wardrobe storage abstractions and SQLite implementation."""
from __future__ import annotations

import json
import sqlite3
from contextlib import contextmanager
from dataclasses import asdict, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterator, List, Optional

from models.clothing_item import ClothingItem

_LIST_COLUMNS = ("colors", "occasions", "seasons", "mood_tags")
_COLUMNS = (
    "user_id",
    "item_id",
    "name",
    "category",
    "subcategory",
    "colors",
    "occasions",
    "seasons",
    "mood_tags",
    "image_url",
    "brand",
    "size",
    "material",
    "notes",
    "wear_count",
    "favorite",
    "created_at",
    "updated_at",
)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class WardrobeStore:
    """Persistence interface for a user's clothing items."""

    def get_all(self, user_id: str) -> List[ClothingItem]:
        raise NotImplementedError

    def get(self, user_id: str, item_id: str) -> Optional[ClothingItem]:
        raise NotImplementedError

    def create(self, item: ClothingItem) -> ClothingItem:
        raise NotImplementedError

    def update(self, user_id: str, item_id: str, updated_fields: Dict[str, object]) -> Optional[ClothingItem]:
        raise NotImplementedError

    def delete(self, user_id: str, item_id: str) -> bool:
        raise NotImplementedError

    def upsert(self, item: ClothingItem) -> ClothingItem:
        raise NotImplementedError


class SQLiteWardrobeStore(WardrobeStore):
    """Local SQLite-backed store for clothing items."""

    def __init__(self, database_path: str | Path = "data/wardrobe.db") -> None:
        self.database_path = Path(database_path)
        self.database_path.parent.mkdir(parents=True, exist_ok=True)
        self._create_schema()

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection that commits on success and is always closed."""

        conn = sqlite3.connect(self.database_path)
        conn.row_factory = sqlite3.Row
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def _create_schema(self) -> None:
        with self._transaction() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS clothing_items (
                    user_id TEXT NOT NULL,
                    item_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    category TEXT NOT NULL,
                    subcategory TEXT,
                    colors TEXT,
                    occasions TEXT,
                    seasons TEXT,
                    mood_tags TEXT,
                    image_url TEXT,
                    brand TEXT,
                    size TEXT,
                    material TEXT,
                    notes TEXT,
                    wear_count INTEGER NOT NULL DEFAULT 0,
                    favorite INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT,
                    updated_at TEXT,
                    PRIMARY KEY (user_id, item_id)
                );
                """
            )

    def _write(self, item: ClothingItem) -> ClothingItem:
        row = asdict(item)
        row["item_id"] = row.pop("id")
        row["favorite"] = int(item.favorite)
        for column in _LIST_COLUMNS:
            row[column] = json.dumps(row[column] or [])
        placeholders = ", ".join("?" for _ in _COLUMNS)
        with self._transaction() as conn:
            conn.execute(
                f"INSERT OR REPLACE INTO clothing_items ({', '.join(_COLUMNS)}) VALUES ({placeholders})",
                tuple(row[column] for column in _COLUMNS),
            )
        return item

    @staticmethod
    def _to_item(row: sqlite3.Row) -> ClothingItem:
        values = dict(row)
        values["id"] = values.pop("item_id")
        values["favorite"] = bool(values["favorite"])
        for column in _LIST_COLUMNS:
            values[column] = json.loads(values[column]) if values[column] else []
        return ClothingItem(**values)

    def get_all(self, user_id: str) -> List[ClothingItem]:
        with self._transaction() as conn:
            rows = conn.execute(
                "SELECT * FROM clothing_items WHERE user_id = ? ORDER BY created_at, item_id",
                (user_id,),
            ).fetchall()
        return [self._to_item(row) for row in rows]

    def get(self, user_id: str, item_id: str) -> Optional[ClothingItem]:
        with self._transaction() as conn:
            row = conn.execute(
                "SELECT * FROM clothing_items WHERE user_id = ? AND item_id = ?",
                (user_id, item_id),
            ).fetchone()
        return self._to_item(row) if row else None

    def create(self, item: ClothingItem) -> ClothingItem:
        if self.get(item.user_id, item.id) is not None:
            raise ValueError(f"Item {item.id} already exists for this user")
        stamp = _now()
        return self._write(replace(item, created_at=item.created_at or stamp, updated_at=stamp))

    def update(self, user_id: str, item_id: str, updated_fields: Dict[str, object]) -> Optional[ClothingItem]:
        current = self.get(user_id, item_id)
        if not current:
            return None

        changes = {
            key: value
            for key, value in updated_fields.items()
            if key not in {"id", "user_id", "created_at"} and hasattr(current, key)
        }
        # replace() re-runs __post_init__, so the updated item is validated again.
        return self._write(replace(current, **changes, updated_at=_now()))

    def delete(self, user_id: str, item_id: str) -> bool:
        with self._transaction() as conn:
            cursor = conn.execute(
                "DELETE FROM clothing_items WHERE user_id = ? AND item_id = ?",
                (user_id, item_id),
            )
            return cursor.rowcount > 0

    def upsert(self, item: ClothingItem) -> ClothingItem:
        existing = self.get(item.user_id, item.id)
        created_at = existing.created_at if existing else item.created_at
        return self._write(replace(item, created_at=created_at or _now(), updated_at=_now()))


__all__ = ["WardrobeStore", "SQLiteWardrobeStore"]
