from __future__ import annotations

import json
import logging
import os
import sqlite3
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

from catalog.errors import StateVersionConflict, StorageUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StateSnapshot:
    selected_ids: tuple[int, ...] = field(default_factory=tuple)
    sorted_order: tuple[int, ...] = field(default_factory=tuple)
    version: int = 0


def dedupe(values: Iterable[int]) -> tuple[int, ...]:
    """Drop repeated identifiers, keeping the first occurrence of each."""
    return tuple(dict.fromkeys(int(x) for x in values))


def _check_version(current: int, expected_version: int | None) -> None:
    if expected_version is None or expected_version == current:
        return
    logger.warning(
        "state_version_conflict expected=%s current=%s",
        expected_version,
        current,
    )
    raise StateVersionConflict(expected_version=expected_version, current_version=current)


class InMemoryStateStore:
    """Process-local selection/order state.

    ``replace`` overwrites both fields at once.  Without ``expected_version``
    concurrent writers are last-writer-wins.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._snapshot = StateSnapshot()

    def read(self) -> StateSnapshot:
        with self._lock:
            return self._snapshot

    def replace(
        self,
        *,
        selected_ids: Iterable[int],
        sorted_order: Iterable[int],
        expected_version: int | None = None,
    ) -> StateSnapshot:
        selected = dedupe(selected_ids)
        order = dedupe(sorted_order)
        with self._lock:
            _check_version(self._snapshot.version, expected_version)
            self._snapshot = StateSnapshot(
                selected_ids=selected,
                sorted_order=order,
                version=self._snapshot.version + 1,
            )
            snapshot = self._snapshot
        logger.info(
            "state_replaced version=%s selected=%s ordered=%s",
            snapshot.version,
            len(snapshot.selected_ids),
            len(snapshot.sorted_order),
        )
        return snapshot

    def reset(self) -> None:
        with self._lock:
            self._snapshot = StateSnapshot()


class SqliteStateStore:
    """Single-row SQLite state, surviving process restarts."""

    _ROW_ID = 1

    def __init__(self, db_path: str | Path) -> None:
        self._lock = threading.RLock()
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        return conn

    @staticmethod
    def _utcnow() -> str:
        return datetime.now(UTC).isoformat()

    def _init_db(self) -> None:
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    CREATE TABLE IF NOT EXISTS catalog_state (
                        state_id INTEGER PRIMARY KEY,
                        selected_ids TEXT NOT NULL,
                        sorted_order TEXT NOT NULL,
                        version INTEGER NOT NULL,
                        updated_at TEXT NOT NULL
                    )
                    """
                )
                conn.commit()
        except sqlite3.Error as exc:
            logger.warning("state_storage_init_failed path=%s error=%s", self._db_path, exc)
            raise StorageUnavailable(f"state storage init failed: {exc}") from exc

    @staticmethod
    def _row_to_snapshot(row: sqlite3.Row | None) -> StateSnapshot:
        if row is None:
            return StateSnapshot()
        return StateSnapshot(
            selected_ids=tuple(json.loads(row["selected_ids"])),
            sorted_order=tuple(json.loads(row["sorted_order"])),
            version=int(row["version"]),
        )

    def _fetch(self, conn: sqlite3.Connection) -> StateSnapshot:
        row = conn.execute(
            """
            SELECT selected_ids, sorted_order, version
            FROM catalog_state
            WHERE state_id = ?
            """,
            (self._ROW_ID,),
        ).fetchone()
        return self._row_to_snapshot(row)

    def read(self) -> StateSnapshot:
        with self._lock:
            try:
                with self._connect() as conn:
                    return self._fetch(conn)
            except sqlite3.Error as exc:
                logger.warning("state_storage_read_failed path=%s error=%s", self._db_path, exc)
                raise StorageUnavailable(f"state read failed: {exc}") from exc

    def replace(
        self,
        *,
        selected_ids: Iterable[int],
        sorted_order: Iterable[int],
        expected_version: int | None = None,
    ) -> StateSnapshot:
        selected = dedupe(selected_ids)
        order = dedupe(sorted_order)
        with self._lock:
            try:
                with self._connect() as conn:
                    conn.execute("BEGIN IMMEDIATE")
                    current = self._fetch(conn)
                    _check_version(current.version, expected_version)
                    snapshot = StateSnapshot(
                        selected_ids=selected,
                        sorted_order=order,
                        version=current.version + 1,
                    )
                    conn.execute(
                        """
                        INSERT INTO catalog_state(state_id, selected_ids, sorted_order, version, updated_at)
                        VALUES (?, ?, ?, ?, ?)
                        ON CONFLICT(state_id) DO UPDATE SET
                            selected_ids = excluded.selected_ids,
                            sorted_order = excluded.sorted_order,
                            version = excluded.version,
                            updated_at = excluded.updated_at
                        """,
                        (
                            self._ROW_ID,
                            json.dumps(list(snapshot.selected_ids)),
                            json.dumps(list(snapshot.sorted_order)),
                            snapshot.version,
                            self._utcnow(),
                        ),
                    )
                    conn.commit()
            except sqlite3.Error as exc:
                logger.warning("state_storage_write_failed path=%s error=%s", self._db_path, exc)
                raise StorageUnavailable(f"state write failed: {exc}") from exc
        logger.info(
            "state_replaced version=%s selected=%s ordered=%s",
            snapshot.version,
            len(snapshot.selected_ids),
            len(snapshot.sorted_order),
        )
        return snapshot

    def reset(self) -> None:
        with self._lock:
            try:
                with self._connect() as conn:
                    conn.execute("DELETE FROM catalog_state")
                    conn.commit()
            except sqlite3.Error as exc:
                raise StorageUnavailable(f"state reset failed: {exc}") from exc


StateStore = InMemoryStateStore | SqliteStateStore


def create_state_store_from_env(
    environ: Mapping[str, str] | None = None,
) -> InMemoryStateStore | SqliteStateStore:
    env = os.environ if environ is None else environ
    backend = env.get("CATALOG_STATE_BACKEND", "memory").strip().lower()
    if backend == "memory":
        return InMemoryStateStore()
    if backend == "sqlite":
        db_path = env.get("CATALOG_STATE_SQLITE_PATH", ".runtime/catalog_state.sqlite3")
        return SqliteStateStore(db_path)
    raise RuntimeError(f"unsupported state backend: {backend}")
