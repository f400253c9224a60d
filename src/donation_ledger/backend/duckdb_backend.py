# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
DuckDB-backed ledger world state.

The namespace is a single table ``(key VARCHAR PRIMARY KEY, value BLOB,
version BIGINT)``. Versions come from a DuckDB sequence, so they keep
increasing across reopenings of a file database. Write sets are applied
inside one DuckDB transaction.
"""

from __future__ import annotations

import logging
import os
from typing import Callable, Iterator, Optional, Tuple

import duckdb

from ..core.errors import BackendError
from ..core.settings import BackendSettings
from .base import LedgerBackend, Row, WriteSet

logger = logging.getLogger(__name__)


class DuckDBBackend(LedgerBackend):
    """
    Ledger backend persisting world state in DuckDB.

    Example:
        ```python
        from donation_ledger.backend import DuckDBBackend
        from donation_ledger.core import BackendSettings

        backend = DuckDBBackend(BackendSettings(kind="duckdb", database="ledger.duckdb"))
        backend.put("donation1", b"...")
        with backend.scan("", "") as results:
            for key, value in results:
                ...
        backend.close()
        ```
    """

    def __init__(self, settings: Optional[BackendSettings] = None):
        """Open (or create) the database and the world state table."""
        super().__init__()
        self.settings = settings or BackendSettings(kind="duckdb")
        self.table_name = self.settings.table_name
        self._sequence_name = f"{self.table_name}_versions"
        try:
            self.con = duckdb.connect(database=self.settings.database, read_only=False)
            self.con.execute(f"CREATE SEQUENCE IF NOT EXISTS {self._sequence_name} START 1")
            self.con.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {self.table_name} (
                    key VARCHAR PRIMARY KEY,    -- donation id
                    value BLOB NOT NULL,        -- canonical record bytes
                    version BIGINT NOT NULL     -- drawn from the version sequence
                );
                """
            )
        except duckdb.Error as e:
            logger.error(f"Failed to open DuckDB world state at {self.settings.database!r}: {e}")
            raise BackendError(f"failed to open world state: {e}") from e
        logger.debug(f"DuckDB table '{self.table_name}' ready in {self.settings.database!r}.")

        self._configure_duckdb()

    def _configure_duckdb(self) -> None:
        """Apply connection settings; failures here do not affect correctness."""
        try:
            self.con.execute("SET enable_progress_bar = false")
            # Users can cap memory with the DUCKDB_MEMORY_LIMIT environment variable
            memory_limit = os.environ.get("DUCKDB_MEMORY_LIMIT")
            if memory_limit:
                self.con.execute(f"SET memory_limit = '{memory_limit}'")
            logger.debug("DuckDB configuration applied")
        except duckdb.Error as e:
            logger.warning(f"Could not apply all DuckDB settings: {e}")

    def __len__(self) -> int:
        self._ensure_open()
        with self._lock:
            try:
                return self.con.execute(f"SELECT COUNT(*) FROM {self.table_name}").fetchone()[0]
            except duckdb.Error as e:
                raise BackendError(f"failed to count world state: {e}") from e

    def close(self) -> None:
        if self._closed:
            return
        with self._lock:
            try:
                self.con.close()
            except duckdb.Error as e:
                raise BackendError(f"failed to close world state: {e}") from e
            finally:
                super().close()

    def _get_entry(self, key: str) -> Optional[Tuple[bytes, int]]:
        with self._lock:
            try:
                row = self.con.execute(
                    f"SELECT value, version FROM {self.table_name} WHERE key = ?", [key]
                ).fetchone()
            except duckdb.Error as e:
                logger.error(f"Failed to read {key!r} from world state: {e}")
                raise BackendError(f"failed to read from world state: {e}") from e
        if row is None:
            return None
        return bytes(row[0]), int(row[1])

    def _scan_rows(
        self, start_key: str, end_key: str
    ) -> Tuple[Iterator[Row], Optional[Callable[[], None]]]:
        clauses = []
        params = []
        if start_key:
            clauses.append("key >= ?")
            params.append(start_key)
        if end_key:
            clauses.append("key < ?")
            params.append(end_key)
        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        sql = f"SELECT key, value, version FROM {self.table_name}{where} ORDER BY key"

        with self._lock:
            try:
                # A cursor is its own connection, so the scan reads a stable snapshot
                cursor = self.con.cursor()
                cursor.execute(sql, params)
            except duckdb.Error as e:
                logger.error(f"Failed to open range scan [{start_key!r}, {end_key!r}): {e}")
                raise BackendError(f"failed to scan world state: {e}") from e
        return self._fetch_rows(cursor), cursor.close

    def _fetch_rows(self, cursor: duckdb.DuckDBPyConnection) -> Iterator[Row]:
        batch_size = self.settings.scan_batch_size
        while True:
            try:
                batch = cursor.fetchmany(batch_size)
            except duckdb.Error as e:
                logger.error(f"Range scan failed while fetching rows: {e}")
                raise BackendError(f"failed to scan world state: {e}") from e
            if not batch:
                return
            for key, value, version in batch:
                yield key, bytes(value), int(version)

    def _apply(self, writes: WriteSet) -> None:
        upsert = (
            f"INSERT OR REPLACE INTO {self.table_name} (key, value, version) "
            f"VALUES (?, ?, nextval('{self._sequence_name}'))"
        )
        delete = f"DELETE FROM {self.table_name} WHERE key = ?"
        try:
            self.con.execute("BEGIN TRANSACTION")
            for key, value in writes.items():
                if value is None:
                    self.con.execute(delete, [key])
                else:
                    self.con.execute(upsert, [key, value])
            self.con.execute("COMMIT")
        except duckdb.Error as e:
            logger.error(f"Failed to put to world state: {e}")
            self._rollback()
            raise BackendError(f"failed to put to world state: {e}") from e
        except Exception:
            self._rollback()
            raise

    def _rollback(self) -> None:
        try:
            self.con.execute("ROLLBACK")
        except duckdb.Error as e:
            # Nothing to roll back when BEGIN itself failed
            logger.debug(f"DuckDB rollback after failed write: {e}")
