"""
SQLite implementation of the note store.

Notes are stored as camelCase JSON documents, the same form the withdrawal
tooling exchanges, next to a few indexed columns used for lookups.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path

from stealth_pool.subspecs.pool import Note
from stealth_pool.types import Bytes20, NoteNotFound

from .namespaces import ALL_NAMESPACES, NOTES, SCAN_CHECKPOINTS


class SQLiteNoteStore:
    """
    SQLite implementation of the NoteStore protocol.

    Stores notes and scan checkpoints in a single SQLite file.
    """

    def __init__(self, path: Path | str) -> None:
        """
        Initialize SQLite storage.

        Creates the database file and tables if they don't exist.

        Args:
            path: Path to SQLite database file.
                  Use ":memory:" for in-memory database.
        """
        self._path = Path(path) if isinstance(path, str) else path

        self._conn = sqlite3.connect(
            str(self._path),
            check_same_thread=False,
        )

        # Row factory enables dict-like access: row["column_name"].
        self._conn.row_factory = sqlite3.Row

        self._init_schema()

    def _init_schema(self) -> None:
        """Create tables if they don't exist."""
        cursor = self._conn.cursor()
        for namespace in ALL_NAMESPACES:
            cursor.execute(namespace.CREATE_TABLE)
        cursor.execute(NOTES.CREATE_INDEX)
        self._conn.commit()

    # -------------------------------------------------------------------------
    # Note Operations
    # -------------------------------------------------------------------------

    def put_note(self, note: Note) -> None:
        """Store a note, replacing any note with the same commitment."""
        cursor = self._conn.cursor()
        cursor.execute(
            f"""
            INSERT OR REPLACE INTO {NOTES.TABLE_NAME}
                (commitment, pool_address, leaf_index, data)
            VALUES (?, ?, ?, ?)
            """,
            (
                str(note.commitment),
                bytes(note.pool_address),
                note.leaf_index,
                note.model_dump_json(by_alias=True),
            ),
        )
        self._conn.commit()

    def get_note(self, commitment: int) -> Note | None:
        """Retrieve a note by its commitment."""
        cursor = self._conn.cursor()
        cursor.execute(
            f"SELECT data FROM {NOTES.TABLE_NAME} WHERE commitment = ?",
            (str(commitment),),
        )
        row = cursor.fetchone()
        if row is None:
            return None
        return Note.model_validate_json(row["data"])

    def list_notes(self, pool_address: Bytes20 | None = None) -> list[Note]:
        """List stored notes, oldest first."""
        cursor = self._conn.cursor()
        if pool_address is None:
            cursor.execute(f"SELECT data FROM {NOTES.TABLE_NAME} ORDER BY rowid")
        else:
            cursor.execute(
                f"SELECT data FROM {NOTES.TABLE_NAME} WHERE pool_address = ? ORDER BY rowid",
                (bytes(pool_address),),
            )
        return [Note.model_validate_json(row["data"]) for row in cursor.fetchall()]

    def mark_leaf_index(self, commitment: int, leaf_index: int) -> Note:
        """Record where a note's deposit landed in the tree."""
        note = self.get_note(commitment)
        if note is None:
            raise NoteNotFound(commitment)

        updated = note.model_copy(update={"leaf_index": leaf_index})
        cursor = self._conn.cursor()
        cursor.execute(
            f"UPDATE {NOTES.TABLE_NAME} SET leaf_index = ?, data = ? WHERE commitment = ?",
            (leaf_index, updated.model_dump_json(by_alias=True), str(commitment)),
        )
        self._conn.commit()
        return updated

    def delete_note(self, commitment: int) -> bool:
        """Remove a note."""
        cursor = self._conn.cursor()
        cursor.execute(
            f"DELETE FROM {NOTES.TABLE_NAME} WHERE commitment = ?",
            (str(commitment),),
        )
        self._conn.commit()
        return cursor.rowcount > 0

    # -------------------------------------------------------------------------
    # Scan Checkpoint Operations
    # -------------------------------------------------------------------------

    def get_scan_checkpoint(self, source: str) -> int | None:
        """Highest block fully scanned for `source`, or None."""
        cursor = self._conn.cursor()
        cursor.execute(
            f"SELECT block_number FROM {SCAN_CHECKPOINTS.TABLE_NAME} WHERE source = ?",
            (source,),
        )
        row = cursor.fetchone()
        return None if row is None else int(row["block_number"])

    def put_scan_checkpoint(self, source: str, block_number: int) -> None:
        """Record scan progress for `source`."""
        cursor = self._conn.cursor()
        cursor.execute(
            f"""
            INSERT OR REPLACE INTO {SCAN_CHECKPOINTS.TABLE_NAME} (source, block_number)
            VALUES (?, ?)
            """,
            (source, block_number),
        )
        self._conn.commit()

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def close(self) -> None:
        """Close database connection."""
        self._conn.close()

    def __enter__(self) -> SQLiteNoteStore:
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.close()
