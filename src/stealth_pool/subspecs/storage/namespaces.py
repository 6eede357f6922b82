"""
Database namespace definitions for storage tables.

Defines table names and schema constants for SQLite storage.
Each namespace represents a logical grouping of related data.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class NoteNamespace:
    """
    Namespace for deposit notes.

    Notes are keyed by commitment. Commitments are 254-bit values, wider
    than an SQLite INTEGER, so they are stored as decimal text.
    """

    TABLE_NAME: str = "notes"
    """Table name for note storage."""

    CREATE_TABLE: str = """
        CREATE TABLE IF NOT EXISTS notes (
            commitment TEXT PRIMARY KEY,
            pool_address BLOB NOT NULL,
            leaf_index INTEGER,
            data TEXT NOT NULL
        )
    """
    """SQL to create notes table."""

    CREATE_INDEX: str = """
        CREATE INDEX IF NOT EXISTS idx_notes_pool ON notes(pool_address)
    """
    """SQL to create pool index."""


@dataclass(frozen=True, slots=True)
class ScanCheckpointNamespace:
    """
    Namespace for scanner progress.

    One row per scan source: the highest block fully scanned.
    """

    TABLE_NAME: str = "scan_checkpoints"
    """Table name for scan checkpoints."""

    CREATE_TABLE: str = """
        CREATE TABLE IF NOT EXISTS scan_checkpoints (
            source TEXT PRIMARY KEY,
            block_number INTEGER NOT NULL
        )
    """
    """SQL to create scan checkpoints table."""


# Singleton instances for convenient access
NOTES = NoteNamespace()
SCAN_CHECKPOINTS = ScanCheckpointNamespace()

ALL_NAMESPACES = [NOTES, SCAN_CHECKPOINTS]
"""All namespace definitions for schema initialization."""
