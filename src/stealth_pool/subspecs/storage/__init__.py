"""
Storage module for wallet-side persistence.

Keeps deposit notes and scanner progress on the local machine.
Uses SQLite for simplicity and correctness.
"""

from .database import NoteStore
from .namespaces import NoteNamespace, ScanCheckpointNamespace
from .sqlite import SQLiteNoteStore

__all__ = [
    "NoteStore",
    "SQLiteNoteStore",
    "NoteNamespace",
    "ScanCheckpointNamespace",
]
