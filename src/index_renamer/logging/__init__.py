"""Structured logging utilities."""

from .journal import JsonlMigrationJournal, MigrationEvent, new_run_id, utc_timestamp

__all__ = ["JsonlMigrationJournal", "MigrationEvent", "new_run_id", "utc_timestamp"]
