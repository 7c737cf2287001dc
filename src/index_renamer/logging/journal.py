"""Structured JSONL migration journal."""

from __future__ import annotations

import json
import uuid
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from pathlib import Path

EVENT_TYPES = (
    "run_started",
    "renamed",
    "specifier_rewritten",
    "saved",
    "run_failed",
    "run_completed",
)


@dataclass(slots=True, frozen=True)
class MigrationEvent:
    """One journaled step of a rename run."""

    timestamp: str
    run_id: str
    event: str
    path: str | None = None
    target: str | None = None
    metadata: dict[str, object] = field(default_factory=dict)


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_run_id() -> str:
    return f"run-{uuid.uuid4().hex[:12]}"


class JsonlMigrationJournal:
    """Append-only JSONL journal and bounded reader."""

    def __init__(self, path: Path, run_id: str | None = None) -> None:
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._run_id = run_id or new_run_id()

    @property
    def path(self) -> Path:
        """Return on-disk JSONL path."""
        return self._path

    @property
    def run_id(self) -> str:
        return self._run_id

    def record(
        self,
        event: str,
        path: Path | None = None,
        target: Path | None = None,
        **metadata: object,
    ) -> MigrationEvent:
        """Build, append and return an event for the current run."""
        if event not in EVENT_TYPES:
            raise ValueError(f"Unknown journal event: {event}")
        entry = MigrationEvent(
            timestamp=utc_timestamp(),
            run_id=self._run_id,
            event=event,
            path=str(path) if path is not None else None,
            target=str(target) if target is not None else None,
            metadata=dict(sorted(metadata.items())),
        )
        self.append(entry)
        return entry

    def append(self, event: MigrationEvent) -> None:
        """Append an event as one JSON object per line."""
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(asdict(event), sort_keys=True))
            handle.write("\n")

    def read(
        self,
        since: str | None = None,
        limit: int = 50,
        run_id: str | None = None,
    ) -> list[dict[str, object]]:
        """Read recent events, optionally filtered by timestamp lower bound and run."""
        if limit < 1:
            return []
        entries: list[dict[str, object]] = []
        if not self._path.exists():
            return entries
        with self._path.open("r", encoding="utf-8") as handle:
            for line in handle:
                stripped = line.strip()
                if not stripped:
                    continue
                try:
                    record = json.loads(stripped)
                except json.JSONDecodeError:
                    continue
                if since is not None:
                    ts = record.get("timestamp")
                    if not isinstance(ts, str) or ts < since:
                        continue
                if run_id is not None and record.get("run_id") != run_id:
                    continue
                entries.append(record)
        if len(entries) <= limit:
            return entries
        return entries[-limit:]
