from __future__ import annotations

import atexit
import json
from pathlib import Path
import sqlite3
import threading
from typing import Any


def _empty_summary() -> dict[str, Any]:
    return {"total": 0, "by_action": {}, "by_source": {}, "last_revision": None}


class JsonlAuditSink:
    """Appends navigation and render audit entries as JSON lines."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()

    def log(self, entry: dict[str, Any]) -> None:
        line = json.dumps(entry, separators=(",", ":"), sort_keys=True, default=str)
        with self._lock:
            with self.path.open("a", encoding="utf-8") as f:
                f.write(line)
                f.write("\n")

    def summarize(self) -> dict[str, Any]:
        summary = _empty_summary()
        if not self.path.exists():
            return summary
        with self._lock:
            lines = self.path.read_text(encoding="utf-8").splitlines()
        for line in lines:
            line = line.strip()
            if not line:
                continue
            try:
                row = json.loads(line)
            except json.JSONDecodeError:
                continue
            summary["total"] += 1
            action = str(row.get("action", ""))
            source = str(row.get("source", ""))
            summary["by_action"][action] = summary["by_action"].get(action, 0) + 1
            summary["by_source"][source] = summary["by_source"].get(source, 0) + 1
            revision = row.get("revision")
            if isinstance(revision, int):
                last = summary["last_revision"]
                summary["last_revision"] = revision if last is None else max(last, revision)
        return summary

    def prune(self, *, max_rows: int | None = None) -> int:
        if max_rows is None or max_rows <= 0 or not self.path.exists():
            return 0
        with self._lock:
            rows = [line for line in self.path.read_text(encoding="utf-8").splitlines() if line.strip()]
            if len(rows) <= max_rows:
                return 0
            kept = rows[-max_rows:]
            self.path.write_text("".join(row + "\n" for row in kept), encoding="utf-8")
        return len(rows) - len(kept)


class SQLiteAuditSink:
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._conn: sqlite3.Connection | None = sqlite3.connect(self.path, check_same_thread=False)
        self._init_db()
        atexit.register(self.close)

    def _init_db(self) -> None:
        self._conn.execute(
            """
            CREATE TABLE IF NOT EXISTS navigation_audit (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                ts_ns INTEGER,
                action TEXT,
                source TEXT,
                revision INTEGER,
                payload_json TEXT
            )
            """
        )
        self._conn.commit()

    def log(self, entry: dict[str, Any]) -> None:
        payload = json.dumps(entry, separators=(",", ":"), sort_keys=True, default=str)
        revision = entry.get("revision")
        with self._lock:
            if self._conn is None:
                return
            self._conn.execute(
                "INSERT INTO navigation_audit (ts_ns, action, source, revision, payload_json) VALUES (?, ?, ?, ?, ?)",
                (
                    int(entry.get("ts_ns", 0)),
                    str(entry.get("action", "")),
                    str(entry.get("source", "")),
                    int(revision) if isinstance(revision, int) else None,
                    payload,
                ),
            )
            self._conn.commit()

    def close(self) -> None:
        with self._lock:
            if self._conn is None:
                return
            self._conn.close()
            self._conn = None

    def summarize(self) -> dict[str, Any]:
        with self._lock:
            if self._conn is None:
                return _empty_summary()
            total = int(self._conn.execute("SELECT COUNT(*) FROM navigation_audit").fetchone()[0])
            by_action = {
                str(row[0]): int(row[1])
                for row in self._conn.execute("SELECT action, COUNT(*) FROM navigation_audit GROUP BY action")
            }
            by_source = {
                str(row[0]): int(row[1])
                for row in self._conn.execute("SELECT source, COUNT(*) FROM navigation_audit GROUP BY source")
            }
            last_revision = self._conn.execute("SELECT MAX(revision) FROM navigation_audit").fetchone()[0]
            return {
                "total": total,
                "by_action": by_action,
                "by_source": by_source,
                "last_revision": None if last_revision is None else int(last_revision),
            }

    def prune(self, *, max_rows: int | None = None) -> int:
        if max_rows is None or max_rows <= 0:
            return 0
        with self._lock:
            if self._conn is None:
                return 0
            total = int(self._conn.execute("SELECT COUNT(*) FROM navigation_audit").fetchone()[0])
            overflow = total - max_rows
            if overflow <= 0:
                return 0
            self._conn.execute(
                "DELETE FROM navigation_audit WHERE id IN (SELECT id FROM navigation_audit ORDER BY id ASC LIMIT ?)",
                (overflow,),
            )
            self._conn.commit()
            return overflow
