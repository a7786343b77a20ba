from __future__ import annotations

from contextlib import closing
import json
from pathlib import Path
import sqlite3
import tempfile
import unittest

from fractalnav_core.core.audit import JsonlAuditSink, SQLiteAuditSink


def _entries() -> list[dict[str, object]]:
    return [
        {"ts_ns": 1, "action": "zoom", "source": "navigator", "revision": 1},
        {"ts_ns": 2, "action": "zoom", "source": "navigator", "revision": 2},
        {"ts_ns": 3, "action": "render_failed", "source": "repaint_scheduler", "revision": 2, "error": "boom"},
    ]


class AuditSinkTests(unittest.TestCase):
    def test_jsonl_sink_persists_event(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "audit.jsonl"
            sink = JsonlAuditSink(path)
            sink.log({"ts_ns": 1, "action": "pan", "source": "navigator", "revision": 4, "x_min": -2.5})
            rows = path.read_text(encoding="utf-8").strip().splitlines()
            self.assertEqual(len(rows), 1)
            payload = json.loads(rows[0])
            self.assertEqual(payload["action"], "pan")
            self.assertEqual(payload["x_min"], -2.5)

    def test_sqlite_sink_persists_event(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "audit.db"
            sink = SQLiteAuditSink(path)
            sink.log({"ts_ns": 2, "action": "undo", "source": "navigator", "revision": 7})
            with closing(sqlite3.connect(path)) as conn:
                row = conn.execute(
                    "SELECT action, source, revision FROM navigation_audit ORDER BY id DESC LIMIT 1"
                ).fetchone()
            sink.close()
            self.assertIsNotNone(row)
            assert row is not None
            self.assertEqual(row, ("undo", "navigator", 7))

    def test_jsonl_summarize_and_prune(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            sink = JsonlAuditSink(Path(td) / "audit.jsonl")
            for entry in _entries():
                sink.log(entry)
            summary = sink.summarize()
            self.assertEqual(summary["total"], 3)
            self.assertEqual(summary["by_action"]["zoom"], 2)
            self.assertEqual(summary["by_source"]["repaint_scheduler"], 1)
            self.assertEqual(summary["last_revision"], 2)
            self.assertEqual(sink.prune(max_rows=2), 1)
            self.assertEqual(sink.summarize()["total"], 2)

    def test_sqlite_summarize_and_prune(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            sink = SQLiteAuditSink(Path(td) / "audit.db")
            for entry in _entries():
                sink.log(entry)
            summary = sink.summarize()
            self.assertEqual(summary["total"], 3)
            self.assertEqual(summary["by_action"]["zoom"], 2)
            self.assertEqual(summary["last_revision"], 2)
            self.assertEqual(sink.prune(max_rows=2), 1)
            self.assertEqual(sink.summarize()["total"], 2)
            sink.close()

    def test_summary_of_missing_jsonl_is_empty(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            sink = JsonlAuditSink(Path(td) / "never_written.jsonl")
            self.assertEqual(sink.summarize()["total"], 0)
            self.assertEqual(sink.prune(max_rows=1), 0)


if __name__ == "__main__":
    unittest.main()
