from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from fractalnav_core.core import (
    JsonlAuditSink,
    Navigator,
    NavigatorConfig,
    PointSelected,
    SQLiteAuditSink,
    load_config,
)
from fractalnav_core.core.viewport import ViewSnapshot
from fractalnav_core.render import EscapeTimeRenderer, ImageExporter
from fractalnav_core.targets import HeadlessDrawTarget

JULIA_BOUNDS = (-1.6, 1.6, -1.2, 1.2)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="fractalnav")
    parser.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Replay navigation gestures headless and export the result.")
    render.add_argument("--config", type=Path, default=None, help="TOML navigator config.")
    render.add_argument("--width", type=int, default=None)
    render.add_argument("--height", type=int, default=None)
    render.add_argument(
        "--select",
        dest="ops",
        action="append",
        type=_select_op,
        metavar="X,Y,W,H",
        help="Drag-select a screen rectangle and zoom into it. Repeatable; ops run in order.",
    )
    render.add_argument("--pan", dest="ops", action="append", type=_pan_op, metavar="DX,DY")
    render.add_argument("--undo", dest="ops", action="append_const", const=("undo",))
    render.add_argument("--redo", dest="ops", action="append_const", const=("redo",))
    render.add_argument("--click", type=_point_arg, default=None, metavar="X,Y", help="Pick a Julia constant.")
    render.add_argument("--out", type=Path, required=True, help="Image path; format follows the suffix.")
    render.add_argument("--julia-out", type=Path, default=None, help="Julia set image for the --click point.")
    render.add_argument("--timeout", type=float, default=120.0, help="Seconds to wait for the render worker.")
    render.add_argument("--audit-sqlite", type=Path, default=None)
    render.add_argument("--audit-jsonl", type=Path, default=None)

    report = sub.add_parser("audit-report", help="Print audit summary from SQLite or JSONL sink.")
    report.add_argument("--audit-sqlite", type=Path, default=None)
    report.add_argument("--audit-jsonl", type=Path, default=None)

    prune = sub.add_parser("audit-prune", help="Prune old audit rows to max row count.")
    prune.add_argument("--audit-sqlite", type=Path, default=None)
    prune.add_argument("--audit-jsonl", type=Path, default=None)
    prune.add_argument("--max-rows", type=int, required=True)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="[%(asctime)s] %(name)s - %(levelname)s - %(message)s",
    )

    if args.command == "render":
        _run_render(args)
        return

    if args.command == "audit-report":
        audit_sink = _build_audit_sink(args.audit_sqlite, args.audit_jsonl)
        if audit_sink is None:
            raise RuntimeError("one of --audit-sqlite/--audit-jsonl is required")
        try:
            print(json.dumps(audit_sink.summarize(), indent=2, sort_keys=True))
        finally:
            if hasattr(audit_sink, "close"):
                audit_sink.close()
        return

    if args.command == "audit-prune":
        audit_sink = _build_audit_sink(args.audit_sqlite, args.audit_jsonl)
        if audit_sink is None:
            raise RuntimeError("one of --audit-sqlite/--audit-jsonl is required")
        try:
            deleted = audit_sink.prune(max_rows=args.max_rows)
            print(f"pruned rows={deleted}")
        finally:
            if hasattr(audit_sink, "close"):
                audit_sink.close()
        return

    raise RuntimeError(f"unsupported command: {args.command}")


def _run_render(args: argparse.Namespace) -> None:
    config = load_config(args.config) if args.config is not None else NavigatorConfig()
    audit_sink = _build_audit_sink(args.audit_sqlite, args.audit_jsonl)
    navigator = Navigator(config, audit_logger=audit_sink.log if audit_sink is not None else None)
    picked: list[complex] = []
    navigator.subscribe(PointSelected, lambda event: picked.append(event.point))
    try:
        width = args.width if args.width is not None else config.width
        height = args.height if args.height is not None else config.height
        navigator.resize(width, height)
        for op in args.ops or []:
            _apply_op(navigator, op)
        if args.click is not None:
            navigator.point_clicked(*args.click)

        target = HeadlessDrawTarget()
        navigator.frame(target)
        if not navigator.scheduler.wait_idle(timeout=args.timeout):
            raise RuntimeError(f"render did not finish within {args.timeout}s")
        if navigator.scheduler.cached_image is None:
            raise RuntimeError("render failed") from navigator.scheduler.last_error
        navigator.frame(target)

        out_path = navigator.export(args.out)
        vp = navigator.viewport
        print(
            f"render complete: x=[{vp.x_min:.12g}, {vp.x_max:.12g}] y=[{vp.y_min:.12g}, {vp.y_max:.12g}] "
            f"size={int(vp.width)}x{int(vp.height)} undo_depth={len(navigator.history)} out={out_path}"
        )
        if args.julia_out is not None:
            if not picked:
                raise RuntimeError("--julia-out requires --click")
            julia_path = _export_julia(picked[-1], config, int(vp.width), int(vp.height), args.julia_out)
            print(f"julia complete: c={picked[-1]} out={julia_path}")
    finally:
        navigator.close()
        if audit_sink is not None and hasattr(audit_sink, "close"):
            audit_sink.close()


def _apply_op(navigator: Navigator, op: tuple) -> None:
    kind = op[0]
    if kind == "select":
        _, x, y, w, h = op
        navigator.start_selection(x, y)
        navigator.update_selection(w, h)
        if not navigator.finalize_selection():
            logging.getLogger(__name__).warning("selection %s ignored", op[1:])
        return
    if kind == "pan":
        _, dx, dy = op
        navigator.pan(dx, dy)
        navigator.end_pan()
        return
    if kind == "undo":
        if not navigator.undo():
            logging.getLogger(__name__).warning("nothing to undo")
        return
    if kind == "redo":
        if not navigator.redo():
            logging.getLogger(__name__).warning("nothing to redo")
        return
    raise ValueError(f"unknown navigation op: {kind}")


def _export_julia(c: complex, config: NavigatorConfig, width: int, height: int, path: Path) -> Path:
    renderer = EscapeTimeRenderer(
        max_iterations=config.max_iterations,
        escape_radius=config.escape_radius,
        julia_c=c,
    )
    x_min, x_max, y_min, y_max = JULIA_BOUNDS
    snapshot = ViewSnapshot(x_min=x_min, x_max=x_max, y_min=y_min, y_max=y_max, width=width, height=height)
    return ImageExporter(renderer).export(snapshot, path)


def _floats(value: str, count: int, label: str) -> tuple[float, ...]:
    parts = [p.strip() for p in value.split(",")]
    if len(parts) != count:
        raise argparse.ArgumentTypeError(f"{label} expects {count} comma-separated numbers")
    try:
        return tuple(float(p) for p in parts)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"{label} expects numbers: {value}") from exc


def _select_op(value: str) -> tuple:
    return ("select", *_floats(value, 4, "--select"))


def _pan_op(value: str) -> tuple:
    return ("pan", *_floats(value, 2, "--pan"))


def _point_arg(value: str) -> tuple[float, float]:
    x, y = _floats(value, 2, "--click")
    return (x, y)


def _build_audit_sink(audit_sqlite: Path | None, audit_jsonl: Path | None):
    if audit_sqlite is not None:
        return SQLiteAuditSink(audit_sqlite)
    if audit_jsonl is not None:
        return JsonlAuditSink(audit_jsonl)
    return None


if __name__ == "__main__":
    main()
