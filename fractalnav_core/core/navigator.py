from __future__ import annotations

import logging
from pathlib import Path
import time
from typing import Callable, TypeVar

from fractalnav_core.render.base import Renderer
from fractalnav_core.render.escape_time import EscapeTimeRenderer
from fractalnav_core.render.export import Exporter, ImageExporter
from fractalnav_core.targets.base import DrawTarget

from .config import NavigatorConfig
from .coordinates import to_plane
from .events import ChangeReason, EventBus, PointSelected, ViewportChanged
from .pan import PanEngine
from .repaint import AuditLogger, FrameOutcome, RepaintScheduler, TaskExecutor
from .selection import SelectionRect, SelectionZoomEngine
from .undo import UndoManager
from .viewport import Viewport

LOGGER = logging.getLogger(__name__)
E = TypeVar("E")


class Navigator:
    """Viewport state and gestures exposed to a UI layer.

    All methods are expected to be called from one interaction thread. Only
    rendering runs elsewhere, on snapshots handed out by the repaint scheduler.
    Render events are published from the render worker thread.
    """

    def __init__(
        self,
        config: NavigatorConfig | None = None,
        *,
        renderer: Renderer | None = None,
        exporter: Exporter | None = None,
        executor: TaskExecutor | None = None,
        events: EventBus | None = None,
        audit_logger: AuditLogger | None = None,
    ) -> None:
        self.config = config or NavigatorConfig()
        bounds = self.config.initial_bounds
        self.viewport = Viewport(
            bounds.x_min,
            bounds.x_max,
            bounds.y_min,
            bounds.y_max,
            width=self.config.width,
            height=self.config.height,
        )
        self.viewport.resize(self.config.width, self.config.height)
        self.events = events or EventBus()
        self._audit_logger = audit_logger
        self._renderer = renderer or EscapeTimeRenderer(
            max_iterations=self.config.max_iterations,
            escape_radius=self.config.escape_radius,
        )
        self._exporter = exporter or ImageExporter(self._renderer)
        self._undo = UndoManager(capacity=self.config.history_capacity)
        self._zoom = SelectionZoomEngine(self.viewport)
        self._pan = PanEngine(self.viewport)
        self._scheduler = RepaintScheduler(
            self._renderer,
            executor=executor,
            events=self.events,
            audit_logger=audit_logger,
            preserve_aspect_on_stale=self.config.preserve_aspect_on_stale,
        )
        self._selection: SelectionRect | None = None
        self._pan_gesture_recorded = False

    @property
    def scheduler(self) -> RepaintScheduler:
        return self._scheduler

    @property
    def history(self) -> UndoManager:
        return self._undo

    @property
    def selection(self) -> SelectionRect | None:
        return self._selection

    def subscribe(self, event_type: type[E], handler: Callable[[E], None]) -> Callable[[], None]:
        return self.events.subscribe(event_type, handler)

    def resize(self, width: float, height: float) -> bool:
        changed = self.viewport.resize(width, height)
        if changed:
            revision = self._scheduler.mark_dirty()
            self._audit("resize", revision, width=self.viewport.width, height=self.viewport.height)
        return changed

    def start_selection(self, x: float, y: float) -> None:
        self._selection = SelectionRect(x=x, y=y)

    def update_selection(self, dx: float, dy: float) -> None:
        if self._selection is None:
            LOGGER.debug("update_selection ignored without an active selection")
            return
        self._selection = self._selection.grow(dx, dy)

    def cancel_selection(self) -> None:
        self._selection = None

    def finalize_selection(self) -> bool:
        rect = self._selection
        self._selection = None
        if rect is None:
            return False
        if self._zoom.finalize(rect, self._undo) is None:
            return False
        self._after_change("zoom")
        return True

    def pan(self, dx: float, dy: float) -> bool:
        before = self.viewport.snapshot()
        if self._pan.apply(dx, dy) is None:
            return False
        if self.config.record_pan_history and not self._pan_gesture_recorded:
            self._undo.push(before)
            self._pan_gesture_recorded = True
        self._after_change("pan")
        return True

    def end_pan(self) -> None:
        self._pan_gesture_recorded = False

    def can_undo(self) -> bool:
        return self._undo.can_undo()

    def can_redo(self) -> bool:
        return self._undo.can_redo()

    def undo(self) -> bool:
        previous = self._undo.undo(current=self.viewport.snapshot())
        if previous is None:
            return False
        self.viewport.restore(previous)
        self._selection = None
        self._after_change("undo")
        return True

    def redo(self) -> bool:
        following = self._undo.redo(current=self.viewport.snapshot())
        if following is None:
            return False
        self.viewport.restore(following)
        self._selection = None
        self._after_change("redo")
        return True

    def point_clicked(self, x: float, y: float) -> complex:
        point = to_plane(x, y, self.viewport)
        self.events.publish(PointSelected(point=point))
        return point

    def frame(self, target: DrawTarget) -> FrameOutcome:
        return self._scheduler.on_frame(self.viewport, target)

    def export(self, path: str | Path) -> Path:
        snapshot = self.viewport.view_snapshot()
        cached = self._scheduler.cached_image
        rgba = cached.rgba if cached is not None and cached.snapshot == snapshot else None
        out_path = self._exporter.export(snapshot, path, rgba=rgba)
        self._audit("export", self._scheduler.revision, path=str(out_path), reused_frame=rgba is not None)
        return out_path

    def close(self) -> None:
        self._scheduler.shutdown()

    def _after_change(self, reason: ChangeReason) -> None:
        if reason != "pan":
            self._pan_gesture_recorded = False
        if reason in ("zoom", "pan"):
            self._undo.clear_redo()
        revision = self._scheduler.mark_dirty()
        bounds = self.viewport.snapshot()
        self._audit(
            reason,
            revision,
            x_min=bounds.x_min,
            x_max=bounds.x_max,
            y_min=bounds.y_min,
            y_max=bounds.y_max,
        )
        self.events.publish(ViewportChanged(bounds=bounds, reason=reason))

    def _audit(self, action: str, revision: int, **payload: object) -> None:
        if self._audit_logger is None:
            return
        entry: dict[str, object] = {
            "ts_ns": time.time_ns(),
            "action": action,
            "source": "navigator",
            "revision": revision,
        }
        entry.update(payload)
        self._audit_logger(entry)
