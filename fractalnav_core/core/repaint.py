from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
import logging
import threading
import time
from typing import Any, Callable, Literal, Protocol

import torch

from fractalnav_core.render.base import RenderedImage, Renderer, allocate_buffer, validate_rgba
from fractalnav_core.render.frame_pipeline import fit_cached_image
from fractalnav_core.targets.base import DrawTarget

from .events import EventBus, RenderCompleted, RenderFailed
from .viewport import ViewSnapshot, Viewport

LOGGER = logging.getLogger(__name__)

RenderState = Literal["idle", "rendering", "stale"]
AuditLogger = Callable[[dict[str, object]], None]


class TaskExecutor(Protocol):
    def submit(self, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Future: ...


@dataclass(frozen=True)
class FrameOutcome:
    revision: int
    state: RenderState
    dispatched: bool
    drew_cached: bool


@dataclass(frozen=True)
class _RenderTask:
    revision: int
    snapshot: ViewSnapshot


class RepaintScheduler:
    """Decides when the view needs a new render and tracks the task producing it.

    Every mutation bumps ``revision`` through ``mark_dirty``. A task carries the
    revision it was dispatched for and its result is installed only if that
    revision is still the latest; anything older is discarded on completion.
    ``on_frame`` never waits for a task.
    """

    def __init__(
        self,
        renderer: Renderer,
        *,
        executor: TaskExecutor | None = None,
        events: EventBus | None = None,
        audit_logger: AuditLogger | None = None,
        preserve_aspect_on_stale: bool = True,
    ) -> None:
        self._renderer = renderer
        self._owns_executor = executor is None
        self._executor: TaskExecutor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="fractalnav-render"
        )
        self._events = events
        self._audit_logger = audit_logger
        self._preserve_aspect_on_stale = preserve_aspect_on_stale
        self._lock = threading.Lock()
        self._idle_cv = threading.Condition(self._lock)
        self._dirty = True
        self._revision = 0
        self._state: RenderState = "idle"
        self._in_flight: _RenderTask | None = None
        self._cached: RenderedImage | None = None
        self._last_error: BaseException | None = None
        self._discarded = 0
        self._active_tasks = 0

    @property
    def revision(self) -> int:
        with self._lock:
            return self._revision

    @property
    def state(self) -> RenderState:
        with self._lock:
            return self._state

    @property
    def dirty(self) -> bool:
        with self._lock:
            return self._dirty

    @property
    def cached_image(self) -> RenderedImage | None:
        with self._lock:
            return self._cached

    @property
    def discarded_renders(self) -> int:
        with self._lock:
            return self._discarded

    @property
    def last_error(self) -> BaseException | None:
        with self._lock:
            return self._last_error

    def mark_dirty(self) -> int:
        with self._lock:
            self._dirty = True
            self._revision += 1
            if self._state == "rendering":
                self._state = "stale"
            return self._revision

    def needs_repaint(self, viewport: Viewport, cached_dims: tuple[int, int] | None = None) -> bool:
        """True if dirty or the cached image size differs from the viewport's pixel size.

        ``cached_dims`` defaults to the dimensions of the scheduler's own cache.
        """
        with self._lock:
            if self._dirty:
                return True
            if cached_dims is None:
                if self._cached is None:
                    return True
                cached_dims = (self._cached.width, self._cached.height)
        return tuple(cached_dims) != viewport.pixel_size

    def on_frame(self, viewport: Viewport, target: DrawTarget) -> FrameOutcome:
        snapshot = viewport.view_snapshot()
        with self._lock:
            revision = self._revision
            cached = self._cached
            needs = self._dirty or cached is None or (cached.width, cached.height) != snapshot.pixel_size
            in_flight = self._in_flight
            covered = in_flight is not None and in_flight.revision == revision and in_flight.snapshot == snapshot
            dispatch = needs and not covered
            if dispatch:
                if in_flight is not None:
                    LOGGER.debug(
                        "render for revision %d superseded by revision %d", in_flight.revision, revision
                    )
                task = _RenderTask(revision=revision, snapshot=snapshot)
                self._in_flight = task
                self._state = "rendering"
                # Any later mutation, or a failure of this task, re-arms the flag.
                self._dirty = False
                self._active_tasks += 1

        if dispatch:
            try:
                self._executor.submit(self._run_task, task)
            except RuntimeError:
                with self._idle_cv:
                    self._active_tasks -= 1
                    if self._in_flight is task:
                        self._in_flight = None
                        self._state = "idle"
                        self._dirty = True
                    self._idle_cv.notify_all()
                raise
            with self._lock:
                state = self._state
            return FrameOutcome(revision=revision, state=state, dispatched=True, drew_cached=False)

        drew = self._draw_cached(cached, snapshot, target)
        with self._lock:
            state = self._state
        return FrameOutcome(revision=revision, state=state, dispatched=False, drew_cached=drew)

    def wait_idle(self, timeout: float | None = None) -> bool:
        """Block until no render is in flight. For headless use, never from a UI frame."""
        deadline = None if timeout is None else time.monotonic() + timeout
        with self._idle_cv:
            while self._in_flight is not None or self._active_tasks > 0:
                remaining = None if deadline is None else deadline - time.monotonic()
                if remaining is not None and remaining <= 0:
                    return False
                self._idle_cv.wait(timeout=remaining)
            return True

    def shutdown(self) -> None:
        if self._owns_executor and isinstance(self._executor, ThreadPoolExecutor):
            self._executor.shutdown(wait=False, cancel_futures=True)

    def _draw_cached(self, cached: RenderedImage | None, snapshot: ViewSnapshot, target: DrawTarget) -> bool:
        width, height = snapshot.pixel_size
        if cached is None:
            target.draw_placeholder(width, height)
            return False
        rgba = fit_cached_image(
            cached.rgba,
            target_w=width,
            target_h=height,
            preserve_aspect_ratio=self._preserve_aspect_on_stale,
        )
        target.draw_image(rgba, cached.revision)
        return True

    def _run_task(self, task: _RenderTask) -> None:
        try:
            try:
                rgba = self._renderer.render(task.snapshot, allocate_buffer(task.snapshot))
                rgba = validate_rgba(rgba, task.snapshot)
            except Exception as exc:  # noqa: BLE001
                self._finish_failed(task, exc)
                return
            self._finish(task, rgba)
        finally:
            with self._idle_cv:
                self._active_tasks -= 1
                self._idle_cv.notify_all()

    def _finish(self, task: _RenderTask, rgba: torch.Tensor) -> None:
        installed = False
        with self._idle_cv:
            if self._in_flight is task:
                self._in_flight = None
                self._state = "idle"
                if task.revision == self._revision:
                    self._cached = RenderedImage(revision=task.revision, snapshot=task.snapshot, rgba=rgba)
                    installed = True
                else:
                    self._discarded += 1
                self._idle_cv.notify_all()
            else:
                self._discarded += 1
        if not installed:
            LOGGER.debug("discarded stale render for revision %d", task.revision)
            return
        width, height = task.snapshot.pixel_size
        self._audit("render_completed", task.revision, width=width, height=height)
        if self._events is not None:
            self._events.publish(RenderCompleted(revision=task.revision, width=width, height=height))

    def _finish_failed(self, task: _RenderTask, exc: BaseException) -> None:
        LOGGER.exception("render for revision %d failed: %s", task.revision, exc)
        with self._idle_cv:
            self._last_error = exc
            if self._in_flight is task:
                self._in_flight = None
                self._state = "idle"
                # Re-arm so a later frame retries; the cached image stays on screen meanwhile.
                self._dirty = True
                self._idle_cv.notify_all()
        self._audit("render_failed", task.revision, error=repr(exc))
        if self._events is not None:
            self._events.publish(RenderFailed(revision=task.revision, error=exc))

    def _audit(self, action: str, revision: int, **payload: object) -> None:
        if self._audit_logger is None:
            return
        entry: dict[str, object] = {
            "ts_ns": time.time_ns(),
            "action": action,
            "source": "repaint_scheduler",
            "revision": revision,
        }
        entry.update(payload)
        self._audit_logger(entry)
