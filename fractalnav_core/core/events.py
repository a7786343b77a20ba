from __future__ import annotations

from dataclasses import dataclass
import logging
import threading
from typing import Callable, Literal, TypeAlias, TypeVar

from .viewport import PlaneBounds

LOGGER = logging.getLogger(__name__)


ChangeReason = Literal["zoom", "pan", "undo", "redo"]


@dataclass(frozen=True)
class PointSelected:
    point: complex


@dataclass(frozen=True)
class ViewportChanged:
    bounds: PlaneBounds
    reason: ChangeReason


@dataclass(frozen=True)
class RenderCompleted:
    revision: int
    width: int
    height: int


@dataclass(frozen=True)
class RenderFailed:
    revision: int
    error: BaseException


NavigatorEvent: TypeAlias = PointSelected | ViewportChanged | RenderCompleted | RenderFailed
E = TypeVar("E")


class EventBus:
    """Typed publish/subscribe channel.

    Handlers run on the publishing thread. A failing handler is logged and the
    remaining handlers still receive the event.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._handlers: dict[type, list[Callable[[object], None]]] = {}

    def subscribe(self, event_type: type[E], handler: Callable[[E], None]) -> Callable[[], None]:
        with self._lock:
            self._handlers.setdefault(event_type, []).append(handler)  # type: ignore[arg-type]

        def unsubscribe() -> None:
            with self._lock:
                handlers = self._handlers.get(event_type, [])
                if handler in handlers:
                    handlers.remove(handler)  # type: ignore[arg-type]

        return unsubscribe

    def publish(self, event: NavigatorEvent) -> int:
        with self._lock:
            handlers = list(self._handlers.get(type(event), ()))
        delivered = 0
        for handler in handlers:
            try:
                handler(event)
                delivered += 1
            except Exception:  # noqa: BLE001
                LOGGER.exception("event handler failed for %s", type(event).__name__)
        return delivered

    def handler_count(self, event_type: type) -> int:
        with self._lock:
            return len(self._handlers.get(event_type, ()))
