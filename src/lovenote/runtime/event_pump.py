from __future__ import annotations

import pygame

from lovenote.core.events import InputBus, PointerEvent, PointerEventType
from lovenote.display.layout import LayoutHolder, SceneLayout
from lovenote.utilities.logging import get_logger

logger = get_logger(__name__)

PRIMARY_BUTTON = 1


def _common_ancestors(first: tuple[str, ...], second: tuple[str, ...]) -> tuple[str, ...]:
    """Shared outer part of two element paths, innermost first."""

    shared: list[str] = []
    for a, b in zip(reversed(first), reversed(second)):
        if a != b:
            break
        shared.append(a)
    return tuple(reversed(shared))


class EventPump:
    """Translate pygame events into pointer events on the input bus.

    A click is emitted after a primary-button release that followed a
    press, targeted at the innermost element both ends had in common.
    """

    def __init__(self, bus: InputBus, layout: LayoutHolder) -> None:
        self._bus = bus
        self._layout = layout
        self._pressed_path: tuple[str, ...] | None = None

    def pump(self, running: bool) -> bool:
        for event in pygame.event.get():
            running = self.handle(event, running)
        return running

    def handle(self, event: pygame.event.Event, running: bool = True) -> bool:
        if event.type == pygame.QUIT:
            return False
        if event.type == pygame.VIDEORESIZE:
            logger.info("Window resized to %dx%d", event.w, event.h)
            self._layout.layout = SceneLayout(width=event.w, height=event.h)
        elif event.type == pygame.MOUSEMOTION:
            self._submit(PointerEventType.MOVE, event.pos)
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == PRIMARY_BUTTON:
            pointer = self._submit(PointerEventType.DOWN, event.pos)
            self._pressed_path = pointer.path
        elif event.type == pygame.MOUSEBUTTONUP and event.button == PRIMARY_BUTTON:
            pointer = self._submit(PointerEventType.UP, event.pos)
            if self._pressed_path is not None:
                path = _common_ancestors(self._pressed_path, pointer.path)
                self._pressed_path = None
                if path:
                    self._bus.submit(
                        PointerEventType.CLICK,
                        PointerEvent(client_x=pointer.client_x, client_y=pointer.client_y, path=path),
                    )
        return running

    def _submit(self, event_type: PointerEventType, pos: tuple[int, int]) -> PointerEvent:
        x, y = pos
        pointer = PointerEvent(client_x=x, client_y=y, path=self._layout.element_path(x, y))
        self._bus.submit(event_type, pointer)
        return pointer
