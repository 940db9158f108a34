"""Input bus connecting the hosting environment to the interaction core."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from functools import cached_property

from reactivex.subject import Subject

from lovenote.utilities.logging import get_logger

logger = get_logger(__name__)

HEART_ELEMENT = "heart"
APP_CONTAINER = "app-container"


class PointerEventType(StrEnum):
    MOVE = "pointermove"
    DOWN = "pointerdown"
    UP = "pointerup"
    CLICK = "click"


@dataclass(frozen=True, slots=True)
class PointerEvent:
    """Raw pointer input in window coordinates.

    ``path`` lists the elements under the pointer from the innermost one
    outwards, so containment checks do not need a live element tree.
    """

    client_x: float
    client_y: float
    path: tuple[str, ...] = ()

    def originated_in(self, element: str) -> bool:
        return element in self.path


class InputBus:
    """Per-session dispatcher the host feeds and the core subscribes to."""

    @cached_property
    def pointer_moves(self) -> Subject[PointerEvent]:
        return Subject()

    @cached_property
    def pointer_downs(self) -> Subject[PointerEvent]:
        return Subject()

    @cached_property
    def pointer_ups(self) -> Subject[PointerEvent]:
        return Subject()

    @cached_property
    def clicks(self) -> Subject[PointerEvent]:
        return Subject()

    @cached_property
    def frames(self) -> Subject[float]:
        """Emits the elapsed milliseconds of every rendered frame."""

        return Subject()

    def submit(self, event_type: PointerEventType, event: PointerEvent) -> None:
        match event_type:
            case PointerEventType.MOVE:
                self.pointer_moves.on_next(event)
            case PointerEventType.DOWN:
                self.pointer_downs.on_next(event)
            case PointerEventType.UP:
                self.pointer_ups.on_next(event)
            case PointerEventType.CLICK:
                self.clicks.on_next(event)

    def frame(self, elapsed_ms: float) -> None:
        self.frames.on_next(elapsed_ms)

    def close(self) -> None:
        logger.debug("Closing input bus streams.")
        for subject in (
            self.pointer_moves,
            self.pointer_downs,
            self.pointer_ups,
            self.clicks,
            self.frames,
        ):
            subject.on_completed()
