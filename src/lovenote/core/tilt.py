from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import reactivex
from reactivex import operators as ops

from lovenote.core.events import PointerEvent
from lovenote.utilities.logging import get_logger
from lovenote.utilities.numeric import clamp

logger = get_logger(__name__)

DEFAULT_TILT_STRENGTH = 20.0
DEFAULT_BOUNDS_PADDING = 0.0


@dataclass(frozen=True, slots=True)
class BoundingBox:
    top: float
    left: float
    width: float
    height: float

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def center(self) -> tuple[float, float]:
        return (self.left + self.width / 2, self.top + self.height / 2)

    def expand(self, padding: float) -> BoundingBox:
        return BoundingBox(
            top=self.top - padding,
            left=self.left - padding,
            width=self.width + padding * 2,
            height=self.height + padding * 2,
        )

    def contains(self, x: float, y: float) -> bool:
        return self.left <= x <= self.right and self.top <= y <= self.bottom


@dataclass(frozen=True, slots=True)
class TiltVector:
    """Rotation in degrees around the screen X and Y axes."""

    x: float = 0.0
    y: float = 0.0


def compute_tilt(
    bounds: BoundingBox,
    client_x: float,
    client_y: float,
    tilt_strength: float,
) -> TiltVector:
    clamped_y = clamp(client_y, bounds.top, bounds.bottom)
    clamped_x = clamp(client_x, bounds.left, bounds.right)
    return TiltVector(
        x=-(clamped_y - bounds.top - bounds.height / 2) / bounds.height * tilt_strength,
        y=(clamped_x - bounds.left - bounds.width / 2) / bounds.width * tilt_strength,
    )


class PointerTiltTracker:
    """Turn pointer positions into a bounded rotation of a reference element.

    ``reference`` returns the element's box, or ``None`` while it is not
    mounted; ``viewport`` is used instead whenever ``bounds_padding`` is
    not positive.
    """

    def __init__(
        self,
        *,
        reference: Callable[[], BoundingBox | None],
        viewport: Callable[[], BoundingBox],
        tilt_strength: float = DEFAULT_TILT_STRENGTH,
        bounds_padding: float = DEFAULT_BOUNDS_PADDING,
    ) -> None:
        self._reference = reference
        self._viewport = viewport
        self._tilt_strength = tilt_strength
        self._bounds_padding = bounds_padding
        self._vector = TiltVector()

    @property
    def vector(self) -> TiltVector:
        return self._vector

    def bounds(self) -> BoundingBox | None:
        box = self._reference()
        if box is None:
            return None
        if self._bounds_padding > 0:
            return box.expand(self._bounds_padding)
        return self._viewport()

    def update(self, event: PointerEvent) -> TiltVector:
        bounds = self.bounds()
        if bounds is None or bounds.width <= 0 or bounds.height <= 0:
            logger.debug("No usable reference bounds; keeping tilt %s", self._vector)
            return self._vector
        self._vector = compute_tilt(
            bounds, event.client_x, event.client_y, self._tilt_strength
        )
        return self._vector

    def observe(
        self,
        pointer_moves: reactivex.Observable[PointerEvent],
        frames: reactivex.Observable[float],
    ) -> reactivex.Observable[TiltVector]:
        """Recompute at most once per frame from the latest pointer move."""

        return pointer_moves.pipe(
            ops.sample(frames),
            ops.map(self.update),
            ops.distinct_until_changed(),
        )
