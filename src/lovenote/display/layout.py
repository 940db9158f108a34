from __future__ import annotations

from dataclasses import dataclass

from lovenote.core.events import APP_CONTAINER, HEART_ELEMENT
from lovenote.core.tilt import BoundingBox

HEART_ASPECT = 430 / 500  # viewBox height / width
HEART_WIDTH_FRACTION = 0.5
HEART_CENTER_Y_FRACTION = 0.36


@dataclass(frozen=True, slots=True)
class SceneLayout:
    """Window geometry shared by the renderer and the event pump."""

    width: int
    height: int

    @property
    def viewport(self) -> BoundingBox:
        return BoundingBox(top=0, left=0, width=self.width, height=self.height)

    @property
    def heart_box(self) -> BoundingBox:
        heart_width = min(self.width, self.height) * HEART_WIDTH_FRACTION
        heart_height = heart_width * HEART_ASPECT
        return BoundingBox(
            top=self.height * HEART_CENTER_Y_FRACTION - heart_height / 2,
            left=(self.width - heart_width) / 2,
            width=heart_width,
            height=heart_height,
        )

    def element_path(self, x: float, y: float) -> tuple[str, ...]:
        """Elements under ``(x, y)``, innermost first."""

        if self.heart_box.contains(x, y):
            return (HEART_ELEMENT, APP_CONTAINER)
        return (APP_CONTAINER,)


class LayoutHolder:
    """Current layout of the mounted window, or ``None`` before mounting."""

    def __init__(self, layout: SceneLayout | None = None) -> None:
        self.layout = layout

    def heart_box(self) -> BoundingBox | None:
        if self.layout is None:
            return None
        return self.layout.heart_box

    def viewport(self) -> BoundingBox:
        if self.layout is None:
            return BoundingBox(top=0, left=0, width=0, height=0)
        return self.layout.viewport

    def element_path(self, x: float, y: float) -> tuple[str, ...]:
        if self.layout is None:
            return ()
        return self.layout.element_path(x, y)
