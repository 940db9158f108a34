from __future__ import annotations

import colorsys
from dataclasses import dataclass
from typing import Iterator


@dataclass(slots=True, frozen=True)
class Color:
    r: int
    g: int
    b: int

    @staticmethod
    def rose() -> "Color":
        return Color(r=255, g=77, b=136)

    @staticmethod
    def blush() -> "Color":
        return Color(r=255, g=225, b=236)

    @staticmethod
    def white() -> "Color":
        return Color(r=255, g=255, b=255)

    @classmethod
    def from_hsl(cls, hue: float, saturation: float, lightness: float) -> "Color":
        """Build a color from CSS-style HSL: degrees, percent, percent."""

        r, g, b = colorsys.hls_to_rgb(
            (hue % 360) / 360.0,
            min(max(lightness, 0.0), 100.0) / 100.0,
            min(max(saturation, 0.0), 100.0) / 100.0,
        )
        return cls(r=_clamp_rgb(r * 255), g=_clamp_rgb(g * 255), b=_clamp_rgb(b * 255))

    def __post_init__(self) -> None:
        for variant in self.tuple():
            assert 0 <= variant <= 255, (
                f"Expected all color values to be between 0 and 255. Found {self.tuple()}"
            )

    def tuple(self) -> tuple[int, int, int]:
        return (self.r, self.g, self.b)

    def rgba(self, alpha: float) -> tuple[int, int, int, int]:
        return (self.r, self.g, self.b, _clamp_rgb(alpha * 255))

    def __iter__(self) -> Iterator[int]:
        return iter(self.tuple())

    def dim(self, fraction: float) -> "Color":
        return Color(
            r=_clamp_rgb(self.r * (1 - fraction)),
            g=_clamp_rgb(self.g * (1 - fraction)),
            b=_clamp_rgb(self.b * (1 - fraction)),
        )

    def mix(self, other: "Color", fraction: float) -> "Color":
        return Color(
            r=_clamp_rgb(self.r + (other.r - self.r) * fraction),
            g=_clamp_rgb(self.g + (other.g - self.g) * fraction),
            b=_clamp_rgb(self.b + (other.b - self.b) * fraction),
        )


def _clamp_rgb(value: float) -> int:
    return min(255, max(0, int(round(value))))
