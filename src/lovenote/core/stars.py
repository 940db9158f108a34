from __future__ import annotations

from dataclasses import dataclass

from lovenote.utilities.rng import RandomSource

STAR_COUNT = 12
STAR_DELAY_STEP_S = 0.3
SPARKLE = "sparkle"
STAR = "star"


@dataclass(frozen=True, slots=True)
class AmbientStar:
    size: float
    x_percent: float
    y_percent: float
    delay_s: float
    duration_s: float
    opacity: float
    glyph: str


def generate_stars(
    random_source: RandomSource, count: int = STAR_COUNT
) -> tuple[AmbientStar, ...]:
    r = random_source.random
    return tuple(
        AmbientStar(
            delay_s=i * STAR_DELAY_STEP_S,
            size=r() * 15 + 8,
            x_percent=r() * 100,
            y_percent=r() * 100,
            duration_s=r() * 4 + 4,
            opacity=r() * 0.4 + 0.1,
            glyph=SPARKLE if r() > 0.5 else STAR,
        )
        for i in range(count)
    )
