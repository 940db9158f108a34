from __future__ import annotations

import math
from dataclasses import dataclass, replace
from threading import RLock

import reactivex
from reactivex.subject import BehaviorSubject

from lovenote.core.events import HEART_ELEMENT, PointerEvent
from lovenote.core.perishable import PerishableStore
from lovenote.utilities.logging import get_logger
from lovenote.utilities.rng import RandomSource

logger = get_logger(__name__)

CLICKS_TO_ACTIVATE = 5
CONFETTI_COUNT = 50
CONFETTI_HUE = 334
CONFETTI_SPREAD = 400


@dataclass(frozen=True, slots=True)
class ActivationState:
    click_count: int = 0
    revealed: bool = False
    threshold: int = CLICKS_TO_ACTIVATE

    @property
    def progress(self) -> float:
        return min(self.click_count / self.threshold, 1.0)

    @property
    def remaining_clicks(self) -> int:
        return max(0, self.threshold - self.click_count)


@dataclass(frozen=True, slots=True)
class ConfettiPiece:
    top: float
    left: float
    width: float
    height: float
    end_x: float
    end_y: float
    start_rotation: float
    end_rotation: float
    duration_s: float
    color: tuple[int, int, int]  # hue, saturation %, lightness %
    start_scale: float

    @property
    def lifetime_ms(self) -> float:
        return self.duration_s * 1000


def build_confetti_piece(
    client_x: float, client_y: float, random_source: RandomSource
) -> ConfettiPiece:
    r = random_source.random
    duration = r() * 1.5 + 1
    size = r() * 15 + 10
    saturation = math.floor(r() * 30) + 70
    lightness = math.floor(r() * 30) + 50
    return ConfettiPiece(
        top=client_y - size / 2,
        left=client_x - size / 2,
        width=size,
        height=size,
        end_x=(r() - 0.5) * CONFETTI_SPREAD,
        end_y=(r() - 0.5) * CONFETTI_SPREAD,
        start_rotation=r() * 360,
        end_rotation=(r() - 0.5) * 1080,
        duration_s=duration,
        color=(CONFETTI_HUE, saturation, lightness),
        start_scale=r() + 0.5,
    )


class ClickActivationCounter:
    """Count screen clicks outside the heart and fire the reveal burst."""

    def __init__(
        self,
        *,
        confetti: PerishableStore[ConfettiPiece],
        random_source: RandomSource,
        threshold: int = CLICKS_TO_ACTIVATE,
        confetti_count: int = CONFETTI_COUNT,
        repeat_burst: bool = False,
    ) -> None:
        if threshold < 1:
            raise ValueError("threshold must be at least 1")
        self._confetti = confetti
        self._random_source = random_source
        self._confetti_count = confetti_count
        self._repeat_burst = repeat_burst
        self._lock = RLock()
        self._state = ActivationState(threshold=threshold)
        self._states: BehaviorSubject[ActivationState] = BehaviorSubject(self._state)
        self._disposed = False

    @property
    def state(self) -> ActivationState:
        return self._state

    def observable(self) -> reactivex.Observable[ActivationState]:
        return self._states

    def on_screen_click(self, event: PointerEvent) -> ActivationState:
        if self._disposed or event.originated_in(HEART_ELEMENT):
            return self._state

        with self._lock:
            count = self._state.click_count + 1
            threshold = self._state.threshold
            revealed = self._state.revealed or count == threshold
            self._state = replace(self._state, click_count=count, revealed=revealed)
            state = self._state

        self._states.on_next(state)

        if count == threshold or (self._repeat_burst and count > threshold):
            if count == threshold:
                logger.info("Activation threshold of %d clicks reached", threshold)
            self._burst(event)
        return state

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self._states.on_completed()

    def _burst(self, event: PointerEvent) -> None:
        for _ in range(self._confetti_count):
            piece = build_confetti_piece(event.client_x, event.client_y, self._random_source)
            self._confetti.add(piece.lifetime_ms, piece)
