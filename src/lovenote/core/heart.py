"""Press/release state machine and heartbeat for the interactive heart.

The heart is ``idle`` until pressed and returns to ``idle`` on the next
release, wherever the pointer is by then. A real release charges the
love level (spawning a splash) or empties it once it is full. A
periodic heartbeat keeps the level moving between interactions.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from datetime import timedelta
from threading import RLock
from typing import Any, Callable

import reactivex
from reactivex.abc import DisposableBase, SchedulerBase
from reactivex.subject import BehaviorSubject

from lovenote.core.perishable import PerishableStore
from lovenote.core.tilt import TiltVector
from lovenote.utilities.env import HeartbeatPolicy
from lovenote.utilities.logging import get_logger

logger = get_logger(__name__)

PATH_LENGTH = 1506
LAYERS = 20
LAYER_GAP = 2  # pixels
INITIAL_LOVE_LEVEL = 1.0
RELEASE_STEP = 0.3
HEARTBEAT_STEP = 0.1
HEARTBEAT_RESET_LEVEL = 0.5
DEFAULT_SPLASH_LIFETIME_MS = 1000.0
DEFAULT_HEARTBEAT_INTERVAL_MS = 800
LEVEL_PRECISION = 6


@dataclass(frozen=True, slots=True)
class HeartState:
    love_level: float = INITIAL_LOVE_LEVEL
    pressed: bool = False

    @property
    def lightness(self) -> float:
        """HSL lightness percentage of the heart body."""

        return self.love_level * 80 + 20

    @property
    def scale(self) -> float:
        return 0.8 + self.love_level * 0.2 - (0.1 if self.pressed else 0.0)


@dataclass(frozen=True, slots=True)
class HeartLayer:
    index: int
    translate_z: float
    scale: float


def stroke_offset(tilt: TiltVector) -> float:
    """Dash offset of the outline stroke, in ``[0, PATH_LENGTH]``."""

    return math.atan2(tilt.y, tilt.x) / math.pi * (PATH_LENGTH / 2) + PATH_LENGTH / 2


def heart_layers() -> tuple[HeartLayer, ...]:
    return tuple(
        HeartLayer(
            index=i,
            translate_z=i * LAYER_GAP,
            scale=math.sin(i / LAYERS * math.pi) / 10 + 1,
        )
        for i in range(LAYERS)
    )


def shine(tilt: TiltVector) -> tuple[float, float]:
    """Horizontal offset fraction and opacity of the glare stripe."""

    return (tilt.y / 50 + 0.5, tilt.x / 200 + 0.5)


def _step(level: float, delta: float) -> float:
    return round(level + delta, LEVEL_PRECISION)


class HeartStateMachine:
    def __init__(
        self,
        *,
        splashes: PerishableStore[Any],
        scheduler: SchedulerBase,
        splash_lifetime_ms: float = DEFAULT_SPLASH_LIFETIME_MS,
        heartbeat_enabled: bool = True,
        heartbeat_interval_ms: int = DEFAULT_HEARTBEAT_INTERVAL_MS,
        heartbeat_policy: HeartbeatPolicy = HeartbeatPolicy.CONTINUOUS,
        initial_state: HeartState | None = None,
    ) -> None:
        self._splashes = splashes
        self._scheduler = scheduler
        self._splash_lifetime_ms = splash_lifetime_ms
        self._heartbeat_enabled = heartbeat_enabled
        self._heartbeat_interval_ms = heartbeat_interval_ms
        self._heartbeat_policy = heartbeat_policy
        self._lock = RLock()
        self._state = initial_state or HeartState()
        self._states: BehaviorSubject[HeartState] = BehaviorSubject(self._state)
        self._heartbeat: DisposableBase | None = None
        self._disposed = False

    @property
    def state(self) -> HeartState:
        return self._state

    @property
    def heartbeat_running(self) -> bool:
        return self._heartbeat is not None

    def observable(self) -> reactivex.Observable[HeartState]:
        return self._states

    def press(self) -> HeartState:
        return self._transition(lambda state: replace(state, pressed=True))

    def release(self) -> HeartState:
        charged = False

        def _release(state: HeartState) -> HeartState:
            nonlocal charged
            if not state.pressed:
                return state
            if state.love_level >= 1:
                return HeartState(love_level=0.0, pressed=False)
            charged = True
            return HeartState(love_level=_step(state.love_level, RELEASE_STEP), pressed=False)

        state = self._transition(_release)
        # Splash only after the new level has been published.
        if charged:
            self._splashes.add(self._splash_lifetime_ms)
        return state

    def tick(self) -> HeartState:
        def _beat(state: HeartState) -> HeartState:
            if state.pressed and self._heartbeat_policy is HeartbeatPolicy.PAUSE_WHILE_PRESSED:
                return state
            if state.love_level >= 1:
                return replace(state, love_level=HEARTBEAT_RESET_LEVEL)
            return replace(state, love_level=_step(state.love_level, HEARTBEAT_STEP))

        return self._transition(_beat)

    def start(self) -> None:
        """Begin the periodic heartbeat, if enabled."""

        if not self._heartbeat_enabled or self._heartbeat is not None or self._disposed:
            return
        logger.debug("Starting heartbeat every %dms", self._heartbeat_interval_ms)
        self._heartbeat = reactivex.interval(
            timedelta(milliseconds=self._heartbeat_interval_ms),
            scheduler=self._scheduler,
        ).subscribe(lambda _: self.tick())

    def dispose(self) -> None:
        with self._lock:
            if self._disposed:
                return
            self._disposed = True
            heartbeat = self._heartbeat
            self._heartbeat = None
        if heartbeat is not None:
            heartbeat.dispose()
        self._states.on_completed()

    def _transition(self, update: Callable[[HeartState], HeartState]) -> HeartState:
        with self._lock:
            if self._disposed:
                return self._state
            previous = self._state
            self._state = update(previous)
            state = self._state
        if state != previous:
            self._states.on_next(state)
        return state
