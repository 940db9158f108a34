from __future__ import annotations

from dataclasses import dataclass

import reactivex
from reactivex import operators as ops
from reactivex.disposable import CompositeDisposable
from reactivex.subject import BehaviorSubject

from lovenote.core.activation import (ActivationState, ClickActivationCounter,
                                      ConfettiPiece)
from lovenote.core.events import HEART_ELEMENT, InputBus
from lovenote.core.heart import HeartState, HeartStateMachine, stroke_offset
from lovenote.core.perishable import PerishableItem, PerishableStore
from lovenote.core.stars import AmbientStar
from lovenote.core.tilt import PointerTiltTracker, TiltVector
from lovenote.utilities.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class AppSnapshot:
    """Everything the renderer needs for one frame."""

    tilt: TiltVector
    heart: HeartState
    activation: ActivationState
    splashes: tuple[PerishableItem[None], ...]
    confetti: tuple[PerishableItem[ConfettiPiece], ...]
    stars: tuple[AmbientStar, ...]

    @property
    def stroke_offset(self) -> float:
        return stroke_offset(self.tilt)

    @property
    def click_count(self) -> int:
        return self.activation.click_count

    @property
    def revealed(self) -> bool:
        return self.activation.revealed


class AppController:
    """Route input-bus streams to the interaction components and merge their state."""

    def __init__(
        self,
        *,
        tilt_tracker: PointerTiltTracker,
        heart: HeartStateMachine,
        activation: ClickActivationCounter,
        splashes: PerishableStore[None],
        confetti: PerishableStore[ConfettiPiece],
        stars: tuple[AmbientStar, ...],
    ) -> None:
        self.tilt_tracker = tilt_tracker
        self.heart = heart
        self.activation = activation
        self.splashes = splashes
        self.confetti = confetti
        self.stars = stars
        self._tilt: BehaviorSubject[TiltVector] = BehaviorSubject(tilt_tracker.vector)
        self._subscriptions = CompositeDisposable()
        self._attached = False
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def attach(self, bus: InputBus) -> None:
        if self._disposed:
            raise RuntimeError("AppController has been disposed")
        if self._attached:
            raise ValueError("AppController is already attached to an input bus")
        self._attached = True

        self._subscriptions.add(
            self.tilt_tracker.observe(bus.pointer_moves, bus.frames).subscribe(
                self._tilt.on_next
            )
        )
        self._subscriptions.add(
            bus.pointer_downs.pipe(
                ops.filter(lambda event: event.originated_in(HEART_ELEMENT)),
            ).subscribe(lambda _: self.heart.press())
        )
        # Releases count anywhere: the pointer may have left the heart.
        self._subscriptions.add(
            bus.pointer_ups.subscribe(lambda _: self.heart.release())
        )
        self._subscriptions.add(
            bus.clicks.subscribe(self.activation.on_screen_click)
        )
        logger.debug("AppController attached to input bus.")

    def start(self) -> None:
        self.heart.start()

    def snapshot(self) -> AppSnapshot:
        return AppSnapshot(
            tilt=self._tilt.value,
            heart=self.heart.state,
            activation=self.activation.state,
            splashes=self.splashes.items(),
            confetti=self.confetti.items(),
            stars=self.stars,
        )

    def observable(self) -> reactivex.Observable[AppSnapshot]:
        return reactivex.combine_latest(
            self._tilt,
            self.heart.observable(),
            self.activation.observable(),
            self.splashes.observable(),
            self.confetti.observable(),
        ).pipe(
            ops.map(
                lambda latest: AppSnapshot(
                    tilt=latest[0],
                    heart=latest[1],
                    activation=latest[2],
                    splashes=latest[3],
                    confetti=latest[4],
                    stars=self.stars,
                )
            )
        )

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        logger.info("Tearing down AppController.")
        self._subscriptions.dispose()
        self.heart.dispose()
        self.activation.dispose()
        self.splashes.dispose()
        self.confetti.dispose()
        self._tilt.on_completed()
