from __future__ import annotations

from typing import Any, Mapping

from lagom import Container, Singleton
from reactivex.abc import SchedulerBase

from lovenote.core.activation import ClickActivationCounter, ConfettiPiece
from lovenote.core.events import InputBus
from lovenote.core.heart import HeartStateMachine
from lovenote.core.perishable import PerishableStore
from lovenote.core.stars import generate_stars
from lovenote.core.tilt import PointerTiltTracker
from lovenote.display.layout import LayoutHolder
from lovenote.navigation import AppController
from lovenote.runtime.event_pump import EventPump
from lovenote.utilities.env import Configuration
from lovenote.utilities.logging import get_logger
from lovenote.utilities.rng import RandomSource

RuntimeContainer = Container

logger = get_logger(__name__)


def _build_random_source(_: RuntimeContainer) -> RandomSource:
    return RandomSource.seeded(Configuration.random_seed())


def _build_layout_holder(_: RuntimeContainer) -> LayoutHolder:
    return LayoutHolder()


def _build_tilt_tracker(resolver: RuntimeContainer) -> PointerTiltTracker:
    layout = resolver[LayoutHolder]
    return PointerTiltTracker(
        reference=layout.heart_box,
        viewport=layout.viewport,
        tilt_strength=Configuration.tilt_strength(),
        bounds_padding=Configuration.tilt_bounds_padding(),
    )


def _build_app_controller(resolver: RuntimeContainer) -> AppController:
    scheduler = resolver[SchedulerBase]
    random_source = resolver[RandomSource]
    splashes: PerishableStore[None] = PerishableStore(
        scheduler=scheduler, random_source=random_source, name="splashes"
    )
    confetti: PerishableStore[ConfettiPiece] = PerishableStore(
        scheduler=scheduler, random_source=random_source, name="confetti"
    )
    heart = HeartStateMachine(
        splashes=splashes,
        scheduler=scheduler,
        splash_lifetime_ms=Configuration.splash_lifetime_ms(),
        heartbeat_enabled=Configuration.heartbeat_enabled(),
        heartbeat_interval_ms=Configuration.heartbeat_interval_ms(),
        heartbeat_policy=Configuration.heartbeat_policy(),
    )
    activation = ClickActivationCounter(
        confetti=confetti,
        random_source=random_source,
        threshold=Configuration.clicks_to_activate(),
        confetti_count=Configuration.confetti_count(),
        repeat_burst=Configuration.confetti_repeat(),
    )
    return AppController(
        tilt_tracker=resolver[PointerTiltTracker],
        heart=heart,
        activation=activation,
        splashes=splashes,
        confetti=confetti,
        stars=generate_stars(random_source, Configuration.star_count()),
    )


def _build_event_pump(resolver: RuntimeContainer) -> EventPump:
    return EventPump(bus=resolver[InputBus], layout=resolver[LayoutHolder])


def build_runtime_container(
    scheduler: SchedulerBase,
    overrides: Mapping[type[Any], object] | None = None,
) -> RuntimeContainer:
    container = Container()
    logger.debug("Created Lagom container for runtime configuration.")
    configure_runtime_container(
        container=container,
        scheduler=scheduler,
        overrides=overrides,
    )
    return container


def configure_runtime_container(
    *,
    container: RuntimeContainer,
    scheduler: SchedulerBase,
    overrides: Mapping[type[Any], object] | None = None,
) -> None:
    logger.debug(
        "Configuring Lagom runtime container with overrides=%s.",
        set(overrides.keys()) if overrides else set(),
    )
    _bind(container, overrides, SchedulerBase, scheduler)
    _bind(container, overrides, RandomSource, Singleton(_build_random_source))
    _bind(container, overrides, InputBus, Singleton(InputBus))
    _bind(container, overrides, LayoutHolder, Singleton(_build_layout_holder))
    _bind(container, overrides, PointerTiltTracker, Singleton(_build_tilt_tracker))
    _bind(container, overrides, AppController, Singleton(_build_app_controller))
    _bind(container, overrides, EventPump, Singleton(_build_event_pump))


def _bind(
    container: RuntimeContainer,
    overrides: Mapping[type[Any], object] | None,
    key: type[Any],
    value: object,
) -> None:
    if overrides and key in overrides:
        container[key] = overrides[key]
        logger.debug("Applied Lagom override for %s.", key)
        return
    if key in container.defined_types:
        logger.debug("Lagom already defined %s; skipping registration.", key)
        return
    container[key] = value
    logger.debug("Registered Lagom provider for %s.", key)
