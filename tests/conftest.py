import os
import random
import tempfile
from collections.abc import Iterator
from datetime import datetime
from itertools import count

import pytest
from hypothesis import HealthCheck, settings
from reactivex.scheduler import HistoricalScheduler

# Loggers are created at import time, before any fixture runs.
os.environ.setdefault("LOVENOTE_LOG_DIR", tempfile.mkdtemp(prefix="lovenote-logs-"))

from lovenote.core.perishable import PerishableStore  # noqa: E402
from lovenote.utilities.rng import RandomSource  # noqa: E402

settings.register_profile(
    "default",
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)
settings.load_profile("default")

LOVENOTE_ENV_VARS = (
    "LOVENOTE_CLICKS_TO_ACTIVATE",
    "LOVENOTE_CONFETTI_COUNT",
    "LOVENOTE_CONFETTI_REPEAT",
    "LOVENOTE_TILT_STRENGTH",
    "LOVENOTE_TILT_BOUNDS_PADDING",
    "LOVENOTE_HEARTBEAT_ENABLED",
    "LOVENOTE_HEARTBEAT_INTERVAL_MS",
    "LOVENOTE_HEARTBEAT_POLICY",
    "LOVENOTE_SPLASH_LIFETIME_MS",
    "LOVENOTE_STAR_COUNT",
    "LOVENOTE_RANDOM_SEED",
    "LOVENOTE_WINDOW_WIDTH",
    "LOVENOTE_WINDOW_HEIGHT",
    "LOVENOTE_MAX_FPS",
    "LOVENOTE_IMAGE_PATH",
)


@pytest.fixture(autouse=True)
def dummy_sdl_video_driver(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.setenv("SDL_VIDEODRIVER", "dummy")
    monkeypatch.setenv("SDL_AUDIODRIVER", "dummy")
    yield


@pytest.fixture(autouse=True)
def clean_lovenote_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Keep developer shells from leaking configuration into tests."""

    for name in LOVENOTE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield


@pytest.fixture()
def scheduler() -> HistoricalScheduler:
    return HistoricalScheduler(initial_clock=datetime(2025, 2, 14, 12, 0, 0))


@pytest.fixture()
def random_source() -> RandomSource:
    ids = count(1)
    return RandomSource(rng=random.Random(1402), id_factory=lambda: f"item-{next(ids)}")


@pytest.fixture()
def splashes(scheduler: HistoricalScheduler, random_source: RandomSource) -> PerishableStore[None]:
    return PerishableStore(scheduler=scheduler, random_source=random_source, name="splashes")


@pytest.fixture()
def confetti(scheduler: HistoricalScheduler, random_source: RandomSource) -> PerishableStore:
    return PerishableStore(scheduler=scheduler, random_source=random_source, name="confetti")
