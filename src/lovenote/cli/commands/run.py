from typing import Annotated, Optional

import pygame
import typer
from reactivex.scheduler.mainloop import PyGameScheduler

from lovenote.runtime.container import build_runtime_container
from lovenote.runtime.game_loop import GameLoop
from lovenote.utilities.env import Configuration
from lovenote.utilities.logging import get_logger
from lovenote.utilities.rng import RandomSource

logger = get_logger(__name__)


def run_command(
    width: Annotated[Optional[int], typer.Option("--width", min=200, help="Window width in pixels")] = None,
    height: Annotated[Optional[int], typer.Option("--height", min=200, help="Window height in pixels")] = None,
    fps: Annotated[Optional[int], typer.Option("--fps", min=1, max=240, help="Frame rate cap")] = None,
    seed: Annotated[
        Optional[int],
        typer.Option("--seed", help="Seed for confetti, stars and ids"),
    ] = None,
) -> None:
    overrides = {}
    if seed is not None:
        logger.info("Using random seed %d", seed)
        overrides[RandomSource] = RandomSource.seeded(seed)
    resolver = build_runtime_container(
        scheduler=PyGameScheduler(pygame),
        overrides=overrides,
    )
    loop = GameLoop(
        width=width if width is not None else Configuration.window_width(),
        height=height if height is not None else Configuration.window_height(),
        max_fps=fps if fps is not None else Configuration.max_fps(),
        image_path=Configuration.image_path(),
        resolver=resolver,
    )
    loop.start()
