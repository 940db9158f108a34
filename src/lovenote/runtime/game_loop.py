from __future__ import annotations

import pygame
from reactivex.abc import SchedulerBase
from reactivex.scheduler.mainloop import PyGameScheduler

from lovenote.core.events import InputBus
from lovenote.display.layout import LayoutHolder, SceneLayout
from lovenote.display.renderer import GreetingRenderer
from lovenote.navigation import AppController
from lovenote.runtime.container import RuntimeContainer, build_runtime_container
from lovenote.runtime.event_pump import EventPump
from lovenote.utilities.logging import get_logger

logger = get_logger(__name__)

WINDOW_TITLE = "lovenote"


class GameLoop:
    """Own the pygame window and drive the interaction core frame by frame.

    All timers live on a ``PyGameScheduler`` that is drained once per
    iteration, so every state change happens on the main thread.
    """

    def __init__(
        self,
        *,
        width: int,
        height: int,
        max_fps: int,
        image_path: str | None = None,
        resolver: RuntimeContainer | None = None,
    ) -> None:
        self.width = width
        self.height = height
        self.max_fps = max_fps
        self.image_path = image_path
        if resolver is None:
            resolver = build_runtime_container(scheduler=PyGameScheduler(pygame))
        self.resolver = resolver
        self.scheduler = resolver[SchedulerBase]
        self.bus = resolver[InputBus]
        self.layout = resolver[LayoutHolder]
        self.app_controller = resolver[AppController]
        self.event_pump = resolver[EventPump]
        self.running = False

    def start(self) -> None:
        logger.info("Starting GameLoop at %dx%d, %d fps", self.width, self.height, self.max_fps)
        pygame.init()
        window = pygame.display.set_mode((self.width, self.height), pygame.RESIZABLE)
        pygame.display.set_caption(WINDOW_TITLE)
        self.layout.layout = SceneLayout(width=self.width, height=self.height)
        renderer = GreetingRenderer(self.layout.layout, image_path=self.image_path)
        clock = pygame.time.Clock()

        self.app_controller.attach(self.bus)
        self.app_controller.start()
        started_at = self.scheduler.now
        self.running = True
        try:
            while self.running:
                self.running = self.event_pump.pump(self.running)
                if not self.running:
                    break
                self._drain_scheduler()
                if self.layout.layout is not None and self.layout.layout != renderer.layout:
                    window = pygame.display.get_surface()
                    renderer.resize(self.layout.layout)
                self.bus.frame(clock.get_time())
                now = self.scheduler.now
                renderer.process(
                    window,
                    self.app_controller.snapshot(),
                    now,
                    (now - started_at).total_seconds(),
                )
                pygame.display.flip()
                clock.tick(self.max_fps)
        finally:
            self.stop()

    def stop(self) -> None:
        logger.info("Stopping GameLoop.")
        self.running = False
        self.app_controller.dispose()
        self.bus.close()
        pygame.quit()

    def _drain_scheduler(self) -> None:
        if isinstance(self.scheduler, PyGameScheduler):
            self.scheduler.run()
