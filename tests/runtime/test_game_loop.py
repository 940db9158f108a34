import pygame
import pytest
from reactivex.scheduler import HistoricalScheduler

from lovenote.core.events import PointerEvent, PointerEventType
from lovenote.runtime.container import build_runtime_container
from lovenote.runtime.event_pump import EventPump
from lovenote.runtime.game_loop import GameLoop


class TestGameLoop:
    """Validate the frame loop so a session renders, reacts and tears down cleanly."""

    def test_loop_renders_until_quit_and_disposes(
        self, monkeypatch: pytest.MonkeyPatch, scheduler: HistoricalScheduler
    ) -> None:
        """Verify frames are drawn until the pump reports quit and the controller is disposed afterwards."""
        loop = GameLoop(
            width=360,
            height=480,
            max_fps=240,
            image_path=None,
            resolver=build_runtime_container(scheduler=scheduler),
        )
        calls = {"count": 0}

        def _pump(running: bool) -> bool:
            calls["count"] += 1
            if calls["count"] == 2:
                loop.bus.submit(
                    PointerEventType.CLICK,
                    PointerEvent(client_x=5, client_y=470, path=loop.layout.element_path(5, 470)),
                )
            return calls["count"] < 4

        monkeypatch.setattr(EventPump, "pump", lambda self, running: _pump(running))

        loop.start()

        assert calls["count"] == 4
        assert loop.app_controller.disposed
        assert loop.app_controller.activation.state.click_count == 1
        assert not pygame.get_init()
