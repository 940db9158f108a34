from datetime import timedelta

import pytest
from reactivex.scheduler import HistoricalScheduler

from lovenote.core.perishable import PerishableItem, PerishableStore


def _ids(items: tuple[PerishableItem, ...]) -> list[str]:
    return [item.id for item in items]


class TestPerishableStoreLifetime:
    """Validate timed removal so splashes and confetti never outlive their animation."""

    def test_item_is_visible_immediately_and_removed_after_delay(
        self, splashes: PerishableStore[None], scheduler: HistoricalScheduler
    ) -> None:
        """Verify an added item is live until its delay elapses so the renderer draws it for exactly its lifetime."""
        item = splashes.add(1000)

        assert item.id in splashes
        assert len(splashes) == 1

        scheduler.advance_by(timedelta(milliseconds=999))
        assert item.id in splashes

        scheduler.advance_by(timedelta(milliseconds=1))
        assert item.id not in splashes
        assert splashes.pending_timers() == 0

    def test_each_item_keeps_its_own_timer(
        self, splashes: PerishableStore[None], scheduler: HistoricalScheduler
    ) -> None:
        """Ensure items added at different moments expire independently so rapid presses each get a full splash."""
        first = splashes.add(1000)
        scheduler.advance_by(timedelta(milliseconds=400))
        second = splashes.add(1000)

        scheduler.advance_by(timedelta(milliseconds=600))
        assert _ids(splashes.items()) == [second.id]

        scheduler.advance_by(timedelta(milliseconds=400))
        assert splashes.items() == ()
        assert first.id != second.id

    def test_insertion_order_is_preserved(self, splashes: PerishableStore[None]) -> None:
        """Confirm snapshots list items oldest first so later splashes draw on top."""
        added = [splashes.add(500) for _ in range(3)]

        assert _ids(splashes.items()) == [item.id for item in added]

    def test_observable_emits_add_and_removal_once(
        self, splashes: PerishableStore[None], scheduler: HistoricalScheduler
    ) -> None:
        """Verify each item produces one insert and one removal emission so subscribers redraw only on change."""
        emissions: list[list[str]] = []
        splashes.observable().subscribe(lambda items: emissions.append(_ids(items)))

        item = splashes.add(200)
        scheduler.advance_by(timedelta(milliseconds=1000))

        assert emissions == [[], [item.id], []]

    @pytest.mark.parametrize("delay_ms", [0, -5])
    def test_non_positive_delay_is_rejected(
        self, splashes: PerishableStore[None], delay_ms: float
    ) -> None:
        """Ensure zero or negative lifetimes fail loudly instead of scheduling an immediate removal."""
        with pytest.raises(ValueError):
            splashes.add(delay_ms)

        assert len(splashes) == 0

    def test_progress_tracks_elapsed_fraction(
        self, splashes: PerishableStore[None], scheduler: HistoricalScheduler
    ) -> None:
        """Confirm progress advances linearly with scheduler time so animations stay in sync with expiry."""
        item = splashes.add(1000)

        assert item.progress(scheduler.now) == 0.0
        scheduler.advance_by(timedelta(milliseconds=250))
        assert item.progress(scheduler.now) == pytest.approx(0.25)
        assert item.progress(scheduler.now + timedelta(seconds=5)) == 1.0


class TestPerishableStoreIdentity:
    """Validate id handling so reused ids never remove the wrong entry."""

    def test_payload_mapping_supplies_the_id(self, confetti: PerishableStore) -> None:
        """Verify a mapping payload with an ``id`` key is stored under that id to keep caller-chosen keys stable."""
        item = confetti.add(300, {"id": "piece-7", "hue": 334})

        assert item.id == "piece-7"
        assert item.payload == {"id": "piece-7", "hue": 334}

    def test_generated_ids_come_from_random_source(self, splashes: PerishableStore[None]) -> None:
        """Confirm ids are drawn from the injected source so seeded sessions are reproducible."""
        assert splashes.add(100).id == "item-1"
        assert splashes.add(100).id == "item-2"

    def test_colliding_id_replaces_entry_and_old_timer_is_inert(
        self, splashes: PerishableStore[None], scheduler: HistoricalScheduler
    ) -> None:
        """Ensure re-adding a live id keeps one entry and only the newest timer removes it."""
        splashes.add(500, item_id="shared")
        scheduler.advance_by(timedelta(milliseconds=300))
        replacement = splashes.add(500, item_id="shared")

        assert len(splashes) == 1
        assert splashes.pending_timers() == 1

        scheduler.advance_by(timedelta(milliseconds=200))
        assert splashes.items() == (replacement,)

        scheduler.advance_by(timedelta(milliseconds=300))
        assert "shared" not in splashes

    def test_discard_removes_early_and_cancels_timer(
        self, splashes: PerishableStore[None], scheduler: HistoricalScheduler
    ) -> None:
        """Verify discarding an item removes it at once and leaves no timer behind."""
        item = splashes.add(1000)

        assert splashes.discard(item.id) is True
        assert splashes.discard(item.id) is False
        assert splashes.pending_timers() == 0

        scheduler.advance_by(timedelta(milliseconds=1000))
        assert len(splashes) == 0


class TestPerishableStoreDisposal:
    """Validate teardown so no timer fires into a dead store."""

    def test_dispose_cancels_pending_removals_without_emitting(
        self, splashes: PerishableStore[None], scheduler: HistoricalScheduler
    ) -> None:
        """Ensure dispose clears silently and completes the stream so late timers are harmless."""
        emissions: list[tuple[PerishableItem, ...]] = []
        completed: list[bool] = []
        for _ in range(3):
            splashes.add(1000)
        splashes.observable().subscribe(
            emissions.append, on_completed=lambda: completed.append(True)
        )
        emissions.clear()

        splashes.dispose()
        scheduler.advance_by(timedelta(seconds=5))

        assert emissions == []
        assert completed == [True]
        assert splashes.disposed
        assert splashes.pending_timers() == 0
        assert len(splashes) == 0

    def test_add_after_dispose_raises(self, splashes: PerishableStore[None]) -> None:
        """Confirm a disposed store refuses new items so leaked references fail loudly."""
        splashes.dispose()

        with pytest.raises(RuntimeError):
            splashes.add(100)

    def test_dispose_is_idempotent(self, splashes: PerishableStore[None]) -> None:
        """Verify dispose can be called twice so layered teardown paths stay safe."""
        splashes.dispose()
        splashes.dispose()

        assert splashes.disposed
