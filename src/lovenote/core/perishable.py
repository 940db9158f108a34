from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta
from threading import RLock
from typing import Any, Generic, TypeVar

import reactivex
from reactivex.abc import DisposableBase, SchedulerBase
from reactivex.subject import BehaviorSubject

from lovenote.utilities.logging import get_logger
from lovenote.utilities.rng import RandomSource

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class PerishableItem(Generic[T]):
    id: str
    payload: T | None
    expires_after_ms: float
    created_at: datetime

    def age_ms(self, now: datetime) -> float:
        return (now - self.created_at).total_seconds() * 1000.0

    def progress(self, now: datetime) -> float:
        """Fraction of the lifetime already elapsed, in ``[0, 1]``."""

        return min(max(self.age_ms(now) / self.expires_after_ms, 0.0), 1.0)


def _payload_id(data: Any) -> str | None:
    if isinstance(data, Mapping):
        value = data.get("id")
        return None if value is None else str(value)
    return None


class PerishableStore(Generic[T]):
    """Ordered collection whose entries remove themselves after a delay.

    Every entry owns exactly one pending timer on ``scheduler``. A timer
    only removes the entry it was created for, so an id that was reused
    (or already discarded) turns the removal into a no-op.
    """

    def __init__(
        self,
        *,
        scheduler: SchedulerBase,
        random_source: RandomSource | None = None,
        name: str = "perishable",
    ) -> None:
        self._scheduler = scheduler
        self._random_source = random_source or RandomSource()
        self._name = name
        self._lock = RLock()
        self._items: dict[str, PerishableItem[T]] = {}
        self._timers: dict[str, DisposableBase] = {}
        self._changes: BehaviorSubject[tuple[PerishableItem[T], ...]] = BehaviorSubject(())
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def items(self) -> tuple[PerishableItem[T], ...]:
        return tuple(self._items.values())

    def pending_timers(self) -> int:
        return len(self._timers)

    def observable(self) -> reactivex.Observable[tuple[PerishableItem[T], ...]]:
        return self._changes

    def add(
        self,
        delay_ms: float,
        data: T | None = None,
        *,
        item_id: str | None = None,
    ) -> PerishableItem[T]:
        if delay_ms <= 0:
            raise ValueError(f"{self._name}: delay_ms must be positive, got {delay_ms}")

        with self._lock:
            if self._disposed:
                raise RuntimeError(f"{self._name}: store has been disposed")

            resolved_id = item_id or _payload_id(data) or self._random_source.new_id()
            item = PerishableItem(
                id=resolved_id,
                payload=data,
                expires_after_ms=delay_ms,
                created_at=self._scheduler.now,
            )

            previous_timer = self._timers.pop(resolved_id, None)
            if previous_timer is not None:
                logger.debug("%s: replacing live item %s", self._name, resolved_id)
                previous_timer.dispose()

            self._items[resolved_id] = item
            self._timers[resolved_id] = self._scheduler.schedule_relative(
                timedelta(milliseconds=delay_ms),
                lambda *_: self._expire(item),
            )
            snapshot = self.items()

        self._changes.on_next(snapshot)
        return item

    def discard(self, item_id: str) -> bool:
        """Remove ``item_id`` ahead of its timer. Returns whether it was live."""

        with self._lock:
            if item_id not in self._items:
                return False
            del self._items[item_id]
            timer = self._timers.pop(item_id, None)
            if timer is not None:
                timer.dispose()
            snapshot = self.items()

        self._changes.on_next(snapshot)
        return True

    def _expire(self, item: PerishableItem[T]) -> None:
        with self._lock:
            if self._disposed or self._items.get(item.id) is not item:
                return
            del self._items[item.id]
            self._timers.pop(item.id, None)
            snapshot = self.items()

        self._changes.on_next(snapshot)

    def dispose(self) -> None:
        with self._lock:
            if self._disposed:
                return
            self._disposed = True
            timers = list(self._timers.values())
            self._timers.clear()
            self._items.clear()

        for timer in timers:
            timer.dispose()
        logger.debug("%s: disposed with %d pending timer(s)", self._name, len(timers))
        self._changes.on_completed()
