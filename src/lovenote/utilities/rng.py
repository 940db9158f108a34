from __future__ import annotations

import random
import uuid
from typing import Callable


def _uuid_hex() -> str:
    return uuid.uuid4().hex


class RandomSource:
    """Single seam for every randomized value the engine produces.

    Confetti parameters, star parameters and perishable item ids are all
    drawn from here, so a seeded ``random.Random`` plus a counting
    ``id_factory`` makes a whole session reproducible.
    """

    def __init__(
        self,
        *,
        rng: random.Random | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._rng = rng or random.Random()
        self._id_factory = id_factory or _uuid_hex

    @classmethod
    def seeded(cls, seed: int | None) -> RandomSource:
        if seed is None:
            return cls()
        rng = random.Random(seed)
        return cls(rng=rng, id_factory=lambda: f"{rng.getrandbits(64):016x}")

    def random(self) -> float:
        """Return a float in ``[0, 1)``."""

        return self._rng.random()

    def new_id(self) -> str:
        return self._id_factory()
