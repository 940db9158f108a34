import os

from lovenote.utilities.env.enums import HeartbeatPolicy
from lovenote.utilities.env.parsing import _env_flag, _env_float, _env_int


class InteractionConfiguration:
    @classmethod
    def clicks_to_activate(cls) -> int:
        return _env_int("LOVENOTE_CLICKS_TO_ACTIVATE", default=5, minimum=1)

    @classmethod
    def confetti_count(cls) -> int:
        return _env_int("LOVENOTE_CONFETTI_COUNT", default=50, minimum=0)

    @classmethod
    def confetti_repeat(cls) -> bool:
        return _env_flag("LOVENOTE_CONFETTI_REPEAT", default=False)

    @classmethod
    def splash_lifetime_ms(cls) -> float:
        return _env_float("LOVENOTE_SPLASH_LIFETIME_MS", default=1000.0, minimum=1.0)

    @classmethod
    def heartbeat_enabled(cls) -> bool:
        return _env_flag("LOVENOTE_HEARTBEAT_ENABLED", default=True)

    @classmethod
    def heartbeat_interval_ms(cls) -> int:
        return _env_int("LOVENOTE_HEARTBEAT_INTERVAL_MS", default=800, minimum=1)

    @classmethod
    def heartbeat_policy(cls) -> HeartbeatPolicy:
        policy = os.environ.get("LOVENOTE_HEARTBEAT_POLICY", "continuous").strip().lower()
        try:
            return HeartbeatPolicy(policy)
        except ValueError as exc:
            raise ValueError(
                "LOVENOTE_HEARTBEAT_POLICY must be 'continuous' or 'pause_while_pressed'"
            ) from exc
