from enum import StrEnum


class HeartbeatPolicy(StrEnum):
    CONTINUOUS = "continuous"
    PAUSE_WHILE_PRESSED = "pause_while_pressed"
