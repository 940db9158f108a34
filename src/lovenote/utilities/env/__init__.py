"""Environment configuration helpers."""

from lovenote.utilities.env.config import Configuration as Configuration
from lovenote.utilities.env.enums import HeartbeatPolicy as HeartbeatPolicy
