from lovenote.utilities.env.display import DisplayConfiguration
from lovenote.utilities.env.interaction import InteractionConfiguration
from lovenote.utilities.env.tilt import TiltConfiguration


class Configuration(
    InteractionConfiguration,
    TiltConfiguration,
    DisplayConfiguration,
):
    """Aggregate environment configuration helpers."""
