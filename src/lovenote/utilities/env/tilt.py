from lovenote.utilities.env.parsing import _env_float


class TiltConfiguration:
    @classmethod
    def tilt_strength(cls) -> float:
        return _env_float("LOVENOTE_TILT_STRENGTH", default=20.0, minimum=0.0, maximum=90.0)

    @classmethod
    def tilt_bounds_padding(cls) -> float:
        return _env_float("LOVENOTE_TILT_BOUNDS_PADDING", default=0.0, minimum=0.0)
