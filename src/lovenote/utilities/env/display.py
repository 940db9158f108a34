import os

from lovenote.utilities.env.parsing import _env_int, _env_optional_int


class DisplayConfiguration:
    @classmethod
    def window_width(cls) -> int:
        return _env_int("LOVENOTE_WINDOW_WIDTH", default=720, minimum=200)

    @classmethod
    def window_height(cls) -> int:
        return _env_int("LOVENOTE_WINDOW_HEIGHT", default=900, minimum=200)

    @classmethod
    def max_fps(cls) -> int:
        return _env_int("LOVENOTE_MAX_FPS", default=60, minimum=1, maximum=240)

    @classmethod
    def star_count(cls) -> int:
        return _env_int("LOVENOTE_STAR_COUNT", default=12, minimum=0)

    @classmethod
    def random_seed(cls) -> int | None:
        return _env_optional_int("LOVENOTE_RANDOM_SEED")

    @classmethod
    def image_path(cls) -> str:
        return os.environ.get("LOVENOTE_IMAGE_PATH", "love.jpg")
