from __future__ import annotations

import math
from datetime import datetime
from functools import cache
from pathlib import Path

import pygame

from lovenote.core.activation import ConfettiPiece
from lovenote.core.heart import (LAYERS, PATH_LENGTH, HeartState, heart_layers,
                                 shine)
from lovenote.core.perishable import PerishableItem
from lovenote.core.stars import SPARKLE, AmbientStar
from lovenote.core.tilt import BoundingBox, TiltVector
from lovenote.display.color import Color
from lovenote.display.layout import SceneLayout
from lovenote.navigation import AppSnapshot
from lovenote.utilities.logging import get_logger

logger = get_logger(__name__)

TITLE = "Para mi hermosa Iren"
HINT = "Descubre el mensaje secreto"
READY = "¡Listo!"
MESSAGE_LINES = (
    "Te Amo mi bella princesa",
    "eres mi vida,",
    "eres mi todo,",
    "eres lo que mas amo.",
)
HEART_HUE = 345
OUTLINE_SAMPLES = 120
SPLASH_GROWTH = 0.6


@cache
def _unit_heart(samples: int = OUTLINE_SAMPLES) -> tuple[tuple[float, float], ...]:
    """Heart outline centred on the origin, spanning ``[-1, 1]`` on both axes."""

    top, bottom = 12.0, -17.0
    points = []
    for i in range(samples):
        t = i / samples * 2 * math.pi
        x = 16 * math.sin(t) ** 3
        y = 13 * math.cos(t) - 5 * math.cos(2 * t) - 2 * math.cos(3 * t) - math.cos(4 * t)
        points.append((x / 16, (top - y) / (top - bottom) * 2 - 1))
    return tuple(points)


def _project(
    points: tuple[tuple[float, float], ...],
    box: BoundingBox,
    *,
    scale: float,
    tilt: TiltVector,
    translate_z: float = 0.0,
    rotation_deg: float = 0.0,
) -> list[tuple[float, float]]:
    cx, cy = box.center
    rx, ry = math.radians(tilt.x), math.radians(tilt.y)
    rot = math.radians(rotation_deg)
    half_w, half_h = box.width / 2 * scale, box.height / 2 * scale
    projected = []
    for ux, uy in points:
        x, y = ux * half_w, uy * half_h
        if rot:
            x, y = x * math.cos(rot) - y * math.sin(rot), x * math.sin(rot) + y * math.cos(rot)
        px = x * math.cos(ry) + translate_z * math.sin(ry)
        py = y * math.cos(rx) + translate_z * math.sin(rx)
        projected.append((cx + px, cy + py))
    return projected


def _blit_polygon(
    window: pygame.Surface,
    points: list[tuple[float, float]],
    rgba: tuple[int, int, int, int],
    width: int = 0,
) -> None:
    """Draw a translucent polygon through an overlay sized to its bounding rect."""

    pad = width + 1
    left = math.floor(min(x for x, _ in points)) - pad
    top = math.floor(min(y for _, y in points)) - pad
    right = math.ceil(max(x for x, _ in points)) + pad
    bottom = math.ceil(max(y for _, y in points)) + pad
    overlay = pygame.Surface((right - left, bottom - top), pygame.SRCALPHA)
    pygame.draw.polygon(overlay, rgba, [(x - left, y - top) for x, y in points], width)
    window.blit(overlay, (left, top))


class GreetingRenderer:
    """Draw an ``AppSnapshot`` onto a pygame surface."""

    def __init__(self, layout: SceneLayout, image_path: str | None = None) -> None:
        self.layout = layout
        self._image_path = image_path
        self._image: pygame.Surface | None = None
        self._image_loaded = False
        self._fonts: dict[int, pygame.font.Font] = {}

    def resize(self, layout: SceneLayout) -> None:
        self.layout = layout

    def process(
        self,
        window: pygame.Surface,
        snapshot: AppSnapshot,
        now: datetime,
        elapsed_s: float,
    ) -> None:
        self._draw_background(window)
        self._draw_stars(window, snapshot.stars, elapsed_s)
        self._draw_title(window)
        self._draw_heart(window, snapshot.heart, snapshot.tilt, snapshot.stroke_offset)
        self._draw_splashes(window, snapshot.splashes, snapshot.tilt, now)
        if snapshot.revealed:
            self._draw_message(window)
        else:
            self._draw_progress(window, snapshot)
        self._draw_confetti(window, snapshot.confetti, now)

    def _font(self, size: int) -> pygame.font.Font:
        font = self._fonts.get(size)
        if font is None:
            font = pygame.font.Font(None, size)
            self._fonts[size] = font
        return font

    def _text(
        self,
        window: pygame.Surface,
        text: str,
        size: int,
        center: tuple[float, float],
        color: Color,
    ) -> None:
        surface = self._font(size).render(text, True, color.tuple())
        window.blit(surface, surface.get_rect(center=(int(center[0]), int(center[1]))))

    def _draw_background(self, window: pygame.Surface) -> None:
        height = self.layout.height
        top, bottom = Color.blush(), Color.white()
        for y in range(0, height, 4):
            color = top.mix(bottom, y / height)
            pygame.draw.rect(window, color.tuple(), (0, y, self.layout.width, 4))

    def _draw_stars(
        self,
        window: pygame.Surface,
        stars: tuple[AmbientStar, ...],
        elapsed_s: float,
    ) -> None:
        for star in stars:
            phase = max(elapsed_s - star.delay_s, 0.0) / star.duration_s
            twinkle = 0.5 + 0.5 * math.sin(phase * 2 * math.pi)
            drift = math.sin(phase * 2 * math.pi) * 10
            x = star.x_percent / 100 * self.layout.width
            y = star.y_percent / 100 * self.layout.height + drift
            radius = star.size / 2
            color = Color(255, 214, 102) if star.glyph == SPARKLE else Color(255, 190, 220)
            c = int(star.size) + 1
            overlay = pygame.Surface((c * 2, c * 2), pygame.SRCALPHA)
            points = [
                (c, c - radius), (c + radius / 4, c - radius / 4),
                (c + radius, c), (c + radius / 4, c + radius / 4),
                (c, c + radius), (c - radius / 4, c + radius / 4),
                (c - radius, c), (c - radius / 4, c - radius / 4),
            ]
            pygame.draw.polygon(overlay, color.rgba(star.opacity * (0.4 + 0.6 * twinkle)), points)
            window.blit(overlay, (x - c, y - c))

    def _draw_title(self, window: pygame.Surface) -> None:
        self._text(
            window,
            TITLE,
            44,
            (self.layout.width / 2, self.layout.height * 0.08),
            Color.rose().dim(0.2),
        )

    def _draw_heart(
        self,
        window: pygame.Surface,
        heart: HeartState,
        tilt: TiltVector,
        stroke_offset: float,
    ) -> None:
        box = self.layout.heart_box
        lightness = 30 + (heart.lightness - 20) / 80 * 40
        body = Color.from_hsl(HEART_HUE, 85, lightness)
        outline = _unit_heart()

        for layer in heart_layers():
            depth = layer.index / LAYERS
            color = body.dim(0.45 * (1 - depth))
            points = _project(
                outline,
                box,
                scale=heart.scale * layer.scale * 0.92,
                tilt=tilt,
                translate_z=layer.translate_z,
            )
            pygame.draw.polygon(window, color.tuple(), points)

        front = _project(
            outline,
            box,
            scale=heart.scale * 0.9,
            tilt=tilt,
            translate_z=(LAYERS + 1) * 2,
        )
        pygame.draw.polygon(window, body.tuple(), front)

        # Highlighted stretch of the outline follows the dash offset.
        start = int(stroke_offset / PATH_LENGTH * len(front)) % len(front)
        stretch = [front[(start + i) % len(front)] for i in range(len(front) // 3)]
        if len(stretch) > 1:
            pygame.draw.lines(window, Color.white().tuple(), False, stretch, 3)

        shine_x, shine_opacity = shine(tilt)
        stripe = pygame.Surface((int(box.width), int(box.height)), pygame.SRCALPHA)
        stripe_left = box.width - shine_x * box.width * 1.4
        pygame.draw.rect(
            stripe,
            Color.white().rgba(max(min(shine_opacity, 1.0), 0.0) * 0.35),
            (stripe_left, 0, box.width * 0.4, box.height),
        )
        mask = pygame.Surface((int(box.width), int(box.height)), pygame.SRCALPHA)
        local = [(x - box.left, y - box.top) for x, y in front]
        pygame.draw.polygon(mask, (255, 255, 255, 255), local)
        stripe.blit(mask, (0, 0), special_flags=pygame.BLEND_RGBA_MIN)
        window.blit(stripe, (box.left, box.top))

    def _draw_splashes(
        self,
        window: pygame.Surface,
        splashes: tuple[PerishableItem[None], ...],
        tilt: TiltVector,
        now: datetime,
    ) -> None:
        box = self.layout.heart_box
        for item in splashes:
            progress = item.progress(now)
            points = _project(_unit_heart(), box, scale=0.9 + progress * SPLASH_GROWTH, tilt=tilt)
            _blit_polygon(window, points, Color.rose().rgba(0.6 * (1 - progress)), 4)

    def _draw_confetti(
        self,
        window: pygame.Surface,
        confetti: tuple[PerishableItem[ConfettiPiece], ...],
        now: datetime,
    ) -> None:
        for item in confetti:
            piece = item.payload
            if piece is None:
                continue
            progress = item.progress(now)
            eased = 1 - (1 - progress) ** 3
            cx = piece.left + piece.width / 2 + piece.end_x * eased
            cy = piece.top + piece.height / 2 + piece.end_y * eased
            rotation = piece.start_rotation + (piece.end_rotation - piece.start_rotation) * eased
            scale = piece.start_scale * (1 - progress * 0.5)
            box = BoundingBox(
                top=cy - piece.height / 2,
                left=cx - piece.width / 2,
                width=piece.width,
                height=piece.height,
            )
            points = _project(_unit_heart(24), box, scale=scale, tilt=TiltVector(), rotation_deg=rotation)
            _blit_polygon(window, points, Color.from_hsl(*piece.color).rgba(1 - progress))

    def _draw_progress(self, window: pygame.Surface, snapshot: AppSnapshot) -> None:
        activation = snapshot.activation
        width = self.layout.width
        base_y = self.layout.heart_box.bottom + self.layout.height * 0.08
        self._text(window, HINT, 32, (width / 2, base_y), Color.rose().dim(0.3))

        bar_width, bar_height = width * 0.5, 12
        bar_left = (width - bar_width) / 2
        bar_top = base_y + 30
        pygame.draw.rect(window, Color(255, 255, 255).tuple(), (bar_left, bar_top, bar_width, bar_height), border_radius=6)
        pygame.draw.rect(
            window,
            Color.rose().tuple(),
            (bar_left, bar_top, bar_width * activation.progress, bar_height),
            border_radius=6,
        )

        remaining = activation.remaining_clicks
        label = f"{remaining} toque{'s' if remaining > 1 else ''} más" if remaining > 0 else READY
        self._text(window, label, 28, (width / 2, bar_top + 40), Color.rose().dim(0.3))

        spacing = 36
        first_x = width / 2 - spacing * (activation.threshold - 1) / 2
        for i in range(activation.threshold):
            box = BoundingBox(top=bar_top + 62, left=first_x + i * spacing - 12, width=24, height=21)
            points = _project(_unit_heart(24), box, scale=1.0, tilt=TiltVector())
            if i < activation.click_count:
                pygame.draw.polygon(window, Color.rose().tuple(), points)
            else:
                pygame.draw.polygon(window, Color.rose().tuple(), points, 2)

    def _draw_message(self, window: pygame.Surface) -> None:
        width = self.layout.width
        top = self.layout.heart_box.bottom + self.layout.height * 0.06
        for i, line in enumerate(MESSAGE_LINES):
            self._text(window, line, 36, (width / 2, top + i * 38), Color.rose().dim(0.35))

        image = self._load_image()
        if image is not None:
            image_top = top + len(MESSAGE_LINES) * 38
            window.blit(image, image.get_rect(midtop=(int(width / 2), int(image_top))))

    def _load_image(self) -> pygame.Surface | None:
        if self._image_loaded:
            return self._image
        self._image_loaded = True
        if not self._image_path:
            return None
        path = Path(self._image_path).expanduser()
        if not path.exists():
            logger.warning("Message image %s not found; skipping it.", path)
            return None
        try:
            image = pygame.image.load(str(path))
        except pygame.error:
            logger.exception("Failed to load message image %s", path)
            return None
        max_height = self.layout.height * 0.22
        if image.get_height() > max_height:
            ratio = max_height / image.get_height()
            image = pygame.transform.smoothscale(
                image, (int(image.get_width() * ratio), int(max_height))
            )
        self._image = image
        return image
