import pytest
from hypothesis import given
from hypothesis import strategies as st
from reactivex.subject import Subject

from lovenote.core.events import PointerEvent
from lovenote.core.tilt import (BoundingBox, PointerTiltTracker, TiltVector,
                                compute_tilt)

VIEWPORT = BoundingBox(top=0, left=0, width=800, height=600)
HEART = BoundingBox(top=100, left=250, width=300, height=258)


def _tracker(
    *,
    reference: BoundingBox | None = HEART,
    tilt_strength: float = 20.0,
    bounds_padding: float = 0.0,
) -> PointerTiltTracker:
    return PointerTiltTracker(
        reference=lambda: reference,
        viewport=lambda: VIEWPORT,
        tilt_strength=tilt_strength,
        bounds_padding=bounds_padding,
    )


class TestComputeTilt:
    """Validate the pointer-to-rotation mapping so the heart leans toward the cursor."""

    def test_centre_of_bounds_is_flat(self) -> None:
        """Verify the pointer at the centre produces no rotation so the heart rests face-on."""
        assert compute_tilt(VIEWPORT, 400, 300, 20) == TiltVector(x=0.0, y=0.0)

    @pytest.mark.parametrize(
        ("x", "y", "expected"),
        [
            (800, 300, TiltVector(x=0.0, y=10.0)),
            (0, 300, TiltVector(x=0.0, y=-10.0)),
            (400, 0, TiltVector(x=10.0, y=0.0)),
            (400, 600, TiltVector(x=-10.0, y=0.0)),
        ],
        ids=["right_edge", "left_edge", "top_edge", "bottom_edge"],
    )
    def test_edges_reach_half_strength(self, x: float, y: float, expected: TiltVector) -> None:
        """Confirm each edge maps to half the strength with the expected sign so the lean follows the pointer."""
        tilt = compute_tilt(VIEWPORT, x, y, 20)

        assert tilt.x == pytest.approx(expected.x)
        assert tilt.y == pytest.approx(expected.y)

    def test_pointer_outside_bounds_is_clamped(self) -> None:
        """Ensure far-away pointers saturate at the edge value instead of over-rotating."""
        assert compute_tilt(VIEWPORT, 5000, -5000, 20) == compute_tilt(VIEWPORT, 800, 0, 20)

    @given(
        x=st.floats(min_value=-1e6, max_value=1e6, allow_nan=False),
        y=st.floats(min_value=-1e6, max_value=1e6, allow_nan=False),
        strength=st.floats(min_value=0, max_value=90, allow_nan=False),
    )
    def test_rotation_never_exceeds_strength(self, x: float, y: float, strength: float) -> None:
        """Verify both axes stay within the configured strength for any pointer position."""
        tilt = compute_tilt(HEART, x, y, strength)

        assert abs(tilt.x) <= strength + 1e-9
        assert abs(tilt.y) <= strength + 1e-9


class TestPointerTiltTracker:
    """Validate tracker state handling so pointer moves update tilt only when bounds exist."""

    def test_viewport_is_used_without_padding(self) -> None:
        """Confirm the window is the reference area by default so the whole screen steers the heart."""
        tracker = _tracker()

        assert tracker.bounds() == VIEWPORT
        assert tracker.update(PointerEvent(client_x=800, client_y=300)) == TiltVector(x=0.0, y=10.0)

    def test_padding_expands_the_reference_box(self) -> None:
        """Verify positive padding swaps the viewport for the padded element box."""
        tracker = _tracker(bounds_padding=10)

        assert tracker.bounds() == BoundingBox(top=90, left=240, width=320, height=278)

    def test_unmounted_reference_keeps_previous_tilt(self) -> None:
        """Ensure moves before mounting are ignored so the heart never jumps to a bogus angle."""
        tracker = _tracker(reference=None)

        assert tracker.update(PointerEvent(client_x=800, client_y=0)) == TiltVector()
        assert tracker.vector == TiltVector()

    def test_degenerate_bounds_are_skipped(self) -> None:
        """Confirm zero-sized bounds never divide by zero so a collapsed window keeps the last tilt."""
        tracker = PointerTiltTracker(
            reference=lambda: HEART,
            viewport=lambda: BoundingBox(top=0, left=0, width=0, height=0),
        )

        assert tracker.update(PointerEvent(client_x=10, client_y=10)) == TiltVector()


class TestTiltStream:
    """Validate per-frame coalescing so bursts of pointer moves cost one update per frame."""

    def test_moves_are_sampled_once_per_frame(self) -> None:
        """Verify only the latest move before a frame is applied so rendering work stays bounded."""
        tracker = _tracker()
        moves: Subject[PointerEvent] = Subject()
        frames: Subject[float] = Subject()
        received: list[TiltVector] = []
        tracker.observe(moves, frames).subscribe(received.append)

        moves.on_next(PointerEvent(client_x=0, client_y=300))
        moves.on_next(PointerEvent(client_x=200, client_y=300))
        moves.on_next(PointerEvent(client_x=800, client_y=300))
        assert received == []

        frames.on_next(16.0)
        assert received == [TiltVector(x=0.0, y=10.0)]

    def test_frames_without_moves_emit_nothing(self) -> None:
        """Ensure idle frames do not re-emit the same tilt so subscribers only hear about changes."""
        tracker = _tracker()
        moves: Subject[PointerEvent] = Subject()
        frames: Subject[float] = Subject()
        received: list[TiltVector] = []
        tracker.observe(moves, frames).subscribe(received.append)

        moves.on_next(PointerEvent(client_x=800, client_y=300))
        frames.on_next(16.0)
        frames.on_next(16.0)
        moves.on_next(PointerEvent(client_x=800, client_y=300))
        frames.on_next(16.0)

        assert received == [TiltVector(x=0.0, y=10.0)]
