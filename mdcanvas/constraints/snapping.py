"""Magnetic snapping of a dragged element to siblings and the canvas center."""

from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from mdcanvas.dsl.schema import (
    CANVAS_CENTER_SOURCE,
    AlignmentGuide,
    Element,
    GuideAxis,
    SnapResult,
)
from mdcanvas.engine.geometry import clamp_position
from mdcanvas.engine.units import DEFAULT_SNAP_THRESHOLD

# Center alignments win ties against edge alignments
CENTER_PRIORITY = 0
EDGE_PRIORITY = 1

_EPSILON = 1e-6


@dataclass(frozen=True)
class SnapCandidate:
    """A position on one axis the moving element could snap to."""

    axis: GuideAxis
    target: float  # Snapped top-left coordinate on this axis
    position: float  # Where the guide line is drawn
    distance: float
    priority: int
    source: str


@dataclass
class _AxisState:
    """Per-axis accumulator for one snap computation."""

    axis: GuideAxis
    best: Optional[SnapCandidate] = None
    matches: list[SnapCandidate] = field(default_factory=list)

    def offer(self, candidate: SnapCandidate) -> None:
        self.matches.append(candidate)
        if self.best is None or (candidate.distance, candidate.priority) < (
            self.best.distance,
            self.best.priority,
        ):
            self.best = candidate

    def guides(self, applied: float) -> list[AlignmentGuide]:
        """Guides for every candidate that coincides with the applied position."""
        if self.best is None or abs(applied - self.best.target) > _EPSILON:
            return []
        seen = set()
        guides = []
        for candidate in self.matches:
            if abs(candidate.target - applied) > _EPSILON:
                continue
            key = (candidate.position, candidate.source)
            if key in seen:
                continue
            seen.add(key)
            guides.append(
                AlignmentGuide(axis=self.axis, position=candidate.position, source=candidate.source)
            )
        return guides


@dataclass
class SnappingConstraint:
    """Snapping behavior for a dragged element.

    Vertical guides align x positions, horizontal guides align y positions.
    """

    canvas_width: float = 1080
    canvas_height: float = 1440
    snap_threshold: float = DEFAULT_SNAP_THRESHOLD

    def snap(self, moving: Element, siblings: Iterable[Element]) -> SnapResult:
        """Snap an element against its siblings and the canvas center.

        Args:
            moving: Element at its raw (unsnapped) drag position.
            siblings: Other elements on the same page. The moving element is
                skipped if present.

        Returns:
            Snapped, clamped position and the guides to display.
        """
        x_state = _AxisState(GuideAxis.VERTICAL)
        y_state = _AxisState(GuideAxis.HORIZONTAL)

        self._offer_canvas_center(x_state, moving.x, moving.width, self.canvas_width)
        self._offer_canvas_center(y_state, moving.y, moving.height, self.canvas_height)

        for sibling in siblings:
            if sibling.id == moving.id:
                continue
            self._offer_sibling(x_state, moving.x, moving.width, sibling.x, sibling.width, sibling.id)
            self._offer_sibling(y_state, moving.y, moving.height, sibling.y, sibling.height, sibling.id)

        snapped_x = x_state.best.target if x_state.best else moving.x
        snapped_y = y_state.best.target if y_state.best else moving.y

        x, y = clamp_position(
            snapped_x, snapped_y, moving.width, moving.height,
            self.canvas_width, self.canvas_height,
        )

        return SnapResult(x=x, y=y, guides=x_state.guides(x) + y_state.guides(y))

    def _offer(
        self,
        state: _AxisState,
        current: float,
        line: float,
        target: float,
        priority: int,
        source: str,
    ) -> None:
        """Record a candidate if the moving line is within threshold of the guide line."""
        dist = abs(current - line)
        if dist <= self.snap_threshold:
            state.offer(SnapCandidate(
                axis=state.axis,
                target=target,
                position=line,
                distance=dist,
                priority=priority,
                source=source,
            ))

    def _offer_canvas_center(self, state: _AxisState, start: float, size: float, canvas_size: float) -> None:
        middle = canvas_size / 2
        self._offer(
            state, start + size / 2, middle, middle - size / 2,
            CENTER_PRIORITY, CANVAS_CENTER_SOURCE,
        )

    def _offer_sibling(
        self,
        state: _AxisState,
        start: float,
        size: float,
        other_start: float,
        other_size: float,
        source: str,
    ) -> None:
        end = start + size
        other_end = other_start + other_size
        other_mid = other_start + other_size / 2

        # center-center
        self._offer(state, start + size / 2, other_mid, other_mid - size / 2, CENTER_PRIORITY, source)
        # left-left / top-top
        self._offer(state, start, other_start, other_start, EDGE_PRIORITY, source)
        # right-right / bottom-bottom
        self._offer(state, end, other_end, other_end - size, EDGE_PRIORITY, source)
        # moving end touches sibling start
        self._offer(state, end, other_start, other_start - size, EDGE_PRIORITY, source)
        # moving start touches sibling end
        self._offer(state, start, other_end, other_end, EDGE_PRIORITY, source)


def compute_snap(
    moving: Element,
    siblings: Sequence[Element],
    canvas_width: float,
    canvas_height: float,
    threshold: float = DEFAULT_SNAP_THRESHOLD,
) -> SnapResult:
    """Snap a moving element; see SnappingConstraint.snap.

    Args:
        moving: Element at its raw drag position.
        siblings: Other elements on the page.
        canvas_width: Canvas width in pixels.
        canvas_height: Canvas height in pixels.
        threshold: Maximum distance (px) at which a guide attracts.

    Returns:
        SnapResult with x, y and guides.
    """
    constraint = SnappingConstraint(
        canvas_width=canvas_width,
        canvas_height=canvas_height,
        snap_threshold=threshold,
    )
    return constraint.snap(moving, siblings)
