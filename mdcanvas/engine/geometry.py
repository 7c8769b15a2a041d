"""Rectangle math shared by the planner, snap engine and interaction controller."""

from typing import NamedTuple

from mdcanvas.dsl.schema import MIN_ELEMENT_HEIGHT, MIN_ELEMENT_WIDTH, Element
from mdcanvas.engine.units import clamp


class Rect(NamedTuple):
    """Axis-aligned rectangle in canvas pixels."""

    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def center_y(self) -> float:
        return self.y + self.height / 2


def rect_of(element: Element) -> Rect:
    """Geometry of an element as a Rect."""
    return Rect(element.x, element.y, element.width, element.height)


def contains_rect(outer: Rect, inner: Rect) -> bool:
    """Check whether inner lies fully inside outer."""
    return (
        inner.x >= outer.x
        and inner.y >= outer.y
        and inner.right <= outer.right
        and inner.bottom <= outer.bottom
    )


def overlaps(a: Rect, b: Rect) -> bool:
    """Check if two rectangles overlap (touching edges do not count)."""
    return not (
        a.right <= b.x or
        b.right <= a.x or
        a.bottom <= b.y or
        b.bottom <= a.y
    )


def clamp_position(
    x: float, y: float, width: float, height: float,
    canvas_width: float, canvas_height: float,
) -> tuple[float, float]:
    """Clamp a top-left corner so the box stays on the canvas."""
    return (
        clamp(x, 0, max(0.0, canvas_width - width)),
        clamp(y, 0, max(0.0, canvas_height - height)),
    )


def clamp_to_canvas(rect: Rect, canvas_width: float, canvas_height: float) -> Rect:
    """Clamp a rectangle inside [0, canvas_width] x [0, canvas_height].

    Size is limited to the canvas first (never below the element floors),
    then the position is pulled back inside.
    """
    width = clamp(rect.width, MIN_ELEMENT_WIDTH, max(MIN_ELEMENT_WIDTH, canvas_width))
    height = clamp(rect.height, MIN_ELEMENT_HEIGHT, max(MIN_ELEMENT_HEIGHT, canvas_height))
    x, y = clamp_position(rect.x, rect.y, width, height, canvas_width, canvas_height)
    return Rect(x, y, width, height)


def apply_rect(element: Element, rect: Rect) -> None:
    """Write a rectangle back onto an element in place."""
    element.x = rect.x
    element.y = rect.y
    element.width = rect.width
    element.height = rect.height
