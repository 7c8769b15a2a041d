"""Constraint module - magnetic snapping while dragging."""

from mdcanvas.constraints.snapping import (
    SnapCandidate,
    SnappingConstraint,
    compute_snap,
)

__all__ = [
    "SnapCandidate",
    "SnappingConstraint",
    "compute_snap",
]
