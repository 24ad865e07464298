"""
Data models for diagram layout and edge routing.

This module contains the dataclasses passed across the layout and routing
boundary. Inputs (NodeSpec, EdgeSpec) describe a graph snapshot; outputs
(Placement, Route) describe the computed geometry. Every instance is frozen
so a result can be shared freely once a call returns.

Classes:
    Side: One of the four sides of a rectangle.
    NodeSpec: Size of a stock node to be placed.
    EdgeSpec: Directed flow between two nodes.
    Placement: Computed rectangle for a node.
    Route: Computed cubic bezier for an edge.
    LayoutConfig: Tuning parameters for the force-directed layout.
"""

import dataclasses
import math
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

Point = Tuple[float, float]


class LayoutConfigError(ValueError):
    """Raised when a LayoutConfig holds an unusable value."""


class NodeSpecError(ValueError):
    """Raised when a node has an unusable size or a mismatched id."""


class Side(Enum):
    """Which side of a rectangle an edge connects to."""

    TOP = "top"
    RIGHT = "right"
    BOTTOM = "bottom"
    LEFT = "left"

    @property
    def outward(self) -> Point:
        """Unit vector pointing away from the rectangle through this side."""
        return _OUTWARD[self]

    @property
    def opposite(self) -> "Side":
        return _OPPOSITE[self]

    @property
    def is_horizontal(self) -> bool:
        """True for LEFT and RIGHT, whose edges travel horizontally."""
        return self in (Side.LEFT, Side.RIGHT)

    def midpoint(self, rect: "Placement") -> Point:
        """Exact center of this side on the given rectangle."""
        cx, cy = rect.center
        if self is Side.TOP:
            return (cx, rect.y)
        if self is Side.BOTTOM:
            return (cx, rect.y + rect.height)
        if self is Side.LEFT:
            return (rect.x, cy)
        return (rect.x + rect.width, cy)


_OUTWARD = {
    Side.TOP: (0.0, -1.0),
    Side.RIGHT: (1.0, 0.0),
    Side.BOTTOM: (0.0, 1.0),
    Side.LEFT: (-1.0, 0.0),
}

_OPPOSITE = {
    Side.TOP: Side.BOTTOM,
    Side.RIGHT: Side.LEFT,
    Side.BOTTOM: Side.TOP,
    Side.LEFT: Side.RIGHT,
}

# Iteration order for exhaustive side searches.
ALL_SIDES = (Side.TOP, Side.RIGHT, Side.BOTTOM, Side.LEFT)


@dataclass(frozen=True)
class NodeSpec:
    """
    Size of a stock node to be placed.

    Attributes:
        id: Unique node identifier.
        width: Rectangle width.
        height: Rectangle height.
    """

    id: str
    width: float
    height: float

    def __post_init__(self):
        for name in ("width", "height"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise NodeSpecError(
                    f"Node {self.id!r}: {name} must be a finite non-negative "
                    f"number, got {value!r}"
                )


@dataclass(frozen=True)
class EdgeSpec:
    """
    A directed flow from one node to another.

    Either endpoint may name a node that does not exist; such edges are
    skipped by both layout and routing.
    """

    id: str
    source_id: str
    target_id: str


@dataclass(frozen=True)
class Placement:
    """
    Computed rectangle for a node: top-left corner plus size.

    Attributes:
        id: Node identifier.
        x: Left edge x-coordinate.
        y: Top edge y-coordinate.
        width: Rectangle width.
        height: Rectangle height.
    """

    id: str
    x: float
    y: float
    width: float
    height: float

    @property
    def x2(self) -> float:
        return self.x + self.width

    @property
    def y2(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Point:
        return (self.x + self.width / 2, self.y + self.height / 2)


@dataclass(frozen=True)
class Route:
    """
    A routed edge drawn as a cubic bezier from start to end.

    Attributes:
        edge_id: Identifier of the routed EdgeSpec.
        start: Midpoint of source_side on the source rectangle.
        end: Midpoint of target_side on the target rectangle.
        c1: First control point, pushed outward from start.
        c2: Second control point, pushed outward from end.
        source_side: Side of the source node the edge leaves through.
        target_side: Side of the target node the edge enters through.
    """

    edge_id: str
    start: Point
    end: Point
    c1: Point
    c2: Point
    source_side: Side
    target_side: Side


@dataclass(frozen=True)
class LayoutConfig:
    """
    Tuning parameters for the force-directed layout.

    Attributes:
        iterations: Number of simulation steps per component.
        optimal_distance: Ideal spring length k.
        attraction_strength: Spring pull coefficient.
        repulsion_strength: Coefficient on the k^2 / d repulsion term.
        flow_bias: Vertical nudge per unit of out-degree minus in-degree.
        initial_temperature: Displacement cap on the first step.
        cooling_rate: Per-step geometric decay of the displacement cap.
        min_distance: Floor on pair distance in the repulsion term.
        initial_spread: Scale of the hash-seeded starting positions.
        component_spacing: Vertical gap between stacked components.
        isolated_margin: Gap between grid-packed isolated nodes.
        horizontal_stretch: Post-process scale applied to x coordinates.
    """

    iterations: int = 150
    optimal_distance: float = 36.0
    attraction_strength: float = 0.02
    repulsion_strength: float = 1.0
    flow_bias: float = 20.0
    initial_temperature: float = 80.0
    cooling_rate: float = 0.95
    min_distance: float = 10.0
    initial_spread: float = 150.0
    component_spacing: float = 50.0
    isolated_margin: float = 40.0
    horizontal_stretch: float = 2.0

    def __post_init__(self):
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if not math.isfinite(value):
                raise LayoutConfigError(f"{f.name} must be finite, got {value!r}")
        if self.iterations < 0:
            raise LayoutConfigError("iterations must be >= 0")
        if self.optimal_distance <= 0:
            raise LayoutConfigError("optimal_distance must be > 0")
        if self.min_distance <= 0:
            raise LayoutConfigError("min_distance must be > 0")
        if not 0 < self.cooling_rate <= 1:
            raise LayoutConfigError("cooling_rate must be in (0, 1]")
        if self.initial_temperature < 0:
            raise LayoutConfigError("initial_temperature must be >= 0")
        if self.horizontal_stretch <= 0:
            raise LayoutConfigError("horizontal_stretch must be > 0")
        for name in ("initial_spread", "component_spacing", "isolated_margin"):
            if getattr(self, name) < 0:
                raise LayoutConfigError(f"{name} must be >= 0")

    def replace(self, **overrides) -> "LayoutConfig":
        """Return a copy with the given fields changed."""
        return dataclasses.replace(self, **overrides)
