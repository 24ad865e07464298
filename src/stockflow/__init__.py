"""
stockflow - Automatic layout for stock-and-flow diagrams

Places stock nodes with a force-directed simulation and routes every flow as
a cubic bezier that stays clear of its own boxes.

Example:
    >>> from stockflow import EdgeSpec, NodeSpec, layout, route
    >>> nodes = {
    ...     "A": NodeSpec("A", 100, 50),
    ...     "B": NodeSpec("B", 100, 50),
    ... }
    >>> edges = [EdgeSpec("f1", "A", "B")]
    >>> placements = layout(nodes, edges)
    >>> routes = route(edges, placements)

Debug Mode Example:
    >>> engine = DiagramLayout()
    >>> geometry = engine.run(nodes, edges, debug=True)
    >>> print(engine.get_trace().summary())
"""

from .generator import DiagramGeometry, DiagramLayout
from .geometry import bounding_box, svg_path, zoom_to_fit
from .layout import LayoutComposer, apply_layout, layout
from .models import (
    EdgeSpec,
    LayoutConfig,
    LayoutConfigError,
    NodeSpec,
    NodeSpecError,
    Placement,
    Route,
    Side,
)
from .preview import PreviewRenderer, render_to_png
from .routing import CurveBuilder, route
from .sides import NodeSides, SideAssigner
from .tracer import LayoutTrace, PipelineStage, RoutingDecision

__version__ = "0.1.0"

__all__ = [
    # Main API
    "layout",
    "route",
    "DiagramLayout",
    "DiagramGeometry",
    # Models
    "NodeSpec",
    "EdgeSpec",
    "Placement",
    "Route",
    "Side",
    "LayoutConfig",
    "LayoutConfigError",
    "NodeSpecError",
    # Engines
    "LayoutComposer",
    "SideAssigner",
    "NodeSides",
    "CurveBuilder",
    "apply_layout",
    # Geometry helpers
    "bounding_box",
    "zoom_to_fit",
    "svg_path",
    # Preview
    "PreviewRenderer",
    "render_to_png",
    # Debug/Tracing
    "LayoutTrace",
    "PipelineStage",
    "RoutingDecision",
]
