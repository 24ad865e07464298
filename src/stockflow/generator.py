"""
Main diagram layout module.

Combines force-directed placement and edge routing into one call that
turns node sizes and flows into drawable geometry.
"""

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Sequence

from .layout import layout
from .models import EdgeSpec, LayoutConfig, NodeSpec, Placement, Route
from .routing import route
from .tracer import LayoutTrace


@dataclass
class DiagramGeometry:
    """Placements and routes computed for one diagram snapshot."""

    placements: Dict[str, Placement] = field(default_factory=dict)
    routes: Dict[str, Route] = field(default_factory=dict)


class DiagramLayout:
    """
    Lay out and route stock-and-flow diagrams.

    Example:
        >>> engine = DiagramLayout()
        >>> geometry = engine.run(
        ...     {"A": NodeSpec("A", 100, 50), "B": NodeSpec("B", 100, 50)},
        ...     [EdgeSpec("f1", "A", "B")],
        ... )
        >>> geometry.routes["f1"].source_side
    """

    def __init__(self, config: Optional[LayoutConfig] = None):
        """
        Initialize the layout engine.

        Args:
            config: Layout tuning parameters; defaults when omitted
        """
        self.config = config if config is not None else LayoutConfig()
        self._last_trace: Optional[LayoutTrace] = None

    def run(
        self,
        nodes: Mapping[str, NodeSpec],
        edges: Sequence[EdgeSpec],
        debug: bool = False,
    ) -> DiagramGeometry:
        """
        Place every node, then route every edge between the placements.

        Args:
            nodes: Node sizes keyed by node id
            edges: Directed flows between nodes
            debug: If True, capture a LayoutTrace for get_trace()

        Returns:
            DiagramGeometry with placements and routes
        """
        trace = LayoutTrace() if debug else None
        placements = layout(nodes, edges, self.config, trace)
        routes = route(edges, placements, trace)
        self._last_trace = trace
        return DiagramGeometry(placements=placements, routes=routes)

    def get_trace(self) -> Optional[LayoutTrace]:
        """
        Get the trace from the last run(debug=True) call.

        Returns None if the last run was not in debug mode.
        """
        return self._last_trace
