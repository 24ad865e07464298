"""
Force-directed layout for stock-and-flow diagrams.

The layout runs in three steps:
- Decompose the graph into isolated nodes and connected components
- Simulate each component independently (see forces.py)
- Compose: stack components vertically, grid-pack isolated nodes below
  them, center everything on the origin and stretch horizontally

The result is a fresh Placement per node id. Identical input always gives
identical output.
"""

import dataclasses
import logging
import math
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from .components import decompose
from .forces import ForceSimulator
from .models import EdgeSpec, LayoutConfig, NodeSpec, NodeSpecError, Placement, Point
from .tracer import LayoutTrace

logger = logging.getLogger(__name__)


class LayoutComposer:
    """
    Combines per-component simulations into one diagram layout.

    Attributes:
        config: Layout tuning parameters.
        simulator: Force simulator sharing the same config.
    """

    def __init__(self, config: Optional[LayoutConfig] = None):
        self.config = config if config is not None else LayoutConfig()
        self.simulator = ForceSimulator(self.config)

    def compose(
        self,
        nodes: Mapping[str, NodeSpec],
        edges: Sequence[EdgeSpec],
        trace: Optional[LayoutTrace] = None,
    ) -> Dict[str, Placement]:
        """
        Compute placements for every node.

        Args:
            nodes: Node sizes keyed by node id
            edges: Directed flows; those naming unknown ids are ignored
            trace: Optional trace to record pipeline stages into

        Returns:
            Dictionary mapping node ids to their Placement
        """
        for node_id, spec in nodes.items():
            if spec.id != node_id:
                raise NodeSpecError(
                    f"NodeSpec id {spec.id!r} does not match its key {node_id!r}"
                )

        if not nodes:
            return {}

        decomposition = decompose(nodes.keys(), edges)
        if trace is not None:
            trace.add_stage(
                "decompose",
                {
                    "components": [list(c) for c in decomposition.components],
                    "isolated": list(decomposition.isolated),
                },
            )

        centers: Dict[str, Point] = {}
        offsets: List[float] = []
        offset_y = 0.0

        for index, component in enumerate(decomposition.components):
            result = self.simulator.simulate(component, edges)
            if trace is not None:
                trace.add_stage(
                    "simulate",
                    {
                        "component": index,
                        "size": len(component),
                        "iterations": result.iterations,
                        "final_temperature": result.final_temperature,
                    },
                )

            local = _center_on_bounds(result.positions, nodes)
            min_y, max_y = _vertical_extent(local, nodes)
            height = max_y - min_y

            # Shift so the component's top edge sits at offset_y
            shift = offset_y - min_y
            for node_id, (x, y) in local.items():
                centers[node_id] = (x, y + shift)

            offsets.append(offset_y)
            offset_y += height + self.config.component_spacing

        centers.update(self._pack_isolated(decomposition.isolated, nodes, offset_y))

        centers = _center_on_bounds(centers, nodes)
        stretch = self.config.horizontal_stretch
        centers = {n: (x * stretch, y) for n, (x, y) in centers.items()}
        centers = _center_on_bounds(centers, nodes)

        placements = {}
        for node_id in sorted(centers):
            spec = nodes[node_id]
            cx, cy = centers[node_id]
            placements[node_id] = Placement(
                id=node_id,
                x=cx - spec.width / 2,
                y=cy - spec.height / 2,
                width=spec.width,
                height=spec.height,
            )

        if trace is not None:
            trace.add_stage(
                "compose",
                {
                    "component_offsets": offsets,
                    "isolated_start_y": offset_y,
                    "nodes": len(placements),
                },
            )
        logger.debug("Placed %d nodes", len(placements))
        return placements

    def _pack_isolated(
        self, isolated: List[str], nodes: Mapping[str, NodeSpec], top: float
    ) -> Dict[str, Point]:
        """
        Arrange isolated nodes in a grid whose top edge is at top.

        The grid has ceil(sqrt(count)) columns; each row is as tall as its
        tallest node.
        """
        if not isolated:
            return {}

        margin = self.config.isolated_margin
        columns = math.ceil(math.sqrt(len(isolated)))
        centers = {}
        row_top = top
        cursor_x = 0.0
        row_height = 0.0

        for index, node_id in enumerate(isolated):
            spec = nodes[node_id]
            if index > 0 and index % columns == 0:
                row_top += row_height + margin
                cursor_x = 0.0
                row_height = 0.0
            centers[node_id] = (cursor_x + spec.width / 2, row_top + spec.height / 2)
            cursor_x += spec.width + margin
            row_height = max(row_height, spec.height)

        return centers


def _bounds(
    centers: Mapping[str, Point], nodes: Mapping[str, NodeSpec]
) -> Tuple[float, float, float, float]:
    """(min_x, min_y, max_x, max_y) of the rectangles around the centers."""
    min_x = min(x - nodes[n].width / 2 for n, (x, _) in centers.items())
    max_x = max(x + nodes[n].width / 2 for n, (x, _) in centers.items())
    min_y = min(y - nodes[n].height / 2 for n, (_, y) in centers.items())
    max_y = max(y + nodes[n].height / 2 for n, (_, y) in centers.items())
    return min_x, min_y, max_x, max_y


def _vertical_extent(
    centers: Mapping[str, Point], nodes: Mapping[str, NodeSpec]
) -> Tuple[float, float]:
    _, min_y, _, max_y = _bounds(centers, nodes)
    return min_y, max_y


def _center_on_bounds(
    centers: Mapping[str, Point], nodes: Mapping[str, NodeSpec]
) -> Dict[str, Point]:
    """Translate centers so their bounding box is centered on the origin."""
    if not centers:
        return {}
    min_x, min_y, max_x, max_y = _bounds(centers, nodes)
    mid_x = (min_x + max_x) / 2
    mid_y = (min_y + max_y) / 2
    return {n: (x - mid_x, y - mid_y) for n, (x, y) in centers.items()}


def layout(
    nodes: Mapping[str, NodeSpec],
    edges: Sequence[EdgeSpec],
    config: Optional[LayoutConfig] = None,
    trace: Optional[LayoutTrace] = None,
) -> Dict[str, Placement]:
    """
    Place every node of a diagram.

    Args:
        nodes: Node sizes keyed by node id
        edges: Directed flows between nodes
        config: Optional LayoutConfig; defaults are used when omitted
        trace: Optional LayoutTrace to record pipeline stages into

    Returns:
        Dictionary mapping node ids to their Placement
    """
    return LayoutComposer(config).compose(nodes, edges, trace)


def apply_layout(
    current: Mapping[str, Placement], computed: Mapping[str, Placement]
) -> Dict[str, Placement]:
    """
    Move existing placements to their computed positions.

    Sizes are kept from current; ids without a computed placement are
    returned unchanged.
    """
    result = {}
    for node_id, placement in current.items():
        new = computed.get(node_id)
        if new is None:
            result[node_id] = placement
        else:
            result[node_id] = dataclasses.replace(placement, x=new.x, y=new.y)
    return result
