"""
Per-node side assignment for edge routing.

Every node gets one side for all of its incoming flows and a different
side for all of its outgoing flows, chosen from where its neighbours sit.
Edges therefore fan into and out of a single anchor per side, and a node
never mixes arriving and departing arrows on the same edge of its box.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Mapping, Sequence, Tuple

from .geometry import average_point, best_side, get_center
from .models import EdgeSpec, Placement, Point, Side

logger = logging.getLogger(__name__)

# =============================================================================
# SIDE SCORING - weights used when the natural in and out sides collide
# =============================================================================

# Reward for a neighbour lying in the outward half-plane of its side
ALIGNED_EDGE_SCORE = 30

# Penalty for a neighbour behind its side (the curve must wrap around)
MISALIGNED_EDGE_PENALTY = 10

# Bonus when the pair's orientation matches the dominant neighbour spread
AXIS_MATCH_BONUS = 20

# How far below the best pair the majority direction's pair may score
# and still be preferred
MAJORITY_TOLERANCE = 20

# =============================================================================

DEFAULT_IN_SIDE = Side.LEFT
DEFAULT_OUT_SIDE = Side.RIGHT

# Candidate (in_side, out_side) pairs, in tie-break order
OPPOSITE_PAIRS: Tuple[Tuple[Side, Side], ...] = (
    (Side.LEFT, Side.RIGHT),
    (Side.RIGHT, Side.LEFT),
    (Side.TOP, Side.BOTTOM),
    (Side.BOTTOM, Side.TOP),
)


@dataclass(frozen=True)
class NodeSides:
    """The side serving incoming flows and the side serving outgoing flows."""

    in_side: Side = DEFAULT_IN_SIDE
    out_side: Side = DEFAULT_OUT_SIDE


def _half_plane_score(side: Side, center: Point, neighbours: Sequence[Point]) -> int:
    dir_x, dir_y = side.outward
    score = 0
    for x, y in neighbours:
        if dir_x * (x - center[0]) + dir_y * (y - center[1]) > 0:
            score += ALIGNED_EDGE_SCORE
        else:
            score -= MISALIGNED_EDGE_PENALTY
    return score


def score_side_pair(
    center: Point,
    in_side: Side,
    out_side: Side,
    source_positions: Sequence[Point],
    target_positions: Sequence[Point],
) -> int:
    """
    Score how well an (in_side, out_side) pair serves a node's flows.

    Each incoming flow scores by whether its source lies in front of
    in_side, each outgoing flow likewise for out_side, and the pair earns a
    bonus when its orientation matches the axis along which the
    neighbours are mostly spread.
    """
    score = _half_plane_score(in_side, center, source_positions)
    score += _half_plane_score(out_side, center, target_positions)

    horizontal_spread = 0.0
    vertical_spread = 0.0
    for x, y in list(source_positions) + list(target_positions):
        horizontal_spread += abs(x - center[0])
        vertical_spread += abs(y - center[1])

    if in_side.is_horizontal and horizontal_spread > vertical_spread:
        score += AXIS_MATCH_BONUS
    elif not in_side.is_horizontal and vertical_spread > horizontal_spread:
        score += AXIS_MATCH_BONUS

    return score


class SideAssigner:
    """
    Chooses in and out sides for every placed node.

    Attributes:
        placements: Final node rectangles keyed by node id.
    """

    def __init__(self, placements: Mapping[str, Placement]):
        self.placements = placements

    def assign(self, edges: Sequence[EdgeSpec]) -> Dict[str, NodeSides]:
        """
        Assign sides for every node in placements.

        Edges with an endpoint missing from placements are not counted.

        Returns:
            Dictionary mapping node ids to their NodeSides
        """
        sources_by_node: Dict[str, List[str]] = defaultdict(list)
        targets_by_node: Dict[str, List[str]] = defaultdict(list)

        for edge in edges:
            if edge.source_id not in self.placements:
                continue
            if edge.target_id not in self.placements:
                continue
            sources_by_node[edge.target_id].append(edge.source_id)
            targets_by_node[edge.source_id].append(edge.target_id)

        return {
            node_id: self.assign_node(
                node_id, sources_by_node[node_id], targets_by_node[node_id]
            )
            for node_id in sorted(self.placements)
        }

    def assign_node(
        self, node_id: str, sources: Sequence[str], targets: Sequence[str]
    ) -> NodeSides:
        """
        Choose the sides for one node.

        Args:
            node_id: The node being assigned
            sources: Source ids of its incoming flows (repeats allowed)
            targets: Target ids of its outgoing flows (repeats allowed)
        """
        rect = self.placements[node_id]
        center = get_center(rect)

        source_positions = [get_center(self.placements[s]) for s in sources]
        target_positions = [get_center(self.placements[t]) for t in targets]

        if not source_positions and not target_positions:
            return NodeSides()

        if not target_positions:
            in_side = best_side(rect, average_point(source_positions))
            return NodeSides(in_side, in_side.opposite)

        if not source_positions:
            out_side = best_side(rect, average_point(target_positions))
            return NodeSides(out_side.opposite, out_side)

        natural_in = best_side(rect, average_point(source_positions))
        natural_out = best_side(rect, average_point(target_positions))

        if natural_in != natural_out:
            return NodeSides(natural_in, natural_out)

        best_pair = OPPOSITE_PAIRS[0]
        best_score = None
        for in_side, out_side in OPPOSITE_PAIRS:
            score = score_side_pair(
                center, in_side, out_side, source_positions, target_positions
            )
            if best_score is None or score > best_score:
                best_pair = (in_side, out_side)
                best_score = score

        # The more numerous direction keeps its natural side if that costs
        # at most MAJORITY_TOLERANCE points
        in_count = len(source_positions)
        out_count = len(target_positions)
        if out_count != in_count:
            if out_count > in_count:
                preferred = (natural_out.opposite, natural_out)
            else:
                preferred = (natural_in, natural_in.opposite)
            preferred_score = score_side_pair(
                center, preferred[0], preferred[1], source_positions, target_positions
            )
            if preferred_score >= best_score - MAJORITY_TOLERANCE:
                logger.debug(
                    "Node %s: majority direction keeps %s/%s",
                    node_id,
                    preferred[0].value,
                    preferred[1].value,
                )
                return NodeSides(*preferred)

        return NodeSides(*best_pair)
