"""
Edge routing for stock-and-flow diagrams.

Each flow is drawn as a cubic bezier from the midpoint of its source node's
out side to the midpoint of its target node's in side. Control points are
pushed straight out of each side, so the curve leaves and enters
perpendicular to the box before bending toward the other end.

Routing per edge:
- Use the node-level sides chosen by SideAssigner
- Reject curves that pass through their own source or target box
- Retry with control points pushed further out
- Fall back to scoring all 16 side combinations for that edge alone
"""

import logging
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Sequence, Tuple

from .geometry import bezier_intersects_rect, clamp, distance, get_center
from .models import ALL_SIDES, EdgeSpec, Placement, Point, Route, Side
from .sides import NodeSides, SideAssigner
from .tracer import LayoutTrace, RoutingDecision

logger = logging.getLogger(__name__)

# =============================================================================
# ROUTING CONFIGURATION - Adjust these values to tune routing behavior
# =============================================================================

# --- Control points ---

# Control distance is this fraction of the start-to-end distance...
CONTROL_DISTANCE_RATIO = 0.4

# ...clamped to this range
MIN_CONTROL_DISTANCE = 40
MAX_CONTROL_DISTANCE = 150

# Multipliers tried, in order, when a curve cuts through its own nodes
RETRY_MULTIPLIERS = (1.5, 2.0, 2.5)

# --- Collision detection ---

# Interior samples per curve are taken at i / BEZIER_SAMPLES
BEZIER_SAMPLES = 20

# Padding around the source and target boxes
ENDPOINT_PADDING = 5

# Padding around every other box during the fallback search
OBSTACLE_PADDING = 3

# --- Fallback scoring (higher is better) ---

SOURCE_CROSSING_PENALTY = 1000
TARGET_CROSSING_PENALTY = 1000
OBSTACLE_CROSSING_PENALTY = 500

# Bonus for a side whose outward direction faces the other node
FACING_BONUS = 50

# Length bonus is MAX_LENGTH_BONUS - center_distance / LENGTH_BONUS_DIVISOR,
# floored at zero
MAX_LENGTH_BONUS = 100
LENGTH_BONUS_DIVISOR = 10

# =============================================================================


@dataclass(frozen=True)
class Curve:
    """Control points for one curve and whether they still collide."""

    c1: Point
    c2: Point
    multiplier: float = 1.0
    collides: bool = False


def control_points(
    start: Point,
    end: Point,
    source_side: Side,
    target_side: Side,
    multiplier: float = 1.0,
) -> Tuple[Point, Point]:
    """Push control points outward from each endpoint along its side."""
    push = (
        clamp(
            distance(start, end) * CONTROL_DISTANCE_RATIO,
            MIN_CONTROL_DISTANCE,
            MAX_CONTROL_DISTANCE,
        )
        * multiplier
    )
    sx, sy = source_side.outward
    tx, ty = target_side.outward
    c1 = (start[0] + sx * push, start[1] + sy * push)
    c2 = (end[0] + tx * push, end[1] + ty * push)
    return c1, c2


class CurveBuilder:
    """
    Builds collision-checked bezier routes between placed nodes.

    Attributes:
        placements: Final node rectangles keyed by node id.
    """

    def __init__(self, placements: Mapping[str, Placement]):
        self.placements = placements

    def crosses_endpoints(
        self,
        start: Point,
        c1: Point,
        c2: Point,
        end: Point,
        source: Placement,
        target: Placement,
    ) -> bool:
        """Check the curve against its padded source and target boxes."""
        return bezier_intersects_rect(
            start, c1, c2, end, source, ENDPOINT_PADDING, BEZIER_SAMPLES
        ) or bezier_intersects_rect(
            start, c1, c2, end, target, ENDPOINT_PADDING, BEZIER_SAMPLES
        )

    def safe_curve(
        self,
        source: Placement,
        target: Placement,
        source_side: Side,
        target_side: Side,
    ) -> Curve:
        """
        Build control points that keep the curve out of both end boxes.

        Tries the base control distance, then each of RETRY_MULTIPLIERS,
        and returns the first collision-free curve. If none is found the
        widest attempt is returned with collides=True.
        """
        start = source_side.midpoint(source)
        end = target_side.midpoint(target)

        c1, c2 = control_points(start, end, source_side, target_side)
        if not self.crosses_endpoints(start, c1, c2, end, source, target):
            return Curve(c1, c2)

        for multiplier in RETRY_MULTIPLIERS:
            c1, c2 = control_points(start, end, source_side, target_side, multiplier)
            if not self.crosses_endpoints(start, c1, c2, end, source, target):
                return Curve(c1, c2, multiplier)

        return Curve(c1, c2, RETRY_MULTIPLIERS[-1], collides=True)

    def score_sides(
        self,
        source: Placement,
        target: Placement,
        source_side: Side,
        target_side: Side,
    ) -> float:
        """
        Score one (source_side, target_side) combination for an edge.

        Crossing the source or target box costs SOURCE/TARGET_CROSSING_PENALTY,
        each other box crossed costs OBSTACLE_CROSSING_PENALTY, each side
        facing the other node earns FACING_BONUS, and shorter edges earn up
        to MAX_LENGTH_BONUS.
        """
        start = source_side.midpoint(source)
        end = target_side.midpoint(target)
        curve = self.safe_curve(source, target, source_side, target_side)
        c1, c2 = curve.c1, curve.c2

        score = 0.0
        if bezier_intersects_rect(
            start, c1, c2, end, source, ENDPOINT_PADDING, BEZIER_SAMPLES
        ):
            score -= SOURCE_CROSSING_PENALTY
        if bezier_intersects_rect(
            start, c1, c2, end, target, ENDPOINT_PADDING, BEZIER_SAMPLES
        ):
            score -= TARGET_CROSSING_PENALTY

        for node_id in sorted(self.placements):
            if node_id in (source.id, target.id):
                continue
            if bezier_intersects_rect(
                start,
                c1,
                c2,
                end,
                self.placements[node_id],
                OBSTACLE_PADDING,
                BEZIER_SAMPLES,
            ):
                score -= OBSTACLE_CROSSING_PENALTY

        source_center = get_center(source)
        target_center = get_center(target)
        dx = target_center[0] - source_center[0]
        dy = target_center[1] - source_center[1]

        ox, oy = source_side.outward
        if ox * dx + oy * dy > 0:
            score += FACING_BONUS
        ox, oy = target_side.outward
        if ox * -dx + oy * -dy > 0:
            score += FACING_BONUS

        length = distance(source_center, target_center)
        score += max(0.0, MAX_LENGTH_BONUS - length / LENGTH_BONUS_DIVISOR)
        return score

    def find_best_sides(
        self,
        source: Placement,
        target: Placement,
        seed: Tuple[Side, Side],
    ) -> Tuple[Side, Side, float]:
        """
        Search all 16 side combinations for one edge.

        The seed pair is scored first and only a strictly higher score
        replaces it, so ties keep the node-level assignment.

        Returns:
            (source_side, target_side, score) of the best combination
        """
        best_source, best_target = seed
        best_score = self.score_sides(source, target, best_source, best_target)

        for source_side in ALL_SIDES:
            for target_side in ALL_SIDES:
                score = self.score_sides(source, target, source_side, target_side)
                if score > best_score:
                    best_source, best_target, best_score = (
                        source_side,
                        target_side,
                        score,
                    )

        return best_source, best_target, best_score

    def build(
        self, edge: EdgeSpec, source_side: Side, target_side: Side
    ) -> Tuple[Route, RoutingDecision]:
        """
        Route one edge starting from its node-level sides.

        Both endpoints must be present in placements.
        """
        source = self.placements[edge.source_id]
        target = self.placements[edge.target_id]

        curve = self.safe_curve(source, target, source_side, target_side)
        usable = source_side.midpoint(source) != target_side.midpoint(target)
        decision = RoutingDecision(
            edge.id, source_side, target_side, multiplier=curve.multiplier
        )

        if curve.collides or not usable:
            source_side, target_side, score = self.find_best_sides(
                source, target, (source_side, target_side)
            )
            curve = self.safe_curve(source, target, source_side, target_side)
            decision = RoutingDecision(
                edge.id,
                source_side,
                target_side,
                multiplier=curve.multiplier,
                used_fallback=True,
                fallback_score=score,
            )
            if score < 0:
                logger.debug(
                    "Edge %s: best side pair %s/%s still scores %.1f",
                    edge.id,
                    source_side.value,
                    target_side.value,
                    score,
                )
        elif curve.multiplier != 1.0:
            logger.debug("Edge %s: widened curve x%g", edge.id, curve.multiplier)

        route = Route(
            edge_id=edge.id,
            start=source_side.midpoint(source),
            end=target_side.midpoint(target),
            c1=curve.c1,
            c2=curve.c2,
            source_side=source_side,
            target_side=target_side,
        )
        return route, decision


def route(
    edges: Sequence[EdgeSpec],
    placements: Mapping[str, Placement],
    trace: Optional[LayoutTrace] = None,
) -> Dict[str, Route]:
    """
    Route every edge between placed nodes.

    Args:
        edges: Directed flows to draw
        placements: Node rectangles keyed by node id
        trace: Optional LayoutTrace to record side choices into

    Returns:
        Dictionary mapping edge ids to their Route. Edges with an endpoint
        missing from placements are left out.
    """
    node_sides: Dict[str, NodeSides] = SideAssigner(placements).assign(edges)
    if trace is not None:
        trace.add_stage(
            "assign_sides",
            {
                node_id: f"in={sides.in_side.value} out={sides.out_side.value}"
                for node_id, sides in node_sides.items()
            },
        )

    builder = CurveBuilder(placements)
    routes: Dict[str, Route] = {}
    skipped = 0
    fallbacks = 0

    for edge in edges:
        if edge.source_id not in placements or edge.target_id not in placements:
            logger.debug("Skipping edge %s with unplaced endpoint", edge.id)
            skipped += 1
            continue

        edge_route, decision = builder.build(
            edge,
            node_sides[edge.source_id].out_side,
            node_sides[edge.target_id].in_side,
        )
        routes[edge.id] = edge_route
        if decision.used_fallback:
            fallbacks += 1
        if trace is not None:
            trace.add_decision(decision)

    if trace is not None:
        trace.add_stage(
            "route",
            {"routed": len(routes), "skipped": skipped, "fallbacks": fallbacks},
        )
    return routes
