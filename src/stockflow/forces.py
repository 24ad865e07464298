"""
Spring-electrical simulation for one connected component.

Every pair of nodes repels with magnitude k^2 / d, every flow pulls its two
ends together with magnitude d^2 / k, and a vertical flow bias moves nodes
by their out-degree minus in-degree. The summed displacement of each node is
capped by an annealing temperature that decays geometrically, so the layout
settles instead of oscillating.

Positions here are node centers; sizes are applied later by the composer.
"""

import hashlib
import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from .models import EdgeSpec, LayoutConfig, Point

logger = logging.getLogger(__name__)

_HASH_SCALE = float(2**64)


def hash_unit(node_id: str, salt: str) -> float:
    """
    Map (node_id, salt) to a float in [0, 1).

    Uses a digest rather than the built-in hash(), which is randomized per
    process for strings.
    """
    digest = hashlib.blake2b(
        f"{salt}:{node_id}".encode("utf-8"), digest_size=8
    ).digest()
    return int.from_bytes(digest, "big") / _HASH_SCALE


def initial_position(node_id: str, spread: float) -> Point:
    """Reproducible starting position within a square of side spread."""
    return (
        (hash_unit(node_id, "x") - 0.5) * spread,
        (hash_unit(node_id, "y") - 0.5) * spread,
    )


@dataclass
class SimulationResult:
    """Positions produced for one component."""

    positions: Dict[str, Point] = field(default_factory=dict)
    final_temperature: float = 0.0
    iterations: int = 0


class ForceSimulator:
    """
    Runs the annealed force simulation for a single component.

    The simulator holds only its configuration; each call to simulate()
    works on fresh state.
    """

    def __init__(self, config: LayoutConfig):
        self.config = config

    def simulate(
        self, component: Sequence[str], edges: Sequence[EdgeSpec]
    ) -> SimulationResult:
        """
        Compute center positions for the nodes of one component.

        Args:
            component: Node ids in the component
            edges: Flows; those not inside the component are ignored

        Returns:
            SimulationResult with a position per node id
        """
        config = self.config
        ids = list(component)

        if len(ids) == 1:
            return SimulationResult(positions={ids[0]: (0.0, 0.0)})

        members = set(ids)
        links = sorted(
            (e.source_id, e.target_id)
            for e in edges
            if e.source_id in members and e.target_id in members
        )

        out_degree = {n: 0 for n in ids}
        in_degree = {n: 0 for n in ids}
        for source, target in links:
            out_degree[source] += 1
            in_degree[target] += 1

        positions = {n: list(initial_position(n, config.initial_spread)) for n in ids}
        temperature = config.initial_temperature

        for _ in range(config.iterations):
            forces = self._compute_forces(ids, links, positions)
            for n in ids:
                forces[n][1] += (out_degree[n] - in_degree[n]) * config.flow_bias
            self._apply_forces(ids, positions, forces, temperature)
            temperature *= config.cooling_rate

        logger.debug(
            "Simulated %d nodes over %d iterations (final temperature %.4f)",
            len(ids),
            config.iterations,
            temperature,
        )
        return SimulationResult(
            positions={n: (positions[n][0], positions[n][1]) for n in ids},
            final_temperature=temperature,
            iterations=config.iterations,
        )

    def _compute_forces(
        self,
        ids: List[str],
        links: List[tuple],
        positions: Dict[str, List[float]],
    ) -> Dict[str, List[float]]:
        """Sum repulsion over all pairs and attraction over all links."""
        config = self.config
        k = config.optimal_distance
        forces = {n: [0.0, 0.0] for n in ids}

        for i, a in enumerate(ids):
            ax, ay = positions[a]
            for b in ids[i + 1 :]:
                dx = ax - positions[b][0]
                dy = ay - positions[b][1]
                dist = math.hypot(dx, dy)
                if dist == 0:
                    # Coincident nodes have no direction to push along
                    continue
                magnitude = (
                    config.repulsion_strength * k * k / max(dist, config.min_distance)
                )
                fx = dx / dist * magnitude
                fy = dy / dist * magnitude
                forces[a][0] += fx
                forces[a][1] += fy
                forces[b][0] -= fx
                forces[b][1] -= fy

        for source, target in links:
            if source == target:
                continue
            dx = positions[target][0] - positions[source][0]
            dy = positions[target][1] - positions[source][1]
            dist = math.hypot(dx, dy)
            if dist == 0:
                continue
            magnitude = dist * dist / k * config.attraction_strength
            fx = dx / dist * magnitude
            fy = dy / dist * magnitude
            forces[source][0] += fx
            forces[source][1] += fy
            forces[target][0] -= fx
            forces[target][1] -= fy

        return forces

    @staticmethod
    def _apply_forces(
        ids: List[str],
        positions: Dict[str, List[float]],
        forces: Dict[str, List[float]],
        temperature: float,
    ) -> None:
        """Move each node along its force, by at most temperature."""
        for n in ids:
            fx, fy = forces[n]
            length = math.hypot(fx, fy)
            if length == 0:
                continue
            step = min(length, temperature) / length
            positions[n][0] += fx * step
            positions[n][1] += fy * step
