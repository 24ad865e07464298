"""
Debug tracing infrastructure for stockflow.

This module provides data structures for capturing a detailed trace of one
layout-and-routing run. When a LayoutTrace is passed to layout() or route()
(or DiagramLayout.run is called with debug=True), each pipeline stage
records the data it produced and every routed edge records how its sides
were chosen.

This is primarily useful for:
1. Debugging odd placements (component split, final temperature, offsets)
2. Understanding why an edge connects where it does (retries, fallback)
3. Writing targeted tests (verifying specific routing decisions)

Usage:
    >>> engine = DiagramLayout()
    >>> geometry = engine.run(nodes, edges, debug=True)
    >>> trace = engine.get_trace()
    >>> print(trace.summary())
    >>> trace.dump_to_file("layout_trace.txt")
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .models import Side


@dataclass
class RoutingDecision:
    """
    Record of how one edge was routed.

    Attributes:
        edge_id: The routed edge.
        source_side: Side chosen on the source node.
        target_side: Side chosen on the target node.
        multiplier: Control-distance multiplier of the accepted curve
                    (1.0 when the first attempt was collision free).
        used_fallback: Whether the per-edge side search ran.
        fallback_score: Score of the side pair picked by the search, if any.
    """

    edge_id: str
    source_side: Side
    target_side: Side
    multiplier: float = 1.0
    used_fallback: bool = False
    fallback_score: Optional[float] = None

    def __str__(self) -> str:
        text = (
            f"{self.edge_id}: {self.source_side.value} -> "
            f"{self.target_side.value} (x{self.multiplier:g})"
        )
        if self.used_fallback:
            text += f" [fallback score={self.fallback_score:g}]"
        return text


@dataclass
class PipelineStage:
    """
    Snapshot of state at a pipeline stage.

    The pipeline has these stages:
    1. decompose - isolated nodes and connected components
    2. simulate - one entry per simulated component
    3. compose - stacking offsets and final bounds
    4. assign_sides - in/out side per node
    5. route - totals for routed, skipped and fallback edges

    Attributes:
        name: Name of this pipeline stage
        data: Dictionary of relevant data at this stage
    """

    name: str
    data: Dict[str, Any]

    def __str__(self) -> str:
        lines = [f"=== Stage: {self.name} ==="]
        for key, value in self.data.items():
            # Truncate long values
            str_val = str(value)
            if len(str_val) > 100:
                str_val = str_val[:100] + "..."
            lines.append(f"  {key}: {str_val}")
        return "\n".join(lines)


@dataclass
class LayoutTrace:
    """
    Complete trace of a layout and routing run.

    Attributes:
        stages: Pipeline stages with their data, in execution order
        decisions: One RoutingDecision per routed edge
    """

    stages: List[PipelineStage] = field(default_factory=list)
    decisions: List[RoutingDecision] = field(default_factory=list)

    def add_stage(self, name: str, data: Dict[str, Any]) -> None:
        """Add a pipeline stage snapshot."""
        self.stages.append(PipelineStage(name, dict(data)))

    def add_decision(self, decision: RoutingDecision) -> None:
        self.decisions.append(decision)

    def get_stage(self, name: str) -> Optional[PipelineStage]:
        """Get the first pipeline stage with the given name."""
        for stage in self.stages:
            if stage.name == name:
                return stage
        return None

    def get_stages(self, name: str) -> List[PipelineStage]:
        """Get every pipeline stage with the given name."""
        return [stage for stage in self.stages if stage.name == name]

    def get_decision(self, edge_id: str) -> Optional[RoutingDecision]:
        for decision in self.decisions:
            if decision.edge_id == edge_id:
                return decision
        return None

    def fallback_decisions(self) -> List[RoutingDecision]:
        """Decisions where the per-edge side search replaced node sides."""
        return [d for d in self.decisions if d.used_fallback]

    def summary(self) -> str:
        """
        Generate a human-readable summary of the trace.

        Returns a string with:
        - Pipeline stages overview
        - Routing statistics
        """
        lines = [
            "=" * 60,
            "LAYOUT TRACE SUMMARY",
            "=" * 60,
            "",
            f"Pipeline stages: {len(self.stages)}",
        ]

        for stage in self.stages:
            lines.append(f"  {stage.name}")

        retried = [d for d in self.decisions if d.multiplier != 1.0]
        lines.extend(
            [
                "",
                f"Routed edges: {len(self.decisions)}",
                f"Widened curves: {len(retried)}",
                f"Fallback searches: {len(self.fallback_decisions())}",
            ]
        )
        return "\n".join(lines)

    def dump(self) -> str:
        """
        Generate a complete human-readable dump of the trace.

        This includes all stages with their full data and every routing
        decision.
        """
        lines = [self.summary(), "", "=" * 60, "DETAILED TRACE", "=" * 60, ""]

        lines.append("PIPELINE STAGES:")
        lines.append("-" * 40)
        for stage in self.stages:
            lines.append(str(stage))
            lines.append("")

        lines.append("ROUTING DECISIONS:")
        lines.append("-" * 40)
        for decision in self.decisions:
            lines.append(str(decision))

        return "\n".join(lines)

    def dump_to_file(self, filename: str) -> None:
        """Write the complete trace dump to a file."""
        with open(filename, "w", encoding="utf-8") as f:
            f.write(self.dump())
