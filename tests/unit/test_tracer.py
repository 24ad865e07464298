"""
Tests for the tracer module.

These tests verify the debug tracing infrastructure used to capture
stage data and routing decisions during a layout run.
"""

import os
import tempfile

from stockflow.models import Side
from stockflow.tracer import LayoutTrace, PipelineStage, RoutingDecision


class TestRoutingDecision:
    """Tests for RoutingDecision dataclass."""

    def test_defaults(self):
        decision = RoutingDecision("f1", Side.RIGHT, Side.LEFT)
        assert decision.multiplier == 1.0
        assert not decision.used_fallback
        assert decision.fallback_score is None

    def test_str_direct(self):
        """Test string representation for a first-try curve."""
        result = str(RoutingDecision("f1", Side.RIGHT, Side.LEFT))
        assert result == "f1: right -> left (x1)"

    def test_str_fallback(self):
        decision = RoutingDecision(
            "loop",
            Side.TOP,
            Side.TOP,
            multiplier=1.5,
            used_fallback=True,
            fallback_score=100.0,
        )
        result = str(decision)
        assert "loop: top -> top (x1.5)" in result
        assert "[fallback score=100]" in result


class TestPipelineStage:
    """Tests for PipelineStage dataclass."""

    def test_creation(self):
        stage = PipelineStage(name="decompose", data={"isolated": ["C"]})
        assert stage.name == "decompose"
        assert stage.data == {"isolated": ["C"]}

    def test_str(self):
        stage = PipelineStage(name="route", data={"routed": 2, "skipped": 0})
        result = str(stage)
        assert "=== Stage: route ===" in result
        assert "routed: 2" in result
        assert "skipped: 0" in result

    def test_str_truncates_long_values(self):
        """Values longer than 100 characters are cut with an ellipsis."""
        stage = PipelineStage(name="compose", data={"nodes": "x" * 150})
        line = str(stage).splitlines()[1]
        assert line == "  nodes: " + "x" * 100 + "..."


class TestLayoutTrace:
    """Tests for LayoutTrace dataclass."""

    def test_empty(self):
        trace = LayoutTrace()
        assert trace.stages == []
        assert trace.decisions == []
        assert trace.get_stage("decompose") is None
        assert trace.get_decision("f1") is None

    def test_add_stage_copies_data(self):
        """Later changes to the caller's dict do not leak into the trace."""
        trace = LayoutTrace()
        data = {"routed": 1}
        trace.add_stage("route", data)
        data["routed"] = 99
        assert trace.get_stage("route").data == {"routed": 1}

    def test_get_stages_repeated_name(self):
        trace = LayoutTrace()
        trace.add_stage("simulate", {"component": 0})
        trace.add_stage("simulate", {"component": 1})
        assert trace.get_stage("simulate").data["component"] == 0
        assert [s.data["component"] for s in trace.get_stages("simulate")] == [0, 1]

    def test_decisions(self):
        trace = LayoutTrace()
        direct = RoutingDecision("f1", Side.RIGHT, Side.LEFT)
        fallback = RoutingDecision(
            "f2", Side.TOP, Side.TOP, used_fallback=True, fallback_score=40.0
        )
        trace.add_decision(direct)
        trace.add_decision(fallback)
        assert trace.get_decision("f2") is fallback
        assert trace.fallback_decisions() == [fallback]

    def test_summary(self):
        trace = LayoutTrace()
        trace.add_stage("decompose", {})
        trace.add_stage("route", {})
        trace.add_decision(RoutingDecision("f1", Side.RIGHT, Side.LEFT, 2.0))
        trace.add_decision(
            RoutingDecision(
                "f2", Side.TOP, Side.TOP, used_fallback=True, fallback_score=1.0
            )
        )
        summary = trace.summary()
        assert "LAYOUT TRACE SUMMARY" in summary
        assert "Pipeline stages: 2" in summary
        assert "Routed edges: 2" in summary
        assert "Widened curves: 1" in summary
        assert "Fallback searches: 1" in summary

    def test_dump(self):
        trace = LayoutTrace()
        trace.add_stage("route", {"routed": 1})
        trace.add_decision(RoutingDecision("f1", Side.RIGHT, Side.LEFT))
        dump = trace.dump()
        assert "DETAILED TRACE" in dump
        assert "=== Stage: route ===" in dump
        assert "ROUTING DECISIONS:" in dump
        assert "f1: right -> left" in dump

    def test_dump_to_file(self):
        trace = LayoutTrace()
        trace.add_stage("route", {"routed": 0})

        with tempfile.NamedTemporaryFile(suffix=".txt", delete=False) as f:
            output_path = f.name

        try:
            trace.dump_to_file(output_path)
            with open(output_path, encoding="utf-8") as f:
                content = f.read()
            assert content == trace.dump()
        finally:
            if os.path.exists(output_path):
                os.unlink(output_path)
