"""Unit tests for the models module."""

import math

import pytest

from stockflow.models import (
    ALL_SIDES,
    EdgeSpec,
    LayoutConfig,
    LayoutConfigError,
    NodeSpec,
    NodeSpecError,
    Placement,
    Route,
    Side,
)


class TestSide:
    """Tests for Side enum."""

    def test_side_values(self):
        """Test Side enum values."""
        assert Side.TOP.value == "top"
        assert Side.RIGHT.value == "right"
        assert Side.BOTTOM.value == "bottom"
        assert Side.LEFT.value == "left"

    def test_side_count(self):
        """Test Side has exactly 4 values."""
        assert len(Side) == 4
        assert set(ALL_SIDES) == set(Side)

    def test_outward_vectors(self):
        """Outward vectors are unit vectors pointing away from the box."""
        assert Side.TOP.outward == (0.0, -1.0)
        assert Side.BOTTOM.outward == (0.0, 1.0)
        assert Side.LEFT.outward == (-1.0, 0.0)
        assert Side.RIGHT.outward == (1.0, 0.0)

    def test_opposite(self):
        """Opposite sides pair up."""
        for side in Side:
            assert side.opposite.opposite is side
            ox, oy = side.outward
            px, py = side.opposite.outward
            assert (ox + px, oy + py) == (0.0, 0.0)

    def test_is_horizontal(self):
        """LEFT and RIGHT are the horizontal sides."""
        assert Side.LEFT.is_horizontal
        assert Side.RIGHT.is_horizontal
        assert not Side.TOP.is_horizontal
        assert not Side.BOTTOM.is_horizontal

    def test_midpoints(self):
        """Midpoints sit at the exact center of each side."""
        rect = Placement("n", 10, 20, 100, 50)
        assert Side.TOP.midpoint(rect) == (60, 20)
        assert Side.BOTTOM.midpoint(rect) == (60, 70)
        assert Side.LEFT.midpoint(rect) == (10, 45)
        assert Side.RIGHT.midpoint(rect) == (110, 45)


class TestNodeSpec:
    """Tests for NodeSpec dataclass."""

    def test_creation(self):
        spec = NodeSpec("stock", 120, 84)
        assert spec.id == "stock"
        assert spec.width == 120
        assert spec.height == 84

    def test_zero_size_allowed(self):
        """A zero-sized node is degenerate but valid."""
        spec = NodeSpec("dot", 0, 0)
        assert spec.width == 0

    @pytest.mark.parametrize("width,height", [(-1, 10), (10, -5), (math.nan, 10)])
    def test_invalid_size_raises(self, width, height):
        """Negative or non-finite sizes are rejected."""
        with pytest.raises(NodeSpecError):
            NodeSpec("bad", width, height)

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            NodeSpec("bad", math.inf, 10)

    def test_frozen(self):
        """NodeSpec cannot be mutated."""
        spec = NodeSpec("stock", 1, 1)
        with pytest.raises(AttributeError):
            spec.width = 5


class TestPlacement:
    """Tests for Placement dataclass."""

    def test_derived_coordinates(self):
        p = Placement("n", -50, -25, 100, 50)
        assert p.x2 == 50
        assert p.y2 == 25
        assert p.center == (0, 0)

    def test_equality(self):
        """Placements with the same fields compare equal."""
        assert Placement("n", 1, 2, 3, 4) == Placement("n", 1, 2, 3, 4)


class TestEdgeSpecAndRoute:
    """Tests for EdgeSpec and Route dataclasses."""

    def test_edge_spec_creation(self):
        edge = EdgeSpec("f1", "A", "B")
        assert edge.id == "f1"
        assert edge.source_id == "A"
        assert edge.target_id == "B"

    def test_route_creation(self):
        route = Route(
            edge_id="f1",
            start=(0, 0),
            end=(10, 0),
            c1=(4, 0),
            c2=(6, 0),
            source_side=Side.RIGHT,
            target_side=Side.LEFT,
        )
        assert route.edge_id == "f1"
        assert route.source_side is Side.RIGHT
        assert route.target_side is Side.LEFT


class TestLayoutConfig:
    """Tests for LayoutConfig dataclass."""

    def test_defaults(self):
        """Test LayoutConfig default values."""
        config = LayoutConfig()
        assert config.iterations == 150
        assert config.optimal_distance == 36
        assert config.attraction_strength == 0.02
        assert config.repulsion_strength == 1.0
        assert config.flow_bias == 20
        assert config.initial_temperature == 80
        assert config.cooling_rate == 0.95
        assert config.min_distance == 10
        assert config.initial_spread == 150
        assert config.component_spacing == 50
        assert config.horizontal_stretch == 2

    def test_replace(self):
        """replace() returns a modified copy and leaves the original alone."""
        config = LayoutConfig()
        changed = config.replace(iterations=10, flow_bias=0)
        assert changed.iterations == 10
        assert changed.flow_bias == 0
        assert config.iterations == 150

    @pytest.mark.parametrize(
        "overrides",
        [
            {"iterations": -1},
            {"optimal_distance": 0},
            {"min_distance": 0},
            {"cooling_rate": 0},
            {"cooling_rate": 1.5},
            {"initial_temperature": -1},
            {"horizontal_stretch": 0},
            {"component_spacing": -10},
            {"initial_spread": -1},
            {"optimal_distance": float("nan")},
            {"flow_bias": float("inf")},
            {"cooling_rate": float("nan")},
        ],
    )
    def test_invalid_values_raise(self, overrides):
        """Unusable values are rejected at construction."""
        with pytest.raises(LayoutConfigError):
            LayoutConfig(**overrides)

    def test_replace_validates(self):
        with pytest.raises(LayoutConfigError):
            LayoutConfig().replace(cooling_rate=2)
