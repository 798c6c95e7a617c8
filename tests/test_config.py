"""
Tests for the core data models and engine configuration.
"""

import pytest

from conftest import make_skid
from truckload.config import EngineConfig, Position, Skid, TruckDimensions


class TestPosition:
    def test_rejects_odd_rotation(self):
        with pytest.raises(ValueError):
            Position(0, 0, 0, 45)

    def test_from_dict_defaults_rotation(self):
        assert Position.from_dict({"x": 1, "y": 0, "z": 2}) == Position(1, 0, 2, 0)


class TestSkid:
    def test_footprint_swaps_on_rotation(self):
        skid = make_skid("a", width=1, length=3)
        assert skid.footprint() == (1, 3)
        assert skid.footprint(90) == (3, 1)
        assert skid.with_position(Position(0, 0, 0, 90)).footprint() == (3, 1)

    def test_bounds(self):
        skid = make_skid("a", 1, 3, 2).with_position(Position(1, 0.5, 2, 90))
        assert skid.bounds() == (1, 0.5, 2, 4, 2.5, 3)

    def test_bounds_need_a_position(self):
        with pytest.raises(ValueError):
            make_skid("a").bounds()

    def test_with_position_copies(self):
        skid = make_skid("a")
        placed = skid.with_position(Position(1, 0, 0))
        assert skid.position is None
        assert placed.id == skid.id
        assert placed.is_placed

    def test_dict_round_trip(self):
        skid = make_skid("a", is_stackable=True, max_weight_on_top=40,
                         special_handling="keep dry").with_position(Position(1, 0, 2, 90))
        data = skid.to_dict()
        assert data["isStackable"] is True
        assert data["specialHandling"] == "keep dry"
        assert Skid.from_dict(data) == skid


class TestTruckDimensions:
    def test_inside_dims_used_when_positive(self, box_truck):
        assert (box_truck.usable_length, box_truck.usable_width, box_truck.usable_height) == (10, 2, 2)

    def test_fallback_ratios(self):
        truck = TruckDimensions(length=10, width=2, height=4, inside_width=0)
        assert truck.usable_length == pytest.approx(9.5)
        assert truck.usable_width == pytest.approx(1.9)
        assert truck.usable_height == pytest.approx(3.0)
        assert truck.usable_volume == pytest.approx(9.5 * 1.9 * 3.0)

    def test_dict_round_trip(self):
        truck = TruckDimensions(length=10, width=2, height=2, max_weight=1000, cubic_capacity=35)
        assert TruckDimensions.from_dict(truck.to_dict()) == truck


class TestEngineConfig:
    def test_defaults(self):
        cfg = EngineConfig()
        assert cfg.floor_sweep_step == 0.1
        assert cfg.min_support_ratio == 0.7
        assert cfg.stacking_capacity_ratio == 0.8
        assert cfg.high_priority_threshold == 2
        assert cfg.side_reference == "item"
        assert cfg.strategy_name == "floor_sweep"

    @pytest.mark.parametrize("kwargs", [
        {"floor_sweep_step": 0},
        {"safety_margin": -0.1},
        {"min_support_ratio": 1.5},
        {"side_reference": "middle"},
    ])
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            EngineConfig(**kwargs)

    def test_from_dict_accepts_camel_case(self):
        cfg = EngineConfig.from_dict({"floorSweepStep": 0.2, "safety_margin": 0.05, "strategy": "extreme_points"})
        assert cfg.floor_sweep_step == 0.2
        assert cfg.safety_margin == 0.05
        assert cfg.strategy_name == "extreme_points"

    def test_from_dict_rejects_unknown_keys(self):
        with pytest.raises(ValueError, match="Unknown engine option"):
            EngineConfig.from_dict({"turbo": True})

    def test_yaml_round_trip(self, tmp_path):
        path = tmp_path / "engine.yaml"
        cfg = EngineConfig(floor_sweep_step=0.25, side_reference="container")
        cfg.to_yaml(str(path))
        assert EngineConfig.from_yaml(str(path)) == cfg

    def test_yaml_must_be_a_mapping(self, tmp_path):
        path = tmp_path / "engine.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ValueError):
            EngineConfig.from_yaml(str(path))

    def test_evolve(self):
        cfg = EngineConfig()
        assert cfg.evolve(safety_margin=0.1).safety_margin == 0.1
        assert cfg.safety_margin == 0.0
