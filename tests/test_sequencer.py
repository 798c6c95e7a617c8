"""
Tests for placement ordering, loading order and instruction text.
"""

import pytest

from conftest import make_skid
from truckload.config import EngineConfig, Position
from truckload.sequencer import (
    describe_side,
    generate_loading_sequence,
    loading_order,
    sort_skids_for_loading,
)


def at(skid, x, y, z, rotation=0):
    return skid.with_position(Position(x, y, z, rotation))


class TestPlacementOrder:
    def test_priority_then_weight_then_volume(self):
        skids = [
            make_skid("p2", weight=900, priority=2),
            make_skid("p1-light", weight=100, priority=1),
            make_skid("p1-heavy-small", 1, 1, 1, weight=500, priority=1),
            make_skid("p1-heavy-big", 2, 1, 1, weight=500, priority=1),
        ]
        order = [s.id for s in sort_skids_for_loading(skids)]
        assert order == ["p1-heavy-big", "p1-heavy-small", "p1-light", "p2"]

    def test_stable_for_equal_keys(self):
        skids = [make_skid(str(i)) for i in range(5)]
        assert [s.id for s in sort_skids_for_loading(skids)] == ["0", "1", "2", "3", "4"]


class TestLoadingOrder:
    def test_floor_first_then_front_to_back(self):
        skids = [
            at(make_skid("top"), 0, 1, 0),
            at(make_skid("back"), 0, 0, 5),
            at(make_skid("front"), 0, 0, 1),
        ]
        assert [s.id for s in loading_order(skids)] == ["front", "back", "top"]

    def test_unpositioned_skids_ignored(self):
        assert loading_order([make_skid("a")]) == []


class TestInstructions:
    def test_floor_instruction_text(self):
        seq = generate_loading_sequence([at(make_skid("A", 1, 2, 1), 0, 0, 0.5)])
        assert len(seq) == 1
        step = seq.steps[0]
        assert step.skid_id == "A"
        assert step.position == Position(0, 0, 0.5)
        assert step.instruction == (
            "Step 1: Load A length-wise on the left side at 0.50 meters from the front, "
            "0.00 meters from the left side, and on the floor."
        )

    def test_stacked_rotated_instruction(self):
        skids = [at(make_skid("B", 1, 2, 1), 1.0, 1.0, 3.0, rotation=90)]
        instruction = generate_loading_sequence(skids).steps[0].instruction
        assert "B width-wise on the right side" in instruction
        assert instruction.endswith("and stacked on top of other skids.")

    def test_numbering_follows_loading_order(self):
        skids = [at(make_skid("late"), 0, 0, 4), at(make_skid("early"), 0, 0, 0)]
        steps = generate_loading_sequence(skids).steps
        assert [s.skid_id for s in steps] == ["early", "late"]
        assert steps[1].instruction.startswith("Step 2: Load late")

    def test_length_unit_from_config(self):
        cfg = EngineConfig(length_unit="feet")
        seq = generate_loading_sequence([at(make_skid("A"), 0, 0, 2)], config=cfg)
        assert "2.00 feet from the front" in seq.steps[0].instruction


class TestSideReference:
    @pytest.mark.parametrize("x, expected", [
        (0.0, "left side"),
        (0.5, "center"),
        (1.0, "right side"),
    ])
    def test_item_reference_compares_half_own_width(self, x, expected):
        skid = at(make_skid("a", width=1), x, 0, 0)
        assert describe_side(skid) == expected

    @pytest.mark.parametrize("x, expected", [
        (0.0, "left side"),
        (0.5, "center"),
        (1.0, "right side"),
    ])
    def test_container_reference_compares_truck_centre(self, box_truck, x, expected):
        cfg = EngineConfig(side_reference="container")
        skid = at(make_skid("a", width=1), x, 0, 0)
        assert describe_side(skid, box_truck, cfg) == expected

    def test_references_disagree_for_a_wide_skid(self, box_truck):
        # 1.5 wide at x=0.25: centred in a 2-wide truck, left of its own half-width
        skid = at(make_skid("a", width=1.5), 0.25, 0, 0)
        assert describe_side(skid) == "left side"
        assert describe_side(skid, box_truck, EngineConfig(side_reference="container")) == "center"
