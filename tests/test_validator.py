"""
Tests for the feasibility checker, its error taxonomy and the plan audit.
"""

import numpy as np
import pytest

from conftest import make_skid
from truckload.config import EngineConfig, Position, TruckDimensions
from truckload.plan import LoadingPlan, WeightDistribution
from truckload.simulator.load_state import LoadState, PlacedBoxes
from truckload.simulator.validator import (
    CollisionError,
    InsufficientSupportError,
    InvalidContainerError,
    OutOfBoundsError,
    StackWeightError,
    audit_plan,
    can_place,
    feasible_mask,
    support_ratio,
    validate_placement,
    validate_truck,
)


def placed(sid, x, y, z, rotation=0, **kwargs):
    return make_skid(sid, **kwargs).with_position(Position(x, y, z, rotation))


# ---------------------------------------------------------------------------
# Bounds
# ---------------------------------------------------------------------------

class TestBounds:
    def test_floor_corner_fits(self, box_truck):
        skid = make_skid("a", 2, 2, 2)
        assert validate_placement(skid, Position(0, 0, 0), [], box_truck)

    def test_past_the_back_wall(self, box_truck):
        skid = make_skid("a", 2, 2, 2)
        with pytest.raises(OutOfBoundsError):
            validate_placement(skid, Position(0, 0, 8.5), [], box_truck)

    def test_negative_offset(self, box_truck):
        assert not can_place(make_skid("a"), Position(-0.5, 0, 0), [], box_truck)

    def test_too_tall(self, box_truck):
        skid = make_skid("a", 1, 1, 1.5)
        assert not can_place(skid, Position(0, 1.0, 0), [], box_truck)

    def test_rotation_swaps_footprint(self, box_truck):
        skid = make_skid("a", width=1, length=3)
        assert can_place(skid, Position(0, 0, 0, 0), [], box_truck)
        assert not can_place(skid, Position(0, 0, 0, 90), [], box_truck)

    def test_fallback_usable_space(self):
        # 95% of 10 x 2, 75% of 4
        truck = TruckDimensions(length=10, width=2, height=4)
        skid = make_skid("a", 1.9, 9.5, 3.0)
        assert can_place(skid, Position(0, 0, 0), [], truck)
        assert not can_place(make_skid("b", 2.0, 1, 1), Position(0, 0, 0), [], truck)

    def test_wall_margin(self, box_truck):
        cfg = EngineConfig(safety_margin=0.1)
        skid = make_skid("a")
        assert not can_place(skid, Position(0, 0, 0), [], box_truck, cfg)
        assert can_place(skid, Position(0.1, 0, 0.1), [], box_truck, cfg)
        assert not can_place(skid, Position(1.0, 0, 0.1), [], box_truck, cfg)


# ---------------------------------------------------------------------------
# Collision
# ---------------------------------------------------------------------------

class TestCollision:
    def test_overlap_rejected(self, box_truck):
        base = placed("base", 0, 0, 0, width=2, length=2, height=1)
        with pytest.raises(CollisionError):
            validate_placement(make_skid("b", 2, 2, 1), Position(0, 0, 1.0), [base], box_truck)

    def test_touching_faces_allowed(self, box_truck):
        base = placed("base", 0, 0, 0, width=2, length=2, height=1)
        assert can_place(make_skid("b", 2, 2, 1), Position(0, 0, 2.0), [base], box_truck)

    def test_margin_between_boxes_on_the_same_level(self, box_truck):
        cfg = EngineConfig(safety_margin=0.1)
        base = placed("base", 0.1, 0, 0.1)
        skid = make_skid("b")
        assert not can_place(skid, Position(0.1, 0, 1.1), [base], box_truck, cfg)
        assert can_place(skid, Position(0.1, 0, 1.2), [base], box_truck, cfg)

    def test_margin_does_not_separate_a_stack(self, box_truck):
        cfg = EngineConfig(safety_margin=0.1)
        base = placed("base", 0.1, 0, 0.1, is_stackable=True, max_weight_on_top=500)
        top = make_skid("top", weight=10)
        assert can_place(top, Position(0.1, 1.0, 0.1), [base], box_truck, cfg)


# ---------------------------------------------------------------------------
# Support and stacking weight
# ---------------------------------------------------------------------------

class TestSupport:
    @pytest.fixture
    def stackable_base(self):
        return placed("base", 0, 0, 0, width=2, length=2, height=1,
                      is_stackable=True, max_weight_on_top=50)

    def test_weight_over_capacity_rejected(self, box_truck, stackable_base):
        heavy = make_skid("top", 2, 2, 1, weight=60)
        with pytest.raises(StackWeightError):
            validate_placement(heavy, Position(0, 1, 0), [stackable_base], box_truck)

    def test_weight_within_capacity_accepted(self, box_truck, stackable_base):
        light = make_skid("top", 2, 2, 1, weight=40)
        assert can_place(light, Position(0, 1, 0), [stackable_base], box_truck)

    def test_partial_support_below_minimum(self, box_truck, stackable_base):
        light = make_skid("top", 2, 2, 1, weight=10)
        # 2 x 1.2 of a 2 x 2 base is supported
        with pytest.raises(InsufficientSupportError):
            validate_placement(light, Position(0, 1, 0.8), [stackable_base], box_truck)
        assert support_ratio(light, Position(0, 1, 0.8), [stackable_base]) == pytest.approx(0.6)

    def test_minimum_support_is_configurable(self, box_truck, stackable_base):
        light = make_skid("top", 2, 2, 1, weight=10)
        cfg = EngineConfig(min_support_ratio=0.5)
        assert can_place(light, Position(0, 1, 0.8), [stackable_base], box_truck, cfg)

    def test_non_stackable_base_gives_no_support(self, box_truck):
        base = placed("base", 0, 0, 0, width=2, length=2, height=1)
        with pytest.raises(InsufficientSupportError):
            validate_placement(make_skid("top", 2, 2, 1), Position(0, 1, 0), [base], box_truck)

    def test_fragile_base_gives_no_support(self, box_truck):
        base = placed("base", 0, 0, 0, width=2, length=2, height=1,
                      is_stackable=True, is_fragile=True, max_weight_on_top=500)
        assert not can_place(make_skid("top", 2, 2, 1, weight=1), Position(0, 1, 0),
                             [base], box_truck)

    def test_capacity_falls_back_to_own_weight(self, box_truck):
        base = placed("base", 0, 0, 0, width=2, length=2, height=1,
                      weight=100, is_stackable=True)
        assert can_place(make_skid("ok", 2, 2, 1, weight=80), Position(0, 1, 0), [base], box_truck)
        assert not can_place(make_skid("no", 2, 2, 1, weight=81), Position(0, 1, 0),
                             [base], box_truck)

    def test_capacity_is_pro_rata_across_supporters(self, box_truck):
        left = placed("l", 0, 0, 0, width=1, length=2, height=1,
                      is_stackable=True, max_weight_on_top=40)
        right = placed("r", 1, 0, 0, width=1, length=2, height=1,
                       is_stackable=True, max_weight_on_top=40)
        # covers half of each supporter's top face: 20 + 20
        top = make_skid("top", 2, 1, 1, weight=40)
        assert can_place(top, Position(0, 1, 0), [left, right], box_truck)
        heavier = make_skid("top2", 2, 1, 1, weight=41)
        assert not can_place(heavier, Position(0, 1, 0), [left, right], box_truck)

    def test_floor_support_is_full(self):
        assert support_ratio(make_skid("a"), Position(0, 0, 0), []) == 1.0


# ---------------------------------------------------------------------------
# Vectorised mask agrees with the scalar predicate
# ---------------------------------------------------------------------------

class TestFeasibleMask:
    def test_matches_can_place(self, box_truck):
        cfg = EngineConfig()
        placed_skids = [
            placed("a", 0, 0, 0, width=1, length=2, height=1,
                   is_stackable=True, max_weight_on_top=300),
            placed("b", 1, 0, 0, width=1, length=2, height=1, is_stackable=True),
            placed("c", 0, 0, 3, width=2, length=1, height=1.5),
        ]
        state = LoadState(box_truck, cfg)
        for s in placed_skids:
            state.apply_placement(s)
        skid = make_skid("new", 1.2, 0.8, 0.5, weight=90)

        grid = np.round(np.arange(-0.4, 10.4, 0.2), 9)
        for y in (0.0, 1.0):
            for rot in (0, 90):
                gz, gx = np.meshgrid(grid, np.round(np.arange(-0.4, 2.4, 0.2), 9), indexing="ij")
                xs, zs = gx.ravel(), gz.ravel()
                mask = feasible_mask(skid, xs, y, zs, rot, state, box_truck, cfg)
                expected = [
                    can_place(skid, Position(float(x), y, float(z), rot), state, box_truck, cfg)
                    for x, z in zip(xs, zs)
                ]
                assert mask.tolist() == expected

    def test_accepts_plain_skid_lists(self, box_truck):
        base = placed("a", 0, 0, 0, width=2, length=2, height=1)
        mask = feasible_mask(make_skid("b", 2, 2, 1), np.array([0.0, 0.0]), 0.0,
                             np.array([1.0, 2.0]), 0, [base], box_truck)
        assert mask.tolist() == [False, True]

    def test_placed_boxes_view(self):
        boxes = PlacedBoxes.from_skids([
            placed("a", 0, 0, 0, rotation=90, width=1, length=3, height=1, weight=50,
                   is_stackable=True),
        ])
        assert boxes.hi[0].tolist() == [3.0, 1.0, 1.0]
        assert boxes.capacity[0] == pytest.approx(40.0)
        assert boxes.area[0] == pytest.approx(3.0)


# ---------------------------------------------------------------------------
# Container validation and plan audit
# ---------------------------------------------------------------------------

class TestContainerAndAudit:
    @pytest.mark.parametrize("dims", [(0, 2, 2), (10, -1, 2), (10, 2, 0)])
    def test_degenerate_truck_rejected(self, dims):
        with pytest.raises(InvalidContainerError):
            validate_truck(TruckDimensions(*dims))

    def test_invalid_container_is_a_value_error(self):
        assert issubclass(InvalidContainerError, ValueError)

    def test_clean_plan(self, box_truck):
        a = placed("a", 0, 0, 0, width=2, length=2, height=1, weight=100)
        plan = LoadingPlan(
            truck=box_truck, loaded_skids=[a], unloaded_skids=[],
            space_utilization=10.0, total_weight=100.0,
            weight_distribution=WeightDistribution(100, 0, 0, 0, 100),
        )
        assert audit_plan(plan, input_skids=[a.with_position(None)]) == []

    def test_reports_overlap_and_conservation(self, box_truck):
        a = placed("a", 0, 0, 0, width=2, length=2, height=1)
        b = placed("b", 0, 0, 1, width=2, length=2, height=1)
        plan = LoadingPlan(
            truck=box_truck, loaded_skids=[a, b], unloaded_skids=[],
            weight_distribution=WeightDistribution(100, 0, 0, 0, 100),
        )
        problems = audit_plan(plan, input_skids=[a])
        assert any("overlap" in p for p in problems)
        assert any("Conservation" in p for p in problems)

    def test_reports_nonzero_distribution_for_empty_load(self, box_truck):
        plan = LoadingPlan(truck=box_truck, weight_distribution=WeightDistribution(left=100))
        assert audit_plan(plan) == ["Weight distribution must be all zero for an empty load"]
