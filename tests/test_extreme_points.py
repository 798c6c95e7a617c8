"""
Tests for the extreme point set and the extreme-point strategy.
"""

import pytest

from conftest import make_skid
from truckload.config import EngineConfig, Position
from truckload.strategies.extreme_points import (
    ExtremePointSet,
    ExtremePointsStrategy,
    dominates,
)


def at(skid, x, y, z, rotation=0):
    return skid.with_position(Position(x, y, z, rotation))


class TestExtremePointSet:
    def test_seeded_at_origin(self):
        assert ExtremePointSet.seeded().points == frozenset({(0.0, 0.0, 0.0)})

    def test_three_corners_after_first_placement(self, box_truck):
        eps = ExtremePointSet.seeded().after_placement(
            at(make_skid("a", 1, 2, 1), 0, 0, 0), box_truck,
        )
        assert eps.points == frozenset({(1.0, 0.0, 0.0), (0.0, 0.0, 2.0), (0.0, 1.0, 0.0)})

    def test_corners_outside_usable_space_dropped(self, box_truck):
        # full width and full height: only the point behind survives
        eps = ExtremePointSet.seeded().after_placement(
            at(make_skid("a", 2, 2, 2), 0, 0, 0), box_truck,
        )
        assert eps.points == frozenset({(0.0, 0.0, 2.0)})

    def test_dominated_points_pruned(self, box_truck):
        eps = ExtremePointSet(frozenset({(0.0, 0.0, 2.0), (1.0, 0.0, 0.0)}))
        new = eps.after_placement(at(make_skid("b", 1, 3, 1), 1, 0, 0), box_truck)
        # (1, 0, 3) is dominated by (0, 0, 2); (1, 0, 0) is inside the new skid
        assert new.points == frozenset({(0.0, 0.0, 2.0), (1.0, 1.0, 0.0)})

    def test_update_does_not_touch_the_old_set(self, box_truck):
        eps = ExtremePointSet.seeded()
        eps.after_placement(at(make_skid("a"), 0, 0, 0), box_truck)
        assert eps.points == frozenset({(0.0, 0.0, 0.0)})

    def test_rotated_skid_uses_rotated_footprint(self, box_truck):
        eps = ExtremePointSet.seeded().after_placement(
            at(make_skid("a", width=1, length=2, height=1), 0, 0, 0, rotation=90), box_truck,
        )
        # footprint is 2 wide (== usable width), 1 deep
        assert eps.points == frozenset({(0.0, 0.0, 1.0), (0.0, 1.0, 0.0)})

    def test_ordered_floor_first_then_depth(self):
        eps = ExtremePointSet(frozenset({(0.0, 1.0, 0.0), (1.0, 0.0, 2.0), (0.5, 0.0, 2.0)}))
        assert eps.ordered() == [(0.5, 0.0, 2.0), (1.0, 0.0, 2.0), (0.0, 1.0, 0.0)]

    def test_margin_offsets_seed_and_corners(self, box_truck):
        eps = ExtremePointSet.seeded(0.1)
        assert eps.points == frozenset({(0.1, 0.0, 0.1)})
        eps = eps.after_placement(at(make_skid("a", 1, 2, 1), 0.1, 0, 0.1), box_truck, 0.1)
        assert eps.points == frozenset({(1.2, 0.0, 0.1), (0.1, 0.0, 2.2), (0.1, 1.0, 0.1)})

    def test_margin_drops_points_too_close_to_far_walls(self, box_truck):
        # right corner at x = 1.9 is within 0.1 of the 2-wide wall
        eps = ExtremePointSet.seeded(0.1).after_placement(
            at(make_skid("a", 1.7, 2, 1), 0.1, 0, 0.1), box_truck, 0.1,
        )
        assert (1.9, 0.0, 0.1) not in eps
        assert eps.points == frozenset({(0.1, 0.0, 2.2), (0.1, 1.0, 0.1)})

    def test_dominance_is_strict(self):
        assert dominates((0, 0, 0), (1, 0, 0))
        assert not dominates((1, 0, 0), (1, 0, 0))
        assert not dominates((1, 0, 0), (0, 0, 1))


class TestExtremePointsStrategy:
    @pytest.fixture
    def strategy(self, box_truck):
        s = ExtremePointsStrategy()
        s.on_episode_start(box_truck, EngineConfig())
        return s

    def test_first_candidate_is_origin(self, strategy, box_truck):
        candidates = strategy.generate_candidates(make_skid("a"), [], box_truck)
        assert candidates == [Position(0, 0, 0, 0), Position(0, 0, 0, 90)]

    def test_on_placement_advances_frontier(self, strategy, box_truck):
        strategy.on_placement(at(make_skid("a", 1, 2, 1), 0, 0, 0))
        assert (0.0, 0.0, 0.0) not in strategy.extreme_points
        assert (1.0, 0.0, 0.0) in strategy.extreme_points

    def test_episode_start_resets(self, strategy, box_truck):
        strategy.on_placement(at(make_skid("a"), 0, 0, 0))
        strategy.on_episode_start(box_truck, EngineConfig())
        assert len(strategy.extreme_points) == 1

    def test_fragile_skid_not_offered_elevated_points(self, strategy, box_truck):
        base = at(make_skid("base", 2, 2, 1, is_stackable=True, max_weight_on_top=500), 0, 0, 0)
        strategy.on_placement(base)
        fragile = make_skid("f", 2, 2, 1, weight=1, is_fragile=True)
        candidates = strategy.generate_candidates(fragile, [base], box_truck)
        assert candidates
        assert all(p.y == 0.0 for p in candidates)

    def test_score_prefers_front_left_floor(self, strategy, box_truck):
        skid = make_skid("a")
        origin = strategy.score(skid, Position(0, 0, 0), [], box_truck)
        deeper = strategy.score(skid, Position(0, 0, 5), [], box_truck)
        stacked = strategy.score(skid, Position(0, 1, 0), [], box_truck)
        assert origin == 0.0
        assert deeper == pytest.approx(-0.5)
        assert stacked == pytest.approx(-1.0)

    def test_score_many_matches_score(self, strategy, box_truck):
        skid = make_skid("a")
        positions = [Position(1, 0, 2), Position(0, 1, 4, 90), Position(0.5, 0.5, 0)]
        batch = strategy.score_many(skid, positions, [], box_truck)
        single = [strategy.score(skid, p, [], box_truck) for p in positions]
        assert batch.tolist() == pytest.approx(single)

    def test_margin_seeds_first_candidate_off_the_walls(self, box_truck):
        s = ExtremePointsStrategy()
        s.on_episode_start(box_truck, EngineConfig(safety_margin=0.05))
        candidates = s.generate_candidates(make_skid("a"), [], box_truck)
        assert candidates[0] == Position(0.05, 0, 0.05, 0)
        s.on_placement(at(make_skid("a"), 0.05, 0, 0.05))
        assert (1.1, 0.0, 0.05) in s.extreme_points
