"""
Greedy loading optimiser - the engine's public entry points.

    optimize_loading(skids, truck, config)  -> LoadingPlan
    generate_loading_instructions(plan)     -> LoadingSequence

Control flow of ``optimize_loading``:
    1. sort the skids (priority, weight, volume)
    2. for each skid: strategy generates feasible candidates, picks the
       best one, the pipeline re-validates and commits it
    3. skids without a committed position become the unloaded list
    4. metrics over the loaded skids

A skid that does not fit never stops the run and never undoes an earlier
placement.
"""

import logging
import time
from typing import Iterable, List, Optional, Union

from truckload.config import EngineConfig, Skid, TruckDimensions
from truckload.metrics import (
    calculate_space_utilization,
    calculate_weight_distribution,
    total_weight,
)
from truckload.plan import LoadingPlan, LoadingSequence
from truckload.sequencer import generate_loading_sequence, sort_skids_for_loading
from truckload.simulator.pipeline import LoadingPipeline, StepRecord
from truckload.simulator.validator import validate_truck
from truckload.strategies import PlacementStrategy, get_strategy

logger = logging.getLogger(__name__)

NO_POSITION_REASON = "No feasible position found"


def _resolve_strategy(
    strategy: Union[None, str, PlacementStrategy], config: EngineConfig,
) -> PlacementStrategy:
    if strategy is None:
        return get_strategy(config.strategy_name)
    if isinstance(strategy, str):
        return get_strategy(strategy)
    return strategy


def run_pipeline(
    skids: Iterable[Skid],
    truck: TruckDimensions,
    config: Optional[EngineConfig] = None,
    strategy: Union[None, str, PlacementStrategy] = None,
) -> LoadingPipeline:
    """
    Run the greedy loop and return the pipeline with its step log.

    Raises:
        InvalidContainerError: the truck's outer dimensions are not positive.
        ValueError:            unknown strategy name.
    """
    cfg = config or EngineConfig()
    validate_truck(truck)
    policy = _resolve_strategy(strategy, cfg)

    pipeline = LoadingPipeline(truck, cfg)
    policy.on_episode_start(truck, cfg)

    for skid in sort_skids_for_loading(skids):
        reason = pipeline.check_payload(skid)
        if reason is not None:
            pipeline.record_rejection(skid, reason)
            continue

        t0 = time.perf_counter()
        state = pipeline.get_load_state()
        candidates = policy.generate_candidates(skid, state, truck)
        best = policy.select(skid, candidates, state, truck)
        if best is None:
            elapsed = (time.perf_counter() - t0) * 1000
            pipeline.record_rejection(skid, NO_POSITION_REASON, len(candidates), elapsed)
            continue

        placed = pipeline.attempt_placement(skid, best, candidates=len(candidates))
        if placed is not None:
            policy.on_placement(placed)

    policy.on_episode_end(pipeline.get_summary())
    return pipeline


def build_plan(pipeline: LoadingPipeline, log: Optional[List[StepRecord]] = None) -> LoadingPlan:
    """LoadingPlan from a finished pipeline."""
    truck = pipeline.truck
    records = log if log is not None else pipeline.get_step_log()
    loaded = pipeline.get_load_state().placed_skids
    unloaded = [r.skid.with_position(None) for r in records if not r.success]
    return LoadingPlan(
        truck=truck,
        loaded_skids=loaded,
        unloaded_skids=unloaded,
        space_utilization=calculate_space_utilization(loaded, truck),
        total_weight=total_weight(loaded),
        weight_distribution=calculate_weight_distribution(loaded, truck),
    )


def optimize_loading(
    skids: Iterable[Skid],
    truck: TruckDimensions,
    config: Optional[EngineConfig] = None,
    strategy: Union[None, str, PlacementStrategy] = None,
) -> LoadingPlan:
    """
    Compute a loading plan for *skids* in *truck*.

    Args:
        skids:    Input skids; never modified.
        truck:    Container dimensions.
        config:   Engine options, defaults to ``EngineConfig()``.
        strategy: Strategy instance or registry name; defaults to
                  ``config.strategy_name``.

    Returns:
        LoadingPlan whose loaded skids carry positions (placement order)
        and whose unloaded skids do not (sorted order).
    """
    skids = list(skids)
    pipeline = run_pipeline(skids, truck, config, strategy)
    plan = build_plan(pipeline)
    logger.info(
        "Loaded %d/%d skids, %.1f%% space, %.1f weight",
        len(plan.loaded_skids), len(skids), plan.space_utilization, plan.total_weight,
    )
    return plan


def generate_loading_instructions(
    plan: LoadingPlan, config: Optional[EngineConfig] = None,
) -> LoadingSequence:
    """Step-by-step loading sequence for a finished plan."""
    return generate_loading_sequence(plan.loaded_skids, plan.truck, config)
