"""
Loading pipeline - the central authority for committing placements.

Data flow:
  1. Strategy calls  pipeline.get_load_state()  -> receives LoadState
  2. Strategy returns the best Position (or None).
  3. Optimiser calls pipeline.attempt_placement(skid, position)
     -> pipeline re-validates, commits a positioned copy, logs the step.
  4. If the strategy returns None -> optimiser calls
     pipeline.record_rejection(skid, reason).

Usage:
    pipeline = LoadingPipeline(truck, config)
    state = pipeline.get_load_state()           # strategy reads this
    placed = pipeline.attempt_placement(...)    # pipeline validates & commits
    pipeline.record_rejection(skid, reason)     # when nothing fits
"""

import logging
import time
from dataclasses import dataclass
from typing import List, Optional

from truckload.config import EngineConfig, Position, Skid, TruckDimensions
from truckload.simulator.load_state import LoadState
from truckload.simulator.validator import (
    PlacementError,
    support_ratio,
    validate_placement,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# StepRecord -- immutable log entry for each placement attempt
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class StepRecord:
    """Log of a single placement attempt (success or rejection)."""
    step: int
    skid: Skid
    success: bool
    position: Optional[Position] = None
    rejection_reason: str = ""
    fill_rate_after: float = 0.0
    support_ratio: float = 1.0
    candidates: int = 0
    elapsed_ms: float = 0.0

    def to_dict(self) -> dict:
        d = {
            "step": self.step,
            "skidId": self.skid.id,
            "label": self.skid.label,
            "dims": [self.skid.width, self.skid.length, self.skid.height],
            "success": self.success,
            "fillRateAfter": round(self.fill_rate_after, 6),
            "supportRatio": round(self.support_ratio, 4),
            "candidates": self.candidates,
            "elapsedMs": round(self.elapsed_ms, 3),
        }
        if self.success and self.position is not None:
            d["position"] = self.position.to_dict()
        else:
            d["rejectionReason"] = self.rejection_reason
        return d


# ---------------------------------------------------------------------------
# LoadingPipeline
# ---------------------------------------------------------------------------

class LoadingPipeline:
    """
    Commit authority for one optimisation run.

    Enforces, for every committed skid:

    * inside the usable space, no overlap with committed skids
    * support and stack-weight limits for stacked skids
    * the truck payload limit (when configured)

    Public interface
    ~~~~~~~~~~~~~~~~
    get_load_state()          -> LoadState
    check_payload(skid)       -> str | None
    attempt_placement(...)    -> Skid | None
    record_rejection(...)     -> None
    get_step_log()            -> List[StepRecord]
    get_summary()             -> dict
    """

    def __init__(self, truck: TruckDimensions, config: Optional[EngineConfig] = None) -> None:
        self._config = config or EngineConfig()
        self._state = LoadState(truck, self._config)
        self._step_log: List[StepRecord] = []
        self._step_counter: int = 0

    # -- Public: state access ------------------------------------------------

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def truck(self) -> TruckDimensions:
        return self._state.truck

    def get_load_state(self) -> LoadState:
        return self._state

    def check_payload(self, skid: Skid) -> Optional[str]:
        """Rejection reason if *skid* would exceed the payload limit."""
        if not self._config.respect_max_weight:
            return None
        remaining = self._state.remaining_payload()
        if remaining is not None and skid.weight > remaining + 1e-9:
            return (
                f"Payload limit: {skid.weight:.1f} exceeds remaining "
                f"{max(remaining, 0.0):.1f} of {self.truck.max_weight:.1f}"
            )
        return None

    # -- Public: placement ---------------------------------------------------

    def attempt_placement(
        self, skid: Skid, position: Position, candidates: int = 0,
    ) -> Optional[Skid]:
        """
        Validate *position* for *skid* and commit a positioned copy.

        Returns:
            The committed copy on success, None on rejection.
        """
        t0 = time.perf_counter()
        step = self._step_counter

        reason = self.check_payload(skid)
        if reason is None:
            try:
                validate_placement(skid, position, self._state, self.truck, self._config)
            except PlacementError as e:
                reason = str(e)
        if reason is not None:
            self._log_rejection(step, skid, t0, reason, candidates)
            return None

        support = support_ratio(skid, position, self._state, self._config)
        placed = skid.with_position(position)
        self._state.apply_placement(placed)

        elapsed = (time.perf_counter() - t0) * 1000
        self._step_log.append(StepRecord(
            step=step, skid=skid, success=True, position=position,
            fill_rate_after=self._state.get_fill_rate(),
            support_ratio=support, candidates=candidates, elapsed_ms=elapsed,
        ))
        self._step_counter += 1
        logger.debug(
            "Placed %s at (%.2f, %.2f, %.2f) rot=%d",
            skid.label, position.x, position.y, position.z, position.rotation,
        )
        return placed

    def record_rejection(
        self, skid: Skid, reason: str = "No feasible position found",
        candidates: int = 0, elapsed_ms: float = 0.0,
    ) -> None:
        """Record that no placement could be committed for *skid*."""
        logger.warning("Could not load skid %s: %s", skid.label, reason)
        self._step_log.append(StepRecord(
            step=self._step_counter, skid=skid, success=False,
            rejection_reason=reason,
            fill_rate_after=self._state.get_fill_rate(),
            candidates=candidates, elapsed_ms=elapsed_ms,
        ))
        self._step_counter += 1

    # -- Public: logs & summary ----------------------------------------------

    def get_step_log(self) -> List[StepRecord]:
        return list(self._step_log)

    def get_summary(self) -> dict:
        """
        Keys: fill_rate, skids_total, skids_loaded, skids_rejected,
              max_height, total_weight, computation_time_ms.
        """
        placed = [r for r in self._step_log if r.success]
        total_time = sum(r.elapsed_ms for r in self._step_log)
        return {
            "fill_rate": self._state.get_fill_rate(),
            "skids_total": len(self._step_log),
            "skids_loaded": len(placed),
            "skids_rejected": len(self._step_log) - len(placed),
            "max_height": self._state.get_max_height(),
            "total_weight": self._state.total_weight,
            "computation_time_ms": round(total_time, 2),
        }

    # -- Private helpers -----------------------------------------------------

    def _log_rejection(
        self, step: int, skid: Skid, t0: float, reason: str, candidates: int,
    ) -> None:
        elapsed = (time.perf_counter() - t0) * 1000
        self.record_rejection(skid, reason, candidates=candidates, elapsed_ms=elapsed)
