"""
Step logger - console output and structured recording of each step.

Usage:
    step_log = StepLogger(verbose=True)
    step_log.log_step(step_record)
    step_log.print_summary(pipeline.get_summary())
    step_log.print_plan(plan, sequence)
"""

from typing import List, Optional

from truckload.plan import LoadingPlan, LoadingSequence
from truckload.simulator.pipeline import StepRecord


class StepLogger:
    """Logs placement steps to console and stores them for JSON output."""

    def __init__(self, verbose: bool = False) -> None:
        self.verbose = verbose
        self._records: List[dict] = []

    def log_step(self, record: StepRecord) -> None:
        """Log a single step (success or rejection)."""
        self._records.append(record.to_dict())

        if not self.verbose:
            return

        skid = record.skid
        dims_str = f"{skid.width:.2f}x{skid.length:.2f}x{skid.height:.2f}"

        if record.success and record.position is not None:
            p = record.position
            print(
                f"  Step {record.step:3d}: "
                f"{skid.label:<20s} ({dims_str}) "
                f"-> ({p.x:.2f}, {p.y:.2f}, {p.z:.2f}) "
                f"rot={p.rotation:<2d}  "
                f"fill={record.fill_rate_after:.1%}  "
                f"support={record.support_ratio:.0%}  "
                f"[{record.elapsed_ms:.1f}ms]  OK"
            )
        else:
            print(
                f"  Step {record.step:3d}: "
                f"{skid.label:<20s} ({dims_str}) "
                f"-> REJECTED: {record.rejection_reason}  "
                f"[{record.elapsed_ms:.1f}ms]"
            )

    def print_summary(self, summary: dict) -> None:
        """Print a formatted run summary block."""
        print("\n" + "=" * 65)
        print("  LOADING SUMMARY")
        print("=" * 65)
        print(f"  Fill rate:        {summary['fill_rate']:.1%}")
        print(f"  Skids loaded:     {summary['skids_loaded']} / {summary['skids_total']}")
        print(f"  Skids rejected:   {summary['skids_rejected']}")
        print(f"  Max height:       {summary['max_height']:.2f}")
        print(f"  Total weight:     {summary['total_weight']:.1f}")
        print(f"  Computation time: {summary['computation_time_ms']:.1f} ms")
        print("=" * 65 + "\n")

    def print_plan(self, plan: LoadingPlan, sequence: Optional[LoadingSequence] = None) -> None:
        """Print weight distribution, unloaded skids and loading instructions."""
        wd = plan.weight_distribution
        print(f"  Space utilization: {plan.space_utilization:.1f}%")
        print(
            f"  Weight: front {wd.front:.0f}% / middle {wd.middle:.0f}% / "
            f"back {wd.back:.0f}%   left {wd.left:.0f}% / right {wd.right:.0f}%"
        )
        if plan.unloaded_skids:
            print(f"  Not loaded ({len(plan.unloaded_skids)}):")
            for skid in plan.unloaded_skids:
                print(f"    - {skid.label}")
        if sequence is not None:
            print()
            for step in sequence:
                print(f"  {step.instruction}")
        print()

    def get_records(self) -> List[dict]:
        """All logged step records as dicts (for JSON output)."""
        return list(self._records)
