"""
Loading runner - command-line entry point for the truck loading engine.

Orchestrates the full pipeline:
  1. Load a dataset file or generate demo skids
  2. Validate the skids, then optimise with the selected strategy
  3. Print the step log, summary and loading instructions
  4. Optionally save a structured JSON result

Usage (CLI):
    truckload-run --generate 30 --seed 7 --strategy extreme_points -v
    truckload-run --dataset datasets/demo.json --config engine.yaml --output out/run.json

Usage (Python):
    from truckload.runner import run_loading
    result = run_loading(skids, truck, config)
"""

import argparse
import json
import logging
import os
import sys
from datetime import datetime
from typing import List, Optional

from truckload.config import EngineConfig, Skid, TruckDimensions
from truckload.dataset import (
    DEFAULT_TRUCK_METRIC,
    generate_demo_skids,
    load_dataset,
    predefined_demo_skids,
)
from truckload.optimizer import build_plan, generate_loading_instructions, run_pipeline
from truckload.reporting import StepLogger
from truckload.strategies import STRATEGY_REGISTRY
from truckload.units import (
    LENGTH_UNIT_NAMES,
    METRIC,
    UNIT_SYSTEMS,
    convert_skid,
    convert_truck_dimensions,
)
from truckload.validation import validate_skids

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Core API
# ─────────────────────────────────────────────────────────────────────────────

def run_loading(
    skids: List[Skid],
    truck: TruckDimensions,
    config: Optional[EngineConfig] = None,
    verbose: bool = False,
) -> dict:
    """
    Optimise one load and return a JSON-ready result.

    Returns:
        dict with keys: config, metrics, plan, sequence, step_log.
    """
    cfg = config or EngineConfig()
    step_log = StepLogger(verbose=verbose)

    if verbose:
        print(f"\n  Strategy:     {cfg.strategy_name}")
        print(f"  Skids:        {len(skids)}")
        print(f"  Usable space: {truck.usable_length:.2f} x {truck.usable_width:.2f}"
              f" x {truck.usable_height:.2f}")
        print("-" * 65)

    pipeline = run_pipeline(skids, truck, cfg)
    records = pipeline.get_step_log()
    for record in records:
        step_log.log_step(record)

    plan = build_plan(pipeline, records)
    sequence = generate_loading_instructions(plan, cfg)
    summary = pipeline.get_summary()

    if verbose:
        step_log.print_summary(summary)
        step_log.print_plan(plan, sequence)

    metrics = dict(summary)
    metrics["space_utilization"] = plan.space_utilization
    return {
        "config": cfg.to_dict(),
        "metrics": metrics,
        "plan": plan.to_dict(),
        "sequence": sequence.to_dict(),
        "step_log": step_log.get_records(),
    }


def save_result(result: dict, path: str) -> str:
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    result = dict(result, saved_at=datetime.now().isoformat(timespec="seconds"))
    with open(path, "w") as f:
        json.dump(result, f, indent=2)
    return path


# ─────────────────────────────────────────────────────────────────────────────
# CLI
# ─────────────────────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="truckload-run",
        description="Truck loading optimiser",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  truckload-run --generate 30 --seed 7 -v
  truckload-run --dataset datasets/demo.json --strategy extreme_points
  truckload-run --config engine.yaml --output out/run.json
  truckload-run --generate 12 --units imperial
        """,
    )
    parser.add_argument("--strategy", default=None,
                        help=f"Strategy name ({sorted(STRATEGY_REGISTRY.keys())})")

    ds = parser.add_mutually_exclusive_group()
    ds.add_argument("--dataset", type=str, help="Path to dataset JSON")
    ds.add_argument("--generate", type=int, metavar="N",
                    help="Generate N random demo skids")
    parser.add_argument("--seed", type=int, default=42)

    parser.add_argument("--units", choices=UNIT_SYSTEMS, default=None,
                        help="Convert the metric input to this unit system")
    parser.add_argument("--config", type=str, default=None,
                        help="YAML file with engine options")
    parser.add_argument("--output", type=str, default=None,
                        help="Write the JSON result here")
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )

    # ── Config ───────────────────────────────────────────────────────────
    config = EngineConfig.from_yaml(args.config) if args.config else EngineConfig()
    if args.strategy:
        config = config.evolve(strategy_name=args.strategy)

    # ── Dataset ──────────────────────────────────────────────────────────
    if args.dataset:
        print(f"\n  Loading dataset: {args.dataset}")
        truck, skids = load_dataset(args.dataset)
    elif args.generate is not None:
        print(f"\n  Generating {args.generate} demo skids (seed={args.seed})")
        truck, skids = DEFAULT_TRUCK_METRIC, generate_demo_skids(args.generate, seed=args.seed)
    else:
        print("\n  No dataset specified - using the predefined demo skids")
        truck, skids = DEFAULT_TRUCK_METRIC, predefined_demo_skids()

    # Datasets and demo data are metric
    if args.units:
        truck = convert_truck_dimensions(truck, METRIC, args.units)
        skids = [convert_skid(s, METRIC, args.units) for s in skids]
        config = config.evolve(length_unit=LENGTH_UNIT_NAMES[args.units])

    errors = validate_skids(skids)
    if errors:
        for message in errors:
            logger.error(message)
        return 1

    # ── Run ──────────────────────────────────────────────────────────────
    result = run_loading(skids, truck, config, verbose=args.verbose)

    # ── Save ─────────────────────────────────────────────────────────────
    if args.output:
        path = save_result(result, args.output)
        print(f"  Results saved: {path}")

    m = result["metrics"]
    print(f"\n  Space: {m['space_utilization']:.1f}%  |  "
          f"Loaded: {m['skids_loaded']}/{m['skids_total']}  |  "
          f"Time: {m['computation_time_ms']:.0f}ms\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
