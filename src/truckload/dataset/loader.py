"""
JSON dataset files: one truck and its skids.

Layout::

    {
      "name": "demo24",
      "generator": "demo",
      "params": {...},
      "skid_count": 24,
      "truck": {"length": 16.15, ..., "insideWidth": 2.54},
      "skids": [{"id": "...", "isStackable": true, ...}, ...]
    }

Only "truck" and "skids" are required when reading; records go through the
pydantic schemas so hand-written files get the same checks as API input.
"""

import json
import os
from typing import List, Optional, Tuple

from truckload.config import Skid, TruckDimensions
from truckload.schemas import LoadRequest


def load_dataset(path: str) -> Tuple[TruckDimensions, List[Skid]]:
    """
    Read a dataset file.

    Raises:
        FileNotFoundError:        *path* does not exist.
        pydantic.ValidationError: malformed truck or skid records.
    """
    with open(path, "r") as f:
        data = json.load(f)
    request = LoadRequest.model_validate(data)
    skids, truck, _ = request.to_domain()
    return truck, skids


def save_dataset(
    path: str,
    truck: TruckDimensions,
    skids: List[Skid],
    generator: str = "manual",
    params: Optional[dict] = None,
) -> None:
    """Persist a truck and skid list as a dataset JSON file."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    data = {
        "name": os.path.splitext(os.path.basename(path))[0],
        "generator": generator,
        "params": params or {},
        "skid_count": len(skids),
        "truck": truck.to_dict(),
        "skids": [s.with_position(None).to_dict() for s in skids],
    }
    with open(path, "w") as f:
        json.dump(data, f, indent=2)
