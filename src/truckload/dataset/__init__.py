from truckload.dataset.loader import load_dataset, save_dataset
from truckload.dataset.generator import (
    DEFAULT_TRUCK_METRIC,
    generate_demo_skids,
    predefined_demo_skids,
)

__all__ = [
    "load_dataset", "save_dataset",
    "DEFAULT_TRUCK_METRIC", "generate_demo_skids", "predefined_demo_skids",
]
