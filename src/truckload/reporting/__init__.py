from truckload.reporting.step_logger import StepLogger

__all__ = ["StepLogger"]
