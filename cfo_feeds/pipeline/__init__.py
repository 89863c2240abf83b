"""Pipeline orchestration - ingestion runs and their scheduling."""

from .gate import ConcurrencyGate
from .ingestion import IngestionPipeline, run_ingestion
from .scheduler import IngestionScheduler

__all__ = ["ConcurrencyGate", "IngestionPipeline", "run_ingestion", "IngestionScheduler"]
