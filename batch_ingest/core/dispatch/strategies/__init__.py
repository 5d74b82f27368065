"""Dispatch strategies.

Strategy pattern implementation for different per-file execution approaches.
"""

from batch_ingest.core.dispatch.strategies.base import DispatchStrategy
from batch_ingest.core.dispatch.strategies.bounded_strategy import BoundedDispatchStrategy
from batch_ingest.core.dispatch.strategies.sequential_strategy import SequentialDispatchStrategy

__all__ = [
    "DispatchStrategy",
    "BoundedDispatchStrategy",
    "SequentialDispatchStrategy",
]
