"""Dispatch module.

Components:
- Dispatcher: Main orchestrator
- FileDescriptor: Persisted file handed to the downstream service
- DispatchResult: Type-safe result model
- DispatchStrategy: Strategy interface
- BoundedDispatchStrategy: Semaphore-capped concurrent execution
- SequentialDispatchStrategy: One file at a time
"""

from batch_ingest.core.dispatch.models import DispatchResult, FileDescriptor
from batch_ingest.core.dispatch.dispatcher import Dispatcher
from batch_ingest.core.dispatch.strategies import (
    BoundedDispatchStrategy,
    DispatchStrategy,
    SequentialDispatchStrategy,
)

__all__ = [
    "Dispatcher",
    "DispatchResult",
    "FileDescriptor",
    "DispatchStrategy",
    "BoundedDispatchStrategy",
    "SequentialDispatchStrategy",
]
