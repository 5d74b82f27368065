"""Progress tracking module.

Components:
- ProgressRecord: Immutable per-upload progress snapshot
- ProgressLedger: In-memory store with per-upload atomic updates
"""

from batch_ingest.core.progress.ledger import ProgressLedger
from batch_ingest.core.progress.models import ProgressRecord

__all__ = ["ProgressLedger", "ProgressRecord"]
