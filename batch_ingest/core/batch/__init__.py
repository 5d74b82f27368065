"""Batch coordination module.

Components:
- BatchCoordinator: Accepts uploads and runs them in the background
- Label: Collection label model
"""

from batch_ingest.core.batch.coordinator import BatchCoordinator
from batch_ingest.core.batch.models import Label, build_metadata, parse_labels

__all__ = ["BatchCoordinator", "Label", "build_metadata", "parse_labels"]
