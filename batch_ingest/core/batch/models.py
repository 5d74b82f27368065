"""Batch models for the batch ingest service."""

import json
from typing import Dict, List, Optional

from pydantic import BaseModel, ValidationError

from batch_ingest.core.errors import InvalidUploadError


class Label(BaseModel):
    """User-defined key/value label attached to every file of a collection."""

    key: str = ""
    value: str = ""


def parse_labels(raw: Optional[str]) -> List[Label]:
    """Parse the labels form field.

    Accepts a JSON list of {"key", "value"} objects (what the upload form sends)
    or a JSON object mapping keys to values. Blank input means no labels.

    Raises:
        InvalidUploadError: If the field is not valid JSON of either shape
    """
    if raw is None or not raw.strip():
        return []

    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        raise InvalidUploadError("Labels must be valid JSON.")

    if isinstance(data, dict):
        return [Label(key=str(k), value="" if v is None else str(v)) for k, v in data.items()]

    if isinstance(data, list):
        try:
            return [Label.model_validate(item) for item in data]
        except ValidationError:
            raise InvalidUploadError("Each label must be an object with string 'key' and 'value'.")

    raise InvalidUploadError("Labels must be a JSON list or object.")


def build_metadata(collection_name: str, labels: List[Label]) -> List[Dict[str, str]]:
    """Downstream metadata: the collection first, then one entry per keyed label."""
    metadata = [{"collection": collection_name}]
    metadata.extend({label.key: label.value} for label in labels if label.key.strip())
    return metadata
