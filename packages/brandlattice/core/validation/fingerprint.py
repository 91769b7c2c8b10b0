"""Structural fingerprint of a manifest, used as the validation cache key."""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from typing import Any

from brandlattice.core.models import Manifest


def manifest_fingerprint(manifest: Manifest | Mapping[str, Any]) -> str:
    """Compute a stable fingerprint of a manifest's content.

    Uses canonical JSON encoding (sorted keys, compact separators, unset
    fields dropped) so that manifests with identical content hash identically
    regardless of key insertion order.

    Args:
        manifest: Manifest or manifest mapping

    Returns:
        SHA256 hex digest (64 chars)
    """
    model = Manifest.coerce(manifest)
    payload = model.model_dump(exclude_none=True)
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


__all__ = ["manifest_fingerprint"]
