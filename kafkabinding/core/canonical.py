"""
Canonical serialization for binding spec hashing.

The hash reported in a binding's status must not depend on dict ordering,
so everything is normalized before being serialized.
"""

import dataclasses
import hashlib
import json
from typing import Any

from .spec import BindingSpec


def canonicalize(obj: Any) -> Any:
    """
    Convert nested dataclasses/dicts/lists to canonical form.

    Rules:
    - dataclasses converted to dicts
    - dict keys sorted alphabetically
    - tuples converted to lists
    """
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        obj = dataclasses.asdict(obj)
    if isinstance(obj, dict):
        return {k: canonicalize(obj[k]) for k in sorted(obj.keys())}
    if isinstance(obj, (list, tuple)):
        return [canonicalize(x) for x in obj]
    return obj


def canonical_json_bytes(obj: Any) -> bytes:
    canon = canonicalize(obj)
    s = json.dumps(canon, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return s.encode("utf-8")


def spec_hash(spec: BindingSpec) -> str:
    """SHA-256 hex digest of the canonical spec."""
    return hashlib.sha256(canonical_json_bytes(spec)).hexdigest()
