from __future__ import annotations

import hashlib
import json
from typing import Any, Dict

# prev_hash of the first notification event
GENESIS_HASH = "0" * 64


def canonical_json(entry: Dict[str, Any]) -> str:
    return json.dumps(entry, sort_keys=True, separators=(",", ":"), ensure_ascii=False, default=str)


def chain_hash(prev_hash: str, entry: Dict[str, Any]) -> str:
    """
    entry_hash = sha256(prev_hash || canonical_json(entry)), hex encoded.
    """
    return hashlib.sha256((prev_hash + canonical_json(entry)).encode("utf-8")).hexdigest()


def link_is_valid(prev_hash: str, entry: Dict[str, Any], entry_hash: str) -> bool:
    return chain_hash(prev_hash, entry) == entry_hash
