"""Storage keys for composite identities."""

import hashlib
import json


def storage_key(*parts) -> str:
    """Hash the parts into a fixed-width hex key (order sensitive)."""
    packed = json.dumps(list(parts), separators=(",", ":"))
    return hashlib.sha3_256(packed.encode("utf-8")).hexdigest()
