from __future__ import annotations

from uuid import uuid4


def new_id(prefix: str) -> str:
    """Opaque identifier such as ``bill-3f9a0c1d2e4b``."""
    return f"{prefix}-{uuid4().hex[:12]}"
