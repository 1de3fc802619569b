from __future__ import annotations

import uuid


def generate_id() -> str:
    """Opaque string identifier for every entity."""
    return uuid.uuid4().hex
