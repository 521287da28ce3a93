from __future__ import annotations

import os
from datetime import datetime
from typing import Optional
from uuid import uuid4

TRUTHY = frozenset({"1", "true", "yes", "on"})


def generate_connection_id(prefix: Optional[str] = None) -> str:
    """Short random identifier for a connection."""
    base = uuid4().hex[:12]
    return f"{prefix}-{base}" if prefix else base


def local_timestamp() -> str:
    """Current local time as shown in log lines and mirrored messages."""
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


def env_flag(name: str) -> Optional[bool]:
    """Read a boolean environment variable; None when unset or empty."""
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    return value.strip().lower() in TRUTHY


__all__ = ["generate_connection_id", "local_timestamp", "env_flag"]
