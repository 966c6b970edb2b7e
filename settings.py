"""
Centralized configuration for the cart transform service.
"""
from __future__ import annotations

import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

TRUTHY_VALUES: tuple[str, ...] = ("1", "true", "yes", "on")


def env_flag(name: str, default: bool = False) -> bool:
    """Read a boolean flag from the environment ("1", "true", "yes", "on")."""
    raw: Optional[str] = os.getenv(name)
    if raw is None:
        return default
    text = raw.strip().lower()
    if not text:
        return default
    return text in TRUTHY_VALUES


LOG_LEVEL: str = (os.getenv("LOG_LEVEL") or "INFO").upper()

# Reject bundle configurations that carry an explicit quantity of 0 instead of
# expanding those components with quantity 1.
CART_TRANSFORM_STRICT_ZERO_QUANTITY: bool = env_flag("CART_TRANSFORM_STRICT_ZERO_QUANTITY")
