"""Small, dependency-light utilities used across the app."""

from __future__ import annotations

import random
from typing import Any


def set_global_seed(seed: int | None) -> None:
    """Seed the module RNG used for shuffling.

    The app does not require a fixed seed, but having a single helper makes it
    easy to turn determinism on/off via config or env vars.
    """

    if seed is None:
        return

    random.seed(seed)


def ensure_text(value: Any) -> str:
    """Convert arbitrary values to a safe string representation."""

    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return str(value)
