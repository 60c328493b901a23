from __future__ import annotations

"""Randomness helpers for question selection."""

import os
import random
from typing import Optional


def seed_from_env() -> Optional[int]:
    """Return the integer in the SEED env var, or None if unset or invalid."""
    seed = os.environ.get("SEED")
    if seed is None:
        return None
    try:
        return int(seed)
    except ValueError:
        return None


def make_rng(seed: Optional[int] = None) -> random.Random:
    """Build the selection RNG; an explicit seed wins over SEED."""
    if seed is None:
        seed = seed_from_env()
    return random.Random(seed)
