from __future__ import annotations

"""Minimal tracing helpers (Explain Mode).

Enable with the CLI ``--explain`` flag to print one terse JSON line at each
quiz milestone. ``--explain-only`` narrows the output to chosen events.
"""

import json
from typing import Any, Dict, FrozenSet, Iterable, Optional

EVENTS = ("bank_loaded", "bank_fallback", "category_reset", "question_selected")

_ENABLED = False
_ONLY: Optional[FrozenSet[str]] = None


def enable(flag: bool = True, events: Optional[Iterable[str]] = None) -> None:
    """Turn tracing on or off; ``events`` limits it to those milestone names."""
    global _ENABLED, _ONLY
    _ENABLED = bool(flag)
    _ONLY = frozenset(events) if events else None


def enabled(event: Optional[str] = None) -> bool:
    if not _ENABLED:
        return False
    return event is None or _ONLY is None or event in _ONLY


def trace(event: str, payload: Dict[str, Any] | None = None) -> None:
    if not enabled(event):
        return
    try:
        data = payload or {}
        print(f"[EXPLAIN] {event} :: {json.dumps(data, separators=(',', ':'), default=str)}")
    except (TypeError, ValueError):
        print(f"[EXPLAIN] {event}")
