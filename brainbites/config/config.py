from __future__ import annotations

"""Configuration loading and validation for the quiz core.

This module loads YAML configuration, applies defaults, and sanitizes
enumerations and ranges before the service is built.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import sys

import yaml

from ..quiz.schema import STORAGE_KEY


ALLOWED_BACKENDS = {"json", "memory"}
ALLOWED_RESET_SCOPES = {"prefix", "category"}
ALLOWED_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        print(f"ERROR: Config file not found: {path}", file=sys.stderr)
        sys.exit(1)


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from YAML or defaults.

    Args:
        path: Optional path to a YAML config. If None, use package defaults.

    Returns:
        A dictionary with configuration values.
    """
    if path:
        cfg = _load_yaml(Path(path))
    else:
        default_path = Path(__file__).with_name("defaults.yml")
        cfg = _load_yaml(default_path)
    return cfg


def validate_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Apply defaults and validate configuration values.

    Args:
        cfg: The raw configuration dictionary.

    Returns:
        The validated and merged configuration dictionary.
    """
    for section in ("data", "storage", "sampler", "logging"):
        if not isinstance(cfg.get(section), dict):
            cfg[section] = {}

    data = cfg["data"]
    storage = cfg["storage"]
    sampler = cfg["sampler"]
    log_cfg = cfg["logging"]

    data.setdefault("csv_path", "./data/questions.csv")
    data.setdefault("bundled_path", None)

    storage.setdefault("backend", "json")
    storage.setdefault("path", "./brainbites_storage.json")
    storage.setdefault("key", STORAGE_KEY)

    sampler.setdefault("exhaustion_ratio", 0.2)
    sampler.setdefault("reset_scope", "prefix")
    sampler.setdefault("default_category", "funfacts")

    log_cfg.setdefault("level", "INFO")

    backend = storage.get("backend")
    if backend not in ALLOWED_BACKENDS:
        print(f"WARNING: Unsupported storage backend '{backend}', using 'json'.")
        storage["backend"] = "json"

    scope = sampler.get("reset_scope")
    if scope not in ALLOWED_RESET_SCOPES:
        print(f"WARNING: Unsupported reset_scope '{scope}', using 'prefix'.")
        sampler["reset_scope"] = "prefix"

    try:
        ratio = float(sampler.get("exhaustion_ratio"))
    except (TypeError, ValueError):
        ratio = -1.0
    if not (0.0 < ratio <= 1.0):
        print(f"WARNING: exhaustion_ratio must be in (0, 1], got '{sampler.get('exhaustion_ratio')}'; using 0.2.")
        ratio = 0.2
    sampler["exhaustion_ratio"] = ratio

    level = str(log_cfg.get("level", "INFO")).upper()
    if level not in ALLOWED_LOG_LEVELS:
        print(f"WARNING: Unsupported logging level '{level}', using 'INFO'.")
        level = "INFO"
    log_cfg["level"] = level

    if not str(storage.get("key") or "").strip():
        storage["key"] = STORAGE_KEY

    return cfg
