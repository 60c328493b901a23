from __future__ import annotations

"""Quiz service: the single entry point the screens call.

Construct one per process, call ``initialize()`` once, and hand it to
whatever renders questions. ``get_random_question`` always returns a
question payload; data-layer faults end in a built-in fallback question.
"""

import copy
import logging
import random
import threading
from typing import Any, Dict, List, Optional

from ..config.config import validate_config
from ..storage.store import KeyValueStore, make_store
from ..util.randomness import make_rng
from .bank import BankLoadResult, QuestionBank, load_bank
from .errors import QuizError
from .fallback import fallback_for
from .sampler import AntiRepeatSampler, SamplerPolicy
from .schema import Question
from .usage import UsageTracker

logger = logging.getLogger(__name__)


class QuizService:
    def __init__(
        self,
        cfg: Optional[Dict[str, Any]] = None,
        store: Optional[KeyValueStore] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.cfg = validate_config(copy.deepcopy(cfg or {}))
        sampler_cfg = self.cfg["sampler"]
        self.usage = UsageTracker(store if store is not None else make_store(self.cfg), key=self.cfg["storage"]["key"])
        self.policy = SamplerPolicy(
            exhaustion_ratio=float(sampler_cfg["exhaustion_ratio"]),
            reset_scope=str(sampler_cfg["reset_scope"]),
            rng=rng if rng is not None else make_rng(),
        )
        self.default_category = str(sampler_cfg["default_category"])
        self.bank = QuestionBank([])
        self.last_load: Optional[BankLoadResult] = None
        self._sampler = AntiRepeatSampler(self.bank, self.usage, self.policy)
        self._lock = threading.Lock()
        self.initialized = False

    # --- Lifecycle ---

    def initialize(self) -> "QuizService":
        """Load saved usage, then the question bank."""
        self.usage.load()
        self.reload()
        self.initialized = True
        return self

    def shutdown(self) -> None:
        """Flush usage state; the service can be initialized again afterwards."""
        if self.initialized:
            self.usage.save()
        self.initialized = False

    def __enter__(self) -> "QuizService":
        return self.initialize()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown()

    def reload(self, path: Optional[str] = None) -> BankLoadResult:
        """Replace the bank wholesale from CSV (or the fallback set)."""
        data = self.cfg["data"]
        result = load_bank(path or data.get("csv_path"), data.get("bundled_path"))
        with self._lock:
            self.bank = result.bank
            self._sampler = AntiRepeatSampler(self.bank, self.usage, self.policy)
            self.last_load = result
        return result

    # --- Queries ---

    def select_question(self, category: Optional[str] = None) -> Question:
        """Like ``get_random_question`` but returns the Question record."""
        if category is None:
            category = self.default_category
        with self._lock:
            try:
                return self._sampler.select_question(category)
            except QuizError as e:
                logger.warning("Error getting random question: %s", e)
            except Exception:
                logger.exception("Unexpected error getting question for %s", category)
        return fallback_for(category)

    def get_random_question(self, category: Optional[str] = None) -> Dict[str, Any]:
        return self.select_question(category).to_payload()

    def get_categories(self) -> List[str]:
        return self.bank.list_categories()

    def reset_category(self, category: str) -> int:
        with self._lock:
            removed = self._sampler.reset(category)
        logger.info("Reset tracking for category %s", category)
        return removed

    def reset_used_questions(self) -> None:
        with self._lock:
            self.usage.reset_all()
        logger.info("Reset all used questions tracking")

    def stats(self) -> Dict[str, Any]:
        return {
            "total": len(self.bank),
            "categories": self.bank.category_counts,
            "used": len(self.usage),
            "fallback": self.bank.is_fallback,
            "last_updated": self.usage.last_updated.isoformat() if self.usage.last_updated else None,
        }
