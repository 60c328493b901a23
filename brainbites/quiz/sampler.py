from __future__ import annotations

"""Anti-repeat sampler.

Picks a question the user has not seen yet. When fewer than
``exhaustion_ratio`` of a category's questions remain unseen, tracked usage
for that category is cleared and the pool refills.

Reset scopes:
- ``prefix``: clear every tracked id starting with the category's
  uppercased initial. Categories sharing an initial clear each other.
- ``category``: clear only the ids of the exhausted pool.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import List, Optional

from ..app.explain import trace as xtrace
from .bank import QuestionBank
from .errors import NoSuchCategory
from .schema import Question
from .usage import UsageTracker

logger = logging.getLogger(__name__)

RESET_SCOPES = {"prefix", "category"}


@dataclass
class SamplerPolicy:
    exhaustion_ratio: float = 0.2
    reset_scope: str = "prefix"
    rng: random.Random = field(default_factory=random.Random)


def category_prefix(category: str) -> str:
    return category[:1].upper()


class AntiRepeatSampler:
    def __init__(self, bank: QuestionBank, usage: UsageTracker, policy: Optional[SamplerPolicy] = None) -> None:
        self.bank = bank
        self.usage = usage
        self.policy = policy or SamplerPolicy()
        if self.policy.reset_scope not in RESET_SCOPES:
            raise ValueError(f"Unknown reset scope: {self.policy.reset_scope}")

    def _available(self, pool: List[Question]) -> List[Question]:
        used = self.usage.used_ids
        return [q for q in pool if q.id not in used]

    def reset(self, category: str) -> int:
        """Clear tracked usage for a category according to the reset scope."""
        if self.policy.reset_scope == "category":
            return self.usage.reset_ids(q.id for q in self.bank.pool(category))
        return self.usage.reset_category(category_prefix(category))

    def select_question(self, category: str) -> Question:
        """Pick an unseen question from ``category`` and mark it used.

        Raises NoSuchCategory when the category has nothing to serve.
        """
        pool = self.bank.pool(category)
        if not pool:
            raise NoSuchCategory(category)

        threshold = self.policy.exhaustion_ratio * self.bank.count_of(category)
        available = self._available(pool)
        # At most one reset per call; after it `available` can only grow
        if len(available) < threshold:
            removed = self.reset(category)
            logger.info("Reset tracking for category %s (%d ids cleared)", category, removed)
            xtrace("category_reset", {"category": category, "cleared": removed})
            available = self._available(pool)

        if not available:
            raise NoSuchCategory(category, f"No unused questions left for category: {category}")

        question = self.policy.rng.choice(available)
        self.usage.mark_used(question.id)
        logger.debug("Selected question %s from %d available questions", question.id, len(available))
        xtrace("question_selected", {"id": question.id, "available": len(available)})
        return question
