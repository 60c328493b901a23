from __future__ import annotations

"""Question bank: CSV source, immutable in-memory bank and the loader.

The loader never fails its caller. A missing file, a malformed file or a
file with no usable rows all end in the built-in fallback bank.
"""

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

import pandas as pd

from ..app.explain import trace as xtrace
from .errors import ParseFailure, QuizError, SourceUnavailable
from .schema import CANONICAL_CATEGORIES, Question

logger = logging.getLogger(__name__)

SOURCE_FILE = "questions.csv"

PathLike = Union[str, Path]


def _count_categories(questions: Iterable[Question]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for q in questions:
        if q.category:
            counts[q.category] = counts.get(q.category, 0) + 1
    return counts


class QuestionBank:
    """Ordered, immutable collection of questions with per-category counts.

    Counts are computed once here; a reload builds a new bank.
    """

    def __init__(self, questions: Iterable[Question], *, is_fallback: bool = False) -> None:
        self._questions: Tuple[Question, ...] = tuple(questions)
        self._counts: Dict[str, int] = _count_categories(self._questions)
        self.is_fallback = bool(is_fallback)

    @property
    def questions(self) -> Tuple[Question, ...]:
        return self._questions

    @property
    def category_counts(self) -> Dict[str, int]:
        return dict(self._counts)

    def count_of(self, category: str) -> int:
        return self._counts.get(category, 0)

    def pool(self, category: str) -> List[Question]:
        """All questions of one category, in bank order."""
        return [q for q in self._questions if q.category == category]

    def get(self, question_id: str) -> Optional[Question]:
        for q in self._questions:
            if q.id == question_id:
                return q
        return None

    def list_categories(self) -> List[str]:
        """Distinct categories in first-seen order; canonical names if empty."""
        seen: Dict[str, None] = {}
        for q in self._questions:
            if q.category:
                seen.setdefault(q.category, None)
        return list(seen) if seen else list(CANONICAL_CATEGORIES)

    def __len__(self) -> int:
        return len(self._questions)

    def __iter__(self) -> Iterator[Question]:
        return iter(self._questions)


@dataclass(frozen=True)
class BankLoadResult:
    bank: QuestionBank
    used_fallback: bool
    error: Optional[QuizError] = None


def read_question_rows(path: PathLike) -> List[Dict[str, str]]:
    """Read the question CSV into a list of header-keyed string rows.

    Raises:
        SourceUnavailable: file missing or unreadable
        ParseFailure: content is not parsable CSV
    """
    p = Path(path)
    if not p.is_file():
        raise SourceUnavailable(f"Question file not found: {p}")
    try:
        n_fields = len(pd.read_csv(p, nrows=0, encoding="utf-8").columns)

        def _trim_extra_fields(fields: List[str]) -> List[str]:
            # Ragged row: keep the header-width prefix, drop the overflow
            logger.warning("Dropping %d extra field(s) in row starting %r", len(fields) - n_fields, fields[:1])
            return fields[:n_fields]

        df = pd.read_csv(
            p,
            dtype=str,
            keep_default_na=False,
            encoding="utf-8",
            engine="python",
            on_bad_lines=_trim_extra_fields,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
        raise ParseFailure(f"Error parsing CSV {p}: {e}") from e
    except OSError as e:
        raise SourceUnavailable(f"Cannot read question file {p}: {e}") from e
    df.columns = [str(c).strip() for c in df.columns]
    # Short rows come back with NaN in the missing trailing cells
    df = df.fillna("")
    return df.to_dict(orient="records")


def locate_source(destination: PathLike, bundled: Optional[PathLike] = None) -> Path:
    """Return the working copy of the CSV, copying the bundled file in if needed."""
    dest = Path(destination)
    if dest.is_file():
        return dest
    if bundled is None:
        raise SourceUnavailable(f"Question file not found and no bundled copy configured: {dest}")
    src = Path(bundled)
    if not src.is_file():
        raise SourceUnavailable(f"Bundled question file not found: {src}")
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(src, dest)
    except OSError as e:
        raise SourceUnavailable(f"Failed to copy {src} to {dest}: {e}") from e
    logger.info("Copied bundled question file %s to %s", src, dest)
    return dest


def build_bank(rows: Iterable[Dict[str, str]]) -> QuestionBank:
    """Build a bank from parsed rows, dropping rows without ``id`` or ``question``.

    Raises ParseFailure when no row survives.
    """
    questions: List[Question] = []
    seen_ids = set()
    for row in rows:
        if not isinstance(row, dict):
            continue
        q = Question.from_row(row)
        if not q.id or not q.question:
            continue
        if q.id in seen_ids:
            logger.warning("Duplicate question id %s ignored", q.id)
            continue
        seen_ids.add(q.id)
        questions.append(q)
    if not questions:
        raise ParseFailure("Question source is empty or no valid rows found")
    return QuestionBank(questions)


def load_bank(path: Optional[PathLike], bundled: Optional[PathLike] = None) -> BankLoadResult:
    """Load the bank from CSV, falling back to the built-in set on any fault."""
    from .fallback import fallback_bank

    try:
        if path is None:
            raise SourceUnavailable("No question file configured")
        src = locate_source(path, bundled)
        bank = build_bank(read_question_rows(src))
    except QuizError as e:
        logger.warning("Using fallback questions: %s", e)
        xtrace("bank_fallback", {"reason": type(e).__name__})
        return BankLoadResult(bank=fallback_bank(), used_fallback=True, error=e)

    logger.info("Loaded %d questions", len(bank))
    logger.debug("Categories count: %s", bank.category_counts)
    xtrace("bank_loaded", {"questions": len(bank), "categories": bank.category_counts})
    return BankLoadResult(bank=bank, used_fallback=False)
