from __future__ import annotations

"""Question records and the persisted usage-state model."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# --- Constants ---

STORAGE_KEY = "brainbites_quiz_data"
CSV_COLUMNS = [
    "id",
    "category",
    "question",
    "optionA",
    "optionB",
    "optionC",
    "optionD",
    "correctAnswer",
    "explanation",
]
ANSWER_LETTERS = ("A", "B", "C", "D")
CANONICAL_CATEGORIES = [
    "funfacts",
    "psychology",
    "math",
    "science",
    "history",
    "english",
    "general",
]


def _cell(row: Mapping[str, Any], key: str) -> str:
    value = row.get(key)
    if value is None:
        return ""
    return str(value).strip()


@dataclass(frozen=True)
class Question:
    """One quiz question as loaded from the bank."""

    id: str
    category: str
    question: str
    option_a: str = ""
    option_b: str = ""
    option_c: str = ""
    option_d: str = ""
    correct_answer: str = ""
    explanation: str = ""

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Question":
        """Build a Question from a parsed CSV row keyed by the CSV header."""
        return cls(
            id=_cell(row, "id"),
            category=_cell(row, "category"),
            question=_cell(row, "question"),
            option_a=_cell(row, "optionA"),
            option_b=_cell(row, "optionB"),
            option_c=_cell(row, "optionC"),
            option_d=_cell(row, "optionD"),
            correct_answer=_cell(row, "correctAnswer").upper(),
            explanation=_cell(row, "explanation"),
        )

    @property
    def options(self) -> Dict[str, str]:
        return {
            "A": self.option_a,
            "B": self.option_b,
            "C": self.option_c,
            "D": self.option_d,
        }

    def to_payload(self) -> Dict[str, Any]:
        """Shape handed to the screens: id, text, options A-D, answer, explanation."""
        return {
            "id": self.id,
            "question": self.question,
            "options": self.options,
            "correctAnswer": self.correct_answer,
            "explanation": self.explanation,
        }


# --- Pydantic models ---

class UsageRecord(BaseModel):
    """Persisted value of the ``brainbites_quiz_data`` record."""

    model_config = ConfigDict(populate_by_name=True)

    used_question_ids: List[str] = Field(default_factory=list, alias="usedQuestionIds")
    last_updated: Optional[datetime] = Field(default=None, alias="lastUpdated")

    @field_validator("used_question_ids", mode="before")
    @classmethod
    def _none_as_empty(cls, v: Any) -> Any:
        if v is None:
            return []
        return v

    @field_validator("last_updated")
    @classmethod
    def _ensure_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        if v is None:
            return v
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
