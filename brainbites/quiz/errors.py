from __future__ import annotations

"""Error taxonomy for the quiz core.

None of these reach the caller of ``QuizService.get_random_question``; each
is caught at the component that detects it and turned into a fallback.
"""


class QuizError(Exception):
    """Base exception for quiz data-layer faults."""
    pass


class SourceUnavailable(QuizError):
    """Raised when the question data file is missing or unreadable."""
    pass


class ParseFailure(QuizError):
    """Raised for malformed tabular data or a bank with no valid rows."""
    pass


class NoSuchCategory(QuizError):
    """Raised when a category has no servable questions."""

    def __init__(self, category: str, message: str | None = None):
        super().__init__(message or f"No questions found for category: {category}")
        self.category = category


class PersistenceFailure(QuizError):
    """Raised when the key/value store cannot be read or written."""

    def __init__(self, message: str, key: str | None = None):
        super().__init__(message)
        self.key = key
