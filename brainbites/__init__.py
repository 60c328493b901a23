"""BrainBites quiz core.

Question-bank loading, anti-repeat sampling and usage persistence for the
quiz screens. The UI layers call into :class:`QuizService` and render what
it returns.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .quiz.service import QuizService  # noqa: E402

__all__ = ["__version__", "QuizService"]
