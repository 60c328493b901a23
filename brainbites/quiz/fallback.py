from __future__ import annotations

"""Built-in questions used when the bank, a category or storage lets us down."""

from typing import Dict, List

from .schema import Question

FALLBACK_BANK_QUESTIONS: List[Question] = [
    Question(
        id="A1",
        category="funfacts",
        question="Which planet is known as the Red Planet?",
        option_a="Venus",
        option_b="Mars",
        option_c="Jupiter",
        option_d="Saturn",
        correct_answer="B",
        explanation="Mars is called the Red Planet because of the reddish iron oxide on its surface.",
    ),
    Question(
        id="B1",
        category="psychology",
        question="What is the fear of spiders called?",
        option_a="Arachnophobia",
        option_b="Acrophobia",
        option_c="Agoraphobia",
        option_d="Aerophobia",
        correct_answer="A",
        explanation="Arachnophobia is the intense fear of spiders and other arachnids.",
    ),
]

FALLBACK_QUESTIONS: Dict[str, Question] = {
    "funfacts": Question(
        id="fallback-funfacts",
        category="funfacts",
        question="Which planet is closest to the Sun?",
        option_a="Earth",
        option_b="Venus",
        option_c="Mercury",
        option_d="Mars",
        correct_answer="C",
        explanation="Mercury is the closest planet to the Sun in our solar system.",
    ),
    "psychology": Question(
        id="fallback-psychology",
        category="psychology",
        question="What is the study of dreams called?",
        option_a="Oneirology",
        option_b="Neurology",
        option_c="Psychology",
        option_d="Psychiatry",
        correct_answer="A",
        explanation="Oneirology is the scientific study of dreams.",
    ),
    "default": Question(
        id="fallback-default",
        category="default",
        question="What is 2 + 2?",
        option_a="3",
        option_b="4",
        option_c="5",
        option_d="6",
        correct_answer="B",
        explanation="2 + 2 = 4. This is a basic addition fact.",
    ),
}


def fallback_for(category: str | None) -> Question:
    """Return the built-in question for a category, or the generic one."""
    return FALLBACK_QUESTIONS.get(category or "default", FALLBACK_QUESTIONS["default"])


def fallback_bank():
    """Minimal two-question bank used when the CSV cannot be loaded."""
    from .bank import QuestionBank

    return QuestionBank(FALLBACK_BANK_QUESTIONS, is_fallback=True)
