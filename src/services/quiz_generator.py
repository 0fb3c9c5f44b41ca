"""
Exam logic: generate and validate scenario quizzes, and track a quiz run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from catalog import CORE_KNOWLEDGE_BASE
from config import QUIZ_QUESTION_COUNT
from services.llm_service import _extract_json_array

LOGGER = logging.getLogger("elasticsense.quiz")

QUIZ_SCHEMA: dict[str, Any] = {
    "type": "array",
    "items": {
        "type": "object",
        "properties": {
            "question": {"type": "string"},
            "options": {"type": "array", "items": {"type": "string"}},
            "correctAnswer": {"type": "integer", "description": "Index of the correct option (0-3)"},
            "explanation": {"type": "string"},
        },
        "required": ["question", "options", "correctAnswer", "explanation"],
    },
}


@dataclass(frozen=True)
class QuizQuestion:
    question: str
    options: tuple[str, ...]
    correct_answer_index: int
    explanation: str


def build_quiz_prompt(topic: str, count: int = QUIZ_QUESTION_COUNT) -> str:
    return (
        f'Generate {count} multiple-choice questions about "{topic}" for an Elastic Solutions Architect '
        "interview.\n"
        "Use the following knowledge base for context on difficulty and style:\n"
        f"{CORE_KNOWLEDGE_BASE}\n\n"
        "Ensure questions test conceptual understanding (sizing, architecture, value) and scenarios, "
        "not just trivia."
    )


def _validate_questions(items: list[Any]) -> list[QuizQuestion]:
    """Keep well-formed questions only; normalize to QuizQuestion."""
    out: list[QuizQuestion] = []
    for item in items:
        if not isinstance(item, dict):
            continue
        question = str(item.get("question") or "").strip()
        options_raw = item.get("options")
        if not question or not isinstance(options_raw, list):
            continue
        options = tuple(str(o) for o in options_raw)
        if len(options) < 2:
            continue
        answer = item.get("correctAnswer")
        if isinstance(answer, bool) or not isinstance(answer, int):
            continue
        if not 0 <= answer < len(options):
            continue
        out.append(
            QuizQuestion(
                question=question,
                options=options,
                correct_answer_index=answer,
                explanation=str(item.get("explanation") or ""),
            )
        )
    return out


class QuizGenerator:
    """Generates scenario MCQs for a learning-path topic via the model client."""

    def __init__(self, client: Any) -> None:
        self._llm = client

    async def generate_quiz(self, topic: str) -> list[QuizQuestion]:
        """
        Generate a short quiz about *topic*.

        Args:
            topic: Module title or free-text topic.

        Returns:
            Validated questions. On API or parse failure returns [].
        """
        try:
            raw = await self._llm.generate_structured(build_quiz_prompt(topic), QUIZ_SCHEMA)
        except Exception:  # noqa: BLE001
            LOGGER.warning("quiz generation failed for %r", topic, exc_info=True)
            return []
        if not raw:
            return []
        questions = _validate_questions(_extract_json_array(raw))
        LOGGER.info("quiz generated (topic=%r, questions=%d)", topic, len(questions))
        return questions


class QuizSession:
    """Cursor, selection and score for one quiz run."""

    def __init__(self) -> None:
        self.questions: list[QuizQuestion] = []
        self.current_index = 0
        self.selected_option: int | None = None
        self.show_result = False
        self.score = 0
        self.final_score: int | None = None
        self.final_total = 0

    @property
    def active(self) -> bool:
        return bool(self.questions)

    @property
    def current(self) -> QuizQuestion | None:
        if not self.questions:
            return None
        return self.questions[self.current_index]

    def start(self, questions: list[QuizQuestion]) -> None:
        """Reset the run and load a fresh question set."""
        self.questions = list(questions)
        self.current_index = 0
        self.selected_option = None
        self.show_result = False
        self.score = 0
        self.final_score = None
        self.final_total = 0

    def answer(self, index: int) -> bool:
        """
        Record the chosen option for the current question.

        Returns:
            True if the answer was accepted. Ignored (False) when no quiz is
            active, the result is already shown, or *index* is out of range.
        """
        question = self.current
        if question is None or self.show_result:
            return False
        if not 0 <= index < len(question.options):
            return False
        self.selected_option = index
        self.show_result = True
        if index == question.correct_answer_index:
            self.score += 1
        return True

    def next_question(self) -> bool:
        """
        Advance the cursor, or finish after the last question.

        Returns:
            True if the quiz just finished (``final_score`` is then set and the
            question set cleared).
        """
        self.selected_option = None
        self.show_result = False
        if not self.questions:
            return False
        if self.current_index < len(self.questions) - 1:
            self.current_index += 1
            return False
        self.final_score = self.score
        self.final_total = len(self.questions)
        self.questions = []
        self.current_index = 0
        return True
