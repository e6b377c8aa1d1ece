"""
Question Bank - static, read-only diagnostic and review questions.

Questions are loaded once (typically from JSON) and never mutated. Keys are
accepted in snake_case or in the platform's camelCase export format
(``roadmapId``, ``nodeId``, ``correctAnswer``...).
"""
from __future__ import annotations

import json
import random
from collections.abc import Iterable
from pathlib import Path
from typing import Literal

from loguru import logger
from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from skillroute.quiz.diagnostic import select_diagnostic

Difficulty = Literal["beginner", "intermediate", "advanced"]
QuestionType = Literal["multiple_choice", "true_false", "code_output"]


class QuestionBankEntry(BaseModel):
    """One immutable question belonging to a roadmap topic."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    roadmap_id: str = Field(validation_alias=AliasChoices("roadmap_id", "roadmapId"))
    topic_id: str = Field(validation_alias=AliasChoices("topic_id", "topicId", "node_id", "nodeId"))
    difficulty: Difficulty = "beginner"
    question: str = ""
    question_type: QuestionType = Field(
        default="multiple_choice",
        validation_alias=AliasChoices("question_type", "questionType"),
    )
    options: tuple[str, ...] = ()
    correct_answer: str = Field(validation_alias=AliasChoices("correct_answer", "correctAnswer"))
    explanation: str = ""
    tags: tuple[str, ...] = ()

    def is_correct(self, answer: str) -> bool:
        """Exact-match answer check against the key."""
        return answer == self.correct_answer


class QuestionBank:
    """
    In-memory question bank.

    Lookups:
    - for_roadmap: All questions of a roadmap
    - for_topic: Questions of one roadmap topic
    - diagnostic: Topic-balanced initial assessment
    """

    def __init__(self, questions: Iterable[QuestionBankEntry] = ()):
        self._questions: tuple[QuestionBankEntry, ...] = tuple(questions)

    @classmethod
    def from_json(cls, path: Path | str) -> QuestionBank:
        """
        Load a bank from a JSON file.

        The file holds either a list of questions or an object with a
        ``questions`` list.
        """
        path = Path(path)
        payload = json.loads(path.read_text(encoding="utf-8"))
        if isinstance(payload, dict):
            payload = payload.get("questions", [])

        bank = cls(QuestionBankEntry.model_validate(raw) for raw in payload)
        logger.info(f"Loaded {len(bank)} questions from {path}")
        return bank

    def __len__(self) -> int:
        return len(self._questions)

    def __iter__(self):
        return iter(self._questions)

    @property
    def roadmaps(self) -> list[str]:
        return sorted({q.roadmap_id for q in self._questions})

    def for_roadmap(self, roadmap_id: str) -> list[QuestionBankEntry]:
        return [q for q in self._questions if q.roadmap_id == roadmap_id]

    def for_topic(self, roadmap_id: str, topic_id: str) -> list[QuestionBankEntry]:
        return [
            q for q in self._questions
            if q.roadmap_id == roadmap_id and q.topic_id == topic_id
        ]

    def get(self, question_id: str) -> QuestionBankEntry | None:
        return next((q for q in self._questions if q.id == question_id), None)

    def diagnostic(
        self,
        roadmap_id: str,
        count: int = 10,
        rng: random.Random | None = None,
        iteration_factor: int = 10,
    ) -> list[QuestionBankEntry]:
        """Select a diagnostic set for a roadmap."""
        return select_diagnostic(
            self.for_roadmap(roadmap_id),
            count,
            rng=rng,
            iteration_factor=iteration_factor,
        )
