"""
Diagnostic Question Selector.

Samples an initial assessment from a roadmap's question bank so that every
topic is visited before any topic is visited twice:

1. Group questions by topic (first-seen topic order)
2. Cycle through the topics round-robin
3. At each visit, take one uniformly random not-yet-selected question
4. Stop at ``count`` questions or when the bank is exhausted
"""
from __future__ import annotations

import random
from collections.abc import Sequence
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from skillroute.quiz.question_bank import QuestionBankEntry


def group_by_topic(questions: Sequence[QuestionBankEntry]) -> dict[str, list[QuestionBankEntry]]:
    """Group questions by topic id, preserving first-seen order."""
    groups: dict[str, list[QuestionBankEntry]] = {}
    for question in questions:
        groups.setdefault(question.topic_id, []).append(question)
    return groups


def select_diagnostic(
    questions: Sequence[QuestionBankEntry],
    count: int = 10,
    rng: random.Random | None = None,
    iteration_factor: int = 10,
) -> list[QuestionBankEntry]:
    """
    Select a topic-balanced diagnostic question set.

    Args:
        questions: The roadmap's question bank
        count: Number of questions wanted
        rng: Random source (module-level random when None)
        iteration_factor: Idle topic visits tolerated per topic before the
            loop gives up

    Returns:
        Up to ``count`` distinct questions. Asking for more than the bank
        holds returns the whole bank once.
    """
    if count <= 0 or not questions:
        return []

    rng = rng or random.Random()
    groups = group_by_topic(questions)
    topics = list(groups)

    # Dedupe by id so a bank listing a question twice cannot yield it twice
    total = len({q.id for q in questions})
    max_idle = iteration_factor * len(topics)

    selected: list[QuestionBankEntry] = []
    selected_ids: set[str] = set()
    idx = 0
    idle = 0

    while len(selected) < count and len(selected) < total:
        topic = topics[idx % len(topics)]
        remaining = [q for q in groups[topic] if q.id not in selected_ids]
        idx += 1

        if remaining:
            pick = rng.choice(remaining)
            selected.append(pick)
            selected_ids.add(pick.id)
            idle = 0
        else:
            idle += 1
            if idle > max_idle:
                logger.warning(f"Diagnostic selection stalled after {idx} visits; returning {len(selected)}")
                break

    logger.debug(f"Selected {len(selected)} diagnostic questions across {len(topics)} topics")
    return selected
