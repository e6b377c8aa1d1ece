"""
Quiz attempt scoring and quiz-based skill estimates.

A finished quiz gives two things: an overall score for the attempt, and a
first per-topic skill reading (share correct, with confidence growing
with the number of questions seen on that topic).
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from skillroute.core.mastery import SkillStatus
from skillroute.core.models import QuizAnswer
from skillroute.study.sm2 import round_half_up

CONFIDENCE_SATURATION = 5


@dataclass
class AttemptScore:
    """Result of scoring one quiz attempt."""

    score: int
    total: int
    percentage: float  # 0-100, two decimals


@dataclass
class QuizSkillEstimate:
    """Per-topic reading taken from a single quiz attempt."""

    node_id: str
    correct: int
    total: int
    proficiency: float
    confidence: float
    status: SkillStatus


def score_attempt(answers: Sequence[QuizAnswer]) -> AttemptScore:
    """Score an attempt; an empty attempt scores 0%."""
    score = sum(1 for a in answers if a.correct)
    total = len(answers)
    percentage = (score / total) * 100 if total > 0 else 0.0
    return AttemptScore(score=score, total=total, percentage=round_half_up(percentage * 100) / 100)


def estimate_quiz_skills(
    answers: Sequence[QuizAnswer],
    confidence_saturation: int = CONFIDENCE_SATURATION,
) -> list[QuizSkillEstimate]:
    """
    Group answers by topic and estimate proficiency per topic.

    proficiency = correct / total
    confidence  = min(1, total / confidence_saturation)
    """
    by_node: dict[str, list[QuizAnswer]] = {}
    for answer in answers:
        by_node.setdefault(answer.node_id, []).append(answer)

    estimates = []
    for node_id, node_answers in by_node.items():
        correct = sum(1 for a in node_answers if a.correct)
        total = len(node_answers)
        proficiency = correct / total
        confidence = min(1.0, total / max(1, confidence_saturation))
        estimates.append(
            QuizSkillEstimate(
                node_id=node_id,
                correct=correct,
                total=total,
                proficiency=proficiency,
                confidence=confidence,
                status=SkillStatus.from_scores(proficiency, confidence),
            )
        )
    return estimates
