"""
Unit tests for the question bank.
"""

import json
import random

import pytest
from pydantic import ValidationError

from skillroute.quiz.question_bank import QuestionBank, QuestionBankEntry


@pytest.fixture
def bank_file(tmp_path):
    payload = {
        "questions": [
            {
                "id": "py-1",
                "roadmapId": "python",
                "nodeId": "loops",
                "difficulty": "beginner",
                "question": "What does range(3) yield?",
                "questionType": "multiple_choice",
                "options": ["0 1 2", "1 2 3"],
                "correctAnswer": "0 1 2",
                "tags": ["loops"],
            },
            {
                "id": "py-2",
                "roadmap_id": "python",
                "topic_id": "functions",
                "difficulty": "intermediate",
                "question": "Is def a statement?",
                "question_type": "true_false",
                "options": ["True", "False"],
                "correct_answer": "True",
            },
            {
                "id": "js-1",
                "roadmapId": "javascript",
                "topicId": "closures",
                "correctAnswer": "yes",
            },
        ]
    }
    path = tmp_path / "bank.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestLoading:
    def test_from_json_accepts_both_key_styles(self, bank_file):
        bank = QuestionBank.from_json(bank_file)
        assert len(bank) == 3
        loops = bank.get("py-1")
        assert loops.roadmap_id == "python"
        assert loops.topic_id == "loops"
        assert loops.correct_answer == "0 1 2"
        assert loops.options == ("0 1 2", "1 2 3")
        assert bank.get("py-2").question_type == "true_false"

    def test_from_json_plain_list(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text(json.dumps([{"id": "a", "roadmapId": "r", "nodeId": "t", "correctAnswer": "x"}]))
        assert len(QuestionBank.from_json(path)) == 1

    def test_invalid_difficulty_rejected(self):
        with pytest.raises(ValidationError):
            QuestionBankEntry(id="a", roadmap_id="r", topic_id="t", correct_answer="x", difficulty="expert")


class TestLookups:
    def test_roadmaps(self, bank_file):
        assert QuestionBank.from_json(bank_file).roadmaps == ["javascript", "python"]

    def test_for_roadmap_and_topic(self, bank_file):
        bank = QuestionBank.from_json(bank_file)
        assert {q.id for q in bank.for_roadmap("python")} == {"py-1", "py-2"}
        assert [q.id for q in bank.for_topic("python", "functions")] == ["py-2"]
        assert bank.for_topic("python", "closures") == []

    def test_get_missing(self, bank_file):
        assert QuestionBank.from_json(bank_file).get("nope") is None

    def test_diagnostic_stays_in_roadmap(self, bank_file):
        bank = QuestionBank.from_json(bank_file)
        selected = bank.diagnostic("python", count=10, rng=random.Random(0))
        assert {q.id for q in selected} == {"py-1", "py-2"}


class TestEntry:
    def test_is_correct(self, sample_questions):
        question = sample_questions[0]
        assert question.is_correct("a")
        assert not question.is_correct("b")

    def test_entries_are_immutable(self, sample_questions):
        with pytest.raises(ValidationError):
            sample_questions[0].question = "changed"
