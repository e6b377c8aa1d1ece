"""
Quiz Module - Question bank, diagnostic selection and attempt scoring.
"""

from skillroute.quiz.attempts import AttemptScore, QuizSkillEstimate, estimate_quiz_skills, score_attempt
from skillroute.quiz.diagnostic import group_by_topic, select_diagnostic
from skillroute.quiz.question_bank import QuestionBank, QuestionBankEntry

__all__ = [
    "QuestionBank",
    "QuestionBankEntry",
    "select_diagnostic",
    "group_by_topic",
    "score_attempt",
    "estimate_quiz_skills",
    "AttemptScore",
    "QuizSkillEstimate",
]
