"""
SkillRoute adaptive learning engine.

Spaced repetition (SM-2), decay-weighted proficiency estimates and
topic-balanced diagnostic quizzes for roadmap-based learning.
"""

__version__ = "1.0.0"
