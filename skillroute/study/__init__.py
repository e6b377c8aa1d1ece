"""
Study Module - Answer grading and SM-2 scheduling.
"""

from skillroute.study.quality import classify_answer
from skillroute.study.review_queue import due_items, review_stats
from skillroute.study.sm2 import SM2Config, SM2Scheduler, advance, clamp_quality

__all__ = [
    "classify_answer",
    "SM2Config",
    "SM2Scheduler",
    "advance",
    "clamp_quality",
    "due_items",
    "review_stats",
]
