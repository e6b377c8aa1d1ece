from skillroute.learning.review_service import ReviewService

__all__ = ["ReviewService"]
