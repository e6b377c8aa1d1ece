"""Terminal front end for the review engine."""
