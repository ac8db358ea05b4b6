"""Rating Aggregator — running-average ratings keyed by template name."""

from cursor_templates.ratings.aggregator import RatingStore, add_rating, get_rating, round10
from cursor_templates.ratings.models import RatingRecord, RatingsDocument, Review

__all__ = [
    "RatingRecord",
    "RatingStore",
    "RatingsDocument",
    "Review",
    "add_rating",
    "get_rating",
    "round10",
]
