"""Rating aggregation.

``add_rating`` is pure: it validates the submission, then returns a new
document with the running mean recomputed. ``RatingStore`` reads and writes
the whole document; concurrent invocations are not coordinated.
"""

from __future__ import annotations

import copy
import json
import logging
import math
from collections.abc import Collection
from datetime import datetime
from pathlib import Path

from cursor_templates.errors import RatingError, StoreError
from cursor_templates.ratings.models import RatingRecord, RatingsDocument, Review
from cursor_templates.utils.json_io import isoformat, read_json, utc_now, write_json

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


def round10(value: float) -> float:
    """Round half up to one decimal place."""
    return math.floor(value * 10 + 0.5) / 10


def add_rating(
    document: RatingsDocument,
    template_name: str,
    rating: int,
    known_templates: Collection[str],
    comment: str | None = None,
    now: datetime | None = None,
) -> RatingsDocument:
    """Return a copy of *document* with one more rating for *template_name*.

    Raises ``RatingError`` before touching anything when the rating is not an
    integer in [1, 5] or the template is unknown.
    """
    if isinstance(rating, bool) or not isinstance(rating, int) or not MIN_RATING <= rating <= MAX_RATING:
        raise RatingError(f"Rating must be an integer between {MIN_RATING} and {MAX_RATING}, got {rating!r}")
    if template_name not in known_templates:
        raise RatingError(f'Cannot rate unknown template "{template_name}"')

    updated = copy.deepcopy(document)
    record = updated.templates.setdefault(template_name, RatingRecord())

    record.votes += 1
    record.total += rating
    record.rating = round10(record.total / record.votes)

    if comment:
        record.reviews.append(Review(rating=rating, comment=comment, date=isoformat(now or utc_now())))

    return updated


def get_rating(document: RatingsDocument, template_name: str) -> RatingRecord | None:
    return document.templates.get(template_name)


class RatingStore:
    """File-backed rating document."""

    def __init__(self, ratings_file: str | Path):
        self.ratings_file = Path(ratings_file)

    def load(self) -> RatingsDocument:
        """Load the document; an absent file is an empty document."""
        if not self.ratings_file.exists():
            return RatingsDocument()

        try:
            data = read_json(self.ratings_file)
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError("Could not read ratings", self.ratings_file, details=str(e)) from e

        if not isinstance(data, dict):
            raise StoreError("Ratings must be a JSON object", self.ratings_file)
        try:
            return RatingsDocument.from_dict(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise StoreError("Malformed ratings document", self.ratings_file, details=repr(e)) from e

    def save(self, document: RatingsDocument) -> None:
        try:
            write_json(self.ratings_file, document.to_dict())
        except OSError as e:
            raise StoreError("Could not write ratings", self.ratings_file, details=str(e)) from e
        logger.debug("Saved ratings to %s", self.ratings_file)
