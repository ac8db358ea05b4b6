"""Rating data models."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class Review:
    """A single rating submission that came with a comment."""

    rating: int
    comment: str
    date: str  # ISO 8601

    def to_dict(self) -> dict:
        return {"rating": self.rating, "comment": self.comment, "date": self.date}


@dataclass
class RatingRecord:
    """Running average for one template."""

    rating: float = 0.0  # Mean of all submissions, one decimal
    votes: int = 0
    total: int = 0  # Exact sum of all submissions
    reviews: list[Review] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "rating": self.rating,
            "votes": self.votes,
            "total": self.total,
            "reviews": [r.to_dict() for r in self.reviews],
        }

    @classmethod
    def from_dict(cls, data: dict) -> RatingRecord:
        rating = float(data.get("rating", 0))
        votes = int(data.get("votes", 0))
        total = data.get("total")
        return cls(
            rating=rating,
            votes=votes,
            # Documents written without a total only keep the rounded mean
            total=int(total) if total is not None else round(rating * votes),
            reviews=[
                Review(rating=r["rating"], comment=r.get("comment", ""), date=r.get("date", ""))
                for r in data.get("reviews") or []
            ],
        )


@dataclass
class RatingsDocument:
    """The persisted rating document, keyed by template name."""

    templates: dict[str, RatingRecord] = field(default_factory=dict)
    featured: list[str] = field(default_factory=list)
    trending: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "templates": {name: record.to_dict() for name, record in self.templates.items()},
            "featured": self.featured,
            "trending": self.trending,
        }

    @classmethod
    def from_dict(cls, data: dict) -> RatingsDocument:
        return cls(
            templates={
                name: RatingRecord.from_dict(record)
                for name, record in (data.get("templates") or {}).items()
            },
            featured=list(data.get("featured") or []),
            trending=list(data.get("trending") or []),
        )
