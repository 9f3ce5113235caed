"""
Canonical screening objects.

Every payload returned by the screening API is parsed into these types.
Views and the navigator never look at raw API dictionaries.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

OTHER_REASON = "other"
DOI_RESOLVER = "https://doi.org/"


class DataError(Exception):
    """An API payload is malformed or lacks an expected field."""

    pass


class ValidationError(Exception):
    """A user action is incomplete or not allowed in the current state."""

    pass


class Role(str, Enum):
    """Screening pass of a reviewer."""

    FIRST = "C1"
    SECOND = "C2"

    @property
    def label(self) -> str:
        """Human-readable role name."""
        return "First Reviewer" if self is Role.FIRST else "Second Reviewer"

    @classmethod
    def parse(cls, value: Any) -> "Role":
        """Parse a role code, raising ValidationError for unknown codes."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValidationError(f"Unknown reviewer role: {value!r}")


class Outcome(int, Enum):
    """Screening outcome. Values match the API's `decision` parameter."""

    EXCLUDE = 0
    INCLUDE = 1

    @property
    def label(self) -> str:
        return "Included" if self is Outcome.INCLUDE else "Excluded"

    @classmethod
    def parse(cls, value: Any) -> "Outcome":
        """Parse 0/1 (as int or string) or include/exclude."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        if text in ("1", "include", "included"):
            return cls.INCLUDE
        if text in ("0", "exclude", "excluded"):
            return cls.EXCLUDE
        raise ValidationError("Please select Include or Exclude")


def _text(data: dict, key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    return str(value).strip()


def _row_index(data: dict) -> int:
    raw = data.get("rowIndex")
    if raw is None or raw == "":
        raise DataError("Article is missing rowIndex")
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise DataError(f"Article has invalid rowIndex: {raw!r}")


def _flag(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "y", "duplicate")
    return bool(value)


@dataclass(frozen=True)
class Article:
    """
    An article assigned for screening.

    `row_index` is the write-back key for decisions; `row_number` and
    `sheet_url` only point a human at the spreadsheet row.
    """

    row_index: int
    title: str
    author: str = ""
    year: str = ""
    source: str = ""
    publication: str = ""
    publication_type: str = ""
    doi: str = ""
    url: str = ""
    abstract: str = ""
    row_number: Optional[int] = None
    sheet_url: str = ""
    duplicate: bool = False

    @property
    def doi_url(self) -> Optional[str]:
        """Resolver link for the DOI, if any."""
        if not self.doi:
            return None
        if self.doi.lower().startswith(("http://", "https://")):
            return self.doi
        return f"{DOI_RESOLVER}{self.doi}"

    @classmethod
    def from_api_response(cls, data: Any) -> "Article":
        """Create from a screening API article record."""
        if not isinstance(data, dict):
            raise DataError(f"Expected an article object, got {type(data).__name__}")

        row_number = data.get("rowNumber")
        try:
            row_number = int(row_number) if row_number not in (None, "") else None
        except (TypeError, ValueError):
            row_number = None

        return cls(
            row_index=_row_index(data),
            title=_text(data, "title"),
            author=_text(data, "author"),
            year=_text(data, "year"),
            source=_text(data, "source"),
            publication=_text(data, "publication"),
            publication_type=_text(data, "publicationType"),
            doi=_text(data, "doi"),
            url=_text(data, "url"),
            abstract=_text(data, "abstract"),
            row_number=row_number,
            sheet_url=_text(data, "sheetUrl"),
            duplicate=_flag(data.get("duplicate", data.get("isDuplicate", False))),
        )

    def to_dict(self) -> dict:
        """Serialize using the API's field names."""
        return {
            "rowIndex": self.row_index,
            "title": self.title,
            "author": self.author,
            "year": self.year,
            "source": self.source,
            "publication": self.publication,
            "publicationType": self.publication_type,
            "doi": self.doi,
            "url": self.url,
            "abstract": self.abstract,
            "rowNumber": self.row_number,
            "sheetUrl": self.sheet_url,
            "duplicate": self.duplicate,
        }


@dataclass(frozen=True)
class Decision:
    """A validated screening decision for one article."""

    outcome: Outcome
    reason: str
    notes: str = ""

    @property
    def note(self) -> str:
        """Value written to the sheet's note column."""
        if self.reason == OTHER_REASON:
            return self.notes
        return self.reason

    @property
    def additional_comments(self) -> Optional[str]:
        """Free-text notes attached to a non-`other` reason."""
        if self.reason != OTHER_REASON and self.notes:
            return self.notes
        return None

    def to_params(self) -> dict[str, Any]:
        """API parameters for this decision (without row/reviewer keys)."""
        params: dict[str, Any] = {
            "decision": self.outcome.value,
            "note": self.note,
        }
        if self.additional_comments:
            params["additionalComments"] = self.additional_comments
        return params


@dataclass(frozen=True)
class ReviewedArticle:
    """An already-decided article as listed in the summary."""

    article: Article
    outcome: Outcome
    note: str = ""

    @classmethod
    def from_api_response(cls, data: Any) -> "ReviewedArticle":
        if not isinstance(data, dict):
            raise DataError("Reviewed article entry is not an object")
        try:
            outcome = Outcome(int(data.get("decision")))
        except (TypeError, ValueError):
            raise DataError(f"Reviewed article has invalid decision: {data.get('decision')!r}")
        return cls(
            article=_summary_article(data),
            outcome=outcome,
            note=_text(data, "note"),
        )


def _summary_article(data: dict) -> Article:
    # Summary rows may omit rowIndex; fall back to the sheet row number.
    if data.get("rowIndex") in (None, "") and data.get("rowNumber") not in (None, ""):
        data = {**data, "rowIndex": data["rowNumber"]}
    return Article.from_api_response(data)


def _count(data: dict, key: str) -> int:
    try:
        return int(data.get(key) or 0)
    except (TypeError, ValueError):
        raise DataError(f"Summary count {key!r} is not a number: {data.get(key)!r}")


@dataclass(frozen=True)
class SummaryCounts:
    """Aggregate counts for one reviewer and role."""

    total: int = 0
    reviewed: int = 0
    included: int = 0
    excluded: int = 0
    pending: int = 0

    @property
    def percent_complete(self) -> int:
        if self.total <= 0:
            return 0
        return round(self.reviewed / self.total * 100)


@dataclass(frozen=True)
class Summary:
    """Screening progress for one reviewer and role."""

    counts: SummaryCounts
    reviewed: tuple[ReviewedArticle, ...] = field(default_factory=tuple)
    pending: tuple[Article, ...] = field(default_factory=tuple)

    @classmethod
    def from_api_response(cls, data: Any) -> "Summary":
        """Create from a `getSummary` payload."""
        if not isinstance(data, dict) or not isinstance(data.get("summary"), dict):
            raise DataError("Invalid summary data received")

        raw = data["summary"]
        reviewed = _count(raw, "reviewed")
        pending = _count(raw, "pending")
        total = _count(raw, "total") if raw.get("total") not in (None, "") else reviewed + pending

        counts = SummaryCounts(
            total=total,
            reviewed=reviewed,
            included=_count(raw, "included"),
            excluded=_count(raw, "excluded"),
            pending=pending,
        )
        return cls(
            counts=counts,
            reviewed=tuple(
                ReviewedArticle.from_api_response(item) for item in data.get("reviewed") or []
            ),
            pending=tuple(_summary_article(item) for item in data.get("pending") or []),
        )

    def to_dict(self) -> dict:
        return {
            "summary": {
                "total": self.counts.total,
                "reviewed": self.counts.reviewed,
                "included": self.counts.included,
                "excluded": self.counts.excluded,
                "pending": self.counts.pending,
            },
            "reviewed": [
                {**item.article.to_dict(), "decision": item.outcome.value, "note": item.note}
                for item in self.reviewed
            ],
            "pending": [article.to_dict() for article in self.pending],
        }
