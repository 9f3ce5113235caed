"""
Screening schemas shared by the gateway, the navigator and the web UI.
"""

from .screening import (
    DOI_RESOLVER,
    OTHER_REASON,
    Article,
    DataError,
    Decision,
    Outcome,
    ReviewedArticle,
    Role,
    Summary,
    SummaryCounts,
    ValidationError,
)

__all__ = [
    "DOI_RESOLVER",
    "OTHER_REASON",
    "Article",
    "DataError",
    "Decision",
    "Outcome",
    "ReviewedArticle",
    "Role",
    "Summary",
    "SummaryCounts",
    "ValidationError",
]
