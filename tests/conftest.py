"""Test fixtures and utilities."""

from unittest.mock import MagicMock

import pytest

from article_screening.gateway import ScreeningGateway
from article_screening.review import InMemoryLoginMemory, ReasonCatalog, ReviewNavigator
from article_screening.schemas import Article


@pytest.fixture
def sample_article_response() -> dict:
    """Sample getArticles record."""
    return {
        "rowIndex": 14,
        "rowNumber": 15,
        "sheetUrl": "https://docs.google.com/spreadsheets/d/sheet/edit#gid=0&range=A15",
        "title": "Perceived transparency in human-AI interaction",
        "author": "Doe, J.; Roe, R.",
        "year": 2023,
        "source": "Scopus",
        "publication": "Journal of Human-AI Interaction",
        "publicationType": "Journal Article",
        "doi": "10.1000/hai.2023.001",
        "url": "https://example.org/paper.pdf",
        "abstract": "We study how users perceive transparency.",
    }


@pytest.fixture
def sample_summary_response() -> dict:
    """Sample getSummary payload."""
    return {
        "summary": {
            "total": 5,
            "reviewed": 3,
            "included": 2,
            "excluded": 1,
            "pending": 2,
        },
        "reviewed": [
            {
                "rowIndex": 2,
                "rowNumber": 3,
                "title": "Included paper",
                "author": "A. Author",
                "year": "2021",
                "decision": 1,
                "note": "Good Article",
            },
            {
                "rowIndex": 3,
                "rowNumber": 4,
                "title": "Excluded paper",
                "author": "B. Author",
                "year": "2020",
                "decision": 0,
                "note": "not relevant",
            },
            {
                "rowNumber": 5,
                "title": "Paper without row index",
                "decision": 1,
                "note": "full text coded",
            },
        ],
        "pending": [
            {"rowIndex": 5, "rowNumber": 6, "title": "Pending one"},
            {"rowIndex": 6, "rowNumber": 7, "title": "Pending two"},
        ],
    }


@pytest.fixture
def articles() -> list[Article]:
    """Queue of three articles: A, B, C."""
    return [
        Article(row_index=10, title="A"),
        Article(row_index=11, title="B"),
        Article(row_index=12, title="C"),
    ]


@pytest.fixture
def gateway(articles) -> MagicMock:
    """Gateway double returning the three-article queue."""
    mock = MagicMock(spec=ScreeningGateway)
    mock.get_reviewers.return_value = ["Alice", "Bob"]
    mock.get_articles.return_value = list(articles)
    mock.submit_decision.return_value = {"success": True}
    return mock


@pytest.fixture
def memory() -> InMemoryLoginMemory:
    return InMemoryLoginMemory()


@pytest.fixture
def navigator(gateway, memory) -> ReviewNavigator:
    return ReviewNavigator(gateway=gateway, catalog=ReasonCatalog.from_config(), memory=memory)
