"""
Review session state.

A SessionState is a plain value: the navigator never mutates one, it
returns a new state for every transition. The web layer keeps the current
value in the browser session via to_dict()/from_dict().
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..schemas import Article, DataError, Role, Summary


class Phase(str, Enum):
    """Where the reviewer is in the screening flow."""

    UNAUTHENTICATED = "UNAUTHENTICATED"
    QUEUE_LOADING = "QUEUE_LOADING"
    REVIEWING = "REVIEWING"
    QUEUE_EXHAUSTED = "QUEUE_EXHAUSTED"
    SUMMARY_VIEW = "SUMMARY_VIEW"


@dataclass(frozen=True)
class Progress:
    """Position within the queue for display."""

    position: int  # 1-based article number
    total: int
    percent: int  # share of the queue already passed


@dataclass(frozen=True)
class SessionState:
    """
    Reviewer identity, queue and navigation for one login.

    Invariants:
    - 0 <= cursor <= len(queue); cursor == len(queue) means exhausted
    - every entry in history is a valid index into queue
    """

    phase: Phase = Phase.UNAUTHENTICATED
    reviewer: Optional[str] = None
    role: Optional[Role] = None
    queue: tuple[Article, ...] = ()
    cursor: int = 0
    history: tuple[int, ...] = ()
    summary: Optional[Summary] = None
    # Phase to restore when leaving the summary view
    return_phase: Optional[Phase] = None

    @property
    def is_authenticated(self) -> bool:
        return self.reviewer is not None and self.role is not None

    @property
    def is_exhausted(self) -> bool:
        return self.cursor >= len(self.queue)

    @property
    def current_article(self) -> Optional[Article]:
        if self.phase is not Phase.REVIEWING or self.is_exhausted:
            return None
        return self.queue[self.cursor]

    @property
    def can_go_back(self) -> bool:
        return bool(self.history)

    @property
    def progress(self) -> Progress:
        total = len(self.queue)
        percent = round(self.cursor / total * 100) if total else 0
        return Progress(position=min(self.cursor + 1, total), total=total, percent=percent)

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dictionary."""
        return {
            "phase": self.phase.value,
            "reviewer": self.reviewer,
            "role": self.role.value if self.role else None,
            "queue": [article.to_dict() for article in self.queue],
            "cursor": self.cursor,
            "history": list(self.history),
            "summary": self.summary.to_dict() if self.summary else None,
            "return_phase": self.return_phase.value if self.return_phase else None,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "SessionState":
        """
        Deserialize from dictionary.

        Stored state that breaks the cursor/history invariants is rejected
        with DataError rather than repaired.
        """
        if not data:
            return cls()

        try:
            queue = tuple(Article.from_api_response(item) for item in data.get("queue") or [])
            cursor = int(data.get("cursor", 0))
            history = tuple(int(i) for i in data.get("history") or [])
            state = cls(
                phase=Phase(data.get("phase", Phase.UNAUTHENTICATED.value)),
                reviewer=data.get("reviewer"),
                role=Role(data["role"]) if data.get("role") else None,
                queue=queue,
                cursor=cursor,
                history=history,
                summary=Summary.from_api_response(data["summary"]) if data.get("summary") else None,
                return_phase=Phase(data["return_phase"]) if data.get("return_phase") else None,
            )
        except (KeyError, TypeError, ValueError) as e:
            raise DataError(f"Stored session state is invalid: {e}")

        if not 0 <= state.cursor <= len(state.queue):
            raise DataError(f"Stored cursor {state.cursor} is outside the queue")
        if any(not 0 <= i < len(state.queue) for i in state.history):
            raise DataError("Stored history points outside the queue")
        return state
