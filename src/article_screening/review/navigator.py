"""
Review queue navigation.
"""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, replace
from typing import Callable, Iterator, Optional, Union

from ..gateway import GatewayError, ScreeningGateway
from ..schemas import Role, ValidationError
from .login_memory import InMemoryLoginMemory, LoginMemory
from .reasons import ReasonCatalog
from .session import Phase, SessionState

logger = logging.getLogger(__name__)


# ============================================================================
# Events
# ============================================================================


@dataclass(frozen=True)
class Login:
    reviewer: str
    role: Union[Role, str]


@dataclass(frozen=True)
class Decide:
    outcome: object
    reason: Optional[str] = None
    notes: Optional[str] = ""


@dataclass(frozen=True)
class Skip:
    pass


@dataclass(frozen=True)
class Previous:
    pass


@dataclass(frozen=True)
class ViewSummary:
    pass


@dataclass(frozen=True)
class Back:
    pass


@dataclass(frozen=True)
class Logout:
    pass


Event = Union[Login, Decide, Skip, Previous, ViewSummary, Back, Logout]


@dataclass(frozen=True)
class LoginOptions:
    """Data needed to render the login form."""

    reviewers: list[str]
    saved_reviewer: Optional[str] = None
    saved_role: Optional[Role] = None


# ============================================================================
# Navigator
# ============================================================================


class ReviewNavigator:
    """
    Moves a SessionState through the screening flow.

    Responsibilities:
    - Load the queue at login
    - Validate and submit decisions
    - Skip / previous navigation over the history stack
    - Summary view and logout

    Every operation returns a new state. On ValidationError, GatewayError or
    DataError nothing is returned, so the caller's state stays as it was.
    Decided articles stay in the queue; the cursor moves past them.
    """

    def __init__(
        self,
        gateway: ScreeningGateway,
        catalog: Optional[ReasonCatalog] = None,
        memory: Optional[LoginMemory] = None,
        lock: Optional[threading.Lock] = None,
        on_transition: Optional[Callable[[SessionState], None]] = None,
    ):
        """
        Initialize navigator.

        Args:
            gateway: Screening API client
            catalog: Reason catalog (defaults to the built-in reasons)
            memory: Durable reviewer/role storage
            lock: Lock shared by everything acting on the same session
            on_transition: Called with intermediate states (QUEUE_LOADING)
        """
        self.gateway = gateway
        self.catalog = catalog or ReasonCatalog.from_config()
        self.memory = memory or InMemoryLoginMemory()
        self._lock = lock or threading.Lock()
        self._on_transition = on_transition

    @contextmanager
    def _exclusive(self, action: str) -> Iterator[None]:
        """Allow at most one gateway call in flight."""
        if not self._lock.acquire(blocking=False):
            raise ValidationError(
                f"A request is already in progress; please wait before you {action}"
            )
        try:
            yield
        finally:
            self._lock.release()

    @staticmethod
    def _require_phase(state: SessionState, allowed: tuple[Phase, ...], action: str) -> None:
        if state.phase in allowed:
            return
        if state.phase is Phase.QUEUE_LOADING:
            raise ValidationError(f"Articles are still loading; cannot {action} yet")
        if state.phase is Phase.UNAUTHENTICATED:
            raise ValidationError(f"Please log in to {action}")
        raise ValidationError(f"Cannot {action} from {state.phase.value.lower().replace('_', ' ')}")

    def _emit(self, state: SessionState) -> None:
        if self._on_transition:
            self._on_transition(state)

    # ── Login ───────────────────────────────────────────────────────────

    def login_options(self) -> LoginOptions:
        """Fetch reviewer names and the remembered reviewer/role."""
        saved_reviewer, saved_role = self.memory.recall()
        with self._exclusive("load reviewers"):
            reviewers = self.gateway.get_reviewers()
        return LoginOptions(
            reviewers=reviewers,
            saved_reviewer=saved_reviewer,
            saved_role=saved_role,
        )

    def login(self, state: SessionState, reviewer: str, role) -> SessionState:
        """
        Log in and load the reviewer's queue.

        Returns:
            REVIEWING at the first article, or QUEUE_EXHAUSTED if nothing is
            assigned
        """
        self._require_phase(state, (Phase.UNAUTHENTICATED,), "start a review")
        reviewer = (reviewer or "").strip()
        if not reviewer or not role:
            raise ValidationError("Please select both your name and role")
        role = Role.parse(role)

        with self._exclusive("start a review"):
            self._emit(SessionState(phase=Phase.QUEUE_LOADING, reviewer=reviewer, role=role))
            try:
                articles = self.gateway.get_articles(reviewer, role)
            except GatewayError as e:
                logger.warning(f"Failed to load articles for {reviewer}: {e}")
                raise

        self.memory.remember(reviewer, role)
        phase = Phase.REVIEWING if articles else Phase.QUEUE_EXHAUSTED
        logger.info(f"{reviewer} ({role.value}) logged in with {len(articles)} articles")
        return SessionState(
            phase=phase,
            reviewer=reviewer,
            role=role,
            queue=tuple(articles),
        )

    # ── Queue navigation ────────────────────────────────────────────────

    def decide(
        self,
        state: SessionState,
        outcome,
        reason: Optional[str],
        notes: Optional[str] = "",
    ) -> SessionState:
        """
        Record a decision for the current article and advance.

        Validation happens before the gateway is called.
        """
        self._require_phase(state, (Phase.REVIEWING,), "save a decision")
        article = state.current_article
        if article is None:
            raise ValidationError("There is no article to decide on")

        decision = self.catalog.build_decision(state.role, outcome, reason, notes)

        with self._exclusive("save another decision"):
            self.gateway.submit_decision(article.row_index, state.reviewer, state.role, decision)

        cursor = state.cursor + 1
        return replace(
            state,
            cursor=cursor,
            history=state.history + (state.cursor,),
            phase=Phase.REVIEWING if cursor < len(state.queue) else Phase.QUEUE_EXHAUSTED,
        )

    def skip(self, state: SessionState) -> SessionState:
        """Move to the next article without deciding; rejected on the last one."""
        self._require_phase(state, (Phase.REVIEWING,), "skip")
        if state.cursor + 1 >= len(state.queue):
            raise ValidationError("This is the last article. You cannot skip further.")
        return replace(
            state,
            cursor=state.cursor + 1,
            history=state.history + (state.cursor,),
        )

    def previous(self, state: SessionState) -> SessionState:
        """Return to the previously visited article; no-op without history."""
        self._require_phase(state, (Phase.REVIEWING, Phase.QUEUE_EXHAUSTED), "go back")
        if not state.history:
            return state
        return replace(
            state,
            cursor=state.history[-1],
            history=state.history[:-1],
            phase=Phase.REVIEWING,
        )

    # ── Summary ─────────────────────────────────────────────────────────

    def view_summary(self, state: SessionState) -> SessionState:
        """Fetch the reviewer's summary and switch to the summary view."""
        self._require_phase(
            state,
            (Phase.REVIEWING, Phase.QUEUE_EXHAUSTED, Phase.SUMMARY_VIEW),
            "view your summary",
        )
        with self._exclusive("view your summary"):
            summary = self.gateway.get_summary(state.reviewer, state.role)

        return_phase = state.return_phase if state.phase is Phase.SUMMARY_VIEW else state.phase
        return replace(
            state,
            phase=Phase.SUMMARY_VIEW,
            summary=summary,
            return_phase=return_phase,
        )

    def back(self, state: SessionState) -> SessionState:
        """Leave the summary view; the cursor is unchanged."""
        if state.phase is not Phase.SUMMARY_VIEW:
            return state
        if state.return_phase is not None:
            phase = state.return_phase
        else:
            phase = Phase.QUEUE_EXHAUSTED if state.is_exhausted else Phase.REVIEWING
        return replace(state, phase=phase, summary=None, return_phase=None)

    # ── Logout ──────────────────────────────────────────────────────────

    def logout(self, state: SessionState) -> SessionState:
        """Forget the reviewer and reset to the initial state."""
        if state.reviewer:
            logger.info(f"{state.reviewer} logged out")
        self.memory.forget()
        return SessionState()

    # ── Reducer ─────────────────────────────────────────────────────────

    def dispatch(self, state: SessionState, event: Event) -> SessionState:
        """Apply one event to a state."""
        if isinstance(event, Login):
            return self.login(state, event.reviewer, event.role)
        elif isinstance(event, Decide):
            return self.decide(state, event.outcome, event.reason, event.notes)
        elif isinstance(event, Skip):
            return self.skip(state)
        elif isinstance(event, Previous):
            return self.previous(state)
        elif isinstance(event, ViewSummary):
            return self.view_summary(state)
        elif isinstance(event, Back):
            return self.back(state)
        elif isinstance(event, Logout):
            return self.logout(state)
        raise ValidationError(f"Unknown event: {event!r}")
