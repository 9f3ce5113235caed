"""
Tests for review queue navigation.

The navigator is driven with a mocked gateway; these tests pin down the
state machine: login, decide, skip, previous, summary and logout.
"""

import threading

import pytest

from article_screening.gateway import GatewayRemoteError, GatewayTimeoutError
from article_screening.review import (
    Back,
    Decide,
    Login,
    Logout,
    Phase,
    Previous,
    ReviewNavigator,
    SessionState,
    Skip,
    ViewSummary,
)
from article_screening.schemas import (
    Article,
    Outcome,
    Role,
    Summary,
    SummaryCounts,
    ValidationError,
)


def _logged_in(navigator: ReviewNavigator) -> SessionState:
    return navigator.login(SessionState(), "Alice", "C1")


class TestLogin:
    """Login and queue loading."""

    def test_login_with_articles_starts_reviewing(self, navigator, gateway, articles):
        state = navigator.login(SessionState(), "Alice", "C1")

        assert state.phase is Phase.REVIEWING
        assert state.reviewer == "Alice"
        assert state.role is Role.FIRST
        assert state.cursor == 0
        assert state.history == ()
        assert state.current_article == articles[0]
        gateway.get_articles.assert_called_once_with("Alice", Role.FIRST)

    def test_login_with_empty_queue_is_exhausted(self, navigator, gateway):
        gateway.get_articles.return_value = []

        state = navigator.login(SessionState(), "Alice", Role.SECOND)

        assert state.phase is Phase.QUEUE_EXHAUSTED
        assert state.queue == ()
        assert state.current_article is None

    def test_login_remembers_reviewer_and_role(self, navigator, memory):
        navigator.login(SessionState(), "Alice", "C2")

        assert memory.values == {"reviewer": "Alice", "role": "C2"}

    def test_login_requires_reviewer_and_role(self, navigator, gateway):
        with pytest.raises(ValidationError, match="both your name and role"):
            navigator.login(SessionState(), "", "C1")
        with pytest.raises(ValidationError):
            navigator.login(SessionState(), "Alice", "")

        gateway.get_articles.assert_not_called()

    def test_login_rejects_unknown_role(self, navigator, gateway):
        with pytest.raises(ValidationError, match="Unknown reviewer role"):
            navigator.login(SessionState(), "Alice", "C3")

        gateway.get_articles.assert_not_called()

    def test_login_timeout_leaves_state_untouched(self, navigator, gateway, memory):
        """A timed-out queue fetch surfaces the error and changes nothing."""
        gateway.get_articles.side_effect = GatewayTimeoutError("Request timeout")
        initial = SessionState()

        with pytest.raises(GatewayTimeoutError):
            navigator.login(initial, "Alice", "C1")

        assert initial == SessionState()
        assert memory.values == {}

    def test_login_reports_queue_loading(self, gateway, memory):
        seen = []
        navigator = ReviewNavigator(gateway, memory=memory, on_transition=seen.append)

        navigator.login(SessionState(), "Alice", "C1")

        assert [s.phase for s in seen] == [Phase.QUEUE_LOADING]
        assert seen[0].reviewer == "Alice"

    def test_login_only_when_logged_out(self, navigator):
        state = _logged_in(navigator)

        with pytest.raises(ValidationError):
            navigator.login(state, "Bob", "C1")

    def test_login_options_include_saved_values(self, navigator, memory):
        memory.values.update({"reviewer": "Bob", "role": "C2"})

        options = navigator.login_options()

        assert options.reviewers == ["Alice", "Bob"]
        assert options.saved_reviewer == "Bob"
        assert options.saved_role is Role.SECOND


class TestDecide:
    """Decisions advance the cursor and record history."""

    def test_decide_moves_to_next_article(self, navigator, gateway, articles):
        state = _logged_in(navigator)

        state = navigator.decide(state, Outcome.INCLUDE, "Good Article")

        assert state.cursor == 1
        assert state.current_article == articles[1]
        assert state.history == (0,)
        submitted = gateway.submit_decision.call_args
        assert submitted.args[:3] == (10, "Alice", Role.FIRST)
        assert submitted.args[3].outcome is Outcome.INCLUDE
        assert submitted.args[3].note == "Good Article"

    def test_decide_then_previous_restores_article(self, navigator, articles):
        state = _logged_in(navigator)

        state = navigator.decide(state, "1", "Good Article")
        state = navigator.previous(state)

        assert state.cursor == 0
        assert state.current_article == articles[0]
        assert state.history == ()

    @pytest.mark.parametrize("length", [1, 2, 3, 5])
    def test_deciding_every_article_exhausts_queue(self, navigator, gateway, length):
        gateway.get_articles.return_value = [
            Article(row_index=i, title=f"Article {i}") for i in range(length)
        ]
        state = _logged_in(navigator)

        for _ in range(length):
            state = navigator.decide(state, Outcome.EXCLUDE, "not relevant")

        assert state.phase is Phase.QUEUE_EXHAUSTED
        assert state.cursor == length
        assert len(state.history) == length
        assert gateway.submit_decision.call_count == length

    def test_other_without_notes_never_reaches_gateway(self, navigator, gateway):
        state = _logged_in(navigator)

        with pytest.raises(ValidationError, match='notes for "other"'):
            navigator.decide(state, Outcome.EXCLUDE, "other", "   ")

        gateway.submit_decision.assert_not_called()

    def test_missing_outcome_or_reason(self, navigator, gateway):
        state = _logged_in(navigator)

        with pytest.raises(ValidationError, match="Include or Exclude"):
            navigator.decide(state, None, "Good Article")
        with pytest.raises(ValidationError, match="select a reason"):
            navigator.decide(state, Outcome.EXCLUDE, "")

        gateway.submit_decision.assert_not_called()

    def test_gateway_failure_keeps_state(self, navigator, gateway):
        state = _logged_in(navigator)
        gateway.submit_decision.side_effect = GatewayRemoteError("submitDecision", "Sheet locked")

        with pytest.raises(GatewayRemoteError):
            navigator.decide(state, Outcome.INCLUDE, "Good Article")

        assert state.cursor == 0
        assert state.history == ()

    def test_decide_rejected_while_request_in_flight(self, gateway, memory):
        lock = threading.Lock()
        navigator = ReviewNavigator(gateway, memory=memory, lock=lock)
        state = _logged_in(navigator)

        with lock:
            with pytest.raises(ValidationError, match="already in progress"):
                navigator.decide(state, Outcome.INCLUDE, "Good Article")

        gateway.submit_decision.assert_not_called()

    def test_decide_rejected_while_loading(self, navigator, gateway):
        loading = SessionState(phase=Phase.QUEUE_LOADING, reviewer="Alice", role=Role.FIRST)

        with pytest.raises(ValidationError, match="still loading"):
            navigator.decide(loading, Outcome.INCLUDE, "Good Article")

        gateway.submit_decision.assert_not_called()

    def test_decide_rejected_when_exhausted(self, navigator, gateway):
        gateway.get_articles.return_value = []
        state = _logged_in(navigator)

        with pytest.raises(ValidationError):
            navigator.decide(state, Outcome.INCLUDE, "Good Article")


class TestSkipAndPrevious:
    """Navigation without decisions."""

    def test_skip_advances_without_gateway(self, navigator, gateway):
        state = _logged_in(navigator)
        gateway.reset_mock()

        state = navigator.skip(state)

        assert state.cursor == 1
        assert state.history == (0,)
        assert gateway.method_calls == []

    def test_skip_on_last_article_is_rejected(self, navigator):
        state = _logged_in(navigator)
        state = navigator.skip(navigator.skip(state))

        with pytest.raises(ValidationError, match="last article"):
            navigator.skip(state)

        assert state.cursor == 2
        assert state.history == (0, 1)

    def test_previous_with_empty_history_is_noop(self, navigator):
        state = _logged_in(navigator)

        assert navigator.previous(state) is state

    def test_previous_after_skip(self, navigator):
        state = navigator.skip(_logged_in(navigator))

        state = navigator.previous(state)

        assert state.cursor == 0
        assert state.history == ()

    def test_previous_from_exhausted_queue(self, navigator, gateway):
        gateway.get_articles.return_value = [Article(row_index=1, title="Only")]
        state = navigator.decide(_logged_in(navigator), Outcome.INCLUDE, "Good Article")
        assert state.phase is Phase.QUEUE_EXHAUSTED

        state = navigator.previous(state)

        assert state.phase is Phase.REVIEWING
        assert state.cursor == 0

    def test_previous_requires_login(self, navigator):
        with pytest.raises(ValidationError, match="log in"):
            navigator.previous(SessionState())


class TestSummaryAndLogout:
    """Summary view and logout."""

    def test_view_summary_and_back(self, navigator, gateway):
        summary = Summary(counts=SummaryCounts(total=3, reviewed=1, included=1, pending=2))
        gateway.get_summary.return_value = summary
        state = navigator.decide(_logged_in(navigator), Outcome.INCLUDE, "Good Article")

        viewing = navigator.view_summary(state)

        assert viewing.phase is Phase.SUMMARY_VIEW
        assert viewing.summary == summary
        gateway.get_summary.assert_called_once_with("Alice", Role.FIRST)

        back = navigator.back(viewing)

        assert back.phase is Phase.REVIEWING
        assert back.cursor == state.cursor
        assert back.history == state.history
        assert back.summary is None

    def test_back_returns_to_exhausted_queue(self, navigator, gateway):
        gateway.get_articles.return_value = []
        gateway.get_summary.return_value = Summary(counts=SummaryCounts())
        state = _logged_in(navigator)

        state = navigator.back(navigator.view_summary(state))

        assert state.phase is Phase.QUEUE_EXHAUSTED

    def test_refreshing_summary_keeps_return_phase(self, navigator, gateway):
        gateway.get_summary.return_value = Summary(counts=SummaryCounts())
        state = navigator.view_summary(_logged_in(navigator))

        state = navigator.view_summary(state)

        assert state.return_phase is Phase.REVIEWING

    def test_summary_requires_login(self, navigator, gateway):
        with pytest.raises(ValidationError):
            navigator.view_summary(SessionState())

        gateway.get_summary.assert_not_called()

    def test_logout_resets_state_and_memory(self, navigator, memory):
        state = navigator.skip(_logged_in(navigator))
        assert memory.values

        state = navigator.logout(state)

        assert state == SessionState()
        assert "reviewer" not in memory.values
        assert "role" not in memory.values


class TestDispatch:
    """The reducer maps events onto navigator operations."""

    def test_full_session(self, navigator, gateway):
        gateway.get_summary.return_value = Summary(counts=SummaryCounts(total=3, reviewed=1))

        state = SessionState()
        for event in [
            Login("Alice", "C1"),
            Decide(Outcome.INCLUDE, "Good Article"),
            Skip(),
            Previous(),
            ViewSummary(),
            Back(),
        ]:
            state = navigator.dispatch(state, event)

        assert state.phase is Phase.REVIEWING
        assert state.cursor == 1
        assert state.history == (0,)

        state = navigator.dispatch(state, Logout())
        assert state == SessionState()

    def test_unknown_event(self, navigator):
        with pytest.raises(ValidationError, match="Unknown event"):
            navigator.dispatch(SessionState(), object())
