"""
Views for the review web interface.

Views only translate between HTTP and the navigator: they load the session
state, dispatch one event, store the returned state and redirect. Errors
become flash messages and leave the stored state untouched.
"""

import logging
import threading
import weakref
from pathlib import Path

from django.conf import settings
from django.contrib import messages
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.views.decorators.http import require_http_methods, require_POST

from ...config import Config, load_config
from ...gateway import GatewayError, ScreeningGateway
from ...schemas import OTHER_REASON, DataError, Outcome, Role, ValidationError
from ..navigator import (
    Back,
    Decide,
    Event,
    LoginOptions,
    Logout,
    Previous,
    ReviewNavigator,
    Skip,
    ViewSummary,
)
from ..reasons import ReasonCatalog
from ..session import Phase, SessionState
from .cookies import CookieLoginMemory

logger = logging.getLogger(__name__)

SESSION_KEY = "screening_state"

# One lock per browser session so a double-clicked form cannot submit twice.
# Entries live only while a request holds the lock object.
_session_locks: "weakref.WeakValueDictionary[str, threading.Lock]" = (
    weakref.WeakValueDictionary()
)
_session_locks_guard = threading.Lock()


# ============================================================================
# Helpers
# ============================================================================


def get_config() -> Config:
    """Load config, letting Django settings override the API URL."""
    config = load_config(Path(settings.SCREENING_CONFIG_PATH))
    if settings.SCREENING_API_URL:
        config.gateway.base_url = settings.SCREENING_API_URL
    return config


def _get_gateway(config: Config) -> ScreeningGateway:
    """Build the screening API client."""
    return ScreeningGateway(
        base_url=config.gateway.base_url,
        timeout=config.gateway.timeout_seconds,
        max_retries=config.gateway.max_retries,
        backoff_factor=config.gateway.backoff_factor,
    )


def load_state(request: HttpRequest) -> SessionState:
    """Load the session state, falling back to a fresh one if it is corrupt."""
    try:
        return SessionState.from_dict(request.session.get(SESSION_KEY))
    except DataError as e:
        logger.warning(f"Discarding invalid session state: {e}")
        return SessionState()


def save_state(request: HttpRequest, state: SessionState) -> None:
    request.session[SESSION_KEY] = state.to_dict()


def _session_lock(request: HttpRequest) -> threading.Lock:
    if request.session.session_key is None:
        request.session.save()
    key = request.session.session_key
    with _session_locks_guard:
        lock = _session_locks.get(key)
        if lock is None:
            lock = threading.Lock()
            _session_locks[key] = lock
        return lock


def _memory(request: HttpRequest, config: Config) -> CookieLoginMemory:
    """Cookie memory; SCREENING_REMEMBER_DAYS overrides web.remember_days."""
    days = settings.SCREENING_REMEMBER_DAYS or config.web.remember_days
    return CookieLoginMemory(request, max_age_days=days)


def _get_navigator(
    request: HttpRequest, memory: CookieLoginMemory, config: Config
) -> ReviewNavigator:
    return ReviewNavigator(
        gateway=_get_gateway(config),
        catalog=ReasonCatalog.from_config(config.screening),
        memory=memory,
        lock=_session_lock(request),
    )


def _dispatch(
    request: HttpRequest,
    event: Event,
    success_url: str = "review",
    error_url: str = "review",
    failure_message: str = "",
) -> HttpResponse:
    """Apply one event to the stored state and redirect."""
    state = load_state(request)
    config = get_config()
    memory = _memory(request, config)
    navigator = _get_navigator(request, memory, config)

    try:
        new_state = navigator.dispatch(state, event)
    except ValidationError as e:
        messages.warning(request, str(e))
        return redirect(error_url)
    except (GatewayError, DataError) as e:
        logger.error(f"{type(event).__name__} failed for {state.reviewer}: {e}")
        prefix = f"{failure_message} " if failure_message else ""
        messages.error(request, f"{prefix}Error: {e}")
        return redirect(error_url)

    save_state(request, new_state)
    return memory.apply(redirect(success_url))


# ============================================================================
# Login
# ============================================================================


@require_http_methods(["GET", "POST"])
def login_page(request: HttpRequest) -> HttpResponse:
    """Reviewer/role selection; POST starts the review."""
    state = load_state(request)
    if state.is_authenticated:
        return redirect("review")

    config = get_config()
    memory = _memory(request, config)
    navigator = _get_navigator(request, memory, config)

    if request.method == "POST":
        reviewer = request.POST.get("reviewer", "")
        role = request.POST.get("role", "")
        try:
            new_state = navigator.login(state, reviewer, role)
        except ValidationError as e:
            messages.warning(request, str(e))
            return redirect("login")
        except (GatewayError, DataError) as e:
            messages.error(request, f"Failed to load articles. Please try again. Error: {e}")
            return redirect("login")

        save_state(request, new_state)
        return memory.apply(redirect("review"))

    try:
        options = navigator.login_options()
    except (GatewayError, DataError, ValidationError) as e:
        logger.error(f"Failed to load reviewers: {e}")
        messages.error(request, f"Failed to load reviewers. Please refresh and try again. Error: {e}")
        saved_reviewer, saved_role = memory.recall()
        options = LoginOptions(reviewers=[], saved_reviewer=saved_reviewer, saved_role=saved_role)

    context = {
        "options": options,
        "roles": list(Role),
    }
    return render(request, "review/login.html", context)


# ============================================================================
# Review queue
# ============================================================================


@require_http_methods(["GET"])
def review_page(request: HttpRequest) -> HttpResponse:
    """Current article with the decision form, or the queue-complete notice."""
    state = load_state(request)
    if not state.is_authenticated:
        return redirect("login")
    if state.phase is Phase.SUMMARY_VIEW:
        return redirect("summary")

    catalog = ReasonCatalog.from_config(get_config().screening)
    context = {
        "state": state,
        "article": state.current_article,
        "progress": state.progress,
        "include_reasons": catalog.reasons_for(state.role, Outcome.INCLUDE),
        "exclude_reasons": catalog.reasons_for(state.role, Outcome.EXCLUDE),
        "include_requires_reason": catalog.include_requires_reason,
        "other_reason": OTHER_REASON,
    }
    return render(request, "review/review.html", context)


@require_POST
def decide(request: HttpRequest) -> HttpResponse:
    """Save a decision for the current article and move on."""
    event = Decide(
        outcome=request.POST.get("decision"),
        reason=request.POST.get("reason", ""),
        notes=request.POST.get("notes", ""),
    )
    return _dispatch(request, event, failure_message="Failed to save decision. Please try again.")


@require_POST
def skip(request: HttpRequest) -> HttpResponse:
    return _dispatch(request, Skip())


@require_POST
def previous(request: HttpRequest) -> HttpResponse:
    return _dispatch(request, Previous())


# ============================================================================
# Summary
# ============================================================================


@require_http_methods(["GET"])
def summary_page(request: HttpRequest) -> HttpResponse:
    """Fetch and show the reviewer's summary."""
    state = load_state(request)
    if not state.is_authenticated:
        return redirect("login")

    config = get_config()
    memory = _memory(request, config)
    navigator = _get_navigator(request, memory, config)
    try:
        new_state = navigator.view_summary(state)
    except (ValidationError, GatewayError, DataError) as e:
        logger.error(f"Failed to load summary for {state.reviewer}: {e}")
        messages.error(request, f"Failed to load summary. Please try again. Error: {e}")
        if state.phase is Phase.SUMMARY_VIEW:
            save_state(request, navigator.back(state))
        return redirect("review")

    save_state(request, new_state)
    context = {
        "state": new_state,
        "summary": new_state.summary,
    }
    return render(request, "review/summary.html", context)


@require_POST
def summary_back(request: HttpRequest) -> HttpResponse:
    return _dispatch(request, Back())


# ============================================================================
# Logout
# ============================================================================


@require_POST
def logout(request: HttpRequest) -> HttpResponse:
    """Reset the session and forget the remembered reviewer."""
    state = load_state(request)
    config = get_config()
    memory = _memory(request, config)
    navigator = _get_navigator(request, memory, config)

    new_state = navigator.logout(state)
    # Flushing drops the session key, so the next visit gets a new lock
    request.session.flush()
    save_state(request, new_state)
    return memory.apply(redirect("login"))
