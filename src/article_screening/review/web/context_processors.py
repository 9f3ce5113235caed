"""Context processors for the review web application.

Provides global context variables available to all templates.
"""

from ... import __version__


def screening_context(request):
    """Provide the app version and the logged-in reviewer to all templates."""
    from .views import load_state

    state = load_state(request)
    return {
        "app_version": __version__,
        "session_reviewer": state.reviewer,
        "session_role": state.role,
    }
