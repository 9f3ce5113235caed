"""
Login memory stored in browser cookies.
"""

from typing import Optional

from django.http import HttpRequest, HttpResponse

from ..login_memory import LoginMemory


class CookieLoginMemory(LoginMemory):
    """
    Keeps `reviewer` and `role` in long-lived cookies.

    Writes are collected during the request and applied to the response
    with apply(), since cookies can only be changed on the way out.
    """

    def __init__(self, request: HttpRequest, max_age_days: int = 365):
        self._cookies = request.COOKIES
        self._max_age = max_age_days * 86400
        self._pending: dict[str, Optional[str]] = {}

    def get(self, key: str) -> Optional[str]:
        if key in self._pending:
            return self._pending[key]
        return self._cookies.get(key)

    def set(self, key: str, value: str) -> None:
        self._pending[key] = value

    def delete(self, key: str) -> None:
        self._pending[key] = None

    def apply(self, response: HttpResponse) -> HttpResponse:
        """Write pending changes to the response cookies."""
        for key, value in self._pending.items():
            if value is None:
                response.delete_cookie(key, samesite="Lax")
            else:
                response.set_cookie(
                    key,
                    value,
                    max_age=self._max_age,
                    samesite="Lax",
                    httponly=True,
                )
        return response
