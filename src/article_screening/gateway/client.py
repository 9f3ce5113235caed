"""
Screening API client implementation.
"""

import logging
from typing import Any, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..schemas import Article, DataError, Decision, Role, Summary

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """Base exception for screening API errors."""

    pass


class GatewayConnectionError(GatewayError):
    """Failed to reach the screening API."""

    pass


class GatewayTimeoutError(GatewayConnectionError):
    """The screening API did not answer in time."""

    pass


class GatewayAPIError(GatewayError):
    """API returned a non-success HTTP status."""

    def __init__(self, status_code: int, message: str, response_body: Optional[str] = None):
        self.status_code = status_code
        self.message = message
        self.response_body = response_body
        super().__init__(f"Screening API error {status_code}: {message}")


class GatewayRemoteError(GatewayError):
    """API answered but reported an application error."""

    def __init__(self, action: str, message: str):
        self.action = action
        self.message = message
        super().__init__(message)


class ScreeningGateway:
    """
    Client for the spreadsheet-backed screening API.

    Every operation is a request against one endpoint selected by the
    `action` parameter. Reads use GET and are retried on transient
    failures; `submitDecision` uses POST and is never retried because the
    store has no idempotency key for decisions.
    """

    DEFAULT_TIMEOUT = 30

    def __init__(
        self,
        base_url: str,
        timeout: int = DEFAULT_TIMEOUT,
        max_retries: int = 3,
        backoff_factor: float = 0.5,
    ):
        """
        Initialize screening API client.

        Args:
            base_url: Deployed API endpoint (e.g. an Apps Script /exec URL)
            timeout: Request timeout in seconds
            max_retries: Maximum retry attempts for transient read failures
            backoff_factor: Backoff factor for retries
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        self.session = requests.Session()
        self.session.headers.update({"Accept": "application/json"})

        retry_strategy = Retry(
            total=max_retries,
            backoff_factor=backoff_factor,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"],
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

    def call(
        self,
        action: str,
        params: Optional[dict[str, Any]] = None,
        method: str = "GET",
    ) -> dict:
        """
        Run one API action and return its JSON payload.

        Raises:
            GatewayError: transport, HTTP, malformed or remote-reported failure
        """
        payload = {"action": action, **(params or {})}

        try:
            if method == "GET":
                response = self.session.get(self.base_url, params=payload, timeout=self.timeout)
            else:
                response = self.session.request(
                    method, self.base_url, data=payload, timeout=self.timeout
                )
        except requests.exceptions.Timeout as e:
            raise GatewayTimeoutError(
                f"Request timeout - please check your connection ({action}): {e}"
            )
        except requests.exceptions.ConnectionError as e:
            raise GatewayConnectionError(
                f"Failed to connect to screening API at {self.base_url}: {e}"
            )
        except requests.exceptions.RequestException as e:
            raise GatewayError(f"Request failed ({action}): {e}")

        if not response.ok:
            try:
                error_body = response.text
            except Exception:
                error_body = None
            raise GatewayAPIError(
                status_code=response.status_code,
                message=response.reason,
                response_body=error_body,
            )

        try:
            data = response.json()
        except ValueError:
            raise GatewayError(f"Malformed response from screening API ({action}): not JSON")

        if not isinstance(data, dict):
            raise GatewayError(
                f"Malformed response from screening API ({action}): "
                f"expected an object, got {type(data).__name__}"
            )

        if data.get("error"):
            logger.warning(f"Screening API reported an error for {action}: {data['error']}")
            raise GatewayRemoteError(action, str(data["error"]))

        return data

    def test_connection(self) -> bool:
        """Test connection to the screening API."""
        try:
            self.get_reviewers()
            return True
        except (GatewayError, DataError):
            return False

    def get_reviewers(self) -> list[str]:
        """Get the names of all reviewers."""
        data = self.call("getReviewers")
        reviewers = data.get("reviewers")
        if not isinstance(reviewers, list):
            raise DataError("Reviewer list missing from response")
        return [str(name) for name in reviewers if str(name).strip()]

    def get_articles(self, reviewer: str, role: Role) -> list[Article]:
        """
        Get articles assigned to a reviewer and role that are still undecided.

        Args:
            reviewer: Reviewer name
            role: Screening pass

        Returns:
            Articles in queue order
        """
        data = self.call("getArticles", {"reviewer": reviewer, "role": Role.parse(role).value})
        articles = data.get("articles")
        if not isinstance(articles, list):
            raise DataError("Article list missing from response")

        result = [Article.from_api_response(item) for item in articles]
        logger.info(f"Loaded {len(result)} articles for {reviewer} ({Role.parse(role).value})")
        return result

    def submit_decision(
        self,
        row_index: int,
        reviewer: str,
        role: Role,
        decision: Decision,
    ) -> dict:
        """
        Write one decision back to the article's row.

        Args:
            row_index: Article row key
            reviewer: Reviewer name
            role: Screening pass
            decision: Validated decision

        Returns:
            Acknowledgement payload
        """
        params = {
            "rowIndex": row_index,
            "reviewer": reviewer,
            "role": Role.parse(role).value,
            **decision.to_params(),
        }
        data = self.call("submitDecision", params, method="POST")
        logger.info(
            f"Saved decision for row {row_index}: {decision.outcome.label} ({decision.reason})"
        )
        return data

    def get_summary(self, reviewer: str, role: Role) -> Summary:
        """Get screening progress for a reviewer and role."""
        data = self.call("getSummary", {"reviewer": reviewer, "role": Role.parse(role).value})
        return Summary.from_api_response(data)
