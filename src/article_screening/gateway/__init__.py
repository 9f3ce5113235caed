"""
Screening API client.

Provides:
- Reviewer list, assigned articles, decision write-back, summary
- Retry/backoff for transient read failures
- One typed error hierarchy for transport, HTTP and remote errors
"""

from .client import (
    GatewayAPIError,
    GatewayConnectionError,
    GatewayError,
    GatewayRemoteError,
    GatewayTimeoutError,
    ScreeningGateway,
)

__all__ = [
    "GatewayAPIError",
    "GatewayConnectionError",
    "GatewayError",
    "GatewayRemoteError",
    "GatewayTimeoutError",
    "ScreeningGateway",
]
