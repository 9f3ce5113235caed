"""
Configuration management.

All configuration keys are defined here; no other module should invent
config keys. Values come from a YAML file, and a few can be overridden by
environment variables so a deployment can point at a different API without
editing files.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

DEFAULT_EXCLUDE_REASONS = [
    "not HAI",
    "not perceived transparency",
    "not relevant",
    "duplicate",
    "other",
]
DEFAULT_INCLUDE_REASONS = [
    "Good Article",
    "full text coded",
    "other",
]


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    pass


@dataclass
class GatewayConfig:
    """Screening API configuration."""

    base_url: str = ""
    timeout_seconds: int = 30
    # Applies to reads only; decisions are never retried
    max_retries: int = 3
    backoff_factor: float = 0.5


@dataclass
class ScreeningConfig:
    """Reason catalog and decision policy.

    role_reasons overrides the reason lists per role code, e.g.
    ``{"C2": {"include": [...], "exclude": [...]}}``.
    """

    exclude_reasons: list[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE_REASONS))
    include_reasons: list[str] = field(default_factory=lambda: list(DEFAULT_INCLUDE_REASONS))
    include_requires_reason: bool = True
    role_reasons: dict[str, dict[str, list[str]]] = field(default_factory=dict)


@dataclass
class WebConfig:
    """Review web interface settings."""

    host: str = "127.0.0.1"
    port: int = 8080
    # How long the login form remembers the last reviewer/role
    remember_days: int = 365


@dataclass
class Config:
    """Application configuration."""

    gateway: GatewayConfig = field(default_factory=GatewayConfig)
    screening: ScreeningConfig = field(default_factory=ScreeningConfig)
    web: WebConfig = field(default_factory=WebConfig)

    def validate(self, require_base_url: bool = True) -> list[str]:
        """Validate configuration completeness and consistency.

        Args:
            require_base_url: Report a missing gateway.base_url as an error

        Returns:
            List of validation errors (empty if valid)
        """
        errors: list[str] = []

        if not self.gateway.base_url:
            if require_base_url:
                errors.append("gateway.base_url is required (or set SCREENING_API_URL)")
        elif not self.gateway.base_url.startswith(("http://", "https://")):
            errors.append("gateway.base_url must be an http(s) URL")

        if self.gateway.timeout_seconds <= 0:
            errors.append("gateway.timeout_seconds must be positive")
        if self.gateway.max_retries < 0:
            errors.append("gateway.max_retries must not be negative")

        if not self.screening.exclude_reasons:
            errors.append("screening.exclude_reasons must not be empty")
        if not self.screening.include_reasons and self.screening.include_requires_reason:
            errors.append(
                "screening.include_reasons must not be empty when include_requires_reason is set"
            )
        for role, lists in self.screening.role_reasons.items():
            if role not in ("C1", "C2"):
                errors.append(f"screening.role_reasons has unknown role {role!r}")
            for outcome in lists:
                if outcome not in ("include", "exclude"):
                    errors.append(
                        f"screening.role_reasons.{role} has unknown outcome {outcome!r}"
                    )

        return errors

    def require_valid(self, require_base_url: bool = True) -> "Config":
        """Raise ConfigValidationError if validate() reports problems."""
        errors = self.validate(require_base_url)
        if errors:
            raise ConfigValidationError("; ".join(errors))
        return self


def _string_list(value, default: list[str]) -> list[str]:
    if value is None:
        return list(default)
    if not isinstance(value, list):
        raise ConfigValidationError(f"Expected a list of reasons, got {value!r}")
    return [str(item) for item in value]


def load_config(config_path: Path) -> Config:
    """
    Load configuration from YAML file.

    A missing file yields the defaults. Environment variables can override
    config values:
    - SCREENING_API_URL
    - SCREENING_API_TIMEOUT (request timeout in seconds)
    - SCREENING_API_MAX_RETRIES
    """
    config_path = Path(config_path)
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    else:
        data = {}

    if not isinstance(data, dict):
        raise ConfigValidationError(f"{config_path} must contain a YAML mapping")

    # Gateway config
    gateway_data = data.get("gateway") or {}
    gateway = GatewayConfig(
        base_url=os.environ.get("SCREENING_API_URL", gateway_data.get("base_url", "")) or "",
        timeout_seconds=int(
            os.environ.get("SCREENING_API_TIMEOUT", gateway_data.get("timeout_seconds", 30))
        ),
        max_retries=int(
            os.environ.get("SCREENING_API_MAX_RETRIES", gateway_data.get("max_retries", 3))
        ),
        backoff_factor=float(gateway_data.get("backoff_factor", 0.5)),
    )

    # Screening config
    screening_data = data.get("screening") or {}
    role_reasons = {}
    for role, lists in (screening_data.get("role_reasons") or {}).items():
        role_reasons[str(role).upper()] = {
            str(outcome).lower(): _string_list(reasons, [])
            for outcome, reasons in (lists or {}).items()
        }

    screening = ScreeningConfig(
        exclude_reasons=_string_list(
            screening_data.get("exclude_reasons"), DEFAULT_EXCLUDE_REASONS
        ),
        include_reasons=_string_list(
            screening_data.get("include_reasons"), DEFAULT_INCLUDE_REASONS
        ),
        include_requires_reason=bool(screening_data.get("include_requires_reason", True)),
        role_reasons=role_reasons,
    )

    # Web config
    web_data = data.get("web") or {}
    web = WebConfig(
        host=web_data.get("host", "127.0.0.1"),
        port=int(web_data.get("port", 8080)),
        remember_days=int(web_data.get("remember_days", 365)),
    )

    return Config(gateway=gateway, screening=screening, web=web)


def create_default_config(config_path: Path) -> None:
    """Create a default configuration file."""
    default_config = """# Article screening configuration
#
# The screening API is the deployed spreadsheet web app.
# SCREENING_API_URL overrides gateway.base_url.

gateway:
  base_url: ""                 # e.g. https://script.google.com/macros/s/<id>/exec
  timeout_seconds: 30
  max_retries: 3               # Reads only; decisions are never retried
  backoff_factor: 0.5

# Reason catalog
screening:
  exclude_reasons:
    - "not HAI"
    - "not perceived transparency"
    - "not relevant"
    - "duplicate"
    - "other"
  include_reasons:
    - "Good Article"
    - "full text coded"
    - "other"
  include_requires_reason: true  # false lets reviewers include without a reason
  role_reasons: {}               # per-role overrides, e.g. C2: {include: [...]}

web:
  host: "127.0.0.1"
  port: 8080
  remember_days: 365           # How long the login form remembers you
"""

    config_path = Path(config_path)
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "w", encoding="utf-8") as f:
        f.write(default_config)
