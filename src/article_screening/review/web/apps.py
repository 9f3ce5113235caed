"""
Django application configuration for the review web interface.
"""

import logging

from django.apps import AppConfig
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from ...config import ConfigValidationError

logger = logging.getLogger(__name__)


class WebConfig(AppConfig):
    """Django app configuration for the review web application."""

    name = "article_screening.review.web"
    label = "screening_web"
    verbose_name = "Article Screening Review Web"

    def ready(self):
        """Check the screening config before serving any page."""
        from .views import get_config

        config_path = getattr(settings, "SCREENING_CONFIG_PATH", "config.yaml")
        try:
            config = get_config().require_valid(require_base_url=False)
        except ConfigValidationError as e:
            raise ImproperlyConfigured(f"Invalid screening config in {config_path}: {e}")

        if not config.gateway.base_url:
            logger.warning(
                f"No screening API configured; set SCREENING_API_URL or "
                f"gateway.base_url in {config_path}"
            )
