"""
Django application initialization.
"""

import os
from typing import Optional


def _configure_environment(config_path: Optional[str] = None, api_url: Optional[str] = None):
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "article_screening.review.web.settings")

    # Note: os.environ requires strings, so convert Path objects
    if config_path:
        os.environ["SCREENING_CONFIG_PATH"] = str(config_path)
    if api_url:
        os.environ["SCREENING_API_URL"] = api_url


def get_wsgi_application(config_path: Optional[str] = None, api_url: Optional[str] = None):
    """
    Get the Django WSGI application configured with our settings.

    Args:
        config_path: Path to config.yaml (optional)
        api_url: Screening API URL (optional, overrides config)
    """
    _configure_environment(config_path, api_url)

    from django.core.wsgi import get_wsgi_application as django_wsgi

    return django_wsgi()


def run_server(
    host: str = "127.0.0.1",
    port: int = 8080,
    config_path: Optional[str] = None,
    api_url: Optional[str] = None,
):
    """
    Run the Django development server.

    Args:
        host: Host to bind to
        port: Port to listen on
        config_path: Path to config.yaml
        api_url: Screening API URL (overrides config)
    """
    _configure_environment(config_path, api_url)

    # Initialize Django
    import django

    django.setup()

    from django.core.management import execute_from_command_line

    print(f"\n🌐 Starting screening web interface at http://{host}:{port}/")
    print(f"📄 Screening API: {os.environ.get('SCREENING_API_URL') or 'from config'}")
    print(f"⚙️  Config: {os.environ.get('SCREENING_CONFIG_PATH', 'config.yaml')}")
    print("\nPress Ctrl+C to stop.\n")

    execute_from_command_line(
        [
            "manage.py",
            "runserver",
            f"{host}:{port}",
            "--noreload",  # Disable auto-reload for simpler operation
        ]
    )
