"""
CLI main entry point.
"""

import argparse
import logging
import sys
from pathlib import Path

from ..config import Config, create_default_config, load_config
from ..gateway import GatewayError, ScreeningGateway
from ..schemas import DataError, Role

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_cli() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="article-screening",
        description="Screen literature review articles against a spreadsheet-backed API",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=Path("config.yaml"),
        help="Path to config file (default: config.yaml)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # serve command
    serve_parser = subparsers.add_parser("serve", help="Run the review web interface")
    serve_parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host to bind the web server (default: from config, 127.0.0.1)",
    )
    serve_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port for the web server (default: from config, 8080)",
    )

    # reviewers command
    subparsers.add_parser("reviewers", help="List reviewers (checks the API connection)")

    # summary command
    summary_parser = subparsers.add_parser("summary", help="Show screening progress")
    summary_parser.add_argument(
        "--reviewer",
        type=str,
        required=True,
        help="Reviewer name",
    )
    summary_parser.add_argument(
        "--role",
        type=str,
        choices=[role.value for role in Role],
        default=Role.FIRST.value,
        help="Reviewer role (default: C1)",
    )

    # init-config command
    init_parser = subparsers.add_parser("init-config", help="Write a default config file")
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing config file",
    )

    return parser


def _gateway(config: Config) -> ScreeningGateway:
    return ScreeningGateway(
        base_url=config.gateway.base_url,
        timeout=config.gateway.timeout_seconds,
        max_retries=config.gateway.max_retries,
        backoff_factor=config.gateway.backoff_factor,
    )


def cmd_serve(config: Config, config_path: Path, host: str | None, port: int | None) -> int:
    """Run the review web interface."""
    from ..review.web.app import run_server

    run_server(
        host=host or config.web.host,
        port=port or config.web.port,
        config_path=str(config_path),
        api_url=config.gateway.base_url or None,
    )
    return 0


def cmd_reviewers(config: Config) -> int:
    """List reviewers."""
    try:
        reviewers = _gateway(config).get_reviewers()
    except (GatewayError, DataError) as e:
        print(f"❌ Failed to load reviewers: {e}")
        return 1

    print(f"\n👥 Reviewers ({len(reviewers)})")
    print("=" * 40)
    for name in reviewers:
        print(f"  {name}")
    print()
    return 0


def cmd_summary(config: Config, reviewer: str, role: str) -> int:
    """Show screening progress for one reviewer."""
    role = Role.parse(role)
    gateway = _gateway(config)

    if not gateway.test_connection():
        print("❌ Failed to connect to the screening API")
        return 1

    try:
        summary = gateway.get_summary(reviewer, role)
    except (GatewayError, DataError) as e:
        print(f"❌ Failed to load summary: {e}")
        return 1

    counts = summary.counts
    print(f"\n📊 Screening Summary: {reviewer} ({role.label})")
    print("=" * 40)
    print(f"  Total:     {counts.total}")
    print(f"  Reviewed:  {counts.reviewed} ({counts.percent_complete}%)")
    print(f"  Included:  {counts.included}")
    print(f"  Excluded:  {counts.excluded}")
    print(f"  Pending:   {counts.pending}")
    print()
    return 0


def cmd_init_config(config_path: Path, force: bool = False) -> int:
    """Write a default config file."""
    if config_path.exists() and not force:
        print(f"⚠️  {config_path} already exists (use --force to overwrite)")
        return 1
    create_default_config(config_path)
    print(f"✓ Wrote {config_path}")
    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    parser = create_cli()
    parsed = parser.parse_args(args)

    setup_logging(parsed.verbose)

    if not parsed.command:
        parser.print_help()
        return 1

    if parsed.command == "init-config":
        return cmd_init_config(parsed.config, parsed.force)

    # Load config
    try:
        config = load_config(parsed.config)
    except Exception as e:
        print(f"❌ Failed to load config: {e}")
        return 1

    errors = config.validate()
    if errors:
        for error in errors:
            print(f"❌ {error}")
        return 1

    # Route to command
    if parsed.command == "serve":
        return cmd_serve(config, parsed.config, parsed.host, parsed.port)
    elif parsed.command == "reviewers":
        return cmd_reviewers(config)
    elif parsed.command == "summary":
        return cmd_summary(config, parsed.reviewer, parsed.role)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
