"""
CLI entry point for gw-dailies.

Usage:
    python -m gw_dailies --loop
    python -m gw_dailies --now --output-format txt
    python -m gw_dailies --output-format md --at-time 2025-11-25T17:00:00
"""

import argparse
import asyncio
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

import structlog

from .config.loader import ConfigError, load_credentials, load_settings
from .core.models import OutputFormat

# Log level mapping
LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}

AT_TIME_FORMAT = "%Y-%m-%dT%H:%M:%S"


def setup_logging(level: str = "INFO", json_output: bool = False):
    """Configure structured logging (to stderr; stdout carries text output)."""
    log_level = LOG_LEVELS.get(level.upper(), logging.INFO)

    if json_output:
        structlog.configure(
            processors=[
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.JSONRenderer(),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(log_level),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
            cache_logger_on_first_use=True,
        )
    else:
        structlog.configure(
            processors=[
                structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
                structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
            ],
            wrapper_class=structlog.make_filtering_bound_logger(log_level),
            context_class=dict,
            logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
            cache_logger_on_first_use=True,
        )


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="gw-dailies",
        description="Guild Wars daily activities Discord bot",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Post to Discord every day at 16:00 UTC
  python -m gw_dailies --loop

  # Post once, right away
  python -m gw_dailies --now

  # Print today's activities as plain text
  python -m gw_dailies --now --output-format txt

  # See what was current at a given instant
  python -m gw_dailies --output-format md --at-time 2025-11-25T17:00:00
        """,
    )

    parser.add_argument(
        "--loop",
        action="store_true",
        help="Keep running and post every day (default: run once)",
    )

    parser.add_argument(
        "--now",
        action="store_true",
        help="Run immediately instead of waiting until 16:00 UTC",
    )

    parser.add_argument(
        "--discord-channel-id",
        type=int,
        help="Discord channel ID (overrides CHANNEL_ID environment variable)",
    )

    parser.add_argument(
        "--output-format",
        choices=[f.value for f in OutputFormat],
        default=OutputFormat.DISCORD.value,
        help="Output format (default: discord)",
    )

    parser.add_argument(
        "--at-time",
        type=str,
        help="Simulate a specific UTC time (format: YYYY-MM-DDTHH:MM:SS)",
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to settings.yml config file",
    )

    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Logging level (default: INFO)",
    )

    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Output logs as JSON (for production)",
    )

    parser.add_argument(
        "--version",
        action="store_true",
        help="Show version and exit",
    )

    return parser


def parse_args(argv: Optional[list[str]] = None):
    """Parse command line arguments."""
    return build_parser().parse_args(argv)


def parse_at_time(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a simulated instant (interpreted as UTC).

    Raises:
        ConfigError: If the value does not match YYYY-MM-DDTHH:MM:SS
    """
    if value is None:
        return None
    try:
        return datetime.strptime(value, AT_TIME_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError:
        raise ConfigError(
            f"Invalid time format: {value}. Use YYYY-MM-DDTHH:MM:SS"
        ) from None


def validate_args(args) -> Optional[datetime]:
    """
    Check flag combinations before anything runs.

    Returns:
        Simulated instant, if any

    Raises:
        ConfigError: On an invalid or incompatible combination
    """
    at_time = parse_at_time(args.at_time)
    if at_time is not None and args.output_format == OutputFormat.DISCORD.value:
        raise ConfigError(
            "--at-time is not supported with Discord output format. "
            "Use --output-format txt/md/html instead."
        )
    return at_time


async def main_async(args, at_time: Optional[datetime]) -> None:
    """Async main function."""
    from .core.http_client import HttpClient
    from .orchestrator import DailiesDriver
    from .plugins.discord import DiscordAuthError, DiscordClient

    logger = structlog.get_logger(__name__)

    settings = load_settings(args.config)
    output_format = OutputFormat(args.output_format)

    credentials = None
    if output_format == OutputFormat.DISCORD:
        credentials = load_credentials(args.discord_channel_id)

    if at_time is not None:
        logger.info("simulating_time", at=at_time.strftime("%Y-%m-%d %H:%M:%S UTC"))

    logger.info(
        "starting_gw_dailies",
        output_format=output_format.value,
        loop=args.loop,
        now=args.now,
    )

    http = HttpClient(
        timeout=settings.http.timeout,
        initial_backoff=settings.http.initial_backoff,
        max_backoff=settings.http.max_backoff,
        user_agent=settings.http.user_agent,
    )

    async with http:
        if credentials is None:
            driver = DailiesDriver(
                http,
                settings,
                output_format=output_format,
                run_once=not args.loop,
                post_now=args.now,
                at_time=at_time,
            )
            await driver.run()
            return

        discord = DiscordClient(
            credentials.token,
            credentials.channel_id,
            api_base=settings.discord.api_base,
            timeout=settings.discord.timeout,
        )
        async with discord:
            driver = DailiesDriver(
                http,
                settings,
                output_format=output_format,
                deliver=discord.send_embed,
                run_once=not args.loop,
                post_now=args.now,
            )
            try:
                await discord.run(on_ready=driver.handle_ready)
            except DiscordAuthError as e:
                raise ConfigError(str(e)) from e
            await driver.join()


def main(argv: Optional[list[str]] = None):
    """Main entry point."""
    args = parse_args(argv)

    # Version check
    if args.version:
        from . import __version__
        print(f"gw-dailies {__version__}")
        sys.exit(0)

    # Setup logging
    setup_logging(args.log_level, args.json_logs)
    logger = structlog.get_logger(__name__)

    try:
        at_time = validate_args(args)
        asyncio.run(main_async(args, at_time))
        sys.exit(0)
    except ConfigError as e:
        logger.error("configuration_error", error=str(e))
        sys.exit(2)
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        logger.exception("fatal_error", error=str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
