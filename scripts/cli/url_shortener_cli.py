#!/usr/bin/env python3
"""
Command-line interface for URL shortener service.

Talks to Redis directly, using the same configuration (environment or
.env) as the server.

Usage:
    python url_shortener_cli.py shorten <url> [--custom-code CODE] [--expiry HOURS]
    python url_shortener_cli.py get <short_code>
    python url_shortener_cli.py info <short_code>
    python url_shortener_cli.py stats
    python url_shortener_cli.py health
"""

import argparse
import asyncio
import json
import sys
import os
from typing import Optional

# Add parent directories to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from config import load_config
from lib.counter import VisitCounter
from lib.database.redis_store import URLShortenerRedisStore
from lib.errors import ShortenerError, ShortCodeNotFoundError
from lib.service import URLShortenerService
from lib.shortcode import ShortCodeGenerator
from lib.common.logging_config import setup_logging
from lib.common.url_builder import build_short_url


def _print_result(payload: dict) -> int:
    print(json.dumps({"success": True, **payload}, indent=2))
    return 0


def _print_error(error: str) -> int:
    print(json.dumps({"success": False, "error": error}, indent=2), file=sys.stderr)
    return 1


class URLShortenerCLI:
    """Command-line interface for URL shortener."""

    def __init__(
        self,
        redis_url: str,
        mapping_db: int,
        counter_db: int,
        verbose: bool = False,
    ):
        """Initialize CLI."""
        self.config = load_config()
        self.redis_url = redis_url
        self.mapping_db = mapping_db
        self.counter_db = counter_db
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING")
        self.service = None

    async def initialize(self):
        """Initialize store and service."""
        store = URLShortenerRedisStore(
            redis_url=self.redis_url,
            mapping_db=self.mapping_db,
            counter_db=self.counter_db,
            password=self.config.redis_password,
            socket_timeout=self.config.redis_socket_timeout,
            logger=self.logger,
        )
        await store.connect()

        self.service = URLShortenerService(
            store=store,
            counter=VisitCounter(store, default_key=self.config.counter_key, logger=self.logger),
            short_code_generator=ShortCodeGenerator(default_length=self.config.short_code_length),
            logger=self.logger,
            base_url=self.config.base_url,
            enable_custom_codes=self.config.enable_custom_codes,
            max_collision_retries=self.config.max_collision_retries,
            default_expiry_hours=self.config.default_expiry_hours,
        )

    async def cleanup(self):
        """Cleanup resources."""
        if self.service:
            await self.service.close()

    def _short_url(self, short_code: str) -> str:
        return build_short_url(short_code, self.config.base_url, self.config.path_prefix)

    async def shorten(self, url: str, custom_code: Optional[str] = None, expiry: Optional[int] = None):
        """Shorten a URL."""
        try:
            result = await self.service.create_short_url(url, custom_code, expiry)
        except ShortenerError as e:
            return _print_error(str(e))

        return _print_result({
            "short_code": result["short_code"],
            "short_url": self._short_url(result["short_code"]),
            "original_url": result["original_url"],
            "expiry_hours": result["expiry_hours"],
            "created_at": result["created_at"].isoformat(),
        })

    async def get(self, short_code: str):
        """Get original URL for a short code (does not count a visit)."""
        try:
            original_url = await self.service.resolve(short_code)
        except ShortenerError as e:
            return _print_error(str(e))

        return _print_result({"short_code": short_code, "original_url": original_url})

    async def info(self, short_code: str):
        """Get the stored mapping and its remaining lifetime."""
        try:
            mapping = await self.service.get_url_info(short_code)
        except ShortCodeNotFoundError:
            return _print_error(f"Short code '{short_code}' not found")
        except ShortenerError as e:
            return _print_error(str(e))

        return _print_result({**mapping.to_dict(), "short_url": self._short_url(short_code)})

    async def stats(self):
        """Show the global visit counter."""
        try:
            statistics = await self.service.get_statistics()
        except ShortenerError as e:
            return _print_error(str(e))

        return _print_result({"statistics": statistics})

    async def health(self):
        """Check that both logical stores answer."""
        health_status = await self.service.health_check()
        print(json.dumps({"success": health_status["overall"], "health": health_status}, indent=2))
        return 0 if health_status["overall"] else 1


def build_parser() -> argparse.ArgumentParser:
    config = load_config()

    parser = argparse.ArgumentParser(
        description="URL Shortener CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL
  %(prog)s shorten https://example.com/long/url

  # Shorten with custom code, expiring after a day
  %(prog)s shorten https://example.com/long/url --custom-code mylink --expiry 24

  # Get original URL
  %(prog)s get mylink

  # Show mapping and remaining lifetime
  %(prog)s info mylink

  # Show visit counter
  %(prog)s stats

  # Check health
  %(prog)s health
        """
    )

    parser.add_argument(
        "--redis-url",
        default=config.redis_url,
        help=f"Redis connection URL (default: from REDIS_URL env or {config.redis_url})"
    )
    parser.add_argument(
        "--mapping-db",
        type=int,
        default=config.mapping_db,
        help=f"Logical database for mappings (default: {config.mapping_db})"
    )
    parser.add_argument(
        "--counter-db",
        type=int,
        default=config.counter_db,
        help=f"Logical database for the visit counter (default: {config.counter_db})"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")
    shorten_parser.add_argument("--custom-code", help="Custom short code")
    shorten_parser.add_argument("--expiry", type=int, help="Lifetime in hours (0 = never expire)")

    get_parser = subparsers.add_parser("get", help="Get original URL")
    get_parser.add_argument("short_code", help="Short code to lookup")

    info_parser = subparsers.add_parser("info", help="Show mapping and remaining lifetime")
    info_parser.add_argument("short_code", help="Short code to inspect")

    subparsers.add_parser("stats", help="Show visit counter")
    subparsers.add_parser("health", help="Check store health")

    return parser


async def main():
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    cli = URLShortenerCLI(
        redis_url=args.redis_url,
        mapping_db=args.mapping_db,
        counter_db=args.counter_db,
        verbose=args.verbose,
    )

    try:
        await cli.initialize()

        if args.command == "shorten":
            return await cli.shorten(args.url, args.custom_code, args.expiry)
        elif args.command == "get":
            return await cli.get(args.short_code)
        elif args.command == "info":
            return await cli.info(args.short_code)
        elif args.command == "stats":
            return await cli.stats()
        elif args.command == "health":
            return await cli.health()
        else:
            parser.print_help()
            return 1

    finally:
        await cli.cleanup()


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
