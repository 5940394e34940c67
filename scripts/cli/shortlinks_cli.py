#!/usr/bin/env python3
"""
Command-line interface for the shortlinks service.

Talks to the link store directly, using the same configuration as the server.

Usage:
    python shortlinks_cli.py shorten <url> [--slug SLUG] [--title T] [--description D]
    python shortlinks_cli.py stats <slug>
    python shortlinks_cli.py delete <slug>
    python shortlinks_cli.py list [--search TEXT] [--active true|false|all] [--page N] [--limit N]
    python shortlinks_cli.py health
"""

import argparse
import asyncio
import json
import sys
import os

# Add repository root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../..')))

from app import build_service, start_service
from config import Config, load_config
from shortlinks.common.logging_config import setup_logging
from shortlinks.common.url_builder import build_short_url
from shortlinks.database.models import LinkQuery
from shortlinks.errors import ShortenerError


class ShortlinksCLI:
    """Command-line interface for shortlinks."""

    def __init__(self, config: Config, verbose: bool = False):
        """Initialize CLI."""
        self.config = config
        self.logger = setup_logging(level="DEBUG" if verbose else "WARNING")
        self.service = None

    async def initialize(self):
        """Initialize storage and service."""
        self.service = build_service(self.config, self.logger)
        await start_service(self.service, self.logger)

    async def cleanup(self):
        """Cleanup resources."""
        if self.service:
            await self.service.close()

    def _print(self, payload: dict, error: bool = False) -> int:
        print(json.dumps(payload, indent=2), file=sys.stderr if error else sys.stdout)
        return 1 if error else 0

    async def shorten(self, url: str, slug=None, title=None, description=None) -> int:
        """Create a short link."""
        record = await self.service.create_link(url, slug, title, description)
        data = record.to_dict()
        data["shortUrl"] = build_short_url(record.short_slug, self.config.app_domain)
        return self._print({"success": True, "data": data})

    async def stats(self, slug: str) -> int:
        """Show a link, active or not."""
        record = await self.service.get_link_stats(slug)
        return self._print({"success": True, "data": record.to_dict()})

    async def delete(self, slug: str) -> int:
        """Soft-delete a link."""
        record = await self.service.delete_link(slug)
        return self._print({
            "success": True,
            "message": f"Deactivated {slug}",
            "data": record.to_dict(),
        })

    async def list_links(self, search: str, active: str, page: int, limit: int) -> int:
        """List links with store-wide statistics."""
        query = LinkQuery(
            active={"true": True, "false": False}.get(active),
            search=search,
            page=page,
            limit=limit,
        )
        result = await self.service.list_links(query)
        stats = await self.service.get_statistics()

        return self._print({
            "success": True,
            "urls": [r.to_dict() for r in result.records],
            "pagination": result.pagination(),
            "statistics": stats.to_dict(),
        })

    async def health(self) -> int:
        """Check service health."""
        health_status = await self.service.health_check()
        stats = await self.service.get_statistics()

        self._print({
            "success": health_status["overall"],
            "health": health_status,
            "statistics": stats.to_dict(),
        })
        return 0 if health_status["overall"] else 1


def positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def page_size(value: str) -> int:
    number = positive_int(value)
    if number > 1000:
        raise argparse.ArgumentTypeError(f"must be at most 1000, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="shortlinks CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Shorten a URL
  %(prog)s shorten https://example.com/long/url

  # Shorten with a custom slug
  %(prog)s shorten https://example.com/long/url --slug my-link

  # Get statistics
  %(prog)s stats my-link

  # Deactivate a link
  %(prog)s delete my-link

  # Search active links
  %(prog)s list --search example --limit 10
        """
    )

    parser.add_argument(
        "--db-url",
        default=None,
        help="Storage connection string (default: DATABASE_URL from environment)"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    shorten_parser = subparsers.add_parser("shorten", help="Shorten a URL")
    shorten_parser.add_argument("url", help="URL to shorten")
    shorten_parser.add_argument("--slug", help="Custom slug")
    shorten_parser.add_argument("--title", help="Link title")
    shorten_parser.add_argument("--description", help="Link description")

    stats_parser = subparsers.add_parser("stats", help="Get link statistics")
    stats_parser.add_argument("slug", help="Slug to get stats for")

    delete_parser = subparsers.add_parser("delete", help="Deactivate a link")
    delete_parser.add_argument("slug", help="Slug to deactivate")

    list_parser = subparsers.add_parser("list", help="List links")
    list_parser.add_argument("--search", default="", help="Case-insensitive text filter")
    list_parser.add_argument("--active", default="true", choices=["true", "false", "all"])
    list_parser.add_argument("--page", type=positive_int, default=1, help="Page number")
    list_parser.add_argument("--limit", type=page_size, default=100, help="Page size (1-1000)")

    subparsers.add_parser("health", help="Check service health")

    return parser


async def main(argv=None):
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    config = load_config()
    if args.db_url:
        config = config.model_copy(update={"database_url": args.db_url})

    cli = ShortlinksCLI(config, verbose=args.verbose)

    try:
        await cli.initialize()

        if args.command == "shorten":
            return await cli.shorten(args.url, args.slug, args.title, args.description)
        elif args.command == "stats":
            return await cli.stats(args.slug)
        elif args.command == "delete":
            return await cli.delete(args.slug)
        elif args.command == "list":
            return await cli.list_links(args.search, args.active, args.page, args.limit)
        elif args.command == "health":
            return await cli.health()
        else:
            parser.print_help()
            return 1

    except ShortenerError as e:
        return cli._print({"success": False, "error": e.message, "code": e.code}, error=True)
    finally:
        await cli.cleanup()


if __name__ == "__main__":
    exit_code = asyncio.run(main())
    sys.exit(exit_code)
