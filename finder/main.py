"""Command-line entrypoint: run one search and print the projected results."""

from __future__ import annotations

import argparse
import asyncio
from typing import Sequence

import httpx

from finder.config import FinderSettings, get_settings
from finder.domain.models import SORT_KEYS
from finder.logging import configure_logging, logger
from finder.services.browse import BrowseSession
from finder.services.catalog import CatalogClient
from finder.services.url_state import QueryStringHistory
from finder.services.view_state import ViewState, ViewStatus


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Search the service provider catalog")
    parser.add_argument(
        "query",
        nargs="?",
        default="",
        help="Query string, e.g. 'service=plumber&location=Lahore&sort=name'",
    )
    parser.add_argument("--base-url", dest="base_url", help="Catalog API root")
    parser.add_argument("--sort", choices=SORT_KEYS, help="Override the sort order")
    parser.add_argument("--rating", choices=("all", "2", "3", "4"), help="Override the minimum rating")
    return parser


def render(session: BrowseSession, view: ViewState) -> list[str]:
    if view.status is ViewStatus.ERROR and view.error is not None:
        return ["Oops! Something went wrong", view.error.message]
    summary = session.describe_results()
    lines = [summary.title, summary.count_line]
    if view.status is ViewStatus.EMPTY:
        lines.append("No services found")
        return lines
    for record in view.records:
        where = ", ".join(part for part in (record.address, record.city) if part)
        lines.append(
            f"- {record.name} ({record.rating:.1f}, {record.total_reviews} reviews)"
            + (f" - {where}" if where else "")
        )
    return lines


async def run(argv: Sequence[str] | None = None, settings: FinderSettings | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = settings or get_settings()
    if args.base_url:
        settings = settings.model_copy(
            update={"catalog": settings.catalog.model_copy(update={"base_url": args.base_url})}
        )

    async with httpx.AsyncClient() as http_client:
        client = CatalogClient(http_client, settings=settings.catalog)
        history = QueryStringHistory(args.query)
        async with BrowseSession(client, history=history, settings=settings) as session:
            if args.sort:
                session.set_sort(args.sort)
            if args.rating:
                session.set_min_rating(args.rating)
            view = await session.wait_until_settled()
            for line in render(session, view):
                print(line)
    return 1 if view.status is ViewStatus.ERROR else 0


def main() -> None:
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("finder_starting", environment=settings.environment)
    raise SystemExit(asyncio.run(run(settings=settings)))


if __name__ == "__main__":
    main()
