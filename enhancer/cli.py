"""Command line entry point: ``article-enhancer``."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import List, Optional, Sequence

from enhancer.config import AppSettings, get_settings
from enhancer.errors import ConfigurationError, EnhancerError, TargetNotFound
from enhancer.logging import setup_logging
from enhancer.models import Article

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_NOTHING_TO_DO = 2


def _print_json(payload) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


def _describe(article: Article) -> List[str]:
    lines = [
        f"ID: {article.id}",
        f"Title: {article.title}",
        f"Author: {article.author or 'N/A'}",
        f"Enhanced: {'Yes' if article.is_enhanced else 'No'}",
        f"Content Length: {len(article.content)} chars",
    ]
    if article.original_article_id is not None:
        lines.append(f"Original Article ID: {article.original_article_id}")
    lines.append(f"URL: {article.url or 'N/A'}")
    return lines


def _build_store(settings: AppSettings):
    from enhancer.storage import build_article_store

    return build_article_store(settings)


def cmd_enhance(args: argparse.Namespace, settings: AppSettings) -> int:
    from enhancer.pipeline import EnhancementPipeline

    with _build_store(settings) as store:
        pipeline = EnhancementPipeline.from_settings(settings, store=store)
        try:
            run = asyncio.run(pipeline.run())
        except TargetNotFound as exc:
            print(f"Nothing to enhance: {exc.message}")
            return EXIT_NOTHING_TO_DO

    derived = run.derived
    if args.json:
        _print_json(
            {
                "original": run.target.to_wire(),
                "derived": derived.to_wire(),
                "search_provider": run.search_provider,
                "enhancement_provider": run.enhancement_provider,
                "timings": run.timings,
            }
        )
        return EXIT_OK

    print(f"Enhanced article {run.target.id}: {run.target.title}")
    print(f"  Search provider: {run.search_provider or 'none'}")
    print(f"  Enhancement provider: {run.enhancement_provider}")
    print(f"  References: {len(run.references)}")
    for reference in run.references:
        print(f"    - {reference.title} ({reference.url})")
    print(f"New article ID: {derived.id}")
    print(f"  Title: {derived.title}")
    print(f"  Content length: {len(derived.content)} chars")
    return EXIT_OK


def cmd_ingest(args: argparse.Namespace, settings: AppSettings) -> int:
    from enhancer.ingestion import SourceScraper

    if args.source_url:
        ingestion = settings.ingestion.model_copy(update={"source_url": args.source_url})
        settings = settings.model_copy(update={"ingestion": ingestion})
    with _build_store(settings) as store:
        scraper = SourceScraper.from_settings(settings, store)
        created = asyncio.run(scraper.ingest())
    if args.json:
        _print_json([article.to_wire() for article in created])
        return EXIT_OK
    print(f"Stored {len(created)} article(s) from {settings.ingestion.source_url}")
    for article in created:
        print(f"  [{article.id}] {article.title}")
    return EXIT_OK


def cmd_list(args: argparse.Namespace, settings: AppSettings) -> int:
    with _build_store(settings) as store:
        articles = store.list_articles()
    if args.json:
        _print_json([article.to_wire() for article in articles])
        return EXIT_OK
    if not articles:
        print("No articles stored. Run `article-enhancer ingest` first.")
        return EXIT_OK

    print(f"{len(articles)} article(s):")
    for article in articles:
        print("---")
        print("\n".join(_describe(article)))
    print("---")
    return EXIT_OK


def cmd_show(args: argparse.Namespace, settings: AppSettings) -> int:
    with _build_store(settings) as store:
        article = store.find_by_id(args.article_id)
        if article is None:
            print(f"Article {args.article_id} not found")
            return EXIT_FAILURE
        versions = store.find_versions_derived_from(article.id)

    if args.json:
        payload = article.to_wire()
        payload["updated_versions"] = [version.to_wire() for version in versions]
        _print_json(payload)
        return EXIT_OK

    print("\n".join(_describe(article)))
    if article.reference_links:
        print("References:")
        for link in article.reference_links:
            print(f"  - {link.title} ({link.url})")
    print(f"Derived versions: {len(versions)}")
    for version in versions:
        print(f"  [{version.id}] {version.title}")
    print()
    print(article.content)
    return EXIT_OK


def cmd_init_db(args: argparse.Namespace, settings: AppSettings) -> int:
    from enhancer.db import init_db

    if settings.store.backend != "database":
        raise ConfigurationError(
            f"init-db needs the database backend, not {settings.store.backend!r}",
            stage="config",
        )
    init_db(settings.database.sqlalchemy_url())
    print("Database tables created")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="article-enhancer",
        description="Rewrite stored articles using competing web content",
    )
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    enhance = subparsers.add_parser("enhance", help="Enhance the newest unenhanced article")
    enhance.add_argument("--json", action="store_true", help="Print the result as JSON")
    enhance.set_defaults(handler=cmd_enhance)

    ingest = subparsers.add_parser("ingest", help="Scrape originals from the source blog")
    ingest.add_argument("--source-url", default=None, help="Override SOURCE_BLOG_URL")
    ingest.add_argument("--json", action="store_true", help="Print created articles as JSON")
    ingest.set_defaults(handler=cmd_ingest)

    list_cmd = subparsers.add_parser("list", help="List stored articles")
    list_cmd.add_argument("--json", action="store_true", help="Print articles as JSON")
    list_cmd.set_defaults(handler=cmd_list)

    show = subparsers.add_parser("show", help="Show an article and its derived versions")
    show.add_argument("article_id", type=int)
    show.add_argument("--json", action="store_true", help="Print the article as JSON")
    show.set_defaults(handler=cmd_show)

    init = subparsers.add_parser("init-db", help="Create database tables")
    init.set_defaults(handler=cmd_init_db)
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = get_settings()
    setup_logging(
        args.log_level or settings.log_level,
        stream=sys.stderr,
        log_format=settings.log_format,
    )

    try:
        return args.handler(args, settings)
    except EnhancerError as exc:
        logger.error("Command failed", extra={"command": args.command, **exc.context()})
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
