"""CLI entrypoint: python -m newslens {run|analyze|aliases|sources}."""

from __future__ import annotations

import argparse
import asyncio
import inspect
import json
import logging
import logging.handlers
import os
import sys
from pathlib import Path

from newslens.analyze.aliases import ArticleText
from newslens.config import get_active_sources, get_log_dir, load_config
from newslens.models import RawArticle

DEFAULT_QUERY = "USDKRW"
DEFAULT_DAYS = 3
MIN_DAYS, MAX_DAYS = 1, 14


def setup_logging(config: dict, verbose: bool = False) -> None:
    """Configure logging with console + rotating file output."""
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)

    fmt = logging.Formatter(
        "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Console goes to stderr so stdout stays pure JSON
    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(fmt)
    root.addHandler(console)

    # File handler (rotate at 5MB, keep 3 backups)
    log_dir = Path(get_log_dir(config))
    log_dir.mkdir(parents=True, exist_ok=True)
    file_handler = logging.handlers.RotatingFileHandler(
        str(log_dir / "newslens.log"), maxBytes=5 * 1024 * 1024, backupCount=3,
    )
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("trafilatura").setLevel(logging.WARNING)
    logging.getLogger("feedparser").setLevel(logging.WARNING)


logger = logging.getLogger("newslens")


def clamp_days(value: int | None) -> int:
    """Day span clamped to [1, 14]; missing or zero means the default."""
    if not value:
        return DEFAULT_DAYS
    return max(MIN_DAYS, min(MAX_DAYS, value))


def normalize_lang(value: str | None) -> str:
    return "en" if value == "en" else "kr"


def load_batches(path: str, lang: str) -> dict[str, list[RawArticle]]:
    """Read raw articles from JSON.

    Accepts a list of article dicts, a list of such lists (one per
    provider), or an object mapping provider name to a list.
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict):
        groups = list(data.items())
    elif data and all(isinstance(item, list) for item in data):
        groups = [(f"file{i}", items) for i, items in enumerate(data)]
    else:
        groups = [("file", data)]

    return {
        name: [RawArticle.from_dict(item, lang) for item in items]
        for name, items in groups
    }


def _print_json(payload) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _pipeline(config: dict):
    from newslens.pipeline import NewsPipeline

    return NewsPipeline(config)


async def cmd_run(config: dict, args: argparse.Namespace) -> None:
    """Fetch from providers and print the analyzed result."""
    from newslens.pipeline import NoProvidersConfigured

    try:
        result = await _pipeline(config).run(args.query, args.days, args.lang)
    except NoProvidersConfigured as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(1)
    _print_json(result.to_dict())


def cmd_analyze(config: dict, args: argparse.Namespace) -> None:
    """Analyze raw articles from a local JSON file."""
    batches = load_batches(args.file, args.lang)
    result = _pipeline(config).analyze(args.query, args.days, args.lang, batches)
    _print_json(result.to_dict())


def cmd_aliases(config: dict, args: argparse.Namespace) -> None:
    """Print the alias set mined from a local JSON file."""
    from newslens.process.dedup import dedupe_by_url
    from newslens.process.normalize import normalize_article

    pipeline = _pipeline(config)
    batches = load_batches(args.file, args.lang)
    articles = dedupe_by_url(
        normalize_article(raw, index, provider, pipeline.lexicon)
        for provider, raws in batches.items()
        for index, raw in enumerate(raws)
    )
    limit = pipeline.settings["alias_sample_size"]
    sample = [ArticleText(a.title, a.summary) for a in articles[:limit]]
    _print_json(pipeline.alias_generator.generate(args.query, sample))


def cmd_sources(config: dict, args: argparse.Namespace) -> None:
    """List configured providers."""
    from newslens.ingest import SOURCES

    active = get_active_sources(config)
    for name in SOURCES:
        state = "configured" if name in active else "off"
        print(f"  {name:<12} {state}")
    if not active:
        print("\nNo providers configured; `run` will fail.")


COMMANDS = {
    "run": cmd_run,
    "analyze": cmd_analyze,
    "aliases": cmd_aliases,
    "sources": cmd_sources,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m newslens",
        description="Query-focused news analytics",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    def _request_args(p: argparse.ArgumentParser, query_flag: bool) -> None:
        if query_flag:
            p.add_argument("--query", "-q", default=DEFAULT_QUERY)
        else:
            p.add_argument("query", nargs="?", default=DEFAULT_QUERY)
        p.add_argument("--days", type=int, default=DEFAULT_DAYS)
        p.add_argument("--lang", default="kr")

    run = sub.add_parser("run", help="fetch and analyze")
    _request_args(run, query_flag=False)

    analyze = sub.add_parser("analyze", help="analyze a JSON file of raw articles")
    analyze.add_argument("file")
    _request_args(analyze, query_flag=True)

    aliases = sub.add_parser("aliases", help="show aliases mined from a JSON file")
    aliases.add_argument("file")
    _request_args(aliases, query_flag=True)

    sub.add_parser("sources", help="list providers")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    if hasattr(args, "query"):
        args.query = (args.query or DEFAULT_QUERY).strip()
        args.days = clamp_days(args.days)
        args.lang = normalize_lang(args.lang)

    config_path = os.environ.get("CONFIG_PATH", "config.yaml")
    config = load_config(config_path) if Path(config_path).exists() else {}
    setup_logging(config, args.verbose)
    if not config:
        logger.info("No config at %s; using defaults", config_path)

    handler = COMMANDS[args.command]
    if inspect.iscoroutinefunction(handler):
        asyncio.run(handler(config, args))
    else:
        handler(config, args)


if __name__ == "__main__":
    main()
