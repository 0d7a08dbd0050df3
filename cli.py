#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
TrendCraft Unified CLI Entry Point

Usage:
    python cli.py generate content --prompt "morning routine" --platform tiktok
    python cli.py generate enhance --content "My day" --type title --platform youtube
    python cli.py trends --platform tiktok          # List active trends
    python cli.py serve --port 8080                 # Start HTTP API
    python cli.py version                           # Show version info
    python cli.py check                             # Check configuration and libraries
"""

import argparse
import asyncio
import importlib.util
import os
import sys

# Fix Windows console encoding
if sys.platform == 'win32':
    try:
        sys.stdout.reconfigure(encoding='utf-8', errors='replace')
        sys.stderr.reconfigure(encoding='utf-8', errors='replace')
    except (AttributeError, OSError):
        pass


REQUIRED_LIBRARIES = {
    "aiohttp": "aiohttp",
    "yaml": "PyYAML",
    "pydantic": "pydantic",
    "fastapi": "fastapi",
    "uvicorn": "uvicorn",
}


def build_task(args):
    """Build a generation task from `generate` arguments"""
    from trendcraft.models import (
        ContentEnhancementTask,
        ContentGenerationTask,
        IdeaGenerationTask,
        ModelRecommendationTask,
        TrendAnalysisTask,
    )

    if args.kind == "content":
        return ContentGenerationTask(
            prompt=args.prompt or "",
            platform=args.platform,
            style=args.style,
            duration=args.duration,
        )
    if args.kind == "trends":
        return TrendAnalysisTask(
            platform=args.platform or "",
            category=args.category,
            timeframe=args.timeframe,
        )
    if args.kind == "enhance":
        return ContentEnhancementTask(
            original_content=args.content or "",
            enhancement_type=args.type or "",
            target_platform=args.platform or "",
        )
    if args.kind == "ideas":
        return IdeaGenerationTask(platform=args.platform or "", category=args.category)
    return ModelRecommendationTask(use_case=args.use_case or "")


def _load_service(args):
    from trendcraft.config import init_logging, load_settings
    from trendcraft.service import TrendCraftService

    config = load_settings(args.config)
    init_logging(config.get("global", {}).get("log"))
    return TrendCraftService(config)


def cmd_generate(args):
    """Run one generation and print the result as JSON"""
    from trendcraft.utils.console import outcome_to_dict, print_json

    service = _load_service(args)
    outcome = asyncio.run(service.generate(build_task(args), user_id=args.user))
    print_json(outcome_to_dict(outcome))
    return 0 if outcome.succeeded else 1


def cmd_trends(args):
    """List active trends"""
    from trendcraft.utils.console import console, format_trend_table, print_json

    service = _load_service(args)
    result = asyncio.run(service.query_trending(args.platform, args.trend_type))

    if args.json:
        print_json({
            "trends": [r.to_dict() for r in result.records],
            "total": len(result.records),
            "source": result.source,
        })
        return 0

    if result.is_fallback:
        console.print_warn("Trend store unavailable, showing built-in trends")
    print(format_trend_table(result.records))
    return 0


def cmd_serve(args):
    """Start HTTP API"""
    from trendcraft.api.app import run_server
    from trendcraft.config import init_logging, load_settings

    init_logging(load_settings(args.config).get("global", {}).get("log"))
    run_server(config_path=args.config, host=args.host, port=args.port)
    return 0


def cmd_version(args):
    """Show version info"""
    from trendcraft import __version__
    print(f"TrendCraft v{__version__}")
    return 0


def cmd_check(args):
    """Check configuration and library status"""
    from trendcraft.config import load_settings, resolve_secret
    from trendcraft.utils.console import print_status

    print("TrendCraft Status\n")
    print("=" * 40)

    missing = []
    for module, package in REQUIRED_LIBRARIES.items():
        available = importlib.util.find_spec(module) is not None
        print_status(available, package, "installed", "not installed")
        if not available:
            missing.append(package)

    print("-" * 40)

    config = load_settings(args.config)
    gateway = config.get("gateway", {})
    store = config.get("trending", {}).get("store", {})
    store_type = str(store.get("type") or "none").lower()

    print_status(bool(resolve_secret(gateway, "api_key")), f"Gateway key ({gateway.get('api_key_env')})")
    if store_type == "rest":
        print_status(bool(resolve_secret(store, "url")), f"Store URL ({store.get('url_env')})")
        print_status(bool(resolve_secret(store, "key")), f"Store key ({store.get('key_env')})")
    elif store_type == "sqlite":
        db_path = store.get("db_path") or ""
        print_status(bool(db_path) and os.path.exists(db_path), f"SQLite DB ({db_path})", "found", "not found")
    else:
        print(f"Trend store: {store_type} (built-in trends only)")

    print("=" * 40)

    if missing:
        print("\nTip: Install missing libraries:")
        print(f"   pip install {' '.join(missing)}")
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="trendcraft",
        description="TrendCraft: short-form video content generation and trend lookup",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-c", "--config", default=None, help="Config file path (defaults only when omitted)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # generate subcommand
    p_generate = subparsers.add_parser("generate", help="Run one generation")
    p_generate.add_argument("kind", choices=["content", "trends", "enhance", "ideas", "model"])
    p_generate.add_argument("--prompt", help="Content idea (content)")
    p_generate.add_argument("--platform", help="tiktok / instagram / youtube")
    p_generate.add_argument("--style", help="trendy / professional / casual / viral (content)")
    p_generate.add_argument("--duration", type=int, help="Target length in seconds (content)")
    p_generate.add_argument("--category", help="Category (trends, ideas)")
    p_generate.add_argument("--timeframe", help="24h / 7d / 30d (trends)")
    p_generate.add_argument("--content", help="Original content (enhance)")
    p_generate.add_argument("--type", help="title / description / hashtags / script (enhance)")
    p_generate.add_argument("--use-case", dest="use_case", help="Use case (model)")
    p_generate.add_argument(
        "--user",
        default=os.environ.get("TRENDCRAFT_USER", "cli"),
        help="Caller id (default: $TRENDCRAFT_USER or 'cli')",
    )
    p_generate.set_defaults(func=cmd_generate)

    # trends subcommand
    p_trends = subparsers.add_parser("trends", help="List active trends")
    p_trends.add_argument("--platform", help="Platform filter")
    p_trends.add_argument("--trend-type", dest="trend_type", help="sound / hashtag / effect")
    p_trends.add_argument("--json", action="store_true", help="Print JSON")
    p_trends.set_defaults(func=cmd_trends)

    # serve subcommand
    p_serve = subparsers.add_parser("serve", help="Start HTTP API")
    p_serve.add_argument("--host", default=None, help="Listen address (default: server.host)")
    p_serve.add_argument("-p", "--port", type=int, default=None, help="Listen port (default: server.port)")
    p_serve.set_defaults(func=cmd_serve)

    # version subcommand
    p_version = subparsers.add_parser("version", help="Show version info")
    p_version.set_defaults(func=cmd_version)

    # check subcommand
    p_check = subparsers.add_parser("check", help="Check configuration and library status")
    p_check.set_defaults(func=cmd_check)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    try:
        return args.func(args)
    except KeyboardInterrupt:
        print("\nInterrupted by user")
        return 1
    except Exception as e:
        from trendcraft.utils.console import console
        console.print_error(str(e))
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
