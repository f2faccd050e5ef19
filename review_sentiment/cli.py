"""
Command-line front end for the review sentiment demo.

Usage:
    python -m review_sentiment analyze
    python -m review_sentiment analyze --count 5 --classifier remote
    python -m review_sentiment analyze --interactive
    python -m review_sentiment analyze --count 3 --json
    python -m review_sentiment token set hf_xxx
    python -m review_sentiment stats --dataset reviews_test.tsv
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from .app import ReviewSentimentApp
from .data_loader import get_review_statistics, load_reviews, print_review_statistics
from .exceptions import AppError
from .renderer import ConsoleRenderer
from .token_store import TokenStore
from .utils import load_config, set_seed, setup_logging

logger = logging.getLogger("review_sentiment")

DEFAULT_CONFIG_PATH = "configs/app_config.yaml"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="review-sentiment",
        description="Classify the sentiment of random product reviews",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help=f"Path to configuration file (defaults to {DEFAULT_CONFIG_PATH} if present)",
    )
    parser.add_argument("--dataset", type=str, default=None, help="Override dataset path or URL")
    parser.add_argument(
        "--classifier",
        type=str,
        choices=["local", "remote"],
        default=None,
        help="Override classifier type",
    )
    parser.add_argument("--model", type=str, default=None, help="Override model identifier")
    parser.add_argument("--storage", type=str, default=None, help="Override token storage file")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for review picking")
    parser.add_argument("--log-file", type=str, default=None, help="Also write logs to this file")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser("analyze", help="Analyze random reviews")
    analyze.add_argument("--count", type=int, default=1, help="Number of reviews to analyze")
    analyze.add_argument(
        "--interactive",
        action="store_true",
        help="Prompt before each analysis until 'q' is entered",
    )
    analyze.add_argument(
        "--json",
        action="store_true",
        help="Print each successful result as a JSON line",
    )

    token = subparsers.add_parser("token", help="Manage the saved API token")
    token.add_argument("action", choices=["set", "clear", "show"])
    token.add_argument("value", nargs="?", default="", help="Token value for 'set'")

    subparsers.add_parser("stats", help="Print dataset statistics")

    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> dict[str, Any]:
    """Load the YAML config and apply command-line overrides."""
    config_path = args.config
    if config_path is None and Path(DEFAULT_CONFIG_PATH).exists():
        config_path = DEFAULT_CONFIG_PATH

    config = load_config(config_path)

    if args.dataset:
        config["data"]["path"] = args.dataset
    if args.classifier:
        config["classifier"]["type"] = args.classifier
    if args.model:
        config["classifier"]["model"] = args.model
    if args.storage:
        config["storage"]["path"] = args.storage
    if args.seed is not None:
        config["random_seed"] = args.seed
    if args.log_file:
        config["logging"]["file"] = args.log_file
    if args.verbose:
        config["logging"]["level"] = "DEBUG"

    return config


def run_analyze(
    app: ReviewSentimentApp,
    renderer: ConsoleRenderer,
    count: int,
    interactive: bool,
    as_json: bool = False,
) -> int:
    app.start()
    renderer.show_status(app.view.status)
    if app.view.error_message:
        renderer.show_error(app.view.error_message)

    failures = 0
    runs = 0

    while interactive or runs < count:
        if interactive:
            try:
                answer = input("\nPress Enter to analyze a random review (q to quit): ")
            except EOFError:
                print()
                break
            if answer.strip().lower() in ("q", "quit", "exit"):
                break

        outcome = app.analyze_random_review()
        runs += 1

        if outcome.ok and as_json:
            print(json.dumps({"review": outcome.review, **outcome.result.to_dict()}, ensure_ascii=False))
        else:
            renderer.show_view(app.view)

        if not outcome.ok:
            failures += 1

    return 1 if failures else 0


def run_token(app: ReviewSentimentApp, action: str, value: str) -> int:
    if action == "set":
        if not value.strip():
            print("Error: a token value is required for 'set'")
            return 1
        app.save_api_token(value)
        print(f"Token saved to {app.token_store.path}")
    elif action == "clear":
        app.save_api_token("")
        print("Token cleared")
    else:
        token = app.restore_api_token()
        if token:
            print(f"Token: {token[:4]}{'*' * max(len(token) - 4, 0)}")
        else:
            print("No token saved")
    return 0


def run_stats(config: dict[str, Any]) -> int:
    data_config = config["data"]
    try:
        reviews = load_reviews(
            data_config["path"],
            text_column=data_config.get("text_column", "text"),
            min_length=data_config.get("min_length", 0),
            timeout=data_config.get("timeout"),
        )
    except AppError as e:
        print(f"Error: {e}")
        return 1

    print_review_statistics(get_review_statistics(reviews))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    config = build_config(args)

    setup_logging(
        log_level=config["logging"]["level"],
        log_file=config["logging"]["file"],
    )

    if args.command == "stats":
        return run_stats(config)

    rng = None
    if config.get("random_seed") is not None:
        rng = set_seed(config["random_seed"])

    app = ReviewSentimentApp(
        config,
        token_store=TokenStore(config["storage"]["path"]),
        rng=rng,
    )

    if args.command == "token":
        return run_token(app, args.action, args.value)

    return run_analyze(app, ConsoleRenderer(), args.count, args.interactive, as_json=args.json)


if __name__ == "__main__":
    sys.exit(main())
