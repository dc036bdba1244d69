"""
Entry point for the i18n JSON translation tool.

Usage:
    python main.py --from en --to es,fr,de
    python main.py --source ./src/locales/en --target ./src/locales --api-key KEY
    python main.py --source ./locales/en/common.json --to ru --concurrency 8
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from tqdm.contrib.logging import logging_redirect_tqdm

import config
from i18n_translate.client import available_services, create_service
from i18n_translate.exceptions import ConfigurationError
from i18n_translate.jobs import JobBuildError, build_jobs
from i18n_translate.pool import PoolReport, run_jobs

load_dotenv()

logger = logging.getLogger("i18n_translate")


# ── CLI ────────────────────────────────────────────────────────────────────────

def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="i18n-translator",
        description="Automatic translation tool for i18n JSON files.",
        epilog=(
            "Examples:\n"
            "  i18n-translator --api-key=YOUR_API_KEY --from=en --to=ru,es,fr\n"
            "  i18n-translator --source=./src/locales/en --target=./src/locales"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--concurrency", "-c",
        type=_positive_int,
        default=config.CONCURRENCY,
        help=f"Number of parallel workers (default: {config.CONCURRENCY})",
    )
    parser.add_argument(
        "--model", "-m",
        default=config.MODEL,
        help=f"Model for the chatgpt service (default: {config.MODEL})",
    )
    parser.add_argument(
        "--source", "-s",
        default=config.SOURCE_DIR,
        help=f"Source language directory or single .json file (default: {config.SOURCE_DIR})",
    )
    parser.add_argument(
        "--target", "-t",
        default=config.TARGET_DIR,
        help=f"Target directory for translations (default: {config.TARGET_DIR})",
    )
    parser.add_argument(
        "--from",
        dest="source_lang",
        default=config.SOURCE_LANG,
        help=f"Source language code (default: {config.SOURCE_LANG})",
    )
    parser.add_argument(
        "--to",
        dest="languages",
        default=config.LANGUAGES,
        help=f"Target language codes, comma-separated (default: {config.LANGUAGES})",
    )
    parser.add_argument(
        "--api-key",
        default=os.getenv("OPENAI_API_KEY", ""),
        help="Translation API key (default: $OPENAI_API_KEY)",
    )
    parser.add_argument(
        "--service",
        default=config.SERVICE,
        choices=available_services(),
        help=f"Translation service (default: {config.SERVICE})",
    )
    parser.add_argument(
        "--max-attempts",
        type=_positive_int,
        default=config.MAX_ATTEMPTS,
        dest="max_attempts",
        help=f"Attempts per model call on transient errors (default: {config.MAX_ATTEMPTS})",
    )
    parser.add_argument(
        "--no-progress",
        action="store_false",
        dest="progress",
        help="Do not show the progress bar",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Debug logging, including raw model responses of failed jobs",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s v{config.VERSION}",
    )
    return parser


def build_config(args: argparse.Namespace) -> config.RunConfig:
    return config.RunConfig(
        source=Path(args.source),
        target=Path(args.target),
        source_lang=args.source_lang,
        languages=args.languages,
        api_key=args.api_key,
        service=args.service,
        model=args.model,
        concurrency=args.concurrency,
        max_attempts=args.max_attempts,
        progress=args.progress,
    )


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )
    # keep HTTP client chatter out of the progress output
    for name in ("openai", "httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)


# ── Run ────────────────────────────────────────────────────────────────────────

def translate_all(cfg: config.RunConfig) -> PoolReport:
    """
    Build the jobs for `cfg` and run them through the worker pool.

    Raises:
        ConfigurationError: the backend cannot be created.
        JobBuildError:      the job list cannot be built.
    """
    if not cfg.api_key:
        raise ConfigurationError(
            "API key is required for translation service. "
            "Use --api-key or set the OPENAI_API_KEY environment variable."
        )
    service = create_service(
        cfg.service,
        api_key=cfg.api_key,
        model=cfg.model,
        temperature=cfg.temperature,
        max_attempts=cfg.max_attempts,
    )

    jobs = build_jobs(cfg.source, cfg.target, cfg.languages)
    if not jobs:
        logger.warning("No %s files or target languages found in '%s'.",
                       config.JSON_EXTENSION, cfg.source)
        return PoolReport()

    print(f"Jobs            : {len(jobs)}\n")

    with logging_redirect_tqdm():
        return run_jobs(
            jobs,
            service.translate,
            cfg.source_lang,
            concurrency=cfg.concurrency,
            progress=cfg.progress,
        )


def print_summary(report: PoolReport) -> None:
    print(f"\nDone: {report.succeeded} succeeded, {report.failed} failed.")
    for outcome in report.failures:
        job = outcome.job
        print(f"  [FAILED] {job.source_path} → {job.language_code}: {outcome.error}")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)
    cfg = build_config(args)

    if not cfg.source.exists():
        print(f"[ERROR] Source path does not exist: {cfg.source}", file=sys.stderr)
        return 1

    print(f"Source language : {cfg.source_lang}")
    print(f"Target languages: {cfg.languages}")
    print(f"Source          : {cfg.source}")
    print(f"Target          : {cfg.target}")
    print(f"Model           : {cfg.model}")
    print(f"Concurrency     : {cfg.concurrency}")

    try:
        report = translate_all(cfg)
    except ConfigurationError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1
    except JobBuildError as exc:
        print(f"[ERROR] Failed to build jobs: {exc}", file=sys.stderr)
        return 1

    print_summary(report)
    return 0


if __name__ == "__main__":
    sys.exit(main())
