"""Command-line entry point for a news curation run."""

from __future__ import annotations

import argparse
import json
import logging
import subprocess
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional

PROJECT_ROOT = Path(__file__).resolve().parents[4]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from src.shared.utils.config_validator import ConfigurationError
from src.shared.utils.env import load_env
from src.shared.utils.logging import setup_logging

from src.functions.news_curation.core.config import PacingConfig, load_config
from src.functions.news_curation.core.contracts.article import CandidateArticle
from src.functions.news_curation.core.factory import articles_from_payload, build_pipeline

LOG = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Select, rank and summarize candidate news articles.")
    parser.add_argument("input", type=Path, help="JSON file with a list of candidate articles (or {'articles': [...]})")
    parser.add_argument("--previous", type=Path, help="JSON file with an older article pool used on underflow")
    parser.add_argument("--target", type=int, help="Number of articles to select (default: CURATION_TARGET_ARTICLES or 20)")
    parser.add_argument("--category", help="Category label used for ranking (default: news)")
    parser.add_argument("--output", type=Path, help="Write the result JSON to this file instead of stdout")
    parser.add_argument("--no-pacing", action="store_true", help="Disable the delays between model calls")
    parser.add_argument("--dry-run", action="store_true", help="Validate inputs without scraping or calling Gemini")
    parser.add_argument("--log-level", default=None, help="Logging level (default: LOG_LEVEL or INFO)")
    parser.add_argument(
        "--detach",
        action="store_true",
        help="Re-launch this run as an independent background process and return immediately",
    )
    parser.add_argument("--log-file", type=Path, help="Log file for a detached run (default: curation-<timestamp>.log)")
    return parser.parse_args(argv)


def load_articles(path: Path, field_name: str = "articles") -> List[CandidateArticle]:
    payload: Any = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(payload, dict):
        payload = payload.get(field_name, payload.get("articles"))
    return articles_from_payload(payload, field_name=field_name)


def detached_command(argv: List[str]) -> List[str]:
    """Command line for the background copy of this run (without --detach)."""

    forwarded: List[str] = []
    skip_next = False
    for arg in argv:
        if skip_next:
            skip_next = False
            continue
        if arg == "--detach":
            continue
        if arg == "--log-file":
            skip_next = True
            continue
        if arg.startswith("--log-file="):
            continue
        forwarded.append(arg)
    return [sys.executable, str(Path(__file__).resolve()), *forwarded]


def launch_detached(argv: List[str], log_file: Path) -> subprocess.Popen:
    """Start the run in its own session so it outlives the calling process.

    The child keeps the caller's working directory; relative paths in
    ``argv`` are resolved by the child as they were given.
    """

    log_file.parent.mkdir(parents=True, exist_ok=True)
    with log_file.open("ab") as handle:
        process = subprocess.Popen(
            detached_command(argv),
            stdin=subprocess.DEVNULL,
            stdout=handle,
            stderr=subprocess.STDOUT,
            start_new_session=True,
        )
    return process


def run(argv: Optional[List[str]] = None) -> int:
    raw_argv = list(sys.argv[1:] if argv is None else argv)
    args = parse_args(raw_argv)
    load_env()
    setup_logging(level=args.log_level)

    if args.detach:
        log_file = args.log_file or Path(f"curation-{datetime.now():%Y%m%d-%H%M%S}.log")
        process = launch_detached(raw_argv, log_file)
        LOG.info("Curation run started in background (pid=%s, log=%s)", process.pid, log_file)
        print(json.dumps({"status": "started", "pid": process.pid, "log_file": str(log_file)}))
        return 0

    try:
        candidates = load_articles(args.input)
        previous = load_articles(args.previous, field_name="previous_articles") if args.previous else []
    except (OSError, ValueError) as exc:
        LOG.error("Invalid input: %s", exc)
        return 1

    if not candidates:
        LOG.error("No candidate articles found in %s", args.input)
        return 1

    if args.dry_run:
        LOG.info("Dry-run OK: %d candidates, %d previous articles", len(candidates), len(previous))
        return 0

    try:
        config = load_config()
        if args.target:
            config.target_articles = args.target
        if args.category:
            config.category = args.category
        if args.no_pacing:
            config.pacing = PacingConfig.disabled()
        config.validate()
        pipeline = build_pipeline(config)
    except (ConfigurationError, ValueError) as exc:
        LOG.error("Configuration error: %s", exc)
        return 1

    try:
        result = pipeline.run(candidates, previous_pool=previous or None)
    finally:
        pipeline.close()
    output = json.dumps(result.to_dict(), indent=2, ensure_ascii=False)
    if args.output:
        args.output.write_text(output, encoding="utf-8")
        LOG.info("Wrote curation result to %s", args.output)
    else:
        print(output)
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    try:
        main()
    except KeyboardInterrupt:  # pragma: no cover - CLI convenience
        sys.exit(130)
