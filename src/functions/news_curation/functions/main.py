"""Cloud Function entry point for the news curation service."""

from __future__ import annotations

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

import flask
import functions_framework

# Ensure project root is on sys.path before importing project modules
project_root = Path(__file__).parent.parent.parent.parent.parent.absolute()
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from src.shared.utils.config_validator import ConfigurationError
from src.shared.utils.env import load_env
from src.shared.utils.logging import setup_logging

from src.functions.news_curation.core.config import config_from_payload
from src.functions.news_curation.core.factory import articles_from_payload, build_pipeline
from src.functions.news_curation.core.pipelines.curation_pipeline import CurationPipeline

load_env()
setup_logging(level=os.getenv("LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)

SUPPORTED_MODES = ("curate", "summarize")


def handle_request(payload: Dict[str, Any], *, pipeline: Optional[CurationPipeline] = None) -> Dict[str, Any]:
    """Run a curation or single-article summary request.

    Payload fields:
        mode: "curate" (default) or "summarize"
        articles: candidate article objects (curate)
        previous_articles: older pool used when the selection falls short (curate)
        article: a single article object with a url (summarize)
        target_articles, category, disable_pacing, llm, supabase: config overrides

    Raises:
        ValueError: If the payload is malformed.
    """

    if not isinstance(payload, dict):
        raise ValueError("Request body must be a JSON object")

    mode = payload.get("mode", "curate")
    if mode not in SUPPORTED_MODES:
        raise ValueError(f"Unsupported mode '{mode}'. Use one of: {', '.join(SUPPORTED_MODES)}")

    if mode == "summarize":
        article = articles_from_payload([payload.get("article")], field_name="article")[0]
        if not article.url:
            raise ValueError("article.url is required for summarize mode")
    else:
        candidates = articles_from_payload(payload.get("articles"))
        if not candidates:
            raise ValueError("articles must contain at least one candidate")
        previous = articles_from_payload(payload.get("previous_articles"), field_name="previous_articles")

    owns_pipeline = pipeline is None
    if pipeline is None:
        pipeline = build_pipeline(config_from_payload(payload))

    try:
        if mode == "summarize":
            result = pipeline.summarize_url(article)
            return {
                "status": "success",
                "mode": mode,
                "key": article.key,
                "summary": result.summary.model_dump(by_alias=True),
                "reused": result.reused,
            }

        curated = pipeline.run(candidates, previous_pool=previous or None)
        return {"status": "success", "mode": mode, **curated.to_dict()}
    finally:
        if owns_pipeline:
            pipeline.close()


def news_curation_handler(request: flask.Request) -> flask.Response:
    """HTTP handler that runs a curation request."""

    if request.method == "OPTIONS":
        return _cors_response({}, status=204)

    if request.method != "POST":
        logger.warning("Unsupported HTTP method: %s", request.method)
        return _error_response("Method not allowed. Use POST.", status=405)

    try:
        payload = request.get_json(silent=True) or {}
        logger.info("Incoming news curation request (mode=%s)", payload.get("mode", "curate") if isinstance(payload, dict) else None)
        return _cors_response(handle_request(payload))
    except ValueError as exc:
        logger.warning("Invalid request: %s", exc)
        return _error_response(str(exc), status=400)
    except ConfigurationError as exc:
        logger.error("Service misconfigured: %s", exc)
        return _error_response(f"Configuration error: {exc}", status=500)
    except Exception:
        logger.error("Unexpected failure", exc_info=True)
        return _error_response("Internal server error", status=500)


def health_check_handler(request: flask.Request) -> flask.Response:
    """Health check endpoint."""

    return _cors_response({"status": "healthy", "service": "news_curation"})


def _cors_response(body: dict[str, Any] | Iterable[Any], status: int = 200) -> flask.Response:
    response = flask.make_response(json.dumps(body, ensure_ascii=False), status)
    headers = response.headers
    headers["Content-Type"] = "application/json"
    headers["Access-Control-Allow-Origin"] = "*"
    headers["Access-Control-Allow-Methods"] = "POST,OPTIONS"
    headers["Access-Control-Allow-Headers"] = "Content-Type"
    return response


def _error_response(message: str, status: int) -> flask.Response:
    return _cors_response({"status": "error", "message": message}, status=status)


@functions_framework.http
def curate_news(request: flask.Request):
    return news_curation_handler(request)


@functions_framework.http
def health_check(request: flask.Request):
    return health_check_handler(request)
