"""Deployment wrapper for the news curation Cloud Function."""

from __future__ import annotations

import sys
from pathlib import Path

import flask

project_root = Path(__file__).resolve().parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from src.functions.news_curation.functions.main import health_check_handler, news_curation_handler


def curate_news(request: flask.Request) -> flask.Response:
    return news_curation_handler(request)


def health_check(request: flask.Request) -> flask.Response:
    return health_check_handler(request)
