"""Article text extraction and image URL validation."""

from .article_scraper import ArticleScraper, HtmlFetcher, HttpFetcher, extract_main_text
from .image_validator import validate_image_url

__all__ = [
    "ArticleScraper",
    "HtmlFetcher",
    "HttpFetcher",
    "extract_main_text",
    "validate_image_url",
]
