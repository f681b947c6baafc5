"""Summary artifact generation."""

from .article_summarizer import ArticleSummarizer

__all__ = ["ArticleSummarizer"]
