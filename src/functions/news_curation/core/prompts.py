"""Prompt templates and builders for curation LLM requests."""

from __future__ import annotations

import json
from typing import Any, Dict, List, Sequence

from .contracts.article import CandidateArticle
from .processors.article_scoring import categorize_article

PROMPT_SEPARATOR = "\n\n---\n\n"

CONTENT_POLICY = (
    "**CRITICAL EXCLUSIONS** (NEVER select these):\n"
    "- WAR, MILITARY, or COMBAT content (including military drones, weapons, defense)\n"
    "- POLITICAL news, elections, government policy debates\n"
    "- VIOLENT content, death, terrorism, crime\n"
    "- CONTROVERSIAL social issues, scandals, lawsuits\n"
    "When in doubt about appropriateness, exclude the article."
)

SELECTION_SYSTEM_PROMPT = (
    "You are a precise tech news curator for students. Respond with ONLY a comma-separated list "
    "of article IDs. Prioritize AI/ML content and exclude any war, military, political, or violent "
    "content. Focus on educational value."
)

SELECTION_PROMPT_TEMPLATE = (
    "You are a tech news curator for a university AI club platform. Select EXACTLY {count} articles "
    "from the list below that are EDUCATIONAL and APPROPRIATE for students.\n\n"
    "SELECTION STRATEGY:\n"
    "1. START with AI/ML articles (highest priority)\n"
    "2. Then add tech startup and funding news\n"
    "3. Fill remaining slots with educational tech content: software development, consumer tech, "
    "cybersecurity, hardware and infrastructure, industry trends\n\n"
    "{policy}\n\n"
    "Respond with ONLY a comma-separated list of exactly {count} article IDs (e.g. \"1,3,5\").\n\n"
    "ARTICLES TO ANALYZE:\n"
    "{articles}"
)

PREVIOUS_SELECTION_SYSTEM_PROMPT = (
    "You are selecting {count} educational articles from a previous batch. Exclude war, military, "
    "political, or violent content. Respond with ONLY comma-separated IDs."
)

PREVIOUS_SELECTION_PROMPT_TEMPLATE = (
    "You are selecting {count} articles from a previous batch to supplement today's AI club news feed.\n\n"
    "PRIORITIZE:\n"
    "1. AI/ML content\n"
    "2. Startup funding and tech industry news\n"
    "3. Technical developments with educational value\n\n"
    "{policy}\n\n"
    "Respond with ONLY a comma-separated list of {count} article IDs.\n\n"
    "ARTICLES TO ANALYZE:\n"
    "{articles}"
)

TOP3_PROMPT_TEMPLATE = (
    "You are an AI content curator for a university AI club's social feed.\n\n"
    "Analyze these {category} items and select the TOP 3 most engaging and relevant ones for students "
    "interested in AI, technology, and innovation.\n\n"
    "Consider these factors:\n"
    "1. Relevance to AI/tech students (40%)\n"
    "2. Engagement potential (views, likes, shares) (30%)\n"
    "3. Recency and timeliness (20%)\n"
    "4. Educational value or practical insights (10%)\n\n"
    "Items to rank:\n"
    "{items}\n\n"
    "CRITICAL: Respond with ONLY a JSON array of the top 3 item indices (0-based). "
    "No explanations, no extra text, just the array.\n"
    "Example: [2, 0, 5]"
)

NUMBER1_PROMPT_TEMPLATE = (
    "You are selecting the SINGLE most featured-worthy {category} item for a university AI club's "
    "homepage hero section.\n\n"
    "From these top {count} finalists, choose the ONE that would be most engaging for AI/tech students:\n\n"
    "{items}\n\n"
    "Consider which would generate the most discussion and which is most relevant to current AI/tech trends.\n\n"
    "CRITICAL: Respond with ONLY the index number ({choices}). No explanations, no extra text, just the number."
)

MAIN_SUMMARY_SYSTEM_PROMPT = (
    "You are a professional tech journalist writing comprehensive article summaries. Write a neutral, "
    "informative summary that captures the key points and technical details.\n\n"
    "CRITICAL REQUIREMENTS:\n"
    "1. Write EXACTLY 2 substantial paragraphs separated by a blank line\n"
    "2. First paragraph ({paragraph_min}-{paragraph_max} characters): the main development, key technical "
    "details, companies involved, and what was announced\n"
    "3. Second paragraph ({paragraph_min}-{paragraph_max} characters): broader context, industry impact, "
    "and future developments\n"
    "4. Include concrete facts and numbers when available\n"
    "5. NO meta-commentary, labels, or prefixes\n"
    "6. Output ONLY the two paragraphs"
)

MAIN_SUMMARY_USER_PROMPT = (
    "Write a comprehensive 2-paragraph summary of this tech article, focusing on technical details "
    "and industry context:\n\n{article_text}"
)

QUICK_SUMMARY_SYSTEM_PROMPT = (
    "You are a tech news editor writing a concise summary for a news card.\n\n"
    "CRITICAL REQUIREMENTS:\n"
    "1. Your response MUST be {max_chars} characters or less\n"
    "2. Write a single, engaging sentence that captures the essence of the article\n"
    "3. Do NOT use any labels or prefixes\n"
    "4. Output ONLY the summary sentence"
)

QUICK_SUMMARY_USER_PROMPT = (
    "Write a summary of this tech article in {max_chars} characters or less:\n\n{article_text}"
)

QUICK_SUMMARY_REPAIR_PROMPT = (
    "The following news card summary is {length} characters long. Rewrite it as ONE complete sentence "
    "of at most {max_chars} characters. Keep the most important fact. Output ONLY the rewritten sentence.\n\n"
    "Summary:\n{summary}"
)

WHY_IT_MATTERS_SYSTEM_PROMPT = (
    "You are writing for university AI club members, ML engineers, and tech entrepreneurs. Write a "
    "compelling paragraph ({min_chars}-{max_chars} characters) explaining why this technological "
    "development matters.\n\n"
    "CRITICAL REQUIREMENTS:\n"
    "1. Write EXACTLY one paragraph of {min_chars}-{max_chars} characters\n"
    "2. Focus on practical relevance for AI students and tech practitioners\n"
    "3. Cover technical significance, industry trends, and future implications\n"
    "4. Do NOT include meta-commentary or prefixes like \"Here's why...\"\n"
    "5. Output ONLY the paragraph content"
)

WHY_IT_MATTERS_USER_PROMPT = (
    "Write a detailed \"Why It Matters\" paragraph ({min_chars}-{max_chars} characters) about this tech "
    "development:\n\n{article_text}"
)


def _join(system_prompt: str, user_prompt: str) -> str:
    return f"{system_prompt}{PROMPT_SEPARATOR}{user_prompt}"


def _format_date(article: CandidateArticle) -> str:
    if article.published_at is None:
        return "Unknown"
    return article.published_at.date().isoformat()


def format_article_listing(articles: Sequence[CandidateArticle]) -> str:
    """Render the compact, 1-based projection of each candidate."""

    blocks = []
    for position, article in enumerate(articles, start=1):
        blocks.append(
            f"ID: {position}\n"
            f"Title: {article.title}\n"
            f"Description: {article.short_description()}\n"
            f"Source: {article.source}\n"
            f"Category: {categorize_article(article)}\n"
            f"Published: {_format_date(article)}\n"
            "---"
        )
    return "\n".join(blocks)


def ranking_projection(articles: Sequence[CandidateArticle]) -> List[Dict[str, Any]]:
    """0-based projection of items handed to the ranking prompts."""

    return [
        {
            "index": index,
            "title": article.title,
            "summary": article.short_description(),
            "publishedAt": article.published_at.isoformat() if article.published_at else None,
            "engagement": article.engagement.model_dump(by_alias=True),
        }
        for index, article in enumerate(articles)
    ]


def build_selection_prompt(articles: Sequence[CandidateArticle], count: int) -> str:
    user_prompt = SELECTION_PROMPT_TEMPLATE.format(
        count=count,
        policy=CONTENT_POLICY,
        articles=format_article_listing(articles),
    )
    return _join(SELECTION_SYSTEM_PROMPT, user_prompt)


def build_previous_selection_prompt(articles: Sequence[CandidateArticle], count: int) -> str:
    user_prompt = PREVIOUS_SELECTION_PROMPT_TEMPLATE.format(
        count=count,
        policy=CONTENT_POLICY,
        articles=format_article_listing(articles),
    )
    return _join(PREVIOUS_SELECTION_SYSTEM_PROMPT.format(count=count), user_prompt)


def build_top3_prompt(articles: Sequence[CandidateArticle], category: str) -> str:
    items = json.dumps(ranking_projection(articles), indent=2, ensure_ascii=False)
    return TOP3_PROMPT_TEMPLATE.format(category=category, items=items)


def build_number1_prompt(articles: Sequence[CandidateArticle], category: str) -> str:
    items = json.dumps(ranking_projection(articles), indent=2, ensure_ascii=False)
    choices = ", ".join(str(index) for index in range(len(articles)))
    return NUMBER1_PROMPT_TEMPLATE.format(
        category=category,
        count=len(articles),
        items=items,
        choices=choices,
    )


def build_main_summary_prompt(article_text: str, *, paragraph_min: int, paragraph_max: int) -> str:
    system_prompt = MAIN_SUMMARY_SYSTEM_PROMPT.format(paragraph_min=paragraph_min, paragraph_max=paragraph_max)
    return _join(system_prompt, MAIN_SUMMARY_USER_PROMPT.format(article_text=article_text))


def build_quick_summary_prompt(article_text: str, *, max_chars: int) -> str:
    system_prompt = QUICK_SUMMARY_SYSTEM_PROMPT.format(max_chars=max_chars)
    return _join(system_prompt, QUICK_SUMMARY_USER_PROMPT.format(max_chars=max_chars, article_text=article_text))


def build_quick_summary_repair_prompt(summary: str, *, max_chars: int) -> str:
    return QUICK_SUMMARY_REPAIR_PROMPT.format(length=len(summary), max_chars=max_chars, summary=summary)


def build_why_it_matters_prompt(article_text: str, *, min_chars: int, max_chars: int) -> str:
    system_prompt = WHY_IT_MATTERS_SYSTEM_PROMPT.format(min_chars=min_chars, max_chars=max_chars)
    user_prompt = WHY_IT_MATTERS_USER_PROMPT.format(
        min_chars=min_chars,
        max_chars=max_chars,
        article_text=article_text,
    )
    return _join(system_prompt, user_prompt)
