"""AI-assisted news curation: extraction, selection, ranking and summarization."""
