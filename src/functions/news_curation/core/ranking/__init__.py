from .category_ranker import CategoryRanker, parse_single_index, parse_top_indices

__all__ = ["CategoryRanker", "parse_single_index", "parse_top_indices"]
