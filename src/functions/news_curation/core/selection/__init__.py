from .article_selector import ArticleSelector, parse_index_list

__all__ = ["ArticleSelector", "parse_index_list"]
