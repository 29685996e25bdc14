from .search_index import SearchIndex, SearchResult

__all__ = ["SearchIndex", "SearchResult"]
