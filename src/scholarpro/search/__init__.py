from .controller import EMPTY_QUERY_MESSAGE, SEARCH_ERROR_MESSAGE, WebSearch

__all__ = ["EMPTY_QUERY_MESSAGE", "SEARCH_ERROR_MESSAGE", "WebSearch"]
