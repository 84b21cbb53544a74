"""Web search controller.

Hides the panel rules for grounded search: blank-query rejection, the
single in-flight request and the user-facing error message.
"""

import logging
from collections.abc import Callable

from ..ai.base import AIProvider
from ..ai.models import SearchResult

logger = logging.getLogger(__name__)

EMPTY_QUERY_MESSAGE = "Please enter a search query."
SEARCH_ERROR_MESSAGE = "An error occurred during the search. Please try again."


class WebSearch:
    """State and actions behind the web search panel."""

    def __init__(
        self,
        provider: AIProvider,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self._provider = provider
        self.on_change = on_change
        self.query = ""
        self.result: SearchResult | None = None
        self.error: str | None = None
        self.is_loading = False

    @property
    def show_sources(self) -> bool:
        """Whether the sources section should be rendered."""
        return self.result is not None and len(self.result.sources) > 0

    def _changed(self) -> None:
        if self.on_change is not None:
            self.on_change()

    async def submit(self) -> SearchResult | None:
        if self.is_loading:
            return None

        if not self.query.strip():
            self.error = EMPTY_QUERY_MESSAGE
            self._changed()
            return None

        self.is_loading = True
        self.error = None
        self.result = None
        self._changed()

        try:
            self.result = await self._provider.search_web(self.query)
        except Exception:
            logger.exception("Search request failed")
            self.error = SEARCH_ERROR_MESSAGE
        finally:
            self.is_loading = False
            self._changed()

        if self.result is not None:
            logger.info("Search returned %d sources", len(self.result.sources))
        return self.result
