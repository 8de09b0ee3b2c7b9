"""
List query binding.

``ContentListQuery`` wraps the ``listAll`` procedure the way a dashboard
consumes it: fetch once when entered, expose ``data`` / ``is_loading`` /
``error``, and derive the visible view from whatever was fetched.

``data`` is always a list, empty while loading or after a failed fetch, so
the derived view can run at any time. Loading, failure and "no results after
filtering" stay distinct states (see ``resolve_state``).
"""

import enum
from typing import List, Optional

from notecards.client.content_client import ContentClient
from notecards.core.exceptions import NotecardsError
from notecards.core.logging import get_logger
from notecards.schemas.content import ContentItemResponse
from notecards.services.derived_view import FILTER_ALL, DerivedView, build_view

logger = get_logger(__name__)


class QueryState(str, enum.Enum):
    LOADING = "loading"
    FAILED = "failed"
    NO_RESULTS = "no_results"
    READY = "ready"

    def __str__(self) -> str:
        return self.value


class ContentListQuery:
    """
    Fetch-on-enter query over ``listAll``.

    Usage:
        async with ContentListQuery(client) as query:
            view = query.view(search_query="bar", filter_type="all")
    """

    def __init__(self, client: ContentClient):
        self.client = client
        self.data: List[ContentItemResponse] = []
        self.error: Optional[NotecardsError] = None
        self.is_loading = True

    async def __aenter__(self) -> "ContentListQuery":
        await self.refetch()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        return None

    async def refetch(self) -> List[ContentItemResponse]:
        """
        Run ``listAll`` again, replacing ``data``.

        A failed fetch is recorded on ``error`` rather than raised; ``data``
        is reset to an empty list. No retries.
        """
        self.is_loading = True
        self.error = None
        try:
            self.data = await self.client.list_all()
        except NotecardsError as e:
            logger.warning(
                "content_list_fetch_failed",
                error_code=e.code,
                error=e.message,
            )
            self.data = []
            self.error = e
        finally:
            self.is_loading = False
        return self.data

    @property
    def failed(self) -> bool:
        return self.error is not None

    def view(
        self,
        search_query: Optional[str] = "",
        filter_type: Optional[str] = FILTER_ALL,
    ) -> DerivedView:
        """Derived view over the current data, recomputed on every call."""
        return build_view(self.data, search_query, filter_type)


def resolve_state(query: ContentListQuery, view: Optional[DerivedView] = None) -> QueryState:
    """
    Which of the mutually exclusive list states to render.

    Loading wins over everything, a failed fetch is never shown as an empty
    result, and an empty filtered view is NO_RESULTS.
    """
    if query.is_loading:
        return QueryState.LOADING
    if query.failed:
        return QueryState.FAILED
    if view is None:
        view = query.view()
    if view.is_empty:
        return QueryState.NO_RESULTS
    return QueryState.READY
