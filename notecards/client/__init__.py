"""Client-side binding for the content procedures."""

from notecards.client.content_client import ContentClient
from notecards.client.query import ContentListQuery, QueryState, resolve_state

__all__ = [
    "ContentClient",
    "ContentListQuery",
    "QueryState",
    "resolve_state",
]
