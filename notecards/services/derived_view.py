"""
Derived View

Pure functions that turn the fetched item list into what the dashboard
shows: newest-first order, multi-field search, the type filter, the facet
list and per-type counts. Nothing here keeps state; ``build_view`` is simply
called again whenever the list, the search text or the filter changes.

Items can be ORM objects, response schemas or plain dicts (``created_at`` or
``createdAt`` keys); fields are read by attribute or key.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from notecards.models.content import ContentType

FILTER_ALL = "all"

# Order only matters for readability; any field containing the query is a match
SEARCHABLE_FIELDS = ("title", "author", "note", "type", "location", "url")

TYPE_ICONS: Dict[ContentType, str] = {
    ContentType.YOUTUBE: "📹",
    ContentType.ARTICLE: "📄",
    ContentType.REDDIT: "💬",
    ContentType.TWITTER: "🐦",
    ContentType.SPOTIFY: "🎵",
    ContentType.SOUNDCLOUD: "☁️",
    ContentType.MOVIE: "🎬",
    ContentType.BOOK: "📚",
    ContentType.IMAGE: "🖼️",
    ContentType.VIDEO: "🎥",
}
FALLBACK_ICON = "❓"
TOTAL_ICON = "📊"


# ========================================
# Field access
# ========================================


def _field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def _created_at(item: Any) -> datetime:
    value = _field(item, "created_at")
    if value is None:
        value = _field(item, "createdAt")
    return value


def _type_of(item: Any) -> str:
    return str(_field(item, "type"))


# ========================================
# Presentation fallbacks
# ========================================


def type_icon(content_type: Any) -> str:
    """Icon for a type; unrecognised types get the fallback indicator."""
    parsed = ContentType.parse(content_type)
    if parsed is None:
        return FALLBACK_ICON
    return TYPE_ICONS.get(parsed, FALLBACK_ICON)


def type_label(content_type: Any) -> str:
    """Capitalised display label: ``youtube`` -> ``Youtube``."""
    value = str(content_type)
    return value[:1].upper() + value[1:]


def filter_label(filter_type: str) -> str:
    return "All" if filter_type == FILTER_ALL else type_label(filter_type)


# ========================================
# Sort / search / filter
# ========================================


def sort_newest_first(items: Iterable[Any]) -> List[Any]:
    """
    Stable sort by ``created_at`` descending.

    ``reverse=True`` keeps equal timestamps in their original order, so
    sorting an already sorted list changes nothing.
    """
    return sorted(items, key=_created_at, reverse=True)


def matches(item: Any, query: Optional[str]) -> bool:
    """
    True when the query is blank, or when its lower-cased form is a substring
    of any searchable field. Missing (None) fields are skipped.
    """
    if query is None or not query.strip():
        return True

    needle = query.lower()
    for name in SEARCHABLE_FIELDS:
        value = _field(item, name)
        if value is None:
            continue
        if needle in str(value).lower():
            return True
    return False


def passes_type_filter(item: Any, filter_type: Optional[str]) -> bool:
    if filter_type is None or filter_type == FILTER_ALL:
        return True
    return _type_of(item) == str(filter_type)


def filter_items(
    items: Iterable[Any],
    search_query: Optional[str] = "",
    filter_type: Optional[str] = FILTER_ALL,
) -> List[Any]:
    """Items passing both the type filter and the search (order preserved)."""
    return [
        item for item in items
        if passes_type_filter(item, filter_type) and matches(item, search_query)
    ]


# ========================================
# Facets and stats
# ========================================


def derive_facets(items: Iterable[Any]) -> List[str]:
    """Distinct types of the fetched list, in first-seen order."""
    return list(dict.fromkeys(_type_of(item) for item in items))


@dataclass(frozen=True)
class FacetOption:
    value: str
    label: str
    icon: str


def facet_options(facets: Sequence[str]) -> List[FacetOption]:
    """Filter dropdown entries: ``all`` first, then one per facet."""
    options = [FacetOption(FILTER_ALL, "All", TOTAL_ICON)]
    options.extend(FacetOption(facet, type_label(facet), type_icon(facet)) for facet in facets)
    return options


@dataclass(frozen=True)
class StatEntry:
    label: str
    value: int
    icon: str


@dataclass(frozen=True)
class ContentStats:
    """Counts over the visible items; ``by_type`` has one entry per facet."""

    total: int
    by_type: Dict[str, int] = field(default_factory=dict)

    def entries(self) -> List[StatEntry]:
        """The "Total" row followed by one row per facet."""
        rows = [StatEntry("Total", self.total, TOTAL_ICON)]
        rows.extend(
            StatEntry(type_label(content_type), count, type_icon(content_type))
            for content_type, count in self.by_type.items()
        )
        return rows


def compute_stats(visible: Sequence[Any], facets: Sequence[str]) -> ContentStats:
    """
    Count the visible items per facet.

    One pass over the items plus one over the facets (O(n + k)); facets with
    no visible item report zero.
    """
    counts = Counter(_type_of(item) for item in visible)
    return ContentStats(
        total=len(visible),
        by_type={facet: counts.get(facet, 0) for facet in facets},
    )


# ========================================
# Whole view
# ========================================


@dataclass(frozen=True)
class DerivedView:
    items: List[Any]
    facets: List[str]
    stats: ContentStats
    search_query: str = ""
    filter_type: str = FILTER_ALL

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def filter_options(self) -> List[FacetOption]:
        return facet_options(self.facets)


def build_view(
    items: Sequence[Any],
    search_query: Optional[str] = "",
    filter_type: Optional[str] = FILTER_ALL,
) -> DerivedView:
    """
    Recompute the whole view from the fetched list.

    Facets come from the full list, stats from the filtered one, so picking
    one type still shows the other types with a zero count.
    """
    search_query = search_query or ""
    filter_type = filter_type or FILTER_ALL

    facets = derive_facets(items)
    visible = filter_items(sort_newest_first(items), search_query, filter_type)
    return DerivedView(
        items=visible,
        facets=facets,
        stats=compute_stats(visible, facets),
        search_query=search_query,
        filter_type=filter_type,
    )
