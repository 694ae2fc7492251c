"""Domain models for the video catalog."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterable, Literal, Optional, Sequence

QUALITY_ORDER: tuple[str, ...] = ("240p", "480p", "720p", "1080p")

# Nominal encoding parameters used when an upload does not state its own.
QUALITY_SPECS: dict[str, tuple[int, str]] = {
    "240p": (400_000, "426x240"),
    "480p": (1_000_000, "854x480"),
    "720p": (2_500_000, "1280x720"),
    "1080p": (5_000_000, "1920x1080"),
}


def quality_rank(quality: str) -> int:
    """Position in the fixed quality order; unrecognised tags sort last."""
    try:
        return QUALITY_ORDER.index(quality)
    except ValueError:
        return len(QUALITY_ORDER)


def sort_variants(variants: Iterable["Variant"]) -> list["Variant"]:
    return sorted(variants, key=lambda variant: quality_rank(variant.quality))


@dataclass(slots=True)
class Variant:
    quality: str
    storage_key: str
    bitrate: int
    resolution: str


@dataclass(slots=True)
class Asset:
    id: str
    title: str
    duration: float
    description: str = ""
    thumbnail: str = ""
    category: str = "general"
    views: int = 0
    is_active: bool = True
    upload_date: Optional[datetime] = None
    created_at: Optional[datetime] = None
    variants: list[Variant] = field(default_factory=list)

    def variant_for_key(self, storage_key: str) -> Variant | None:
        for variant in self.variants:
            if variant.storage_key == storage_key:
                return variant
        return None

    def has_quality(self, quality: str) -> bool:
        return any(variant.quality == quality for variant in self.variants)


@dataclass(slots=True)
class AssetCreateInput:
    title: str
    duration: float
    description: str = ""
    thumbnail: str = ""
    category: str = "general"


@dataclass(slots=True)
class VariantCreateInput:
    quality: str
    storage_key: str
    bitrate: int
    resolution: str


SortField = Literal["relevance", "date", "views", "title"]
SortOrder = Literal["asc", "desc"]


@dataclass(slots=True)
class VideoFilter:
    text: Optional[str] = None
    category: Optional[str] = None
    category_pattern: Optional[str] = None
    min_views: Optional[int] = None
    max_views: Optional[int] = None
    min_duration: Optional[float] = None
    max_duration: Optional[float] = None


@dataclass(slots=True)
class CatalogPage:
    items: Sequence[Asset]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def has_more(self) -> bool:
        return (self.page - 1) * self.limit + len(self.items) < self.total


@dataclass(slots=True)
class CategoryStat:
    name: str
    count: int
    total_views: int = 0


@dataclass(slots=True)
class SearchResult:
    page: CatalogPage
    suggestions: list[str]
    related_categories: list[CategoryStat]


@dataclass(slots=True)
class Suggestion:
    type: Literal["video", "category"]
    text: str
