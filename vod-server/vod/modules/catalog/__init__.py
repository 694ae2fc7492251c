"""Video catalog exports."""

from .exceptions import AssetNotFoundError, CatalogError, InvalidVariantError, VariantConflictError
from .models import (
    QUALITY_ORDER,
    QUALITY_SPECS,
    Asset,
    AssetCreateInput,
    CatalogPage,
    CategoryStat,
    SearchResult,
    Suggestion,
    Variant,
    VariantCreateInput,
    VideoFilter,
    quality_rank,
    sort_variants,
)
from .resolver import CatalogResolver
from .service import CatalogService

__all__ = [
    "QUALITY_ORDER",
    "QUALITY_SPECS",
    "Asset",
    "AssetCreateInput",
    "AssetNotFoundError",
    "CatalogError",
    "CatalogPage",
    "CatalogResolver",
    "CatalogService",
    "CategoryStat",
    "InvalidVariantError",
    "SearchResult",
    "Suggestion",
    "Variant",
    "VariantConflictError",
    "VariantCreateInput",
    "VideoFilter",
    "quality_rank",
    "sort_variants",
]
