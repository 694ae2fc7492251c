"""Catalog search, suggestions and discovery."""
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query

from vod.interfaces.http.deps import get_catalog_service
from vod.interfaces.http.presenters import pagination, video_response
from vod.modules.catalog import CatalogService
from vod.schemas import (
    CategoriesResponse,
    CategoryCount,
    CategoryInfo,
    SearchFilters,
    SearchMeta,
    SearchResponse,
    SuggestionItem,
    SuggestionsResponse,
    TrendingResponse,
)

router = APIRouter()


@router.get("", response_model=SearchResponse, summary="Search active videos")
async def search_videos(
    query: Optional[str] = None,
    category: Optional[str] = None,
    sort_by: Literal["relevance", "date", "views", "title"] = Query("relevance", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("desc", alias="sortOrder"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    min_views: Optional[int] = Query(None, alias="minViews", ge=0),
    max_views: Optional[int] = Query(None, alias="maxViews", ge=0),
    min_duration: Optional[float] = Query(None, alias="minDuration", ge=0),
    max_duration: Optional[float] = Query(None, alias="maxDuration", ge=0),
    catalog: CatalogService = Depends(get_catalog_service),
) -> SearchResponse:
    result = await catalog.search(
        query=query,
        category=category,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
        min_views=min_views,
        max_views=max_views,
        min_duration=min_duration,
        max_duration=max_duration,
    )
    return SearchResponse(
        videos=[video_response(asset) for asset in result.page.items],
        pagination=pagination(result.page),
        meta=SearchMeta(
            query=query or "",
            category=category or "all",
            sort_by=sort_by,
            sort_order=sort_order,
            filters=SearchFilters(
                min_views=min_views,
                max_views=max_views,
                min_duration=min_duration,
                max_duration=max_duration,
            ),
        ),
        suggestions=result.suggestions,
        related_categories=[CategoryCount(name=stat.name, count=stat.count) for stat in result.related_categories],
    )


@router.get("/suggestions", response_model=SuggestionsResponse, summary="Autocomplete titles and categories")
async def search_suggestions(
    query: Optional[str] = None,
    catalog: CatalogService = Depends(get_catalog_service),
) -> SuggestionsResponse:
    suggestions = await catalog.suggestions(query)
    return SuggestionsResponse(
        suggestions=[SuggestionItem(type=item.type, text=item.text) for item in suggestions]
    )


@router.get("/trending", response_model=TrendingResponse, summary="Most viewed videos")
async def trending_videos(
    limit: int = Query(10, ge=1, le=50),
    catalog: CatalogService = Depends(get_catalog_service),
) -> TrendingResponse:
    videos = await catalog.trending(limit)
    return TrendingResponse(videos=[video_response(asset) for asset in videos])


@router.get("/categories", response_model=CategoriesResponse, summary="Categories with counts")
async def list_categories(catalog: CatalogService = Depends(get_catalog_service)) -> CategoriesResponse:
    stats = await catalog.categories()
    return CategoriesResponse(
        categories=[CategoryInfo(name=stat.name, count=stat.count, total_views=stat.total_views) for stat in stats]
    )
