from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from ..config import settings
from ..schemas import (
    ArtistResponse, ArtistsPage, ArtworkDetail, ArtworksPage, ArtworksQuery, ArtworkSummary,
    GalleryStats, SeriesDetail, SeriesPage, TagResponse,
)
from ..services.artist_service import ArtistService
from ..services.artwork_service import ArtworkService
from ..services.series_service import SeriesService
from ..services.stats_service import StatsService
from ..services.tag_service import TagService
from .dependencies import (
    get_artist_service, get_artwork_service, get_series_service, get_stats_service, get_tag_service,
)

router = APIRouter()


def _not_found(kind: str, item_id: int) -> HTTPException:
    return HTTPException(status_code=404, detail=f"{kind} {item_id} not found")


def _capped(page_size: int) -> int:
    # settings read per request, not at import
    return min(page_size, settings.max_page_size)

# ==========================================
# Artworks
# ==========================================

@router.get("/artworks", response_model=ArtworksPage)
def list_artworks(
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, ge=1, description="Defaults to DEFAULT_PAGE_SIZE, capped at MAX_PAGE_SIZE"),
    tags: Optional[str] = Query(None, description="Comma separated tag names"),
    search: str = Query(""),
    artist_id: Optional[int] = Query(None),
    artist_name: Optional[str] = Query(None),
    tag_id: Optional[int] = Query(None),
    external_id: Optional[str] = Query(None),
    exact_match: bool = Query(False),
    media_type: str = Query("all", description="all, image or video"),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    media_count_min: Optional[int] = Query(None, ge=0),
    media_count_max: Optional[int] = Query(None, ge=0),
    sort_by: Optional[str] = Query(None, description="Unknown values sort newest first"),
    service: ArtworkService = Depends(get_artwork_service),
):
    query = ArtworksQuery(
        page=page,
        page_size=page_size,
        tags=tags,
        search=search,
        artist_id=artist_id,
        artist_name=artist_name,
        tag_id=tag_id,
        external_id=external_id,
        exact_match=exact_match,
        media_type=media_type,
        start_date=start_date,
        end_date=end_date,
        media_count_min=media_count_min,
        media_count_max=media_count_max,
        sort_by=sort_by,
    )
    return service.get_artworks_list(query)


@router.get("/artworks/recent", response_model=ArtworksPage)
def recent_artworks(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1),
    service: ArtworkService = Depends(get_artwork_service),
):
    return service.get_recent_artworks(page=page, page_size=_capped(page_size))


@router.get("/artworks/recommendations", response_model=ArtworksPage)
def recommended_artworks(
    page_size: int = Query(10, ge=1),
    cursor: Optional[int] = Query(None, ge=1),
    service: ArtworkService = Depends(get_artwork_service),
):
    return service.get_recommended_artworks(page_size=_capped(page_size), cursor=cursor)


@router.get("/artworks/{artwork_id}", response_model=ArtworkDetail)
def get_artwork(artwork_id: int, service: ArtworkService = Depends(get_artwork_service)):
    artwork = service.get_artwork_by_id(artwork_id)
    if artwork is None:
        raise _not_found("Artwork", artwork_id)
    return artwork


@router.get("/artworks/{artwork_id}/neighbors", response_model=List[ArtworkSummary])
def neighboring_artworks(
    artwork_id: int,
    artist_id: int = Query(...),
    limit: int = Query(5, ge=1, le=50),
    service: ArtworkService = Depends(get_artwork_service),
):
    return service.get_neighboring_artworks(artist_id=artist_id, artwork_id=artwork_id, limit=limit)

# ==========================================
# Artists
# ==========================================

@router.get("/artists", response_model=ArtistsPage)
def list_artists(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1),
    search: str = Query(""),
    sort_by: str = Query("name_asc"),
    service: ArtistService = Depends(get_artist_service),
):
    return service.get_artists(page=page, page_size=page_size, search=search, sort_by=sort_by)


@router.get("/artists/recent", response_model=ArtistsPage)
def recent_artists(
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
    service: ArtistService = Depends(get_artist_service),
):
    return service.get_recent_artists(page=page, page_size=page_size)


@router.get("/artists/{artist_id}", response_model=ArtistResponse)
def get_artist(artist_id: int, service: ArtistService = Depends(get_artist_service)):
    artist = service.get_artist_by_id(artist_id)
    if artist is None:
        raise _not_found("Artist", artist_id)
    return artist

# ==========================================
# Tags
# ==========================================

@router.get("/tags/popular", response_model=List[TagResponse])
def popular_tags(
    limit: int = Query(50, ge=1),
    min_count: int = Query(1, ge=1),
    service: TagService = Depends(get_tag_service),
):
    return service.get_popular_tags(limit=limit, min_count=min_count)


@router.get("/tags/search", response_model=List[TagResponse])
def search_tags(
    q: str = Query(..., min_length=1),
    limit: int = Query(20, ge=1, le=100),
    service: TagService = Depends(get_tag_service),
):
    return service.search_tags(q, limit=limit)


@router.get("/tags/{tag_id}", response_model=TagResponse)
def get_tag(tag_id: int, service: TagService = Depends(get_tag_service)):
    tag = service.get_tag_by_id(tag_id)
    if tag is None:
        raise _not_found("Tag", tag_id)
    return tag

# ==========================================
# Series
# ==========================================

@router.get("/series", response_model=SeriesPage)
def list_series(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    query: str = Query(""),
    service: SeriesService = Depends(get_series_service),
):
    return service.get_series_list(page=page, page_size=page_size, query=query)


@router.get("/series/{series_id}", response_model=SeriesDetail)
def get_series(series_id: int, service: SeriesService = Depends(get_series_service)):
    series = service.get_series_detail(series_id)
    if series is None:
        raise _not_found("Series", series_id)
    return series

# ==========================================
# Misc
# ==========================================

@router.get("/stats", response_model=GalleryStats)
def gallery_stats(service: StatsService = Depends(get_stats_service)):
    return service.get_stats()


@router.get("/health")
def health():
    return {"status": "ok"}
