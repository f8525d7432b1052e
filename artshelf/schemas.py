"""
Query models and response DTOs shared by the services and the HTTP layer.

Query models do the upstream validation: anything reaching a service has
already been clamped, trimmed and mapped onto an allow-list.
"""
from datetime import date, datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .config import settings
from .media import MediaType

class SortOption(str, Enum):
    TITLE_ASC = "title_asc"
    TITLE_DESC = "title_desc"
    ARTIST_ASC = "artist_asc"
    ARTIST_DESC = "artist_desc"
    IMAGES_ASC = "images_asc"
    IMAGES_DESC = "images_desc"
    SOURCE_DATE_ASC = "source_date_asc"
    SOURCE_DATE_DESC = "source_date_desc"

DEFAULT_SORT = SortOption.SOURCE_DATE_DESC

class MediaTypeFilter(str, Enum):
    ALL = "all"
    IMAGE = "image"
    VIDEO = "video"

class ArtistSortOption(str, Enum):
    NAME_ASC = "name_asc"
    NAME_DESC = "name_desc"
    ARTWORKS_DESC = "artworks_desc"
    ARTWORKS_ASC = "artworks_asc"


def get_safe_sort_option(sort_by: Any) -> SortOption:
    '''Map a raw sort value onto the allow-list, falling back to newest first'''
    if isinstance(sort_by, SortOption):
        return sort_by
    try:
        return SortOption(sort_by)
    except ValueError:
        return DEFAULT_SORT


def split_csv(value: Any) -> List[str]:
    """Accept "a,b", ["a,b", "c"] or None and return the non-empty names"""
    if value is None:
        return []
    parts = [value] if isinstance(value, str) else list(value)
    names = []
    for part in parts:
        names.extend(name.strip() for name in str(part).split(','))
    return [name for name in names if name]

# ==========================================
# Query models
# ==========================================

class ArtworksQuery(BaseModel):
    """Filters, paging and sorting for the artwork listing"""
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default_factory=lambda: settings.default_page_size, ge=1, validate_default=True)
    tags: List[str] = Field(default_factory=list)
    search: str = ""
    artist_id: Optional[int] = None
    artist_name: Optional[str] = None
    tag_id: Optional[int] = None
    external_id: Optional[str] = None
    exact_match: bool = False
    media_type: MediaTypeFilter = MediaTypeFilter.ALL
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    media_count_min: Optional[int] = Field(default=None, ge=0)
    media_count_max: Optional[int] = Field(default=None, ge=0)
    sort_by: SortOption = DEFAULT_SORT

    @field_validator('page_size', mode='before')
    @classmethod
    def _default_page_size(cls, value):
        return settings.default_page_size if value is None else value

    @field_validator('page_size')
    @classmethod
    def _cap_page_size(cls, value: int) -> int:
        return min(value, settings.max_page_size)

    @field_validator('tags', mode='before')
    @classmethod
    def _split_tags(cls, value):
        return split_csv(value)

    @field_validator('search', mode='before')
    @classmethod
    def _trim_search(cls, value):
        return (value or '').strip()

    @field_validator('artist_name', 'external_id', mode='before')
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str):
            value = value.strip()
        return value or None

    @field_validator('media_type', mode='before')
    @classmethod
    def _known_media_type(cls, value):
        try:
            return MediaTypeFilter(value)
        except ValueError:
            return MediaTypeFilter.ALL

    @field_validator('sort_by', mode='before')
    @classmethod
    def _safe_sort(cls, value):
        return get_safe_sort_option(value)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

class ArtistsQuery(BaseModel):
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)
    search: str = ""
    sort_by: ArtistSortOption = ArtistSortOption.NAME_ASC

# ==========================================
# Response DTOs
# ==========================================

class ArtworkImage(BaseModel):
    """One media file of an artwork; ``raw`` holds a merged APNG preview"""
    model_config = ConfigDict(from_attributes=True)

    id: int
    path: str
    width: Optional[int] = None
    height: Optional[int] = None
    size: Optional[int] = None
    sort_order: int = 0
    artwork_id: Optional[int] = None
    media_type: MediaType = MediaType.IMAGE
    raw: Optional['ArtworkImage'] = None

class ArtistResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    username: Optional[str] = None
    user_id: Optional[str] = None
    bio: Optional[str] = None
    avatar: Optional[str] = None
    artworks_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class TagResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    name_zh: Optional[str] = None
    artwork_count: int = 0

class ArtworkSummary(BaseModel):
    """Artwork as shown in grids and lists"""
    id: int
    title: str
    description: Optional[str] = None
    description_length: int = 0
    external_id: Optional[str] = None
    source_url: Optional[str] = None
    source_date: Optional[str] = None  # "YYYY-MM-DD HH:MM:SS"
    series_id: Optional[int] = None
    artist: Optional[ArtistResponse] = None
    images: List[ArtworkImage] = Field(default_factory=list)
    first_image_path: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    image_count: int = 0
    video_count: int = 0
    is_video: bool = False
    total_media_size: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class SeriesNavItem(BaseModel):
    id: int
    title: str

class SeriesNav(BaseModel):
    id: int
    title: str
    order: int
    prev: Optional[SeriesNavItem] = None
    next: Optional[SeriesNavItem] = None

class ArtworkDetail(ArtworkSummary):
    """Artwork page: full tag objects and series navigation"""
    tags: List[TagResponse] = Field(default_factory=list)
    series: Optional[SeriesNav] = None

class ArtworksPage(BaseModel):
    items: List[ArtworkSummary] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 24
    has_more: bool = False
    next_cursor: Optional[int] = None

class ArtistsPage(BaseModel):
    items: List[ArtistResponse] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 20

class SeriesArtworkItem(ArtworkSummary):
    series_order: int = 0

class SeriesSummary(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    cover_image_url: Optional[str] = None
    artwork_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class SeriesPage(BaseModel):
    items: List[SeriesSummary] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 20

class SeriesDetail(SeriesSummary):
    artworks: List[SeriesArtworkItem] = Field(default_factory=list)

class RankedItem(BaseModel):
    id: int
    name: str
    count: int

class MediaBreakdown(BaseModel):
    media_type: str
    files: int
    total_size: int
    display_size: str

class GalleryStats(BaseModel):
    artworks: int = 0
    artists: int = 0
    images: int = 0
    tags: int = 0
    top_artists: List[RankedItem] = Field(default_factory=list)
    top_tags: List[RankedItem] = Field(default_factory=list)
    media: List[MediaBreakdown] = Field(default_factory=list)
