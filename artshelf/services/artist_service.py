import logging
from typing import Any, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError

from ..database import Database
from ..database.repository import ArtistRepository
from ..schemas import ArtistResponse, ArtistSortOption, ArtistsPage, ArtistsQuery

logger = logging.getLogger("artshelf.services.artists")

MAX_ARTISTS_PAGE_SIZE = 100


def validate_artists_query(raw: Mapping[str, Any]) -> ArtistsQuery:
    """
    Coerce loosely typed listing parameters into an ArtistsQuery.

    Out of range paging is clamped rather than rejected and an unknown sort key
    falls back to name order, so a hand-edited URL still renders a page.
    """
    def as_int(value, default: int) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    page = max(1, as_int(raw.get('page'), 1))
    page_size = min(MAX_ARTISTS_PAGE_SIZE, max(1, as_int(raw.get('page_size'), 20)))
    search = str(raw.get('search') or '').strip()
    try:
        sort_by = ArtistSortOption(raw.get('sort_by'))
    except ValueError:
        sort_by = ArtistSortOption.NAME_ASC

    return ArtistsQuery(page=page, page_size=page_size, search=search, sort_by=sort_by)


def _artist_dto(artist, artworks_count: int) -> ArtistResponse:
    dto = ArtistResponse.model_validate(artist)
    dto.artworks_count = artworks_count
    return dto


class ArtistService:
    def __init__(self, db: Database):
        self.db = db

    def get_artists(
        self,
        page: int = 1,
        page_size: int = 20,
        search: str = '',
        sort_by: str = ArtistSortOption.NAME_ASC.value,
    ) -> ArtistsPage:
        """
        Page of artists with their artwork counts.

        A database failure is logged and degrades to an empty page so the
        artist index still renders.
        """
        query = validate_artists_query({
            'page': page, 'page_size': page_size, 'search': search, 'sort_by': sort_by
        })
        offset = (query.page - 1) * query.page_size
        try:
            with self.db.get_session() as session:
                rows, total = ArtistRepository(session).list_with_counts(
                    query.search, query.sort_by.value, offset, query.page_size
                )
                items = [_artist_dto(artist, count) for artist, count in rows]
        except SQLAlchemyError as e:
            logger.error(f"Error fetching artists: {e}")
            return ArtistsPage(items=[], total=0, page=query.page, page_size=query.page_size)

        return ArtistsPage(items=items, total=total, page=query.page, page_size=query.page_size)

    def get_recent_artists(self, page: int = 1, page_size: int = 10) -> ArtistsPage:
        '''Most prolific artists first'''
        return self.get_artists(page=page, page_size=page_size, sort_by=ArtistSortOption.ARTWORKS_DESC.value)

    def get_artist_by_id(self, artist_id: int) -> Optional[ArtistResponse]:
        with self.db.get_session() as session:
            found = ArtistRepository(session).get_with_count(artist_id)
            if found is None:
                return None
            artist, count = found
            return _artist_dto(artist, count)
