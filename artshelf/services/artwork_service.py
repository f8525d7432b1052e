import concurrent.futures
import logging
from typing import Dict, List, Optional, Tuple

from ..config import settings
from ..database import Database
from ..database.models import Artwork, Image, Tag
from ..database.repository import ArtworkRepository
from ..schemas import (
    ArtistResponse, ArtworkDetail, ArtworksPage, ArtworksQuery, ArtworkSummary,
    SeriesNav, SeriesNavItem, TagResponse,
)
from .query_builder import build_artwork_where_clause, build_count_sql, build_select_sql, map_sort_option_to_sql
from .transform import (
    artwork_to_row, coerce_datetime, first_image_dir, format_source_date, transform_images, transform_single_artwork,
)

logger = logging.getLogger("artshelf.services.artworks")


def _summary_from_orm(artwork: Artwork) -> ArtworkSummary:
    return transform_single_artwork(
        artwork_to_row(artwork),
        artwork.images,
        [tag.name for tag in artwork.tags],
        db_image_count=len(artwork.images),
    )


def _series_nav(artwork: Artwork) -> Optional[SeriesNav]:
    """Position of the artwork inside its series, with its prev/next neighbours"""
    if artwork.series is None:
        return None
    entries = artwork.series.series_artworks
    index = next((i for i, entry in enumerate(entries) if entry.artwork_id == artwork.id), None)
    if index is None:
        return None

    def nav_item(position: int) -> Optional[SeriesNavItem]:
        if 0 <= position < len(entries):
            other = entries[position].artwork
            return SeriesNavItem(id=other.id, title=other.title)
        return None

    return SeriesNav(
        id=artwork.series.id,
        title=artwork.series.title,
        order=entries[index].sort_order,
        prev=nav_item(index - 1),
        next=nav_item(index + 1),
    )


class ArtworkService:
    """Read side of the gallery: listing, detail and discovery views"""

    def __init__(self, db: Database, max_workers: Optional[int] = None):
        self.db = db
        self.max_workers = max_workers or settings.related_fetch_workers

    # Listing

    def get_artworks_list(self, query: ArtworksQuery) -> ArtworksPage:
        """
        Filtered, sorted page of artworks.

        COUNT and SELECT share the same leading parameters; images and tags
        for the page are then loaded concurrently by artwork id.
        """
        where = build_artwork_where_clause(query)
        order_by = map_sort_option_to_sql(query.sort_by)
        count_sql, count_params = build_count_sql(where)
        select_sql, select_params = build_select_sql(where, order_by, query.page_size, query.offset)

        logger.query(f"Artwork listing WHERE: {where.sql} ({len(where.params)} params)")

        with self.db.get_session() as session:
            repo = ArtworkRepository(session)
            total = repo.count_filtered(count_sql, count_params)
            rows = repo.select_filtered(select_sql, select_params)

        if not rows:
            return ArtworksPage(items=[], total=total, page=query.page, page_size=query.page_size, has_more=False)

        artwork_ids = [row['id'] for row in rows]
        images_by_artwork, tags_by_artwork = self._fetch_related(artwork_ids)

        items = [
            transform_single_artwork(
                row,
                images_by_artwork.get(row['id'], []),
                [tag.name for tag in tags_by_artwork.get(row['id'], [])],
            )
            for row in rows
        ]
        return ArtworksPage(
            items=items,
            total=total,
            page=query.page,
            page_size=query.page_size,
            has_more=query.offset + len(items) < total,
        )

    def _load_images(self, artwork_ids: List[int]) -> Dict[int, List[Image]]:
        with self.db.get_session() as session:
            return ArtworkRepository(session).images_for_artworks(artwork_ids)

    def _load_tags(self, artwork_ids: List[int]) -> Dict[int, List[Tag]]:
        with self.db.get_session() as session:
            return ArtworkRepository(session).tags_for_artworks(artwork_ids)

    def _fetch_related(self, artwork_ids: List[int]) -> Tuple[Dict[int, List[Image]], Dict[int, List[Tag]]]:
        '''Load images and tags side by side, each worker on its own session'''
        with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            images_future = executor.submit(self._load_images, artwork_ids)
            tags_future = executor.submit(self._load_tags, artwork_ids)
            return images_future.result(), tags_future.result()

    # Detail

    def get_artwork_by_id(self, artwork_id: int) -> Optional[ArtworkDetail]:
        with self.db.get_session() as session:
            artwork = ArtworkRepository(session).get_artwork(artwork_id)
            if artwork is None:
                return None

            media = transform_images(artwork.images)
            artist = None
            if artwork.artist is not None:
                artist = ArtistResponse.model_validate(artwork.artist)
            description = artwork.description

            return ArtworkDetail(
                id=artwork.id,
                title=artwork.title,
                description=description,
                description_length=artwork.description_length or len(description or ''),
                external_id=artwork.external_id,
                source_url=artwork.source_url,
                source_date=format_source_date(artwork.source_date),
                series_id=artwork.series_id,
                artist=artist,
                images=media.images,
                first_image_path=first_image_dir(media.images),
                tags=[TagResponse.model_validate(tag) for tag in artwork.tags],
                image_count=media.image_count,
                video_count=media.video_count,
                is_video=media.has_video,
                total_media_size=media.total_media_size,
                created_at=coerce_datetime(artwork.created_at),
                updated_at=coerce_datetime(artwork.updated_at),
                series=_series_nav(artwork),
            )

    # Discovery

    def get_recent_artworks(self, page: int = 1, page_size: int = 10) -> ArtworksPage:
        if page < 1:
            raise ValueError(f"Page must be at least 1, got {page}")
        offset = (page - 1) * page_size
        with self.db.get_session() as session:
            repo = ArtworkRepository(session)
            artworks = repo.recent(offset, page_size)
            total = repo.count()
            items = [_summary_from_orm(artwork) for artwork in artworks]
        return ArtworksPage(
            items=items,
            total=total,
            page=page,
            page_size=page_size,
            has_more=offset + len(items) < total,
        )

    def get_recommended_artworks(self, page_size: int = 10, cursor: Optional[int] = None) -> ArtworksPage:
        """
        Random selection for infinite scrolling.

        Items keep the random order; ``total`` is the number of items returned
        and ``next_cursor`` always points one page further.
        """
        current_page = cursor or 1
        with self.db.get_session() as session:
            repo = ArtworkRepository(session)
            random_ids = repo.random_ids(page_size)
            if not random_ids:
                return ArtworksPage(items=[], total=0, page=current_page, page_size=page_size)
            by_id = {artwork.id: artwork for artwork in repo.get_many(random_ids)}
            items = [_summary_from_orm(by_id[i]) for i in random_ids if i in by_id]

        return ArtworksPage(
            items=items,
            total=len(items),
            page=current_page,
            page_size=page_size,
            has_more=True,
            next_cursor=current_page + 1,
        )

    def get_neighboring_artworks(self, artist_id: int, artwork_id: int, limit: int = 5) -> List[ArtworkSummary]:
        """
        The artwork surrounded by its artist's neighbours, newest first.

        Returns [newer..., current, older...] with at most ``limit`` on each
        side, or an empty list when the artwork is missing or undated.
        """
        with self.db.get_session() as session:
            repo = ArtworkRepository(session)
            current = repo.get_artwork(artwork_id)
            if current is None or current.source_date is None:
                return []

            newer = repo.neighbors(artist_id, current, limit, newer=True)
            older = repo.neighbors(artist_id, current, limit, newer=False)
            ordered = list(reversed(newer)) + [current] + older
            return [_summary_from_orm(artwork) for artwork in ordered]
