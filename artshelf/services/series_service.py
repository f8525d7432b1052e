from typing import List, Optional

from ..database import Database
from ..database.repository import SeriesRepository
from ..schemas import SeriesArtworkItem, SeriesDetail, SeriesPage, SeriesSummary
from .transform import artwork_to_row, transform_images, transform_single_artwork


def _cover_from_artwork(artwork) -> Optional[str]:
    '''First visible media path of an artwork, after APNG previews are folded away'''
    if artwork is None:
        return None
    media = transform_images(artwork.images)
    return media.images[0].path if media.images else None


class SeriesService:
    def __init__(self, db: Database):
        self.db = db

    def get_series_list(self, page: int = 1, page_size: int = 20, query: str = '') -> SeriesPage:
        """
        Series ordered by last update.

        A series without an explicit cover borrows the first media file of its
        first artwork.
        """
        if page < 1:
            raise ValueError(f"Page must be at least 1, got {page}")
        offset = (page - 1) * page_size

        with self.db.get_session() as session:
            repo = SeriesRepository(session)
            rows, total = repo.list_with_counts((query or '').strip(), offset, page_size)
            heads = repo.first_artworks([series.id for series, _ in rows if not series.cover_image_url])

            items: List[SeriesSummary] = []
            for series, artwork_count in rows:
                cover = series.cover_image_url or _cover_from_artwork(heads.get(series.id))
                items.append(SeriesSummary(
                    id=series.id,
                    title=series.title,
                    description=series.description,
                    cover_image_url=cover,
                    artwork_count=artwork_count,
                    created_at=series.created_at,
                    updated_at=series.updated_at,
                ))

        return SeriesPage(items=items, total=total, page=page, page_size=page_size)

    def get_series_detail(self, series_id: int) -> Optional[SeriesDetail]:
        with self.db.get_session() as session:
            series = SeriesRepository(session).get_with_artworks(series_id)
            if series is None:
                return None

            artworks = []
            for entry in series.series_artworks:
                artwork = entry.artwork
                summary = transform_single_artwork(
                    artwork_to_row(artwork),
                    artwork.images,
                    [tag.name for tag in artwork.tags],
                    db_image_count=len(artwork.images),
                )
                artworks.append(SeriesArtworkItem(**summary.model_dump(), series_order=entry.sort_order))

            head = series.series_artworks[0].artwork if series.series_artworks else None
            cover = series.cover_image_url or _cover_from_artwork(head)

            return SeriesDetail(
                id=series.id,
                title=series.title,
                description=series.description,
                cover_image_url=cover,
                artwork_count=len(artworks),
                created_at=series.created_at,
                updated_at=series.updated_at,
                artworks=artworks,
            )
