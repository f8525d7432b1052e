from collections import defaultdict
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple
from sqlalchemy import and_, func, or_, text
from sqlalchemy.orm import Session, joinedload, selectinload
from .models import Artist, Artwork, ArtworkTag, Image, Series, SeriesArtwork, Tag

def _artwork_relations():
    '''Loader options shared by every view that renders full artworks'''
    return (
        joinedload(Artwork.artist),
        selectinload(Artwork.images),
        selectinload(Artwork.tags),
    )

class ArtworkRepository:
    def __init__(self, session: Session):
        self.session = session

    # Listing (raw SQL)

    def count_filtered(self, sql: str, params: Dict[str, Any]) -> int:
        """Run an assembled COUNT statement"""
        return int(self.session.execute(text(sql), params).scalar() or 0)

    def select_filtered(self, sql: str, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Run an assembled page SELECT, returning flattened artwork + artist rows"""
        result = self.session.execute(text(sql), params)
        return [dict(row) for row in result.mappings()]

    def images_for_artworks(self, artwork_ids: Sequence[int]) -> Dict[int, List[Image]]:
        """Images of several artworks keyed by artwork id, each list in display order"""
        if not artwork_ids:
            return {}
        images = (
            self.session.query(Image)
            .filter(Image.artwork_id.in_(artwork_ids))
            .order_by(Image.sort_order.asc(), Image.id.asc())
            .all()
        )
        grouped: Dict[int, List[Image]] = defaultdict(list)
        for image in images:
            grouped[image.artwork_id].append(image)
        return dict(grouped)

    def tags_for_artworks(self, artwork_ids: Sequence[int]) -> Dict[int, List[Tag]]:
        """Tags of several artworks keyed by artwork id"""
        if not artwork_ids:
            return {}
        rows = (
            self.session.query(ArtworkTag.artwork_id, Tag)
            .join(Tag, ArtworkTag.tag_id == Tag.id)
            .filter(ArtworkTag.artwork_id.in_(artwork_ids))
            .order_by(ArtworkTag.artwork_id, Tag.name)
            .all()
        )
        grouped: Dict[int, List[Tag]] = defaultdict(list)
        for artwork_id, tag in rows:
            grouped[artwork_id].append(tag)
        return dict(grouped)

    # ORM loads

    def get_artwork(self, artwork_id: int) -> Optional[Artwork]:
        """Artwork with artist, images, tags and its series ordering"""
        return (
            self.session.query(Artwork)
            .options(
                *_artwork_relations(),
                selectinload(Artwork.series)
                .selectinload(Series.series_artworks)
                .joinedload(SeriesArtwork.artwork),
            )
            .filter(Artwork.id == artwork_id)
            .first()
        )

    def get_many(self, artwork_ids: Sequence[int]) -> List[Artwork]:
        """Artworks by id; the database decides the order"""
        if not artwork_ids:
            return []
        return (
            self.session.query(Artwork)
            .options(*_artwork_relations())
            .filter(Artwork.id.in_(artwork_ids))
            .all()
        )

    def recent(self, offset: int, limit: int) -> List[Artwork]:
        return (
            self.session.query(Artwork)
            .options(*_artwork_relations())
            .order_by(Artwork.source_date.desc(), Artwork.id.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )

    def count(self) -> int:
        return self.session.query(func.count(Artwork.id)).scalar() or 0

    def random_ids(self, limit: int) -> List[int]:
        rows = self.session.query(Artwork.id).order_by(func.random()).limit(limit).all()
        return [row[0] for row in rows]

    def neighbors(self, artist_id: int, current: Artwork, limit: int, newer: bool) -> List[Artwork]:
        """
        Artworks of the same artist next to ``current`` in (source_date, id) order.

        Newer items come back closest first (ascending), older ones closest
        first (descending).
        """
        base = self.session.query(Artwork).options(*_artwork_relations()).filter(
            Artwork.artist_id == artist_id
        )
        current_date: datetime = current.source_date
        if newer:
            base = base.filter(or_(
                Artwork.source_date > current_date,
                and_(Artwork.source_date == current_date, Artwork.id > current.id),
            )).order_by(Artwork.source_date.asc(), Artwork.id.asc())
        else:
            base = base.filter(or_(
                Artwork.source_date < current_date,
                and_(Artwork.source_date == current_date, Artwork.id < current.id),
            )).order_by(Artwork.source_date.desc(), Artwork.id.desc())
        return base.limit(limit).all()

    # Maintenance

    def refresh_counters(self) -> None:
        """Recompute artworks.image_count and tags.artwork_count from the join tables"""
        self.session.execute(text(
            "UPDATE artworks SET image_count = "
            "(SELECT COUNT(*) FROM images WHERE images.artwork_id = artworks.id)"
        ))
        self.session.execute(text(
            "UPDATE tags SET artwork_count = "
            "(SELECT COUNT(*) FROM artwork_tags WHERE artwork_tags.tag_id = tags.id)"
        ))
        self.session.commit()

class ArtistRepository:
    def __init__(self, session: Session):
        self.session = session

    @staticmethod
    def _search_filter(search: str):
        like = f"%{search}%"
        return or_(Artist.name.ilike(like), Artist.username.ilike(like))

    def list_with_counts(self, search: str, order: str, offset: int, limit: int) -> Tuple[List[Tuple[Artist, int]], int]:
        """
        Page of artists with their artwork counts, plus the filtered total.

        Args:
            search: Case-insensitive substring on name or username, "" for all
            order: One of name_asc, name_desc, artworks_desc, artworks_asc
        """
        artworks_count = func.count(Artwork.id).label('artworks_count')
        query = (
            self.session.query(Artist, artworks_count)
            .outerjoin(Artwork, Artwork.artist_id == Artist.id)
            .group_by(Artist.id)
        )
        total_query = self.session.query(func.count(Artist.id))
        if search:
            query = query.filter(self._search_filter(search))
            total_query = total_query.filter(self._search_filter(search))

        ordering = {
            'name_desc': (Artist.name.desc(), Artist.id.desc()),
            'artworks_desc': (artworks_count.desc(), Artist.id.asc()),
            'artworks_asc': (artworks_count.asc(), Artist.id.asc()),
        }.get(order, (Artist.name.asc(), Artist.id.asc()))

        rows = query.order_by(*ordering).offset(offset).limit(limit).all()
        total = total_query.scalar() or 0
        return [(artist, count) for artist, count in rows], total

    def get_with_count(self, artist_id: int) -> Optional[Tuple[Artist, int]]:
        row = (
            self.session.query(Artist, func.count(Artwork.id))
            .outerjoin(Artwork, Artwork.artist_id == Artist.id)
            .filter(Artist.id == artist_id)
            .group_by(Artist.id)
            .first()
        )
        return (row[0], row[1]) if row else None

    def top_by_artworks(self, limit: int) -> List[Tuple[int, str, int]]:
        artworks_count = func.count(Artwork.id)
        rows = (
            self.session.query(Artist.id, Artist.name, artworks_count)
            .join(Artwork, Artwork.artist_id == Artist.id)
            .group_by(Artist.id, Artist.name)
            .order_by(artworks_count.desc(), Artist.id.asc())
            .limit(limit)
            .all()
        )
        return [(artist_id, name, count) for artist_id, name, count in rows]

class TagRepository:
    def __init__(self, session: Session):
        self.session = session

    def popular(self, limit: int, min_count: int = 1) -> List[Tag]:
        return (
            self.session.query(Tag)
            .filter(Tag.artwork_count >= min_count)
            .order_by(Tag.artwork_count.desc(), Tag.name.asc())
            .limit(limit)
            .all()
        )

    def search(self, term: str, limit: int) -> List[Tag]:
        like = f"%{term}%"
        return (
            self.session.query(Tag)
            .filter(or_(Tag.name.ilike(like), Tag.name_zh.ilike(like)))
            .order_by(Tag.artwork_count.desc(), Tag.name.asc())
            .limit(limit)
            .all()
        )

    def get(self, tag_id: int) -> Optional[Tag]:
        return self.session.get(Tag, tag_id)

class SeriesRepository:
    def __init__(self, session: Session):
        self.session = session

    def list_with_counts(self, title_filter: str, offset: int, limit: int) -> Tuple[List[Tuple[Series, int]], int]:
        artwork_count = func.count(SeriesArtwork.artwork_id).label('artwork_count')
        query = (
            self.session.query(Series, artwork_count)
            .outerjoin(SeriesArtwork, SeriesArtwork.series_id == Series.id)
            .group_by(Series.id)
        )
        total_query = self.session.query(func.count(Series.id))
        if title_filter:
            condition = Series.title.ilike(f"%{title_filter}%")
            query = query.filter(condition)
            total_query = total_query.filter(condition)

        rows = query.order_by(Series.updated_at.desc(), Series.id.desc()).offset(offset).limit(limit).all()
        return [(series, count) for series, count in rows], total_query.scalar() or 0

    def first_artworks(self, series_ids: Sequence[int]) -> Dict[int, Artwork]:
        """Artwork at the head of each series order, with its images, keyed by series id"""
        if not series_ids:
            return {}

        head = (
            self.session.query(
                SeriesArtwork.series_id.label('series_id'),
                func.min(SeriesArtwork.sort_order).label('sort_order'),
            )
            .filter(SeriesArtwork.series_id.in_(series_ids))
            .group_by(SeriesArtwork.series_id)
            .subquery()
        )
        rows = (
            self.session.query(SeriesArtwork.series_id, Artwork)
            .join(Artwork, Artwork.id == SeriesArtwork.artwork_id)
            .join(head, and_(
                head.c.series_id == SeriesArtwork.series_id,
                head.c.sort_order == SeriesArtwork.sort_order,
            ))
            .options(selectinload(Artwork.images))
            .order_by(SeriesArtwork.series_id, Artwork.id)
            .all()
        )

        first: Dict[int, Artwork] = {}
        for series_id, artwork in rows:
            # ties on sort_order go to the lowest artwork id
            first.setdefault(series_id, artwork)
        return first

    def get_with_artworks(self, series_id: int) -> Optional[Series]:
        return (
            self.session.query(Series)
            .options(
                selectinload(Series.series_artworks)
                .joinedload(SeriesArtwork.artwork)
                .options(*_artwork_relations())
            )
            .filter(Series.id == series_id)
            .first()
        )
