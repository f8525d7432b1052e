from fastapi import Depends, Request

from ..database import Database
from ..services.artist_service import ArtistService
from ..services.artwork_service import ArtworkService
from ..services.series_service import SeriesService
from ..services.stats_service import StatsService
from ..services.tag_service import TagService


def get_db(request: Request) -> Database:
    '''Database bound to the running app by create_app'''
    return request.app.state.db


def get_artwork_service(db: Database = Depends(get_db)) -> ArtworkService:
    return ArtworkService(db)


def get_artist_service(db: Database = Depends(get_db)) -> ArtistService:
    return ArtistService(db)


def get_tag_service(db: Database = Depends(get_db)) -> TagService:
    return TagService(db)


def get_series_service(db: Database = Depends(get_db)) -> SeriesService:
    return SeriesService(db)


def get_stats_service(db: Database = Depends(get_db)) -> StatsService:
    return StatsService(db)
