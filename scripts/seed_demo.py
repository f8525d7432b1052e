import argparse
from datetime import datetime
from pathlib import Path

from artshelf.config import settings
from artshelf.database import (
    Artist, Artwork, ArtworkRepository, Database, Image, Series, SeriesArtwork, Tag,
)
from artshelf.utils import get_project_root, setup_logging

DEMO_ARTISTS = [
    {'name': 'Hana Mori', 'username': 'hanamori', 'user_id': '1001', 'bio': 'Watercolour landscapes'},
    {'name': 'Leo Brandt', 'username': 'lbrandt', 'user_id': '1002', 'bio': 'Pixel loops and portraits'},
]

# (artist index, title, source date, tags, [(path, size)])
DEMO_ARTWORKS = [
    (0, 'Harbour at Dawn', datetime(2024, 3, 2, 7, 30), ['landscape', 'sea'],
     [('1001/2001/2001_p0.jpg', 812_000), ('1001/2001/2001_p1.jpg', 790_500)]),
    (0, 'Rain Study', datetime(2024, 4, 11, 18, 5), ['landscape', 'animation'],
     [('1001/2002/2002_ugoira.apng', 2_400_000), ('1001/2002/2002_ugoira.webm', 640_000)]),
    (1, 'Self Portrait', datetime(2023, 11, 20, 12, 0), ['portrait'],
     [('1002/3001/3001_p0.png', 1_250_000)]),
    (1, 'Walk Cycle', datetime(2024, 1, 8, 21, 45), ['animation', 'pixel art'],
     [('1002/3002/3002_ugoira.apng', 96_000)]),
]


def seed(db: Database, logger) -> None:
    with db.get_session() as session:
        artists = [Artist(**data) for data in DEMO_ARTISTS]
        session.add_all(artists)

        tags = {}
        artworks = []
        for artist_index, title, source_date, tag_names, files in DEMO_ARTWORKS:
            for name in tag_names:
                tags.setdefault(name, Tag(name=name))
            artwork = Artwork(
                title=title,
                description=f"{title} by {artists[artist_index].name}",
                artist=artists[artist_index],
                source_date=source_date,
                external_id=Path(files[0][0]).parent.name,
                tags=[tags[name] for name in tag_names],
                images=[
                    Image(path=path, size=size, sort_order=order)
                    for order, (path, size) in enumerate(files)
                ],
            )
            artwork.description_length = len(artwork.description)
            artworks.append(artwork)
        session.add_all(artworks)

        series = Series(title='Weather', description='Studies of changing skies')
        session.add(series)
        session.flush()
        for order, artwork in enumerate(artworks[:2]):
            artwork.series = series
            session.add(SeriesArtwork(series=series, artwork=artwork, sort_order=order))

        session.commit()
        logger.progress(f"Inserted {len(artists)} artists, {len(artworks)} artworks and {len(tags)} tags")

        ArtworkRepository(session).refresh_counters()

def main():
    parser = argparse.ArgumentParser(description='Insert demo rows for local browsing')
    parser.add_argument('--reset', action='store_true', help='Drop and recreate tables first')
    args = parser.parse_args()

    settings.initialize_paths(get_project_root())
    logger = setup_logging(settings.logs_dir, settings.log_level)

    db = Database(settings.get_database_url(), echo=settings.sql_echo)
    if args.reset:
        db.drop_tables()
    db.create_tables()

    seed(db, logger)

if __name__ == "__main__":
    main()
