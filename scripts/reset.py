import argparse

from sqlalchemy import func

from artshelf.config import settings
from artshelf.database import Artist, Artwork, ArtworkRepository, Database, Image, Tag
from artshelf.utils import get_project_root, setup_logging


def reset_database(db: Database, logger) -> None:
    """Drop every table and recreate the schema"""
    try:
        logger.progress("Dropping all database tables")
        db.drop_tables()
        logger.progress("Recreating database schema")
        db.create_tables()
    except Exception as e:
        logger.error(f"Database error: {str(e)}")
        raise

def refresh_counters(db: Database, logger) -> None:
    """Recompute stored image and tag counters without touching rows"""
    with db.get_session() as session:
        ArtworkRepository(session).refresh_counters()
    logger.progress("Refreshed artworks.image_count and tags.artwork_count")

def verify(db: Database, logger) -> None:
    """Report row counts after the operation"""
    with db.get_session() as session:
        for model in (Artist, Artwork, Image, Tag):
            count = session.query(func.count(model.id)).scalar()
            logger.progress(f"{model.__tablename__}: {count} rows")

def main():
    parser = argparse.ArgumentParser(description='Reset the gallery database')
    parser.add_argument(
        '--counters-only',
        action='store_true',
        help='Only recompute stored counters, keep all rows'
    )
    parser.add_argument(
        '--force',
        action='store_true',
        help='Skip confirmation prompt'
    )
    args = parser.parse_args()

    # Initialize paths
    project_root = get_project_root()
    settings.initialize_paths(project_root)

    logger = setup_logging(settings.logs_dir, settings.log_level)
    db = Database(settings.get_database_url(), echo=settings.sql_echo)

    if args.counters_only:
        refresh_counters(db, logger)
        verify(db, logger)
        return

    # Confirmation prompt
    if not args.force:
        confirm = input(
            f"This will delete all data in {db.url}. "
            f"This cannot be undone. Continue? [y/N]: "
        )
        if confirm.lower() != 'y':
            logger.progress("Operation cancelled")
            return

    reset_database(db, logger)
    logger.progress("Successfully reset the database")
    verify(db, logger)

if __name__ == "__main__":
    main()
